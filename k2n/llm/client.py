"""
Provider dispatch for k2n.

Maps a ProviderConfig to one of the provider variants and runs the call
under a wall-clock deadline.
"""

import threading
from concurrent.futures import Future, TimeoutError as FutureTimeoutError

from ..errors import ConfigError, ProviderTimeoutError
from ..utils import get_logger
from .gemini import GeminiProvider
from .models import PROVIDER_GEMINI, PROVIDER_OPENROUTER, PROVIDERS, ProviderConfig
from .openrouter import OpenRouterProvider

logger = get_logger("client")

Provider = GeminiProvider | OpenRouterProvider

_PROVIDER_TYPES = {
    PROVIDER_OPENROUTER: OpenRouterProvider,
    PROVIDER_GEMINI: GeminiProvider,
}


def create_provider(config: ProviderConfig) -> Provider:
    """
    Build the provider variant for a configuration.

    Raises:
        ConfigError: If the provider kind is unknown or the API key is empty.
    """
    provider_type = _PROVIDER_TYPES.get(config.kind)
    if provider_type is None:
        raise ConfigError(f"unknown AI provider: {config.kind} (supported: {', '.join(PROVIDERS)})")
    if not config.api_key:
        raise ConfigError("AI_API_KEY is required")

    kwargs = {"api_key": config.api_key, "timeout": config.timeout}
    if config.model:
        kwargs["model"] = config.model
    if config.base_url:
        kwargs["base_url"] = config.base_url
    return provider_type(**kwargs)

def _start_call(fn, *args) -> Future:
    """Run fn on a daemon thread and return a Future for its result."""
    future = Future()

    def run():
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = fn(*args)
        except BaseException as e:
            future.set_exception(e)
        else:
            future.set_result(result)

    # Daemon so an abandoned call cannot keep the interpreter alive at exit
    threading.Thread(target=run, name="k2n-llm", daemon=True).start()
    return future


def call_llm(config: ProviderConfig, prompt: str, timeout: float | None = None) -> str:
    """
    Call the configured provider with a prompt.

    The call runs on a daemon thread; if it has not finished when the
    deadline passes the command gives up on it and the process can exit
    without waiting for it. Nothing is retried.

    Args:
        config: Provider settings.
        prompt: The prompt text to send.
        timeout: Deadline in seconds (defaults to config.timeout).

    Returns:
        The response text with any wrapping code fence removed.

    Raises:
        ConfigError: If the configuration is invalid.
        ProviderError: If the provider call fails.
        ProviderTimeoutError: If the deadline passes first.
    """
    provider = create_provider(config)
    deadline = timeout if timeout is not None else config.timeout

    logger.debug("Dispatching to %r with a %ss deadline", provider, deadline)

    future = _start_call(provider.call, prompt)
    try:
        return future.result(timeout=deadline)
    except FutureTimeoutError as e:
        raise ProviderTimeoutError(f"{config.kind} did not respond within {deadline:g}s") from e
