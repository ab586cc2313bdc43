"""
OpenRouter provider (OpenAI-compatible chat completions over HTTP).
"""

from dataclasses import dataclass, field

import requests

from ..errors import ProviderError, ProviderTimeoutError
from ..utils import get_logger
from .models import DEFAULT_BASE_URLS, DEFAULT_MODELS, DEFAULT_TIMEOUT, PROVIDER_OPENROUTER
from .text import strip_code_fences

logger = get_logger("openrouter")


@dataclass(frozen=True)
class OpenRouterProvider:
    api_key: str = field(repr=False)
    model: str = DEFAULT_MODELS[PROVIDER_OPENROUTER]
    base_url: str = DEFAULT_BASE_URLS[PROVIDER_OPENROUTER]
    timeout: float = DEFAULT_TIMEOUT

    def call(self, prompt: str) -> str:
        """
        POST one chat completion request.

        Args:
            prompt: Sent as the single user message.

        Returns:
            choices[0].message.content with code fences stripped.

        Raises:
            ProviderError: On transport errors, API-reported errors or an empty choice list.
        """
        body = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        logger.debug("Calling OpenRouter model %s at %s (%d prompt chars)", self.model, self.base_url, len(prompt))

        try:
            response = requests.post(self.base_url, json=body, headers=headers, timeout=self.timeout)
        except requests.Timeout as e:
            raise ProviderTimeoutError(f"openrouter request timed out after {self.timeout:g}s") from e
        except requests.RequestException as e:
            raise ProviderError(f"openrouter request failed: {e}") from e

        logger.debug("OpenRouter responded with HTTP %s (%d bytes)", response.status_code, len(response.content))

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"openrouter returned a non-JSON response (HTTP {response.status_code})") from e

        if not isinstance(data, dict):
            raise ProviderError(f"openrouter returned an unexpected response (HTTP {response.status_code})")

        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ProviderError(f"openrouter error: {message}")

        if not response.ok:
            raise ProviderError(f"openrouter returned HTTP {response.status_code}")

        choices = data.get("choices") or []
        if not choices:
            raise ProviderError("no choices returned")

        content = (choices[0].get("message") or {}).get("content") or ""
        logger.debug("OpenRouter returned %d characters", len(content))
        return strip_code_fences(content)
