"""
Configuration for the gen command.

Flags, environment variables and defaults are resolved once at startup into
immutable values that are passed to each step.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import ConfigError
from .llm.models import (
    DEFAULT_BASE_URLS,
    DEFAULT_MODELS,
    DEFAULT_PROVIDER,
    DEFAULT_TIMEOUT,
    PROVIDERS,
    ProviderConfig,
)
from .utils import SECRET_MASK, split_and_trim_exts, split_and_trim_paths

ENV_API_KEY = "AI_API_KEY"  # pragma: allowlist secret
ENV_PROVIDER = "AI_PROVIDER"
ENV_MODEL = "AI_MODEL"
ENV_BASE_URL = "AI_BASE_URL"

DEFAULT_EXAMPLE_EXTS = ".yaml,.tf"


def load_environment() -> None:
    """Load a .env file from the working directory, without overriding real env vars."""
    load_dotenv(override=False)


def resolve_setting(flag_value: str | None, env_name: str, default: str, environ=None) -> str:
    """
    Pick a setting: explicit flag, then environment variable, then default.

    Empty strings count as unset at every level.
    """
    environ = os.environ if environ is None else environ
    if flag_value:
        return flag_value
    env_value = environ.get(env_name, "")
    if env_value:
        return env_value
    return default


def resolve_provider_config(
    kind: str | None = None,
    model: str | None = None,
    base_url: str | None = None,
    environ=None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ProviderConfig:
    """
    Resolve provider settings from flags and the environment.

    Args:
        kind: --ai-provider value.
        model: --ai-model value.
        base_url: --ai-base-url value.
        environ: Environment mapping (defaults to os.environ).
        timeout: Deadline for the provider call in seconds.

    Returns:
        A ProviderConfig.

    Raises:
        ConfigError: If AI_API_KEY is missing or the provider kind is unknown.
    """
    environ = os.environ if environ is None else environ

    api_key = environ.get(ENV_API_KEY, "").strip()
    if not api_key:
        raise ConfigError(f"{ENV_API_KEY} is not set in environment")

    provider = resolve_setting(kind, ENV_PROVIDER, DEFAULT_PROVIDER, environ).strip().lower()
    if provider not in PROVIDERS:
        raise ConfigError(f"unknown AI provider: {provider} (supported: {', '.join(PROVIDERS)})")

    return ProviderConfig(
        kind=provider,
        api_key=api_key,
        model=resolve_setting(model, ENV_MODEL, DEFAULT_MODELS[provider], environ),
        base_url=resolve_setting(base_url, ENV_BASE_URL, DEFAULT_BASE_URLS[provider], environ),
        timeout=timeout,
    )


@dataclass(frozen=True)
class GenConfig:
    """Everything the gen command needs, resolved once."""
    provider: ProviderConfig
    examples_dirs: tuple[str, ...] = ()
    example_files: tuple[str, ...] = ()
    example_exts: tuple[str, ...] = (".yaml", ".tf")
    ruleset_env_dir: str = ""
    ruleset_usecase_dir: str = ""
    ruleset_env_files: tuple[str, ...] = ()
    ruleset_usecase_files: tuple[str, ...] = ()
    usecase: str = ""
    instruction: str = ""
    destination: str = ""
    verbose: bool = False
    prompt_to_ai: bool = True
    include_format_rules: bool = True
    echo_files: bool = False
    fail_on_provider_error: bool = False

    def flag_settings(self) -> dict[str, str]:
        """Flag values as display strings, for the settings table."""
        return {
            "EXAMPLES-DIRS": ",".join(self.examples_dirs),
            "EXAMPLE-FILES": ",".join(self.example_files),
            "EXAMPLE-FILE-EXT": ",".join(self.example_exts),
            "RULESET-ENV-DIR": self.ruleset_env_dir,
            "RULESET-USECASE-DIR": self.ruleset_usecase_dir,
            "RULESET-ENV-FILES": ",".join(self.ruleset_env_files),
            "RULESET-USECASE-FILES": ",".join(self.ruleset_usecase_files),
            "USECASE": self.usecase,
            "INSTRUCTION": self.instruction,
            "DESTINATION": self.destination,
            "PROMPT-TO-AI": str(self.prompt_to_ai).lower(),
            "VERBOSE": str(self.verbose).lower(),
        }

    def provider_settings(self) -> dict[str, str]:
        """Provider settings as display strings, with the API key masked."""
        return {
            ENV_API_KEY: SECRET_MASK,
            ENV_PROVIDER: self.provider.kind,
            ENV_MODEL: self.provider.model,
            ENV_BASE_URL: self.provider.base_url,
        }


def build_gen_config(args, environ=None) -> GenConfig:
    """
    Build a GenConfig from parsed gen arguments.

    Args:
        args: argparse namespace from the gen subcommand.
        environ: Environment mapping (defaults to os.environ).

    Raises:
        ConfigError: See resolve_provider_config.
    """
    provider = resolve_provider_config(
        kind=args.ai_provider,
        model=args.ai_model,
        base_url=args.ai_base_url,
        environ=environ,
        timeout=args.timeout,
    )

    return GenConfig(
        provider=provider,
        examples_dirs=tuple(split_and_trim_paths(args.examples_dirs)),
        example_files=tuple(split_and_trim_paths(args.example_files)),
        example_exts=tuple(split_and_trim_exts(args.example_file_ext)),
        ruleset_env_dir=(args.ruleset_env_dir or "").strip(),
        ruleset_usecase_dir=(args.ruleset_usecase_dir or "").strip(),
        ruleset_env_files=tuple(split_and_trim_paths(args.ruleset_env_files)),
        ruleset_usecase_files=tuple(split_and_trim_paths(args.ruleset_usecase_files)),
        usecase=args.usecase or "",
        instruction=args.instruction or "",
        destination=args.destination or "",
        verbose=args.verbose,
        prompt_to_ai=args.prompt_to_ai,
        include_format_rules=not args.no_format_rules,
        echo_files=args.echo_files,
        fail_on_provider_error=args.fail_on_provider_error,
    )
