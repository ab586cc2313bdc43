"""
Provider and model configuration.
"""

from dataclasses import dataclass, field

PROVIDER_OPENROUTER = "openrouter"
PROVIDER_GEMINI = "gemini"

PROVIDERS = (PROVIDER_OPENROUTER, PROVIDER_GEMINI)

DEFAULT_PROVIDER = PROVIDER_OPENROUTER

# Used when neither a flag nor an environment variable names a model
DEFAULT_MODELS = {
    PROVIDER_OPENROUTER: "openai/gpt-3.5-turbo",
    PROVIDER_GEMINI: "gemini-3-pro-preview",
}

DEFAULT_BASE_URLS = {
    PROVIDER_OPENROUTER: "https://openrouter.ai/api/v1/chat/completions",
    PROVIDER_GEMINI: "https://generativelanguage.googleapis.com",
}

# Short Gemini model names accepted by --ai-model
GEMINI_MODELS = {
    "flash": "gemini-2.0-flash",
    "flash-lite": "gemini-2.0-flash-lite",
    "pro": "gemini-2.5-pro",
}

# Wall-clock deadline for one provider call, in seconds
DEFAULT_TIMEOUT = 120.0


def resolve_gemini_model(model_name: str) -> str:
    """
    Expand a short Gemini model name to its full identifier.

    Args:
        model_name: Short name (flash, flash-lite, pro) or a full model id.

    Returns:
        Full model id, without a "models/" prefix.
    """
    model_id = GEMINI_MODELS.get(model_name, model_name)
    return model_id.removeprefix("models/")


@dataclass(frozen=True)
class ProviderConfig:
    """
    Settings for one provider call.

    The API key is excluded from repr so the config can be logged safely.
    """
    kind: str
    api_key: str = field(repr=False)
    model: str = ""
    base_url: str = ""
    timeout: float = DEFAULT_TIMEOUT
