"""
LLM integration module for k2n.

Provides:
- Provider dispatch (OpenRouter, Gemini)
- Prompt builder
- Provider/model configuration
"""

from .client import Provider, call_llm, create_provider
from .gemini import GeminiProvider
from .models import (
    DEFAULT_PROVIDER,
    DEFAULT_TIMEOUT,
    GEMINI_MODELS,
    PROVIDERS,
    ProviderConfig,
)
from .openrouter import OpenRouterProvider
from .prompts import build_prompt, default_instruction
from .text import strip_code_fences

__all__ = [
    "Provider",
    "call_llm",
    "create_provider",
    "GeminiProvider",
    "OpenRouterProvider",
    "DEFAULT_PROVIDER",
    "DEFAULT_TIMEOUT",
    "GEMINI_MODELS",
    "PROVIDERS",
    "ProviderConfig",
    "build_prompt",
    "default_instruction",
    "strip_code_fences",
]
