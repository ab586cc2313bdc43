"""
Gemini provider, backed by the google-generativeai SDK.
"""

from dataclasses import dataclass, field

import google.generativeai as genai
import requests
from google.api_core.exceptions import DeadlineExceeded

from ..errors import ProviderError, ProviderTimeoutError
from ..utils import get_logger
from .models import DEFAULT_BASE_URLS, DEFAULT_MODELS, DEFAULT_TIMEOUT, PROVIDER_GEMINI, resolve_gemini_model
from .text import strip_code_fences

logger = get_logger("gemini")


@dataclass(frozen=True)
class GeminiProvider:
    api_key: str = field(repr=False)
    model: str = DEFAULT_MODELS[PROVIDER_GEMINI]
    base_url: str = DEFAULT_BASE_URLS[PROVIDER_GEMINI]
    timeout: float = DEFAULT_TIMEOUT

    def call(self, prompt: str) -> str:
        """
        Send one generateContent request.

        Args:
            prompt: The prompt text to send.

        Returns:
            Text of the first part of the first candidate, code fences stripped.

        Raises:
            ProviderError: If the request fails or returns no candidates.
            ProviderTimeoutError: If the request runs past the timeout.
        """
        model_id = resolve_gemini_model(self.model)
        logger.debug("Calling Gemini model %s at %s (%d prompt chars)", model_id, self.base_url, len(prompt))

        genai.configure(
            api_key=self.api_key,
            transport="rest",
            client_options={"api_endpoint": self.base_url},
        )
        model = genai.GenerativeModel(model_id)

        try:
            response = model.generate_content(prompt, request_options={"timeout": self.timeout})
        except (DeadlineExceeded, requests.Timeout) as e:
            raise ProviderTimeoutError(f"gemini did not respond within {self.timeout:g}s") from e
        except Exception as e:
            raise ProviderError(f"gemini request failed: {e}") from e

        candidates = list(response.candidates or [])
        if not candidates or not candidates[0].content.parts:
            raise ProviderError("no candidates returned")

        text = candidates[0].content.parts[0].text
        logger.debug("Gemini returned %d characters", len(text))
        return strip_code_fences(text)
