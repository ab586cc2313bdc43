import os
import subprocess
import sys
import textwrap
import time
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import requests
from google.api_core.exceptions import DeadlineExceeded

from k2n.errors import ConfigError, ProviderError, ProviderTimeoutError
from k2n.llm.client import call_llm, create_provider
from k2n.llm.gemini import GeminiProvider
from k2n.llm.models import ProviderConfig, resolve_gemini_model
from k2n.llm.openrouter import OpenRouterProvider
from k2n.llm.text import strip_code_fences

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def gemini_response(*texts):
    parts = [SimpleNamespace(text=t) for t in texts]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


def http_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = b"{}"
    response.json.return_value = payload
    return response


class TestStripCodeFences(unittest.TestCase):
    def test_strips_fence_with_language(self):
        self.assertEqual(strip_code_fences("```yaml\nFOO\n```"), "FOO")

    def test_strips_fence_without_language_after_trimming(self):
        self.assertEqual(strip_code_fences("  \n```\na: 1\nb: 2\n```\n\n"), "a: 1\nb: 2")

    def test_plain_text_unchanged(self):
        self.assertEqual(strip_code_fences("FOO"), "FOO")

    def test_fence_not_wrapping_everything_is_unchanged(self):
        text = "Here you go:\n```yaml\nFOO\n```"
        self.assertEqual(strip_code_fences(text), text)
        text = "```yaml\nFOO\n```\nThanks!"
        self.assertEqual(strip_code_fences(text), text)


class TestOpenRouterProvider(unittest.TestCase):
    def setUp(self):
        self.provider = OpenRouterProvider(
            api_key="fake-api-key",
            model="deepseek/deepseek-r1-0528:free",
            base_url="https://example.test/chat",
            timeout=30,
        )

    @patch("k2n.llm.openrouter.requests.post")
    def test_request_shape_and_fence_stripping(self, mock_post):
        mock_post.return_value = http_response(
            {"choices": [{"message": {"content": "```yaml\nGenerated Terraform Config\n```"}}]}
        )

        result = self.provider.call("fake-prompt")

        self.assertEqual(result, "Generated Terraform Config")
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://example.test/chat")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer fake-api-key")
        self.assertEqual(kwargs["json"], {
            "model": "deepseek/deepseek-r1-0528:free",
            "messages": [{"role": "user", "content": "fake-prompt"}],
        })
        self.assertEqual(kwargs["timeout"], 30)

    @patch("k2n.llm.openrouter.requests.post")
    def test_error_payload(self, mock_post):
        mock_post.return_value = http_response({"error": {"message": "invalid key"}}, status_code=401)
        with self.assertRaises(ProviderError) as ctx:
            self.provider.call("p")
        self.assertIn("invalid key", str(ctx.exception))

    @patch("k2n.llm.openrouter.requests.post")
    def test_no_choices(self, mock_post):
        mock_post.return_value = http_response({"choices": []})
        with self.assertRaisesRegex(ProviderError, "no choices"):
            self.provider.call("p")

    @patch("k2n.llm.openrouter.requests.post")
    def test_http_error_without_payload(self, mock_post):
        mock_post.return_value = http_response({}, status_code=502)
        with self.assertRaisesRegex(ProviderError, "502"):
            self.provider.call("p")

    @patch("k2n.llm.openrouter.requests.post")
    def test_non_json_body(self, mock_post):
        response = http_response(None, status_code=500)
        response.json.side_effect = ValueError("not json")
        mock_post.return_value = response
        with self.assertRaisesRegex(ProviderError, "non-JSON"):
            self.provider.call("p")

    @patch("k2n.llm.openrouter.requests.post")
    def test_transport_errors(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(ProviderError):
            self.provider.call("p")

        mock_post.side_effect = requests.Timeout("slow")
        with self.assertRaises(ProviderTimeoutError):
            self.provider.call("p")

    def test_repr_hides_key(self):
        self.assertNotIn("fake-api-key", repr(self.provider))


class TestGeminiProvider(unittest.TestCase):
    @patch("k2n.llm.gemini.genai")
    def test_first_part_of_first_candidate(self, mock_genai):
        model = mock_genai.GenerativeModel.return_value
        model.generate_content.return_value = gemini_response("```hcl\nGenerated Terraform Config\n```", "ignored")

        provider = GeminiProvider(api_key="fake-api-key", model="flash", timeout=45)
        result = provider.call("fake-prompt")

        self.assertEqual(result, "Generated Terraform Config")
        self.assertEqual(mock_genai.configure.call_args.kwargs["api_key"], "fake-api-key")
        mock_genai.GenerativeModel.assert_called_once_with("gemini-2.0-flash")
        model.generate_content.assert_called_once_with("fake-prompt", request_options={"timeout": 45})

    @patch("k2n.llm.gemini.genai")
    def test_no_candidates(self, mock_genai):
        mock_genai.GenerativeModel.return_value.generate_content.return_value = SimpleNamespace(candidates=[])
        with self.assertRaisesRegex(ProviderError, "no candidates"):
            GeminiProvider(api_key="k").call("p")

    @patch("k2n.llm.gemini.genai")
    def test_no_parts(self, mock_genai):
        mock_genai.GenerativeModel.return_value.generate_content.return_value = gemini_response()
        with self.assertRaisesRegex(ProviderError, "no candidates"):
            GeminiProvider(api_key="k").call("p")

    @patch("k2n.llm.gemini.genai")
    def test_sdk_errors_are_wrapped(self, mock_genai):
        mock_genai.GenerativeModel.return_value.generate_content.side_effect = RuntimeError("quota exceeded")
        with self.assertRaisesRegex(ProviderError, "quota exceeded"):
            GeminiProvider(api_key="k").call("p")

    @patch("k2n.llm.gemini.genai")
    def test_sdk_deadline_is_a_timeout(self, mock_genai):
        mock_genai.GenerativeModel.return_value.generate_content.side_effect = DeadlineExceeded("deadline exceeded")
        with self.assertRaises(ProviderTimeoutError):
            GeminiProvider(api_key="k", timeout=5).call("p")

    @patch("k2n.llm.gemini.genai")
    def test_rest_read_timeout_is_a_timeout(self, mock_genai):
        mock_genai.GenerativeModel.return_value.generate_content.side_effect = requests.ReadTimeout("slow")
        with self.assertRaises(ProviderTimeoutError):
            GeminiProvider(api_key="k", timeout=5).call("p")

    def test_model_aliases(self):
        self.assertEqual(resolve_gemini_model("pro"), "gemini-2.5-pro")
        self.assertEqual(resolve_gemini_model("models/gemini-1.5-flash"), "gemini-1.5-flash")
        self.assertEqual(resolve_gemini_model("gemini-3-pro-preview"), "gemini-3-pro-preview")


class TestDispatch(unittest.TestCase):
    def test_creates_matching_variant(self):
        provider = create_provider(ProviderConfig(kind="openrouter", api_key="k", model="m", base_url="u"))
        self.assertIsInstance(provider, OpenRouterProvider)
        self.assertEqual((provider.model, provider.base_url), ("m", "u"))

        provider = create_provider(ProviderConfig(kind="gemini", api_key="k"))
        self.assertIsInstance(provider, GeminiProvider)
        self.assertEqual(provider.model, "gemini-3-pro-preview")

    def test_unknown_kind(self):
        with self.assertRaises(ConfigError):
            create_provider(ProviderConfig(kind="bard", api_key="k"))

    def test_empty_key(self):
        with self.assertRaises(ConfigError):
            create_provider(ProviderConfig(kind="gemini", api_key=""))

    def test_config_repr_hides_key(self):
        self.assertNotIn("s3cret", repr(ProviderConfig(kind="gemini", api_key="s3cret")))

    @patch.object(OpenRouterProvider, "call")
    def test_returns_provider_text(self, mock_call):
        mock_call.return_value = "generated"
        config = ProviderConfig(kind="openrouter", api_key="k")
        self.assertEqual(call_llm(config, "prompt"), "generated")
        mock_call.assert_called_once_with("prompt")

    @patch.object(OpenRouterProvider, "call")
    def test_provider_errors_propagate(self, mock_call):
        mock_call.side_effect = ProviderError("boom")
        with self.assertRaisesRegex(ProviderError, "boom"):
            call_llm(ProviderConfig(kind="openrouter", api_key="k"), "prompt")

    @patch.object(OpenRouterProvider, "call")
    def test_deadline(self, mock_call):
        mock_call.side_effect = lambda prompt: time.sleep(0.5) or "late"
        config = ProviderConfig(kind="openrouter", api_key="k")

        started = time.monotonic()
        with self.assertRaises(ProviderTimeoutError):
            call_llm(config, "prompt", timeout=0.05)
        self.assertLess(time.monotonic() - started, 0.4)

    def test_process_exits_at_deadline(self):
        # The abandoned call sleeps far longer than the process is allowed to live
        script = textwrap.dedent("""
            import time
            from unittest.mock import patch

            from k2n.errors import ProviderTimeoutError
            from k2n.llm.client import call_llm
            from k2n.llm.models import ProviderConfig
            from k2n.llm.openrouter import OpenRouterProvider

            with patch.object(OpenRouterProvider, "call", side_effect=lambda prompt: time.sleep(30)):
                try:
                    call_llm(ProviderConfig(kind="openrouter", api_key="k"), "prompt", timeout=0.2)
                except ProviderTimeoutError as e:
                    print("timed out:", e)
        """)
        env = dict(os.environ, PYTHONPATH=str(PROJECT_ROOT))

        started = time.monotonic()
        result = subprocess.run(
            [sys.executable, "-c", script],
            capture_output=True, text=True, env=env, timeout=60,
        )
        elapsed = time.monotonic() - started

        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertIn("timed out: openrouter did not respond within 0.2s", result.stdout)
        self.assertLess(elapsed, 20)


if __name__ == "__main__":
    unittest.main()
