"""Tests for the Gemini completion client."""

from unittest.mock import MagicMock, patch

import pytest

from recipe_ingest.exceptions import AIParseError
from recipe_ingest.llm import CompletionClient, GeminiCompletionClient, ModelSettings


class TestGeminiCompletionClient:
    """Tests for GeminiCompletionClient with a mocked SDK client."""

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            GeminiCompletionClient("  ")

    def test_is_a_completion_client(self):
        assert isinstance(GeminiCompletionClient("key"), CompletionClient)

    @patch("recipe_ingest.llm.clients.genai.Client")
    def test_complete(self, client_class):
        sdk = MagicMock()
        sdk.models.generate_content.return_value = MagicMock(text='{"title": "Soup"}')
        client_class.return_value = sdk

        settings = ModelSettings(model="models/gemini-2.5-flash", temperature=0.1,
                                 max_output_tokens=500, timeout=20)
        answer = GeminiCompletionClient("key").complete("system", "user text", settings)

        assert answer == '{"title": "Soup"}'
        _, client_kwargs = client_class.call_args
        assert client_kwargs["api_key"] == "key"
        assert client_kwargs["http_options"].timeout == 20000
        _, kwargs = sdk.models.generate_content.call_args
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"] == "user text"
        assert kwargs["config"].system_instruction == "system"
        assert kwargs["config"].temperature == 0.1
        assert kwargs["config"].max_output_tokens == 500

    @patch("recipe_ingest.llm.clients.genai.Client")
    def test_sdk_errors_are_wrapped(self, client_class):
        client_class.return_value.models.generate_content.side_effect = RuntimeError("quota")
        with pytest.raises(AIParseError):
            GeminiCompletionClient("key").complete("system", "user", ModelSettings())

    @patch("recipe_ingest.llm.clients.genai.Client")
    def test_empty_answer(self, client_class):
        client_class.return_value.models.generate_content.return_value = MagicMock(text=None)
        with pytest.raises(AIParseError):
            GeminiCompletionClient("key").complete("system", "user", ModelSettings())
