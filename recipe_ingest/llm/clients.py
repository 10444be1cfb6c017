"""
Completion clients for generative models.

The AI-assisted parser only needs one operation from a model backend:
send a system instruction and user content, get text back. Any object
with a matching ``complete`` method can be used, which keeps tests and
alternative backends independent of the Google SDK.
"""
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from google import genai
from google.genai import errors, types
from pydantic import BaseModel, ConfigDict, Field

from ..const import (
    DEFAULT_AI_TIMEOUT,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
)
from ..exceptions import AIParseError

_LOGGER = logging.getLogger(__name__)

logging.getLogger("google_genai").setLevel(logging.WARNING)


class ModelSettings(BaseModel):
    """Settings for a single model call.

    Attributes:
        model: Model identifier, e.g. 'gemini-2.5-flash-lite'
        temperature: Sampling temperature
        max_output_tokens: Upper bound on the answer length
        timeout: Request timeout in seconds
    """

    model_config = ConfigDict(frozen=True)

    model: str = DEFAULT_MODEL
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=DEFAULT_MAX_OUTPUT_TOKENS, gt=0)
    timeout: float = Field(default=DEFAULT_AI_TIMEOUT, gt=0)


@runtime_checkable
class CompletionClient(Protocol):
    """Anything that can turn a prompt into a text answer."""

    def complete(self, system_instruction: str, user_content: str,
                 model_settings: ModelSettings) -> str:
        ...


class GeminiCompletionClient:
    """Completion client backed by the Google Gemini API."""

    def __init__(self, api_key: str) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: API key for the Gemini API

        Raises:
            ValueError: If API key is empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key cannot be empty")
        self.api_key = api_key
        self._clients: dict[float, genai.Client] = {}

    def _client(self, timeout: float) -> genai.Client:
        client = self._clients.get(timeout)
        if client is None:
            client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=int(timeout * 1000)),
            )
            self._clients[timeout] = client
        return client

    def complete(self, system_instruction: str, user_content: str,
                 model_settings: ModelSettings) -> str:
        """Send one prompt to Gemini and return the answer text.

        Raises:
            AIParseError: If the API call fails or returns no text
        """
        model = model_settings.model
        if model.startswith("models/"):
            model = model.split("/", 1)[1]

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=model_settings.temperature,
            max_output_tokens=model_settings.max_output_tokens,
        )

        _LOGGER.debug("Sending %d characters to Gemini (%s)", len(user_content), model)
        try:
            response = self._client(model_settings.timeout).models.generate_content(
                model=model,
                contents=user_content,
                config=config,
            )
        except errors.APIError as err:
            raise AIParseError(f"Gemini API error with model {model}: {err}") from err
        except Exception as err:
            # Transport failures and timeouts surface as httpx errors
            raise AIParseError(f"Gemini request failed with model {model}: {err}") from err

        text = response.text
        if not text:
            raise AIParseError(f"Gemini returned an empty answer with model {model}")
        return text
