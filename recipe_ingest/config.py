"""
Configuration for the recipe ingestion pipeline.

Settings come from a mapping (usually the environment) and are validated
with voluptuous before being frozen into an ExtractorConfig.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Mapping

import voluptuous as vol
from pydantic import BaseModel, ConfigDict, Field

from .const import (
    CONF_AI_FALLBACK,
    CONF_AI_TIMEOUT,
    CONF_API_KEY,
    CONF_FETCH_TIMEOUT,
    CONF_MAX_TEXT_LENGTH,
    CONF_MODEL,
    CONF_PREPARATION_WORDS,
    DEFAULT_AI_TIMEOUT,
    DEFAULT_MAX_TEXT_LENGTH,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT,
    ENV_API_KEY,
    ENV_PREFIX,
    OPT_FORCE_AI,
    PREPARATION_WORDS,
)
from .llm import ModelSettings

_LOGGER = logging.getLogger(__name__)


def word_list(value: Any) -> list[str]:
    """Validate a comma-separated string or a list of words."""
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise vol.Invalid("expected a comma-separated string or a list of words")
    return [str(word).strip().lower() for word in value if str(word).strip()]


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_API_KEY): vol.Any(None, str),
        vol.Optional(CONF_MODEL, default=DEFAULT_MODEL): vol.All(str, vol.Length(min=1)),
        vol.Optional(CONF_FETCH_TIMEOUT, default=DEFAULT_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)),
        vol.Optional(CONF_AI_TIMEOUT, default=DEFAULT_AI_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)),
        vol.Optional(CONF_MAX_TEXT_LENGTH, default=DEFAULT_MAX_TEXT_LENGTH): vol.All(
            vol.Coerce(int), vol.Range(min=1)),
        vol.Optional(CONF_AI_FALLBACK, default=True): vol.Boolean(),
        vol.Optional(CONF_PREPARATION_WORDS, default=list): word_list,
    },
    extra=vol.REMOVE_EXTRA,
)

EXTRACT_OPTIONS_SCHEMA = vol.Schema(
    {
        vol.Optional(OPT_FORCE_AI, default=False): vol.Boolean(),
    }
)


class ExtractorConfig(BaseModel):
    """Validated, immutable pipeline settings.

    Attributes:
        api_key: Gemini API key; AI-assisted extraction is unavailable without one
        model: Gemini model used for AI-assisted extraction
        fetch_timeout: Page fetch timeout in seconds
        ai_timeout: Model call timeout in seconds
        max_text_length: Character budget of the page excerpt sent to the model
        ai_fallback: Whether weak results escalate to AI-assisted extraction
        preparation_words: Preparation vocabulary, defaults plus configured extras
    """

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    model: str = DEFAULT_MODEL
    fetch_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    ai_timeout: float = Field(default=DEFAULT_AI_TIMEOUT, gt=0)
    max_text_length: int = Field(default=DEFAULT_MAX_TEXT_LENGTH, gt=0)
    ai_fallback: bool = True
    preparation_words: tuple[str, ...] = PREPARATION_WORDS

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ExtractorConfig:
        """Validate a settings mapping and build a config.

        Raises:
            vol.Invalid: If a setting has an invalid value
        """
        settings = CONFIG_SCHEMA(dict(data))
        extras = [word for word in settings.pop(CONF_PREPARATION_WORDS) if word not in PREPARATION_WORDS]
        return cls(
            **settings,
            preparation_words=PREPARATION_WORDS + tuple(dict.fromkeys(extras)),
        )

    def model_settings(self) -> ModelSettings:
        """Model call settings derived from this config."""
        return ModelSettings(model=self.model, timeout=self.ai_timeout)


def load_config(env: Mapping[str, str] | None = None, **overrides: Any) -> ExtractorConfig:
    """Build a config from environment variables.

    Reads GOOGLE_API_KEY and RECIPE_INGEST_<SETTING> variables, e.g.
    RECIPE_INGEST_MODEL or RECIPE_INGEST_PREPARATION_WORDS. Keyword
    overrides take precedence over the environment.

    Args:
        env: Mapping to read instead of os.environ
        **overrides: Setting values that replace environment values

    Raises:
        vol.Invalid: If a setting has an invalid value
    """
    env = os.environ if env is None else env
    data: dict[str, Any] = {}

    api_key = env.get(ENV_API_KEY)
    if api_key:
        data[CONF_API_KEY] = api_key

    for key in (CONF_MODEL, CONF_FETCH_TIMEOUT, CONF_AI_TIMEOUT, CONF_MAX_TEXT_LENGTH,
                CONF_AI_FALLBACK, CONF_PREPARATION_WORDS):
        value = env.get(f"{ENV_PREFIX}{key.upper()}")
        if value is not None and value.strip():
            data[key] = value.strip()

    data.update({key: value for key, value in overrides.items() if value is not None})
    config = ExtractorConfig.from_mapping(data)
    _LOGGER.debug("Loaded config (model=%s, ai_fallback=%s, api_key=%s)",
                  config.model, config.ai_fallback, "set" if config.api_key else "unset")
    return config
