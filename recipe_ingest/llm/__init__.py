"""Generative model backends for AI-assisted extraction."""
from .clients import CompletionClient, GeminiCompletionClient, ModelSettings

__all__ = ["CompletionClient", "GeminiCompletionClient", "ModelSettings"]
