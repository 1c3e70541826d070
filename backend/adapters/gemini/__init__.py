"""Gemini adapter for multimodal video analysis."""

from .inference import GeminiInferenceAdapter

__all__ = ["GeminiInferenceAdapter"]
