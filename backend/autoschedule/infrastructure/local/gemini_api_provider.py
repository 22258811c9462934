"""
Gemini API provider for local development.

Uses Gemini API with API Key (no GCP project required).
"""

from autoschedule.interfaces.llm_provider import ILLMProvider


class GeminiAPIProvider(ILLMProvider):
    """Gemini API provider using API Key."""

    def __init__(self, model_name: str, api_key: str):
        """
        Initialize Gemini API provider.

        Args:
            model_name: Gemini model name (e.g., "gemini-2.0-flash")
            api_key: Google API key
        """
        if not api_key:
            raise ValueError(
                "GOOGLE_API_KEY is required for Gemini API provider. "
                "Get your API key from https://aistudio.google.com/apikey"
            )
        self._model_name = model_name
        self._api_key = api_key

    def get_model(self) -> str:
        return self._model_name

    def get_model_name(self) -> str:
        """Get human-readable model name."""
        return f"Gemini API ({self._model_name})"

    def get_api_key(self) -> str:
        return self._api_key
