"""
LLM provider interface.

Defines the contract for LLM (Large Language Model) access.
Implementations: Gemini API
"""

from abc import ABC, abstractmethod


class ILLMProvider(ABC):
    """Abstract interface for LLM providers."""

    @abstractmethod
    def get_model(self) -> str:
        """
        Get the model identifier passed to the generation client.

        Returns:
            Model name string (e.g., "gemini-2.0-flash")
        """
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """
        Get the human-readable model name.

        Returns:
            Model name string for logging/display
        """
        pass

    @abstractmethod
    def get_api_key(self) -> str:
        """
        Get the credential used to call the model.

        Returns:
            API key string
        """
        pass
