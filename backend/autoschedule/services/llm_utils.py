"""
Shared LLM invocation utilities for text generation.
"""

from __future__ import annotations

from typing import Optional

from google import genai
from google.genai.types import Content, GenerateContentConfig, Part

from autoschedule.core.logger import setup_logger
from autoschedule.interfaces.llm_provider import ILLMProvider

logger = setup_logger(__name__)


def generate_text(
    llm_provider: ILLMProvider,
    prompt: str,
    temperature: float = 0.2,
    max_output_tokens: int = 600,
    system_instruction: Optional[str] = None,
) -> Optional[str]:
    """
    Generate text from the configured LLM provider.

    Returns None when the provider has no key or the call fails.
    """
    if not prompt:
        return None

    api_key = llm_provider.get_api_key()
    if not api_key:
        return None

    config_kwargs: dict = {
        "temperature": temperature,
        "max_output_tokens": max_output_tokens,
    }
    if system_instruction:
        config_kwargs["system_instruction"] = system_instruction

    try:
        client = genai.Client(api_key=api_key)
        response = client.models.generate_content(
            model=llm_provider.get_model(),
            contents=[Content(role="user", parts=[Part(text=prompt)])],
            config=GenerateContentConfig(**config_kwargs),
        )
        text = (response.text or "").strip()
        return text or None
    except Exception as exc:
        logger.warning(f"GenAI request failed ({llm_provider.get_model_name()}): {exc}")
    return None
