"""
LLM-backed task duration estimator.

Asks the model for a single number of minutes and snaps the answer to a
fixed set of durations. Any failure yields the default duration.
"""

from __future__ import annotations

import asyncio
import re
from typing import Optional

from autoschedule.core.logger import setup_logger
from autoschedule.interfaces.duration_estimator import IDurationEstimator
from autoschedule.interfaces.llm_provider import ILLMProvider
from autoschedule.services.llm_utils import generate_text

logger = setup_logger(__name__)

VALID_DURATIONS = [15, 30, 45, 60, 90, 120, 180, 240, 300, 360]

_NUMBER_PATTERN = re.compile(r"\d+")

_PROMPT_TEMPLATE = """Estimate how long the following task will take a typical knowledge worker.

Task: {title}
{notes_line}
Answer with a single number of minutes chosen from: {choices}.
Respond with the number only."""


def snap_duration(minutes: int) -> int:
    """Closest value in VALID_DURATIONS; ties go to the shorter duration."""
    return min(VALID_DURATIONS, key=lambda valid: (abs(valid - minutes), valid))


def parse_duration_answer(text: Optional[str], default_minutes: int) -> int:
    """First integer in the model's answer, snapped; default when absent or non-positive."""
    if not text:
        return default_minutes
    match = _NUMBER_PATTERN.search(text)
    if not match:
        return default_minutes
    minutes = int(match.group())
    if minutes <= 0:
        return default_minutes
    return snap_duration(minutes)


class LLMDurationEstimator(IDurationEstimator):
    """Duration estimator backed by an ILLMProvider."""

    def __init__(self, llm_provider: Optional[ILLMProvider], default_minutes: int = 30):
        """
        Args:
            llm_provider: Model access; None disables estimation
            default_minutes: Duration returned whenever estimation fails
        """
        self._llm_provider = llm_provider
        self.default_minutes = default_minutes

    def build_prompt(self, title: str, notes: Optional[str] = None) -> str:
        notes_line = f"Notes: {notes.strip()}\n" if notes and notes.strip() else ""
        return _PROMPT_TEMPLATE.format(
            title=title,
            notes_line=notes_line,
            choices=", ".join(str(d) for d in VALID_DURATIONS),
        )

    async def estimate(self, title: str, notes: Optional[str] = None) -> int:
        if self._llm_provider is None:
            return self.default_minutes

        prompt = self.build_prompt(title, notes)
        try:
            text = await asyncio.to_thread(
                generate_text,
                self._llm_provider,
                prompt,
                temperature=0.0,
                max_output_tokens=16,
            )
        except Exception as exc:
            logger.warning(f"Duration estimate failed for '{title}': {exc}")
            return self.default_minutes

        minutes = parse_duration_answer(text, self.default_minutes)
        logger.debug(f"Estimated {minutes} min for '{title}' (raw answer: {text!r})")
        return minutes
