from unittest.mock import MagicMock

import pytest

from autoschedule.services import duration_estimator as estimator_module
from autoschedule.services.duration_estimator import (
    LLMDurationEstimator,
    parse_duration_answer,
    snap_duration,
)


@pytest.mark.parametrize(
    "minutes,expected",
    [(1, 15), (20, 15), (25, 30), (50, 45), (75, 60), (100, 90), (150, 120), (500, 360)],
)
def test_snap_duration(minutes, expected):
    assert snap_duration(minutes) == expected


def test_parse_duration_answer():
    assert parse_duration_answer("60", 30) == 60
    assert parse_duration_answer("About 40 minutes.", 30) == 45
    assert parse_duration_answer("no idea", 30) == 30
    assert parse_duration_answer("0", 30) == 30
    assert parse_duration_answer(None, 30) == 30


@pytest.mark.asyncio
async def test_estimate_without_provider_returns_default():
    estimator = LLMDurationEstimator(None, default_minutes=30)

    assert await estimator.estimate("Write report") == 30


@pytest.mark.asyncio
async def test_estimate_uses_llm_answer(monkeypatch):
    calls = []

    def fake_generate_text(provider, prompt, **kwargs):
        calls.append(prompt)
        return "90"

    monkeypatch.setattr(estimator_module, "generate_text", fake_generate_text)
    estimator = LLMDurationEstimator(MagicMock())

    assert await estimator.estimate("Plan offsite", notes="Venue shortlist") == 90
    assert "Plan offsite" in calls[0]
    assert "Venue shortlist" in calls[0]


@pytest.mark.asyncio
async def test_estimate_falls_back_when_llm_returns_nothing(monkeypatch):
    monkeypatch.setattr(estimator_module, "generate_text", lambda *args, **kwargs: None)
    estimator = LLMDurationEstimator(MagicMock(), default_minutes=30)

    assert await estimator.estimate("Write report") == 30


@pytest.mark.asyncio
async def test_estimate_falls_back_when_llm_raises(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("network down")

    monkeypatch.setattr(estimator_module, "generate_text", boom)
    estimator = LLMDurationEstimator(MagicMock(), default_minutes=30)

    assert await estimator.estimate("Write report") == 30


def test_prompt_omits_empty_notes():
    prompt = LLMDurationEstimator(None).build_prompt("Write report", notes="  ")

    assert "Notes:" not in prompt
    assert "15, 30, 45, 60, 90, 120, 180, 240, 300, 360" in prompt
