"""Shared fixtures and fakes for the identification tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from core.domain.outcomes import AttemptOutcome, Success
from core.interfaces.backend import ModelDescriptor


def make_payload(**overrides: Any) -> dict[str, Any]:
    """A complete, well-formed backend payload (king cobra)."""

    payload: dict[str, Any] = {
        "found": True,
        "scientific_name": "Ophiophagus hannah",
        "confidence": 96,
        "is_venomous": True,
        "danger_level": "Critical",
        "locations": [
            {"country": "Thailand", "continent_code": "AS"},
            {"country": "India", "continent_code": "AS"},
        ],
        "search_term": "king cobra",
        "data": {
            "en": {
                "name": "King Cobra",
                "description": "The longest venomous snake in the world.",
                "first_aid": ["Keep calm", "Immobilize the limb", "Go to hospital"],
                "toxicity_details": "Neurotoxic venom.",
                "fun_fact": "It eats other snakes.",
                "habitat_text": "Forests and bamboo thickets.",
            },
            "th": {
                "name": "งูจงอาง",
                "description": "งูพิษที่ยาวที่สุดในโลก",
                "first_aid": ["ตั้งสติ"],
                "toxicity_details": "พิษต่อระบบประสาท",
                "fun_fact": "กินงูชนิดอื่น",
                "habitat_text": "ป่าไม้",
            },
        },
        "details": {
            "en": {"scientific_name": "Ophiophagus hannah", "family": "Elapidae", "thai_names": ["งูจงอาง"]},
            "th": {"scientific_name": "Ophiophagus hannah", "family": "Elapidae", "thai_names": ["งูจงอาง"]},
        },
    }
    payload.update(overrides)
    return payload


def success(payload: dict[str, Any] | None = None, *, prefix: str = "", suffix: str = "") -> Success:
    return Success(raw_text=prefix + json.dumps(payload or make_payload(), ensure_ascii=False) + suffix)


class ScriptedBackend:
    """Fake invoker: each model id replays its list of outcomes in order."""

    def __init__(self, script: dict[str, list[AttemptOutcome]]) -> None:
        self.script = {k: list(v) for k, v in script.items()}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    async def invoke(self, model: ModelDescriptor, body: dict[str, Any]) -> AttemptOutcome:
        self.calls.append((model.id, body))
        return self.script[model.id].pop(0)

    async def aclose(self) -> None:
        self.closed = True

    @property
    def called_models(self) -> list[str]:
        return [model_id for model_id, _ in self.calls]


class SleepRecorder:
    """Async stand-in for `asyncio.sleep` that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def payload() -> dict[str, Any]:
    return make_payload()


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()
