import json
from typing import Any, Callable, Dict

import pytest

from app.services.screening.models import QUALITY_CRITERIA


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def evaluation_document() -> Callable[..., Dict[str, Any]]:
    """Factory for an evaluator JSON document; keyword overrides replace fields."""

    def _build(**overrides: Any) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            key: {"pass": True, "reason": f"{key} looks fine"}
            for key in QUALITY_CRITERIA
        }
        document["relevant"] = {"score": "high", "reason": "Ecosystem-wide tooling"}
        document["material"] = {"score": "medium", "reason": "Mid-sized grant"}
        document["qualityScore"] = 1.0
        document["attentionScore"] = 0.75
        document["overallPass"] = True
        document["summary"] = "Proposes developer tooling. Passes all criteria."
        document.update(overrides)
        return document

    return _build


@pytest.fixture
def chat_completion() -> Callable[[Any], Dict[str, Any]]:
    """Wrap a document (or raw string) in a chat completions response body."""

    def _wrap(document: Any) -> Dict[str, Any]:
        content = document if isinstance(document, str) else json.dumps(document)
        return {
            "id": "gen-123",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
        }

    return _wrap
