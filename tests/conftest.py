from collections.abc import Callable
from pathlib import Path

import pytest

from cue_optimizer.engine.cues.models import Cue, SelectorPart

TARGET = "target-element"


class FakeMatcher:
    """
    An in-memory stand-in for the live DOM check.

    Each cue compiles to one selector part holding its value, and a group of
    parts matches when `predicate` accepts the set of values.
    """

    def __init__(self, predicate: Callable[[frozenset[str]], bool]):
        self.predicate = predicate
        self.checks: list[frozenset[str]] = []

    def build_selector_parts(self, cues: list[Cue]) -> list[SelectorPart]:
        return [
            SelectorPart(name="text" if cue.is_text else "css", body=cue.value)
            for cue in cues
        ]

    def is_match(self, selector_parts: list[SelectorPart], target) -> bool:
        values = frozenset(part.body for part in selector_parts)
        self.checks.append(values)
        return target == TARGET and self.predicate(values)


@pytest.fixture
def target() -> str:
    return TARGET


@pytest.fixture
def fake_matcher() -> type[FakeMatcher]:
    """Returns the FakeMatcher class so tests can build one per predicate."""
    return FakeMatcher


@pytest.fixture
def cues_file(tmp_path: Path) -> Path:
    """A recorded cue pool for a checkbox inside a labelled form."""
    path = tmp_path / "cues.json"
    path.write_text(
        """[
  {"level": 2, "type": "class", "penalty": 10, "value": ".container"},
  {"level": 2, "type": "text", "penalty": 12, "value": "\\"Checkboxes\\""},
  {"level": 1, "type": "id", "penalty": 5, "value": "#single"},
  {"level": 1, "type": "tag", "penalty": 40, "value": "input"},
  {"level": 1, "type": "attribute", "penalty": 0, "value": "[data-qa=\\"html-checkbox\\"]"}
]""",
        encoding="utf-8",
    )
    return path
