from typing import Any, Protocol, runtime_checkable

from .models import Cue, SelectorPart


@runtime_checkable
class SelectorMatcher(Protocol):
    """
    The selector compiler and uniqueness check the optimizer runs against.

    `build_selector_parts` must be pure and deterministic for a given input
    order. `is_match` must be a read-only query: true only when the parts
    resolve to exactly the target element.
    """

    def build_selector_parts(self, cues: list[Cue]) -> list[SelectorPart]: ...

    def is_match(self, selector_parts: list[SelectorPart], target: Any) -> bool: ...
