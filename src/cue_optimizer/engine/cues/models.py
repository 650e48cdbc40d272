# cues/models.py

"""
Contains the Pydantic models and small helpers describing cues, compiled
selector parts and the candidate groups ranked by the optimizer.
"""

from typing import Literal

from pydantic import BaseModel, Field

CueType = Literal["attribute", "class", "id", "tag", "text"]

CSS_CUE_TYPES: tuple[str, ...] = ("attribute", "class", "id", "tag")


# --- Pydantic Models ---
class Cue(BaseModel):
    """A scored identifying feature of the target element or one of its ancestors."""

    level: int = Field(
        ..., ge=1, description="Ancestor distance from the target (1 = the target)."
    )
    type: CueType = Field(..., description="Kind of feature this cue describes.")
    penalty: float = Field(
        ...,
        ge=0,
        description="Fragility score. 0 marks a permanently preferred cue.",
    )
    value: str = Field(..., description="The literal selector or text fragment.")

    model_config = {"frozen": True}

    @property
    def is_text(self) -> bool:
        return self.type == "text"


class SelectorPart(BaseModel):
    """One compiled selector fragment, e.g. `css=main .nav` or `text="Save"`."""

    name: Literal["css", "text"]
    body: str

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.name}={self.body}"


class CueGroup(BaseModel):
    """A scored, compiled subset of cues considered as a selector."""

    cues: list[Cue] = Field(default_factory=list)
    penalty: float = Field(0, description="Sum of the member penalties.")
    selector_parts: list[SelectorPart] = Field(default_factory=list)
    value_length: int = Field(0, description="Sum of the member value lengths.")

    def to_selector(self) -> str:
        """Joins the compiled parts into a single Playwright selector string."""
        return " >> ".join(str(part) for part in self.selector_parts)


# --- Helpers ---


def get_penalty(cues: list[Cue]) -> float:
    return sum(cue.penalty for cue in cues)


def get_value_length(cues: list[Cue]) -> int:
    return sum(len(cue.value) for cue in cues)


def find_nearest_preferred_attribute_cue(cues: list[Cue]) -> Cue | None:
    """
    Returns the zero-penalty attribute cue closest to the target.

    Ties on level keep the first cue in the given order.
    """
    preferred = [cue for cue in cues if cue.type == "attribute" and cue.penalty == 0]
    if not preferred:
        return None
    return min(preferred, key=lambda cue: cue.level)


def build_cue_group(cues: list[Cue], selector_parts: list[SelectorPart]) -> CueGroup:
    return CueGroup(
        cues=list(cues),
        penalty=get_penalty(cues),
        selector_parts=list(selector_parts),
        value_length=get_value_length(cues),
    )
