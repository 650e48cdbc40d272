from dataclasses import dataclass, field

import structlog

from .models import Cue

logger = structlog.get_logger(__name__)


@dataclass
class CueLevel:
    """The cues of one ancestor level, split by type category."""

    css: list[Cue] = field(default_factory=list)
    text: list[Cue] = field(default_factory=list)

    def choices(self) -> list[list[Cue]]:
        """The non-empty buckets a chain may take from this level, css first."""
        return [bucket for bucket in (self.css, self.text) if bucket]


def group_cues_by_level(cues: list[Cue]) -> dict[int, CueLevel]:
    cue_levels: dict[int, CueLevel] = {}
    for cue in cues:
        cue_level = cue_levels.setdefault(cue.level, CueLevel())
        if cue.is_text:
            cue_level.text.append(cue)
        else:
            cue_level.css.append(cue)
    return cue_levels


def build_cue_sets(cues: list[Cue]) -> list[list[Cue]]:
    """
    Builds the cue sets (chains) for a pool of cues.

    Each level may only contribute one type category (css or text), so every
    level with both kinds doubles the number of chains. Levels are appended
    from the farthest ancestor down to the target.
    """
    cue_levels = group_cues_by_level(cues)

    cue_sets: list[list[Cue]] = []
    for level in sorted(cue_levels, reverse=True):
        choices = cue_levels[level].choices()

        if not cue_sets:
            cue_sets = [list(choice) for choice in choices]
            continue

        cue_sets = [cue_set + choice for cue_set in cue_sets for choice in choices]

    logger.debug(
        "Built cue sets.", levels=len(cue_levels), cue_sets=len(cue_sets)
    )
    return cue_sets
