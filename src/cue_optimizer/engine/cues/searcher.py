from typing import Any

import structlog

from .combinatorics import combine
from .matcher import SelectorMatcher
from .models import (
    CueGroup,
    find_nearest_preferred_attribute_cue,
    get_penalty,
    get_value_length,
)

logger = structlog.get_logger(__name__)


def _is_better(
    penalty: float, size: int, value_length: int, best_group: CueGroup
) -> bool:
    """Whether a candidate could replace the best group, before checking the DOM."""
    if penalty != best_group.penalty:
        return penalty < best_group.penalty
    if size != len(best_group.cues):
        return size < len(best_group.cues)
    return value_length < best_group.value_length


def find_best_cue_group(
    seed_group: CueGroup,
    target: Any,
    max_size: int,
    matcher: SelectorMatcher,
) -> CueGroup:
    """
    Tries every combination of the seed cues from 1 up to `max_size` cues and
    keeps the one matching the target with the lowest penalty, then the fewest
    cues, then the shortest values.

    The nearest preferred attribute cue is added to every combination that
    lacks it. Sizes are tried in ascending order so smaller groups win ties.
    Returns the seed group when no combination improves on it.
    """
    best_group = seed_group
    cue_to_keep = find_nearest_preferred_attribute_cue(seed_group.cues)
    checked = 0

    for size in range(1, max_size + 1):
        for combination in combine(seed_group.cues, size):
            cues = combination
            if cue_to_keep is not None and cue_to_keep not in cues:
                cues = cues + [cue_to_keep]

            penalty = get_penalty(cues)
            value_length = get_value_length(cues)
            if not _is_better(penalty, len(cues), value_length, best_group):
                continue

            checked += 1
            selector_parts = matcher.build_selector_parts(cues)
            if matcher.is_match(selector_parts, target):
                best_group = CueGroup(
                    cues=cues,
                    penalty=penalty,
                    selector_parts=selector_parts,
                    value_length=value_length,
                )

    logger.debug(
        "Searched cue combinations.",
        seed_size=len(seed_group.cues),
        checked=checked,
        best_size=len(best_group.cues),
        best_penalty=best_group.penalty,
    )
    return best_group
