from typing import Any

import structlog

from .matcher import SelectorMatcher
from .models import Cue, CueGroup, build_cue_group
from .ranking import sort_cues

logger = structlog.get_logger(__name__)


def trim_excess_cues(
    cues_to_trim: list[Cue],
    target: Any,
    goal_size: int,
    matcher: SelectorMatcher,
) -> CueGroup | None:
    """
    Removes cues that are not needed to target the element until the chain
    is small enough to try every combination of it.

    Cues are considered in `sort_cues` order and a removal is only committed
    when the remaining cues still match the target. Zero-penalty cues are
    always kept. Stops as soon as the chain has at most `goal_size` cues.

    Returns None if the untrimmed chain does not match the target.
    """
    selector_parts = matcher.build_selector_parts(cues_to_trim)

    if not matcher.is_match(selector_parts, target):
        # Cue generation should never hand us a chain that misses the target.
        logger.debug(
            "Cues did not match target.",
            selector=" >> ".join(str(part) for part in selector_parts),
            cues=len(cues_to_trim),
        )
        return None

    cues = sort_cues(cues_to_trim)

    i = 0
    while i < len(cues) and len(cues) > goal_size:
        if cues[i].penalty == 0:
            i += 1
            continue

        cues_without_i = cues[:i] + cues[i + 1 :]
        selector_parts_without_i = matcher.build_selector_parts(cues_without_i)

        if matcher.is_match(selector_parts_without_i, target):
            # The next cue shifted into position i, look at it next.
            cues = cues_without_i
            selector_parts = selector_parts_without_i
        else:
            i += 1

    logger.debug("Trimmed cues.", before=len(cues_to_trim), after=len(cues))
    return build_cue_group(cues, selector_parts)
