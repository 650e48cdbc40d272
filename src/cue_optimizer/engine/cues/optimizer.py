from typing import Any

import structlog

from .config import OptimizerConfig
from .cue_sets import build_cue_sets
from .matcher import SelectorMatcher
from .models import Cue, CueGroup
from .ranking import rank_cue_groups
from .searcher import find_best_cue_group
from .trimmer import trim_excess_cues

logger = structlog.get_logger(__name__)


class CueOptimizer:
    """
    Picks the cheapest group of cues that still targets exactly one element.

    Every cue set is trimmed down to a size whose combinations can be tried
    exhaustively, searched for its best combination, and the results ranked
    by penalty and then by value length. Holds no state between calls.
    """

    def __init__(self, matcher: SelectorMatcher, config: OptimizerConfig | None = None):
        if matcher is None:
            raise ValueError("A selector matcher is required for CueOptimizer.")
        self.matcher = matcher
        self.config = config or OptimizerConfig()

    def _optimize_cue_set(
        self, cue_set: list[Cue], target: Any, index: int
    ) -> CueGroup | None:
        log = logger.bind(cue_set=index, size=len(cue_set))

        cue_group = trim_excess_cues(
            cue_set, target, self.config.trim_goal_size, self.matcher
        )
        if cue_group is None:
            log.debug("Skipping cue set that does not match the target.")
            return None

        if len(cue_group.cues) > self.config.max_trimmed_size:
            log.debug(
                "Skipping cue set that could not be trimmed.",
                trimmed_size=len(cue_group.cues),
            )
            return None

        return find_best_cue_group(
            cue_group, target, self.config.max_combination_size, self.matcher
        )

    def optimize(self, cues: list[Cue], target: Any) -> CueGroup | None:
        """
        Returns the best cue group for the target, or None if no cue set
        produced a group that matches it.
        """
        cue_sets = build_cue_sets(cues)[: self.config.max_cue_sets]

        cue_groups = []
        for index, cue_set in enumerate(cue_sets):
            cue_group = self._optimize_cue_set(cue_set, target, index)
            if cue_group is not None:
                cue_groups.append(cue_group)

        if not cue_groups:
            logger.info("No selector found for target.", cue_sets=len(cue_sets))
            return None

        best_group = rank_cue_groups(cue_groups)[0]
        logger.info(
            "Optimized cues.",
            cue_sets=len(cue_sets),
            candidates=len(cue_groups),
            penalty=best_group.penalty,
            selector=best_group.to_selector(),
        )
        return best_group


def optimize_cues(
    cues: list[Cue],
    target: Any,
    matcher: SelectorMatcher,
    config: OptimizerConfig | None = None,
) -> CueGroup | None:
    """Convenience wrapper around `CueOptimizer.optimize`."""
    return CueOptimizer(matcher, config).optimize(cues, target)
