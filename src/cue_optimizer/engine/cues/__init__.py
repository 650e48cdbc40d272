"""
Cue optimization: picks the smallest, least fragile group of cues that still
resolves to exactly one element.
"""

from .combinatorics import combine
from .config import OptimizerConfig, load_config
from .cue_sets import build_cue_sets
from .matcher import SelectorMatcher
from .models import (
    Cue,
    CueGroup,
    SelectorPart,
    find_nearest_preferred_attribute_cue,
    get_penalty,
    get_value_length,
)
from .optimizer import CueOptimizer, optimize_cues
from .ranking import rank_cue_groups, sort_cues
from .searcher import find_best_cue_group
from .trimmer import trim_excess_cues

__all__ = [
    "Cue",
    "CueGroup",
    "CueOptimizer",
    "OptimizerConfig",
    "SelectorMatcher",
    "SelectorPart",
    "build_cue_sets",
    "combine",
    "find_best_cue_group",
    "find_nearest_preferred_attribute_cue",
    "get_penalty",
    "get_value_length",
    "load_config",
    "optimize_cues",
    "rank_cue_groups",
    "sort_cues",
    "trim_excess_cues",
]
