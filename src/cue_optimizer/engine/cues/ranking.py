from .models import Cue, CueGroup


def sort_cues(cues: list[Cue]) -> list[Cue]:
    """
    Orders cues for removal: farthest level first, then the highest penalty,
    then the longest value. The sort is stable, equal cues keep their order.
    """
    return sorted(
        cues,
        key=lambda cue: (cue.level, cue.penalty, len(cue.value)),
        reverse=True,
    )


def rank_cue_groups(groups: list[CueGroup]) -> list[CueGroup]:
    """Ranks candidate groups by total penalty, then by total value length."""
    return sorted(groups, key=lambda group: (group.penalty, group.value_length))
