from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def _do_combine(
    items: Sequence[T],
    remaining: int,
    combination: list[T],
    result: list[list[T]],
) -> None:
    if remaining == 0:
        if combination:
            result.append(combination)
        return

    for i, item in enumerate(items):
        # Only the later items are candidates, so no subset repeats or reorders.
        _do_combine(items[i + 1 :], remaining - 1, combination + [item], result)


def combine(items: Sequence[T], size: int) -> list[list[T]]:
    """
    Builds every combination of `size` items, keeping their relative order.

    Returns an empty list when `size` is not positive or exceeds the number
    of items.
    """
    result: list[list[T]] = []
    if size <= 0 or size > len(items):
        return result

    _do_combine(list(items), size, [], result)
    return result
