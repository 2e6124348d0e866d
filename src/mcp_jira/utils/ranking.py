"""Rank, stably sort and truncate helpers for budgeted output."""

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")


def rank_and_truncate(
    items: Iterable[T],
    rank: Callable[[T], int],
    limit: int | None = None,
) -> list[T]:
    """Order items by rank, keeping input order among equal ranks.

    Lower ranks come first. Because the sort is stable, items with the same
    rank stay in the order they were produced (e.g. detector registration
    order).

    Args:
        items: Items to order.
        rank: Function mapping an item to its rank.
        limit: Maximum number of items to keep. None keeps everything.

    Returns:
        The ordered (and possibly truncated) list.

    Raises:
        ValueError: If limit is negative.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    ranked = sorted(items, key=rank)
    if limit is None:
        return ranked
    return ranked[:limit]
