"""Distance (jump count) resolution for listing annotation.

One lookup per distinct location, issued concurrently. A failed or unknown
route is None: distance only affects sort order, it never fails a listing.
"""
import asyncio
import logging
from collections.abc import Iterable
from typing import Protocol

logger = logging.getLogger(__name__)


class DistanceOracle(Protocol):
    async def get_distance(self, from_location: str, to_location: str) -> int | None: ...


async def resolve_jump_counts(
    oracle: DistanceOracle,
    locations: Iterable[str],
    destination: str,
) -> dict[str, int | None]:
    distinct = sorted(set(locations))
    if not distinct:
        return {}
    results = await asyncio.gather(
        *(oracle.get_distance(loc, destination) for loc in distinct),
        return_exceptions=True,
    )
    jump_counts: dict[str, int | None] = {}
    for loc, result in zip(distinct, results):
        if isinstance(result, BaseException):
            logger.warning("Jump count lookup %s -> %s failed: %s", loc, destination, result)
            jump_counts[loc] = None
        else:
            jump_counts[loc] = result
    return jump_counts


def jump_sort_key(jump_count: int | None) -> float:
    """Unknown routes sort after every known distance."""
    return float("inf") if jump_count is None else float(jump_count)
