"""Ordering and near-duplicate removal for candidate journeys.

This is a usability filter, not a correctness guarantee. Two journeys with
the same number of legs whose durations differ by less than the window are
treated as minor variants of each other, and only the faster one is kept.
"""

from collections.abc import Iterable

from hktransit_mcp.models.transit import Journey

DEDUP_WINDOW_MINUTES = 5
MAX_RESULTS = 5


def rank_and_dedup(
    journeys: Iterable[Journey],
    window_minutes: int = DEDUP_WINDOW_MINUTES,
    max_results: int = MAX_RESULTS,
) -> list[Journey]:
    """Sort by total duration, drop near-duplicates, truncate.

    The sort is stable, so journeys with equal durations keep their input
    order and the first one seen wins. A journey is dropped when any earlier
    journey in the sorted order is a near-duplicate, even one that was itself
    dropped, so a chain of minor variants collapses to its fastest member.
    """
    ranked = sorted(journeys, key=lambda journey: journey.total_duration_minutes)

    kept: list[Journey] = []
    for index, journey in enumerate(ranked):
        if any(
            len(earlier.legs) == len(journey.legs)
            and abs(earlier.total_duration_minutes - journey.total_duration_minutes)
            < window_minutes
            for earlier in ranked[:index]
        ):
            continue
        kept.append(journey)
        if len(kept) >= max_results:
            break
    return kept
