"""Lane ordering: comparator and fractional order-index assignment.

Containers in a lane are ordered by ``order_index`` ascending (a missing
index sorts last, as MAX_SAFE_INTEGER), ties broken by ``created_at``
descending. A container placed into a lane gets an index derived from its
new neighbours only, so no sibling is ever renumbered:

    empty lane          → 0
    only a next item    → next - 1
    only a prev item    → prev + 1
    between two items   → (prev + next) / 2

The same functions run server-side (authoritative placement) and in the API
client (optimistic placement), so both agree with what the board renders.
"""

import math
from datetime import datetime
from typing import Iterable, Sequence

# Largest integer a JS client can hold exactly; used as "no index yet"
MAX_SAFE_INTEGER = 2**53 - 1

POSITIONS = ("top", "bottom")


def order_value(container) -> float:
    value = getattr(container, "order_index", None)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return MAX_SAFE_INTEGER
    if math.isnan(value):
        return MAX_SAFE_INTEGER
    return value


def _created_ts(container) -> float:
    created = getattr(container, "created_at", None)
    if isinstance(created, datetime):
        return created.timestamp()
    return 0.0


def lane_sort_key(container) -> tuple[float, float]:
    return order_value(container), -_created_ts(container)


def sort_lane(containers: Iterable) -> list:
    """Return ``containers`` in board order."""
    return sorted(containers, key=lane_sort_key)


def compute_order_index(
    lane_members: Iterable,
    position: str = "top",
    exclude_id: str | None = None,
) -> float:
    """Index for a container dropped at ``position`` of a lane.

    ``lane_members`` are the current members of the destination lane; the
    container being moved is skipped via ``exclude_id`` so moving within a
    lane does not count the container as its own neighbour.
    """
    if position not in POSITIONS:
        raise ValueError(f"Unsupported position {position!r}; expected 'top' or 'bottom'")

    ordered = sort_lane(c for c in lane_members if getattr(c, "id", None) != exclude_id)
    idx = 0 if position == "top" else len(ordered)

    prev = ordered[idx - 1] if idx > 0 else None
    nxt = ordered[idx] if idx < len(ordered) else None
    return index_between(prev, nxt)


def index_between(prev, nxt) -> float:
    """Index for a slot whose neighbours are ``prev`` and ``nxt`` (either may be None)."""
    if prev is None and nxt is None:
        return 0
    if prev is None:
        return order_value(nxt) - 1
    if nxt is None:
        return order_value(prev) + 1
    return (order_value(prev) + order_value(nxt)) / 2


def top_order_index(indices: Iterable[float | None]) -> float:
    """Server-side default placement: one above the current lane minimum.

    ``indices`` are the stored order indexes of the lane; ``None`` entries
    are ignored. An empty lane yields 0.
    """
    numeric = [
        v for v in indices
        if isinstance(v, (int, float)) and not isinstance(v, bool) and not math.isnan(v)
    ]
    if not numeric:
        return 0
    return min(numeric) - 1


def is_explicit_index(value: object) -> bool:
    """True when a client-supplied order index can be stored as-is."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def renumbered_indices(lane: Sequence, step: float = 1.0) -> dict[str, float]:
    """Evenly spaced indexes for a lane, preserving its current order.

    Only used by the manual ``renumber-lanes`` maintenance command; the
    write path never renumbers.
    """
    return {c.id: i * step for i, c in enumerate(sort_lane(lane))}
