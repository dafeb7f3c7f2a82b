"""Lane partitioning and board assembly.

A lane is the ordering domain of the board: the status alone, except for
AT_OTHER_YARD where every yard is its own lane. Inside a yard lane the
LOADED / EMPTY split is display-only; both halves share one ordering space.
"""

from dataclasses import dataclass, field
from typing import Iterable, NamedTuple

from drayboard.services.ordering import sort_lane
from drayboard.services.status import (
    BOARD_STATUSES,
    DEFAULT_STATUS,
    STATUS_LABELS,
    YARD_LANE_STATUS,
    YardStatus,
)

UNASSIGNED_YARD_LABEL = "Unassigned Yard"


class LaneKey(NamedTuple):
    status: str
    yard_id: str | None = None


def lane_key_for(status: str | None, yard_id: str | None = None) -> LaneKey:
    status = status or DEFAULT_STATUS
    if status == YARD_LANE_STATUS:
        return LaneKey(status, yard_id or None)
    return LaneKey(status, None)


def lane_of(container) -> LaneKey:
    return lane_key_for(getattr(container, "status", None), getattr(container, "yard_id", None))


def in_lane(container, key: LaneKey) -> bool:
    return lane_of(container) == key


def filter_lane(containers: Iterable, key: LaneKey) -> list:
    """Members of ``key`` in board order."""
    return sort_lane(c for c in containers if in_lane(c, key))


@dataclass
class YardGroup:
    key: str
    label: str
    yard_id: str | None
    known: bool
    loaded: list = field(default_factory=list)
    empty: list = field(default_factory=list)


@dataclass
class BoardColumn:
    status: str
    label: str
    containers: list = field(default_factory=list)
    yard_groups: list[YardGroup] = field(default_factory=list)


def group_yard_lanes(containers: Iterable, yards: Iterable) -> list[YardGroup]:
    """Split AT_OTHER_YARD containers by yard, then into loaded / empty.

    Every known yard gets a group, even when empty. A container pointing at
    a yard that no longer exists is grouped under its raw yard id rather
    than rejected.
    """
    groups: dict[str, YardGroup] = {}
    for yard in sorted(yards, key=lambda y: (y.name or "").lower()):
        groups[yard.id] = YardGroup(key=yard.id, label=yard.name, yard_id=yard.id, known=True)

    for c in containers:
        if (getattr(c, "status", None) or DEFAULT_STATUS) != YARD_LANE_STATUS:
            continue
        key = c.yard_id or "unassigned"
        group = groups.get(key)
        if group is None:
            label = c.yard_id or UNASSIGNED_YARD_LABEL
            group = YardGroup(key=key, label=label, yard_id=c.yard_id or None, known=False)
            groups[key] = group
        if c.yard_status == YardStatus.EMPTY.value:
            group.empty.append(c)
        else:
            group.loaded.append(c)

    for group in groups.values():
        group.loaded = sort_lane(group.loaded)
        group.empty = sort_lane(group.empty)
    return list(groups.values())


def build_board(containers: Iterable, yards: Iterable) -> list[BoardColumn]:
    """Board columns in display order, each sorted with the lane comparator."""
    containers = list(containers)
    by_status: dict[str, list] = {}
    for c in containers:
        by_status.setdefault(c.status or DEFAULT_STATUS, []).append(c)

    columns = []
    for status in BOARD_STATUSES:
        column = BoardColumn(status=status, label=STATUS_LABELS[status])
        members = by_status.get(status, [])
        if status == YARD_LANE_STATUS:
            column.yard_groups = group_yard_lanes(members, yards)
        else:
            column.containers = sort_lane(members)
        columns.append(column)
    return columns
