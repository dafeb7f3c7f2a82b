"""Management CLI for board maintenance.

Usage:
    python -m drayboard.cli list-lanes        # Lane sizes and index ranges
    python -m drayboard.cli renumber-lanes    # Respace every lane to 0, 1, 2 …

Order indexes are never renumbered by the API; repeated inserts at the same
spot halve the gap each time. renumber-lanes is an operator-run cleanup that
rewrites each lane to evenly spaced integers while keeping its order.
"""

import logging
import sys
from collections import defaultdict

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from drayboard.config import settings
from drayboard.models.container import Container
from drayboard.services.lanes import lane_of
from drayboard.services.ordering import order_value, renumbered_indices

logger = logging.getLogger("drayboard.cli")


def _load_lanes(session: Session) -> dict:
    lanes = defaultdict(list)
    for container in session.execute(select(Container)).scalars():
        lanes[lane_of(container)].append(container)
    return lanes


def list_lanes():
    engine = create_engine(settings.database_url_sync)
    with Session(engine) as session:
        lanes = _load_lanes(session)
        for key in sorted(lanes, key=lambda k: (k.status, k.yard_id or "")):
            members = lanes[key]
            values = [order_value(c) for c in members]
            label = f"{key.status}/{key.yard_id}" if key.yard_id else key.status
            print(f"  {label}: {len(members)} container(s), index {min(values)} .. {max(values)}")
        print(f"\n{len(lanes)} lane(s)")


def renumber_lanes():
    """Rewrite every lane's order indexes to 0..n-1, preserving order."""
    engine = create_engine(settings.database_url_sync)
    with Session(engine) as session:
        lanes = _load_lanes(session)
        for key, members in lanes.items():
            new_indices = renumbered_indices(members)
            for container in members:
                container.order_index = new_indices[container.id]
            logger.info("Renumbered lane %s (%d containers)", key, len(members))
            print(f"  {key.status} {key.yard_id or ''}: {len(members)} renumbered")
        session.commit()


if __name__ == "__main__":
    cmd = sys.argv[1] if len(sys.argv) > 1 else ""
    if cmd == "list-lanes":
        list_lanes()
    elif cmd == "renumber-lanes":
        renumber_lanes()
    else:
        print("Usage: python -m drayboard.cli [list-lanes|renumber-lanes]")
