"""Display values derived from the raw metric and node collections.

Everything here is a pure function of its arguments; nothing is cached.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from .models.metric_row import MetricRow
from .models.node_record import NodeRecord


@dataclass(frozen=True)
class LastUpdated:
    time: str
    date_text: str


def active_node_count(nodes: Sequence[NodeRecord]) -> int:
    return len(nodes)


def average_peer_count(nodes: Sequence[NodeRecord]) -> float:
    """Mean peer_count rounded to one decimal; 0 when there are no nodes."""
    if not nodes:
        return 0
    return round(sum(node.peer_count for node in nodes) / len(nodes), 1)


def distinct_peer_ids(nodes: Sequence[NodeRecord]) -> List[str]:
    """Unique peer ids in the order they first appear."""
    return list(dict.fromkeys(node.peer_id for node in nodes))


def total_nodes(metrics: Sequence[MetricRow]) -> int:
    return sum(row.new_records_count for row in metrics)


def version_distribution(nodes: Sequence[NodeRecord]) -> Dict[str, int]:
    """Count of records per version, keyed in order of first encounter."""
    counts: Dict[str, int] = {}
    for node in nodes:
        counts[node.version] = counts.get(node.version, 0) + 1
    return counts


def version_bar_width(count: int, active_nodes: int) -> float:
    """Bar width in percent of all active node records."""
    if not active_nodes:
        return 0.0
    return count / active_nodes * 100


def last_updated(nodes: Sequence[NodeRecord], now: Optional[datetime] = None) -> Optional[LastUpdated]:
    """
    Split the newest observation into a time of day and a relative day label.

    `nodes` is expected newest first, as fetched. Both the timestamp and `now`
    are compared in local time, so "Today" and "Yesterday" follow calendar days
    rather than a rolling 24 hour window.
    """
    if not nodes:
        return None
    stamp = _to_local(nodes[0].timestamp)
    today = _to_local(now or datetime.now().astimezone()).date()

    day = stamp.date()
    if day == today:
        date_text = "Today"
    elif day == today - timedelta(days=1):
        date_text = "Yesterday"
    else:
        date_text = stamp.strftime("%d.%m.%Y")
    return LastUpdated(time=stamp.strftime("%H:%M"), date_text=date_text)


def _to_local(value: datetime) -> datetime:
    # Naive values are taken to be local already.
    if value.tzinfo is None:
        return value
    return value.astimezone()
