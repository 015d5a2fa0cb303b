import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from .models.metric_row import MetricRow
from .models.node_record import NodeRecord
from .store import DataSourceError, SupabaseStore

log = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data available"


class Timeframe(str, Enum):
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_YEAR = "1y"

    @property
    def limit(self) -> int:
        """Number of daily metric rows requested for this window."""
        return TIMEFRAME_LIMITS[self]

    @property
    def label(self) -> str:
        return TIMEFRAME_LABELS[self]


TIMEFRAME_LIMITS = {
    Timeframe.LAST_7_DAYS: 7,
    Timeframe.LAST_30_DAYS: 30,
    Timeframe.LAST_YEAR: 365,
}

TIMEFRAME_LABELS = {
    Timeframe.LAST_7_DAYS: "Last 7 Days",
    Timeframe.LAST_30_DAYS: "Last 30 Days",
    Timeframe.LAST_YEAR: "Last Year",
}


class DataLoadError(Exception):
    """A load cycle failed; the message is shown to the user as-is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class LoadResult:
    metrics: List[MetricRow]
    nodes: List[NodeRecord]


MetricsCallback = Callable[[List[MetricRow]], None]
NodesCallback = Callable[[List[NodeRecord]], None]


class DataLoader:
    """
    Runs one load cycle against the data store.

    Both queries are issued together. `on_metrics` / `on_nodes` are invoked as
    soon as the corresponding query returns, so callers can reveal sections
    before the whole cycle is over.
    """

    def __init__(self, store: SupabaseStore):
        self.store = store

    async def load(
        self,
        timeframe: Timeframe,
        on_metrics: Optional[MetricsCallback] = None,
        on_nodes: Optional[NodesCallback] = None,
    ) -> LoadResult:
        timeframe = Timeframe(timeframe)
        log.info(f"Loading dashboard data for timeframe {timeframe.value}")

        metrics_task = asyncio.create_task(_notify(self.store.fetch_metrics(timeframe.limit), on_metrics))
        nodes_task = asyncio.create_task(_notify(self.store.fetch_node_records(), on_nodes))
        try:
            metrics, nodes = await asyncio.gather(metrics_task, nodes_task)
        except DataSourceError as e:
            log.error(f"Error fetching data: {e}")
            raise DataLoadError(str(e)) from e
        finally:
            # The first failure ends the cycle; the other query must not report afterwards.
            await _cancel_pending(metrics_task, nodes_task)

        if not metrics and not nodes:
            log.error(f"Error fetching data: {NO_DATA_MESSAGE}")
            raise DataLoadError(NO_DATA_MESSAGE)

        log.info(f"Loaded {len(metrics)} metric rows and {len(nodes)} node records")
        return LoadResult(metrics=metrics, nodes=nodes)


async def _cancel_pending(*tasks: asyncio.Task) -> None:
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    # Collects the outcome of every task so no exception is left unretrieved.
    await asyncio.gather(*tasks, return_exceptions=True)


async def _notify(query: Awaitable[list], callback) -> list:
    rows = await query
    if callback is not None:
        callback(rows)
    return rows
