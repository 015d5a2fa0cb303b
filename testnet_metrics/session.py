import asyncio
import itertools
import logging
from datetime import datetime
from typing import Optional, Set

from .loader import DataLoader, DataLoadError, Timeframe
from .state import (
    DashboardState,
    LoadFailed,
    LoadFinished,
    LoadStarted,
    MetricsLoaded,
    NodesLoaded,
    PeerPageChanged,
    SearchChanged,
    VersionPageChanged,
    reduce,
)
from .views import DashboardView, build_dashboard_view

log = logging.getLogger(__name__)


class DashboardSession:
    """
    Holds the dashboard state for the running process.

    The state is only ever replaced through `dispatch`, which runs the pure
    reducer. Load cycles run as asyncio tasks; overlapping cycles are allowed
    and the request token decides whose results stick.
    """

    def __init__(self, loader: DataLoader, state: Optional[DashboardState] = None):
        self.loader = loader
        self.state = state or DashboardState()
        self._tokens = itertools.count(self.state.request_token + 1)
        self._tasks: Set[asyncio.Task] = set()

    def dispatch(self, event) -> DashboardState:
        self.state = reduce(self.state, event)
        return self.state

    def refresh(self) -> asyncio.Task:
        """Start a new load cycle for the current timeframe."""
        return self._start_load(self.state.timeframe)

    def change_timeframe(self, timeframe: Timeframe) -> asyncio.Task:
        return self._start_load(Timeframe(timeframe))

    def search(self, query: str) -> DashboardState:
        return self.dispatch(SearchChanged(query=query))

    def goto_version_page(self, page: int) -> DashboardState:
        return self.dispatch(VersionPageChanged(page=page))

    def goto_peer_page(self, page: int) -> DashboardState:
        return self.dispatch(PeerPageChanged(page=page))

    def view(self, now: Optional[datetime] = None) -> DashboardView:
        return build_dashboard_view(self.state, now=now)

    async def wait_idle(self) -> None:
        """Wait for every load cycle started so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _start_load(self, timeframe: Timeframe) -> asyncio.Task:
        token = next(self._tokens)
        self.dispatch(LoadStarted(token=token, timeframe=timeframe))
        task = asyncio.create_task(self._run_load(token, timeframe))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_load(self, token: int, timeframe: Timeframe) -> None:
        try:
            await self.loader.load(
                timeframe,
                on_metrics=lambda rows: self.dispatch(MetricsLoaded(token=token, rows=tuple(rows))),
                on_nodes=lambda rows: self.dispatch(NodesLoaded(token=token, rows=tuple(rows))),
            )
        except DataLoadError as e:
            self.dispatch(LoadFailed(token=token, message=e.message))
        except Exception as e:
            log.exception(f"Unexpected error in load cycle {token}: {e}")
            self.dispatch(LoadFailed(token=token, message=f"Error fetching data: {e}"))
        finally:
            self.dispatch(LoadFinished(token=token))
