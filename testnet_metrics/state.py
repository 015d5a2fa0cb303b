"""
Dashboard state and the events that change it.

`DashboardState` is immutable. `reduce(state, event)` returns the next state
and never touches the previous one, so every transition can be checked in
isolation. Load events carry the request token of the cycle that produced
them; anything from a cycle other than the latest one is dropped.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Optional, Tuple, Type

from . import aggregator, search
from .loader import Timeframe
from .models.metric_row import MetricRow
from .models.node_record import NodeRecord
from .pagination import clamp_page

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardState:
    timeframe: Timeframe = Timeframe.LAST_7_DAYS
    metrics: Tuple[MetricRow, ...] = ()
    nodes: Tuple[NodeRecord, ...] = ()
    metrics_loading: bool = True
    nodes_loading: bool = True
    loading: bool = False
    error: Optional[str] = None
    version_page: int = 1
    peer_page: int = 1
    search_query: str = ""
    request_token: int = 0

    # Versions and peers are derived from the node records and finish with them.
    @property
    def versions_loading(self) -> bool:
        return self.nodes_loading

    @property
    def peers_loading(self) -> bool:
        return self.nodes_loading

    @property
    def component_loading(self) -> Dict[str, bool]:
        return {
            "metrics": self.metrics_loading,
            "nodes": self.nodes_loading,
            "versions": self.versions_loading,
            "peers": self.peers_loading,
        }


# --- Events ---

@dataclass(frozen=True)
class LoadStarted:
    token: int
    timeframe: Timeframe


@dataclass(frozen=True)
class MetricsLoaded:
    token: int
    rows: Tuple[MetricRow, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NodesLoaded:
    token: int
    rows: Tuple[NodeRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LoadFailed:
    token: int
    message: str


@dataclass(frozen=True)
class LoadFinished:
    token: int


@dataclass(frozen=True)
class SearchChanged:
    query: str


@dataclass(frozen=True)
class VersionPageChanged:
    page: int


@dataclass(frozen=True)
class PeerPageChanged:
    page: int


LOAD_EVENTS = (MetricsLoaded, NodesLoaded, LoadFailed, LoadFinished)


# --- Transitions ---

def _load_started(state: DashboardState, event: LoadStarted) -> DashboardState:
    if event.token <= state.request_token:
        return state
    return replace(
        state,
        request_token=event.token,
        timeframe=Timeframe(event.timeframe),
        error=None,
        metrics_loading=True,
        nodes_loading=True,
        loading=True,
    )


def _metrics_loaded(state: DashboardState, event: MetricsLoaded) -> DashboardState:
    return replace(state, metrics=tuple(event.rows), metrics_loading=False)


def _nodes_loaded(state: DashboardState, event: NodesLoaded) -> DashboardState:
    return replace(state, nodes=tuple(event.rows), nodes_loading=False)


def _load_failed(state: DashboardState, event: LoadFailed) -> DashboardState:
    return replace(state, error=event.message)


def _load_finished(state: DashboardState, event: LoadFinished) -> DashboardState:
    return replace(state, loading=False)


def _search_changed(state: DashboardState, event: SearchChanged) -> DashboardState:
    return replace(state, search_query=event.query, peer_page=1)


def _version_page_changed(state: DashboardState, event: VersionPageChanged) -> DashboardState:
    total = len(aggregator.version_distribution(state.nodes))
    return replace(state, version_page=clamp_page(event.page, total))


def _peer_page_changed(state: DashboardState, event: PeerPageChanged) -> DashboardState:
    peer_ids = search.filter_peer_ids(aggregator.distinct_peer_ids(state.nodes), state.search_query)
    return replace(state, peer_page=clamp_page(event.page, len(peer_ids)))


_HANDLERS: Dict[Type, Callable] = {
    LoadStarted: _load_started,
    MetricsLoaded: _metrics_loaded,
    NodesLoaded: _nodes_loaded,
    LoadFailed: _load_failed,
    LoadFinished: _load_finished,
    SearchChanged: _search_changed,
    VersionPageChanged: _version_page_changed,
    PeerPageChanged: _peer_page_changed,
}


def reduce(state: DashboardState, event) -> DashboardState:
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown dashboard event: {event!r}")
    if isinstance(event, LOAD_EVENTS) and event.token != state.request_token:
        log.debug(f"Dropping stale {type(event).__name__} from request {event.token} (current {state.request_token})")
        return state
    return handler(state, event)
