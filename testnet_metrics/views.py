from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from . import aggregator, search
from .loader import Timeframe
from .pagination import page_count, paginate
from .state import DashboardState

NO_CHART_DATA = "No data available for the selected timeframe"
NO_VERSION_DATA = "No version data available"
NO_PEERS = "No active peers available"
NO_MATCHING_PEERS = "No matching peer IDs found"


class StatCard(BaseModel):
    title: str
    value: Optional[str] = None
    detail: Optional[str] = Field(default=None, description="Secondary text, e.g. the relative day of Last Updated.")
    loading: bool = False


class ChartPoint(BaseModel):
    date: str
    label: str
    value: int


class ChartSection(BaseModel):
    loading: bool
    points: List[ChartPoint] = []
    empty_message: Optional[str] = None


class PageControls(BaseModel):
    page: int
    total_pages: int
    has_previous: bool
    has_next: bool


class VersionRow(BaseModel):
    version: str
    count: int
    bar_width: float = Field(description="Share of all active node records, in percent.")


class VersionSection(BaseModel):
    loading: bool
    rows: List[VersionRow] = []
    pagination: Optional[PageControls] = None
    empty_message: Optional[str] = None


class PeerSection(BaseModel):
    loading: bool
    query: str = ""
    peer_ids: List[str] = []
    pagination: Optional[PageControls] = None
    empty_message: Optional[str] = None


class TimeframeOption(BaseModel):
    value: str
    label: str
    selected: bool


class DashboardView(BaseModel):
    timeframe: str
    timeframes: List[TimeframeOption]
    refresh_disabled: bool
    loading: bool
    error: Optional[str] = None
    component_loading: dict
    stats: List[StatCard] = []
    chart: Optional[ChartSection] = None
    versions: Optional[VersionSection] = None
    peers: Optional[PeerSection] = None


def _page_controls(page: int, total_items: int) -> PageControls:
    total_pages = page_count(total_items)
    return PageControls(
        page=page,
        total_pages=total_pages,
        has_previous=page > 1,
        has_next=page < total_pages,
    )


def _format_average(nodes) -> str:
    if not nodes:
        return "0"
    return f"{aggregator.average_peer_count(nodes):.1f}"


def _stat_cards(state: DashboardState, now: Optional[datetime]) -> List[StatCard]:
    nodes = state.nodes
    last = aggregator.last_updated(nodes, now=now)
    return [
        StatCard(title="Active Nodes", value=str(aggregator.active_node_count(nodes)), loading=state.nodes_loading),
        StatCard(title="Average Peer Count", value=_format_average(nodes), loading=state.nodes_loading),
        StatCard(title="Total Nodes", value=str(aggregator.total_nodes(state.metrics)), loading=state.metrics_loading),
        StatCard(
            title="Last Updated",
            value=last.time if last else "N/A",
            detail=last.date_text if last else None,
            loading=state.nodes_loading,
        ),
    ]


def _chart_section(state: DashboardState) -> ChartSection:
    if state.metrics_loading:
        return ChartSection(loading=True)
    if not state.metrics:
        return ChartSection(loading=False, empty_message=NO_CHART_DATA)
    points = [
        ChartPoint(date=row.date.isoformat(), label=f"{row.date:%b} {row.date.day}", value=row.new_records_count)
        for row in state.metrics
    ]
    return ChartSection(loading=False, points=points)


def _version_section(state: DashboardState) -> VersionSection:
    if state.versions_loading:
        return VersionSection(loading=True)
    distribution = aggregator.version_distribution(state.nodes)
    if not distribution:
        return VersionSection(loading=False, empty_message=NO_VERSION_DATA)
    active = aggregator.active_node_count(state.nodes)
    entries = list(distribution.items())
    rows = [
        VersionRow(version=version, count=count, bar_width=aggregator.version_bar_width(count, active))
        for version, count in paginate(entries, state.version_page)
    ]
    return VersionSection(loading=False, rows=rows, pagination=_page_controls(state.version_page, len(entries)))


def _peer_section(state: DashboardState) -> PeerSection:
    query = state.search_query
    if state.peers_loading:
        return PeerSection(loading=True, query=query)
    peer_ids = aggregator.distinct_peer_ids(state.nodes)
    if not peer_ids:
        return PeerSection(loading=False, query=query, empty_message=NO_PEERS)
    matches = search.filter_peer_ids(peer_ids, query)
    if search.has_active_query(query) and not matches:
        return PeerSection(loading=False, query=query, empty_message=NO_MATCHING_PEERS)
    return PeerSection(
        loading=False,
        query=query,
        peer_ids=paginate(matches, state.peer_page),
        pagination=_page_controls(state.peer_page, len(matches)),
    )


def build_dashboard_view(state: DashboardState, now: Optional[datetime] = None) -> DashboardView:
    """Everything the page shows, derived from the state alone."""
    view = DashboardView(
        timeframe=state.timeframe.value,
        timeframes=[
            TimeframeOption(value=tf.value, label=tf.label, selected=tf == state.timeframe)
            for tf in Timeframe
        ],
        refresh_disabled=state.loading,
        loading=state.loading,
        error=state.error,
        component_loading=state.component_loading,
    )
    if state.error:
        # The error banner replaces every section.
        return view
    view.stats = _stat_cards(state, now)
    view.chart = _chart_section(state)
    view.versions = _version_section(state)
    view.peers = _peer_section(state)
    return view
