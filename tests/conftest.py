from datetime import date, datetime

import httpx
import pytest
from fastapi.testclient import TestClient

import testnet_metrics.config as config
from testnet_metrics.main import app
from testnet_metrics.models.metric_row import MetricRow
from testnet_metrics.models.node_record import NodeRecord

METRIC_ROWS = [
    {"id": 1, "date": "2024-01-01", "new_records_count": 3},
    {"id": 2, "date": "2024-01-02", "new_records_count": 5},
]

NODE_ROWS = [
    {"id": 11, "peer_id": "Peer1", "version": "1.0", "peer_count": 4, "timestamp": "2024-01-02T10:00:00+00:00"},
    {"id": 10, "peer_id": "Peer1", "version": "1.0", "peer_count": 6, "timestamp": "2024-01-02T09:00:00+00:00"},
    {"id": 9, "peer_id": "peer2", "version": "1.1", "peer_count": 2, "timestamp": "2024-01-01T08:00:00+00:00"},
]


def metric(day: str, count: int) -> MetricRow:
    return MetricRow(date=date.fromisoformat(day), new_records_count=count)


def node(peer_id: str, version: str = "1.0", peer_count: int = 1, timestamp: datetime = None) -> NodeRecord:
    return NodeRecord(
        peer_id=peer_id,
        version=version,
        peer_count=peer_count,
        timestamp=timestamp or datetime(2024, 1, 2, 10, 0),
    )


def rest_handler(metrics=METRIC_ROWS, nodes=NODE_ROWS, seen=None):
    """Build a MockTransport handler that answers like the PostgREST endpoint."""
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.url.path.endswith("/rest/v1/metrics"):
            limit = int(request.url.params["limit"])
            return httpx.Response(200, json=metrics[:limit])
        if request.url.path.endswith("/rest/v1/node_records"):
            return httpx.Response(200, json=nodes)
        return httpx.Response(404, json={"message": f"relation {request.url.path} does not exist"})
    return handler


@pytest.fixture
def make_client(monkeypatch):
    """TestClient factory wired to a fake data store."""
    monkeypatch.setattr(config, "SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setattr(config, "SUPABASE_ANON_KEY", "anon-key")

    def _make(handler) -> TestClient:
        app.state.http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return TestClient(app)

    yield _make
    app.state.http_client = None
    app.state.session = None
