from dataclasses import replace

import httpx
import pytest

import testnet_metrics.config as config
from testnet_metrics.main import build_session
from tests.conftest import rest_handler


def test_version(make_client):
    with make_client(rest_handler()) as client:
        response = client.get("/api/version")
    assert response.status_code == 200
    assert response.json() == {"version": config.VERSION}


def test_refresh_loads_both_collections(make_client):
    with make_client(rest_handler()) as client:
        response = client.post("/api/refresh", params={"wait": True})
        assert response.status_code == 202
        view = client.get("/api/dashboard").json()

    assert view["error"] is None
    assert not view["refresh_disabled"]
    stats = {card["title"]: card["value"] for card in view["stats"]}
    assert stats["Active Nodes"] == "3"
    assert stats["Total Nodes"] == "8"
    assert stats["Average Peer Count"] == "4.0"
    assert view["versions"]["rows"][0] == {"version": "1.0", "count": 2, "bar_width": pytest.approx(200 / 3)}
    assert view["peers"]["peer_ids"] == ["Peer1", "peer2"]


def test_empty_data_store_shows_error(make_client):
    with make_client(rest_handler(metrics=[], nodes=[])) as client:
        view = client.post("/api/refresh", params={"wait": True}).json()
        page = client.get("/")

    assert view["error"] == "No data available"
    assert view["stats"] == []
    assert page.status_code == 200
    assert "Error loading data" in page.text
    assert "No data available" in page.text


def test_query_failure_shows_backend_message(make_client):
    def handler(request):
        return httpx.Response(401, json={"message": "Invalid API key"})

    with make_client(handler) as client:
        view = client.post("/api/refresh", params={"wait": True}).json()
    assert view["error"] == "Invalid API key"


def test_timeframe_change_reloads_with_new_limit(make_client):
    seen = []
    with make_client(rest_handler(seen=seen)) as client:
        response = client.put("/api/timeframe", params={"wait": True}, json={"timeframe": "1y"})
        assert response.status_code == 202
        assert response.json()["timeframe"] == "1y"

        bad = client.put("/api/timeframe", json={"timeframe": "2w"})
        assert bad.status_code == 422

    limits = [r.url.params["limit"] for r in seen if r.url.path.endswith("/metrics")]
    assert "365" in limits


def test_search_and_pages(make_client):
    with make_client(rest_handler()) as client:
        client.post("/api/refresh", params={"wait": True})

        view = client.put("/api/search", json={"query": "PEER1"}).json()
        assert view["peers"]["peer_ids"] == ["Peer1"]
        assert view["peers"]["pagination"]["page"] == 1

        view = client.put("/api/pages/versions", json={"page": 5}).json()
        assert view["versions"]["pagination"]["page"] == 1

        missing = client.put("/api/pages/nodes", json={"page": 1})
        assert missing.status_code == 404


def test_info_dialog_content(make_client):
    with make_client(rest_handler()) as client:
        info = client.get("/api/info").json()
    assert info["title"] == "Testnet Metrics"
    headings = [p["heading"] for p in info["faq"]]
    assert "Don't wish to provide data?" in headings


def test_html_page_and_form_controls(make_client):
    with make_client(rest_handler()) as client:
        client.post("/api/refresh", params={"wait": True})

        page = client.get("/")
        assert page.status_code == 200
        assert "Version Distribution" in page.text
        assert "Peer1" in page.text
        assert "<polyline" in page.text
        assert "Page 1 of 1" in page.text

        redirect = client.post("/search", data={"q": "nomatch"}, follow_redirects=False)
        assert redirect.status_code == 303
        assert redirect.headers["location"] == "/"
        assert "No matching peer IDs found" in client.get("/").text

        assert client.post("/timeframe", data={"timeframe": "bogus"}, follow_redirects=False).status_code == 400


def test_missing_connection_settings_fail_fast(monkeypatch):
    monkeypatch.setattr(config, "SUPABASE_URL", "")
    monkeypatch.setattr(config, "SUPABASE_ANON_KEY", "")
    with pytest.raises(config.ConfigError, match="SUPABASE_URL, SUPABASE_ANON_KEY"):
        build_session()


def test_require_connection_settings_strips_trailing_slash():
    assert config.require_connection_settings("https://x.supabase.co/", "k") == ("https://x.supabase.co", "k")


def test_html_page_while_nodes_are_loading(make_client):
    with make_client(rest_handler()) as client:
        client.post("/api/refresh", params={"wait": True})
        session = client.app.state.session
        session.state = replace(session.state, nodes_loading=True)

        page = client.get("/")

    assert page.status_code == 200
    assert '<meta http-equiv="refresh" content="1">' in page.text
    assert 'class="skeleton"' in page.text
    assert 'class="value-skeleton"' in page.text
    # Metrics are in, so the chart is already drawn
    assert "<polyline" in page.text
    assert "Peer1" not in page.text


def test_html_page_without_pending_loads_does_not_reload(make_client):
    with make_client(rest_handler()) as client:
        client.post("/api/refresh", params={"wait": True})
        page = client.get("/")
    assert 'http-equiv="refresh"' not in page.text
