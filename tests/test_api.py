"""Tests for the FastAPI routes in main.py."""

import json
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from helpers import make_batch, make_log

from main import API_PREFIX, app


@pytest.fixture
def client():
    return TestClient(app)


# ---------------------------------------------------------------------------
# analyze
# ---------------------------------------------------------------------------


def test_analyze_returns_metric_array(client):
    logs = [make_log(URL="/api/endpoint", CacheStatus=s) for s in ["HIT", "MISS", "HIT", "EXPIRED", "BYPASS"]]
    res = client.post(f"{API_PREFIX}/analyze", json=make_batch(logs))
    assert res.status_code == 200
    body = res.json()
    assert isinstance(body, list)
    assert len(body) == 1
    m = body[0]
    assert m["EndpointURL"] == "/api/endpoint"
    assert m["TotalRequests"] == 5
    assert m["CacheHits"] == 2
    assert m["CacheMisses"] == 1
    assert m["CacheExpires"] == 1
    assert m["CacheBypasses"] == 1
    assert m["CacheStale"] == 0
    assert m["WAFActions"] == {"ALLOW": 5}
    assert m["StatusCodeDistribution"] == {"200": 5}
    assert m["MethodDistribution"] == {"GET": 5}
    assert m["TopASNs"] == {"13335": 5}
    assert m["OriginIPDistribution"]["1.2.3.4"]["requests"] == 5
    assert m["QueryParamImpact"]["(none)"] == {"requests": 5, "cacheHitRate": 0.4, "avgResponseMs": 100}
    assert set(m["ByteAmounts"]) == {"Median", "Mean", "NinetyFifthPercentile", "NinetyNinthPercentile"}


def test_analyze_ignores_bytes_too_large_for_float(client):
    body = json.dumps(make_batch([make_log(Bytes=1), make_log()])).replace('"Bytes": 1}', '"Bytes": 1' + "0" * 400 + "}")
    res = client.post(f"{API_PREFIX}/analyze", content=body)
    assert res.status_code == 200
    m = res.json()[0]
    assert m["TotalRequests"] == 2
    assert m["ByteAmounts"]["Mean"] == 1024


def test_analyze_deeply_nested_body_is_500(client):
    res = client.post(f"{API_PREFIX}/analyze", content='{"logs": ' + "[" * 100000 + "]" * 100000 + "}")
    assert res.status_code == 500
    assert res.json()["error"] is True


def test_analyze_empty_batch(client):
    res = client.post(f"{API_PREFIX}/analyze", json=make_batch([]))
    assert res.status_code == 200
    assert res.json() == []


def test_analyze_invalid_json_is_500(client):
    res = client.post(f"{API_PREFIX}/analyze", content=b"invalid json")
    assert res.status_code == 500
    body = res.json()
    assert body["error"] is True
    assert body["message"].startswith("Analysis failed:")


def test_analyze_missing_metadata_is_500(client):
    res = client.post(f"{API_PREFIX}/analyze", json={"logs": []})
    assert res.status_code == 500
    assert res.json()["error"] is True
    assert "metadata" in res.json()["message"]


# ---------------------------------------------------------------------------
# test + health + routing
# ---------------------------------------------------------------------------


def test_connectivity_probe(client):
    res = client.get(f"{API_PREFIX}/test")
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["message"]
    assert datetime.fromisoformat(body["timestamp"]).tzinfo is not None


def test_health_reports_config(client):
    res = client.get(f"{API_PREFIX}/health")
    assert res.status_code == 200
    assert res.json()["config"]["top_origin_ips"] == 5


def test_unknown_route_uses_error_shape(client):
    res = client.get(f"{API_PREFIX}/nope")
    assert res.status_code == 404
    assert res.json() == {"error": True, "message": f"Route not found: {API_PREFIX}/nope"}
