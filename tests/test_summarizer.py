"""Tests for services.summarizer.TopKSummarizer."""

import pytest

from models.data_models import OriginIPAccumulator, QueryParamAccumulator, TopKConfig
from services.summarizer import TopKSummarizer


def _ip(requests, times=None, client=0, server=0):
    return OriginIPAccumulator(
        requests=requests,
        response_times=list(times or []),
        client_errors=client,
        server_errors=server,
    )


def _query(requests, hits=0, times=None):
    return QueryParamAccumulator(requests=requests, cache_hits=hits, response_times=list(times or []))


# ---------------------------------------------------------------------------
# ASNs
# ---------------------------------------------------------------------------


def test_top_asns_keeps_ten_highest_without_threshold():
    counts = {asn: asn for asn in range(1, 16)}
    top = TopKSummarizer(TopKConfig()).top_asns(counts)
    assert list(top) == list(range(15, 5, -1))


def test_top_asns_keeps_singletons_when_few():
    top = TopKSummarizer(TopKConfig()).top_asns({13335: 1, 15169: 3})
    assert top == {15169: 3, 13335: 1}


def test_ties_keep_first_seen_order():
    top = TopKSummarizer(TopKConfig(top_asns=2)).top_asns({7: 5, 3: 5, 9: 5})
    assert list(top) == [7, 3]


# ---------------------------------------------------------------------------
# origin IPs
# ---------------------------------------------------------------------------


def test_origin_ips_threshold_and_limit():
    ips = {f"10.0.0.{i}": _ip(i + 3) for i in range(8)}  # 3..10 requests
    out = TopKSummarizer(TopKConfig()).origin_ips(ips)
    assert len(out) == 5
    assert all(stat.requests >= 5 for stat in out.values())
    assert list(out) == ["10.0.0.7", "10.0.0.6", "10.0.0.5", "10.0.0.4", "10.0.0.3"]


def test_origin_ip_rates():
    out = TopKSummarizer(TopKConfig()).origin_ips(
        {"192.0.2.1": _ip(10, times=[100, 200], client=2, server=1)}
    )
    stat = out["192.0.2.1"]
    assert stat.avg_response_ms == 150
    assert stat.client_error_rate == pytest.approx(0.2)
    assert stat.server_error_rate == pytest.approx(0.1)
    assert stat.to_dict() == {
        "requests": 10,
        "avgResponseMs": 150,
        "clientErrorRate": stat.client_error_rate,
        "serverErrorRate": stat.server_error_rate,
    }


def test_origin_ip_without_samples_averages_zero():
    out = TopKSummarizer(TopKConfig()).origin_ips({"192.0.2.1": _ip(5)})
    assert out["192.0.2.1"].avg_response_ms == 0


def test_below_threshold_never_appears():
    out = TopKSummarizer(TopKConfig()).origin_ips({"192.0.2.1": _ip(4)})
    assert out == {}


# ---------------------------------------------------------------------------
# query strings
# ---------------------------------------------------------------------------


def test_query_params_threshold_limit_and_rates():
    queries = {f"?q={i}": _query(5 + i, hits=i, times=[10, 20]) for i in range(12)}
    queries["?rare"] = _query(4, hits=4)
    out = TopKSummarizer(TopKConfig()).query_params(queries)
    assert len(out) == 10
    assert "?rare" not in out
    assert list(out)[0] == "?q=11"
    stat = out["?q=11"]
    assert stat.requests == 16
    assert stat.cache_hit_rate == pytest.approx(11 / 16)
    assert stat.avg_response_ms == 15


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


def test_custom_config_changes_bounds():
    config = TopKConfig(top_asns=1, top_query_params=1, top_origin_ips=1, min_requests=1)
    summarizer = TopKSummarizer(config)
    assert summarizer.top_asns({1: 1, 2: 2}) == {2: 2}
    assert list(summarizer.origin_ips({"a": _ip(1), "b": _ip(2)})) == ["b"]
    assert list(summarizer.query_params({"x": _query(1)})) == ["x"]


def test_config_rejects_negative_values():
    with pytest.raises(ValueError):
        TopKConfig(top_asns=-1)


@pytest.mark.parametrize("value", [True, False])
def test_config_rejects_booleans(value):
    with pytest.raises(ValueError):
        TopKConfig(top_origin_ips=value)


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("TOP_K_ASN", "3")
    monkeypatch.setenv("MIN_REQUESTS_THRESHOLD", "2")
    config = TopKConfig.from_env()
    assert config.top_asns == 3
    assert config.min_requests == 2
    assert config.top_origin_ips == 5


def test_config_from_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("TOP_K_ORIGIN_IPS", "five")
    with pytest.raises(ValueError):
        TopKConfig.from_env()
