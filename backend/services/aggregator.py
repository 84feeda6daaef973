"""
Aggregator Class - Groups log entries by endpoint

This module performs the single pass over a batch, collecting raw counts and
samples per endpoint URL and per sub-dimension (origin IP, query string, ASN).
"""

from typing import Dict, Iterable, Optional, TypeVar

from models.data_models import (
    NO_QUERY_KEY,
    EndpointAccumulator,
    LogEntry,
    OriginIPAccumulator,
    QueryParamAccumulator,
)

K = TypeVar("K")

# Cache outcome -> accumulator counter; UPDATING/REVALIDATED are not counted
CACHE_COUNTERS = {
    "HIT": "cache_hits",
    "MISS": "cache_misses",
    "EXPIRED": "cache_expires",
    "BYPASS": "cache_bypasses",
    "STALE": "cache_stale",
}


def _increment(counts: Dict[K, int], key: Optional[K]) -> None:
    if key is None:
        return
    counts[key] = counts.get(key, 0) + 1


class Aggregator:
    """
    Aggregates log entries into per-endpoint accumulators.
    Responsibilities:
    - Group entries by endpoint URL (first-seen order)
    - Count cache outcomes, WAF actions, status codes, methods and ASNs
    - Collect numeric samples for later statistics
    - Track per-origin-IP and per-query-string breakdowns

    Every call starts from an empty map; nothing is kept between batches.
    """

    def aggregate(self, entries: Iterable[LogEntry]) -> Dict[str, EndpointAccumulator]:
        """Build one accumulator per distinct URL"""
        buckets: Dict[str, EndpointAccumulator] = {}

        for e in entries:
            acc = buckets.get(e.url)
            if acc is None:
                acc = buckets[e.url] = EndpointAccumulator()
            self.add(acc, e)

        return buckets

    def add(self, acc: EndpointAccumulator, e: LogEntry) -> None:
        """Fold a single entry into its endpoint accumulator"""
        acc.requests += 1

        counter = CACHE_COUNTERS.get(e.cache_status or "")
        if counter:
            setattr(acc, counter, getattr(acc, counter) + 1)

        # Origin duration is recorded even when 0 (cache hits)
        if e.bytes is not None:
            acc.bytes.append(e.bytes)
        if e.origin_duration_ms is not None:
            acc.origin_ms.append(e.origin_duration_ms)
        if e.bot_score is not None:
            acc.bot_scores.append(e.bot_score)
        if e.threat_score is not None:
            acc.threat_scores.append(e.threat_score)

        _increment(acc.waf_actions, e.waf_action)
        _increment(acc.status_codes, e.status_code)
        _increment(acc.methods, e.method)
        _increment(acc.asn_counts, e.asn)

        if e.origin_ip:
            self._add_origin_ip(acc, e)
        self._add_query(acc, e)

    @staticmethod
    def _add_origin_ip(acc: EndpointAccumulator, e: LogEntry) -> None:
        ip = acc.origin_ips.get(e.origin_ip)
        if ip is None:
            ip = acc.origin_ips[e.origin_ip] = OriginIPAccumulator()

        ip.requests += 1
        if e.origin_duration_ms is not None:
            ip.response_times.append(e.origin_duration_ms)

        status = e.status_code
        if status is not None:
            if 400 <= status < 500:
                ip.client_errors += 1
            elif status >= 500:
                ip.server_errors += 1

    @staticmethod
    def _add_query(acc: EndpointAccumulator, e: LogEntry) -> None:
        key = e.query or NO_QUERY_KEY
        q = acc.query_params.get(key)
        if q is None:
            q = acc.query_params[key] = QueryParamAccumulator()

        q.requests += 1
        if e.cache_status == "HIT":
            q.cache_hits += 1
        # End-to-end time, not origin time
        if e.response_time_ms is not None:
            q.response_times.append(e.response_time_ms)
