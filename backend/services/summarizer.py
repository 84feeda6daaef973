"""
TopKSummarizer Class - Bounds high-cardinality dimensions

This module reduces unbounded per-endpoint maps (ASNs, origin IPs, query
strings) to small ranked views sized by a TopKConfig.
"""

from typing import Dict, List, Tuple, TypeVar

from models.data_models import (
    OriginIPAccumulator,
    OriginIPStat,
    QueryParamAccumulator,
    QueryParamStat,
    TopKConfig,
)
from utils.helpers import mean

K = TypeVar("K")
V = TypeVar("V")


def _rate(part: int, total: int) -> float:
    return part / total if total else 0.0


class TopKSummarizer:
    """
    Converts frequency and accumulator maps into bounded, ranked maps.
    Responsibilities:
    - Rank entries by request count (descending, ties keep insertion order)
    - Drop origin IPs and query strings seen fewer than min_requests times
    - Derive averages and rates for the entries that are kept
    """

    def __init__(self, config: TopKConfig):
        self.config = config

    @staticmethod
    def _rank(items: List[Tuple[K, V]], count_of, limit: int) -> List[Tuple[K, V]]:
        # sorted() is stable, so equal counts keep first-seen order
        return sorted(items, key=lambda kv: count_of(kv[1]), reverse=True)[:limit]

    def top_asns(self, asn_counts: Dict[int, int]) -> Dict[int, int]:
        """Top ASNs by request count; no minimum-count filter"""
        ranked = self._rank(list(asn_counts.items()), lambda count: count, self.config.top_asns)
        return {int(asn): count for asn, count in ranked}

    def origin_ips(self, origin_ips: Dict[str, OriginIPAccumulator]) -> Dict[str, OriginIPStat]:
        """Busiest origin IPs with average response time and 4xx/5xx rates"""
        eligible = [
            (ip, data) for ip, data in origin_ips.items()
            if data.requests >= self.config.min_requests
        ]
        ranked = self._rank(eligible, lambda data: data.requests, self.config.top_origin_ips)

        return {
            ip: OriginIPStat(
                requests=data.requests,
                avg_response_ms=mean(data.response_times),
                client_error_rate=_rate(data.client_errors, data.requests),
                server_error_rate=_rate(data.server_errors, data.requests),
            )
            for ip, data in ranked
        }

    def query_params(self, query_params: Dict[str, QueryParamAccumulator]) -> Dict[str, QueryParamStat]:
        """Most frequent query strings with cache-hit rate and average response time"""
        eligible = [
            (query, data) for query, data in query_params.items()
            if data.requests >= self.config.min_requests
        ]
        ranked = self._rank(eligible, lambda data: data.requests, self.config.top_query_params)

        return {
            query: QueryParamStat(
                requests=data.requests,
                cache_hit_rate=_rate(data.cache_hits, data.requests),
                avg_response_ms=mean(data.response_times),
            )
            for query, data in ranked
        }
