"""
MetricAssembler Class - Builds EndpointMetric records

This module combines accumulator counts, sample statistics and top-K views
into one immutable EndpointMetric per endpoint.
"""

from typing import Dict, List

from models.data_models import EndpointAccumulator, EndpointMetric
from services.statistics import compute_statistics
from services.summarizer import TopKSummarizer


class MetricAssembler:
    """Turns accumulators into immutable per-endpoint metrics"""

    def __init__(self, summarizer: TopKSummarizer):
        self.summarizer = summarizer

    def assemble(self, url: str, acc: EndpointAccumulator) -> EndpointMetric:
        return EndpointMetric(
            endpoint_url=url,
            total_requests=acc.requests,
            cache_hits=acc.cache_hits,
            cache_misses=acc.cache_misses,
            cache_expires=acc.cache_expires,
            cache_bypasses=acc.cache_bypasses,
            cache_stale=acc.cache_stale,
            origin_response_times=compute_statistics(acc.origin_ms),
            byte_amounts=compute_statistics(acc.bytes),
            bot_scores=compute_statistics(acc.bot_scores),
            threat_scores=compute_statistics(acc.threat_scores),
            waf_actions=dict(acc.waf_actions),
            status_codes=dict(acc.status_codes),
            methods=dict(acc.methods),
            top_asns=self.summarizer.top_asns(acc.asn_counts),
            origin_ip_distribution=self.summarizer.origin_ips(acc.origin_ips),
            query_param_impact=self.summarizer.query_params(acc.query_params),
        )

    def assemble_all(self, buckets: Dict[str, EndpointAccumulator]) -> List[EndpointMetric]:
        """One metric per endpoint, in the accumulator map's (first-seen) order"""
        return [self.assemble(url, acc) for url, acc in buckets.items()]
