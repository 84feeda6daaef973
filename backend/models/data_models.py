"""
Data Models (DTOs - Data Transfer Objects)

This module contains all dataclass definitions used throughout the application:
input records, the per-endpoint accumulators built during one aggregation
pass, and the immutable metrics returned to callers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

# Recognized enum values for CDN log fields
CACHE_STATUSES = ("HIT", "MISS", "EXPIRED", "BYPASS", "STALE", "UPDATING", "REVALIDATED")
HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")

NO_QUERY_KEY = "(none)"


@dataclass(frozen=True)
class LogEntry:
    """Represents a single normalized CDN access-log record"""
    edge_start: Optional[datetime]
    edge_end: Optional[datetime]
    method: Optional[str]
    url: str
    query: str
    status_code: Optional[int]
    cache_status: Optional[str]
    origin_ip: Optional[str]
    origin_tls_version: Optional[str]
    origin_duration_ms: Optional[float]
    waf_action: Optional[str]
    bot_score: Optional[float]
    threat_score: Optional[float]
    asn: Optional[int]
    client_tls_version: Optional[str]
    client_cipher: Optional[str]
    response_time_ms: Optional[float]
    bytes: Optional[float]


@dataclass(frozen=True)
class BatchMetadata:
    """Informational metadata sent alongside a batch"""
    file_count: int
    total_entries: int
    timestamp: str


@dataclass(frozen=True)
class AnalyzeBatch:
    """A validated batch ready for aggregation"""
    logs: List[LogEntry]
    metadata: BatchMetadata


@dataclass(frozen=True)
class TopKConfig:
    """Bounds applied when summarizing high-cardinality dimensions"""
    top_asns: int = 10
    top_query_params: int = 10
    top_origin_ips: int = 5
    min_requests: int = 5

    def __post_init__(self) -> None:
        for name in ("top_asns", "top_query_params", "top_origin_ips", "min_requests"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")

    @classmethod
    def from_env(cls) -> "TopKConfig":
        """Build config from TOP_K_* / MIN_REQUESTS_THRESHOLD environment variables"""
        defaults = cls()
        return cls(
            top_asns=int(os.getenv("TOP_K_ASN", defaults.top_asns)),
            top_query_params=int(os.getenv("TOP_K_QUERY_PARAMS", defaults.top_query_params)),
            top_origin_ips=int(os.getenv("TOP_K_ORIGIN_IPS", defaults.top_origin_ips)),
            min_requests=int(os.getenv("MIN_REQUESTS_THRESHOLD", defaults.min_requests)),
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "top_asns": self.top_asns,
            "top_query_params": self.top_query_params,
            "top_origin_ips": self.top_origin_ips,
            "min_requests": self.min_requests,
        }


# ──────────────────────────────────────────────────────────────────────────────
# Accumulators (mutable, live for a single aggregation pass)
# ──────────────────────────────────────────────────────────────────────────────

@dataclass
class OriginIPAccumulator:
    requests: int = 0
    response_times: List[float] = field(default_factory=list)
    client_errors: int = 0
    server_errors: int = 0


@dataclass
class QueryParamAccumulator:
    requests: int = 0
    cache_hits: int = 0
    response_times: List[float] = field(default_factory=list)


@dataclass
class EndpointAccumulator:
    """Raw counts and samples collected for one endpoint URL"""
    requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    cache_expires: int = 0
    cache_bypasses: int = 0
    cache_stale: int = 0
    bytes: List[float] = field(default_factory=list)
    origin_ms: List[float] = field(default_factory=list)
    bot_scores: List[float] = field(default_factory=list)
    threat_scores: List[float] = field(default_factory=list)
    waf_actions: Dict[str, int] = field(default_factory=dict)
    status_codes: Dict[int, int] = field(default_factory=dict)
    methods: Dict[str, int] = field(default_factory=dict)
    asn_counts: Dict[int, int] = field(default_factory=dict)
    origin_ips: Dict[str, OriginIPAccumulator] = field(default_factory=dict)
    query_params: Dict[str, QueryParamAccumulator] = field(default_factory=dict)


# ──────────────────────────────────────────────────────────────────────────────
# Output metrics (immutable)
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Statistics:
    """Summary statistics over one sample list"""
    mean: float
    median: float
    p95: float
    p99: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "Median": self.median,
            "Mean": self.mean,
            "NinetyFifthPercentile": self.p95,
            "NinetyNinthPercentile": self.p99,
        }


@dataclass(frozen=True)
class OriginIPStat:
    requests: int
    avg_response_ms: float
    client_error_rate: float
    server_error_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requests": self.requests,
            "avgResponseMs": self.avg_response_ms,
            "clientErrorRate": self.client_error_rate,
            "serverErrorRate": self.server_error_rate,
        }


@dataclass(frozen=True)
class QueryParamStat:
    requests: int
    cache_hit_rate: float
    avg_response_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requests": self.requests,
            "cacheHitRate": self.cache_hit_rate,
            "avgResponseMs": self.avg_response_ms,
        }


@dataclass(frozen=True)
class EndpointMetric:
    """Per-endpoint performance, caching and security metrics"""
    endpoint_url: str
    total_requests: int
    cache_hits: int
    cache_misses: int
    cache_expires: int
    cache_bypasses: int
    cache_stale: int
    origin_response_times: Statistics
    byte_amounts: Statistics
    bot_scores: Statistics
    threat_scores: Statistics
    waf_actions: Dict[str, int]
    status_codes: Dict[int, int]
    methods: Dict[str, int]
    top_asns: Dict[int, int]
    origin_ip_distribution: Dict[str, OriginIPStat]
    query_param_impact: Dict[str, QueryParamStat]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the wire field names; numeric map keys become strings"""
        return {
            "EndpointURL": self.endpoint_url,
            "TotalRequests": self.total_requests,
            "CacheHits": self.cache_hits,
            "CacheMisses": self.cache_misses,
            "CacheExpires": self.cache_expires,
            "CacheBypasses": self.cache_bypasses,
            "CacheStale": self.cache_stale,
            "OriginResponseTimes": self.origin_response_times.to_dict(),
            "ByteAmounts": self.byte_amounts.to_dict(),
            "WAFActions": dict(self.waf_actions),
            "BotScores": self.bot_scores.to_dict(),
            "ThreatScores": self.threat_scores.to_dict(),
            "TopASNs": {str(asn): count for asn, count in self.top_asns.items()},
            "OriginIPDistribution": {
                ip: stat.to_dict() for ip, stat in self.origin_ip_distribution.items()
            },
            "QueryParamImpact": {
                query: stat.to_dict() for query, stat in self.query_param_impact.items()
            },
            "StatusCodeDistribution": {
                str(code): count for code, count in self.status_codes.items()
            },
            "MethodDistribution": dict(self.methods),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Explicit success/failure outcome of one analysis call"""
    ok: bool
    metrics: List[EndpointMetric] = field(default_factory=list)
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def success(cls, metrics: List[EndpointMetric]) -> "AnalysisResult":
        return cls(ok=True, metrics=metrics)

    @classmethod
    def failure(cls, error: Exception) -> "AnalysisResult":
        return cls(ok=False, error_type=type(error).__name__, error_message=str(error))

    def to_json(self) -> List[Dict[str, Any]]:
        return [m.to_dict() for m in self.metrics]
