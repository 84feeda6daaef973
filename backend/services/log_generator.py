"""
Scenario Log Generator

Produces synthetic CDN access-log records (Cloudflare field names) for demos
and tests. Each scenario reproduces a traffic pattern the analyzer should
surface: a DDoS, a misbehaving load balancer, a cache-busting query string
and a slow origin endpoint.
"""

import argparse
import json
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from models.data_models import CACHE_STATUSES, HTTP_METHODS

URLS = [
    "/",
    "/images/logo.png",
    "/api/data",
    "/blog/post1",
    "/css/styles.css",
    "/js/app.js",
    "/api/users",
    "/products/123",
    "/dashboard",
]
STATUS_CODES = [200, 200, 200, 304, 301, 404, 500, 502, 403]
WAF_CHOICES = ["ALLOW", "ALLOW", "ALLOW", "BLOCK", "CHALLENGE", "LOG"]
ORIGIN_IPS = ["192.0.2.1", "192.0.2.2", "192.0.2.3", "198.51.100.1"]
ORIGIN_TLS = ["TLSv1.2", "TLSv1.3"]
CLIENT_TLS = ["TLSv1.2", "TLSv1.3", "TLSv1.1"]
CIPHERS = [
    "ECDHE-RSA-AES128-GCM-SHA256",
    "ECDHE-RSA-AES256-GCM-SHA384",
    "ECDHE-RSA-CHACHA20-POLY1305",
    "AES128-GCM-SHA256",
    "AES256-GCM-SHA384",
]
QUERIES = ["", "?id=123", "?page=1", "?sort=desc&limit=10", "?utm_source=google"]
ASNS = [15169, 16509, 13335, 8075, 20940]  # Google, Amazon, Cloudflare, Microsoft, Akamai

LogRecord = Dict[str, Any]


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def base_log(rng: random.Random, now: Optional[datetime] = None, **overrides: Any) -> LogRecord:
    """Random record within the last hour; keyword overrides replace fields"""
    now = now or datetime.now(timezone.utc)
    start = now - timedelta(milliseconds=rng.random() * 3_600_000)
    processing_ms = rng.random() * 500
    end = start + timedelta(milliseconds=processing_ms)

    cache_status = rng.choice(CACHE_STATUSES)
    cached = cache_status in ("HIT", "STALE", "REVALIDATED")

    log = {
        "EdgeStartTimestamp": _iso(start),
        "EdgeEndTimestamp": _iso(end),
        "ClientRequestQuery": rng.choice(QUERIES),
        "EdgeResponseStatus": rng.choice(STATUS_CODES),
        "CacheStatus": cache_status,
        "OriginIP": None if cached else rng.choice(ORIGIN_IPS),
        "OriginTLSVersion": None if cached else rng.choice(ORIGIN_TLS),
        "OriginResponseDurationMs": 0 if cached else round(rng.random() * 200),
        "WAFAction": rng.choice(WAF_CHOICES),
        "BotScore": rng.randrange(100),
        "ThreatScore": rng.randrange(100),
        "ASN": rng.choice(ASNS),
        "ClientSSLProtocol": rng.choice(CLIENT_TLS),
        "ClientCipher": rng.choice(CIPHERS),
        "Method": rng.choice(HTTP_METHODS),
        "URL": rng.choice(URLS),
        "ResponseTimeMs": round(processing_ms),
        "Bytes": rng.randrange(50_000),
    }
    log.update(overrides)
    return log


def ddos_attack(rng: random.Random, count: int = 100) -> List[LogRecord]:
    """High volume from a few ASNs against one URL, high bot scores, many WAF blocks"""
    attacker_asns = [12345, 23456, 34567]
    logs = []
    for _ in range(count):
        if rng.random() < 0.7:
            logs.append(base_log(
                rng,
                URL="/api/data",
                Method="GET",
                ASN=rng.choice(attacker_asns),
                BotScore=80 + rng.randrange(20),
                ThreatScore=70 + rng.randrange(30),
                WAFAction="BLOCK" if rng.random() < 0.6 else "CHALLENGE",
                EdgeResponseStatus=403 if rng.random() < 0.5 else 429,
                ResponseTimeMs=round(rng.random() * 100),
            ))
        else:
            logs.append(base_log(
                rng,
                Method="GET",
                BotScore=rng.randrange(30),
                ThreatScore=rng.randrange(30),
                WAFAction="ALLOW",
                ResponseTimeMs=round(rng.random() * 100),
            ))
    return logs


def load_balancer_issue(rng: random.Random, count: int = 50) -> List[LogRecord]:
    """Most traffic lands on one degraded origin IP"""
    bad_origin = "192.0.2.1"
    healthy = ["192.0.2.2", "192.0.2.3"]
    logs = []
    for _ in range(count):
        to_bad = rng.random() < 0.8
        origin_ms = 800 + rng.random() * 2000 if to_bad else 50 + rng.random() * 150
        logs.append(base_log(
            rng,
            CacheStatus="MISS",
            OriginIP=bad_origin if to_bad else rng.choice(healthy),
            OriginTLSVersion=rng.choice(ORIGIN_TLS),
            OriginResponseDurationMs=round(origin_ms),
            ResponseTimeMs=round(origin_ms + rng.random() * 100),
            EdgeResponseStatus=502 if to_bad and rng.random() < 0.2 else 200,
            WAFAction="ALLOW",
            BotScore=rng.randrange(30),
            ThreatScore=rng.randrange(20),
        ))
    return logs


def cache_miss_query(rng: random.Random, count: int = 60) -> List[LogRecord]:
    """One query string defeats the cache on /api/users"""
    bad_query = "?user_id=dynamic"
    normal = ["", "?page=1", "?sort=desc"]
    logs = []
    for _ in range(count):
        bad = rng.random() < 0.6
        if bad:
            cache_status = "MISS"
        else:
            cache_status = "HIT" if rng.random() < 0.8 else "MISS"
        logs.append(base_log(
            rng,
            ClientRequestQuery=bad_query if bad else rng.choice(normal),
            URL="/api/users",
            CacheStatus=cache_status,
            OriginIP=rng.choice(ORIGIN_IPS) if bad else None,
            OriginTLSVersion=rng.choice(ORIGIN_TLS) if bad else None,
            OriginResponseDurationMs=round(100 + rng.random() * 200) if bad else 0,
            ResponseTimeMs=round(150 + rng.random() * 200) if bad else round(10 + rng.random() * 50),
            EdgeResponseStatus=200,
            WAFAction="ALLOW",
            BotScore=rng.randrange(30),
            ThreatScore=rng.randrange(20),
        ))
    return logs


def origin_response_spike(rng: random.Random, count: int = 50) -> List[LogRecord]:
    """/api/data origin times jump to seconds while other endpoints stay fast"""
    fast = ["/", "/images/logo.png", "/blog/post1"]
    logs = []
    for _ in range(count):
        slow = rng.random() < 0.5
        origin_ms = 1500 + rng.random() * 3000 if slow else 50 + rng.random() * 150
        logs.append(base_log(
            rng,
            URL="/api/data" if slow else rng.choice(fast),
            CacheStatus="MISS",
            OriginIP=rng.choice(ORIGIN_IPS),
            OriginTLSVersion=rng.choice(ORIGIN_TLS),
            OriginResponseDurationMs=round(origin_ms),
            ResponseTimeMs=round(origin_ms + rng.random() * 100),
            EdgeResponseStatus=504 if slow and rng.random() < 0.1 else 200,
            Method="POST" if slow else "GET",
            WAFAction="ALLOW",
            BotScore=rng.randrange(30),
            ThreatScore=rng.randrange(20),
        ))
    return logs


def normal_traffic(rng: random.Random, count: int = 50) -> List[LogRecord]:
    """Baseline traffic for comparison"""
    return [base_log(rng) for _ in range(count)]


SCENARIOS: Dict[str, Callable[..., List[LogRecord]]] = {
    "ddos_attack": ddos_attack,
    "load_balancer_issue": load_balancer_issue,
    "cache_miss_query": cache_miss_query,
    "origin_response_spike": origin_response_spike,
    "normal_traffic": normal_traffic,
}


def build_batch(logs: List[LogRecord], file_count: int = 1) -> Dict[str, Any]:
    """Wrap records into an analyze request body"""
    return {
        "logs": logs,
        "metadata": {
            "fileCount": file_count,
            "totalEntries": len(logs),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Generate scenario-based CDN log files")
    ap.add_argument("-o", "--output-dir", type=Path, default=Path("scenarios"),
                    help="Directory to write <scenario>.json files into")
    ap.add_argument("--seed", type=int, default=None, help="Random seed for reproducible output")
    ap.add_argument("--batch", action="store_true",
                    help="Wrap each file as an analyze request body with metadata")
    ap.add_argument("--only", choices=sorted(SCENARIOS), action="append",
                    help="Generate only the named scenario (repeatable)")
    args = ap.parse_args(argv)

    rng = random.Random(args.seed)
    args.output_dir.mkdir(parents=True, exist_ok=True)

    for name in args.only or list(SCENARIOS):
        logs = SCENARIOS[name](rng)
        data: Any = build_batch(logs) if args.batch else logs
        path = args.output_dir / f"{name}.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        print(f"Generated {path} ({len(logs)} log entries)")

    return 0


if __name__ == "__main__":
    sys.exit(main())
