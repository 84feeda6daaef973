from __future__ import annotations

from typing import Any, Dict, List

from services.parser import BatchParser


def make_log(**overrides: Any) -> Dict[str, Any]:
    log = {
        "EdgeStartTimestamp": "2024-01-01T00:00:00Z",
        "EdgeEndTimestamp": "2024-01-01T00:00:01Z",
        "ClientRequestQuery": "",
        "EdgeResponseStatus": 200,
        "CacheStatus": "HIT",
        "OriginIP": "1.2.3.4",
        "OriginTLSVersion": "TLSv1.3",
        "OriginResponseDurationMs": 50,
        "WAFAction": "ALLOW",
        "BotScore": 10,
        "ThreatScore": 0,
        "ASN": 13335,
        "ClientSSLProtocol": "TLSv1.3",
        "ClientCipher": "AEAD-AES128-GCM-SHA256",
        "Method": "GET",
        "URL": "/api/test",
        "ResponseTimeMs": 100,
        "Bytes": 1024,
    }
    log.update(overrides)
    return log


def make_batch(logs: List[Dict[str, Any]], **metadata: Any) -> Dict[str, Any]:
    meta = {"fileCount": 1, "totalEntries": len(logs), "timestamp": "2024-01-01T00:00:00Z"}
    meta.update(metadata)
    return {"logs": logs, "metadata": meta}


def make_entries(*logs: Dict[str, Any]):
    return [BatchParser.normalize(log) for log in logs]
