"""
BatchParser Class - Handles decoding, validation and normalization

This module turns a raw analyze request body into a validated AnalyzeBatch
of structured LogEntry objects.
"""

import json
from typing import Any, Dict, List, Union

from models.data_models import AnalyzeBatch, BatchMetadata, LogEntry
from models.errors import ParseError, ValidationError
from utils.helpers import parse_ts, safe_float, safe_int, safe_str

REQUIRED_METADATA = ("fileCount", "totalEntries", "timestamp")


class BatchParser:
    """
    Parses raw request payloads into validated batches.
    Responsibilities:
    - Decode JSON payloads
    - Check the batch shape (logs sequence + metadata fields)
    - Normalize individual CDN log records
    """

    @staticmethod
    def parse_json(payload: Union[bytes, str]) -> Dict[str, Any]:
        """Decode a JSON object, raising ParseError if that is not possible"""
        if isinstance(payload, bytes):
            try:
                payload = payload.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise ParseError(f"Payload is not valid UTF-8: {exc}") from exc
        try:
            obj = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}") from exc
        except (ValueError, RecursionError) as exc:
            # oversized integer literals, nesting too deep to decode
            raise ParseError(f"Invalid JSON: {exc}") from exc
        if not isinstance(obj, dict):
            raise ParseError(f"Expected a JSON object, got {type(obj).__name__}")
        return obj

    def validate(self, raw: Dict[str, Any]) -> AnalyzeBatch:
        """
        Check the decoded batch and normalize its records.
        Individual record fields are coerced leniently, never rejected.
        """
        logs = raw.get("logs")
        if not isinstance(logs, list):
            raise ValidationError("Batch must contain a 'logs' array")

        metadata = raw.get("metadata")
        if not isinstance(metadata, dict):
            raise ValidationError("Batch must contain a 'metadata' object")

        missing = [key for key in REQUIRED_METADATA if metadata.get(key) is None]
        if missing:
            raise ValidationError(f"Metadata missing required fields: {', '.join(missing)}")

        file_count = safe_int(metadata["fileCount"])
        total_entries = safe_int(metadata["totalEntries"])
        if file_count is None or total_entries is None:
            raise ValidationError("Metadata 'fileCount' and 'totalEntries' must be integers")

        entries: List[LogEntry] = []
        for i, record in enumerate(logs):
            if not isinstance(record, dict):
                raise ValidationError(f"Log entry {i} is not an object")
            entries.append(self.normalize(record))

        return AnalyzeBatch(
            logs=entries,
            metadata=BatchMetadata(
                file_count=file_count,
                total_entries=total_entries,
                timestamp=str(metadata["timestamp"]),
            ),
        )

    @staticmethod
    def normalize(raw: Dict[str, Any]) -> LogEntry:
        """Normalize a raw CDN log dict into a structured LogEntry"""
        url = raw.get("URL")
        query = raw.get("ClientRequestQuery")

        # Enum-like fields are kept verbatim so unknown values stay visible
        return LogEntry(
            edge_start=parse_ts(raw.get("EdgeStartTimestamp")),
            edge_end=parse_ts(raw.get("EdgeEndTimestamp")),
            method=safe_str(raw.get("Method")),
            url=str(url) if url is not None else "",
            query=str(query) if query is not None else "",
            status_code=safe_int(raw.get("EdgeResponseStatus")),
            cache_status=safe_str(raw.get("CacheStatus")),
            origin_ip=safe_str(raw.get("OriginIP")),
            origin_tls_version=safe_str(raw.get("OriginTLSVersion")),
            origin_duration_ms=safe_float(raw.get("OriginResponseDurationMs")),
            waf_action=safe_str(raw.get("WAFAction")),
            bot_score=safe_float(raw.get("BotScore")),
            threat_score=safe_float(raw.get("ThreatScore")),
            asn=safe_int(raw.get("ASN")),
            client_tls_version=safe_str(raw.get("ClientSSLProtocol")),
            client_cipher=safe_str(raw.get("ClientCipher")),
            response_time_ms=safe_float(raw.get("ResponseTimeMs")),
            bytes=safe_float(raw.get("Bytes")),
        )
