"""
AnalysisEngine Class - Runs one batch through the pipeline

payload -> BatchParser -> Aggregator -> MetricAssembler -> AnalysisResult
"""

import logging
from typing import Any, Dict, Optional, Union

from models.data_models import AnalysisResult, TopKConfig
from models.errors import AnalysisError
from services.aggregator import Aggregator
from services.assembler import MetricAssembler
from services.parser import BatchParser
from services.summarizer import TopKSummarizer

logger = logging.getLogger(__name__)


class AnalysisEngine:
    """
    Synchronous, stateless batch analysis.
    Responsibilities:
    - Decode and validate the batch
    - Aggregate entries per endpoint
    - Assemble per-endpoint metrics
    - Report parse/validation failures as an explicit result
    """

    def __init__(self, config: Optional[TopKConfig] = None, parser: Optional[BatchParser] = None):
        self.config = config or TopKConfig()
        self.parser = parser or BatchParser()
        self.aggregator = Aggregator()
        self.assembler = MetricAssembler(TopKSummarizer(self.config))

    def analyze(self, payload: Union[bytes, str, Dict[str, Any]]) -> AnalysisResult:
        """Analyze a raw body (bytes/str) or an already-decoded batch dict"""
        try:
            raw = payload if isinstance(payload, dict) else self.parser.parse_json(payload)
            batch = self.parser.validate(raw)
        except AnalysisError as exc:
            logger.warning("Rejected batch (%s): %s", type(exc).__name__, exc)
            return AnalysisResult.failure(exc)

        meta = batch.metadata
        logger.info("Analyzing %d log entries from %d files", meta.total_entries, meta.file_count)
        if meta.total_entries != len(batch.logs):
            logger.debug(
                "Metadata reports %d entries but batch holds %d",
                meta.total_entries,
                len(batch.logs),
            )

        buckets = self.aggregator.aggregate(batch.logs)
        metrics = self.assembler.assemble_all(buckets)

        logger.info("Produced metrics for %d endpoints", len(metrics))
        return AnalysisResult.success(metrics)
