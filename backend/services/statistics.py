"""
Statistics Engine

Pure conversion of a numeric sample list into mean, median, p95 and p99.
Percentiles are exact (linear interpolation between adjacent ranks) and are
computed from the full sample list, so memory grows with the batch size.
"""

from typing import Sequence

from models.data_models import Statistics
from utils.helpers import mean, quantile


def compute_statistics(samples: Sequence[float]) -> Statistics:
    """Summarize samples; the input sequence is never mutated"""
    if not samples:
        return Statistics(mean=0.0, median=0.0, p95=0.0, p99=0.0)

    if len(samples) == 1:
        only = float(samples[0])
        return Statistics(mean=only, median=only, p95=only, p99=only)

    ordered = sorted(samples)
    return Statistics(
        mean=mean(samples),
        median=quantile(ordered, 0.50),
        p95=quantile(ordered, 0.95),
        p99=quantile(ordered, 0.99),
    )
