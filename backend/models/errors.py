"""
Error Types

Failures the analysis engine can report before aggregation starts.
"""


class AnalysisError(Exception):
    """Base class for batch-level failures."""


class ParseError(AnalysisError):
    """Raw payload could not be decoded into a batch structure."""


class ValidationError(AnalysisError):
    """Decoded batch is missing required fields."""
