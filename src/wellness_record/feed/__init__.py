"""Feed module.

This module loads the person feed and normalizes raw person records.
"""

from wellness_record.feed.loader import FeedLoadResult, load_feed, read_feed_records
from wellness_record.feed.normalizer import (
    NormalizationResult,
    Normalized,
    normalize,
    normalize_with_diagnostics,
    select_health_address,
)

__all__ = [
    "FeedLoadResult",
    "NormalizationResult",
    "Normalized",
    "load_feed",
    "normalize",
    "normalize_with_diagnostics",
    "read_feed_records",
    "select_health_address",
]
