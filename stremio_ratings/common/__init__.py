"""Shared utilities for the enrichment pipeline and the serving layer."""

from __future__ import annotations

from .errors import (
    EmptyOverlay,
    EnrichmentError,
    ImageDecodeFailure,
    MalformedRatingText,
    UpstreamUnavailable,
)
from .types import JSONValue
from .validation import require_non_negative, require_positive

__all__ = [
    "EmptyOverlay",
    "EnrichmentError",
    "ImageDecodeFailure",
    "JSONValue",
    "MalformedRatingText",
    "UpstreamUnavailable",
    "require_non_negative",
    "require_positive",
]
