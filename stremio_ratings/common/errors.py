"""Failure taxonomy for the enrichment pipeline.

None of these errors escape :class:`stremio_ratings.enrichment.EnrichmentOrchestrator`;
each is recovered at the smallest scope that can fall back to unenriched data.
"""

from __future__ import annotations


class EnrichmentError(Exception):
    """Base class for recoverable enrichment failures."""


class UpstreamUnavailable(EnrichmentError):
    """A collaborator request failed at the transport, status, or parse level."""


class MalformedRatingText(EnrichmentError):
    """No line of the scraped block produced a delimited score/label pair."""


class ImageDecodeFailure(EnrichmentError):
    """Poster bytes could not be decoded or reported no usable dimensions."""


class EmptyOverlay(EnrichmentError):
    """None of the extracted rating sources maps to a renderable badge."""


__all__ = [
    "EmptyOverlay",
    "EnrichmentError",
    "ImageDecodeFailure",
    "MalformedRatingText",
    "UpstreamUnavailable",
]
