from __future__ import annotations

import asyncio
import logging
from typing import Mapping

import httpx

from ..common.errors import (
    EmptyOverlay,
    EnrichmentError,
    ImageDecodeFailure,
    UpstreamUnavailable,
)
from ..common.types import CanonicalRecord, EnrichedRecord
from ..config import Settings
from ..overlay import ImageCompositor, OverlayComposer, detect_mime_type
from ..ratings import RatingExtractor, format_ratings
from .sources import (
    encode_data_uri,
    extract_rating_region,
    fetch_meta,
    fetch_poster,
    fetch_rating_document,
)

LOGGER = logging.getLogger("stremio_ratings.enrichment")


def parse_imdb_id(item_id: str) -> str | None:
    """Return the IMDb title id from a Stremio id such as ``tt0903747:1:2``."""

    if not item_id.startswith("tt"):
        return None
    imdb_id = item_id.split(":", 1)[0]
    return imdb_id or None


class EnrichmentOrchestrator:
    """Drive a single title through fetch, rating extraction, and poster overlay.

    Each stage guards its own collaborator call. A failing stage is logged and
    the record assembled by the earlier stages is returned, so :meth:`enrich`
    never raises for upstream, parsing, or imaging problems.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        *,
        extractor: RatingExtractor | None = None,
        composer: OverlayComposer | None = None,
        compositor: ImageCompositor | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._extractor = extractor or RatingExtractor()
        self._composer = composer or OverlayComposer()
        self._compositor = compositor or ImageCompositor(
            assets_dir=settings.assets_dir,
            font_path=settings.font_path,
            font_size=settings.font_size,
        )
        self._logger = logger or LOGGER

    async def enrich(self, item_id: str, content_type: str) -> EnrichedRecord | None:
        """Fetch and enrich the title identified by *item_id*.

        Returns ``None`` when the id is not an IMDb id or Cinemeta has no record
        for it.
        """

        imdb_id = parse_imdb_id(item_id)
        if imdb_id is None:
            self._logger.debug("Skipping non-IMDb id %s", item_id)
            return None
        try:
            record = await fetch_meta(
                self._client, self._settings, imdb_id, content_type
            )
        except UpstreamUnavailable as exc:
            self._logger.error("Error fetching metadata for %s: %s", imdb_id, exc)
            return None
        if record is None:
            self._logger.info("No metadata found for %s", imdb_id)
            return None
        return await self.enrich_record(record, content_type)

    async def enrich_record(
        self, record: CanonicalRecord, content_type: str
    ) -> EnrichedRecord:
        """Run the rating and poster stages on an already fetched record."""

        enriched = EnrichedRecord.from_canonical(record)
        title = record.name.strip()
        if not title:
            self._logger.warning("Title not found for %s", record.id)
            return enriched

        try:
            document = await fetch_rating_document(
                self._client, self._settings, title, content_type
            )
        except UpstreamUnavailable as exc:
            self._logger.error("Error fetching ratings for %s: %s", record.id, exc)
            return enriched

        try:
            region = await asyncio.to_thread(
                extract_rating_region, document, self._settings.ratings_selector
            )
        except Exception:
            self._logger.exception("Failed to parse ratings document for %s", record.id)
            return enriched
        ratings = self._extractor.extract(region)
        if not ratings:
            self._logger.info("Ratings not found for %s", record.id)
            return enriched
        self._logger.debug("Ratings for %s: %s", record.id, ratings)

        description = f"{record.description or ''} {format_ratings(ratings)}"
        enriched = enriched.model_copy(
            update={"description": description, "ratings": ratings}
        )

        if not record.poster:
            return enriched
        try:
            poster_bytes = await fetch_poster(self._client, record.poster)
        except UpstreamUnavailable as exc:
            self._logger.warning("Error fetching poster for %s: %s", record.id, exc)
            return enriched

        try:
            composited = await asyncio.to_thread(
                self._render_poster, poster_bytes, ratings
            )
        except EnrichmentError as exc:
            self._logger.info("Keeping original poster for %s: %s", record.id, exc)
            return enriched
        mime_type = detect_mime_type(composited)
        return enriched.model_copy(
            update={"poster": encode_data_uri(composited, mime_type)}
        )

    def _render_poster(self, data: bytes, ratings: Mapping[str, str]) -> bytes:
        dimensions = self._compositor.dimensions(data)
        if dimensions is None:
            raise ImageDecodeFailure("poster could not be decoded")
        width, height = dimensions
        spec = self._composer.compose(width, height, ratings)
        if spec is None:
            raise EmptyOverlay(f"no badge for rating sources {sorted(ratings)}")
        composited = self._compositor.composite(data, spec)
        if composited is data:
            raise ImageDecodeFailure("poster overlay could not be composited")
        return composited


__all__ = ["EnrichmentOrchestrator", "parse_imdb_id"]
