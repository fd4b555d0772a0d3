"""Catalog listings from Cinemeta, enriched item by item."""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Mapping, TypeVar
from urllib.parse import parse_qsl, quote

import httpx

from .common.errors import UpstreamUnavailable
from .common.types import CatalogPage, EnrichedRecord
from .common.validation import require_non_negative
from .config import Settings
from .enrichment import EnrichmentOrchestrator
from .enrichment.sources import fetch_catalog_page

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogKind(str, enum.Enum):
    TRENDING = "trending"
    FEATURED = "featured"
    SEARCH = "search"
    BEST_YOY = "best_yoy"


def _coerce_skip(value: object) -> int:
    try:
        skip = int(str(value))
    except (TypeError, ValueError):
        return 0
    return max(skip, 0)


@dataclass(frozen=True, slots=True)
class CatalogRequest:
    """A catalog page request as issued by a Stremio client."""

    kind: CatalogKind
    content_type: str
    genre: str | None = None
    search: str | None = None
    skip: int = 0

    @classmethod
    def from_extra(
        cls,
        kind: CatalogKind | str,
        content_type: str,
        extra: Mapping[str, object] | str | None = None,
    ) -> "CatalogRequest":
        """Build a request from Stremio ``extra`` arguments.

        *extra* is either a mapping or the raw path segment Stremio appends to
        catalog URLs, e.g. ``genre=Action&skip=100``.
        """

        if isinstance(extra, str):
            values: Mapping[str, object] = dict(parse_qsl(extra))
        else:
            values = extra or {}
        genre = values.get("genre")
        search = values.get("search")
        return cls(
            kind=CatalogKind(kind),
            content_type=content_type,
            genre=str(genre) if genre else None,
            search=str(search) if search else None,
            skip=_coerce_skip(values.get("skip", 0)),
        )


def build_catalog_url(request: CatalogRequest, settings: Settings) -> str:
    """Return the upstream Cinemeta URL serving *request*."""

    base = settings.cinemeta_catalog_url
    content_type = request.content_type
    skip = request.skip
    if request.kind is CatalogKind.SEARCH:
        query = quote(request.search or "", safe="")
        return (
            f"{settings.cinemeta_url}/catalog/{content_type}/top/"
            f"search={query}&skip={skip}.json"
        )
    if request.kind is CatalogKind.BEST_YOY:
        year = quote(request.genre or str(date.today().year), safe="")
        return f"{base}/year/catalog/{content_type}/year/genre={year}&skip={skip}.json"

    genre = quote(request.genre or "", safe="")
    catalog_id = "top" if request.kind is CatalogKind.TRENDING else "imdbRating"
    return (
        f"{base}/{catalog_id}/catalog/{content_type}/{catalog_id}/"
        f"genre={genre}&skip={skip}.json"
    )


class BatchEnricher:
    """Fan enrichment out over every item of a catalog page.

    Items are enriched concurrently and written back to their original
    positions. An item whose enrichment fails keeps its upstream stub, and
    every page-level field other than ``metas`` passes through untouched.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        orchestrator: EnrichmentOrchestrator,
        settings: Settings,
        *,
        max_concurrency: int | None = None,
    ) -> None:
        self._client = client
        self._orchestrator = orchestrator
        self._settings = settings
        limit = settings.max_concurrency if max_concurrency is None else max_concurrency
        self._max_concurrency = require_non_negative(limit, name="max_concurrency")

    async def enrich_page(self, request: CatalogRequest) -> CatalogPage:
        """Fetch the requested page and enrich its items."""

        url = build_catalog_url(request, self._settings)
        logger.info("Fetching %s catalog: %s", request.kind.value, url)
        try:
            page = await fetch_catalog_page(self._client, url)
        except UpstreamUnavailable as exc:
            logger.error("Error fetching %s catalog: %s", request.kind.value, exc)
            return CatalogPage()
        return await self.enrich_stubs(page, request.content_type)

    async def enrich_stubs(self, page: CatalogPage, content_type: str) -> CatalogPage:
        """Return *page* with each stub replaced by its enriched record."""

        stubs = page.metas
        if not stubs:
            return page
        semaphore = (
            asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None
        )
        tasks = [
            self._bounded(self._enrich_stub(stub, content_type), semaphore)
            for stub in stubs
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        metas: list[dict[str, object]] = []
        enriched_count = 0
        for index, (stub, result) in enumerate(zip(stubs, results)):
            if isinstance(result, BaseException):
                logger.error(
                    "Enrichment failed for catalog item %d (%s): %s",
                    index,
                    stub.get("id"),
                    result,
                    exc_info=result,
                )
                metas.append(stub)
            elif result is None:
                metas.append(stub)
            else:
                metas.append(result.to_payload())
                enriched_count += 1
        logger.info("Enriched %d/%d catalog items", enriched_count, len(stubs))
        return page.model_copy(update={"metas": metas})

    async def _enrich_stub(
        self, stub: Mapping[str, object], content_type: str
    ) -> EnrichedRecord | None:
        item_id = stub.get("id")
        if not isinstance(item_id, str) or not item_id:
            return None
        return await self._orchestrator.enrich(item_id, content_type)

    @staticmethod
    async def _bounded(
        awaitable: Awaitable[T], semaphore: asyncio.Semaphore | None
    ) -> T:
        if semaphore is None:
            return await awaitable
        async with semaphore:
            return await awaitable


__all__ = [
    "BatchEnricher",
    "CatalogKind",
    "CatalogRequest",
    "build_catalog_url",
]
