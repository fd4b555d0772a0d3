"""FastAPI application serving the Stremio addon protocol."""

from __future__ import annotations

import importlib.metadata
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from ..catalog import BatchEnricher, CatalogKind, CatalogRequest
from ..common.types import JSONValue
from ..config import Settings
from ..enrichment import EnrichmentOrchestrator
from .manifest import build_manifest

logger = logging.getLogger(__name__)

try:
    __version__ = importlib.metadata.version("stremio-ratings")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"


class AddonHandlers:
    """Meta and catalog handlers sharing one HTTP client for the app lifetime."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self.orchestrator = EnrichmentOrchestrator(client, settings)
        self.batch_enricher = BatchEnricher(client, self.orchestrator, settings)

    async def meta(self, content_type: str, item_id: str) -> dict[str, JSONValue]:
        logger.info("Received meta request: %s %s", content_type, item_id)
        try:
            record = await self.orchestrator.enrich(item_id, content_type)
        except Exception:
            logger.exception("Error in meta handler for %s", item_id)
            record = None
        return {"meta": record.to_payload() if record is not None else {}}

    async def catalog(
        self, content_type: str, catalog_id: str, extra: str | None = None
    ) -> dict[str, JSONValue]:
        logger.info(
            "Received catalog request: %s %s %s", content_type, catalog_id, extra
        )
        try:
            kind = CatalogKind(catalog_id)
        except ValueError:
            logger.warning("Unknown catalog id %s", catalog_id)
            return {"metas": []}
        request = CatalogRequest.from_extra(kind, content_type, extra)
        try:
            page = await self.batch_enricher.enrich_page(request)
        except Exception:
            logger.exception("Error in catalog handler for %s", catalog_id)
            return {"metas": []}
        return page.model_dump()


def create_app(
    settings: Settings | None = None, *, client: httpx.AsyncClient | None = None
) -> FastAPI:
    """Build the addon application.

    When *client* is supplied it is used as-is and left open on shutdown;
    otherwise a client is created for the app lifespan.
    """

    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        http_client = client or httpx.AsyncClient(
            timeout=settings.request_timeout, follow_redirects=True
        )
        app.state.handlers = AddonHandlers(http_client, settings)
        try:
            yield
        finally:
            if client is None:
                await http_client.aclose()

    app = FastAPI(title="stremio-ratings", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    manifest = build_manifest(__version__)

    @app.get("/manifest.json")
    async def get_manifest() -> JSONResponse:
        return JSONResponse(manifest)

    @app.get("/meta/{content_type}/{item_id}.json")
    async def get_meta(request: Request, content_type: str, item_id: str) -> JSONResponse:
        handlers: AddonHandlers = request.app.state.handlers
        return JSONResponse(await handlers.meta(content_type, item_id))

    @app.get("/catalog/{content_type}/{catalog_id}.json")
    async def get_catalog(
        request: Request, content_type: str, catalog_id: str
    ) -> JSONResponse:
        handlers: AddonHandlers = request.app.state.handlers
        return JSONResponse(await handlers.catalog(content_type, catalog_id))

    @app.get("/catalog/{content_type}/{catalog_id}/{extra}.json")
    async def get_catalog_with_extra(
        request: Request, content_type: str, catalog_id: str, extra: str
    ) -> JSONResponse:
        handlers: AddonHandlers = request.app.state.handlers
        return JSONResponse(await handlers.catalog(content_type, catalog_id, extra))

    return app


settings = Settings()
app = create_app(settings)

__all__ = ["AddonHandlers", "app", "create_app", "settings"]
