"""HTTP collaborators feeding the enrichment pipeline.

Every helper raises :class:`UpstreamUnavailable` for transport errors,
non-success responses, and payloads that fail validation, so callers have a
single failure type to guard against per stage.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import re

import httpx
from bs4 import BeautifulSoup
from pydantic import ValidationError

from ..common.errors import UpstreamUnavailable
from ..common.types import CanonicalRecord, CatalogPage
from ..config import Settings

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(?:;[\w=-]+)*;base64,", re.IGNORECASE)


async def _get(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    try:
        resp = await client.get(url, params=params, headers=headers)
    except httpx.HTTPError as exc:
        raise UpstreamUnavailable(f"HTTP error fetching {url}: {exc}") from exc
    if not resp.is_success:
        raise UpstreamUnavailable(f"{url} responded with status {resp.status_code}")
    return resp


def _json(resp: httpx.Response) -> object:
    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise UpstreamUnavailable(f"invalid JSON from {resp.request.url}") from exc


async def fetch_meta(
    client: httpx.AsyncClient, settings: Settings, imdb_id: str, content_type: str
) -> CanonicalRecord | None:
    """Fetch the Cinemeta record for *imdb_id*, or ``None`` when it has none."""

    url = f"{settings.cinemeta_url}/meta/{content_type}/{imdb_id}.json"
    data = _json(await _get(client, url))
    meta = data.get("meta") if isinstance(data, dict) else None
    if not meta:
        return None
    try:
        return CanonicalRecord.model_validate(meta)
    except ValidationError as exc:
        raise UpstreamUnavailable(f"malformed meta for {imdb_id}: {exc}") from exc


async def fetch_rating_document(
    client: httpx.AsyncClient, settings: Settings, title: str, content_type: str
) -> str:
    """Fetch the search results page listing review scores for *title*."""

    headers = {
        "cache-control": "no-cache",
        "referer": "https://www.google.com/",
        "user-agent": settings.user_agent,
    }
    resp = await _get(
        client,
        settings.search_url,
        params={"q": f"{title} - {content_type}"},
        headers=headers,
    )
    return resp.text


def extract_rating_region(document: str, selector: str) -> str:
    """Return the flattened text of the first element matching *selector*."""

    soup = BeautifulSoup(document, "html.parser")
    region = soup.select_one(selector)
    if region is None:
        logger.debug("Ratings region %r not found", selector)
        return ""
    return region.get_text()


def decode_data_uri(value: str) -> bytes | None:
    """Return the payload of a base64 ``data:`` URI, or ``None`` for other values."""

    match = _DATA_URI_RE.match(value)
    if match is None:
        return None
    try:
        return base64.b64decode(value[match.end():], validate=True)
    except (binascii.Error, ValueError):
        return None


def encode_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


async def fetch_poster(client: httpx.AsyncClient, poster: str) -> bytes:
    """Return raw poster bytes from a URL or an inline ``data:`` URI."""

    inline = decode_data_uri(poster)
    if inline is not None:
        return inline
    if poster.startswith("data:"):
        raise UpstreamUnavailable("poster data URI is not valid base64")
    resp = await _get(client, poster)
    if not resp.content:
        raise UpstreamUnavailable(f"empty poster body from {poster}")
    return resp.content


async def fetch_catalog_page(client: httpx.AsyncClient, url: str) -> CatalogPage:
    """Fetch one upstream catalog page."""

    data = _json(await _get(client, url))
    try:
        return CatalogPage.model_validate(data)
    except ValidationError as exc:
        raise UpstreamUnavailable(f"malformed catalog page from {url}: {exc}") from exc


__all__ = [
    "decode_data_uri",
    "encode_data_uri",
    "extract_rating_region",
    "fetch_catalog_page",
    "fetch_meta",
    "fetch_poster",
    "fetch_rating_document",
]
