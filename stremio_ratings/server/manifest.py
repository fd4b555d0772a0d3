"""Stremio addon manifest advertised at ``/manifest.json``."""

from __future__ import annotations

from datetime import date

from ..catalog import CatalogKind
from ..common.types import JSONValue

ADDON_ID = "community.stremio-ratings"
ADDON_NAME = "Ratings Overlay"
CONTENT_TYPES = ("movie", "series")

GENRES = (
    "Action",
    "Adventure",
    "Animation",
    "Biography",
    "Comedy",
    "Crime",
    "Documentary",
    "Drama",
    "Family",
    "Fantasy",
    "History",
    "Horror",
    "Mystery",
    "Romance",
    "Sci-Fi",
    "Sport",
    "Thriller",
    "War",
    "Western",
)

_CATALOG_NAMES = {
    CatalogKind.TRENDING: "Trending",
    CatalogKind.FEATURED: "Featured",
    CatalogKind.SEARCH: "Search",
    CatalogKind.BEST_YOY: "Best Year by Year",
}


def _catalog_extra(kind: CatalogKind, years: list[str]) -> list[dict[str, JSONValue]]:
    skip = {"name": "skip", "isRequired": False}
    if kind is CatalogKind.SEARCH:
        return [{"name": "search", "isRequired": True}, skip]
    if kind is CatalogKind.BEST_YOY:
        return [{"name": "genre", "isRequired": False, "options": years}, skip]
    return [{"name": "genre", "isRequired": False, "options": list(GENRES)}, skip]


def build_manifest(version: str, *, today: date | None = None) -> dict[str, JSONValue]:
    """Return the addon manifest, listing every catalog for each content type."""

    current_year = (today or date.today()).year
    years = [str(year) for year in range(current_year, current_year - 30, -1)]
    catalogs: list[JSONValue] = [
        {
            "type": content_type,
            "id": kind.value,
            "name": _CATALOG_NAMES[kind],
            "extra": _catalog_extra(kind, years),
        }
        for content_type in CONTENT_TYPES
        for kind in CatalogKind
    ]
    return {
        "id": ADDON_ID,
        "version": version,
        "name": ADDON_NAME,
        "description": (
            "Cinemeta catalogs with IMDb, Metacritic and Rotten Tomatoes scores "
            "burned into the posters."
        ),
        "resources": ["catalog", "meta"],
        "types": list(CONTENT_TYPES),
        "idPrefixes": ["tt"],
        "catalogs": catalogs,
    }


__all__ = ["ADDON_ID", "ADDON_NAME", "CONTENT_TYPES", "GENRES", "build_manifest"]
