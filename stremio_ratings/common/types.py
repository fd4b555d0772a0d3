"""Type definitions for Cinemeta records, scraped ratings, and poster overlays."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, Optional, Sequence, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

ContentType = Literal["movie", "series"]

JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | Sequence["JSONValue"] | Mapping[str, "JSONValue"]


class CanonicalRecord(BaseModel):
    """Authoritative per-title metadata as served by Cinemeta.

    Only the fields the enrichment pipeline reads are declared; everything
    else in the upstream payload is kept verbatim and serialized back out.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    poster: Optional[str] = None

    @field_validator("id")
    @classmethod
    def _require_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("id must not be empty")
        return value

    def to_payload(self) -> dict[str, object]:
        """Return the record in its wire shape, omitting unset optional fields."""

        return self.model_dump(exclude_none=True)


class EnrichedRecord(CanonicalRecord):
    """A :class:`CanonicalRecord` with the rating mapping that was scraped for it.

    ``ratings`` is not part of the wire shape, so an unenriched record
    serializes exactly like the canonical record it was built from.
    """

    ratings: dict[str, str] = Field(default_factory=dict, exclude=True)

    @classmethod
    def from_canonical(
        cls, record: CanonicalRecord, ratings: Mapping[str, str] | None = None
    ) -> "EnrichedRecord":
        payload = record.model_dump()
        return cls.model_validate({**payload, "ratings": dict(ratings or {})})


class RatingTuple(BaseModel):
    """One scraped (source, score) pair."""

    source_key: str
    score_text: str
    normalized_score: Optional[float] = None


@dataclass(frozen=True, slots=True)
class BadgeAsset:
    """A rating source logo drawn next to its score.

    ``name`` doubles as the asset file stem under the assets directory; the
    label and colours are used when no asset file is available.
    """

    name: str
    label: str
    fill: tuple[int, int, int]
    text_fill: tuple[int, int, int] = (255, 255, 255)


class PlacedBadge(BaseModel):
    """A badge positioned within the overlay band."""

    model_config = ConfigDict(frozen=True)

    asset: BadgeAsset
    x: int
    y: int
    score_text: str


class OverlaySpec(BaseModel):
    """Layout of the rating band composited onto the bottom of a poster."""

    width: int
    height: int
    item_width: int
    item_height: int
    badges: list[PlacedBadge] = Field(default_factory=list)

    @property
    def rows(self) -> int:
        return len({badge.y for badge in self.badges})


class CatalogPage(BaseModel):
    """Catalog listing with an ordered list of meta stubs.

    Page-level fields other than ``metas`` (``hasMore`` and friends) are opaque
    and preserved as-is.
    """

    model_config = ConfigDict(extra="allow")

    metas: list[dict[str, object]] = Field(default_factory=list)


__all__ = [
    "BadgeAsset",
    "CanonicalRecord",
    "CatalogPage",
    "ContentType",
    "EnrichedRecord",
    "JSONValue",
    "OverlaySpec",
    "PlacedBadge",
    "RatingTuple",
]