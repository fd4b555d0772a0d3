import pytest
from pydantic import ValidationError

from stremio_ratings.common.types import (
    CanonicalRecord,
    CatalogPage,
    EnrichedRecord,
    OverlaySpec,
    PlacedBadge,
)
from stremio_ratings.overlay.badges import IMDB, METACRITIC


def test_canonical_record_keeps_unknown_fields():
    record = CanonicalRecord.model_validate(
        {"id": "tt1", "name": "Heat", "imdbRating": "8.3", "links": [{"a": 1}]}
    )
    payload = record.to_payload()
    assert payload["imdbRating"] == "8.3"
    assert payload["links"] == [{"a": 1}]
    assert "poster" not in payload


def test_canonical_record_requires_id():
    with pytest.raises(ValidationError):
        CanonicalRecord(id=" ", name="Heat")


def test_enriched_record_hides_ratings_from_payload():
    record = CanonicalRecord(id="tt1", name="Heat", description="Cops.", cast=["Pacino"])
    enriched = EnrichedRecord.from_canonical(record, {"imdb": "8.3"})
    assert enriched.ratings == {"imdb": "8.3"}
    assert enriched.to_payload() == record.to_payload()
    assert EnrichedRecord.from_canonical(record).ratings == {}


def test_overlay_spec_counts_rows():
    spec = OverlaySpec(
        width=300,
        height=100,
        item_width=75,
        item_height=25,
        badges=[
            PlacedBadge(asset=IMDB, x=20, y=18, score_text="8"),
            PlacedBadge(asset=METACRITIC, x=115, y=18, score_text="90"),
            PlacedBadge(asset=IMDB, x=20, y=61, score_text="7"),
        ],
    )
    assert spec.rows == 2


def test_catalog_page_preserves_page_fields():
    page = CatalogPage.model_validate({"metas": [{"id": "tt1"}], "hasMore": False})
    assert page.model_dump() == {"metas": [{"id": "tt1"}], "hasMore": False}


def test_record_without_type_is_passed_through_unchanged():
    meta = {"id": "tt1", "name": "Heat", "releaseInfo": "1995"}
    record = CanonicalRecord.model_validate(meta)
    assert record.type is None
    assert record.to_payload() == meta
    assert EnrichedRecord.from_canonical(record).to_payload() == meta
