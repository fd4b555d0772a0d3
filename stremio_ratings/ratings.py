"""Heuristic extraction of review scores from a scraped search-result block."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from .common.errors import MalformedRatingText
from .common.text import normalize_source_key, parse_score, strip_score_suffix
from .common.types import RatingTuple

logger = logging.getLogger(__name__)

# The search page renders "86% · Rotten Tomatoes"; when the response is
# decoded with the wrong charset the middle dot comes through as U+FFFD.
DEFAULT_DELIMITERS: tuple[str, ...] = ("\ufffd", "·")


class RatingExtractor:
    """Turn a flattened ``score <delimiter> source`` text block into ratings.

    Delimiters are tried in order; the first one that splits at least one line
    into two or more fields wins for the whole block. When two lines share a
    source key the first one seen is kept.
    """

    def __init__(self, delimiters: Sequence[str] = DEFAULT_DELIMITERS) -> None:
        if not delimiters:
            raise ValueError("at least one delimiter is required")
        self._delimiters = tuple(delimiters)

    @property
    def delimiters(self) -> tuple[str, ...]:
        return self._delimiters

    def _split_fields(self, text: str) -> list[list[str]]:
        lines = text.splitlines()
        for delimiter in self._delimiters:
            rows = [line.split(delimiter) for line in lines]
            rows = [row for row in rows if len(row) > 1]
            if rows:
                return rows
        raise MalformedRatingText(
            f"no line split into fields using delimiters {self._delimiters!r}"
        )

    def extract_tuples(self, text: str | None) -> list[RatingTuple]:
        """Return rating tuples in document order, duplicates included."""

        if not text or not text.strip():
            return []
        try:
            rows = self._split_fields(text)
        except MalformedRatingText as exc:
            logger.debug("Ratings not found: %s", exc)
            return []

        tuples: list[RatingTuple] = []
        for row in rows:
            source_key = normalize_source_key(row[1])
            score_text = strip_score_suffix(row[0])
            if not source_key or not score_text:
                continue
            tuples.append(
                RatingTuple(
                    source_key=source_key,
                    score_text=score_text,
                    normalized_score=parse_score(score_text),
                )
            )
        return tuples

    def extract(self, text: str | None) -> dict[str, str]:
        """Return a ``source_key -> score_text`` mapping (first occurrence wins)."""

        ratings: dict[str, str] = {}
        for rating in self.extract_tuples(text):
            if rating.source_key in ratings:
                logger.debug(
                    "Ignoring duplicate rating for %s: %s (kept %s)",
                    rating.source_key,
                    rating.score_text,
                    ratings[rating.source_key],
                )
                continue
            ratings[rating.source_key] = rating.score_text
        return ratings


def format_ratings(ratings: Mapping[str, str]) -> str:
    """Render ratings for appending to a title description."""

    return "".join(f"({source}: {score}) " for source, score in ratings.items())


__all__ = ["DEFAULT_DELIMITERS", "RatingExtractor", "format_ratings"]
