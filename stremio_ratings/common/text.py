"""Text normalization helpers for scraped rating blocks."""

from __future__ import annotations

import re

__all__ = ["normalize_source_key", "strip_score_suffix", "parse_score"]

_WHITESPACE_RE = re.compile(r"\s+")
_SCORE_SUFFIX_RE = re.compile(r"\s*(?:/\s*\d+(?:\.\d+)?|%)\s*$")


def normalize_source_key(label: str) -> str:
    """Return a lowercase, underscore separated key for a rating source label."""

    return _WHITESPACE_RE.sub("_", label.strip()).lower()


def strip_score_suffix(score: str) -> str:
    """Drop a trailing ``/N`` scale or ``%`` sign from a scraped score."""

    return _SCORE_SUFFIX_RE.sub("", score.strip()).strip()


def parse_score(score: str | None) -> float | None:
    """Best-effort conversion of a normalized score to a float."""

    if not score:
        return None
    try:
        return float(score.replace(",", "."))
    except ValueError:
        return None
