"""Rating source badges and the rule that picks one for a scraped rating."""

from __future__ import annotations

from typing import Callable, Mapping, Optional

from ..common.text import parse_score
from ..common.types import BadgeAsset

IMDB = BadgeAsset(name="imdb", label="IMDb", fill=(245, 197, 24), text_fill=(0, 0, 0))
METACRITIC = BadgeAsset(name="metacritic", label="MC", fill=(255, 204, 52), text_fill=(0, 0, 0))
RT_FRESH = BadgeAsset(name="rt_fresh", label="RT", fill=(250, 50, 10))
RT_ROTTEN = BadgeAsset(name="rt_rotten", label="RT", fill=(2, 144, 47))

# Rotten Tomatoes scores above this percentage get the fresh tomato.
FRESH_THRESHOLD = 60.0

_FIXED_BADGES: Mapping[str, BadgeAsset] = {
    "imdb": IMDB,
    "metacritic": METACRITIC,
}

BadgeResolver = Callable[[str, str], Optional[BadgeAsset]]


def resolve_badge(source_key: str, score_text: str) -> BadgeAsset | None:
    """Return the badge for *source_key*, or ``None`` when it is not rendered."""

    fixed = _FIXED_BADGES.get(source_key)
    if fixed is not None:
        return fixed
    if source_key == "rotten_tomatoes":
        score = parse_score(score_text)
        if score is not None and score > FRESH_THRESHOLD:
            return RT_FRESH
        return RT_ROTTEN
    return None


__all__ = [
    "BadgeResolver",
    "FRESH_THRESHOLD",
    "IMDB",
    "METACRITIC",
    "RT_FRESH",
    "RT_ROTTEN",
    "resolve_badge",
]
