"""Grid layout of rating badges inside the poster overlay band."""

from __future__ import annotations

import logging
from typing import Mapping

from ..common.errors import ImageDecodeFailure
from ..common.types import OverlaySpec, PlacedBadge
from .badges import BadgeResolver, resolve_badge

logger = logging.getLogger(__name__)


class OverlayComposer:
    """Place badge and score pairs left to right, wrapping onto new rows.

    Geometry is derived from the poster size: each item is a quarter of the
    poster wide and a third of that high, with horizontal padding of 1/15 of
    the width and vertical padding of 1/25 of the height.
    """

    def __init__(self, resolver: BadgeResolver = resolve_badge) -> None:
        self._resolver = resolver

    def compose(
        self, width: int, height: int, ratings: Mapping[str, str]
    ) -> OverlaySpec | None:
        """Return the overlay layout, or ``None`` when no rating has a badge."""

        if width <= 0 or height <= 0:
            raise ImageDecodeFailure(f"invalid poster dimensions {width}x{height}")

        item_width = width // 4
        item_height = item_width // 3
        padding_x = width // 15
        padding_y = height // 25

        x, y = padding_x, padding_y
        badges: list[PlacedBadge] = []
        for source_key, score_text in ratings.items():
            asset = self._resolver(source_key, score_text)
            if asset is None:
                continue
            badges.append(PlacedBadge(asset=asset, x=x, y=y, score_text=score_text))
            x += item_width + padding_x
            if x + item_width > width:
                x = padding_x
                y += item_height + padding_y

        if not badges:
            logger.debug("No renderable badges among %s", list(ratings))
            return None

        # Height follows the final cursor, so a wrap after the last badge keeps
        # its empty row in the band.
        spec = OverlaySpec(
            width=width,
            height=y + item_height + padding_y,
            item_width=item_width,
            item_height=item_height,
            badges=badges,
        )
        logger.debug(
            "Placed %d badges in %d rows, band height %d",
            len(badges),
            spec.rows,
            spec.height,
        )
        return spec


__all__ = ["OverlayComposer"]
