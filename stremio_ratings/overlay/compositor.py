"""Burn a rating overlay band onto poster bytes using Pillow."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from ..common.errors import ImageDecodeFailure
from ..common.types import BadgeAsset, OverlaySpec
from ..common.validation import require_positive

logger = logging.getLogger(__name__)

BAND_FILL = (0, 0, 0, 191)
TEXT_FILL = (255, 255, 255, 255)
TEXT_GAP = 10

_FONT_CANDIDATES = (
    "DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
)

# Pillow raises DecompressionBombError (not an OSError) for oversized images.
_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    ValueError,
)

_MIME_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


class ImageCompositor:
    """Composite :class:`OverlaySpec` layouts onto raster posters.

    Every public method is best-effort: decode and encode failures are logged
    and the caller gets the original bytes back.
    """

    def __init__(
        self,
        *,
        assets_dir: Path | None = None,
        font_path: Path | None = None,
        font_size: int = 28,
    ) -> None:
        self._assets_dir = assets_dir
        self._font_path = font_path
        self._font_size = require_positive(font_size, name="font_size")
        self._fonts: dict[int, Font] = {}

    def dimensions(self, data: bytes) -> tuple[int, int] | None:
        """Return ``(width, height)`` of the encoded image, if decodable."""

        try:
            with Image.open(BytesIO(data)) as image:
                width, height = image.size
        except _DECODE_ERRORS as exc:
            logger.warning("Could not read poster dimensions: %s", exc)
            return None
        if not width or not height:
            logger.warning("Image dimensions not found")
            return None
        return width, height

    def composite(self, data: bytes, spec: OverlaySpec | None) -> bytes:
        """Return *data* with the overlay band burned in along the bottom edge."""

        if spec is None:
            return data
        try:
            return self._composite(data, spec)
        except ImageDecodeFailure as exc:
            logger.warning("Skipping poster overlay: %s", exc)
        except _DECODE_ERRORS as exc:
            logger.error("Error compositing poster overlay: %s", exc, exc_info=exc)
        return data

    def _composite(self, data: bytes, spec: OverlaySpec) -> bytes:
        try:
            source = Image.open(BytesIO(data))
            source.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise ImageDecodeFailure(f"undecodable poster: {exc}") from exc

        with source:
            width, height = source.size
            if not width or not height:
                raise ImageDecodeFailure("image dimensions not found")
            image_format = (source.format or "JPEG").upper()
            poster = source.convert("RGBA")

        band = self._render_band(width, spec)
        top = max(height - band.height, 0)
        if top == 0 and band.height > height:
            band = band.crop((0, band.height - height, width, band.height))
        poster.alpha_composite(band, dest=(0, top))
        return self._encode(poster, image_format)

    def _render_band(self, width: int, spec: OverlaySpec) -> Image.Image:
        band = Image.new("RGBA", (width, spec.height), BAND_FILL)
        draw = ImageDraw.Draw(band)
        font = self._get_font()
        size = spec.item_height
        for placed in spec.badges:
            if size > 0:
                icon = self._badge_image(placed.asset, size)
                band.alpha_composite(icon, dest=(placed.x, placed.y))
            # Score text sits on the bottom edge of its badge.
            bbox = draw.textbbox((0, 0), placed.score_text, font=font)
            text_y = placed.y + size - bbox[3]
            draw.text(
                (placed.x + size + TEXT_GAP, text_y),
                placed.score_text,
                font=font,
                fill=TEXT_FILL,
            )
        return band

    def _badge_image(self, asset: BadgeAsset, size: int) -> Image.Image:
        if self._assets_dir is not None:
            path = self._assets_dir / f"{asset.name}.png"
            if path.is_file():
                try:
                    with Image.open(path) as icon:
                        return icon.convert("RGBA").resize(
                            (size, size), Image.Resampling.LANCZOS
                        )
                except _DECODE_ERRORS as exc:
                    logger.warning("Unreadable badge asset %s: %s", path, exc)
        return self._draw_badge(asset, size)

    def _draw_badge(self, asset: BadgeAsset, size: int) -> Image.Image:
        badge = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        draw = ImageDraw.Draw(badge)
        draw.rounded_rectangle(
            [(0, 0), (size - 1, size - 1)],
            radius=max(size // 6, 1),
            fill=(*asset.fill, 255),
        )
        font = self._get_font(max(size // 3, 1))
        bbox = draw.textbbox((0, 0), asset.label, font=font)
        text_width = bbox[2] - bbox[0]
        text_height = bbox[3] - bbox[1]
        draw.text(
            ((size - text_width) // 2 - bbox[0], (size - text_height) // 2 - bbox[1]),
            asset.label,
            font=font,
            fill=(*asset.text_fill, 255),
        )
        return badge

    def _get_font(self, size: int | None = None) -> Font:
        font_size = size or self._font_size
        cached = self._fonts.get(font_size)
        if cached is not None:
            return cached
        candidates: list[str] = []
        if self._font_path is not None:
            candidates.append(str(self._font_path))
        candidates.extend(_FONT_CANDIDATES)
        font: Font | None = None
        for candidate in candidates:
            try:
                font = ImageFont.truetype(candidate, font_size)
                break
            except OSError:
                continue
        if font is None:
            font = ImageFont.load_default(font_size)
        self._fonts[font_size] = font
        return font

    @staticmethod
    def _encode(image: Image.Image, image_format: str) -> bytes:
        if image_format not in _MIME_TYPES:
            image_format = "JPEG"
        buffer = BytesIO()
        if image_format == "JPEG":
            image.convert("RGB").save(buffer, format="JPEG", quality=90)
        else:
            image.save(buffer, format=image_format)
        return buffer.getvalue()


def detect_mime_type(data: bytes) -> str:
    """Return the MIME type of encoded image *data*, defaulting to JPEG."""

    try:
        with Image.open(BytesIO(data)) as image:
            image_format = (image.format or "JPEG").upper()
    except _DECODE_ERRORS:
        return _MIME_TYPES["JPEG"]
    return _MIME_TYPES.get(image_format, _MIME_TYPES["JPEG"])


__all__ = ["ImageCompositor", "detect_mime_type"]
