"""Poster overlay layout and compositing."""

from __future__ import annotations

from .badges import FRESH_THRESHOLD, resolve_badge
from .compositor import ImageCompositor, detect_mime_type
from .layout import OverlayComposer

__all__ = [
    "FRESH_THRESHOLD",
    "ImageCompositor",
    "OverlayComposer",
    "detect_mime_type",
    "resolve_badge",
]
