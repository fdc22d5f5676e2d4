"""Renderer for the "post" image: background, caption, photo and frame."""
from __future__ import annotations

import logging
from typing import Optional

from PIL import Image

from .compositor import crop_to_square, draw_centered, overlay_centered, resize_square
from .constants import (
    CAPTION_COLOR,
    CAPTION_FONT_SCALE,
    CAPTION_Y_RATIO,
    OVERLAY_ALPHA,
    POST_PHOTO_TENTHS,
)
from .errors import AssetUnavailable, InputUnavailable
from .models import AssetBundle
from .text import draw_text_centered, load_font

logger = logging.getLogger(__name__)


def caption_font_size(width: int, height: int) -> float:
    """Caption size proportional to the longer side of the background."""
    return max(width, height) * CAPTION_FONT_SCALE


class PostRenderer:
    """Compose the post image from the loaded assets and a user photo."""

    def __init__(self, assets: AssetBundle) -> None:
        self.assets = assets

    def render(self, user_photo: Optional[Image.Image], caption: str) -> Image.Image:
        background = self.assets.background
        if background is None or background.width == 0 or background.height == 0:
            raise AssetUnavailable("post background is not loaded", stage="post")
        if user_photo is None or user_photo.width == 0 or user_photo.height == 0:
            raise InputUnavailable("user photo is missing", stage="post")

        canvas = background.convert("RGBA")
        width, height = canvas.size

        font = load_font(self.assets.font_path, caption_font_size(width, height), stage="post")
        draw_text_centered(canvas, caption, (width / 2, height * CAPTION_Y_RATIO), font, CAPTION_COLOR)

        target = width * POST_PHOTO_TENTHS // 10
        photo = resize_square(crop_to_square(user_photo), target)
        composed = draw_centered(canvas, photo)

        if self.assets.overlay is not None:
            composed = overlay_centered(composed, self.assets.overlay, OVERLAY_ALPHA)
        else:
            logger.debug("No overlay loaded, post frame omitted")

        return composed
