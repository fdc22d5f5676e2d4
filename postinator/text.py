"""Font loading and anchored text drawing."""
from __future__ import annotations

import logging
from typing import Tuple

from PIL import Image, ImageDraw, ImageFont

from .compositor import Point, paste_anchored
from .constants import Color
from .errors import FontLoadError

logger = logging.getLogger(__name__)


def load_font(font_path: str, size: float, stage: str = "render") -> ImageFont.FreeTypeFont:
    """Load a TrueType font at ``size`` pixels (at least 1)."""
    pixel_size = max(1, int(size))
    try:
        return ImageFont.truetype(font_path, pixel_size)
    except (OSError, ValueError) as exc:
        raise FontLoadError(f"cannot load font {font_path!r}: {exc}", stage=stage) from exc


def text_width(text: str, font: ImageFont.FreeTypeFont) -> float:
    return font.getlength(text)


def squeeze_factor(width: float, max_width: float) -> float:
    """Horizontal scale that keeps ``width`` within ``max_width``; never enlarges."""
    if width <= 0 or width <= max_width:
        return 1.0
    return max_width / width


def draw_text_centered(
    image: Image.Image,
    text: str,
    center: Point,
    font: ImageFont.FreeTypeFont,
    fill: Color,
) -> None:
    """Draw ``text`` in place, centered on ``center`` both ways."""
    if not text:
        return
    draw = ImageDraw.Draw(image)
    draw.text(center, text, font=font, fill=fill, anchor="mm")


def draw_text_fitted(
    image: Image.Image,
    text: str,
    center: Point,
    font: ImageFont.FreeTypeFont,
    fill: Color,
    max_width: float,
) -> Image.Image:
    """Draw centered text, squeezing it horizontally when wider than ``max_width``.

    Glyph height is never changed. Returns the resulting image, which is
    ``image`` itself when no squeezing was needed.
    """
    if not text:
        return image

    factor = squeeze_factor(text_width(text, font), max_width)
    if factor == 1.0:
        draw_text_centered(image, text, center, font, fill)
        return image

    left, top, right, bottom = font.getbbox(text, anchor="mm")
    layer = Image.new("RGBA", (max(1, right - left), max(1, bottom - top)), (0, 0, 0, 0))
    ImageDraw.Draw(layer).text((-left, -top), text, font=font, fill=fill, anchor="mm")

    squeezed_width = max(1, int(layer.width * factor))
    logger.debug("Squeezing %r from %d to %d px", text, layer.width, squeezed_width)
    squeezed = layer.resize((squeezed_width, layer.height), Image.Resampling.LANCZOS)

    # The glyph box is not always symmetric around the anchor.
    box_center: Tuple[float, float] = (
        center[0] + (left + right) / 2 * factor,
        center[1] + (top + bottom) / 2,
    )
    return paste_anchored(image, squeezed, box_center)
