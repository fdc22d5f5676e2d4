"""Pixel-level compositing primitives used by both renderers."""
from __future__ import annotations

from typing import Optional, Tuple

from PIL import Image

Point = Tuple[float, float]


def _require_image(image: Optional[Image.Image], name: str) -> Image.Image:
    if image is None:
        raise ValueError(f"{name} image is missing")
    if image.width <= 0 or image.height <= 0:
        raise ValueError(f"{name} image has zero size")
    return image


def _as_rgba(image: Image.Image) -> Image.Image:
    if image.mode != "RGBA":
        return image.convert("RGBA")
    return image


# ------------------------------------------------------------------
# Geometry
# ------------------------------------------------------------------
def crop_to_square(image: Image.Image) -> Image.Image:
    """Crop to the centered square of side ``min(width, height)``."""
    image = _require_image(image, "source")
    width, height = image.size
    if width == height:
        return image

    side = min(width, height)
    if width > height:
        offset = (width - height) // 2
        box = (offset, 0, offset + side, side)
    else:
        offset = (height - width) // 2
        box = (0, offset, side, offset + side)
    return image.crop(box)


def resize_square(image: Image.Image, size: int) -> Image.Image:
    """Resize to ``size x size`` with Lanczos resampling."""
    image = _require_image(image, "source")
    size = int(size)
    if size <= 0:
        raise ValueError(f"target size must be positive, got {size}")
    return image.resize((size, size), Image.Resampling.LANCZOS)


# ------------------------------------------------------------------
# Alpha compositing
# ------------------------------------------------------------------
def scale_alpha(image: Image.Image, alpha_factor: float) -> Image.Image:
    """Return an RGBA copy whose per-pixel alpha is multiplied by ``alpha_factor``."""
    if not 0.0 <= alpha_factor <= 1.0:
        raise ValueError(f"alpha factor must be within 0.0-1.0, got {alpha_factor}")

    image = _as_rgba(image)
    if alpha_factor == 1.0:
        return image.copy()

    red, green, blue, alpha = image.split()
    alpha = alpha.point(lambda value: int(round(value * alpha_factor)))
    return Image.merge("RGBA", (red, green, blue, alpha))


def paste_anchored(
    base: Image.Image,
    layer: Image.Image,
    center: Point,
    alpha_factor: float = 1.0,
) -> Image.Image:
    """Alpha-over ``layer`` onto ``base`` so that its center lands on ``center``.

    Neither input is modified; the result has the size of ``base``. Parts of
    the layer that fall outside the base are clipped.
    """
    base = _as_rgba(_require_image(base, "base"))
    layer = _require_image(layer, "layer")
    if alpha_factor != 1.0:
        layer = scale_alpha(layer, alpha_factor)
    else:
        layer = _as_rgba(layer)

    left = int(center[0] - layer.width / 2)
    top = int(center[1] - layer.height / 2)

    canvas = Image.new("RGBA", base.size, (0, 0, 0, 0))
    canvas.paste(layer, (left, top))
    return Image.alpha_composite(base, canvas)


def draw_centered(background: Image.Image, foreground: Image.Image) -> Image.Image:
    """Composite ``foreground`` centered on ``background``."""
    background = _require_image(background, "background")
    foreground = _require_image(foreground, "foreground")
    left = (background.width - foreground.width) // 2
    top = (background.height - foreground.height) // 2

    canvas = Image.new("RGBA", background.size, (0, 0, 0, 0))
    canvas.paste(_as_rgba(foreground), (left, top))
    return Image.alpha_composite(_as_rgba(background), canvas)


def overlay_centered(base: Image.Image, overlay: Image.Image, alpha_factor: float) -> Image.Image:
    """Blend a translucent copy of ``overlay`` centered on ``base``."""
    overlay = _require_image(overlay, "overlay")
    return draw_centered(base, scale_alpha(overlay, alpha_factor))
