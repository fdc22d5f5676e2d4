"""Image builders shared by the test modules."""

from __future__ import annotations

from PIL import Image


def solid(size: tuple[int, int], color: tuple[int, int, int, int]) -> Image.Image:
    """Return a single-color RGBA image of ``size``."""
    return Image.new("RGBA", size, color)
