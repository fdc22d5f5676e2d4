"""Utilities for persisting composed images."""
from __future__ import annotations

import logging
import os

from PIL import Image

from .errors import RenderError

logger = logging.getLogger(__name__)

JPEG_EXTENSIONS = (".jpg", ".jpeg")
JPEG_QUALITY = 100


def output_path_for(input_path: str, output_dir: str, prefix: str = "output") -> str:
    """Build the output file name for a job from its input photo path."""
    return os.path.join(output_dir, f"{prefix}_{os.path.basename(input_path)}.png")


def save_image(image: Image.Image, output_path: str) -> str:
    """Write ``image`` as PNG, or as RGB JPEG when the path asks for it."""
    directory = os.path.dirname(output_path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        if output_path.lower().endswith(JPEG_EXTENSIONS):
            image.convert("RGB").save(output_path, format="JPEG", quality=JPEG_QUALITY)
        else:
            image.save(output_path, format="PNG")
    except (OSError, ValueError) as exc:
        raise RenderError(f"cannot write {output_path!r}: {exc}", stage="export") from exc

    logger.debug("Saved %sx%s image to %s", image.width, image.height, output_path)
    return output_path
