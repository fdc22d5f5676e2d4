"""Loading of the static background, overlay and font assets."""
from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional

from PIL import Image, UnidentifiedImageError

from .errors import AssetUnavailable, InputUnavailable
from .models import AssetBundle

logger = logging.getLogger(__name__)


def load_image(image_path: str) -> Image.Image:
    """Load an image from disk as RGBA, raising OSError subclasses on failure."""
    with Image.open(image_path) as img:
        img.load()
        if img.mode != "RGBA":
            return img.convert("RGBA")
        return img.copy()


def _load_required(path: str, what: str) -> Image.Image:
    try:
        return load_image(path)
    except (OSError, UnidentifiedImageError) as exc:
        raise AssetUnavailable(f"cannot load {what} {path!r}: {exc}", stage="assets") from exc


def _load_optional(path: str, what: str) -> Optional[Image.Image]:
    if not path or not os.path.isfile(path):
        logger.warning("No %s at %s, it will be omitted", what, path)
        return None
    try:
        return load_image(path)
    except (OSError, UnidentifiedImageError) as exc:
        logger.warning("Could not decode %s %s: %s", what, path, exc)
        return None


def load_asset_bundle(config: Mapping[str, Any]) -> AssetBundle:
    """Decode the configured assets once for the process lifetime."""
    assets_dir = config["assets_dir"]
    background_path = os.path.join(assets_dir, config["background_file"])
    stats_path = os.path.join(assets_dir, config.get("background_stats_file") or config["background_file"])
    font_path = os.path.join(assets_dir, config["font_file"])
    overlay_file = config.get("overlay_file") or ""

    background = _load_required(background_path, "background")
    if stats_path == background_path:
        background_stats = background
    else:
        background_stats = _load_required(stats_path, "stats background")

    if not os.path.isfile(font_path):
        raise AssetUnavailable(f"font not found at {font_path!r}", stage="assets")

    overlay = _load_optional(os.path.join(assets_dir, overlay_file) if overlay_file else "", "overlay")

    logger.info(
        "Assets loaded from %s (background %sx%s, overlay %s)",
        assets_dir,
        background.width,
        background.height,
        "yes" if overlay is not None else "no",
    )
    return AssetBundle(
        background=background,
        background_stats=background_stats,
        font_path=font_path,
        overlay=overlay,
    )


def load_user_photo(photo_path: str) -> Image.Image:
    """Decode the downloaded user photo for a job."""
    if not photo_path or not os.path.isfile(photo_path):
        raise InputUnavailable(f"user photo not found at {photo_path!r}", stage="input")
    try:
        return load_image(photo_path)
    except (OSError, UnidentifiedImageError) as exc:
        raise InputUnavailable(f"cannot decode user photo {photo_path!r}: {exc}", stage="input") from exc
