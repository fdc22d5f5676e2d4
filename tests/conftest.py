"""
Shared fixtures for Postinator tests.

Images are generated in memory with Pillow; the TrueType font is the one
Pillow embeds for ``ImageFont.load_default``, written to a temp file so the
renderers can load it by path like a deployed font asset.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image, ImageFont

from postinator.models import AssetBundle
from tests.helpers import solid


@pytest.fixture(scope="session")
def font_path(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Path to a real TrueType font file; skips when Pillow lacks FreeType."""
    try:
        font = ImageFont.load_default(size=12)
    except (ImportError, OSError, TypeError):
        pytest.skip("Pillow is built without FreeType support")
    data = getattr(font, "font_bytes", None)
    if not data:
        pytest.skip("Pillow default font is not a TrueType font")

    path = tmp_path_factory.mktemp("fonts") / "default.ttf"
    path.write_bytes(data)
    return str(path)


@pytest.fixture
def background() -> Image.Image:
    return solid((1000, 800), (240, 230, 210, 255))


@pytest.fixture
def overlay() -> Image.Image:
    """Frame-like overlay: transparent center, half-opaque white border."""
    img = solid((300, 300), (255, 255, 255, 200))
    img.paste((0, 0, 0, 0), (30, 30, 270, 270))
    return img


@pytest.fixture
def assets(background: Image.Image, overlay: Image.Image, font_path: str) -> AssetBundle:
    return AssetBundle(
        background=background,
        background_stats=solid((1200, 1000), (250, 250, 250, 255)),
        font_path=font_path,
        overlay=overlay,
    )


@pytest.fixture
def assets_without_overlay(background: Image.Image, font_path: str) -> AssetBundle:
    return AssetBundle(
        background=background,
        background_stats=solid((1200, 1000), (250, 250, 250, 255)),
        font_path=font_path,
    )


@pytest.fixture
def user_photo() -> Image.Image:
    """Landscape photo: left half red, right half blue."""
    img = solid((400, 200), (255, 0, 0, 255))
    img.paste((0, 0, 255, 255), (200, 0, 400, 200))
    return img


@pytest.fixture
def photo_file(tmp_path: Path, user_photo: Image.Image) -> str:
    path = tmp_path / "photo.png"
    user_photo.save(path)
    return str(path)
