"""Tests for the app entry point."""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

import pytest
from PIL import Image

import app
from tests.helpers import solid


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def config_file(tmp_path: Path, font_path: str, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in ("ASSETS_DIR", "TEMP_DIR", "MAX_FILE_SIZE", "REPORTING_TOKEN", "REPORTING_WORKSPACE"):
        monkeypatch.delenv(key, raising=False)
    assets = tmp_path / "assets"
    assets.mkdir()
    solid((400, 300), (200, 200, 200, 255)).save(assets / "BG.png")
    shutil.copy(font_path, assets / "font.ttf")
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"font_file": "font.ttf"}), encoding="utf-8")
    return path


class TestMain:
    def test_post_written_to_temp_dir(self, config_file: Path, photo_file: str, capsys) -> None:
        code = app.main(["--config", str(config_file), "post", photo_file, "--caption", "Hello"])

        assert code == 0
        output = capsys.readouterr().out.strip()
        assert output == str(config_file.parent / "temp" / "output_photo.png.png")
        with Image.open(output) as img:
            assert img.size == (400, 300)

    def test_explicit_jpeg_output(self, config_file: Path, photo_file: str, tmp_path: Path) -> None:
        target = tmp_path / "result.jpg"
        code = app.main(["--config", str(config_file), "--output", str(target), "post", photo_file])
        assert code == 0
        with Image.open(target) as img:
            assert img.format == "JPEG"

    def test_stats_without_reporting_token_fails(self, config_file: Path) -> None:
        assert app.main(["--config", str(config_file), "stats", "ИЮНЬ"]) == 2

    def test_missing_assets_fail_startup(self, tmp_path: Path) -> None:
        assert app.main(["--config", str(tmp_path / "nothing.json"), "post", "x.png"]) == 1

    def test_log_file_created(self, config_file: Path, photo_file: str, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "bot.log"
        app.main(["--config", str(config_file), "--log-file", str(log_file), "post", photo_file])
        assert log_file.exists()
