"""Data models shared by the renderers, the aggregator and the services."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Tuple

from PIL import Image

from .constants import Color


def format_duration(seconds: int) -> str:
    """Format seconds as ``HH:MM``, truncating to whole minutes."""
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    return f"{hours:02d}:{remainder // 60:02d}"


@dataclass(frozen=True)
class AssetBundle:
    """Decoded images and font path, loaded once per process."""

    background: Image.Image
    background_stats: Image.Image
    font_path: str
    overlay: Optional[Image.Image] = None

    def __repr__(self) -> str:  # pragma: no cover - utility repr
        overlay = "with overlay" if self.overlay is not None else "no overlay"
        return f"<AssetBundle {self.background.size} {overlay} font={self.font_path!r}>"


@dataclass(frozen=True)
class RawUsageRecord:
    owner_id: int
    project_id: int
    tracked_seconds: int


@dataclass(frozen=True)
class ProjectMapping:
    """Display settings for one or more raw project names."""

    display_name: str
    color: str = ""
    aliases: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class StatItem:
    """One ranked entry of a stats image."""

    label: str
    seconds: int
    color: Color

    @property
    def duration_text(self) -> str:
        return format_duration(self.seconds)


class RenderMode(enum.Enum):
    NONE = "none"
    STATS = "stats"
    POST = "post"


@dataclass
class ChatSession:
    chat_id: int
    mode: RenderMode = RenderMode.NONE
    processing: bool = False


@dataclass(frozen=True)
class RenderJob:
    """Inputs of a single render call."""

    photo_path: str
    caption: str
    output_path: str
