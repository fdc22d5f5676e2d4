"""Exception types raised by the rendering and aggregation engine."""
from __future__ import annotations

from typing import Optional


class PostinatorError(Exception):
    """Base error for a failed job, tagged with the stage that failed."""

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"{self.stage}: {self.message}"
        return self.message


class ConfigError(PostinatorError):
    """Configuration file or value could not be used."""


class AssetUnavailable(PostinatorError):
    """A required asset (background or font) is missing or undecodable."""


class InputUnavailable(PostinatorError):
    """The user photo for a job is missing or undecodable."""


class RenderError(PostinatorError):
    """Compositing or text layout failed."""


class FontLoadError(AssetUnavailable, RenderError):
    """The font resource could not be loaded at render time."""


class AggregationEmpty(PostinatorError):
    """No usage data exists for the requested date range."""


class DateRangeUnparsable(PostinatorError):
    """No date range can be derived from the caption."""


class ReportingError(PostinatorError):
    """The reporting API request failed or returned unusable data."""


class AdmissionRejected(PostinatorError):
    """Another job is already in flight for this chat."""

    def __init__(self, chat_id: int) -> None:
        super().__init__(f"chat {chat_id} already has a job in flight", stage="admission")
        self.chat_id = chat_id
