"""Postinator rendering and aggregation engine."""

from .aggregator import StatsAggregator, parse_caption_date_range, parse_hex_color
from .constants import APP_NAME
from .models import AssetBundle, ProjectMapping, RawUsageRecord, RenderJob, RenderMode, StatItem
from .post_renderer import PostRenderer
from .service import RenderService
from .session_guard import SessionGuard
from .stats_renderer import StatsRenderer

__all__ = [
    "APP_NAME",
    "AssetBundle",
    "PostRenderer",
    "ProjectMapping",
    "RawUsageRecord",
    "RenderJob",
    "RenderMode",
    "RenderService",
    "SessionGuard",
    "StatItem",
    "StatsAggregator",
    "StatsRenderer",
    "parse_caption_date_range",
    "parse_hex_color",
]
