"""Renderer for the "stats" image: ranked durations, photo, activity bar and footer."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from .aggregator import total_seconds
from .compositor import crop_to_square, paste_anchored, resize_square
from .constants import (
    BAR_ANCHOR_Y_RATIO,
    BAR_GAP,
    BAR_HEIGHT_RATIO,
    FOOTER_CENTER,
    FOOTER_TITLE_COLOR,
    FOOTER_TOTAL_COLOR,
    FOOTER_TOTAL_OFFSET_RATIO,
    ITEMS_PER_COLUMN,
    LABEL_COLOR,
    LABEL_FONT_RATIO,
    LABEL_SPACING,
    LEFT_COLUMN_X,
    MAX_STAT_ITEMS,
    OVERLAY_ALPHA,
    RIGHT_COLUMN_X,
    ROW_STEP,
    ROWS_START_Y,
    STATS_OVERLAY_SCALE,
    STATS_PHOTO_CENTER,
    STATS_PHOTO_SIZE_RATIO,
    TIME_FONT_RATIO,
    TIME_MAX_WIDTH_RATIO,
    TOTAL_FONT_RATIO,
    WING_FONT_BASE,
    WING_MARGIN_OFFSET,
    WING_POLYGONS,
    WING_REFERENCE_Y,
    WING_SCALE,
    Color,
)
from .errors import AssetUnavailable
from .models import AssetBundle, StatItem, format_duration
from .text import draw_text_centered, draw_text_fitted, load_font

logger = logging.getLogger(__name__)

Polygon = List[Tuple[float, float]]
Segment = Tuple[float, float, Color]


def item_position(index: int) -> Tuple[float, float]:
    """Anchor of the duration text for the item at ``index``."""
    column_x = LEFT_COLUMN_X if index < ITEMS_PER_COLUMN else RIGHT_COLUMN_X
    row = index % ITEMS_PER_COLUMN
    return column_x, ROWS_START_Y + row * ROW_STEP


def wing_polygons(x: float, y: float, font_size: float) -> List[Polygon]:
    """Scale the wing glyph to ``font_size`` and place it around ``(x, y)``."""
    scale = font_size / WING_FONT_BASE * WING_SCALE
    margin = font_size - WING_MARGIN_OFFSET

    polygons: List[Polygon] = []
    for side, reference_x, points in WING_POLYGONS:
        anchor_x = x + side * margin
        polygons.append(
            [
                (anchor_x + (px - reference_x) * scale, y + (py - WING_REFERENCE_Y) * scale)
                for px, py in points
            ]
        )
    return polygons


def activity_segments(
    items: Sequence[StatItem], x: float, width: float, total: int
) -> List[Segment]:
    """Split ``width`` into edge-to-edge segments proportional to item seconds.

    Each segment is ``(left, segment_width, color)``; items without time
    produce no segment.
    """
    if total <= 0:
        return []

    segments: List[Segment] = []
    current_x = x
    for item in items:
        if item.seconds <= 0:
            continue
        segment_width = width * item.seconds / total
        segments.append((current_x, segment_width, item.color))
        current_x += segment_width
    return segments


class StatsRenderer:
    """Compose the stats image from the loaded assets and aggregated items."""

    def __init__(self, assets: AssetBundle) -> None:
        self.assets = assets

    def render(
        self,
        items: Sequence[StatItem],
        title: str,
        user_photo: Optional[Image.Image] = None,
    ) -> Image.Image:
        background = self.assets.background_stats
        if background is None or background.width == 0 or background.height == 0:
            raise AssetUnavailable("stats background is not loaded", stage="stats")

        canvas = background.convert("RGBA")
        width, height = canvas.size

        time_size = height * TIME_FONT_RATIO
        time_font = load_font(self.assets.font_path, time_size, stage="stats")
        label_font = load_font(self.assets.font_path, height * LABEL_FONT_RATIO, stage="stats")
        total_font = load_font(self.assets.font_path, height * TOTAL_FONT_RATIO, stage="stats")

        photo_size = height * STATS_PHOTO_SIZE_RATIO
        photo_center = (width * STATS_PHOTO_CENTER[0], height * STATS_PHOTO_CENTER[1])
        if user_photo is not None and user_photo.width > 0 and user_photo.height > 0:
            canvas = self._draw_user_photo(canvas, user_photo, photo_center, int(photo_size))
        else:
            user_photo = None
            logger.debug("No user photo supplied, stats insert omitted")

        displayed = list(items)[:MAX_STAT_ITEMS]
        max_text_width = time_size * TIME_MAX_WIDTH_RATIO
        for index, item in enumerate(displayed):
            x, y = item_position(index)

            draw = ImageDraw.Draw(canvas)
            for polygon in wing_polygons(x, y, time_size):
                draw.polygon(polygon, fill=item.color)

            canvas = draw_text_fitted(canvas, item.duration_text, (x, y), time_font, item.color, max_text_width)
            draw_text_centered(canvas, item.label, (x, y + LABEL_SPACING), label_font, LABEL_COLOR)

        total = total_seconds(displayed)
        if total > 0 and user_photo is not None:
            bar_left = photo_center[0] - photo_size / 2
            bar_top = height * BAR_ANCHOR_Y_RATIO + photo_size / 2 + BAR_GAP
            self._draw_activity_bar(
                canvas, activity_segments(displayed, bar_left, photo_size, total), bar_top, height * BAR_HEIGHT_RATIO
            )

        footer_x, footer_y = width * FOOTER_CENTER[0], height * FOOTER_CENTER[1]
        draw_text_centered(canvas, title.upper(), (footer_x, footer_y), label_font, FOOTER_TITLE_COLOR)
        draw_text_centered(
            canvas,
            format_duration(total),
            (footer_x, footer_y + height * FOOTER_TOTAL_OFFSET_RATIO),
            total_font,
            FOOTER_TOTAL_COLOR,
        )
        return canvas

    # ------------------------------------------------------------------
    # Drawing helpers
    # ------------------------------------------------------------------
    def _draw_user_photo(
        self,
        canvas: Image.Image,
        user_photo: Image.Image,
        center: Tuple[float, float],
        size: int,
    ) -> Image.Image:
        photo = resize_square(crop_to_square(user_photo), size)
        canvas = paste_anchored(canvas, photo, center)

        if self.assets.overlay is not None:
            frame = resize_square(self.assets.overlay, int(size * STATS_OVERLAY_SCALE))
            canvas = paste_anchored(canvas, frame, center, alpha_factor=OVERLAY_ALPHA)
        return canvas

    @staticmethod
    def _draw_activity_bar(
        canvas: Image.Image, segments: Sequence[Segment], top: float, bar_height: float
    ) -> None:
        draw = ImageDraw.Draw(canvas)
        for left, segment_width, color in segments:
            draw.rectangle((left, top, left + segment_width, top + bar_height), fill=color)
