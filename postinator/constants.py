"""Core constants for the Postinator rendering engine."""

from typing import Dict, Tuple

APP_NAME = "Postinator"

CONFIG_FILE = "config.json"
DEFAULT_ASSETS_DIR = "assets"
DEFAULT_TEMP_DIR = "temp"
DEFAULT_BACKGROUND_FILE = "BG.png"
DEFAULT_OVERLAY_FILE = "Overlay.png"
DEFAULT_FONT_FILE = "Buran USSR.ttf"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

Color = Tuple[int, int, int, int]

FALLBACK_COLOR: Color = (128, 128, 128, 255)
CAPTION_COLOR: Color = (33, 35, 50, 255)
LABEL_COLOR: Color = (20, 30, 40, 255)
FOOTER_TITLE_COLOR: Color = (33, 35, 50, 255)
FOOTER_TOTAL_COLOR: Color = (135, 255, 198, 255)

OVERLAY_ALPHA = 0.6

# Post layout
CAPTION_FONT_SCALE = 85 / 1000
CAPTION_Y_RATIO = 0.86
POST_PHOTO_TENTHS = 6

# Stats layout, in pixels of the stats background
MAX_STAT_ITEMS = 6
TOP_ITEMS_WITH_OTHER = 5
ITEMS_PER_COLUMN = 3
LEFT_COLUMN_X = 410.0
RIGHT_COLUMN_X = 900.0
ROWS_START_Y = 260.0
ROW_STEP = 235.0
LABEL_SPACING = 110.0

TIME_FONT_RATIO = 0.145
LABEL_FONT_RATIO = 0.05
TOTAL_FONT_RATIO = 0.075
TIME_MAX_WIDTH_RATIO = 1.8

STATS_PHOTO_CENTER = (0.75, 0.43)
STATS_PHOTO_SIZE_RATIO = 0.45
STATS_OVERLAY_SCALE = 1.04
BAR_ANCHOR_Y_RATIO = 0.42
BAR_HEIGHT_RATIO = 0.008
BAR_GAP = 2

FOOTER_CENTER = (0.75, 0.70)
FOOTER_TOTAL_OFFSET_RATIO = 0.065

# Wing glyph: control points in the coordinate space of the source artwork.
# Each entry is (side, reference x, points); side -1 is left of the text.
WING_REFERENCE_Y = 255.85
WING_FONT_BASE = 125.5
WING_SCALE = 0.77
WING_MARGIN_OFFSET = 10.0
WING_POLYGONS: Tuple[Tuple[int, float, Tuple[Tuple[float, float], ...]], ...] = (
    (
        -1,
        251.85,
        ((199.4, 338.1), (236.9, 338.1), (251.85, 209.59), (215.42, 209.59), (235.54, 275.79)),
    ),
    (
        1,
        513.73,
        ((513.73, 338.16), (551.23, 338.16), (531.12, 275.85), (567.24, 209.65), (528.57, 209.65)),
    ),
)

MONTHS: Dict[str, int] = {
    "январь": 1,
    "февраль": 2,
    "март": 3,
    "апрель": 4,
    "май": 5,
    "июнь": 6,
    "июль": 7,
    "август": 8,
    "сентябрь": 9,
    "октябрь": 10,
    "ноябрь": 11,
    "декабрь": 12,
}
MIN_CAPTION_YEAR = 2000

REPORTING_API_URL = "https://api.track.toggl.com/api/v9"
REPORTING_REPORTS_URL = "https://api.track.toggl.com/reports/api/v3"
REPORTING_TIMEOUT = 15

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
