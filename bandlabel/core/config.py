"""
Central configuration for band label placement and chart rendering.
All tunable values live here; no magic numbers in other modules.
"""

from __future__ import annotations
import os

# ----- Paths (repo-relative) -----
DEFAULT_PORTFOLIO_PATH: str = "data/sample_portfolio.json"
DEFAULT_POPULATION_PATH: str = "data/sample_population.json"
DEFAULT_DISTRICTS_PATH: str = "data/sample_districts.geojson"
DEFAULT_STATES_PATH: str = "data/sample_states.geojson"
REPORTS_DIR: str = "reports"

# ----- Label footprint -----
FONT_WIDTH_PX: float = 5.0
"""Fixed per-character advance (px) used for the label footprint."""

FONT_HEIGHT_PX: float = 12.0
"""Fixed line height (px) used for the label footprint."""

FONT_FAMILY: str = "sans-serif"
LABEL_COLOR: str = "white"

# ----- Containment -----
BOUNDARY_MODE: str = "inclusive"
"""'inclusive': a corner on the band edge counts as inside (covers); 'exclusive': contains."""

BOUNDARY_MODES: tuple[str, ...] = ("inclusive", "exclusive")

MIN_POLYGON_AREA: float = 1e-9
"""Bands whose outline area is at or below this are degenerate and host no label."""

OFFSCREEN_ANCHOR: tuple[float, float] = (-1000.0, -1000.0)
"""Where the SVG writer puts labels that did not fit (invisible)."""

# ----- Stream graph canvas -----
STREAM_MIN_WIDTH_PX: int = 1200
STREAM_MIN_HEIGHT_PX: int = 700
STREAM_MARGIN_TOP_PX: float = 40.0
STREAM_MARGIN_LEFT_PX: float = 0.0
STREAM_MARGIN_RIGHT_PX: float = 0.0
STREAM_MARGIN_BOTTOM_PX: float = 0.0
STREAM_AXIS_OFFSET_PX: float = 15.0
STREAM_TICK_FORMAT: str = "%b %y"

STACK_OFFSET: str = "wiggle"
"""Stack baseline: 'zero', 'silhouette' or 'wiggle'."""

STACK_OFFSETS: tuple[str, ...] = ("zero", "silhouette", "wiggle")

STREAM_COLORMAP: str = "hsv"
"""Cyclic matplotlib colormap sampled by volume rank."""

# ----- Portfolio dataset -----
PORTFOLIO_DATE_FORMAT: str = "%b-%Y"
PORTFOLIO_NAME_INDEX: int = 0
PORTFOLIO_TICKER_INDEX: int = 1
PORTFOLIO_AMOUNT_INDEX: int = 4

# ----- Density choropleth -----
DENSITY_THRESHOLDS: tuple[float, ...] = (100, 200, 300, 500, 1000, 2000, 10000, 20000)
"""Upper-exclusive class breaks (people per km²)."""

DENSITY_COLORMAP: str = "OrRd"
DENSITY_PADDING_PX: float = 30.0
DENSITY_WIDTH_PX: int = 960
DENSITY_HEIGHT_PX: int = 1000
DENSITY_LEGEND_DOMAIN: tuple[float, float] = (0.0, 45000.0)
DENSITY_LEGEND_BAR_HEIGHT_PX: float = 8.0
DENSITY_LEGEND_TICK_SIZE_PX: float = 13.0
DENSITY_STATE_STROKE_OPACITY: float = 0.2
DENSITY_STATE_STROKE_WIDTH: float = 0.5
MISSING_TEXT: str = "Data Not Available"

# ----- Rendering -----
RENDER_DPI: int = 100

# ----- Logging / debug -----
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
"""Root log level for CLI/UI. Set env LOG_LEVEL=DEBUG for placement decisions."""

BANDLABEL_DEBUG: bool = os.environ.get("BANDLABEL_DEBUG", "").lower() in ("1", "true", "yes")
"""Write debug.png with candidate overlay. Set env BANDLABEL_DEBUG=1 to enable by default."""
