"""Print dimensions, layer styling, tolerances and environment configuration."""

import os
import pathlib
import logging

from dotenv import load_dotenv

# ── Heights (mm, Z axis of the printed plate) ────────────────────────────
HEIGHTS = {
    'BASE_PLATE': 2.0,

    'ROAD_SURFACE': 0.1,
    'CROSSING': 0.8,
    'SIDEWALK': 2.5,

    'CURB_FLUSH': 0.0,
    'CURB_LOWERED': 1.2,
    'CURB_RAISED': 2.5,
    'CURB_ROLLED': 1.8,

    'ORIENTATION_MARKER': 5.5,
    'BUILDING': 3.0,
}

CURB_HEIGHTS = {
    'flush': HEIGHTS['CURB_FLUSH'],
    'lowered': HEIGHTS['CURB_LOWERED'],
    'raised': HEIGHTS['CURB_RAISED'],
    'rolled': HEIGHTS['CURB_ROLLED'],
}

# ── Marker footprints (mm) ───────────────────────────────────────────────
CURB_SIZE_MM = 3.0
SIGNAL_SIZE_MM = 3.0
BUS_STOP_SIZE_MM = 4.0
POINT_MARKER_HEIGHT_MM = 3.0
SLOT_INDICATOR_HEIGHT_MM = 0.2
ORIENTATION_MARKER_SIZE_MM = 8.0
ORIENTATION_MARKER_INSET_MM = 2.0
CROSSING_SPAN_MM = 8.0

# ── Real-world defaults (metres), scaled by the plate's scale factor ────
DEFAULT_ROAD_WIDTHS_M = {
    'motorway': 14.0,
    'trunk': 12.0,
    'primary': 10.0,
    'secondary': 8.0,
    'tertiary': 7.0,
    'residential': 6.0,
    'unclassified': 5.0,
    'service': 4.0,
    'living_street': 5.0,
    'footway': 1.8,
    'cycleway': 2.0,
    'path': 1.5,
    'pedestrian': 4.0,
}
DEFAULT_ROAD_WIDTH_M = DEFAULT_ROAD_WIDTHS_M['residential']
DEFAULT_CROSSING_WIDTH_M = 3.0
DEFAULT_SIDEWALK_WIDTH_M = 1.8
DEFAULT_BIKE_LANE_WIDTH_M = 2.0
DEFAULT_BUILDING_HEIGHT_MM = HEIGHTS['BUILDING']

# ── Geometry tolerances ──────────────────────────────────────────────────
# Empirical absolute thresholds in plate millimetres.
VERTEX_DEDUP_TOLERANCE_MM = 1e-6
DEGENERATE_LENGTH_EPSILON = 1e-10
CLIP_MAX_ITERATIONS = 20

METRES_PER_DEGREE = 111320.0

# ── Layer styling ────────────────────────────────────────────────────────
# Order here is the order layers appear in an assembled scene.
LAYER_STYLES = {
    'basePlate':         {'label': 'Base Plate',         'color': '#e0e0e0'},
    'roads':             {'label': 'Roads',              'color': '#404040'},
    'sidewalks':         {'label': 'Sidewalks',          'color': '#a0a0a0'},
    'crossings':         {'label': 'Crossings',          'color': '#ffffff'},
    'buildings':         {'label': 'Buildings',          'color': '#8b7355'},
    'curbs':             {'label': 'Curbs',              'color': '#606060'},
    'bikeLanes':         {'label': 'Bike Lanes',         'color': '#4a9c2f'},
    'orientationMarker': {'label': 'Orientation Marker', 'color': '#ff6600'},
    'trafficSignals':    {'label': 'Traffic Signals',    'color': '#cc0000'},
    'busStops':          {'label': 'Bus Stops',          'color': '#0066cc'},
    'featureSlots':      {'label': 'Feature Slots',      'color': '#ffcc00'},
}
LAYER_NAMES = tuple(LAYER_STYLES)

# Load environment variables
load_dotenv()

# Configure base paths
BASE_DIR = pathlib.Path.cwd()
OUTPUT_DIR = pathlib.Path(os.environ.get("TACTILEMAP_OUTPUT_DIR", BASE_DIR / "output"))

LOG_LEVEL = os.environ.get("TACTILEMAP_LOG_LEVEL", "INFO").strip().upper()
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def resolve_log_level(name: str) -> int:
    """Map a level name from the environment onto a ``logging`` level."""
    level = logging.getLevelName(name.strip().upper())
    if isinstance(level, int):
        return level
    return logging.INFO
