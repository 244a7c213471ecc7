"""Input data model for tactile map generation.

All coordinates are LOCAL millimetres relative to the map centre
(x = east, y = north).  JSON uses the camelCase keys written by the
upstream parser; Python code uses the snake_case attribute names.
"""

import logging
import pathlib
from typing import Annotated, Literal, NamedTuple, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from .constants import (
    DEFAULT_BIKE_LANE_WIDTH_M, DEFAULT_BUILDING_HEIGHT_MM,
    DEFAULT_CROSSING_WIDTH_M, DEFAULT_ROAD_WIDTH_M, DEFAULT_ROAD_WIDTHS_M,
    DEFAULT_SIDEWALK_WIDTH_M, CURB_HEIGHTS,
)

logger = logging.getLogger(__name__)


class LocalPoint(NamedTuple):
    x: float
    y: float


def _coerce_point(value):
    """Accept ``{"x": .., "y": ..}`` as well as ``[x, y]``."""
    if isinstance(value, dict):
        return (value['x'], value['y'])
    return value


Point = Annotated[LocalPoint, BeforeValidator(_coerce_point)]


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel,
                              populate_by_name=True, frozen=True)


# ── Features ─────────────────────────────────────────────────────────────

class Road(_Model):
    id: str
    name: Optional[str] = None
    highway_type: str = 'residential'
    points: list[Point] = []
    width_mm: float
    lanes: Optional[int] = None
    oneway: bool = False
    surface: Optional[str] = None


class Sidewalk(_Model):
    id: str
    points: list[Point] = []
    width_mm: float
    side: Optional[Literal['left', 'right', 'both']] = None
    surface: Optional[str] = None


class Crossing(_Model):
    id: str
    type: Literal['zebra', 'marked', 'unmarked', 'signals', 'uncontrolled'] = 'unmarked'
    points: list[Point] = []
    width_mm: float
    has_signal: bool = False
    has_tactile_paving: bool = False


class Curb(_Model):
    id: str
    type: Literal['flush', 'lowered', 'raised', 'rolled']
    height_mm: float
    position: Point
    associated_sidewalk_id: Optional[str] = None
    associated_crossing_id: Optional[str] = None

    @model_validator(mode='before')
    @classmethod
    def _default_height(cls, data):
        """Nominal height for the curb type when none is recorded."""
        if (isinstance(data, dict)
                and data.get('heightMm', data.get('height_mm')) is None):
            data = {**data, 'heightMm': CURB_HEIGHTS.get(data.get('type'), 0.0)}
        return data


class TrafficSignal(_Model):
    id: str
    position: Point
    signal_type: Literal['traffic_signals', 'pedestrian_signals', 'button'] = 'traffic_signals'


class BusStop(_Model):
    id: str
    position: Point
    name: Optional[str] = None
    shelter: bool = False


class BikeLane(_Model):
    id: str
    points: list[Point] = []
    width_mm: float
    type: Literal['lane', 'track', 'shared'] = 'lane'


class Building(_Model):
    id: str
    footprint: list[Point] = []
    height_mm: float = DEFAULT_BUILDING_HEIGHT_MM


class FeatureSlot(_Model):
    id: str
    position: Point
    slot_type: Literal['stop_sign', 'yield_sign', 'bus_stop', 'mailbox',
                       'bike_lane', 'railroad', 'pedestrian_crossing'] = 'stop_sign'
    rotation_deg: float = 0.0
    width_mm: float
    depth_mm: float


# ── Plate description ────────────────────────────────────────────────────

class LatLng(_Model):
    lat: float
    lng: float


class MapMetadata(_Model):
    center: LatLng
    radius_metres: float
    fetched_at: str = ''
    overpass_query: str = ''
    scale_factor: float
    plate_width_mm: float
    plate_height_mm: float


class MapBounds(_Model):
    south: float
    west: float
    north: float
    east: float
    local_min_x: float
    local_min_y: float
    local_max_x: float
    local_max_y: float


# ── Aggregate ────────────────────────────────────────────────────────────

def _fill_width(items, scale_factor, width_for):
    """Fill missing ``widthMm`` on raw feature dicts from real-world defaults."""
    filled = []
    for item in items:
        if (isinstance(item, dict) and 'widthMm' not in item
                and 'width_mm' not in item):
            item = {**item, 'widthMm': width_for(item) * scale_factor}
        filled.append(item)
    return filled


def _road_width_m(item) -> float:
    highway = item.get('highwayType', item.get('highway_type'))
    return DEFAULT_ROAD_WIDTHS_M.get(highway, DEFAULT_ROAD_WIDTH_M)


class TactileMapData(_Model):
    metadata: MapMetadata
    bounds: Optional[MapBounds] = None
    roads: list[Road] = []
    sidewalks: list[Sidewalk] = []
    crossings: list[Crossing] = []
    curbs: list[Curb] = []
    traffic_signals: list[TrafficSignal] = []
    bus_stops: list[BusStop] = []
    bike_lanes: list[BikeLane] = []
    buildings: list[Building] = []
    feature_slots: list[FeatureSlot] = []

    @model_validator(mode='before')
    @classmethod
    def _default_widths(cls, data):
        """Derive missing line widths from real-world defaults × scale factor."""
        if not isinstance(data, dict):
            return data
        metadata = data.get('metadata')
        if isinstance(metadata, dict):
            scale = metadata.get('scaleFactor', metadata.get('scale_factor'))
        else:
            scale = getattr(metadata, 'scale_factor', None)
        if scale is None:
            return data

        data = dict(data)
        defaults = {
            'roads': _road_width_m,
            'sidewalks': lambda item: DEFAULT_SIDEWALK_WIDTH_M,
            'crossings': lambda item: DEFAULT_CROSSING_WIDTH_M,
        }
        for key, width_for in defaults.items():
            if key in data:
                data[key] = _fill_width(data[key], scale, width_for)
        for key in ('bikeLanes', 'bike_lanes'):
            if key in data:
                data[key] = _fill_width(data[key], scale,
                                        lambda item: DEFAULT_BIKE_LANE_WIDTH_M)
        return data

    def feature_count(self) -> int:
        return sum(len(group) for group in (
            self.roads, self.sidewalks, self.crossings, self.curbs,
            self.traffic_signals, self.bus_stops, self.bike_lanes,
            self.buildings, self.feature_slots))


def load_map_data(path) -> TactileMapData:
    """Read and validate a tactile map JSON file."""
    path = pathlib.Path(path)
    data = TactileMapData.model_validate_json(path.read_text(encoding='utf-8'))
    logger.info(f"Loaded {data.feature_count()} features from {path.name} "
                f"(plate {data.metadata.plate_width_mm:g}×"
                f"{data.metadata.plate_height_mm:g} mm)")
    return data
