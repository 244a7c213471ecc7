"""Per-feature solid generators.

Each generator turns one feature (or the plate dimensions) into a
:class:`~tactilemap.mesh.Solid`, or returns ``None`` when the feature
degenerates: too few points, zero height, or clipped away entirely.
"""

import math
from typing import Optional

from .buffering import buffer_polyline
from .clipping import ClipBounds, clip_polygon_to_rect
from .constants import (
    HEIGHTS, CURB_HEIGHTS, CURB_SIZE_MM, SIGNAL_SIZE_MM, BUS_STOP_SIZE_MM,
    POINT_MARKER_HEIGHT_MM, SLOT_INDICATOR_HEIGHT_MM,
    ORIENTATION_MARKER_SIZE_MM, ORIENTATION_MARKER_INSET_MM,
)
from .mesh import Solid, extrude_polygon
from .models import (
    LocalPoint, Road, Sidewalk, Crossing, Curb, TrafficSignal, BusStop,
    BikeLane, Building, FeatureSlot,
)


def _non_empty(solid: Solid) -> Optional[Solid]:
    return None if solid.is_empty else solid


# ── Footprint helpers ────────────────────────────────────────────────────

def _rectangle(x1, y1, x2, y2) -> list:
    return [LocalPoint(x1, y1), LocalPoint(x2, y1),
            LocalPoint(x2, y2), LocalPoint(x1, y2)]


def _square_at(position, size: float) -> list:
    hs = size / 2
    x, y = position
    return _rectangle(x - hs, y - hs, x + hs, y + hs)


def _octagon_at(position, size: float) -> list:
    r = size / 2
    x, y = position
    return [LocalPoint(x + r * math.cos(i * math.pi / 4),
                       y + r * math.sin(i * math.pi / 4))
            for i in range(8)]


def _slot_rectangle(slot: FeatureSlot) -> list:
    """Slot corners rotated by ``rotation_deg`` about the slot position."""
    hw = slot.width_mm / 2
    hd = slot.depth_mm / 2
    rad = math.radians(slot.rotation_deg)
    cos, sin = math.cos(rad), math.sin(rad)
    px, py = slot.position
    corners = [(-hw, -hd), (hw, -hd), (hw, hd), (-hw, hd)]
    return [LocalPoint(px + cx * cos - cy * sin, py + cx * sin + cy * cos)
            for cx, cy in corners]


# ── Plate-level solids ───────────────────────────────────────────────────

def generate_base_plate(plate_width_mm: float, plate_height_mm: float) -> Solid:
    """Flat plate centred on the origin, BASE_PLATE thick."""
    hw = plate_width_mm / 2
    hh = plate_height_mm / 2
    return extrude_polygon(_rectangle(-hw, -hh, hw, hh), HEIGHTS['BASE_PLATE'])


def generate_orientation_marker(plate_width_mm: float, plate_height_mm: float) -> Solid:
    """Raised square in the north-east corner, the tallest thing on the plate.

    It starts at z=0 so a finger can find it from the plate edge.
    """
    hw = plate_width_mm / 2
    hh = plate_height_mm / 2
    x2 = hw - ORIENTATION_MARKER_INSET_MM
    y2 = hh - ORIENTATION_MARKER_INSET_MM
    x1 = x2 - ORIENTATION_MARKER_SIZE_MM
    y1 = y2 - ORIENTATION_MARKER_SIZE_MM
    return extrude_polygon(_rectangle(x1, y1, x2, y2), HEIGHTS['ORIENTATION_MARKER'])


# ── Line features ────────────────────────────────────────────────────────

def _buffered_solid(points, width_mm: float, height: float, z_base: float,
                    clip_bounds: Optional[ClipBounds]) -> Optional[Solid]:
    if len(points) < 2:
        return None

    polygon = buffer_polyline(points, width_mm)
    if len(polygon) < 3:
        return None

    if clip_bounds is not None:
        polygon = clip_polygon_to_rect(polygon, clip_bounds)
        if len(polygon) < 3:
            return None

    return _non_empty(extrude_polygon(polygon, height, z_base))


def generate_road(road: Road, clip_bounds: Optional[ClipBounds] = None) -> Optional[Solid]:
    return _buffered_solid(road.points, road.width_mm, HEIGHTS['ROAD_SURFACE'],
                           HEIGHTS['BASE_PLATE'], clip_bounds)


def generate_sidewalk(sidewalk: Sidewalk,
                      clip_bounds: Optional[ClipBounds] = None) -> Optional[Solid]:
    return _buffered_solid(sidewalk.points, sidewalk.width_mm, HEIGHTS['SIDEWALK'],
                           HEIGHTS['BASE_PLATE'], clip_bounds)


def generate_crossing(crossing: Crossing,
                      clip_bounds: Optional[ClipBounds] = None) -> Optional[Solid]:
    """Crossing strip at CROSSING height. Single-point crossings must be
    oriented into a polyline first; on their own they produce nothing."""
    return _buffered_solid(crossing.points, crossing.width_mm, HEIGHTS['CROSSING'],
                           HEIGHTS['BASE_PLATE'], clip_bounds)


def generate_bike_lane(bike_lane: BikeLane,
                       clip_bounds: Optional[ClipBounds] = None) -> Optional[Solid]:
    """Bike lanes sit one road-surface layer above the road."""
    return _buffered_solid(bike_lane.points, bike_lane.width_mm,
                           HEIGHTS['ROAD_SURFACE'],
                           HEIGHTS['BASE_PLATE'] + HEIGHTS['ROAD_SURFACE'],
                           clip_bounds)


# ── Area and point features ──────────────────────────────────────────────

def generate_building(building: Building) -> Optional[Solid]:
    if len(building.footprint) < 3 or building.height_mm <= 0:
        return None
    return _non_empty(extrude_polygon(building.footprint, building.height_mm,
                                      HEIGHTS['BASE_PLATE']))


def generate_curb(curb: Curb) -> Optional[Solid]:
    """Square curb marker; its height comes from the curb type (flush has none)."""
    height = CURB_HEIGHTS[curb.type]
    if height <= 0:
        return None
    return extrude_polygon(_square_at(curb.position, CURB_SIZE_MM), height,
                           HEIGHTS['BASE_PLATE'])


def generate_traffic_signal(signal: TrafficSignal) -> Solid:
    return extrude_polygon(_octagon_at(signal.position, SIGNAL_SIZE_MM),
                           POINT_MARKER_HEIGHT_MM, HEIGHTS['BASE_PLATE'])


def generate_bus_stop(bus_stop: BusStop) -> Solid:
    return extrude_polygon(_octagon_at(bus_stop.position, BUS_STOP_SIZE_MM),
                           POINT_MARKER_HEIGHT_MM, HEIGHTS['BASE_PLATE'])


def generate_feature_slot(slot: FeatureSlot) -> Optional[Solid]:
    """Thin slab just below the plate surface marking where a slot will be cut."""
    return _non_empty(extrude_polygon(
        _slot_rectangle(slot), SLOT_INDICATOR_HEIGHT_MM,
        HEIGHTS['BASE_PLATE'] - SLOT_INDICATOR_HEIGHT_MM))


# ── Dispatch ─────────────────────────────────────────────────────────────

def generate_feature(feature, clip_bounds: Optional[ClipBounds] = None) -> Optional[Solid]:
    """Build the solid for any feature variant.

    Line features are clipped to ``clip_bounds`` after buffering; area and
    point features are expected to be filtered beforehand.
    """
    if isinstance(feature, Road):
        return generate_road(feature, clip_bounds)
    if isinstance(feature, Sidewalk):
        return generate_sidewalk(feature, clip_bounds)
    if isinstance(feature, Crossing):
        return generate_crossing(feature, clip_bounds)
    if isinstance(feature, BikeLane):
        return generate_bike_lane(feature, clip_bounds)
    if isinstance(feature, Building):
        return generate_building(feature)
    if isinstance(feature, Curb):
        return generate_curb(feature)
    if isinstance(feature, TrafficSignal):
        return generate_traffic_signal(feature)
    if isinstance(feature, BusStop):
        return generate_bus_stop(feature)
    if isinstance(feature, FeatureSlot):
        return generate_feature_slot(feature)
    raise TypeError(f"No generator for {type(feature).__name__}")
