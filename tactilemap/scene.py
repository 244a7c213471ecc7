"""Scene assembly: clip map data to the plate and build coloured layers."""

import math
import logging
import time
from dataclasses import dataclass, field

from .clipping import ClipBounds, clip_polygon_to_rect, clip_polyline_to_rect
from .constants import (
    CROSSING_SPAN_MM, DEGENERATE_LENGTH_EPSILON, LAYER_NAMES, LAYER_STYLES,
)
from .features import (
    generate_base_plate, generate_orientation_marker, generate_feature,
)
from .mesh import MeshReleasedError, Solid
from .models import Crossing, LocalPoint, TactileMapData

logger = logging.getLogger(__name__)


@dataclass
class GeometryLayer:
    name: str
    label: str
    color: str
    solids: list[Solid] = field(default_factory=list)
    visible: bool = True

    @property
    def triangle_count(self) -> int:
        return sum(s.triangle_count for s in self.solids)


@dataclass
class AssembledScene:
    """Layers for one plate. Owns every solid until :meth:`dispose` is called.

    Usable as a context manager; leaving the block disposes the scene.
    """
    layers: list[GeometryLayer]
    plate_width_mm: float
    plate_height_mm: float
    disposed: bool = False

    def layer(self, name: str) -> GeometryLayer:
        for layer in self.layers:
            if layer.name == name:
                return layer
        raise KeyError(name)

    @property
    def solid_count(self) -> int:
        return sum(len(layer.solids) for layer in self.layers)

    def dispose(self) -> None:
        """Release every solid in every layer exactly once.

        Solids released elsewhere beforehand are skipped so the rest are
        still freed; the scene is then marked disposed and the earlier
        release is reported as :class:`MeshReleasedError`.
        """
        if self.disposed:
            raise MeshReleasedError("Scene has already been disposed")
        released = 0
        already = 0
        for layer in self.layers:
            for solid in layer.solids:
                if solid.released:
                    already += 1
                    continue
                solid.release()
                released += 1
        self.disposed = True
        logger.debug(f"Disposed scene: released {released} solids")
        if already:
            raise MeshReleasedError(
                f"{already} solid(s) were released before the scene was disposed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if not self.disposed:
            self.dispose()
        return False


# ── Crossing orientation ─────────────────────────────────────────────────

def _nearest_road_angle(position, roads) -> float:
    """Direction (radians) of the road segment closest to ``position``.

    Returns 0 when there are no usable road segments.
    """
    px, py = position
    best_angle = 0.0
    best_dist = math.inf

    for road in roads:
        for (ax, ay), (bx, by) in zip(road.points, road.points[1:]):
            dx, dy = bx - ax, by - ay
            len2 = dx * dx + dy * dy
            if len2 < DEGENERATE_LENGTH_EPSILON:
                continue
            t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / len2))
            dist = math.hypot(px - (ax + t * dx), py - (ay + t * dy))
            if dist < best_dist:
                best_dist = dist
                best_angle = math.atan2(dy, dx)

    return best_angle


def orient_crossings(crossings, roads) -> list[Crossing]:
    """Turn single-point crossings into short strips across the nearest road."""
    half_len = CROSSING_SPAN_MM / 2
    oriented = []
    for crossing in crossings:
        if len(crossing.points) != 1:
            oriented.append(crossing)
            continue

        x, y = crossing.points[0]
        perp = _nearest_road_angle((x, y), roads) + math.pi / 2
        dx = half_len * math.cos(perp)
        dy = half_len * math.sin(perp)
        oriented.append(crossing.model_copy(update={
            'points': [LocalPoint(x - dx, y - dy), LocalPoint(x + dx, y + dy)],
        }))
    return oriented


# ── Plate clipping ───────────────────────────────────────────────────────

def _clip_lines(features, bounds: ClipBounds) -> list:
    """Clip polyline features, outsetting by each feature's half-width so the
    buffered edge is trimmed later rather than the centerline now."""
    result = []
    for feature in features:
        pieces = clip_polyline_to_rect(feature.points,
                                       bounds.outset(feature.width_mm / 2))
        if not pieces:
            logger.debug(f"Clipped away {type(feature).__name__} {feature.id}")
        for i, points in enumerate(pieces):
            piece_id = f"{feature.id}-{i}" if len(pieces) > 1 else feature.id
            result.append(feature.model_copy(update={'id': piece_id, 'points': points}))
    return result


def _clip_crossings(crossings, bounds: ClipBounds) -> list:
    result = []
    for crossing in crossings:
        if len(crossing.points) >= 2:
            result.extend(_clip_lines([crossing], bounds))
        elif len(crossing.points) == 1 and bounds.contains(crossing.points[0]):
            result.append(crossing)
    return result


def _clip_buildings(buildings, bounds: ClipBounds) -> list:
    result = []
    for building in buildings:
        footprint = clip_polygon_to_rect(building.footprint, bounds)
        if len(footprint) < 3:
            logger.debug(f"Clipped away building {building.id}")
            continue
        result.append(building.model_copy(update={'footprint': footprint}))
    return result


def _inside(features, bounds: ClipBounds) -> list:
    return [f for f in features if bounds.contains(f.position)]


def clip_map_data_to_plate(map_data: TactileMapData) -> TactileMapData:
    """Restrict every feature to the plate rectangle.

    Single-point crossings are oriented against the unclipped roads
    first, then clipped like any other line.
    """
    meta = map_data.metadata
    bounds = ClipBounds.for_plate(meta.plate_width_mm, meta.plate_height_mm)
    crossings = orient_crossings(map_data.crossings, map_data.roads)

    return map_data.model_copy(update={
        'roads': _clip_lines(map_data.roads, bounds),
        'sidewalks': _clip_lines(map_data.sidewalks, bounds),
        'crossings': _clip_crossings(crossings, bounds),
        'bike_lanes': _clip_lines(map_data.bike_lanes, bounds),
        'buildings': _clip_buildings(map_data.buildings, bounds),
        'curbs': _inside(map_data.curbs, bounds),
        'traffic_signals': _inside(map_data.traffic_signals, bounds),
        'bus_stops': _inside(map_data.bus_stops, bounds),
        'feature_slots': _inside(map_data.feature_slots, bounds),
    })


# ── Assembly ─────────────────────────────────────────────────────────────

def _collect(features, bounds: ClipBounds) -> list[Solid]:
    solids = []
    for feature in features:
        solid = generate_feature(feature, bounds)
        if solid is None:
            logger.debug(f"No geometry for {type(feature).__name__} {feature.id}")
            continue
        solids.append(solid)
    return solids


def _build_layer(name: str, solids: list[Solid]) -> GeometryLayer:
    style = LAYER_STYLES[name]
    return GeometryLayer(name=name, label=style['label'], color=style['color'],
                         solids=solids)


def assemble_scene(map_data: TactileMapData) -> AssembledScene:
    """Build all plate layers from map data.

    Never raises for bad features; anything degenerate is simply left
    out of its layer.  The caller owns the returned scene and must
    dispose it.
    """
    t0 = time.perf_counter()
    clipped = clip_map_data_to_plate(map_data)
    meta = clipped.metadata
    bounds = ClipBounds.for_plate(meta.plate_width_mm, meta.plate_height_mm)

    solids = {
        'basePlate': [generate_base_plate(meta.plate_width_mm, meta.plate_height_mm)],
        'roads': _collect(clipped.roads, bounds),
        'sidewalks': _collect(clipped.sidewalks, bounds),
        'crossings': _collect(clipped.crossings, bounds),
        'buildings': _collect(clipped.buildings, bounds),
        'curbs': _collect(clipped.curbs, bounds),
        'bikeLanes': _collect(clipped.bike_lanes, bounds),
        'orientationMarker': [generate_orientation_marker(meta.plate_width_mm,
                                                          meta.plate_height_mm)],
        'trafficSignals': _collect(clipped.traffic_signals, bounds),
        'busStops': _collect(clipped.bus_stops, bounds),
        'featureSlots': _collect(clipped.feature_slots, bounds),
    }
    layers = [_build_layer(name, solids[name]) for name in LAYER_NAMES]
    scene = AssembledScene(layers=layers,
                           plate_width_mm=meta.plate_width_mm,
                           plate_height_mm=meta.plate_height_mm)

    for layer in layers:
        logger.info(f"  {layer.label}: {len(layer.solids)} solid(s), "
                    f"{layer.triangle_count} triangles")
    logger.info(f"Assembled {scene.solid_count} solids in "
                f"{time.perf_counter() - t0:.3f}s")
    return scene
