"""Solid meshes and polygon extrusion.

A :class:`Solid` holds flat numpy buffers (positions, per-vertex normals
and triangle indices) in plate millimetres, Z up.  Solids are released
explicitly by whoever owns them; releasing one twice is an error rather
than a silent no-op.
"""

import math
import logging
from dataclasses import dataclass, field

import numpy as np
import trimesh

from .buffering import triangulate_polygon
from .clipping import ensure_ccw
from .constants import VERTEX_DEDUP_TOLERANCE_MM

logger = logging.getLogger(__name__)


class MeshReleasedError(RuntimeError):
    """A solid (or scene) was used or released after it was already released."""


@dataclass(eq=False)
class Solid:
    positions: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))
    normals: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))
    indices: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.int32))
    released: bool = False

    @property
    def is_empty(self) -> bool:
        return self.released or len(self.indices) == 0

    @property
    def vertex_count(self) -> int:
        return 0 if self.released else len(self.positions)

    @property
    def triangle_count(self) -> int:
        return 0 if self.released else len(self.indices)

    def release(self) -> None:
        """Drop the buffers. Raises :class:`MeshReleasedError` on a second call."""
        if self.released:
            raise MeshReleasedError("Solid has already been released")
        self.positions = None
        self.normals = None
        self.indices = None
        self.released = True

    def to_trimesh(self) -> trimesh.Trimesh:
        """Copy into a ``trimesh.Trimesh`` without merging vertices."""
        if self.released:
            raise MeshReleasedError("Cannot convert a released solid")
        return trimesh.Trimesh(vertices=self.positions.copy(),
                               faces=self.indices.copy(),
                               vertex_normals=self.normals.copy(),
                               process=False)


def _clean_ring(polygon) -> list:
    """CCW ring without consecutive duplicates or a repeated closing vertex."""
    ordered = ensure_ccw(polygon)
    ring = []
    for i, (x, y) in enumerate(ordered):
        if i > 0:
            px, py = ordered[i - 1]
            if (abs(x - px) <= VERTEX_DEDUP_TOLERANCE_MM
                    and abs(y - py) <= VERTEX_DEDUP_TOLERANCE_MM):
                continue
        ring.append((x, y))

    # Closed ways repeat their first point at the end
    if (len(ring) > 1
            and abs(ring[0][0] - ring[-1][0]) < VERTEX_DEDUP_TOLERANCE_MM
            and abs(ring[0][1] - ring[-1][1]) < VERTEX_DEDUP_TOLERANCE_MM):
        ring.pop()
    return ring


def extrude_polygon(polygon, height: float, z_base: float = 0.0) -> Solid:
    """Lift a 2D polygon into a closed prism from ``z_base`` to ``z_base + height``.

    Produces a bottom cap facing down, a top cap facing up, and one
    flat-shaded quad per boundary edge with its normal pointing away from
    the footprint.  Returns an empty :class:`Solid` when fewer than three
    distinct vertices remain or the footprint cannot be triangulated
    (zero area, self-intersecting).
    """
    ring = _clean_ring(polygon)
    n = len(ring)
    if n < 3:
        return Solid()

    cap = triangulate_polygon(ring)
    if not cap:
        logger.debug(f"No cap triangles for {n}-vertex polygon, skipping")
        return Solid()
    z_bottom = z_base
    z_top = z_base + height

    verts: list[list[float]] = []
    norms: list[list[float]] = []
    faces: list[list[int]] = []

    for x, y in ring:
        verts.append([x, y, z_bottom])
        norms.append([0.0, 0.0, -1.0])
    for x, y in ring:
        verts.append([x, y, z_top])
        norms.append([0.0, 0.0, 1.0])

    # Bottom cap winds the other way so it faces -Z
    for a, b, c in cap:
        faces.append([c, b, a])
    for a, b, c in cap:
        faces.append([a + n, b + n, c + n])

    # ── Side walls ──
    for i in range(n):
        x0, y0 = ring[i]
        x1, y1 = ring[(i + 1) % n]
        dx, dy = x1 - x0, y1 - y0
        length = math.hypot(dx, dy)
        # Right-hand normal of a CCW edge points out of the footprint
        nx, ny = (dy / length, -dx / length) if length > 0 else (0.0, 0.0)

        vi = len(verts)
        verts.extend([[x0, y0, z_bottom], [x1, y1, z_bottom],
                      [x1, y1, z_top], [x0, y0, z_top]])
        norms.extend([[nx, ny, 0.0]] * 4)
        faces.append([vi, vi + 1, vi + 2])
        faces.append([vi, vi + 2, vi + 3])

    return Solid(positions=np.array(verts, dtype=np.float64),
                 normals=np.array(norms, dtype=np.float64),
                 indices=np.array(faces, dtype=np.int32))
