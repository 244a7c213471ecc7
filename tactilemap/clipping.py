"""Rectangle clipping for polylines and polygons, plus winding helpers.

Everything here works on sequences of ``(x, y)`` pairs in plate
millimetres and returns plain ``LocalPoint`` lists.  Nothing raises on
degenerate input: a fully clipped feature comes back empty.
"""

from typing import NamedTuple, Optional

from .constants import CLIP_MAX_ITERATIONS, VERTEX_DEDUP_TOLERANCE_MM
from .models import LocalPoint


class ClipBounds(NamedTuple):
    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @classmethod
    def for_plate(cls, plate_width_mm: float, plate_height_mm: float) -> 'ClipBounds':
        """Plate rectangle centred on the origin."""
        hw = plate_width_mm / 2
        hh = plate_height_mm / 2
        return cls(-hw, -hh, hw, hh)

    def outset(self, distance: float) -> 'ClipBounds':
        return ClipBounds(self.x_min - distance, self.y_min - distance,
                          self.x_max + distance, self.y_max + distance)

    def contains(self, point) -> bool:
        return is_in_rect(point, self)


# ── Winding ──────────────────────────────────────────────────────────────

def signed_area(polygon) -> float:
    """Shoelace area. Positive for counter-clockwise, negative for clockwise."""
    area = 0.0
    n = len(polygon)
    for i in range(n):
        x0, y0 = polygon[i]
        x1, y1 = polygon[(i + 1) % n]
        area += x0 * y1 - x1 * y0
    return area / 2


def ensure_ccw(polygon) -> list:
    """Return the polygon in counter-clockwise order."""
    if signed_area(polygon) < 0:
        return list(reversed(polygon))
    return list(polygon)


def is_in_rect(point, bounds: ClipBounds) -> bool:
    """Inclusive point-in-rectangle test."""
    x, y = point
    return (bounds.x_min <= x <= bounds.x_max
            and bounds.y_min <= y <= bounds.y_max)


# ── Cohen–Sutherland line clipping ───────────────────────────────────────

INSIDE = 0
LEFT = 1
RIGHT = 2
BOTTOM = 4
TOP = 8


def _outcode(x, y, bounds: ClipBounds) -> int:
    code = INSIDE
    if x < bounds.x_min:
        code |= LEFT
    elif x > bounds.x_max:
        code |= RIGHT
    if y < bounds.y_min:
        code |= BOTTOM
    elif y > bounds.y_max:
        code |= TOP
    return code


def clip_segment_to_rect(p0, p1, bounds: ClipBounds) -> Optional[tuple]:
    """Clip one segment to the rectangle.

    Returns ``(start, end)`` of the visible part, or ``None`` when the
    segment lies entirely outside.
    """
    x0, y0 = p0
    x1, y1 = p1
    code0 = _outcode(x0, y0, bounds)
    code1 = _outcode(x1, y1, bounds)

    for _ in range(CLIP_MAX_ITERATIONS):
        if not (code0 | code1):
            return LocalPoint(x0, y0), LocalPoint(x1, y1)
        if code0 & code1:
            return None

        code_out = code0 if code0 else code1
        if code_out & TOP:
            x = x0 + (x1 - x0) * (bounds.y_max - y0) / (y1 - y0)
            y = bounds.y_max
        elif code_out & BOTTOM:
            x = x0 + (x1 - x0) * (bounds.y_min - y0) / (y1 - y0)
            y = bounds.y_min
        elif code_out & RIGHT:
            y = y0 + (y1 - y0) * (bounds.x_max - x0) / (x1 - x0)
            x = bounds.x_max
        else:
            y = y0 + (y1 - y0) * (bounds.x_min - x0) / (x1 - x0)
            x = bounds.x_min

        if code_out == code0:
            x0, y0 = x, y
            code0 = _outcode(x0, y0, bounds)
        else:
            x1, y1 = x, y
            code1 = _outcode(x1, y1, bounds)

    return None


def clip_polyline_to_rect(points, bounds: ClipBounds) -> list:
    """Clip a polyline, splitting it wherever it leaves the rectangle.

    Returns a list of sub-polylines (each at least two points).  A line
    that exits and re-enters the rectangle yields one piece per visit.
    """
    if len(points) < 2:
        return []

    pieces = []
    current = []
    for i in range(len(points) - 1):
        clipped = clip_segment_to_rect(points[i], points[i + 1], bounds)
        if clipped is None:
            if len(current) >= 2:
                pieces.append(current)
            current = []
            continue

        start, end = clipped
        if current:
            last = current[-1]
            if (abs(last.x - start.x) > VERTEX_DEDUP_TOLERANCE_MM
                    or abs(last.y - start.y) > VERTEX_DEDUP_TOLERANCE_MM):
                if len(current) >= 2:
                    pieces.append(current)
                current = [start]
        else:
            current = [start]
        current.append(end)

    if len(current) >= 2:
        pieces.append(current)
    return pieces


# ── Sutherland–Hodgman polygon clipping ──────────────────────────────────

def _clip_half_plane(polygon, inside, intersect) -> list:
    output = []
    n = len(polygon)
    for i in range(n):
        curr = polygon[i]
        nxt = polygon[(i + 1) % n]
        curr_in = inside(curr)
        next_in = inside(nxt)
        if curr_in and next_in:
            output.append(nxt)
        elif curr_in:
            output.append(intersect(curr, nxt))
        elif next_in:
            output.append(intersect(curr, nxt))
            output.append(nxt)
    return output


def _at_x(x_edge):
    def intersect(a, b):
        t = (x_edge - a[0]) / (b[0] - a[0])
        return LocalPoint(x_edge, a[1] + t * (b[1] - a[1]))
    return intersect


def _at_y(y_edge):
    def intersect(a, b):
        t = (y_edge - a[1]) / (b[1] - a[1])
        return LocalPoint(a[0] + t * (b[0] - a[0]), y_edge)
    return intersect


def clip_polygon_to_rect(polygon, bounds: ClipBounds) -> list:
    """Clip a polygon to the rectangle (Sutherland–Hodgman).

    Returns the clipped vertex list, empty when nothing remains.
    """
    if len(polygon) < 3:
        return []

    passes = [
        (lambda p: p[0] >= bounds.x_min, _at_x(bounds.x_min)),
        (lambda p: p[0] <= bounds.x_max, _at_x(bounds.x_max)),
        (lambda p: p[1] >= bounds.y_min, _at_y(bounds.y_min)),
        (lambda p: p[1] <= bounds.y_max, _at_y(bounds.y_max)),
    ]

    output = [LocalPoint(*p) for p in polygon]
    for inside, intersect in passes:
        if not output:
            break
        output = _clip_half_plane(output, inside, intersect)
    return output
