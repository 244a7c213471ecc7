"""Polyline buffering and ear-clipping triangulation."""

import math

from .constants import DEGENERATE_LENGTH_EPSILON
from .models import LocalPoint

_DEFAULT_NORMAL = LocalPoint(0.0, 1.0)


def _vertex_normal(points, index: int) -> LocalPoint:
    """Unit normal at a vertex, averaged over its adjacent segments."""
    nx = ny = 0.0
    count = 0
    x, y = points[index]

    neighbours = []
    if index > 0:
        px, py = points[index - 1]
        neighbours.append((x - px, y - py))
    if index < len(points) - 1:
        qx, qy = points[index + 1]
        neighbours.append((qx - x, qy - y))

    for dx, dy in neighbours:
        length = math.hypot(dx, dy)
        if length > 0:
            nx += -dy / length
            ny += dx / length
            count += 1

    if count == 0:
        return _DEFAULT_NORMAL

    nx /= count
    ny /= count
    length = math.hypot(nx, ny)
    if length < DEGENERATE_LENGTH_EPSILON:
        return _DEFAULT_NORMAL
    return LocalPoint(nx / length, ny / length)


def buffer_polyline(points, width: float) -> list:
    """Offset a centerline into a closed ribbon polygon ``width`` wide.

    Each vertex moves ``width / 2`` along its averaged normal, so corners
    are displaced rather than mitred; very sharp turns overlap slightly.
    Returns the left edge followed by the reversed right edge, or ``[]``
    for fewer than two points.
    """
    if len(points) < 2:
        return []

    half_width = width / 2
    left = []
    right = []
    for i, (x, y) in enumerate(points):
        nx, ny = _vertex_normal(points, i)
        left.append(LocalPoint(x + nx * half_width, y + ny * half_width))
        right.append(LocalPoint(x - nx * half_width, y - ny * half_width))

    right.reverse()
    return left + right


def _sign(p1, p2, p3) -> float:
    return (p1[0] - p3[0]) * (p2[1] - p3[1]) - (p2[0] - p3[0]) * (p1[1] - p3[1])


def _point_in_triangle(p, a, b, c) -> bool:
    """Inclusive test: points on an edge count as inside."""
    d1 = _sign(p, a, b)
    d2 = _sign(p, b, c)
    d3 = _sign(p, c, a)
    has_neg = d1 < 0 or d2 < 0 or d3 < 0
    has_pos = d1 > 0 or d2 > 0 or d3 > 0
    return not (has_neg and has_pos)


def triangulate_polygon(vertices) -> list:
    """Ear-clip a simple counter-clockwise polygon.

    Returns ``(i, j, k)`` index triples into ``vertices``.  Self-intersecting
    or otherwise degenerate input gives a partial (possibly empty) result
    instead of an error.
    """
    n = len(vertices)
    if n < 3:
        return []

    triangles = []
    remaining = list(range(n))
    budget = n * n

    while len(remaining) > 2 and budget > 0:
        budget -= 1
        ear_found = False
        count = len(remaining)
        for i in range(count):
            prev = remaining[i - 1]
            curr = remaining[i]
            nxt = remaining[(i + 1) % count]
            a, b, c = vertices[prev], vertices[curr], vertices[nxt]

            cross = (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])
            if cross <= 0:
                continue

            if any(_point_in_triangle(vertices[idx], a, b, c)
                   for idx in remaining if idx not in (prev, curr, nxt)):
                continue

            triangles.append((prev, curr, nxt))
            del remaining[i]
            ear_found = True
            break

        if not ear_found:
            break

    return triangles
