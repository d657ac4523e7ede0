"""
Geometry utilities for road network growth.

Points are plain ``(x, y)`` tuples. Angles are in degrees, measured clockwise
from the +y axis, which is the convention the growth heuristics use.
"""

import math
import random
from typing import NamedTuple, Optional, Tuple

import numpy as np

Vector2 = Tuple[float, float]

EPSILON = 1e-8
INTERSECTION_END_MARGIN = 0.001


class LineDistance(NamedTuple):
    """Squared distance from a point to the infinite line through a segment."""
    distance2: float
    point_on_line: Vector2
    line_proj2: float  # signed squared distance along the line of the projected point
    length2: float


def add_points(p1: Vector2, p2: Vector2) -> Vector2:
    return (p1[0] + p2[0], p1[1] + p2[1])


def subtract_points(p1: Vector2, p2: Vector2) -> Vector2:
    return (p1[0] - p2[0], p1[1] - p2[1])


def multiply_scalar(v: Vector2, n: float) -> Vector2:
    return (v[0] * n, v[1] * n)


def cross_product(p1: Vector2, p2: Vector2) -> float:
    return p1[0] * p2[1] - p1[1] * p2[0]


def dot_product(p1: Vector2, p2: Vector2) -> float:
    return p1[0] * p2[0] + p1[1] * p2[1]


def length_v2(v: Vector2) -> float:
    return v[0] * v[0] + v[1] * v[1]


def length_v(v: Vector2) -> float:
    return math.sqrt(length_v2(v))


def length2(p1: Vector2, p2: Vector2) -> float:
    return length_v2(subtract_points(p2, p1))


def length(p1: Vector2, p2: Vector2) -> float:
    return length_v(subtract_points(p2, p1))


def equal_v(v1: Vector2, v2: Vector2) -> bool:
    """Check whether two points coincide within EPSILON (squared distance)."""
    return length2(v1, v2) < EPSILON


def sign(x: float) -> int:
    if x > 0:
        return 1
    if x < 0:
        return -1
    return 0


def fraction_between(v1: Vector2, v2: Vector2, fraction: float) -> Vector2:
    """Point at ``fraction`` of the way from v1 to v2."""
    v1_to_v2 = subtract_points(v2, v1)
    return (v1[0] + v1_to_v2[0] * fraction, v1[1] + v1_to_v2[1] * fraction)


def sin_degrees(deg: float) -> float:
    return math.sin(math.radians(deg))


def cos_degrees(deg: float) -> float:
    return math.cos(math.radians(deg))


def atan_degrees(val: float) -> float:
    return math.degrees(math.atan(val))


def angle_between(v1: Vector2, v2: Vector2) -> float:
    """
    Calculate the unsigned angle in degrees between two vectors.

    Args:
        v1: First vector
        v2: Second vector

    Returns:
        Angle in degrees in range [0, 180]
    """
    vec1 = np.array(v1, dtype=float)
    vec2 = np.array(v2, dtype=float)

    cos_angle = np.dot(vec1, vec2) / (np.linalg.norm(vec1) * np.linalg.norm(vec2))

    # Clamp to [-1, 1] to handle numerical errors
    cos_angle = np.clip(cos_angle, -1.0, 1.0)

    return math.degrees(math.acos(cos_angle))


def direction_of(start: Vector2, end: Vector2) -> float:
    """Clockwise direction in degrees from +y of the vector start -> end, in (-180, 180]."""
    vector = subtract_points(end, start)
    return math.degrees(math.atan2(vector[0], vector[1]))


def min_degree_difference(d1: float, d2: float) -> float:
    """Smallest angle between two undirected lines with the given directions, in [0, 90]."""
    diff = abs(d1 - d2) % 180
    return min(diff, abs(diff - 180))


def line_segments_intersect(
    p: Vector2,
    p2: Vector2,
    q: Vector2,
    q2: Vector2,
    omit_ends: bool = False
) -> Optional[Tuple[Vector2, float]]:
    """
    Intersect segment p->p2 with segment q->q2 using the cross product method.

    Collinear and parallel segments never intersect.

    Args:
        p: Start of the first segment
        p2: End of the first segment
        q: Start of the second segment
        q2: End of the second segment
        omit_ends: Ignore intersections within a small margin of any endpoint

    Returns:
        ``(point, t)`` where t is the parameter along the first segment, or None
    """
    r = subtract_points(p2, p)
    s = subtract_points(q2, q)

    u_numerator = cross_product(subtract_points(q, p), r)
    denominator = cross_product(r, s)

    if denominator == 0:
        # parallel or collinear
        return None

    u = u_numerator / denominator
    t = cross_product(subtract_points(q, p), s) / denominator

    if omit_ends:
        low, high = INTERSECTION_END_MARGIN, 1 - INTERSECTION_END_MARGIN
        hit = low < t < high and low < u < high
    else:
        hit = 0 <= t <= 1 and 0 <= u <= 1

    if not hit:
        return None

    return (p[0] + t * r[0], p[1] + t * r[1]), t


def project(v: Vector2, onto: Vector2) -> Tuple[float, Vector2]:
    """Vector projection of v onto ``onto``; returns (dot product, projected vector)."""
    d_product = dot_product(v, onto)
    return d_product, multiply_scalar(onto, d_product / length_v2(onto))


def distance_to_line(p: Vector2, a: Vector2, b: Vector2) -> LineDistance:
    """Project p onto the line through a and b, reporting squared quantities."""
    ap = subtract_points(p, a)
    ab = subtract_points(b, a)
    if length_v2(ab) == 0:
        return LineDistance(distance2=length_v2(ap), point_on_line=a, line_proj2=0.0, length2=0.0)
    d_product, ad = project(ap, ab)
    d = add_points(a, ad)

    return LineDistance(
        distance2=length2(d, p),
        point_on_line=d,
        line_proj2=sign(d_product) * length_v2(ad),
        length2=length_v2(ab)
    )


def random_range(rng: random.Random, low: float, high: float) -> float:
    return rng.random() * (high - low) + low


def random_angle(rng: random.Random, limit: float) -> float:
    """
    Draw a non-zero angle in (-limit, limit) biased towards small deviations.

    Larger magnitudes are redrawn with probability proportional to their cube.
    """
    non_uniform_norm = abs(limit) ** 3
    val = 0.0
    while val == 0 or rng.random() < (abs(val) ** 3) / non_uniform_norm:
        val = random_range(rng, -limit, limit)
    return val
