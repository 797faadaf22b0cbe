#!/usr/bin/env python3
"""
Vector helper functions for 3D operations.

Vectors are plain (x, y, z) tuples; every helper returns a new tuple so
snapshots handed to the predictor can never be mutated by it.
"""
import math
from typing import Tuple

Vec3 = Tuple[float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec3(v) -> Vec3:
    """Coerce any 3-item sequence to a float tuple."""
    return (float(v[0]), float(v[1]), float(v[2]))


def vec_add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def vec_sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def vec_scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def vec_len(a: Vec3) -> float:
    return math.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def vec_norm(a: Vec3) -> Vec3:
    l = vec_len(a)
    if l == 0:
        return ZERO
    return (a[0] / l, a[1] / l, a[2] / l)


def vec_dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def clamp_magnitude(a: Vec3, max_length: float) -> Vec3:
    """
    Shorten a to max_length if it is longer, preserving direction.

    Vectors already within the limit are returned unchanged. For longer ones the
    scale factor is stepped down one ulp at a time until vec_len(result) <= max_length
    holds in floating point, so the result never reads as over the limit.
    """
    l = vec_len(a)
    if l <= max_length or l == 0:
        return a
    if not max_length > 0:
        return ZERO
    k = max_length / l
    result = vec_scale(a, k)
    while vec_len(result) > max_length:
        k = math.nextafter(k, 0.0)
        result = vec_scale(a, k)
    return result


def is_finite(a: Vec3) -> bool:
    return all(math.isfinite(c) for c in a)
