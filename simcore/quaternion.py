#!/usr/bin/env python3
"""
Quaternion helpers for spaceship orientation.

Quaternions are (x, y, z, w) tuples. Like the vector helpers these are pure
functions returning new tuples.
"""
import math
from typing import Tuple

from .vector_utils import Vec3, vec_cross, vec_dot

Quat = Tuple[float, float, float, float]

IDENTITY: Quat = (0.0, 0.0, 0.0, 1.0)

_PARALLEL_EPS = 1e-8


def quat_from_axis_angle(axis: Vec3, angle: float) -> Quat:
    """Rotation of `angle` radians about a unit `axis`."""
    half = angle / 2.0
    s = math.sin(half)
    return (axis[0] * s, axis[1] * s, axis[2] * s, math.cos(half))


def quat_mul(a: Quat, b: Quat) -> Quat:
    """Hamilton product a * b (apply b first, then a)."""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return (
        ax * bw + aw * bx + ay * bz - az * by,
        ay * bw + aw * by + az * bx - ax * bz,
        az * bw + aw * bz + ax * by - ay * bx,
        aw * bw - ax * bx - ay * by - az * bz,
    )


def quat_len(q: Quat) -> float:
    return math.sqrt(q[0] * q[0] + q[1] * q[1] + q[2] * q[2] + q[3] * q[3])


def quat_normalize(q: Quat) -> Quat:
    l = quat_len(q)
    if l == 0 or not math.isfinite(l):
        return IDENTITY
    return (q[0] / l, q[1] / l, q[2] / l, q[3] / l)


def quat_rotate(q: Quat, v: Vec3) -> Vec3:
    """Rotate vector v by unit quaternion q."""
    qx, qy, qz, qw = q
    x, y, z = v

    ix = qw * x + qy * z - qz * y
    iy = qw * y + qz * x - qx * z
    iz = qw * z + qx * y - qy * x
    iw = -qx * x - qy * y - qz * z

    return (
        ix * qw + iw * -qx + iy * -qz - iz * -qy,
        iy * qw + iw * -qy + iz * -qx - ix * -qz,
        iz * qw + iw * -qz + ix * -qy - iy * -qx,
    )


def quat_from_unit_vectors(v_from: Vec3, v_to: Vec3) -> Quat:
    """
    Shortest rotation taking unit vector v_from onto unit vector v_to.

    Opposite vectors have no unique shortest rotation; a half-turn about an
    axis perpendicular to v_from is returned.
    """
    r = vec_dot(v_from, v_to) + 1.0
    if r < _PARALLEL_EPS:
        if abs(v_from[0]) > abs(v_from[2]):
            q = (-v_from[1], v_from[0], 0.0, 0.0)
        else:
            q = (0.0, -v_from[2], v_from[1], 0.0)
    else:
        c = vec_cross(v_from, v_to)
        q = (c[0], c[1], c[2], r)
    return quat_normalize(q)
