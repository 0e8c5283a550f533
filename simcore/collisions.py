#!/usr/bin/env python3
"""
Collision handling for the solar system simulator.

Overlapping bodies bounce: the pair is pushed apart along the collision normal,
split in inverse proportion to mass, and a restitution impulse is applied along
the normal unless the bodies are already separating.

Restitution defaults to 0.95, so every bounce loses a little relative normal
velocity. Collisions replace gravity for the pair in the same step; that
decision belongs to the physics step, which calls resolve_collision instead of
accumulating the pair's gravitational force.
"""
import logging

from . import constants as C
from .data_models import Body
from .log import get_logger
from .vector_utils import Vec3, vec_add, vec_dot, vec_scale, vec_sub

logger = get_logger("collisions")


def collision_normal(separation: Vec3, distance: float) -> Vec3:
    """
    Unit vector from body I toward body J.

    Coincident bodies (distance 0) have no defined direction; FALLBACK_NORMAL
    is used so the pair still separates instead of producing NaN.
    """
    if distance <= 0.0:
        return C.FALLBACK_NORMAL
    return vec_scale(separation, 1.0 / distance)


def is_overlapping(bi: Body, bj: Body, distance: float) -> bool:
    return distance < bi.radius + bj.radius


def resolve_collision(bi: Body, bj: Body, separation: Vec3, distance: float,
                      restitution: float = C.RESTITUTION) -> bool:
    """
    Separate an overlapping pair and bounce it.

    Returns True if a velocity impulse was applied, False if the bodies were
    already separating (positional correction still happens).
    """
    normal = collision_normal(separation, distance)

    # Resolve overlap inversely proportional to mass: the heavier body moves less
    overlap = (bi.radius + bj.radius) - distance
    total_mass = bi.mass + bj.mass
    move_i = overlap * (bj.mass / total_mass)
    move_j = overlap * (bi.mass / total_mass)
    bi.position = vec_sub(bi.position, vec_scale(normal, move_i))
    bj.position = vec_add(bj.position, vec_scale(normal, move_j))

    # Relative normal velocity
    relative = vec_sub(bj.velocity, bi.velocity)
    vn = vec_dot(relative, normal)
    if vn > 0:
        # Already separating
        return False

    impulse = _apply_elastic_impulse(bi, bj, normal, vn, restitution)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Collision resolved", extra={
            "body_i": bi.name, "body_j": bj.name, "overlap": overlap, "impulse": impulse,
        })
    return True


def _apply_elastic_impulse(bi: Body, bj: Body, normal: Vec3, vn: float, e: float) -> float:
    """Apply 1D restitution impulse along the collision normal; returns the impulse scalar."""
    j_imp = -(1.0 + e) * vn / (1.0 / bi.mass + 1.0 / bj.mass)
    bi.velocity = vec_sub(bi.velocity, vec_scale(normal, j_imp / bi.mass))
    bj.velocity = vec_add(bj.velocity, vec_scale(normal, j_imp / bj.mass))
    return j_imp
