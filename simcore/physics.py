#!/usr/bin/env python3
"""
Core Physics Engine for the solar system simulator

Responsibilities
- Accumulate pairwise Newtonian gravity between all bodies.
- Resolve overlapping pairs as bounces instead of attracting them.
- Apply the piloted craft's thrust and cap its speed below the configured c.
- Advance body states with semi-implicit Euler (velocity first, then position).
- Provide small diagnostics (momentum, kinetic and potential energy).

Step order (one call to NBodyPhysics.step)
1) Reset every force accumulator.
2) Add forward thrust to the spaceship, if any.
3) For each pair i < j in registry order: collision branch if the spheres
   overlap, otherwise gravity G*mi*mj/d^2, equal and opposite.
4) Integrate every body; the spaceship's speed is clamped before its position update.

All forces of a step are accumulated before any body is integrated, so no body's
updated state is read by another body's interaction in the same step.

Numerical notes
- No softening term is applied to the force law even though a softening value is
  configurable; overlapping pairs never reach the gravity branch, and that is what
  keeps d away from zero.
- Complexity: O(N^2) pair loop per step (direct summation).
- A non-finite position or velocity after integration raises
  NumericalInstabilityError; the host must reset the simulation.
"""
from typing import Sequence

from . import constants as C
from .collisions import is_overlapping, resolve_collision
from .data_models import Body
from .exceptions import NumericalInstabilityError
from .log import get_logger
from .vector_utils import (
    ZERO,
    Vec3,
    vec_add,
    vec_clamp_length,
    vec_is_finite,
    vec_len,
    vec_scale,
    vec_sub,
)

logger = get_logger("physics")


class NBodyPhysics:
    """
    N-body gravitational physics engine with bounce collisions.

    The gravitational force between two non-overlapping bodies is:
    F = G * m1 * m2 / d^2 along the line of centres
    """

    def __init__(self,
                 gravitational_constant: float = C.G,
                 restitution: float = C.RESTITUTION,
                 max_speed: float = C.SPEED_OF_LIGHT * C.LIGHT_SPEED_FRACTION,
                 softening: float = C.SOFTENING):
        """
        Initialize the physics engine.

        Args:
            gravitational_constant: G in world units
            restitution: Fraction of relative normal velocity kept by a bounce
            max_speed: Speed cap for the piloted craft
            softening: Stored for configuration parity; not used by the force law
        """
        self.gravitational_constant = float(gravitational_constant)
        self.restitution = float(restitution)
        self.max_speed = float(max_speed)
        self.softening = max(0.0, float(softening))
        self.last_collision_count = 0

    @classmethod
    def from_config(cls, config) -> "NBodyPhysics":
        return cls(
            gravitational_constant=config.gravitational_constant,
            restitution=config.restitution,
            max_speed=config.max_speed,
            softening=config.softening,
        )

    def step(self, bodies: Sequence[Body], dt: float) -> None:
        """
        Advance every body by one increment dt (modified in place).

        Args:
            bodies: Bodies in registry order; the order fixes the pair order.
            dt: Time increment (>= 0).
        """
        for body in bodies:
            body.force = ZERO

        for body in bodies:
            if body.pilot is not None:
                body.apply_thrust()

        self.last_collision_count = self.accumulate_interactions(bodies)
        self.integrate(bodies, dt)

    def accumulate_interactions(self, bodies: Sequence[Body]) -> int:
        """
        Resolve collisions and accumulate gravity for every pair i < j.

        Returns the number of overlapping pairs found.
        """
        g = self.gravitational_constant
        collisions = 0
        n = len(bodies)
        for i in range(n):
            bi = bodies[i]
            for j in range(i + 1, n):
                bj = bodies[j]

                separation = vec_sub(bj.position, bi.position)
                distance = vec_len(separation)

                if is_overlapping(bi, bj, distance):
                    resolve_collision(bi, bj, separation, distance, self.restitution)
                    collisions += 1
                    continue

                force_magnitude = g * bi.mass * bj.mass / (distance * distance)
                force = vec_scale(separation, force_magnitude / distance)

                bi.force = vec_add(bi.force, force)
                bj.force = vec_sub(bj.force, force)  # Newton's 3rd law
        return collisions

    def integrate(self, bodies: Sequence[Body], dt: float) -> None:
        """
        Semi-implicit Euler update; clamps the piloted craft's speed.

        Every new state is computed and checked before any body is written, so a
        NumericalInstabilityError never leaves a body half-integrated or non-finite.
        """
        updated = []
        for body in bodies:
            acceleration = vec_scale(body.force, 1.0 / body.mass)
            velocity = vec_add(body.velocity, vec_scale(acceleration, dt))

            if body.pilot is not None:
                velocity = vec_clamp_length(velocity, self.max_speed)

            position = vec_add(body.position, vec_scale(velocity, dt))
            if not (vec_is_finite(velocity) and vec_is_finite(position)):
                logger.error("Non-finite body state after integration", extra={
                    "body": body.name, "position": str(position), "velocity": str(velocity),
                })
                raise NumericalInstabilityError(body.name)
            updated.append((body, velocity, position))

        for body, velocity, position in updated:
            body.velocity = velocity
            body.position = position


def total_momentum(bodies: Sequence[Body]) -> Vec3:
    """Sum of m*v over all bodies."""
    p = ZERO
    for b in bodies:
        p = vec_add(p, vec_scale(b.velocity, b.mass))
    return p


def kinetic_energy(bodies: Sequence[Body]) -> float:
    return sum(0.5 * b.mass * (b.velocity[0] ** 2 + b.velocity[1] ** 2 + b.velocity[2] ** 2)
               for b in bodies)


def potential_energy(bodies: Sequence[Body], gravitational_constant: float = C.G) -> float:
    """Pairwise -G*mi*mj/d; coincident pairs are skipped."""
    total = 0.0
    n = len(bodies)
    for i in range(n):
        for j in range(i + 1, n):
            d = vec_len(vec_sub(bodies[j].position, bodies[i].position))
            if d > 0:
                total -= gravitational_constant * bodies[i].mass * bodies[j].mass / d
    return total


def speed_fraction_of_light(body: Body, speed_of_light: float = C.SPEED_OF_LIGHT) -> float:
    """Speed as a fraction of the simulation's c, for the pilot HUD."""
    return body.speed / speed_of_light
