#!/usr/bin/env python3
"""
Data models for the solar system simulator.

This module defines the Body dataclass shared between physics, the registry and
the viewer, plus PilotState, the extra control state carried by the one body the
user is piloting.

Units and usage
- position/velocity/force are (x, y, z) tuples in world units; mass in Mercury masses.
- Bodies compare and hash by identity; two bodies with equal fields are still distinct.
- trail stores past positions for the viewer; physics never reads it.
- A spaceship is a Body whose `pilot` is set. Physics branches on `body.pilot`,
  never on a subclass.
"""
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional, Sequence, Tuple

from . import constants as C
from .exceptions import InvalidBodyError, PilotStateError
from .quaternion import (
    IDENTITY,
    Quat,
    quat_from_axis_angle,
    quat_from_unit_vectors,
    quat_mul,
    quat_normalize,
    quat_rotate,
)
from .vector_utils import ZERO, Vec3, vec3, vec_add, vec_is_finite, vec_len, vec_norm, vec_scale


@dataclass(eq=False)
class PilotState:
    """
    Thrust and orientation of the piloted craft.

    Fields:
    - max_thrust: Thrust ceiling (force units)
    - current_thrust: Signed thrust, in [-reverse_fraction * max_thrust, max_thrust]
    - orientation: Unit quaternion
    - forward: BASE_FORWARD rotated by orientation
    """
    max_thrust: float
    current_thrust: float = 0.0
    orientation: Quat = IDENTITY
    forward: Vec3 = C.BASE_FORWARD

    def thrust_force(self) -> Vec3:
        return vec_scale(self.forward, self.current_thrust)

    def update_controls(self,
                        forward_held: bool,
                        reverse_held: bool,
                        ramp: float = C.THRUST_RAMP,
                        decay: float = C.THRUST_DECAY,
                        reverse_fraction: float = C.REVERSE_THRUST_FRACTION) -> float:
        """
        Advance the thrust state machine by one control tick.

        Accelerating (W) wins over braking (S); with neither held the thrust
        decays geometrically toward zero. Returns the new thrust.
        """
        if forward_held:
            self.current_thrust = min(self.current_thrust + ramp, self.max_thrust)
        elif reverse_held:
            self.current_thrust = max(self.current_thrust - ramp, -self.max_thrust * reverse_fraction)
        else:
            self.current_thrust *= decay
        return self.current_thrust

    def rotate(self, delta_yaw: float, delta_pitch: float) -> None:
        """Compose yaw (about Y) then pitch (about X) onto the orientation."""
        yaw = quat_from_axis_angle(C.YAW_AXIS, delta_yaw)
        pitch = quat_from_axis_angle(C.PITCH_AXIS, delta_pitch)
        self.orientation = quat_normalize(quat_mul(quat_mul(self.orientation, yaw), pitch))
        self._refresh_forward()

    def point_along(self, direction: Vec3) -> None:
        """Orient so that forward matches `direction`; a zero vector is ignored."""
        unit = vec_norm(direction)
        if unit == ZERO:
            return
        self.orientation = quat_from_unit_vectors(C.BASE_FORWARD, unit)
        self._refresh_forward()

    def _refresh_forward(self) -> None:
        self.forward = vec_norm(quat_rotate(self.orientation, C.BASE_FORWARD))


@dataclass(eq=False)
class Body:
    """
    Represents a physical object in the simulation (star, planet, asteroid or craft).

    Fields:
    - name: Identifier, unique within a registry
    - mass: Mass (> 0)
    - radius: Visual/collision radius (> 0)
    - position: 3D position
    - velocity: 3D velocity
    - is_star: Classification flag, irrelevant to physics
    - rotation_period: Cosmetic spin period (0 = no spin)
    - color: RGB tuple used for rendering
    - force: Accumulated force, reset at the start of every step
    - pilot: PilotState when this body is the spaceship
    - trail: Deque of past positions for drawing motion trails
    """
    name: str
    mass: float
    radius: float
    position: Vec3
    velocity: Vec3
    is_star: bool = False
    rotation_period: float = 0.0
    color: Tuple[int, int, int] = C.DEFAULT_BODY_COLOR
    force: Vec3 = ZERO
    pilot: Optional[PilotState] = None
    trail: Deque[Vec3] = field(default_factory=lambda: deque(maxlen=C.TRAIL_LENGTH), repr=False)

    def __post_init__(self):
        if not _is_positive_number(self.mass):
            raise InvalidBodyError(self.name, "mass", self.mass, "a finite number > 0")
        if not _is_positive_number(self.radius):
            raise InvalidBodyError(self.name, "radius", self.radius, "a finite number > 0")
        self.mass = float(self.mass)
        self.radius = float(self.radius)
        self.position = self._coerce_vector("position", self.position)
        self.velocity = self._coerce_vector("velocity", self.velocity)
        if self.pilot is not None and not _is_positive_number(self.pilot.max_thrust):
            raise InvalidBodyError(self.name, "max_thrust", self.pilot.max_thrust, "a finite number > 0")

    def _coerce_vector(self, field_name: str, value) -> Vec3:
        try:
            vec = vec3(value)
        except (TypeError, ValueError):
            raise InvalidBodyError(self.name, field_name, value, "three numbers") from None
        if not vec_is_finite(vec):
            raise InvalidBodyError(self.name, field_name, value, "finite components")
        return vec

    @property
    def is_spaceship(self) -> bool:
        return self.pilot is not None

    @property
    def speed(self) -> float:
        return vec_len(self.velocity)

    @property
    def rotation_speed(self) -> float:
        """Cosmetic spin rate derived from the rotation period."""
        if self.rotation_period == 0:
            return 0.0
        return C.BASE_ROTATION_SPEED / self.rotation_period

    def apply_thrust(self) -> None:
        """Add the pilot's forward thrust to the force accumulator."""
        if self.pilot is None:
            return
        self.force = vec_add(self.force, self.pilot.thrust_force())

    def rotate(self, delta_yaw: float, delta_pitch: float) -> None:
        if self.pilot is None:
            raise PilotStateError(f"Body '{self.name}' is not pilotable")
        self.pilot.rotate(delta_yaw, delta_pitch)

    def add_trail_point(self) -> None:
        """Append the current position to the trail."""
        self.trail.append(self.position)


def make_body(name: str,
              mass: float,
              radius: float,
              position: Sequence[float],
              velocity: Sequence[float],
              is_star: bool = False,
              rotation_period: float = 0.0,
              color: Tuple[int, int, int] = C.DEFAULT_BODY_COLOR) -> Body:
    return Body(
        name=name,
        mass=mass,
        radius=radius,
        position=position,
        velocity=velocity,
        is_star=is_star,
        rotation_period=rotation_period,
        color=color,
    )


def make_spaceship(name: str,
                   mass: float,
                   radius: float,
                   position: Sequence[float],
                   velocity: Sequence[float],
                   max_thrust: float,
                   color: Tuple[int, int, int] = (0, 255, 0)) -> Body:
    """Build a pilotable body facing BASE_FORWARD with zero thrust."""
    return Body(
        name=name,
        mass=mass,
        radius=radius,
        position=position,
        velocity=velocity,
        color=color,
        pilot=PilotState(max_thrust=max_thrust),
    )


def _is_positive_number(value) -> bool:
    # bool is an int subclass; True must not pass as a mass of 1
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0
