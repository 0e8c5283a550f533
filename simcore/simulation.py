#!/usr/bin/env python3
"""
Simulation: owns the body registry, the configuration and the physics engine.

The host drives it once per rendered frame:

    sim.update_pilot_controls(w_held, s_held)   # thrust state machine tick
    sim.advance_frame()                          # sub-stepped physics
    for body in sim.registry: draw(body)         # read-only access

Everything runs on one thread. The registry is never mutated from inside a
step; spawning, pilot-mode changes and resets happen between frames.
"""
import math
import random
from typing import Optional, Sequence, Tuple

from . import constants as C
from .config import SimulationConfig
from .data_models import Body, make_body, make_spaceship
from .exceptions import InvalidConfigValueError, PilotStateError
from .log import get_logger
from .physics import NBodyPhysics, speed_fraction_of_light
from .presets import get_preset, load_preset, preset_config
from .registry import BodyRegistry
from .vector_utils import Vec3, clamp, vec3, vec_scale, vec_sub

logger = get_logger("simulation")


class Simulation:
    """
    Explicit simulation state: registry + config + physics.

    Attributes:
        registry: Ordered bodies, including the spaceship while piloting.
        config: Active SimulationConfig.
        physics: NBodyPhysics built from config.
        playing: When False, advance_frame() does nothing.
        elapsed_time: Total simulation time advanced since the last reset.
    """

    def __init__(self,
                 config: Optional[SimulationConfig] = None,
                 preset: Optional[str] = None,
                 seed: Optional[int] = None,
                 record_trails: bool = True):
        self.registry = BodyRegistry()
        self.preset_name = preset
        self.seed = seed
        self.record_trails = record_trails
        self.playing = True
        self.elapsed_time = 0.0
        self._spawn_counter = 0

        if config is None:
            config = preset_config(preset) if preset else SimulationConfig()
        self.config = config
        self._initial_config = config
        self.physics = NBodyPhysics.from_config(config)

        if preset:
            self.load_preset(preset, config=config)

    # ------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------

    @property
    def time_scale(self) -> float:
        return self.config.time_scale

    def set_config(self, config: SimulationConfig) -> None:
        self.config = config
        self.physics = NBodyPhysics.from_config(config)

    def set_time_scale(self, scale: float) -> None:
        """Negative scales are rejected; scales above MAX_TIME_SCALE are clamped."""
        if not math.isfinite(scale) or scale < 0:
            raise InvalidConfigValueError("time_scale", scale, ">= 0")
        self.config = self.config.replace(time_scale=clamp(float(scale), 0.0, C.MAX_TIME_SCALE))

    # ------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------

    def step(self, dt: float) -> None:
        """Advance all bodies by exactly one physics increment."""
        self.physics.step(self.registry.bodies, dt)
        self.elapsed_time += dt

    def advance_frame(self, frame_time: Optional[float] = None) -> float:
        """
        Run one frame's worth of fixed sub-steps.

        The frame covers `frame_time` (default: config.base_dt) scaled by the
        time scale, split evenly into config.sub_steps steps. Returns the
        simulation time advanced.
        """
        if not self.playing:
            return 0.0
        base = self.config.base_dt if frame_time is None else frame_time
        total = base * self.config.time_scale
        if total <= 0:
            return 0.0

        steps = self.config.sub_steps
        step_dt = total / steps
        for _ in range(steps):
            self.step(step_dt)

        if self.record_trails:
            for body in self.registry:
                body.add_trail_point()
        return total

    # ------------------------------------------------------------
    # Registry mutation
    # ------------------------------------------------------------

    def add_body(self, body: Body) -> Body:
        return self.registry.add(body)

    def remove_body(self, body: Body) -> None:
        self.registry.remove(body)

    def find_body(self, name: str) -> Optional[Body]:
        return self.registry.find_by_name(name)

    def load_preset(self, name: str, config: Optional[SimulationConfig] = None) -> None:
        """
        Replace all bodies and settings with the named preset.

        The config used here is remembered, so reset() rebuilds the same
        system with the same constants.
        """
        preset = get_preset(name)
        self.registry.clear()
        self.set_config(config or preset.config)
        self._initial_config = self.config
        self.preset_name = name
        self.elapsed_time = 0.0
        self._spawn_counter = 0
        rng = random.Random(self.seed) if self.seed is not None else None
        load_preset(name, self.registry, self.config, rng=rng)

    def reset(self) -> None:
        """
        Clear every body and re-run the initializer; time scale returns to 1.

        Without a preset there is no initializer, so the registry is left empty.
        """
        self.set_config(self._initial_config.replace(time_scale=1.0))
        if self.preset_name is None:
            self.registry.clear()
            self.elapsed_time = 0.0
            self._spawn_counter = 0
        else:
            self.load_preset(self.preset_name, config=self.config)
        logger.info("Simulation reset", extra={"preset": self.preset_name})

    def spawn_body(self,
                   start: Sequence[float],
                   end: Sequence[float],
                   mass: float = C.SPAWN_DEFAULT_MASS,
                   speed_multiplier: float = 1.0,
                   color: Tuple[int, int, int] = C.DEFAULT_BODY_COLOR) -> Body:
        """
        Spawn an asteroid from a click-and-drag gesture.

        The body appears at `start` with velocity (end - start) scaled by
        speed_multiplier * SPAWN_VELOCITY_SCALE; its radius grows with the
        cube root of its mass.
        """
        start_v = vec3(start)
        velocity = vec_scale(vec_sub(vec3(end), start_v), speed_multiplier * C.SPAWN_VELOCITY_SCALE)
        # Invalid masses are rejected by Body itself
        radius = mass ** (1.0 / 3.0) * C.SPAWN_RADIUS_FACTOR if mass > 0 else C.SPAWN_RADIUS_FACTOR
        body = make_body(self._next_spawn_name(), mass, radius, start_v, velocity, color=color)
        return self.registry.add(body)

    def _next_spawn_name(self) -> str:
        while True:
            self._spawn_counter += 1
            name = f"{C.SPAWN_NAME_PREFIX}{self._spawn_counter}"
            if self.registry.find_by_name(name) is None:
                return name

    # ------------------------------------------------------------
    # Pilot mode
    # ------------------------------------------------------------

    @property
    def spaceship(self) -> Optional[Body]:
        return self.registry.spaceship

    @property
    def pilot_mode(self) -> bool:
        return self.registry.spaceship is not None

    def enter_pilot_mode(self, position: Sequence[float], max_thrust: float = C.DEFAULT_MAX_THRUST) -> Body:
        """Place a spaceship at `position`, facing the star (or the origin)."""
        if self.pilot_mode:
            raise PilotStateError("Already in pilot mode", context={"spaceship": self.spaceship.name})

        ship = make_spaceship(C.SPACESHIP_NAME, C.SPACESHIP_MASS, C.SPACESHIP_RADIUS,
                              position, (0.0, 0.0, 0.0), max_thrust)
        ship.pilot.point_along(vec_sub(self._star_position(), ship.position))
        self.registry.add(ship)
        logger.info("Pilot mode entered", extra={"position": str(ship.position), "max_thrust": max_thrust})
        return ship

    def exit_pilot_mode(self) -> None:
        ship = self.spaceship
        if ship is None:
            raise PilotStateError("Not in pilot mode")
        self.registry.remove(ship)
        logger.info("Pilot mode exited")

    def update_pilot_controls(self, forward_held: bool, reverse_held: bool) -> None:
        """One control tick of the thrust state machine; no-op outside pilot mode."""
        ship = self.spaceship
        if ship is None:
            return
        cfg = self.config
        ship.pilot.update_controls(forward_held, reverse_held,
                                   ramp=cfg.thrust_ramp,
                                   decay=cfg.thrust_decay,
                                   reverse_fraction=cfg.reverse_thrust_fraction)

    def steer(self, dx: float, dy: float) -> None:
        """Turn pointer motion (pixels) into yaw/pitch of the spaceship."""
        ship = self.spaceship
        if ship is None:
            raise PilotStateError("Cannot steer outside pilot mode")
        s = self.config.steering_sensitivity
        ship.rotate(-dx * s, -dy * s)

    def speed_fraction_of_light(self) -> float:
        ship = self.spaceship
        if ship is None:
            return 0.0
        return speed_fraction_of_light(ship, self.config.speed_of_light)

    def _star_position(self) -> Vec3:
        for body in self.registry:
            if body.is_star:
                return body.position
        return (0.0, 0.0, 0.0)
