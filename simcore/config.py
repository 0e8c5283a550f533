#!/usr/bin/env python3
"""
Simulation configuration.

SimulationConfig bundles every tunable the kernel reads. The host builds one
(from defaults, a preset, or the environment) and hands it to Simulation; the
kernel itself never consults module-level constants at step time.

Environment overrides use the SOLARSIM_ prefix and the upper-cased field name,
e.g. SOLARSIM_TIME_SCALE=2.5 or SOLARSIM_SUB_STEPS=20.
"""
import math
import os
from dataclasses import asdict, dataclass, fields, replace as dc_replace
from typing import Any, Dict, Mapping, Optional

from . import constants as C
from .exceptions import InvalidConfigValueError

ENV_PREFIX = "SOLARSIM_"


@dataclass(frozen=True)
class SimulationConfig:
    """Constants the host supplies to the physics kernel."""
    gravitational_constant: float = C.G
    base_dt: float = C.BASE_DT
    sub_steps: int = C.SUB_STEPS
    time_scale: float = 1.0
    restitution: float = C.RESTITUTION
    speed_of_light: float = C.SPEED_OF_LIGHT
    light_speed_fraction: float = C.LIGHT_SPEED_FRACTION
    thrust_ramp: float = C.THRUST_RAMP
    thrust_decay: float = C.THRUST_DECAY
    reverse_thrust_fraction: float = C.REVERSE_THRUST_FRACTION
    steering_sensitivity: float = C.STEERING_SENSITIVITY
    softening: float = C.SOFTENING

    def __post_init__(self):
        self.validate()

    @property
    def max_speed(self) -> float:
        """Spaceship speed cap."""
        return self.speed_of_light * self.light_speed_fraction

    def validate(self) -> None:
        """Raise InvalidConfigValueError for the first out-of-range field."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidConfigValueError(f.name, value, "a finite number")

        if self.gravitational_constant <= 0:
            raise InvalidConfigValueError("gravitational_constant", self.gravitational_constant, "> 0")
        if self.base_dt <= 0:
            raise InvalidConfigValueError("base_dt", self.base_dt, "> 0")
        if not isinstance(self.sub_steps, int) or self.sub_steps < 1:
            raise InvalidConfigValueError("sub_steps", self.sub_steps, "an integer >= 1")
        if not 0.0 <= self.time_scale <= C.MAX_TIME_SCALE:
            raise InvalidConfigValueError("time_scale", self.time_scale, f"0 <= value <= {C.MAX_TIME_SCALE}")
        if not 0.0 <= self.restitution <= 1.0:
            raise InvalidConfigValueError("restitution", self.restitution, "0 <= value <= 1")
        if self.speed_of_light <= 0:
            raise InvalidConfigValueError("speed_of_light", self.speed_of_light, "> 0")
        if not 0.0 < self.light_speed_fraction <= 1.0:
            raise InvalidConfigValueError("light_speed_fraction", self.light_speed_fraction, "0 < value <= 1")
        if self.thrust_ramp <= 0:
            raise InvalidConfigValueError("thrust_ramp", self.thrust_ramp, "> 0")
        if not 0.0 <= self.thrust_decay <= 1.0:
            raise InvalidConfigValueError("thrust_decay", self.thrust_decay, "0 <= value <= 1")
        if not 0.0 <= self.reverse_thrust_fraction <= 1.0:
            raise InvalidConfigValueError("reverse_thrust_fraction", self.reverse_thrust_fraction, "0 <= value <= 1")
        if self.steering_sensitivity <= 0:
            raise InvalidConfigValueError("steering_sensitivity", self.steering_sensitivity, "> 0")
        if self.softening < 0:
            raise InvalidConfigValueError("softening", self.softening, ">= 0")

    def replace(self, **changes: Any) -> "SimulationConfig":
        """Return a validated copy with the given fields changed."""
        return dc_replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_env(cls,
                 base: Optional["SimulationConfig"] = None,
                 environ: Optional[Mapping[str, str]] = None,
                 prefix: str = ENV_PREFIX) -> "SimulationConfig":
        """
        Overlay environment variables onto `base` (defaults if omitted).

        Unknown SOLARSIM_* keys are ignored. Values that don't parse as numbers
        raise InvalidConfigValueError.
        """
        base = base or cls()
        environ = os.environ if environ is None else environ
        known = {f.name: f for f in fields(cls)}

        overrides: Dict[str, Any] = {}
        for key, raw in environ.items():
            if not key.startswith(prefix):
                continue
            name = key[len(prefix):].lower()
            if name not in known:
                continue
            overrides[name] = _parse_number(name, raw, integer=name == "sub_steps")

        return base.replace(**overrides) if overrides else base


def _parse_number(key: str, raw: str, integer: bool = False):
    try:
        return int(raw) if integer else float(raw)
    except ValueError:
        raise InvalidConfigValueError(key, raw, "an integer" if integer else "a number") from None
