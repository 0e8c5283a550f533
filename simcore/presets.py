#!/usr/bin/env python3
"""
Solar system presets (initializers).

Each preset builds a Sun plus planets and pairs it with the simulation
settings it was tuned for:

- "classic":   planet table relative to Mercury, all bodies start at perihelion on +x.
- "realistic": same table with rotation periods; each planet starts at a mean
               anomaly (random unless fixed), placed through Kepler's equation.
- "compact":   small visual-scale system out to Eris, plus Earth's Moon; strong G,
               tiny time step, one sub-step per frame.

Initial speeds come from the vis-viva relation around the Sun's mass only.
"""
import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from . import constants as C
from .config import SimulationConfig
from .data_models import Body, make_body
from .exceptions import ConfigurationError
from .log import get_logger
from .orbits import circular_orbit_velocity, orbital_state, perihelion_distance, perihelion_speed
from .registry import BodyRegistry

logger = get_logger("presets")

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class PlanetSpec:
    """Planet parameters relative to Mercury (mass, radius, semi-major axis)."""
    name: str
    color: Color
    mass_rel: float
    radius_rel: float
    dist_rel: float
    eccentricity: float
    rotation_period: float = 0.0


# Data Sources: NASA Planetary Fact Sheet
PLANETS: Tuple[PlanetSpec, ...] = (
    PlanetSpec("Mercury", (170, 170, 170), 1.0, 1.0, 1.0, 0.205, 58.6),
    PlanetSpec("Venus", (255, 204, 0), 14.77, 2.48, 1.86, 0.007, -243.0),
    PlanetSpec("Earth", (0, 0, 255), 18.10, 2.61, 2.58, 0.017, 1.0),
    PlanetSpec("Mars", (255, 0, 0), 1.95, 1.39, 3.94, 0.094, 1.03),
    PlanetSpec("Jupiter", (255, 170, 0), 5756.0, 28.66, 13.44, 0.049, 0.41),
    PlanetSpec("Saturn", (221, 204, 153), 1722.0, 23.87, 24.75, 0.057, 0.45),
    PlanetSpec("Uranus", (0, 255, 255), 263.0, 10.40, 49.60, 0.046, -0.72),
    PlanetSpec("Neptune", (0, 0, 170), 309.0, 10.09, 77.62, 0.011, 0.67),
    PlanetSpec("Pluto", (221, 221, 221), 0.04, 0.49, 101.5, 0.244, 6.39),
)


@dataclass(frozen=True)
class CompactPlanetSpec:
    """Planet parameters in compact-scene world units."""
    name: str
    mass: float
    radius: float
    color: Color
    semi_major_axis: float
    eccentricity: float


COMPACT_SUN_MASS = 10000.0
COMPACT_SUN_RADIUS = 5.0
COMPACT_MOON_DISTANCE = 2.5

COMPACT_PLANETS: Tuple[CompactPlanetSpec, ...] = (
    CompactPlanetSpec("Mercury", 1.0, 0.8, (170, 170, 170), 25.0, 0.206),
    CompactPlanetSpec("Venus", 2.0, 1.2, (255, 204, 0), 35.0, 0.007),
    CompactPlanetSpec("Earth", 2.0, 1.3, (0, 0, 255), 45.0, 0.017),
    CompactPlanetSpec("Mars", 1.5, 1.0, (255, 0, 0), 55.0, 0.093),
    CompactPlanetSpec("Jupiter", 50.0, 3.5, (255, 170, 0), 80.0, 0.048),
    CompactPlanetSpec("Saturn", 40.0, 3.0, (221, 204, 153), 110.0, 0.056),
    CompactPlanetSpec("Uranus", 20.0, 2.0, (0, 255, 255), 140.0, 0.046),
    CompactPlanetSpec("Neptune", 20.0, 2.0, (0, 0, 170), 170.0, 0.010),
    # Dwarf planets
    CompactPlanetSpec("Pluto", 0.5, 0.5, (221, 221, 221), 200.0, 0.248),
    CompactPlanetSpec("Eris", 0.6, 0.6, (255, 255, 255), 360.0, 0.44),
)

SUN_COLOR: Color = (255, 255, 0)


def planet_orbit(spec: PlanetSpec) -> Tuple[float, float, float]:
    """(mass, radius, semi-major axis) in world units."""
    mass = spec.mass_rel * C.MASS_SCALE
    radius = spec.radius_rel * C.RADIUS_SCALE
    semi_major_axis = spec.dist_rel * C.DISTANCE_SCALE * C.SUN_VISUAL_SCALE
    return mass, radius, semi_major_axis


def _sun(rotation_period: float = 0.0) -> Body:
    return make_body("Sun", C.SUN_MASS, C.SUN_RADIUS, (0.0, 0.0, 0.0), (0.0, 0.0, 0.0),
                     is_star=True, rotation_period=rotation_period, color=SUN_COLOR)


def build_classic(config: SimulationConfig, rng: Optional[random.Random] = None,
                  mean_anomalies: Optional[Sequence[float]] = None) -> List[Body]:
    """Sun and nine planets, each at perihelion with purely tangential velocity."""
    mu = config.gravitational_constant * C.SUN_MASS
    bodies = [_sun()]
    for p in PLANETS:
        mass, radius, a = planet_orbit(p)
        x = perihelion_distance(a, p.eccentricity)
        v = perihelion_speed(mu, a, p.eccentricity)
        bodies.append(make_body(p.name, mass, radius, (x, 0.0, 0.0), (0.0, 0.0, v), color=p.color))
    return bodies


def build_realistic(config: SimulationConfig, rng: Optional[random.Random] = None,
                    mean_anomalies: Optional[Sequence[float]] = None) -> List[Body]:
    """
    Sun and nine planets at random points on their Keplerian ellipses.

    `mean_anomalies` fixes the start angle per planet (in PLANETS order);
    otherwise each one is drawn uniformly from [0, 2*pi) using `rng`.
    """
    if mean_anomalies is not None and len(mean_anomalies) != len(PLANETS):
        raise ConfigurationError(
            f"Expected {len(PLANETS)} mean anomalies, got {len(mean_anomalies)}",
            config_key="mean_anomalies",
        )
    rng = rng or random.Random()
    mu = config.gravitational_constant * C.SUN_MASS

    bodies = [_sun(rotation_period=27.0)]
    for i, p in enumerate(PLANETS):
        mass, radius, a = planet_orbit(p)
        mean_anomaly = mean_anomalies[i] if mean_anomalies is not None else rng.random() * math.pi * 2
        pos, vel = orbital_state(a, p.eccentricity, mean_anomaly, mu)
        bodies.append(make_body(p.name, mass, radius, pos, vel,
                                rotation_period=p.rotation_period, color=p.color))
    return bodies


def build_compact(config: SimulationConfig, rng: Optional[random.Random] = None,
                  mean_anomalies: Optional[Sequence[float]] = None) -> List[Body]:
    """Small-scale system at perihelion plus a Moon circling Earth."""
    g = config.gravitational_constant
    sun = make_body("Sun", COMPACT_SUN_MASS, COMPACT_SUN_RADIUS, (0.0, 0.0, 0.0), (0.0, 0.0, 0.0),
                    is_star=True, color=SUN_COLOR)
    bodies = [sun]
    for p in COMPACT_PLANETS:
        x = perihelion_distance(p.semi_major_axis, p.eccentricity)
        v = perihelion_speed(g * sun.mass, p.semi_major_axis, p.eccentricity)
        bodies.append(make_body(p.name, p.mass, p.radius, (x, 0.0, 0.0), (0.0, 0.0, v), color=p.color))

    earth = next(b for b in bodies if b.name == "Earth")
    v_rel = circular_orbit_velocity(g * earth.mass, COMPACT_MOON_DISTANCE)
    bodies.append(make_body(
        "Moon", 0.1, 0.4,
        (earth.position[0] + COMPACT_MOON_DISTANCE, 0.0, earth.position[2]),
        (earth.velocity[0], 0.0, earth.velocity[2] + v_rel),
        color=(136, 136, 136),
    ))
    return bodies


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    config: SimulationConfig
    builder: Callable[..., List[Body]]


PRESETS: Dict[str, Preset] = {
    "classic": Preset(
        "classic", "Sun and nine planets starting at perihelion",
        SimulationConfig(), build_classic,
    ),
    "realistic": Preset(
        "realistic", "Sun and nine planets at random orbital phases",
        SimulationConfig(base_dt=0.05), build_realistic,
    ),
    "compact": Preset(
        "compact", "Compact visual-scale system with Eris and the Moon",
        SimulationConfig(gravitational_constant=0.1, base_dt=0.003, sub_steps=1), build_compact,
    ),
}

DEFAULT_PRESET = "classic"


def list_presets() -> List[Tuple[str, str]]:
    """Return list of (name, description) for available presets."""
    return [(p.name, p.description) for p in PRESETS.values()]


def get_preset(name: str) -> Preset:
    try:
        return PRESETS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown preset '{name}'. Available: {', '.join(PRESETS)}", config_key="preset"
        ) from None


def preset_config(name: str) -> SimulationConfig:
    return get_preset(name).config


def load_preset(name: str,
                registry: BodyRegistry,
                config: Optional[SimulationConfig] = None,
                rng: Optional[random.Random] = None,
                mean_anomalies: Optional[Sequence[float]] = None) -> List[Body]:
    """
    Build the named preset and add its bodies to `registry`.

    `config` defaults to the preset's own; its gravitational constant seeds the
    orbital speeds. Returns the bodies added.
    """
    preset = get_preset(name)
    config = config or preset.config
    bodies = preset.builder(config, rng=rng, mean_anomalies=mean_anomalies)
    for body in bodies:
        registry.add(body)
    logger.info("Preset loaded", extra={"preset": name, "bodies": len(bodies)})
    return bodies
