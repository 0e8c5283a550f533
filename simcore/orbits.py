#!/usr/bin/env python3
"""
Orbital mechanics helpers used to seed initial conditions.

Orbits lie in the x-z plane (y is up). Bodies travel counter-clockwise when
seen from +y, i.e. a body on +x moves toward +z.
"""
import math
from typing import Tuple

from .vector_utils import Vec3

KEPLER_ITERATIONS = 10
KEPLER_TOLERANCE = 1e-6


def circular_orbit_velocity(mu: float, orbital_radius: float) -> float:
    """
    Speed needed for a circular orbit: v = sqrt(mu / r), where mu = G*M.

    Returns 0 for a non-positive radius.
    """
    if orbital_radius <= 0:
        return 0.0
    return math.sqrt(mu / orbital_radius)


def vis_viva_speed(mu: float, distance: float, semi_major_axis: float) -> float:
    """Vis-viva relation: v^2 = mu * (2/r - 1/a)."""
    return math.sqrt(mu * (2.0 / distance - 1.0 / semi_major_axis))


def perihelion_distance(semi_major_axis: float, eccentricity: float) -> float:
    return semi_major_axis * (1.0 - eccentricity)


def perihelion_speed(mu: float, semi_major_axis: float, eccentricity: float) -> float:
    """Vis-viva evaluated at perihelion: sqrt(mu * (1+e) / (a*(1-e)))."""
    return math.sqrt(mu * (1.0 + eccentricity) / (semi_major_axis * (1.0 - eccentricity)))


def solve_kepler(mean_anomaly: float, eccentricity: float) -> float:
    """
    Solve Kepler's equation M = E - e*sin(E) for the eccentric anomaly E.

    Newton-Raphson starting from E = M; stops early once the correction
    drops below KEPLER_TOLERANCE.
    """
    E = mean_anomaly
    for _ in range(KEPLER_ITERATIONS):
        dE = (mean_anomaly - (E - eccentricity * math.sin(E))) / (1.0 - eccentricity * math.cos(E))
        E += dE
        if abs(dE) < KEPLER_TOLERANCE:
            break
    return E


def orbital_state(semi_major_axis: float,
                  eccentricity: float,
                  mean_anomaly: float,
                  mu: float) -> Tuple[Vec3, Vec3]:
    """
    Position and velocity on a Keplerian ellipse around a focus at the origin.

    Perihelion lies on +x. Returns ((x, 0, z), (vx, 0, vz)).
    """
    a, e = semi_major_axis, eccentricity
    E = solve_kepler(mean_anomaly, e)

    x = a * (math.cos(E) - e)
    z = a * math.sqrt(1.0 - e * e) * math.sin(E)

    r = a * (1.0 - e * math.cos(E))
    v_factor = math.sqrt(mu * a) / r
    vx = -v_factor * math.sin(E)
    vz = v_factor * math.sqrt(1.0 - e * e) * math.cos(E)

    return (x, 0.0, z), (vx, 0.0, vz)
