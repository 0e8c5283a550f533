"""
Unit tests for orbital helpers and the solar system presets.
"""

import math
import random
import unittest

from simcore import constants as C
from simcore.config import SimulationConfig
from simcore.exceptions import ConfigurationError
from simcore.orbits import (
    circular_orbit_velocity,
    orbital_state,
    perihelion_distance,
    perihelion_speed,
    solve_kepler,
    vis_viva_speed,
)
from simcore.presets import (
    COMPACT_PLANETS,
    PLANETS,
    build_classic,
    build_compact,
    build_realistic,
    get_preset,
    list_presets,
    load_preset,
    planet_orbit,
)
from simcore.registry import BodyRegistry
from simcore.vector_utils import vec_len, vec_sub


class TestOrbits(unittest.TestCase):
    """Test orbital mechanics helpers."""

    def test_circular_velocity(self):
        self.assertAlmostEqual(circular_orbit_velocity(100.0, 4.0), 5.0)
        self.assertEqual(circular_orbit_velocity(100.0, 0.0), 0.0)

    def test_perihelion_matches_vis_viva(self):
        mu, a, e = 90.0, 10.0, 0.2
        r = perihelion_distance(a, e)
        self.assertAlmostEqual(r, 8.0)
        self.assertAlmostEqual(perihelion_speed(mu, a, e), vis_viva_speed(mu, r, a))

    def test_solve_kepler(self):
        for m, e in ((0.5, 0.1), (2.0, 0.2), (5.0, 0.05)):
            E = solve_kepler(m, e)
            self.assertAlmostEqual(E - e * math.sin(E), m, places=6)

    def test_orbital_state_at_perihelion(self):
        pos, vel = orbital_state(10.0, 0.2, 0.0, 90.0)
        self.assertAlmostEqual(pos[0], 8.0)
        self.assertAlmostEqual(pos[2], 0.0)
        self.assertAlmostEqual(vel[0], 0.0)
        self.assertAlmostEqual(vel[2], perihelion_speed(90.0, 10.0, 0.2))

    def test_orbital_state_obeys_vis_viva(self):
        mu, a, e = 50.0, 20.0, 0.3
        for m in (0.3, 1.7, 4.0):
            pos, vel = orbital_state(a, e, m, mu)
            r = vec_len(pos)
            self.assertAlmostEqual(vec_len(vel), vis_viva_speed(mu, r, a))


class TestPresets(unittest.TestCase):
    """Test preset tables and builders."""

    def test_available_presets(self):
        names = [name for name, _ in list_presets()]
        self.assertEqual(names, ["classic", "realistic", "compact"])

    def test_unknown_preset(self):
        with self.assertRaises(ConfigurationError):
            get_preset("andromeda")

    def test_preset_settings(self):
        self.assertEqual(get_preset("classic").config.base_dt, 0.1)
        self.assertEqual(get_preset("realistic").config.base_dt, 0.05)
        compact = get_preset("compact").config
        self.assertEqual(compact.gravitational_constant, 0.1)
        self.assertEqual(compact.sub_steps, 1)

    def test_classic_initial_conditions(self):
        config = SimulationConfig()
        bodies = build_classic(config)
        self.assertEqual(len(bodies), 1 + len(PLANETS))
        sun = bodies[0]
        self.assertTrue(sun.is_star)
        self.assertEqual(sun.mass, C.SUN_MASS)

        mercury = bodies[1]
        a = 1.0 * C.DISTANCE_SCALE * C.SUN_VISUAL_SCALE
        self.assertAlmostEqual(mercury.position[0], a * (1 - 0.205))
        self.assertEqual(mercury.velocity[0], 0.0)
        expected = perihelion_speed(config.gravitational_constant * C.SUN_MASS, a, 0.205)
        self.assertAlmostEqual(mercury.velocity[2], expected)

    def test_classic_planets_start_outside_the_sun(self):
        bodies = build_classic(SimulationConfig())
        sun = bodies[0]
        for planet in bodies[1:]:
            d = vec_len(vec_sub(planet.position, sun.position))
            self.assertGreater(d, sun.radius + planet.radius)

    def test_realistic_is_seeded(self):
        config = get_preset("realistic").config
        first = build_realistic(config, rng=random.Random(7))
        second = build_realistic(config, rng=random.Random(7))
        self.assertEqual([b.position for b in first], [b.position for b in second])
        self.assertEqual([b.velocity for b in first], [b.velocity for b in second])

    def test_realistic_speeds_follow_vis_viva(self):
        config = get_preset("realistic").config
        mu = config.gravitational_constant * C.SUN_MASS
        bodies = build_realistic(config, rng=random.Random(3))
        for spec, body in zip(PLANETS, bodies[1:]):
            _, _, a = planet_orbit(spec)
            r = vec_len(body.position)
            expected = vis_viva_speed(mu, r, a)
            self.assertAlmostEqual(body.speed / expected, 1.0, places=6)
            self.assertEqual(body.rotation_period, spec.rotation_period)

    def test_realistic_zero_anomaly_matches_classic(self):
        config = SimulationConfig()
        classic = build_classic(config)
        realistic = build_realistic(config, mean_anomalies=[0.0] * len(PLANETS))
        for c, r in zip(classic[1:], realistic[1:]):
            for x, y in zip(c.position, r.position):
                self.assertAlmostEqual(x, y, places=6)

    def test_realistic_anomaly_count(self):
        with self.assertRaises(ConfigurationError):
            build_realistic(SimulationConfig(), mean_anomalies=[0.0, 1.0])

    def test_compact_includes_moon(self):
        config = get_preset("compact").config
        bodies = build_compact(config)
        self.assertEqual(len(bodies), 1 + len(COMPACT_PLANETS) + 1)
        earth = next(b for b in bodies if b.name == "Earth")
        moon = bodies[-1]
        self.assertEqual(moon.name, "Moon")
        self.assertAlmostEqual(vec_len(vec_sub(moon.position, earth.position)), 2.5)
        relative = moon.velocity[2] - earth.velocity[2]
        self.assertAlmostEqual(relative, math.sqrt(config.gravitational_constant * earth.mass / 2.5))

    def test_load_preset_fills_registry(self):
        registry = BodyRegistry()
        bodies = load_preset("classic", registry)
        self.assertEqual(len(registry), len(bodies))
        self.assertEqual(registry.names()[0], "Sun")


if __name__ == '__main__':
    unittest.main()
