"""
Unit tests for the physics step and collision response.

Covers pairwise gravity, bounce collisions, semi-implicit integration,
the spaceship speed cap and the numerical-instability guard.
"""

import math
import unittest

from simcore.collisions import collision_normal, resolve_collision
from simcore.data_models import make_body, make_spaceship
from simcore.exceptions import NumericalInstabilityError
from simcore.physics import (
    NBodyPhysics,
    kinetic_energy,
    potential_energy,
    speed_fraction_of_light,
    total_momentum,
)
from simcore.config import SimulationConfig
from simcore.simulation import Simulation
from simcore.vector_utils import vec_len, vec_sub


class TestGravity(unittest.TestCase):
    """Test gravitational force accumulation."""

    def setUp(self):
        self.physics = NBodyPhysics(gravitational_constant=1.0)

    def test_newtons_third_law(self):
        a = make_body("A", 5.0, 0.1, (0, 0, 0), (0, 0, 0))
        b = make_body("B", 2.0, 0.1, (3.0, 1.0, -2.0), (0, 0, 0))
        self.physics.accumulate_interactions([a, b])
        self.assertEqual(b.force, tuple(-f for f in a.force))

    def test_inverse_square_magnitude(self):
        a = make_body("A", 4.0, 0.1, (0, 0, 0), (0, 0, 0))
        b = make_body("B", 2.0, 0.1, (2.0, 0, 0), (0, 0, 0))
        self.physics.accumulate_interactions([a, b])
        # F = G*m1*m2/d^2 = 4*2/4 = 2, attracting A toward +x
        self.assertAlmostEqual(a.force[0], 2.0)
        self.assertAlmostEqual(b.force[0], -2.0)

    def test_net_force_sums_to_zero(self):
        bodies = [
            make_body("A", 1.0, 0.1, (0, 0, 0), (0, 0, 0)),
            make_body("B", 3.0, 0.1, (4, 0, 1), (0, 0, 0)),
            make_body("C", 7.0, 0.1, (-2, 5, 0), (0, 0, 0)),
        ]
        self.physics.accumulate_interactions(bodies)
        for axis in range(3):
            self.assertAlmostEqual(sum(b.force[axis] for b in bodies), 0.0)

    def test_forces_reset_each_step(self):
        a = make_body("A", 1.0, 0.1, (0, 0, 0), (0, 0, 0))
        b = make_body("B", 1.0, 0.1, (1, 0, 0), (0, 0, 0))
        self.physics.step([a, b], 0.0)
        first = a.force
        self.physics.step([a, b], 0.0)
        self.assertEqual(a.force, first)

    def test_momentum_conserved(self):
        bodies = [
            make_body("A", 10.0, 0.1, (0, 0, 0), (0, 0, 0.5)),
            make_body("B", 1.0, 0.1, (5, 0, 0), (0, 0, -1.0)),
        ]
        before = total_momentum(bodies)
        for _ in range(200):
            self.physics.step(bodies, 0.01)
        after = total_momentum(bodies)
        for x, y in zip(before, after):
            self.assertAlmostEqual(x, y, places=9)

    def test_circular_orbit_stays_circular(self):
        """A light body on a circular orbit keeps its radius over one period."""
        mass, radius = 1000.0, 10.0
        speed = math.sqrt(self.physics.gravitational_constant * mass / radius)
        star = make_body("Star", mass, 1.0, (0, 0, 0), (0, 0, 0), is_star=True)
        planet = make_body("Planet", 1e-6, 0.1, (radius, 0, 0), (0, 0, speed))
        bodies = [star, planet]

        dt = 0.001
        period = 2 * math.pi * radius / speed
        for _ in range(int(period / dt)):
            self.physics.step(bodies, dt)

        r = vec_len(vec_sub(planet.position, star.position))
        self.assertAlmostEqual(r / radius, 1.0, delta=0.01)

    def test_energy_diagnostics(self):
        a = make_body("A", 2.0, 0.1, (0, 0, 0), (3.0, 0, 0))
        b = make_body("B", 4.0, 0.1, (2.0, 0, 0), (0, 0, 0))
        self.assertAlmostEqual(kinetic_energy([a, b]), 9.0)
        self.assertAlmostEqual(potential_energy([a, b], 1.0), -4.0)


class TestCollisions(unittest.TestCase):
    """Test overlap correction and restitution impulse."""

    def setUp(self):
        self.physics = NBodyPhysics(gravitational_constant=1.0)

    def test_mass_proportional_separation(self):
        heavy = make_body("Heavy", 3.0, 1.0, (0, 0, 0), (0, 0, 0))
        light = make_body("Light", 1.0, 1.0, (1.0, 0, 0), (0, 0, 0))
        count = self.physics.accumulate_interactions([heavy, light])

        self.assertEqual(count, 1)
        self.assertAlmostEqual(heavy.position[0], -0.25)
        self.assertAlmostEqual(light.position[0], 1.75)
        # Lighter body moves three times as far
        self.assertAlmostEqual((light.position[0] - 1.0) / -heavy.position[0], 3.0)
        distance = vec_len(vec_sub(light.position, heavy.position))
        self.assertGreaterEqual(distance, 2.0 - 1e-9)

    def test_colliding_pair_gets_no_gravity(self):
        a = make_body("A", 1.0, 1.0, (0, 0, 0), (0, 0, 0))
        b = make_body("B", 1.0, 1.0, (1.5, 0, 0), (0, 0, 0))
        self.physics.accumulate_interactions([a, b])
        self.assertEqual(a.force, (0.0, 0.0, 0.0))
        self.assertEqual(b.force, (0.0, 0.0, 0.0))

    def test_restitution(self):
        a = make_body("A", 1.0, 1.0, (0, 0, 0), (1.0, 0, 0))
        b = make_body("B", 1.0, 1.0, (1.5, 0, 0), (-1.0, 0, 0))
        bounced = resolve_collision(a, b, vec_sub(b.position, a.position), 1.5, restitution=0.95)

        self.assertTrue(bounced)
        self.assertAlmostEqual(a.velocity[0], -0.95)
        self.assertAlmostEqual(b.velocity[0], 0.95)
        # Relative normal speed after = 0.95 * before
        self.assertAlmostEqual(b.velocity[0] - a.velocity[0], 0.95 * 2.0)

    def test_separating_pair_keeps_velocity(self):
        a = make_body("A", 1.0, 1.0, (0, 0, 0), (-1.0, 0, 0))
        b = make_body("B", 1.0, 1.0, (1.5, 0, 0), (1.0, 0, 0))
        bounced = resolve_collision(a, b, vec_sub(b.position, a.position), 1.5)

        self.assertFalse(bounced)
        self.assertEqual(a.velocity, (-1.0, 0.0, 0.0))
        self.assertEqual(b.velocity, (1.0, 0.0, 0.0))
        # Positional correction still applies
        self.assertAlmostEqual(a.position[0], -0.25)

    def test_collision_conserves_momentum(self):
        a = make_body("A", 2.0, 1.0, (0, 0, 0), (1.0, 0.5, 0))
        b = make_body("B", 5.0, 1.0, (1.0, 0.5, 0), (-0.5, 0, 0.2))
        before = total_momentum([a, b])
        resolve_collision(a, b, vec_sub(b.position, a.position), vec_len(vec_sub(b.position, a.position)))
        after = total_momentum([a, b])
        for x, y in zip(before, after):
            self.assertAlmostEqual(x, y)

    def test_coincident_bodies_separate_without_nan(self):
        a = make_body("A", 1.0, 1.0, (0, 0, 0), (0, 0, 0))
        b = make_body("B", 1.0, 1.0, (0, 0, 0), (0, 0, 0))
        self.physics.step([a, b], 0.01)

        for body in (a, b):
            self.assertTrue(all(math.isfinite(c) for c in body.position + body.velocity))
        self.assertAlmostEqual(a.position[0], -1.0)
        self.assertAlmostEqual(b.position[0], 1.0)

    def test_fallback_normal(self):
        self.assertEqual(collision_normal((0.0, 0.0, 0.0), 0.0), (1.0, 0.0, 0.0))
        self.assertEqual(collision_normal((0.0, 2.0, 0.0), 2.0), (0.0, 1.0, 0.0))


class TestIntegration(unittest.TestCase):
    """Test semi-implicit Euler, thrust and the speed cap."""

    def test_semi_implicit_euler(self):
        physics = NBodyPhysics(gravitational_constant=1.0)
        a = make_body("A", 1.0, 0.1, (0, 0, 0), (0, 0, 0))
        b = make_body("B", 1.0, 0.1, (1.0, 0, 0), (0, 0, 0))
        physics.step([a, b], 0.5)
        # a = F/m = 1; v = 0.5; x uses the updated velocity
        self.assertAlmostEqual(a.velocity[0], 0.5)
        self.assertAlmostEqual(a.position[0], 0.25)

    def test_thrust_accelerates_ship(self):
        physics = NBodyPhysics()
        ship = make_spaceship("Ship", 1.0, 0.5, (0, 0, 0), (0, 0, 0), max_thrust=5.0)
        ship.pilot.current_thrust = 2.0
        physics.step([ship], 1.0)
        self.assertAlmostEqual(ship.velocity[2], -2.0)

    def test_speed_cap(self):
        config = SimulationConfig()
        physics = NBodyPhysics.from_config(config)
        ship = make_spaceship("Ship", 1.0, 0.5, (0, 0, 0), (0, 0, -1000.0), max_thrust=5.0)
        ship.pilot.current_thrust = 5.0
        for _ in range(10):
            physics.step([ship], 0.1)
        self.assertLessEqual(ship.speed, config.max_speed + 1e-9)
        self.assertAlmostEqual(ship.speed, 638.0 * 0.99999, places=6)
        self.assertLess(speed_fraction_of_light(ship, config.speed_of_light), 1.0)

    def test_only_ship_is_capped(self):
        physics = NBodyPhysics()
        rock = make_body("Rock", 1.0, 0.5, (0, 0, 0), (1000.0, 0, 0))
        physics.step([rock], 0.1)
        self.assertEqual(rock.velocity[0], 1000.0)

    def test_non_finite_state_raises(self):
        physics = NBodyPhysics()
        rock = make_body("Rock", 1.0, 0.5, (0, 0, 0), (0, 0, 0))
        rock.velocity = (math.inf, 0.0, 0.0)
        with self.assertRaises(NumericalInstabilityError) as ctx:
            physics.step([rock], 0.1)
        self.assertEqual(ctx.exception.body_name, "Rock")

    def test_instability_leaves_bodies_unintegrated(self):
        """A diverging body aborts the step before any state is written."""
        physics = NBodyPhysics()
        steady = make_body("Steady", 1.0, 0.5, (0, 0, 0), (1.0, 0, 0))
        runaway = make_body("Runaway", 1.0, 0.5, (100.0, 0, 0), (1e308, 0, 0))
        with self.assertRaises(NumericalInstabilityError) as ctx:
            physics.step([steady, runaway], 10.0)

        self.assertEqual(ctx.exception.body_name, "Runaway")
        self.assertEqual(steady.position, (0.0, 0.0, 0.0))
        self.assertEqual(runaway.position, (100.0, 0.0, 0.0))
        for body in (steady, runaway):
            self.assertTrue(all(math.isfinite(c) for c in body.position + body.velocity))


class TestSpeedCap(unittest.TestCase):
    """Test that full thrust from rest never pushes the ship to c."""

    def test_full_thrust_from_rest(self):
        sim = Simulation()
        ship = sim.enter_pilot_mode((0.0, 0.0, 0.0), max_thrust=5.0)
        limit = sim.config.speed_of_light * sim.config.light_speed_fraction
        step_dt = sim.config.base_dt / sim.config.sub_steps

        for _ in range(2000):
            sim.update_pilot_controls(True, False)
            for _ in range(sim.config.sub_steps):
                sim.step(step_dt)
                self.assertLessEqual(ship.speed, limit + 1e-9)

        self.assertEqual(ship.pilot.current_thrust, 5.0)
        self.assertAlmostEqual(ship.speed, limit, places=6)
        self.assertLess(sim.speed_fraction_of_light(), 1.0)


if __name__ == '__main__':
    unittest.main()
