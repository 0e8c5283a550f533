"""
Unit tests for the vector and quaternion helpers.
"""

import math
import unittest

from simcore.quaternion import (
    IDENTITY,
    quat_from_axis_angle,
    quat_from_unit_vectors,
    quat_len,
    quat_mul,
    quat_normalize,
    quat_rotate,
)
from simcore.vector_utils import (
    ZERO,
    clamp,
    vec3,
    vec_add,
    vec_clamp_length,
    vec_cross,
    vec_dot,
    vec_is_finite,
    vec_len,
    vec_norm,
    vec_scale,
    vec_sub,
)


class TestVectorUtils(unittest.TestCase):
    """Test tuple-based 3D vector helpers."""

    def assertVecAlmostEqual(self, a, b, places=9):
        for x, y in zip(a, b):
            self.assertAlmostEqual(x, y, places=places)

    def test_basic_arithmetic(self):
        a = (1.0, 2.0, 3.0)
        b = (4.0, -1.0, 0.5)
        self.assertEqual(vec_add(a, b), (5.0, 1.0, 3.5))
        self.assertEqual(vec_sub(a, b), (-3.0, 3.0, 2.5))
        self.assertEqual(vec_scale(a, 2), (2.0, 4.0, 6.0))
        self.assertEqual(vec_dot(a, b), 4.0 - 2.0 + 1.5)

    def test_cross_product_is_right_handed(self):
        self.assertEqual(vec_cross((1.0, 0.0, 0.0), (0.0, 1.0, 0.0)), (0.0, 0.0, 1.0))

    def test_length_and_normalize(self):
        self.assertEqual(vec_len((3.0, 4.0, 0.0)), 5.0)
        self.assertVecAlmostEqual(vec_norm((0.0, 0.0, -7.0)), (0.0, 0.0, -1.0))
        self.assertEqual(vec_norm(ZERO), ZERO)

    def test_vec3_coerces_sequences(self):
        self.assertEqual(vec3([1, 2, 3]), (1.0, 2.0, 3.0))
        with self.assertRaises(ValueError):
            vec3([1, 2])

    def test_clamp_length(self):
        clamped = vec_clamp_length((30.0, 40.0, 0.0), 10.0)
        self.assertAlmostEqual(vec_len(clamped), 10.0)
        self.assertVecAlmostEqual(vec_norm(clamped), (0.6, 0.8, 0.0))
        # Shorter vectors are returned untouched
        self.assertEqual(vec_clamp_length((1.0, 0.0, 0.0), 10.0), (1.0, 0.0, 0.0))

    def test_is_finite(self):
        self.assertTrue(vec_is_finite((1.0, 2.0, 3.0)))
        self.assertFalse(vec_is_finite((math.nan, 0.0, 0.0)))
        self.assertFalse(vec_is_finite((0.0, math.inf, 0.0)))

    def test_clamp(self):
        self.assertEqual(clamp(5, 0, 3), 3)
        self.assertEqual(clamp(-1, 0, 3), 0)
        self.assertEqual(clamp(2, 0, 3), 2)


class TestQuaternion(unittest.TestCase):
    """Test quaternion rotation helpers."""

    def assertVecAlmostEqual(self, a, b, places=9):
        for x, y in zip(a, b):
            self.assertAlmostEqual(x, y, places=places)

    def test_identity_leaves_vector_unchanged(self):
        self.assertVecAlmostEqual(quat_rotate(IDENTITY, (1.0, 2.0, 3.0)), (1.0, 2.0, 3.0))

    def test_yaw_quarter_turn(self):
        """A +90 degree turn about Y takes -Z onto -X."""
        q = quat_from_axis_angle((0.0, 1.0, 0.0), math.pi / 2)
        self.assertVecAlmostEqual(quat_rotate(q, (0.0, 0.0, -1.0)), (-1.0, 0.0, 0.0))

    def test_multiplication_composes_rotations(self):
        q = quat_from_axis_angle((0.0, 1.0, 0.0), math.pi / 4)
        double = quat_mul(q, q)
        half_turn = quat_from_axis_angle((0.0, 1.0, 0.0), math.pi / 2)
        v = (0.0, 0.0, -1.0)
        self.assertVecAlmostEqual(quat_rotate(double, v), quat_rotate(half_turn, v))

    def test_normalize(self):
        self.assertAlmostEqual(quat_len(quat_normalize((1.0, 2.0, 3.0, 4.0))), 1.0)
        self.assertEqual(quat_normalize((0.0, 0.0, 0.0, 0.0)), IDENTITY)

    def test_from_unit_vectors(self):
        q = quat_from_unit_vectors((0.0, 0.0, -1.0), (1.0, 0.0, 0.0))
        self.assertVecAlmostEqual(quat_rotate(q, (0.0, 0.0, -1.0)), (1.0, 0.0, 0.0))

    def test_from_opposite_unit_vectors(self):
        q = quat_from_unit_vectors((0.0, 0.0, -1.0), (0.0, 0.0, 1.0))
        self.assertVecAlmostEqual(quat_rotate(q, (0.0, 0.0, -1.0)), (0.0, 0.0, 1.0))


if __name__ == '__main__':
    unittest.main()
