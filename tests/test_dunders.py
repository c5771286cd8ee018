# tests/test_dunders.py

import unittest
import copy
import pickle
import numpy as np
from pivotframe import AffineTransform, CenteredRigidTransform, EulerConvention, EulerTransform


class ShiftPolicy:
    """Picklable offset policy: the offset is the z angle along x."""

    def compute_offset(self, matrix, angles, compute_zyx):
        return np.array([angles[2], 0.0, 0.0])


class TestTransformDunders(unittest.TestCase):
    def setUp(self):
        # non-trivial transform: rotate about (10, 0, 0) under ZYX, then translate
        self.t1 = CenteredRigidTransform(
            center=[10.0, 0.0, 0.0],
            translation=[1.0, 2.0, 3.0],
            angles=[0.1, 0.2, 0.3],
            convention=EulerConvention.ZYX,
        )

    def test_eq_and_not_eq(self):
        t_copy = copy.copy(self.t1)
        self.assertTrue(self.t1 == t_copy)
        self.assertFalse(self.t1 != t_copy)

        # mutating the copy makes it unequal
        t_copy.set_center([0.0, 0.0, 0.0])
        self.assertFalse(self.t1 == t_copy)

        # same parameters, other convention
        other = CenteredRigidTransform([10.0, 0.0, 0.0], [1.0, 2.0, 3.0], [0.1, 0.2, 0.3])
        self.assertFalse(self.t1 == other)

        # different class with the same matrix and offset
        affine = AffineTransform(self.t1.matrix, self.t1.offset)
        self.assertFalse(self.t1 == affine)

        # comparing to a non-transform always returns False
        self.assertFalse(self.t1 == 123)

    def test_unhashable(self):
        with self.assertRaises(TypeError):
            hash(self.t1)

    def test_repr_and_str(self):
        r = repr(self.t1)
        self.assertIn("CenteredRigidTransform", r)
        self.assertIn("center=", r)
        self.assertIn("ZYX", r)
        self.assertEqual(str(self.t1), r)
        self.assertIn("matrix=", repr(AffineTransform()))
        self.assertIn("angles=", repr(EulerTransform()))

    def test_copy_and_deepcopy(self):
        c1 = copy.copy(self.t1)
        dc1 = copy.deepcopy(self.t1)
        for c in (c1, dc1):
            self.assertIsNot(c, self.t1)
            self.assertEqual(c, self.t1)

        # the copy computes its offset from its own center
        c1.set_center([0.0, 0.0, 0.0])
        np.testing.assert_array_equal(self.t1.center, [10.0, 0.0, 0.0])
        expected = c1.matrix @ (c1.translation - c1.center) + c1.center
        np.testing.assert_allclose(c1.offset, expected, atol=1e-12)

    def test_pickle_round_trip(self):
        for t in (self.t1, EulerTransform([0.5, 0.0, -0.5], [1.0, 1.0, 1.0]), AffineTransform(np.diag([1.0, 2.0, 3.0]))):
            restored = pickle.loads(pickle.dumps(t))
            self.assertIs(type(restored), type(t))
            self.assertEqual(restored, t)

        restored = pickle.loads(pickle.dumps(self.t1))
        restored.set_translation([0.0, 0.0, 0.0])
        expected = restored.matrix @ (restored.translation - restored.center) + restored.center
        np.testing.assert_allclose(restored.offset, expected, atol=1e-12)

    def test_offset_policy_survives_copy_and_pickle(self):
        t = EulerTransform([0.1, 0.2, 0.3], offset_policy=ShiftPolicy())
        for other in (t.copy(), pickle.loads(pickle.dumps(t))):
            self.assertEqual(other, t)
            self.assertIsInstance(other._offset_policy, ShiftPolicy)
            other.set_rotation(0.0, 0.0, 2.5)
            np.testing.assert_array_equal(other.offset, [2.5, 0.0, 0.0])


if __name__ == "__main__":
    unittest.main()
