import unittest
import numpy as np
from pivotframe import AffineTransform, InvalidArgumentError, SingularTransformError


class TestAffineTransform(unittest.TestCase):
    def setUp(self):
        self.M = np.array([[2.0, 1.0, 0.0],
                           [0.0, 3.0, 1.0],
                           [1.0, 0.0, 4.0]])
        self.t = AffineTransform(self.M, [1.0, -2.0, 3.0])

    def test_identity(self):
        t = AffineTransform.identity()
        np.testing.assert_array_equal(t.matrix, np.eye(3))
        np.testing.assert_array_equal(t.offset, [0, 0, 0])
        np.testing.assert_array_equal(t.to_matrix(), np.eye(4))

    def test_invalid_shapes(self):
        with self.assertRaises(InvalidArgumentError):
            AffineTransform(np.eye(4))
        with self.assertRaises(InvalidArgumentError):
            AffineTransform(offset=[1, 2])
        with self.assertRaises(ValueError):
            AffineTransform(offset=[1, np.nan, 2])

    def test_accessors_return_copies(self):
        m = self.t.matrix
        m[0, 0] = 100.0
        o = self.t.offset
        o[:] = 0.0
        np.testing.assert_array_equal(self.t.matrix, self.M)
        np.testing.assert_array_equal(self.t.offset, [1, -2, 3])

    def test_transform_point_and_batch(self):
        p = np.array([1.0, 1.0, 1.0])
        expected = self.M @ p + np.array([1.0, -2.0, 3.0])
        np.testing.assert_allclose(self.t.transform_point(p), expected)

        points = np.array([[1.0, 1.0, 1.0], [0.0, 0.0, 0.0], [-1.0, 2.0, 5.0]])
        out = self.t.transform_point(points)
        self.assertEqual(out.shape, (3, 3))
        for row, point in zip(out, points):
            np.testing.assert_allclose(row, self.M @ point + [1.0, -2.0, 3.0])

    def test_transform_point_bad_shape(self):
        with self.assertRaises(InvalidArgumentError):
            self.t.transform_point([1.0, 2.0])

    def test_transform_vector_ignores_offset(self):
        v = np.array([0.5, -1.0, 2.0])
        np.testing.assert_allclose(self.t.transform_vector(v), self.M @ v)

    def test_transform_covariant_vector(self):
        n = np.array([0.0, 0.0, 1.0])
        expected = np.linalg.inv(self.M).T @ n
        np.testing.assert_allclose(self.t.transform_covariant_vector(n), expected, atol=1e-12)

    def test_to_matrix(self):
        expected = np.eye(4)
        expected[:3, :3] = self.M
        expected[:3, 3] = [1.0, -2.0, 3.0]
        np.testing.assert_array_equal(self.t.to_matrix(), expected)

    def test_invert_round_trip(self):
        inverse = self.t.get_inverse()
        p = np.array([3.0, -7.0, 0.25])
        np.testing.assert_allclose(
            inverse.transform_point(self.t.transform_point(p)), p, atol=1e-12)
        np.testing.assert_allclose(
            inverse.to_matrix(), np.linalg.inv(self.t.to_matrix()), atol=1e-12)

    def test_singular_inverse_leaves_transform_untouched(self):
        singular = np.array([[1.0, 2.0, 3.0],
                             [2.0, 4.0, 6.0],
                             [0.0, 1.0, 1.0]])
        t = AffineTransform(singular, [1.0, 2.0, 3.0])
        with self.assertRaises(SingularTransformError):
            t.invert()
        with self.assertRaises(ZeroDivisionError):
            t.get_inverse()
        np.testing.assert_array_equal(t.matrix, singular)
        np.testing.assert_array_equal(t.offset, [1.0, 2.0, 3.0])

    def test_mutators_advance_mtime(self):
        t = AffineTransform()
        stamps = [t.mtime]
        t.set_matrix(self.M)
        stamps.append(t.mtime)
        t.offset = [1.0, 1.0, 1.0]
        stamps.append(t.mtime)
        t.invert()
        stamps.append(t.mtime)
        t.set_identity()
        stamps.append(t.mtime)
        self.assertEqual(stamps, sorted(set(stamps)))

    def test_mtime_ordered_across_instances(self):
        a = AffineTransform()
        b = AffineTransform()
        self.assertLess(a.mtime, b.mtime)
        a.modified()
        self.assertGreater(a.mtime, b.mtime)


if __name__ == "__main__":
    unittest.main()
