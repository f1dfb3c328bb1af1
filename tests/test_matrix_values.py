from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for value-model tests")
class MatrixValueModelTests(unittest.TestCase):
    def test_new_empty_is_all_zero(self) -> None:
        from matcalc.values import Matrix

        m = Matrix.new_empty(4, 3)
        self.assertEqual(m.rows, 4)
        self.assertEqual(m.cols, 3)
        self.assertEqual(m.m, 4)
        self.assertEqual(m.n, 3)
        for i in range(4):
            for j in range(3):
                self.assertEqual(m[i, j], 0.0)

    def test_new_from_keeps_cells_row_major(self) -> None:
        from matcalc.values import Matrix

        m = Matrix.new_from(2, 2, [[1.0, 2.0], [3.0, 4.0]])
        self.assertEqual(m[0, 0], 1.0)
        self.assertEqual(m[0, 1], 2.0)
        self.assertEqual(m[1, 0], 3.0)
        self.assertEqual(m[1, 1], 4.0)
        self.assertEqual(m[1], (3.0, 4.0))
        self.assertEqual(m.tolist(), [[1.0, 2.0], [3.0, 4.0]])

    def test_new_from_rejects_bad_dimensions(self) -> None:
        from matcalc.errors import DimensionError
        from matcalc.values import Matrix

        with self.assertRaises(DimensionError):
            Matrix.new_from(3, 2, [[1, 2], [3, 4]])
        with self.assertRaises(DimensionError):
            Matrix.new_from(2, 2, [[1, 2], [3, 4, 5]])

    def test_degenerate_shapes_are_allowed(self) -> None:
        from matcalc.values import Matrix

        self.assertEqual(Matrix.new_empty(0, 0).shape, (0, 0))
        self.assertEqual(Matrix.new_from(0, 3, []).shape, (0, 3))
        self.assertEqual(Matrix.from_rows([]).shape, (0, 0))

    def test_set_mutates_single_cell_only(self) -> None:
        from matcalc.values import Matrix

        m = Matrix.new_empty(2, 2)
        copy = m.copy()
        m.set(1, 0, 7.5)
        self.assertEqual(m.tolist(), [[0.0, 0.0], [7.5, 0.0]])
        self.assertEqual(copy.tolist(), [[0.0, 0.0], [0.0, 0.0]])

        with self.assertRaises(IndexError):
            m.set(2, 0, 1.0)

    def test_is_square_and_equals(self) -> None:
        from matcalc.values import Matrix

        m1 = Matrix.from_rows([[1, 2], [3, 4]])
        m2 = Matrix.from_rows([[1, 2], [3, 4]])
        m3 = Matrix.from_rows([[1, 2, 3], [3, 4, 3]])
        self.assertTrue(m1.is_square())
        self.assertFalse(Matrix.from_rows([[1, 2]]).is_square())
        self.assertTrue(m1.equals(m2))
        self.assertEqual(m1, m2)
        self.assertFalse(m1.equals(m3))
        self.assertNotEqual(m1, m3)

    def test_allclose_tolerates_rounding(self) -> None:
        from matcalc.values import Matrix

        m1 = Matrix.from_rows([[1.0, 0.0], [0.0, 1.0]])
        m2 = Matrix.from_rows([[1.0000001, 0.0], [0.0, 0.9999999]])
        self.assertTrue(m1.allclose(m2))
        self.assertFalse(m1.allclose(Matrix.from_rows([[1.0, 0.1], [0.0, 1.0]])))

    def test_value_kinds_and_coercion(self) -> None:
        from matcalc.values import Matrix, Scalar, ValueKind, as_value, kind_of

        self.assertEqual(kind_of(Scalar(1.0)), ValueKind.SCALAR)
        self.assertEqual(kind_of(Matrix.new_empty(1, 1)), ValueKind.MATRIX)
        self.assertEqual(as_value(3), Scalar(3.0))
        self.assertEqual(as_value([[1, 2]]), Matrix.from_rows([[1, 2]]))
        with self.assertRaises(TypeError):
            as_value("x")
        with self.assertRaises(TypeError):
            as_value(True)

    def test_format_value(self) -> None:
        from matcalc.values import Matrix, Scalar, format_value

        self.assertEqual(format_value(Scalar(64.0)), "64")
        self.assertEqual(format_value(Scalar(2.5)), "2.5")
        self.assertEqual(format_value(Matrix.from_rows([[1, 2.5], [3, 4]])), "1 2.5\n3 4")


if __name__ == "__main__":
    unittest.main()
