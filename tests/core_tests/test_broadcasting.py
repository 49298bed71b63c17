import itertools
import unittest

import numpy as np

from policynet.nn.errors import ShapeError
from policynet.nn.tensor import Tensor, broadcast_shapes


class TestBroadcasting(unittest.TestCase):
    shape_pairs = [
        ((2, 3), (2, 3)),
        ((2, 3), (1, 3)),
        ((2, 3), (2, 1)),
        ((4, 1), (1, 5)),
        ((3, 1, 5), (1, 4, 1)),
        ((2, 3, 4), (4,)),
        ((3,), (2, 1)),
        ((1,), (3, 3)),
    ]

    def test_result_shape_is_axis_max(self):
        for a, b in self.shape_pairs:
            self.assertEqual(broadcast_shapes(a, b), np.broadcast_shapes(a, b))

    def test_incompatible_shapes(self):
        for a, b in [((2, 3), (3, 2)), ((4,), (3,)), ((2, 3, 4), (3, 3, 4))]:
            with self.assertRaises(ShapeError):
                broadcast_shapes(a, b)
            with self.assertRaises(ShapeError):
                Tensor.zeros(a) + Tensor.zeros(b)

    def test_coordinate_law(self):
        ops = {
            "add": (Tensor.add, np.add),
            "sub": (Tensor.sub, np.subtract),
            "mul": (Tensor.mul, np.multiply),
        }
        for (shape_a, shape_b), (name, (op, np_op)) in itertools.product(self.shape_pairs, ops.items()):
            with self.subTest(a=shape_a, b=shape_b, op=name):
                a = np.random.randn(*shape_a).astype(np.float32)
                b = np.random.randn(*shape_b).astype(np.float32)
                out = op(Tensor(a), Tensor(b))

                rank = len(out.shape)
                pa = a.reshape((1,) * (rank - a.ndim) + a.shape)
                pb = b.reshape((1,) * (rank - b.ndim) + b.shape)
                for idx in np.ndindex(*out.shape):
                    ia = tuple(0 if d == 1 else i for i, d in zip(idx, pa.shape))
                    ib = tuple(0 if d == 1 else i for i, d in zip(idx, pb.shape))
                    self.assertAlmostEqual(out[idx], float(np_op(pa[ia], pb[ib])), places=5)

    def test_operators_match_numpy(self):
        a = np.random.randn(3, 4).astype(np.float32)
        b = np.random.randn(4).astype(np.float32)
        self.assertTrue(np.allclose((Tensor(a) + Tensor(b)).numpy(), a + b))
        self.assertTrue(np.allclose((Tensor(a) - Tensor(b)).numpy(), a - b))
        self.assertTrue(np.allclose((Tensor(a) * Tensor(b)).numpy(), a * b))
        self.assertTrue(np.allclose((1.0 - Tensor(a)).numpy(), 1.0 - a))
        self.assertTrue(np.allclose((-Tensor(a)).numpy(), -a))

    def test_operands_unchanged(self):
        a = Tensor(np.ones((2, 1), dtype=np.float32))
        b = Tensor(np.full((1, 3), 2.0, dtype=np.float32))
        a + b
        np.testing.assert_array_equal(a.numpy(), np.ones((2, 1)))
        np.testing.assert_array_equal(b.numpy(), np.full((1, 3), 2.0))


if __name__ == "__main__":
    unittest.main()
