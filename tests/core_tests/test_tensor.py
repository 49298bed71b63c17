import unittest

import numpy as np

from policynet.nn.errors import ShapeError
from policynet.nn.tensor import Tensor


class TestTensorConstruction(unittest.TestCase):
    def test_zeros_shape_and_strides(self):
        t = Tensor.zeros((2, 3, 4))
        self.assertEqual(t.shape, (2, 3, 4))
        self.assertEqual(t.strides, (12, 4, 1))
        self.assertEqual(t.size, 24)
        self.assertEqual(t.rank, 3)
        self.assertTrue(np.all(t.numpy() == 0))

    def test_constructor_copies_input(self):
        data = np.arange(6, dtype=np.float32).reshape(2, 3)
        t = Tensor(data)
        data[0, 0] = 100.0
        self.assertEqual(t[0, 0], 0.0)

    def test_numpy_returns_a_copy(self):
        t = Tensor([[1.0, 2.0]])
        arr = t.numpy()
        arr[0, 0] = 9.0
        self.assertEqual(t[0, 0], 1.0)

    def test_negative_dimension_rejected(self):
        with self.assertRaises(ShapeError):
            Tensor.zeros((2, -1))

    def test_full_and_fill(self):
        t = Tensor.full((2, 2), 3.5)
        self.assertTrue(np.all(t.numpy() == 3.5))
        t.fill(-1.0)
        self.assertTrue(np.all(t.numpy() == -1.0))

    def test_item(self):
        self.assertEqual(Tensor([[4.0]]).item(), 4.0)
        with self.assertRaises(ShapeError):
            Tensor([1.0, 2.0]).item()


class TestTensorAccess(unittest.TestCase):
    def setUp(self):
        self.data = np.arange(24, dtype=np.float32).reshape(2, 3, 4)
        self.t = Tensor(self.data)

    def test_get_matches_row_major_layout(self):
        for idx in np.ndindex(*self.data.shape):
            self.assertEqual(self.t[idx], self.data[idx])

    def test_set(self):
        self.t[1, 2, 3] = -5.0
        self.assertEqual(self.t[1, 2, 3], -5.0)
        self.assertEqual(self.t.numpy().reshape(-1)[23], -5.0)

    def test_out_of_range_raises(self):
        for idx in [(2, 0, 0), (0, 3, 0), (0, 0, 4), (-1, 0, 0)]:
            with self.assertRaises(ShapeError):
                self.t[idx]

    def test_wrong_index_count_raises(self):
        with self.assertRaises(ShapeError):
            self.t[0, 0]
        with self.assertRaises(ShapeError):
            self.t[0, 0, 0] = 1.0


class TestReshapeTranspose(unittest.TestCase):
    def test_reshape_keeps_linear_order(self):
        data = np.arange(12, dtype=np.float32)
        t = Tensor(data).reshape(3, 4)
        self.assertEqual(t.shape, (3, 4))
        self.assertEqual(t.strides, (4, 1))
        np.testing.assert_array_equal(t.numpy().reshape(-1), data)

        u = t.reshape((2, 2, 3))
        self.assertEqual(u.shape, (2, 2, 3))
        np.testing.assert_array_equal(u.numpy().reshape(-1), data)

    def test_reshape_count_mismatch(self):
        t = Tensor.zeros((3, 4))
        for shape in [(5, 2), (12, 2), (13,)]:
            with self.assertRaises(ShapeError):
                t.reshape(shape)

    def test_transpose_2d(self):
        data = np.random.randn(3, 5).astype(np.float32)
        t = Tensor(data)
        tt = t.transpose_2d()
        self.assertEqual(tt.shape, (5, 3))
        for i in range(3):
            for j in range(5):
                self.assertEqual(tt[j, i], t[i, j])

    def test_double_transpose_is_identity(self):
        for shape in [(1, 1), (1, 7), (4, 2), (6, 6)]:
            data = np.random.randn(*shape).astype(np.float32)
            t = Tensor(data)
            np.testing.assert_array_equal(t.transpose_2d().transpose_2d().numpy(), data)

    def test_transpose_2d_requires_rank_2(self):
        with self.assertRaises(ShapeError):
            Tensor.zeros((2, 3, 4)).transpose_2d()

    def test_transpose_axes(self):
        data = np.random.randn(2, 3, 4).astype(np.float32)
        np.testing.assert_array_equal(Tensor(data).transpose((1, 0, 2)).numpy(), data.transpose(1, 0, 2))


class TestMatmulAndReductions(unittest.TestCase):
    def test_matmul_matches_numpy(self):
        a = np.random.randn(4, 3).astype(np.float32)
        b = np.random.randn(3, 5).astype(np.float32)
        out = Tensor(a) @ Tensor(b)
        self.assertTrue(np.allclose(out.numpy(), a @ b, atol=1e-5))

    def test_matmul_inner_mismatch(self):
        with self.assertRaises(ShapeError):
            Tensor.zeros((2, 3)) @ Tensor.zeros((2, 3))

    def test_sum_and_mean(self):
        data = np.random.randn(4, 3).astype(np.float32)
        t = Tensor(data)
        self.assertTrue(np.allclose(t.sum(axis=0).numpy(), data.sum(axis=0), atol=1e-5))
        self.assertAlmostEqual(t.mean().item(), float(data.mean()), places=5)

    def test_scalar_multiply(self):
        data = np.random.randn(2, 3).astype(np.float32)
        out = Tensor(data).scalar_multiply(-2.5)
        self.assertEqual(out.shape, (2, 3))
        self.assertTrue(np.allclose(out.numpy(), data * -2.5))
        self.assertTrue(np.allclose((Tensor(data) * 3).numpy(), data * 3))

    def test_scalar_ops_promote_integer_tensors(self):
        t = Tensor([1, 3], dtype=np.int64)
        self.assertEqual(t.scalar_multiply(0.5).tolist(), [0.5, 1.5])
        self.assertEqual((t * 0.5).tolist(), [0.5, 1.5])
        self.assertEqual((t + 0.5).tolist(), [1.5, 3.5])
        self.assertEqual((0.5 - t).tolist(), [-0.5, -2.5])
        self.assertEqual((t * 2).dtype, np.int64)

    def test_scalar_ops_keep_float32(self):
        t = Tensor([1.0, 2.0])
        self.assertEqual((t * 0.5).dtype, np.float32)
        self.assertEqual((t + 0.5).dtype, np.float32)
        self.assertEqual(t.scalar_multiply(2.0).dtype, np.float32)


if __name__ == "__main__":
    unittest.main()
