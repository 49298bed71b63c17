from numpy.lib.stride_tricks import as_strided

from ..utils.backend import xp
from .errors import ShapeError


def _product(shape):
    size = 1
    for dim in shape:
        size *= dim
    return size


def _row_major_strides(shape):
    strides = [0] * len(shape)
    step = 1
    for axis in range(len(shape) - 1, -1, -1):
        strides[axis] = step
        step *= shape[axis]
    return tuple(strides)


def _as_shape(shape):
    if isinstance(shape, (int, xp.integer)):
        shape = (shape,)
    shape = tuple(shape)
    for dim in shape:
        if isinstance(dim, bool) or not isinstance(dim, (int, xp.integer)) or dim < 0:
            raise ShapeError(f"Invalid shape {shape}: dimensions must be non-negative integers")
    return tuple(int(dim) for dim in shape)


def broadcast_shapes(shape_a, shape_b):
    """
    Result shape of a broadcast elementwise op.

    Shapes are right-aligned and the shorter one is padded with leading 1s.
    Per axis: equal sizes are kept, a size-1 side takes the other side's size,
    anything else is a ShapeError.
    """
    rank = max(len(shape_a), len(shape_b))
    padded_a = (1,) * (rank - len(shape_a)) + tuple(shape_a)
    padded_b = (1,) * (rank - len(shape_b)) + tuple(shape_b)

    out = []
    for axis, (dim_a, dim_b) in enumerate(zip(padded_a, padded_b)):
        if dim_a == dim_b:
            out.append(dim_a)
        elif dim_a == 1:
            out.append(dim_b)
        elif dim_b == 1:
            out.append(dim_a)
        else:
            raise ShapeError(
                f"Incompatible shapes for broadcasting: {tuple(shape_a)} and {tuple(shape_b)} "
                f"(axis {axis}: {dim_a} vs {dim_b})"
            )
    return tuple(out)


class Tensor:
    def __init__(self, data, dtype=xp.float32):
        if isinstance(data, Tensor):
            data = data.data
        # always copies: a Tensor never shares its buffer with the caller
        array = xp.array(data, dtype=dtype, order="C")
        self._set_buffer(array)

    def _set_buffer(self, array):
        self._shape = tuple(int(dim) for dim in array.shape)
        self._strides = _row_major_strides(self._shape)
        self._buffer = array.reshape(-1)

    @classmethod
    def _from_array(cls, array):
        # array must be freshly allocated by the caller
        out = cls.__new__(cls)
        out._set_buffer(xp.ascontiguousarray(array))
        return out

    @classmethod
    def zeros(cls, shape, dtype=xp.float32):
        return cls._from_array(xp.zeros(_as_shape(shape), dtype=dtype))

    @classmethod
    def full(cls, shape, value, dtype=xp.float32):
        return cls._from_array(xp.full(_as_shape(shape), value, dtype=dtype))

    # Shape information ----------------------------------------------------
    @property
    def shape(self):
        return self._shape

    @property
    def strides(self):
        return self._strides

    @property
    def rank(self):
        return len(self._shape)

    @property
    def size(self):
        return self._buffer.size

    @property
    def dtype(self):
        return self._buffer.dtype

    @property
    def data(self):
        return self._buffer.reshape(self._shape)

    def numpy(self):
        return self.data.copy()

    def tolist(self):
        return self.data.tolist()

    def item(self):
        if self.size != 1:
            raise ShapeError(f"item() requires a single element, tensor has shape {self._shape}")
        return self._buffer[0].item()

    def copy(self):
        return Tensor._from_array(self._buffer.copy().reshape(self._shape))

    def __len__(self):
        if not self._shape:
            raise TypeError("len() of a 0-d tensor")
        return self._shape[0]

    def __array__(self, dtype=None, copy=None):
        array = self.data if copy is False else self.numpy()
        return array if dtype is None else array.astype(dtype, copy=False)

    def __repr__(self):
        return f"Tensor(data={self.data}, shape={self._shape}, dtype={self.dtype})"

    def __str__(self):
        return f"Tensor(shape={self._shape}, dtype={self.dtype})"

    # Element access -------------------------------------------------------
    def _flat_index(self, index):
        if not isinstance(index, tuple):
            index = (index,)
        if len(index) != self.rank:
            raise ShapeError(f"Expected {self.rank} indices for shape {self._shape}, got {len(index)}")

        flat = 0
        for axis, (i, dim, stride) in enumerate(zip(index, self._shape, self._strides)):
            if isinstance(i, bool) or not isinstance(i, (int, xp.integer)):
                raise TypeError(f"Tensor indices must be integers, got {type(i).__name__} for axis {axis}")
            if i < 0 or i >= dim:
                raise ShapeError(f"Index {i} out of range for axis {axis} (size {dim})")
            flat += int(i) * stride
        return flat

    def __getitem__(self, index):
        return self._buffer[self._flat_index(index)].item()

    def __setitem__(self, index, value):
        self._buffer[self._flat_index(index)] = value

    # Bulk modification ----------------------------------------------------
    def fill(self, value):
        self._buffer.fill(value)

    def copy_(self, other):
        # in place, keeps this tensor's dtype
        other = self._coerce(other)
        if other.shape != self._shape:
            raise ShapeError(f"Cannot copy tensor of shape {other.shape} into shape {self._shape}")
        self._buffer[:] = other._buffer
        return self

    def reshape(self, *shape):
        if len(shape) == 1 and not isinstance(shape[0], (int, xp.integer)):
            shape = shape[0]
        new_shape = _as_shape(shape)
        if _product(new_shape) != self.size:
            raise ShapeError(
                f"Reshape changes total element count: {self._shape} ({self.size}) -> "
                f"{new_shape} ({_product(new_shape)})"
            )
        return Tensor._from_array(self._buffer.copy().reshape(new_shape))

    def transpose_2d(self):
        if self.rank != 2:
            raise ShapeError(f"transpose_2d requires a rank-2 tensor, got shape {self._shape}")
        return Tensor._from_array(self.data.T.copy())

    def transpose(self, axes=None):
        if axes is None:
            axes = tuple(reversed(range(self.rank)))
        axes = tuple(axes)
        if sorted(axes) != list(range(self.rank)):
            raise ShapeError(f"Axes {axes} are not a permutation of a rank-{self.rank} tensor")
        return Tensor._from_array(xp.transpose(self.data, axes).copy())

    # Arithmetic -----------------------------------------------------------
    def _coerce(self, other):
        if isinstance(other, Tensor):
            return other
        if isinstance(other, (int, float, xp.number)):
            # promote like numpy does for a scalar operand
            return Tensor(other, dtype=xp.result_type(self.dtype, other))
        return Tensor(other)

    def _broadcast_view(self, shape):
        # size-1 axes get a zero stride, so every result coordinate reads index 0 there
        lead = len(shape) - self.rank
        padded = (1,) * lead + self._shape
        strides = (0,) * lead + self._strides
        itemsize = self._buffer.itemsize
        byte_strides = tuple(0 if dim == 1 else stride * itemsize for dim, stride in zip(padded, strides))
        return as_strided(self._buffer, shape=shape, strides=byte_strides, writeable=False)

    def _binary_op(self, other, op):
        other = self._coerce(other)
        shape = broadcast_shapes(self._shape, other._shape)
        result = op(self._broadcast_view(shape), other._broadcast_view(shape))
        return Tensor._from_array(result)

    def add(self, other):
        return self._binary_op(other, xp.add)

    def sub(self, other):
        return self._binary_op(other, xp.subtract)

    def mul(self, other):
        return self._binary_op(other, xp.multiply)

    def scalar_multiply(self, value):
        return Tensor._from_array(xp.asarray(self.data * value))

    def matmul(self, other):
        return matmul(self, self._coerce(other))

    def sum(self, axis=None, keepdims=False):
        return Tensor._from_array(xp.asarray(xp.sum(self.data, axis=axis, keepdims=keepdims)))

    def mean(self, axis=None, keepdims=False):
        return Tensor._from_array(xp.asarray(xp.mean(self.data, axis=axis, keepdims=keepdims)))

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return self._coerce(other).add(self)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return self._coerce(other).sub(self)

    def __mul__(self, other):
        if isinstance(other, (int, float, xp.number)):
            return self.scalar_multiply(other)
        return self.mul(other)

    def __rmul__(self, other):
        if isinstance(other, (int, float, xp.number)):
            return self.scalar_multiply(other)
        return self._coerce(other).mul(self)

    def __neg__(self):
        return self.scalar_multiply(-1)

    def __matmul__(self, other):
        return self.matmul(other)

    def __rmatmul__(self, other):
        return matmul(self._coerce(other), self)


def matmul(a: Tensor, b: Tensor) -> Tensor:
    if a.rank != 2 or b.rank != 2:
        raise ShapeError(f"matmul requires rank-2 tensors, got shapes {a.shape} and {b.shape}")
    if a.shape[1] != b.shape[0]:
        raise ShapeError(f"Matrix dimensions must agree for multiplication: {a.shape} @ {b.shape}")
    return Tensor._from_array(xp.matmul(a.data, b.data))
