"""
Vectors and matrices of fixed dimensions.

A Tensor owns a flat buffer of the configured scalar type whose shape is fixed
when it is created. Vectors keep their elements in positional order, matrices
in row-major order, so an N-vector, a 1xN matrix and an Nx1 matrix share the
same element layout and may be added to each other.

Every constructor zero-fills; there is no uninitialized tensor.
"""
import numbers

import numpy as np

from fem1d.utilities.config import CONFIG
from fem1d.utilities.errors import DimensionMismatchError


def _is_scalar(value):
    return isinstance(value, numbers.Number) and not isinstance(value, Tensor)


def are_sizes_equal(t1, t2):
    """Shape compatibility for addition and subtraction.

    True when both shapes are identical, or when one is an N-vector and the
    other a 1xN or Nx1 matrix.
    """
    s1 = tuple(t1.shape)
    s2 = tuple(t2.shape)
    if s1 == s2:
        return True
    if len(s1) == len(s2):
        return False
    vec, mat = (s1, s2) if len(s1) == 1 else (s2, s1)
    n = vec[0]
    return mat == (1, n) or mat == (n, 1)


class Tensor:
    order: int
    shape: tuple

    # Keep numpy from broadcasting against tensors in mixed expressions
    __array_ufunc__ = None
    __hash__ = None

    def __init__(self, shape, dtype=None):
        shape = tuple(int(n) for n in shape)
        if len(shape) not in (1, 2):
            raise DimensionMismatchError(f"Tensors have order 1 or 2, got shape {shape}")
        if any(n < 1 for n in shape):
            raise DimensionMismatchError(f"Every dimension must be at least 1, got shape {shape}")
        self._shape = shape
        self._mem = np.zeros(int(np.prod(shape)), dtype=CONFIG.scalar if dtype is None else dtype)

    @classmethod
    def _wrap(cls, shape, mem):
        ans = cls.__new__(cls)
        ans._shape = shape
        ans._mem = mem
        return ans

    @property
    def shape(self):
        return self._shape

    @property
    def order(self):
        return len(self._shape)

    @property
    def size(self):
        return self._mem.size

    @property
    def dtype(self):
        return self._mem.dtype

    def length(self, dim=1):
        # dim is 1-based: 1 = rows (or vector length), 2 = columns
        if 1 <= dim <= self.order:
            return self._shape[dim - 1]
        return 0

    def __len__(self):
        return self._shape[0]

    def copy(self):
        return self._wrap(self._shape, self._mem.copy())

    def zeros_like(self):
        return self._wrap(self._shape, np.zeros_like(self._mem))

    def to_numpy(self):
        return self._mem.reshape(self._shape).copy()

    def __array__(self, dtype=None, copy=None):
        arr = self._mem.reshape(self._shape)
        if dtype is not None:
            arr = arr.astype(dtype, copy=False)
        if copy:
            arr = arr.copy()
        return arr

    # Indexing

    def _offset(self, pos):
        if not isinstance(pos, tuple):
            pos = (pos,)
        if len(pos) != self.order:
            raise DimensionMismatchError(
                f"Tensor of shape {self._shape} takes {self.order} indices, got {len(pos)}"
            )
        offset = 0
        for p, n in zip(pos, self._shape):
            if isinstance(p, (bool, np.bool_)) or not isinstance(p, (numbers.Integral, np.integer)):
                raise IndexError(f"Tensor indices must be integers, got {p!r}")
            if not 0 <= p < n:
                raise IndexError(f"Index {pos} out of range for shape {self._shape}")
            offset = offset * n + int(p)
        return offset

    def __getitem__(self, pos):
        return self._mem[self._offset(pos)]

    def __setitem__(self, pos, value):
        self._mem[self._offset(pos)] = value

    # Arithmetic

    def _check_sizes(self, other, op):
        if not are_sizes_equal(self, other):
            raise DimensionMismatchError(
                f"Cannot {op} tensors of shapes {self._shape} and {other.shape}"
            )

    def __iadd__(self, other):
        if isinstance(other, Tensor):
            self._check_sizes(other, "add")
            self._mem += other._mem
        elif _is_scalar(other):
            self._mem += other
        else:
            return NotImplemented
        return self

    def __isub__(self, other):
        if isinstance(other, Tensor):
            self._check_sizes(other, "subtract")
            self._mem -= other._mem
        elif _is_scalar(other):
            self._mem -= other
        else:
            return NotImplemented
        return self

    def __imul__(self, other):
        if not _is_scalar(other):
            return NotImplemented
        self._mem *= other
        return self

    def __itruediv__(self, other):
        if not _is_scalar(other):
            return NotImplemented
        self._mem /= other
        return self

    def __add__(self, other):
        if not isinstance(other, Tensor):
            return NotImplemented
        self._check_sizes(other, "add")
        return self._wrap(self._shape, self._mem + other._mem)

    def __sub__(self, other):
        if not isinstance(other, Tensor):
            return NotImplemented
        self._check_sizes(other, "subtract")
        return self._wrap(self._shape, self._mem - other._mem)

    def __neg__(self):
        return self._wrap(self._shape, -self._mem)

    def __mul__(self, other):
        if isinstance(other, Tensor):
            return self._product(other)
        if _is_scalar(other):
            return self._wrap(self._shape, self._mem * other)
        return NotImplemented

    def __rmul__(self, other):
        if _is_scalar(other):
            return self._wrap(self._shape, other * self._mem)
        return NotImplemented

    def __truediv__(self, other):
        if _is_scalar(other):
            return self._wrap(self._shape, self._mem / other)
        return NotImplemented

    def __matmul__(self, other):
        if not isinstance(other, Tensor):
            return NotImplemented
        return self._product(other)

    def _product_shape(self, other):
        # Returns (nr, n3, nc): a vector is read as a row or a column so that
        # the inner dimensions agree.
        err = f"Matrix multiplication dimension mismatch: {self._shape} * {other.shape}"
        if self.order == 2:
            nr, n3 = self._shape
            if other.order == 2:
                if n3 != other.shape[0]:
                    raise DimensionMismatchError(err)
                nc = other.shape[1]
            elif n3 == 1:
                nc = len(other)
            else:
                if n3 != len(other):
                    raise DimensionMismatchError(err)
                nc = 1
        else:
            if other.order == 2:
                n3, nc = other.shape
                if n3 == 1:
                    nr = len(self)
                else:
                    if n3 != len(self):
                        raise DimensionMismatchError(err)
                    nr = 1
            else:
                # dot product
                nr, nc, n3 = 1, 1, len(self)
                if n3 != len(other):
                    raise DimensionMismatchError(err)
        return nr, n3, nc

    def _product(self, other):
        nr, n3, nc = self._product_shape(other)
        a = self._mem
        b = other._mem
        ans = Matrix(nr, nc, dtype=np.result_type(a, b))
        mem = ans._mem
        for r in range(nr):
            for c in range(nc):
                elem = 0
                for k in range(n3):
                    elem += a[r * n3 + k] * b[k * nc + c]
                mem[r * nc + c] = elem
        return ans

    def norm_inf(self):
        return np.abs(self._mem).max()

    def __eq__(self, other):
        if not isinstance(other, Tensor):
            return NotImplemented
        return self._shape == other.shape and bool(np.array_equal(self._mem, other._mem))


class Vector(Tensor):

    def __init__(self, n, dtype=None):
        super().__init__((n,), dtype)

    def __repr__(self):
        return f"Vector({self._mem.tolist()})"

    def __iter__(self):
        return iter(self._mem)

    @classmethod
    def zeros(cls, n, dtype=None):
        return cls(n, dtype)

    @classmethod
    def from_values(cls, values, dtype=None):
        arr = np.asarray(values)
        if arr.ndim != 1:
            raise DimensionMismatchError(f"Vector values must be one-dimensional, got shape {arr.shape}")
        ans = cls(arr.size, dtype)
        ans._mem[:] = arr
        return ans

    def to_matrix(self, column=True):
        shape = (len(self), 1) if column else (1, len(self))
        return Matrix._wrap(shape, self._mem.copy())


class Matrix(Tensor):

    def __init__(self, nr, nc, dtype=None):
        super().__init__((nr, nc), dtype)

    def __repr__(self):
        return f"Matrix({self._shape[0]}, {self._shape[1]}, {self.to_numpy().tolist()})"

    def __iter__(self):
        # rows, consistent with len()
        nc = self._shape[1]
        for r in range(self._shape[0]):
            yield Vector._wrap((nc,), self._mem[r * nc:(r + 1) * nc].copy())

    @classmethod
    def zeros(cls, nr, nc, dtype=None):
        return cls(nr, nc, dtype)

    @classmethod
    def from_values(cls, nr, nc, values, dtype=None):
        """Values are either nested rows or a flat row-major sequence."""
        arr = np.asarray(values)
        if arr.ndim > 2 or arr.size != nr * nc or (arr.ndim == 2 and arr.shape != (nr, nc)):
            raise DimensionMismatchError(
                f"Cannot build a {nr}x{nc} matrix from values of shape {arr.shape}"
            )
        ans = cls(nr, nc, dtype)
        ans._mem[:] = arr.ravel()
        return ans

    def to_vector(self):
        nr, nc = self._shape
        if nr != 1 and nc != 1:
            raise DimensionMismatchError(f"Only a single row or column converts to a vector, got {self._shape}")
        return Vector._wrap((self.size,), self._mem.copy())


def zeros(shape, dtype=None):
    if isinstance(shape, (numbers.Integral, np.integer)):
        shape = (shape,)
    shape = tuple(shape)
    if len(shape) == 1:
        return Vector(shape[0], dtype)
    if len(shape) == 2:
        return Matrix(shape[0], shape[1], dtype)
    raise DimensionMismatchError(f"Tensors have order 1 or 2, got shape {shape}")


def as_tensor(values, dtype=None):
    arr = np.asarray(values)
    if arr.ndim == 1:
        return Vector.from_values(arr, dtype)
    if arr.ndim == 2:
        return Matrix.from_values(arr.shape[0], arr.shape[1], arr, dtype)
    raise DimensionMismatchError(f"Tensors have order 1 or 2, got shape {arr.shape}")
