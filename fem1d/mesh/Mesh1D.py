# This class represents a 1D Mesh: ordered node coordinates and the
# elements [x[i-1], x[i]] between consecutive nodes.
import logging

import numpy as np

from fem1d.utilities.errors import InvalidArgumentError
from fem1d.utilities.validation import mesh_coordinates

logger = logging.getLogger(__name__)


class Mesh1D:
    ne: int
    np: int

    def __init__(self, x, regular=False):
        self.x = mesh_coordinates(x).copy()
        self.x.setflags(write=False)
        self.np = self.x.size
        self.ne = self.np - 1
        self._regular = regular
        self.conn = self.connection_matrix()
        logger.debug("Initialized Mesh 1D with %d nodes", self.np)

    @staticmethod
    def _check_interval(a, b, ne):
        if int(ne) != ne or ne < 1:
            raise InvalidArgumentError(f"Number of elements must be a positive integer, got {ne}")
        if not b > a:
            raise InvalidArgumentError(f"Interval [{a}, {b}] is empty")

    @classmethod
    def regular(cls, a=0.0, b=1.0, ne=1):
        cls._check_interval(a, b, ne)
        logger.info("Constructing regular mesh on [%s, %s] with %d elements", a, b, ne)
        return cls(np.linspace(a, b, int(ne) + 1), regular=True)

    @classmethod
    def irregular(cls, a=0.0, b=1.0, ne=1, seed=None):
        """Uniform mesh whose interior nodes are moved left by h/8 to h/4."""
        cls._check_interval(a, b, ne)
        logger.info("Constructing irregular mesh on [%s, %s] with %d elements", a, b, ne)
        ne = int(ne)
        h = (b - a) / ne
        rng = np.random.default_rng(seed)
        x = np.linspace(a, b, ne + 1)
        x[1:-1] -= rng.uniform(h / 8, h / 4, size=ne - 1)
        return cls(x, regular=False)

    def refine(self, n_ref=1):
        """Split every element in two, n_ref times."""
        x = self.x
        for i in range(0, n_ref):
            mid = (x[1:] + x[:-1]) / 2
            fine = np.empty(2 * x.size - 1, dtype=x.dtype)
            fine[0::2] = x
            fine[1::2] = mid
            x = fine
        logger.info("Refined mesh %d times: %d -> %d elements", n_ref, self.ne, x.size - 1)
        return Mesh1D(x, regular=self._regular)

    def is_regular(self):
        return self._regular

    def connection_matrix(self):
        x = self.x
        conn = np.ndarray(shape=(self.ne, 2), dtype=x.dtype)
        conn[:, 0] = x[:-1]
        conn[:, 1] = x[1:]
        return conn

    def get_connections(self):
        return self.conn

    def get_ne(self):
        return self.ne

    def get_np(self):
        return self.np

    def get_mesh(self):
        return self.x.copy()

    def get_h(self):
        return np.diff(self.x)

    def __len__(self):
        return self.np

    def __iter__(self):
        return iter(self.x)

    def __array__(self, dtype=None, copy=None):
        x = self.x if dtype is None else self.x.astype(dtype)
        return x.copy() if copy else x

    def __repr__(self):
        return f"Mesh1D(np={self.np}, x=[{self.x[0]}, ..., {self.x[-1]}])"
