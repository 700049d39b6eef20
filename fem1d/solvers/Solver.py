import logging

import numpy as np
from scipy import linalg

from fem1d.algebra.Tensor import Matrix, Vector
from fem1d.utilities.config import CONFIG
from fem1d.utilities.errors import DimensionMismatchError, SolverError

logger = logging.getLogger(__name__)


class Solver:
    matrix: Matrix
    rhs: Vector
    residual: float
    dim: int

    def __init__(self, matrix, rhs):
        A = np.asarray(matrix)
        b = np.asarray(rhs)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise DimensionMismatchError(f"System matrix must be square, got shape {A.shape}")
        if b.shape != (A.shape[0],):
            raise DimensionMismatchError(f"Right-hand side has shape {b.shape}, expected ({A.shape[0]},)")
        self.dim = b.size
        self.matrix = Matrix.from_values(self.dim, self.dim, A)
        self.rhs = Vector.from_values(b)
        self.solution = Vector.zeros(self.dim)
        self.residual_vector = Vector.zeros(self.dim)
        self.residual = 0.0

    def get_matrix(self):
        return self.matrix

    def get_rhs(self):
        return self.rhs

    def get_solution(self):
        return self.solution

    def get_residual_vector(self):
        return self.residual_vector

    def get_residual(self):
        return self.residual

    def get_dimension(self):
        return self.dim

    def update_residual(self):
        self.residual_vector = self.rhs - self.matrix * self.solution
        self.residual = self.residual_vector.norm_inf()
        return self.residual


class DirectSolver(Solver):
    """Direct solve of the assembled system.

    Tridiagonal matrices, which is what the 1D assembly produces, go through
    the banded LAPACK solver; anything else through a dense LU.
    """

    def __init__(self, matrix, rhs, tolerance=None):
        super().__init__(matrix, rhs)
        self.tolerance = CONFIG.tolerance if tolerance is None else tolerance

    def is_tridiagonal(self):
        A = self.matrix.to_numpy()
        tol = self.tolerance
        return bool(np.all(np.abs(np.triu(A, 2)) <= tol) and np.all(np.abs(np.tril(A, -2)) <= tol))

    @staticmethod
    def banded(A):
        # LAPACK band storage: upper diagonal, main diagonal, lower diagonal
        n = A.shape[0]
        ab = np.zeros((3, n), dtype=A.dtype)
        ab[0, 1:] = np.diag(A, 1)
        ab[1, :] = np.diag(A)
        ab[2, :-1] = np.diag(A, -1)
        return ab

    def solve(self):
        A = self.matrix.to_numpy().astype(np.float64)
        b = self.rhs.to_numpy().astype(np.float64)
        try:
            if self.is_tridiagonal():
                logger.info("Selected banded solver (n=%d)", self.dim)
                u = linalg.solve_banded((1, 1), self.banded(A), b)
            else:
                logger.info("Selected dense solver (n=%d)", self.dim)
                u = linalg.solve(A, b)
        except linalg.LinAlgError as e:
            raise SolverError(f"Cannot solve the system: {e}") from e
        if not np.all(np.isfinite(u)):
            raise SolverError("Solution is not finite, the system is singular")

        self.solution = Vector.from_values(u)
        self.update_residual()
        logger.debug("Residual (inf-norm): %g", self.residual)
        return self.solution
