import logging

import numpy as np

from fem1d.algebra.Tensor import Matrix
from fem1d.utilities.errors import DimensionMismatchError, InvalidArgumentError
from fem1d.utilities.validation import check_output, mesh_coordinates

logger = logging.getLogger(__name__)


def assemble_mass_1d(M, x, check_zero=None):
    """Accumulate the global mass matrix of the 1D mesh ``x`` into ``M``.

    M[i, j] approximates the integral of the product of the hat functions of
    nodes i and j, using Simpson's rule on every element. The result is
    symmetric and tridiagonal.

    Parameters
    ----------
    M : Matrix or array of shape (N, N)
        Output, zero-initialized unless ``check_zero=False``. Only ``+=`` is
        applied to it.
    x : sequence of N strictly increasing node coordinates.
    """
    x = mesh_coordinates(x)
    n_points = x.size
    check_output(M, (n_points, n_points), check_zero)
    logger.debug("Assembling mass matrix on %d nodes", n_points)

    for i in range(1, n_points):
        i1 = i - 1
        h = x[i] - x[i1]

        h3 = h / 3
        h6 = h / 6
        M[i1, i1] += h3
        M[i1, i] += h6
        M[i, i1] += h6
        M[i, i] += h3
    return M


class MassMatrix:

    def __init__(self, mesh):
        self.mesh = mesh
        self.M = None

    def compute_mass_1d(self):
        n_points = self.mesh.get_np()
        M = Matrix.zeros(n_points, n_points)
        assemble_mass_1d(M, self.mesh.get_mesh())
        self.M = M
        return M

    def save(self, path):
        if self.M is None:
            raise InvalidArgumentError("Nothing to save: compute the mass matrix first")
        np.save(path, self.M.to_numpy())

    def load(self, path):
        y = np.load(path)
        n_points = self.mesh.get_np()
        if y.shape != (n_points, n_points):
            raise DimensionMismatchError(f"Stored matrix has shape {y.shape}, mesh has {n_points} nodes")
        self.M = Matrix.from_values(n_points, n_points, y)
        return self.M
