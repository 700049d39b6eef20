import logging

import numpy as np

from fem1d.algebra.Tensor import Matrix
from fem1d.assembly.LoadFunction import LoadFunction
from fem1d.utilities.errors import DimensionMismatchError, InvalidArgumentError
from fem1d.utilities.validation import check_output, check_robin, mesh_coordinates

logger = logging.getLogger(__name__)


def assemble_stiffness_1d(KR, x, a, k0=0, kN=0, check_zero=None):
    """Accumulate the stiffness matrix of -(a u')' with Robin terms into ``KR``.

    The coefficient a is evaluated at every element midpoint and must be
    strictly positive; k0 and kN are added to the first and last diagonal
    entries and must be non-negative. k0 = kN = 0 gives the pure Neumann
    operator, a large k approximates a Dirichlet condition.

    Every coefficient value is checked before KR is touched.
    """
    x = mesh_coordinates(x)
    n_points = x.size
    check_output(KR, (n_points, n_points), check_zero)
    check_robin(k0, kN)
    a = LoadFunction.wrap(a, positive=True)
    logger.debug("Assembling stiffness matrix on %d nodes", n_points)

    h = np.diff(x)
    mid = (x[1:] + x[:-1]) / 2
    amh = [a(m) / hi for m, hi in zip(mid, h)]

    for i in range(1, n_points):
        i1 = i - 1
        KR[i1, i1] += amh[i1]
        KR[i1, i] -= amh[i1]
        KR[i, i1] -= amh[i1]
        KR[i, i] += amh[i1]

    KR[0, 0] += k0
    KR[n_points - 1, n_points - 1] += kN
    return KR


class StiffnessMatrix:

    def __init__(self, mesh):
        self.mesh = mesh
        self.A = None

    def compute_stiffness_1d(self, a, k0=0, kN=0):
        n_points = self.mesh.get_np()
        A = Matrix.zeros(n_points, n_points)
        assemble_stiffness_1d(A, self.mesh.get_mesh(), a, k0, kN)
        self.A = A
        return A

    def save(self, path):
        if self.A is None:
            raise InvalidArgumentError("Nothing to save: compute the stiffness matrix first")
        np.save(path, self.A.to_numpy())

    def load(self, path):
        y = np.load(path)
        n_points = self.mesh.get_np()
        if y.shape != (n_points, n_points):
            raise DimensionMismatchError(f"Stored matrix has shape {y.shape}, mesh has {n_points} nodes")
        self.A = Matrix.from_values(n_points, n_points, y)
        return self.A
