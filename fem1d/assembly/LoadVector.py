import logging

import numpy as np

from fem1d.algebra.Tensor import Vector
from fem1d.assembly.LoadFunction import LoadFunction
from fem1d.utilities.errors import DimensionMismatchError, InvalidArgumentError
from fem1d.utilities.validation import check_output, check_real, check_robin, mesh_coordinates

logger = logging.getLogger(__name__)


def assemble_load_1d(b, x, f, check_zero=None):
    """Accumulate the load vector of the source ``f`` on mesh ``x`` into ``b``.

    Trapezoidal rule on every element: exact whenever f is affine on each
    element. f is evaluated once per node.
    """
    x = mesh_coordinates(x)
    n_points = x.size
    check_output(b, (n_points,), check_zero)
    f = LoadFunction.wrap(f)
    logger.debug("Assembling load vector on %d nodes", n_points)

    # every node value is checked before b is touched
    fx = [f(s) for s in x]

    for i in range(1, n_points):
        i1 = i - 1
        h2 = (x[i] - x[i1]) / 2

        b[i1] += h2 * fx[i1]
        b[i] += h2 * fx[i]
    return b


def assemble_load_robin_1d(br, x, f, k0, g0, kN, gN, check_zero=None):
    """Load vector with the Robin terms k0*g0 and kN*gN on the two end nodes.

    Pairs with the stiffness matrix of ``assemble_stiffness_1d`` for the
    boundary conditions a(x0)u'(x0) = k0(u(x0) - g0) and
    a(xN)u'(xN) = kN(u(xN) - gN).
    """
    check_robin(k0, kN)
    check_real("g0", g0)
    check_real("gN", gN)
    assemble_load_1d(br, x, f, check_zero)
    br[0] += k0 * g0
    br[len(br) - 1] += kN * gN
    return br


class LoadVector:

    def __init__(self, mesh):
        self.mesh = mesh
        self.rhs = None

    def compute_rhs_1d(self, f):
        b = Vector.zeros(self.mesh.get_np())
        assemble_load_1d(b, self.mesh.get_mesh(), f)
        self.rhs = b
        return b

    def compute_rhs_robin_1d(self, f, k0, g0, kN, gN):
        br = Vector.zeros(self.mesh.get_np())
        assemble_load_robin_1d(br, self.mesh.get_mesh(), f, k0, g0, kN, gN)
        self.rhs = br
        return br

    def save(self, path):
        if self.rhs is None:
            raise InvalidArgumentError("Nothing to save: compute the load vector first")
        np.save(path, self.rhs.to_numpy())

    def load(self, path):
        rhs = np.load(path)
        n_points = self.mesh.get_np()
        if rhs.shape != (n_points,):
            raise DimensionMismatchError(f"Stored vector has shape {rhs.shape}, mesh has {n_points} nodes")
        self.rhs = Vector.from_values(rhs)
        return self.rhs
