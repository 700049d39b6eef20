import numpy as np
import pytest

from fem1d.algebra.Tensor import Matrix, Vector
from fem1d.assembly.LoadVector import LoadVector
from fem1d.assembly.StiffnessMatrix import StiffnessMatrix
from fem1d.mesh.Mesh1D import Mesh1D
from fem1d.solvers.Solver import DirectSolver
from fem1d.utilities.errors import DimensionMismatchError, SolverError


def test_poisson_with_robin_boundaries():
    # -u'' = 1 on [0, 1], u(0) = 0 (penalty), u'(1) = 0: u = x - x^2 / 2
    mesh = Mesh1D.irregular(0, 1, ne=20, seed=4)
    k0 = 1e10

    A = StiffnessMatrix(mesh).compute_stiffness_1d(lambda x: 1.0, k0=k0, kN=0.0)
    b = LoadVector(mesh).compute_rhs_robin_1d(lambda x: 1.0, k0, 0.0, 0.0, 0.0)

    sol = DirectSolver(A, b)
    assert sol.is_tridiagonal()
    u = sol.solve()

    x = mesh.get_mesh()
    np.testing.assert_allclose(np.asarray(u), x - x ** 2 / 2, atol=1e-7)
    assert sol.get_residual() < 1e-6
    assert sol.get_residual_vector().shape == (21,)


def test_dense_fallback():
    A = Matrix.from_values(3, 3, [4, 1, 1, 1, 4, 1, 1, 1, 4])
    b = Vector.from_values([6, 6, 6])
    sol = DirectSolver(A, b)
    assert not sol.is_tridiagonal()
    u = sol.solve()
    np.testing.assert_allclose(np.asarray(u), [1, 1, 1])
    assert sol.get_dimension() == 3


def test_singular_system():
    with pytest.raises(SolverError):
        DirectSolver(Matrix.zeros(2, 2), Vector.from_values([1, 1])).solve()


def test_shape_checks():
    with pytest.raises(DimensionMismatchError):
        DirectSolver(Matrix.zeros(2, 3), Vector.zeros(2))
    with pytest.raises(DimensionMismatchError):
        DirectSolver(Matrix.zeros(3, 3), Vector.zeros(2))
