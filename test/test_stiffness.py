import numpy as np
import pytest

from fem1d.algebra.Tensor import Matrix
from fem1d.assembly.StiffnessMatrix import StiffnessMatrix, assemble_stiffness_1d
from fem1d.mesh.Mesh1D import Mesh1D
from fem1d.utilities.errors import DimensionMismatchError, InvalidArgumentError


def stiffness(x, a, k0=0, kN=0):
    KR = Matrix.zeros(len(x), len(x))
    assemble_stiffness_1d(KR, x, a, k0, kN)
    return KR


def test_conductivity_example():
    x = [2, 2.2, 2.4, 2.6, 2.8, 3]
    k0 = 1e6
    kN = 0
    KR = stiffness(x, lambda s: 0.5 - 0.06 * s, k0, kN)

    main = [1.87, 3.68, 3.56, 3.44, 3.32, 1.63]
    off = [-1.87, -1.81, -1.75, -1.69, -1.63]
    KR_test = Matrix.from_values(6, 6, np.diag(main) + np.diag(off, 1) + np.diag(off, -1))
    KR_test[0, 0] += k0

    assert (KR - KR_test).norm_inf() < 1e-9


def test_boundary_terms_on_corners():
    mesh = Mesh1D.irregular(0, 1, ne=6, seed=1)
    a = lambda s: 1 + s * s
    K = stiffness(mesh, a)
    KR = stiffness(mesh, a, 4.0, 0.25)

    diff = np.asarray(KR - K)
    expected = np.zeros((7, 7))
    expected[0, 0] = 4.0
    expected[6, 6] = 0.25
    np.testing.assert_allclose(diff, expected, atol=1e-14)


def test_symmetric_tridiagonal_and_singular_without_robin():
    mesh = Mesh1D.irregular(0, 3, ne=8, seed=2)
    K = np.asarray(stiffness(mesh, np.exp))
    np.testing.assert_array_equal(K, K.T)
    assert not np.any(np.triu(K, 2))
    assert not np.any(np.tril(K, -2))
    # constants are in the kernel of the pure Neumann operator
    np.testing.assert_allclose(K.sum(axis=1), 0, atol=1e-12)
    # diagonal dominance
    off = np.abs(K).sum(axis=1) - np.abs(np.diag(K))
    assert np.all(np.diag(K) >= off - 1e-12)


def test_constant_coefficient_uniform_mesh():
    KR = stiffness(Mesh1D.regular(0, 1, ne=4), lambda s: 1.0)
    np.testing.assert_allclose(np.diag(np.asarray(KR)), [4, 8, 8, 8, 4])
    np.testing.assert_allclose(np.diag(np.asarray(KR), 1), [-4, -4, -4, -4])


def test_invalid_coefficients_leave_output_untouched():
    x = [0.0, 1.0, 2.0]
    KR = Matrix.zeros(3, 3)
    with pytest.raises(InvalidArgumentError):
        assemble_stiffness_1d(KR, x, lambda s: 1.0 - s)
    with pytest.raises(InvalidArgumentError):
        assemble_stiffness_1d(KR, x, lambda s: 1.0, k0=-1.0)
    with pytest.raises(InvalidArgumentError):
        assemble_stiffness_1d(KR, x, lambda s: 1.0, kN=-1.0)
    assert KR.norm_inf() == 0

    with pytest.raises(DimensionMismatchError):
        assemble_stiffness_1d(Matrix.zeros(3, 2), x, lambda s: 1.0)


def test_facade_save_load(tmp_path):
    mesh = Mesh1D([2, 2.2, 2.4, 2.6, 2.8, 3])
    s = StiffnessMatrix(mesh)
    A = s.compute_stiffness_1d(lambda x: 0.5 - 0.06 * x, k0=1e6)
    assert A[0, 0] == pytest.approx(1e6 + 1.87)

    s.save(tmp_path / "A.npy")
    assert StiffnessMatrix(mesh).load(tmp_path / "A.npy") == A


def test_non_numeric_robin_coefficient():
    with pytest.raises(InvalidArgumentError):
        assemble_stiffness_1d(Matrix.zeros(2, 2), [0.0, 1.0], lambda s: 1.0, k0=None)
