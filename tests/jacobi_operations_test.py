#!/usr/bin/env python3
from decimal import Decimal, localcontext
from fractions import Fraction

import numpy as np
import pytest
from scipy.linalg import eigh

from JACOBItools import JacobiOperations, EigsResult, eigs, ShapeError, ConvergenceError


def random_symmetric(N, seed=0):
    rng = np.random.default_rng(seed)
    A = rng.standard_normal((N, N))
    return 0.5 * (A + A.T)


def check_decomposition(A, values, vectors, atol=1e-9):
    A = np.asarray(A, dtype=float)
    values = np.asarray(values, dtype=float)
    vectors = np.asarray(vectors, dtype=float)
    N = A.shape[0]
    assert np.all(np.diff(values) >= 0), "Eigenvalues not ascending!"
    assert np.isclose(values.sum(), np.trace(A), atol=atol), "Trace not preserved!"
    assert np.allclose(vectors.T @ vectors, np.eye(N), atol=atol), "Eigenvectors not orthogonal!"
    assert np.allclose(vectors @ np.diag(values) @ vectors.T, A, atol=atol), "Reconstruction failed!"


@pytest.mark.parametrize("use_numba", [True, False])
def test_ones_2x2(use_numba):
    values, vectors = eigs([[1, 1], [1, 1]], use_numba=use_numba)
    assert np.allclose(values, [0.0, 2.0], atol=1e-12)
    assert np.allclose(np.abs(vectors), np.sqrt(0.5), atol=1e-12)
    # eigenvalue 0 pairs with (1, -1) / sqrt(2), eigenvalue 2 with (1, 1) / sqrt(2)
    v0 = np.asarray(vectors)[:, 0]
    v1 = np.asarray(vectors)[:, 1]
    assert np.isclose(v0[0], -v0[1], atol=1e-12)
    assert np.isclose(v1[0], v1[1], atol=1e-12)


@pytest.mark.parametrize("use_numba", [True, False])
def test_two_by_two_trace_and_determinant(use_numba):
    A = [[5, 2.3], [2.3, 1]]
    values, vectors = eigs(A, use_numba=use_numba)
    assert abs(values[0] + values[1] - 6.0) < 1e-9
    assert abs(values[0] * values[1] - (5 * 1 - 2.3 ** 2)) < 1e-9
    check_decomposition(A, values, vectors)


@pytest.mark.parametrize("N", [1, 2, 4, 7])
def test_identity(N):
    values, vectors = eigs(np.eye(N))
    assert np.array_equal(values, np.ones(N))
    assert np.array_equal(vectors, np.eye(N))


@pytest.mark.parametrize("use_numba", [True, False])
@pytest.mark.parametrize("N", [3, 6, 10])
def test_random_matches_scipy(use_numba, N):
    A = random_symmetric(N, seed=N)
    values, vectors = JacobiOperations(use_numba=use_numba).eigs(A)
    assert isinstance(values, np.ndarray) and isinstance(vectors, np.ndarray)
    assert np.allclose(values, eigh(A, eigvals_only=True), atol=1e-9)
    check_decomposition(A, values, vectors)


def test_numba_and_generic_paths_agree():
    A = random_symmetric(8, seed=42)
    values_nb, vectors_nb = JacobiOperations(use_numba=True).eigs(A)
    values_py, vectors_py = JacobiOperations(use_numba=False).eigs(A)
    assert np.allclose(values_nb, values_py, atol=1e-10)
    # columns agree up to sign
    dots = np.abs(np.sum(vectors_nb * vectors_py, axis=0))
    assert np.allclose(dots, 1.0, atol=1e-8)


def test_redecompose_reconstruction():
    A = random_symmetric(5, seed=3)
    values, vectors = eigs(A)
    B = vectors @ np.diag(values) @ vectors.T
    B = 0.5 * (B + B.T)
    values_b, _ = eigs(B)
    assert np.allclose(values, values_b, atol=1e-9)


def test_repeated_eigenvalues():
    A = np.diag([3.0, 1.0, 3.0, 1.0])
    values, vectors = eigs(A)
    assert np.array_equal(values, [1.0, 1.0, 3.0, 3.0])
    # earliest diagonal position wins among equal values
    expected = np.eye(4)[:, [1, 3, 0, 2]]
    assert np.array_equal(vectors, expected)


def test_eigenvalues_only():
    ops = JacobiOperations()
    assert np.allclose(ops.eigenvalues([[2.0, 1.0], [1.0, 2.0]]), [1.0, 3.0], atol=1e-12)
    values = ops.eigenvalues([[Fraction(3), Fraction(0)], [Fraction(0), Fraction(1)]])
    assert values == [Fraction(1), Fraction(3)]


def test_container_follows_input():
    result = eigs([[2.0, 1.0], [1.0, 2.0]])
    assert isinstance(result, EigsResult)
    assert isinstance(result.values, list) and isinstance(result.vectors, list)
    assert isinstance(result.vectors[0], list)

    result = eigs(np.array([[2.0, 1.0], [1.0, 2.0]]))
    assert result.values.dtype == np.float64 and result.vectors.shape == (2, 2)


def test_empty_matrix():
    values, vectors = eigs([])
    assert values == [] and vectors == []
    values, vectors = eigs(np.empty((0, 0)))
    assert values.shape == (0,) and vectors.shape == (0, 0)


def test_precision_override():
    A = random_symmetric(4, seed=11)
    ops = JacobiOperations(precision=1e-2)
    coarse = ops.eigs(A)
    fine = ops.eigs(A, precision=1e-14)
    assert np.allclose(fine.values, eigh(A, eigvals_only=True), atol=1e-12)
    assert np.all(np.diff(coarse.values) >= 0)


##########################################################################################
# Decimal and Fraction input
##########################################################################################


def test_decimal_two_by_two():
    A = [[Decimal("5"), Decimal("2.3")], [Decimal("2.3"), Decimal("1")]]
    ops = JacobiOperations(precision=1e-40, decimal_precision=50)
    values, vectors = ops.eigs(A)
    assert all(isinstance(v, Decimal) for v in values)
    assert all(isinstance(v, Decimal) for row in vectors for v in row)
    tol = Decimal("1e-20")
    assert abs(values[0] + values[1] - Decimal(6)) < tol
    assert abs(values[0] * values[1] - Decimal("0.71")) < tol
    check_decomposition([[5, 2.3], [2.3, 1]], values, vectors, atol=1e-12)


def test_decimal_uses_caller_context():
    A = [[Decimal(2), Decimal(1)], [Decimal(1), Decimal(2)]]
    with localcontext() as ctx:
        ctx.prec = 40
        values, _ = JacobiOperations(precision=1e-30).eigs(A)
    # 1 and 3 to roughly 40 significant digits
    assert abs(values[0] - Decimal(1)) < Decimal("1e-30")
    assert abs(values[1] - Decimal(3)) < Decimal("1e-30")
    assert len(values[1].as_tuple().digits) > 28


def test_decimal_integers_join_family():
    A = [[Decimal("1.5"), 0], [0, 2]]
    values, vectors = eigs(A)
    assert values == [Decimal("1.5"), Decimal(2)]
    assert all(isinstance(v, Decimal) for row in vectors for v in row)


def test_numpy_integers_join_decimal_and_fraction():
    A = [[Decimal("1.5"), np.int64(1)], [np.int64(1), Decimal("1.5")]]
    values, vectors = eigs(A)
    assert all(isinstance(v, Decimal) for v in values)
    assert abs(values[0] - Decimal("0.5")) < Decimal("1e-20")
    assert abs(values[1] - Decimal("2.5")) < Decimal("1e-20")

    B = [[Fraction(1, 2), np.int32(0)], [np.int32(0), np.int64(2)]]
    values, vectors = eigs(B)
    assert values == [Fraction(1, 2), Fraction(2)]
    assert all(isinstance(v, Fraction) for row in vectors for v in row)


def test_decimal_ndarray_returns_object_array():
    A = np.array([[Decimal(4), Decimal(1)], [Decimal(1), Decimal(4)]], dtype=object)
    values, vectors = eigs(A)
    assert values.dtype == object and vectors.dtype == object
    assert abs(values[0] - 3) < Decimal("1e-20") and abs(values[1] - 5) < Decimal("1e-20")


def test_fraction_matrix():
    A = [[Fraction(2), Fraction(1, 3), Fraction(0)],
         [Fraction(1, 3), Fraction(3), Fraction(1, 2)],
         [Fraction(0), Fraction(1, 2), Fraction(1)]]
    values, vectors = eigs(A)
    assert all(isinstance(v, Fraction) for v in values)
    assert all(isinstance(v, Fraction) for row in vectors for v in row)
    A_float = np.array(A, dtype=float)
    assert np.allclose(np.array(values, dtype=float), eigh(A_float, eigvals_only=True), atol=1e-9)
    check_decomposition(A_float, values, vectors)


def test_fraction_ones_2x2():
    values, vectors = eigs([[Fraction(1), Fraction(1)], [Fraction(1), Fraction(1)]])
    assert abs(float(values[0])) < 1e-12
    assert abs(float(values[1]) - 2.0) < 1e-12


##########################################################################################
# Errors
##########################################################################################


def test_only_square_matrices():
    with pytest.raises(ShapeError, match="Matrix must be square"):
        eigs([[1, 2, 3], [4, 5, 6]])
    with pytest.raises(ShapeError, match="Matrix must be square"):
        eigs(np.array([[1, 2, 3], [4, 5, 6]]))
    with pytest.raises(ShapeError, match="Dimension mismatch"):
        eigs([[1, 2], [4, 5, 6]])
    with pytest.raises(ShapeError, match="Matrix must be square"):
        eigs([4, 5, 6])
    with pytest.raises(ShapeError, match=r"Matrix must be square \(size: \[2, 2, 2\]\)"):
        eigs([[[1, 0], [0, 1]], [[1, 0], [0, 1]]])
    with pytest.raises(ShapeError, match="Dimension mismatch"):
        eigs([[[1, 0], [0, 1]], [[1, 0], [0, 1, 2]]])
    with pytest.raises(TypeError, match="Unexpected type of argument"):
        eigs(1.0)
    with pytest.raises(TypeError, match="Unexpected type of argument"):
        eigs("random")


@pytest.mark.parametrize("A", [
    [[1, 2], [3, 4]],
    np.array([[1.0, 2.0], [3.0, 4.0]]),
    [[Decimal(1), Decimal(2)], [Decimal(3), Decimal(4)]],
    [[Fraction(1), Fraction(1, 2)], [Fraction(1, 3), Fraction(1)]],
])
def test_not_symmetric(A):
    with pytest.raises(TypeError, match="not symmetric"):
        eigs(A)


def test_not_symmetric_generic_float_path():
    with pytest.raises(TypeError, match="not symmetric"):
        eigs([[1.0, 2.0], [3.0, 4.0]], use_numba=False)


@pytest.mark.parametrize("use_numba", [True, False])
def test_not_symmetric_large_integers(use_numba):
    # 2**53 + 1 and 2**53 are the same float64
    with pytest.raises(TypeError, match="not symmetric"):
        eigs([[1, 2 ** 53 + 1], [2 ** 53, 1]], use_numba=use_numba)
    with pytest.raises(TypeError, match="not symmetric"):
        eigs(np.array([[1, 2 ** 53 + 1], [2 ** 53, 1]], dtype=np.int64), use_numba=use_numba)


@pytest.mark.parametrize("A", [
    [[Decimal(1), Fraction(1)], [Fraction(1), Decimal(1)]],
    [[1.5, Decimal(1)], [Decimal(1), 1.5]],
    [[Fraction(1, 2), 0.25], [0.25, Fraction(1, 2)]],
])
def test_mixed_types(A):
    with pytest.raises(TypeError, match="Mixed element types"):
        eigs(A)


@pytest.mark.parametrize("A", [
    [[True, False], [False, True]],
    [[1j, 0], [0, 1j]],
    [["a", "b"], ["b", "a"]],
    np.array([[1 + 0j, 0], [0, 1]]),
])
def test_unsupported_types(A):
    with pytest.raises(TypeError, match="Unsupported element type"):
        eigs(A)


@pytest.mark.parametrize("use_numba", [True, False])
def test_max_iterations(use_numba):
    A = random_symmetric(4, seed=5)
    with pytest.raises(ConvergenceError) as excinfo:
        JacobiOperations(use_numba=use_numba, max_iterations=1).eigs(A)
    assert excinfo.value.rotations == 1
    # enough rotations converges as usual
    values, _ = JacobiOperations(use_numba=use_numba, max_iterations=1000).eigs(A)
    assert np.allclose(values, eigh(A, eigvals_only=True), atol=1e-9)


def test_max_iterations_zero_on_diagonal():
    values, _ = JacobiOperations(max_iterations=0).eigs(np.diag([2.0, 1.0]))
    assert np.array_equal(values, [1.0, 2.0])


def test_invalid_configuration():
    with pytest.raises(ValueError):
        JacobiOperations(precision=0.0)
    with pytest.raises(ValueError):
        JacobiOperations(max_iterations=-1)
    with pytest.raises(ValueError):
        JacobiOperations(decimal_precision=0)
    with pytest.raises(ValueError):
        JacobiOperations(n_jobs=0)
    with pytest.raises(ValueError):
        JacobiOperations().eigs(np.eye(2), precision=-1e-3)


##########################################################################################
# Fields and batches
##########################################################################################


@pytest.mark.parametrize("use_numba", [True, False])
def test_field(use_numba):
    rng = np.random.default_rng(7)
    field = rng.standard_normal((3, 3, 4, 5))
    field = 0.5 * (field + np.swapaxes(field, 0, 1))
    eigenvalues, eigenvectors = JacobiOperations(use_numba=use_numba).eigs_field(field)
    assert eigenvalues.shape == (3, 4, 5)
    assert eigenvectors.shape == (3, 3, 4, 5)
    for a in range(4):
        for b in range(5):
            A = field[:, :, a, b]
            lam = eigenvalues[:, a, b]
            V = eigenvectors[:, :, a, b]
            assert np.allclose(lam, eigh(A, eigvals_only=True), atol=1e-9)
            assert np.allclose(A @ V, V * lam, atol=1e-9)


@pytest.mark.parametrize("use_numba", [True, False])
def test_empty_field(use_numba):
    ops = JacobiOperations(use_numba=use_numba)
    eigenvalues, eigenvectors = ops.eigs_field(np.zeros((2, 2, 0)))
    assert eigenvalues.shape == (2, 0) and eigenvectors.shape == (2, 2, 0)
    eigenvalues, eigenvectors = ops.eigs_field(np.zeros((0, 0, 3)))
    assert eigenvalues.shape == (0, 3) and eigenvectors.shape == (0, 0, 3)


def test_field_errors():
    ops = JacobiOperations()
    with pytest.raises(ShapeError):
        ops.eigs_field(np.zeros((2, 3, 4)))
    with pytest.raises(TypeError, match="not symmetric"):
        ops.eigs_field(np.arange(16.0).reshape((2, 2, 4)))
    rng = np.random.default_rng(1)
    field = rng.standard_normal((4, 4, 3))
    field = field + np.swapaxes(field, 0, 1)
    with pytest.raises(ConvergenceError):
        JacobiOperations(max_iterations=1).eigs_field(field)


def test_batch_mixed_families():
    batch = [
        [[2.0, 1.0], [1.0, 2.0]],
        [[Decimal(2), Decimal(1)], [Decimal(1), Decimal(2)]],
        [[Fraction(2), Fraction(1)], [Fraction(1), Fraction(2)]],
    ]
    results = JacobiOperations().eigs_batch(batch)
    assert len(results) == 3
    assert isinstance(results[0].values[0], float)
    assert isinstance(results[1].values[0], Decimal)
    assert isinstance(results[2].values[0], Fraction)
    for result in results:
        assert np.allclose(np.array(result.values, dtype=float), [1.0, 3.0], atol=1e-12)


def test_batch_parallel_matches_sequential():
    batch = [random_symmetric(4, seed=s) for s in range(4)]
    sequential = JacobiOperations(n_jobs=1).eigs_batch(batch)
    parallel = JacobiOperations(n_jobs=2).eigs_batch(batch)
    for a, b in zip(sequential, parallel):
        assert np.allclose(a.values, b.values, atol=1e-12)
