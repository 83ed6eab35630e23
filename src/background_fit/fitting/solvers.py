import numpy as np
from loguru import logger
from numpy.typing import NDArray
from scipy.linalg import LinAlgError, qr, solve_triangular

from background_fit.container_models.base import Coefficients, DesignMatrix
from background_fit.container_models.protocols import LeastSquaresSolver
from background_fit.exceptions import SolverFailureError
from background_fit.fitting.data_types import LeastSquaresMethod


def _check_system(design_matrix: DesignMatrix, values: NDArray[np.float64]) -> None:
    if design_matrix.ndim != 2 or values.shape != (design_matrix.shape[0],):
        raise SolverFailureError(
            f"Design matrix of shape {design_matrix.shape} does not match "
            f"{values.shape} observed values"
        )
    if not (np.all(np.isfinite(design_matrix)) and np.all(np.isfinite(values))):
        raise SolverFailureError("Least-squares system contains non-finite values")


def solve_qr(design_matrix: DesignMatrix, values: NDArray[np.float64]) -> Coefficients:
    """
    Solve the least-squares problem `min ||A @ theta - b||` with a QR decomposition.

    The design matrix is factored as `A = Q @ R` and the coefficients follow from the triangular
    system `R @ theta = Q.T @ b`; the normal equations `A.T @ A` are never formed.

    :param design_matrix: The design matrix A, shape (n_samples, n_coefficients).
    :param values: The observed values b, shape (n_samples,).
    :returns: Array of polynomial coefficients.
    :raises SolverFailureError: If the decomposition fails or the design matrix is rank-deficient.
    """
    _check_system(design_matrix, values)
    n_samples, n_coefficients = design_matrix.shape
    try:
        q, r = qr(design_matrix, mode="economic")
    except (LinAlgError, ValueError, MemoryError) as err:
        raise SolverFailureError(f"QR decomposition failed: {err}") from err

    diagonal = np.abs(np.diag(r))
    tolerance = np.finfo(np.float64).eps * max(n_samples, n_coefficients)
    if diagonal.size == 0 or np.any(diagonal <= tolerance * diagonal.max()):
        raise SolverFailureError(
            "Design matrix is rank-deficient, the background samples do not determine "
            f"all {n_coefficients} coefficients"
        )
    return solve_triangular(r, q.T @ values, lower=False)


def solve_svd(design_matrix: DesignMatrix, values: NDArray[np.float64]) -> Coefficients:
    """
    Solve the least-squares problem with an SVD, returning the minimum-norm solution.

    Unlike `solve_qr`, a rank-deficient design matrix is accepted.

    :param design_matrix: The design matrix A, shape (n_samples, n_coefficients).
    :param values: The observed values b, shape (n_samples,).
    :returns: Array of polynomial coefficients.
    :raises SolverFailureError: If the SVD does not converge.
    """
    _check_system(design_matrix, values)
    try:
        coefficients, _, rank, _ = np.linalg.lstsq(design_matrix, values, rcond=None)
    except (np.linalg.LinAlgError, MemoryError) as err:
        raise SolverFailureError(f"SVD least-squares solve failed: {err}") from err

    if rank < design_matrix.shape[1]:
        logger.warning(
            f"Design matrix has rank {rank} for {design_matrix.shape[1]} coefficients, "
            "returning the minimum-norm solution"
        )
    return coefficients


SOLVERS: dict[LeastSquaresMethod, LeastSquaresSolver] = {
    LeastSquaresMethod.QR: solve_qr,
    LeastSquaresMethod.SVD: solve_svd,
}


def get_solver(method: LeastSquaresMethod | str) -> LeastSquaresSolver:
    """Return the solver function for a least-squares method (`"qr"` or `"svd"`)."""
    return SOLVERS[LeastSquaresMethod(method)]
