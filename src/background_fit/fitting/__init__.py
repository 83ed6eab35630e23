from background_fit.fitting.basis import (
    count_coefficients,
    generate_polynomial_exponents,
)
from background_fit.fitting.data_types import (
    BackgroundCorrection,
    FitParameters,
    LeastSquaresMethod,
    MonomialTables,
    SampleSet,
)
from background_fit.fitting.design import (
    build_design_matrix,
    count_samples,
    select_samples,
)
from background_fit.fitting.grid import compute_monomial_tables, normalize_position
from background_fit.fitting.solvers import get_solver, solve_qr, solve_svd
from background_fit.fitting.fitter import PolynomialBackgroundFitter
from background_fit.fitting.core import fit_background, process, remove_background

__all__ = (
    "BackgroundCorrection",
    "FitParameters",
    "LeastSquaresMethod",
    "MonomialTables",
    "PolynomialBackgroundFitter",
    "SampleSet",
    "build_design_matrix",
    "compute_monomial_tables",
    "count_coefficients",
    "count_samples",
    "fit_background",
    "generate_polynomial_exponents",
    "get_solver",
    "normalize_position",
    "process",
    "remove_background",
    "select_samples",
    "solve_qr",
    "solve_svd",
)
