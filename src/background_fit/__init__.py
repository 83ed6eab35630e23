"""Polynomial background estimation for masked 2D images."""

from background_fit.exceptions import (
    BackgroundFitError,
    DimensionMismatchError,
    EvaluateBeforeFitError,
    SolverFailureError,
    UnderdeterminedSystemError,
    UnsupportedInputKindError,
)
from background_fit.fitting import (
    BackgroundCorrection,
    FitParameters,
    LeastSquaresMethod,
    PolynomialBackgroundFitter,
    fit_background,
    process,
    remove_background,
)
from background_fit.settings import BackgroundFitSettings, get_settings

__all__ = (
    "BackgroundCorrection",
    "BackgroundFitError",
    "BackgroundFitSettings",
    "DimensionMismatchError",
    "EvaluateBeforeFitError",
    "FitParameters",
    "LeastSquaresMethod",
    "PolynomialBackgroundFitter",
    "SolverFailureError",
    "UnderdeterminedSystemError",
    "UnsupportedInputKindError",
    "fit_background",
    "get_settings",
    "process",
    "remove_background",
)
