class BackgroundFitError(Exception):
    """Base class for all errors raised while fitting a background surface."""

    def __init__(self, message: str):
        super().__init__(message)


class DimensionMismatchError(BackgroundFitError, ValueError):
    """Raised when the image or mask is not 2D, or when their shapes differ."""


class UnsupportedInputKindError(BackgroundFitError, TypeError):
    """Raised when the image is not scalar-valued or the mask is not boolean."""


class UnderdeterminedSystemError(BackgroundFitError, ValueError):
    """Raised when there are fewer background samples than polynomial coefficients."""

    def __init__(self, n_samples: int, n_coefficients: int):
        self.n_samples = n_samples
        self.n_coefficients = n_coefficients
        super().__init__(
            f"Only {n_samples} background sample(s) available to fit {n_coefficients} "
            "coefficient(s). Lower the polynomial order, enlarge the background region "
            "or decrease the sampling step."
        )


class SolverFailureError(BackgroundFitError, RuntimeError):
    """Raised when the least-squares decomposition cannot produce a solution."""


class EvaluateBeforeFitError(BackgroundFitError, RuntimeError):
    """Raised when a surface is evaluated before a successful fit."""

    def __init__(self, message: str = "Cannot evaluate the background before fitting it"):
        super().__init__(message)
