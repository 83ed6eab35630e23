from numbers import Integral

import numpy as np
from loguru import logger
from numpy.typing import ArrayLike, NDArray

from background_fit.container_models.base import (
    BackgroundSurface,
    Coefficients,
    Exponent,
)
from background_fit.exceptions import (
    EvaluateBeforeFitError,
    UnderdeterminedSystemError,
)
from background_fit.fitting.basis import generate_polynomial_exponents
from background_fit.fitting.data_types import LeastSquaresMethod, MonomialTables
from background_fit.fitting.design import (
    validate_sampling_step,
    build_design_matrix,
    select_samples,
)
from background_fit.fitting.grid import compute_monomial_tables
from background_fit.fitting.solvers import get_solver
from background_fit.fitting.utils import cast_to_dtype, compute_root_mean_square
from background_fit.fitting.validation import validate_inputs


class PolynomialBackgroundFitter:
    """
    Fit a polynomial surface to the background of an image.

    The surface is a sum of monomials x^a * y^b with a + b <= `max_order`, evaluated on pixel
    coordinates rescaled to [-1.5, 1.5]. Coefficients are found by least squares on the
    background pixels (optionally on a strided grid) and the surface can then be evaluated on
    every pixel, including the foreground.

    An instance keeps its coefficients and monomial tables between calls and must not be shared
    between threads; use one fitter per concurrent fit.

    Example::

        fitter = PolynomialBackgroundFitter(max_order=2, sampling_step=4)
        background = fitter.process(image, mask)
    """

    def __init__(
        self,
        max_order: int = 2,
        sampling_step: int = 1,
        method: LeastSquaresMethod | str = LeastSquaresMethod.QR,
    ) -> None:
        """
        :param max_order: Maximum total degree of the polynomial.
        :param sampling_step: Default stride of the grid of fitted pixels.
        :param method: Least-squares decomposition used to solve the fit.
        """
        self.max_order = max_order
        self.sampling_step = sampling_step
        self.method = LeastSquaresMethod(method)
        self.tables: MonomialTables | None = None
        self.n_samples = 0
        self.residual_rms: float | None = None

    @property
    def max_order(self) -> int:
        return self._max_order

    @max_order.setter
    def max_order(self, max_order: int) -> None:
        """Rebuild the basis for a new order; any previous fit is discarded."""
        self._exponents = generate_polynomial_exponents(max_order)
        self._max_order = int(max_order)
        self._coefficients = np.zeros(len(self._exponents), dtype=np.float64)
        self._is_fitted = False

    @property
    def sampling_step(self) -> int:
        return self._sampling_step

    @sampling_step.setter
    def sampling_step(self, sampling_step: int) -> None:
        validate_sampling_step(sampling_step)
        self._sampling_step = int(sampling_step)

    @property
    def exponents(self) -> tuple[Exponent, ...]:
        """The (x, y) powers of the monomial belonging to each coefficient."""
        return self._exponents

    @property
    def n_coefficients(self) -> int:
        return len(self._exponents)

    @property
    def coefficients(self) -> Coefficients:
        """A read-only view of the current coefficients (zeros until the first fit)."""
        view = self._coefficients.view()
        view.setflags(write=False)
        return view

    @property
    def is_fitted(self) -> bool:
        return self._is_fitted

    def fit(
        self, image: ArrayLike, mask: ArrayLike, sampling_step: int | None = None
    ) -> Coefficients:
        """
        Estimate the polynomial coefficients from the background pixels of an image.

        :param image: 2D array of real intensities, indexed [y, x].
        :param mask: 2D boolean array of the same shape, `True` for background pixels.
        :param sampling_step: Stride of the sampling grid; defaults to `self.sampling_step`.
        :returns: A copy of the fitted coefficients.
        :raises DimensionMismatchError: If the image and mask are not matching 2D arrays.
        :raises UnsupportedInputKindError: If the image is not real-valued or the mask not boolean.
        :raises UnderdeterminedSystemError: If fewer samples than coefficients remain.
        :raises SolverFailureError: If the least-squares system cannot be solved.
        """
        image, mask = validate_inputs(image, mask)
        if sampling_step is None:
            sampling_step = self.sampling_step
        validate_sampling_step(sampling_step)

        samples = select_samples(image, mask, sampling_step)
        logger.debug(
            f"Fitting {self.n_coefficients} coefficient(s) on {samples.size} sample(s) "
            f"of a {image.shape[1]}x{image.shape[0]} image (step {sampling_step})"
        )
        if samples.size < self.n_coefficients:
            raise UnderdeterminedSystemError(samples.size, self.n_coefficients)

        height, width = image.shape
        self.tables = compute_monomial_tables(width, height, self._exponents)
        design_matrix = build_design_matrix(self.tables, samples.xs, samples.ys)
        coefficients = get_solver(self.method)(design_matrix, samples.values)

        self._coefficients = np.asarray(coefficients, dtype=np.float64)
        self._is_fitted = True
        self.n_samples = samples.size
        self.residual_rms = compute_root_mean_square(
            design_matrix @ self._coefficients - samples.values
        )
        logger.info(
            f"Fitted order {self.max_order} background on {self.n_samples} sample(s), "
            f"residual RMS {self.residual_rms:.6g}"
        )
        return self._coefficients.copy()

    def evaluate(self, width: int, height: int) -> BackgroundSurface:
        """
        Evaluate the fitted polynomial at every pixel of a `width` x `height` image.

        Coordinates are normalized to the requested size, so a fit made at one resolution can be
        evaluated at another.

        :param width: Number of pixel columns of the output.
        :param height: Number of pixel rows of the output.
        :returns: Array of shape (height, width) with the background estimate.
        :raises EvaluateBeforeFitError: If no successful fit has been made.
        """
        if not self._is_fitted:
            raise EvaluateBeforeFitError()
        for size in (width, height):
            if isinstance(size, bool) or not isinstance(size, Integral) or size < 1:
                raise ValueError(
                    f"Output width and height should be positive integers, got {width!r}x{height!r}"
                )

        self.tables = compute_monomial_tables(width, height, self._exponents)
        # surface[y, x] = sum_c coefficients[c] * x_table[x, c] * y_table[y, c]
        return (self.tables.y * self._coefficients) @ self.tables.x.T

    def process(self, image: ArrayLike, mask: ArrayLike) -> NDArray:
        """
        Fit the background of an image and return the estimate on the full image.

        :param image: 2D array of real intensities, indexed [y, x].
        :param mask: 2D boolean array of the same shape, `True` for background pixels.
        :returns: The background estimate with the shape and element type of `image`.
        """
        image, mask = validate_inputs(image, mask)
        self.fit(image, mask, self.sampling_step)
        height, width = image.shape
        return cast_to_dtype(self.evaluate(width, height), image.dtype)
