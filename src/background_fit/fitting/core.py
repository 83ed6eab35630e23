import numpy as np
from numpy.typing import ArrayLike, NDArray

from background_fit.fitting.data_types import (
    BackgroundCorrection,
    FitParameters,
    LeastSquaresMethod,
)
from background_fit.fitting.fitter import PolynomialBackgroundFitter
from background_fit.fitting.utils import compute_root_mean_square
from background_fit.fitting.validation import validate_inputs
from background_fit.settings import get_settings


def _resolve_parameters(
    max_order: int | None,
    sampling_step: int | None,
    method: LeastSquaresMethod | str | None,
) -> FitParameters:
    defaults = get_settings()
    return FitParameters(
        max_order=defaults.max_order if max_order is None else max_order,
        sampling_step=defaults.sampling_step if sampling_step is None else sampling_step,
        method=defaults.method if method is None else method,
    )


def process(
    image: ArrayLike,
    mask: ArrayLike,
    max_order: int,
    sampling_step: int = 1,
    method: LeastSquaresMethod | str = LeastSquaresMethod.QR,
) -> NDArray:
    """
    Estimate the background of an image from its background pixels.

    Equivalent to fitting a `PolynomialBackgroundFitter` of order `max_order` on the image and
    evaluating it at the image size.

    :param image: 2D array of real intensities, indexed [y, x].
    :param mask: 2D boolean array of the same shape, `True` for background pixels.
    :param max_order: Maximum total degree of the polynomial.
    :param sampling_step: Stride of the grid of fitted pixels.
    :param method: Least-squares decomposition used to solve the fit.
    :returns: The background estimate with the shape and element type of `image`.
    """
    image, mask = validate_inputs(image, mask)
    fitter = PolynomialBackgroundFitter(
        max_order=max_order, sampling_step=sampling_step, method=method
    )
    return fitter.process(image, mask)


def fit_background(
    image: ArrayLike,
    mask: ArrayLike,
    max_order: int | None = None,
    sampling_step: int | None = None,
    *,
    method: LeastSquaresMethod | str | None = None,
    invert_mask: bool = False,
) -> NDArray:
    """
    Estimate the background of an image, using the configured defaults for missing parameters.

    :param image: 2D array of real intensities, indexed [y, x].
    :param mask: 2D boolean array of the same shape.
    :param max_order: Maximum total degree of the polynomial; defaults to the settings.
    :param sampling_step: Stride of the grid of fitted pixels; defaults to the settings.
    :param method: Least-squares decomposition; defaults to the settings.
    :param invert_mask: If `True`, `mask` marks the foreground and its complement is fitted.
    :returns: The background estimate with the shape and element type of `image`.
    """
    parameters = _resolve_parameters(max_order, sampling_step, method)
    image, mask = validate_inputs(image, mask)
    if invert_mask:
        mask = ~mask
    return process(
        image,
        mask,
        max_order=parameters.max_order,
        sampling_step=parameters.sampling_step,
        method=parameters.method,
    )


def remove_background(
    image: ArrayLike,
    mask: ArrayLike,
    max_order: int | None = None,
    sampling_step: int | None = None,
    *,
    method: LeastSquaresMethod | str | None = None,
    invert_mask: bool = False,
) -> BackgroundCorrection:
    """
    Fit the background of an image and subtract it.

    This computation effectively acts as a high-pass filter on the image data.

    :param image: 2D array of real intensities, indexed [y, x].
    :param mask: 2D boolean array of the same shape.
    :param max_order: Maximum total degree of the polynomial; defaults to the settings.
    :param sampling_step: Stride of the grid of fitted pixels; defaults to the settings.
    :param method: Least-squares decomposition; defaults to the settings.
    :param invert_mask: If `True`, `mask` marks the foreground and its complement is fitted.
    :returns: An instance of `BackgroundCorrection` with the corrected image, the fitted
        background and fit statistics.
    """
    parameters = _resolve_parameters(max_order, sampling_step, method)
    image, mask = validate_inputs(image, mask)
    if invert_mask:
        mask = ~mask

    fitter = PolynomialBackgroundFitter(
        max_order=parameters.max_order,
        sampling_step=parameters.sampling_step,
        method=parameters.method,
    )
    fitter.fit(image, mask)
    height, width = image.shape
    background = fitter.evaluate(width, height)
    corrected = np.asarray(image, dtype=np.float64) - background

    return BackgroundCorrection(
        corrected=corrected,
        background=background,
        coefficients=fitter.coefficients.copy(),
        exponents=fitter.exponents,
        n_samples=fitter.n_samples,
        residual_rms=compute_root_mean_square(corrected[mask]),
    )
