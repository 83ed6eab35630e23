from numbers import Integral

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from background_fit.container_models.base import (
    BackgroundMask,
    DesignMatrix,
    IntensityImage,
)
from background_fit.fitting.data_types import MonomialTables, SampleSet


def validate_sampling_step(sampling_step: int) -> None:
    if isinstance(sampling_step, bool) or not isinstance(sampling_step, Integral):
        raise ValueError(f"Sampling step should be an integer, got {sampling_step!r}")
    if sampling_step < 1:
        raise ValueError(f"Sampling step should be at least 1, got {sampling_step}")


def _sampled_mask(mask: BackgroundMask, sampling_step: int) -> BackgroundMask:
    validate_sampling_step(sampling_step)
    step = int(sampling_step)
    return mask[::step, ::step]


def count_samples(mask: BackgroundMask, sampling_step: int = 1) -> int:
    """
    Count the background pixels on the sampling grid.

    The grid starts at pixel (0, 0) and keeps every `sampling_step`-th column and row.

    :param mask: 2D boolean array, `True` for background pixels.
    :param sampling_step: Stride of the sampling grid.
    :returns: The number of grid positions where the mask is `True`.
    """
    return int(np.count_nonzero(_sampled_mask(mask, sampling_step)))


def select_samples(
    image: IntensityImage, mask: BackgroundMask, sampling_step: int = 1
) -> SampleSet:
    """
    Collect the background samples to fit.

    Samples are ordered row by row (y outer, x inner). Pixels whose value is not finite are left
    out, since they do not constrain the fit.

    :param image: 2D array with the image intensities.
    :param mask: 2D boolean array of the same shape, `True` for background pixels.
    :param sampling_step: Stride of the sampling grid.
    :returns: An instance of `SampleSet` with the pixel positions and their values as floats.
    """
    step = int(sampling_step)
    sampled_mask = _sampled_mask(mask, sampling_step)
    sampled_values = np.asarray(image[::step, ::step], dtype=np.float64)

    finite = np.isfinite(sampled_values)
    if not np.all(finite[sampled_mask]):
        logger.warning(
            f"Ignoring {np.count_nonzero(sampled_mask & ~finite)} background sample(s) "
            "without a finite value"
        )
        sampled_mask = sampled_mask & finite

    rows, columns = np.nonzero(sampled_mask)
    return SampleSet(
        xs=columns * step,
        ys=rows * step,
        values=sampled_values[rows, columns],
    )


def build_design_matrix(
    tables: MonomialTables, xs: NDArray[np.intp], ys: NDArray[np.intp]
) -> DesignMatrix:
    """
    Construct the least-squares design matrix for the given pixel positions.

    Row `i` holds the value of every monomial at pixel (xs[i], ys[i]).

    :param tables: Monomial tables computed for the image the positions belong to.
    :param xs: Column indices of the samples.
    :param ys: Row indices of the samples.
    :returns: Array of shape (n_samples, n_coefficients).
    """
    return tables.x[xs] * tables.y[ys]
