from enum import StrEnum
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field

from background_fit.container_models.base import (
    BackgroundSurface,
    Coefficients,
    Exponent,
    FloatArray1D,
    MonomialTable,
)


class LeastSquaresMethod(StrEnum):
    """Decomposition used to solve the least-squares system."""

    QR = "qr"  # Householder QR, rejects rank-deficient systems
    SVD = "svd"  # Minimum-norm solution, tolerates rank deficiency


class FitParameters(BaseModel):
    """
    Parameters of a polynomial background fit.

    :param max_order: Maximum total degree of the polynomial (x^a * y^b with a + b <= max_order).
    :param sampling_step: Grid stride used to pick the fitted pixels; 1 uses every background pixel.
    :param method: Least-squares decomposition used to solve for the coefficients.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_order: int = Field(default=2, ge=0, description="maximum total polynomial degree")
    sampling_step: int = Field(default=1, ge=1, description="stride of the sampling grid")
    method: LeastSquaresMethod = LeastSquaresMethod.QR


class MonomialTables(NamedTuple):
    """Per-axis monomial values, `x[pos, c] = normalize_position(pos, width) ** exponents[c].x`."""

    x: MonomialTable
    y: MonomialTable


class SampleSet(NamedTuple):
    """Pixel positions (row-major order) and observed values of the fitted samples."""

    xs: NDArray[np.intp]
    ys: NDArray[np.intp]
    values: FloatArray1D

    @property
    def size(self) -> int:
        return self.values.size


class BackgroundCorrection(BaseModel, arbitrary_types_allowed=True):
    """
    Result of removing a fitted background from an image.

    :param corrected: 2D array with the image data minus the fitted background
    :param background: 2D array of the fitted background (same shape as input)
    :param coefficients: Fitted polynomial coefficients, ordered as `exponents`
    :param exponents: (x, y) powers of the monomial belonging to each coefficient
    :param n_samples: Number of background samples used in the fit
    :param residual_rms: Root mean square of the corrected image over the background pixels
    """

    corrected: BackgroundSurface
    background: BackgroundSurface
    coefficients: Coefficients
    exponents: tuple[Exponent, ...]
    n_samples: int
    residual_rms: float
