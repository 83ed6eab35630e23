from collections.abc import Sequence

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from background_fit.container_models.base import Exponent, MonomialTable
from background_fit.fitting.data_types import MonomialTables

# Pixel indices [0, size) are mapped onto [-1.5, 1.5) before raising them to powers
NORMALIZED_SPAN = 3.0


def normalize_position(
    index: int | float | NDArray, size: int
) -> float | NDArray[np.float64]:
    """
    Convert a pixel index between 0 and `size` into a position between -1.5 and +1.5.

    Raising pixel coordinates (which can be in the thousands) to high powers quickly loses
    precision; the rescaled positions keep the monomials well-conditioned.

    :param index: Pixel index, or an array of pixel indices.
    :param size: Number of pixels along the axis.
    :returns: The normalized position(s).
    """
    if size <= 0:
        raise ValueError(f"Axis size should be positive, got {size}")
    normalized = (np.asarray(index, dtype=np.float64) / size - 0.5) * NORMALIZED_SPAN
    return float(normalized) if np.ndim(normalized) == 0 else normalized


def compute_monomial_table(size: int, powers: Sequence[int]) -> MonomialTable:
    """
    Raise the normalized positions of one image axis to each of the given powers.

    :param size: Number of pixels along the axis.
    :param powers: The power of this axis' coordinate for each polynomial coefficient.
    :returns: Array of shape (size, len(powers)).
    """
    positions = normalize_position(np.arange(size), size)
    return positions[:, np.newaxis] ** np.asarray(powers, dtype=np.float64)


def compute_monomial_tables(
    width: int, height: int, exponents: Sequence[Exponent]
) -> MonomialTables:
    """
    Pre-compute the monomials of both image axes for every pixel column and row.

    The value of coefficient `c` at pixel (x, y) is `tables.x[x, c] * tables.y[y, c]`.

    :param width: Number of pixel columns.
    :param height: Number of pixel rows.
    :param exponents: The (x, y) exponents of the polynomial basis.
    :returns: An instance of `MonomialTables` with shapes (width, n) and (height, n).
    """
    logger.debug(
        f"Computing monomial tables for a {width}x{height} grid and {len(exponents)} terms"
    )
    return MonomialTables(
        x=compute_monomial_table(width, [exponent.x for exponent in exponents]),
        y=compute_monomial_table(height, [exponent.y for exponent in exponents]),
    )
