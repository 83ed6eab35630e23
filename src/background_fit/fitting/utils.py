import numpy as np
from typing import Any
from numpy.typing import DTypeLike, NDArray

from background_fit.container_models.base import BackgroundSurface


def compute_root_mean_square(data: NDArray[Any]) -> float:
    """Compute the root-mean-square from a data array and return as Python float."""
    return float(np.sqrt(np.nanmean(np.square(data, dtype=np.float64))))


def cast_to_dtype(surface: BackgroundSurface, dtype: DTypeLike) -> NDArray:
    """
    Store a float64 surface with the element type of the input image.

    Floating point types are cast directly. Integer types are rounded to the nearest integer and
    clipped to the range of the type.
    """
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.integer):
        limits = np.iinfo(dtype)
        return np.clip(np.rint(surface), limits.min, limits.max).astype(dtype)
    return surface.astype(dtype, copy=False)
