import numpy as np
from numpy.typing import ArrayLike

from background_fit.container_models.base import (
    BackgroundMask,
    IntensityImage,
    is_real_scalar_dtype,
)
from background_fit.exceptions import DimensionMismatchError, UnsupportedInputKindError


def validate_inputs(
    image: ArrayLike, mask: ArrayLike
) -> tuple[IntensityImage, BackgroundMask]:
    """
    Check that an image and a background mask can be used for a fit.

    Dimensions are checked before element kinds, so a 3D (multi-channel) image is reported as a
    dimension problem.

    :param image: 2D array of real (integer or floating point) intensities.
    :param mask: 2D boolean array of the same shape, `True` for background pixels.
    :returns: The image and mask as numpy arrays.
    :raises DimensionMismatchError: If either array is not 2D or their shapes differ.
    :raises UnsupportedInputKindError: If the image is not real-valued or the mask is not boolean.
    """
    image, mask = np.asarray(image), np.asarray(mask)
    if image.ndim != 2 or mask.ndim != 2:
        raise DimensionMismatchError(
            f"Requires 2D image and mask, got {image.ndim}D image and {mask.ndim}D mask"
        )
    if image.shape != mask.shape:
        raise DimensionMismatchError(
            f"Mask shape: {mask.shape} does not match image shape: {image.shape}"
        )
    if not is_real_scalar_dtype(image.dtype):
        raise UnsupportedInputKindError(
            f"Image must hold real scalar values, got dtype {image.dtype}"
        )
    if mask.dtype != np.bool_:
        raise UnsupportedInputKindError(
            f"Mask must be a boolean array, got dtype {mask.dtype}"
        )
    return image, mask
