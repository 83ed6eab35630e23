from __future__ import annotations
from collections.abc import Sequence
from functools import partial
from typing import Annotated, NamedTuple

import numpy as np
from numpy.typing import DTypeLike, NDArray
from pydantic import AfterValidator, BeforeValidator, PlainSerializer


class Pair[T](NamedTuple):
    x: T
    y: T

    @property
    def total(self) -> T:
        """Sum of both components, e.g. the total degree of a monomial exponent."""
        return self.x + self.y


type Exponent = Pair[int]
type Scale = Pair[float]


def serialize_ndarray(array_: NDArray) -> list:
    """Serialize numpy array to a Python list for JSON serialization."""
    return array_.tolist()


def coerce_to_array(
    dtype: DTypeLike | None, value: Sequence | NDArray | None
) -> NDArray | None:
    """
    Coerce input to a numpy array.

    Handles JSON deserialization where Python creates nested lists of ints and floats.
    With `dtype=None` numpy infers the element type, so integer images stay integer images.
    """
    if isinstance(value, Sequence):
        try:
            return np.array(value, dtype=dtype)
        except OverflowError as ofe:
            raise ValueError("Array's value(s) out of range") from ofe

    return value


def validate_shape(n_dims: int, value: NDArray) -> NDArray:
    if (array_dims := len(value.shape)) != n_dims:
        raise ValueError(
            f"Array shape mismatch, expected {n_dims} dimension(s), but got {array_dims}"
        )
    return value


def is_real_scalar_dtype(dtype: DTypeLike) -> bool:
    """Whether `dtype` holds real scalar intensities (integers or floats, not booleans)."""
    dtype = np.dtype(dtype)
    return dtype != np.bool_ and (
        np.issubdtype(dtype, np.integer) or np.issubdtype(dtype, np.floating)
    )


def validate_real_scalar(value: NDArray) -> NDArray:
    if not is_real_scalar_dtype(value.dtype):
        raise ValueError(
            f"Array dtype mismatch, expected real scalar values, but got {value.dtype}"
        )
    return value


def validate_boolean(value: NDArray) -> NDArray:
    if value.dtype != np.bool_:
        raise ValueError(
            f"Array dtype mismatch, expected boolean values, but got {value.dtype}"
        )
    return value


# Tier 1: Base types
type FloatArray = Annotated[
    NDArray[np.floating],
    BeforeValidator(partial(coerce_to_array, np.float64)),
    PlainSerializer(serialize_ndarray),
]
type BoolArray = Annotated[
    NDArray[np.bool_],
    BeforeValidator(partial(coerce_to_array, np.bool_)),
    PlainSerializer(serialize_ndarray),
]
type NumberArray = Annotated[
    NDArray[np.number],
    BeforeValidator(partial(coerce_to_array, None)),
    PlainSerializer(serialize_ndarray),
]

# Tier 2: Shape and data types
type FloatArray1D = Annotated[FloatArray, AfterValidator(partial(validate_shape, 1))]
type FloatArray2D = Annotated[FloatArray, AfterValidator(partial(validate_shape, 2))]
type BoolArray2D = Annotated[
    BoolArray,
    AfterValidator(partial(validate_shape, 2)),
    AfterValidator(validate_boolean),
]
type ScalarArray2D = Annotated[
    NumberArray,
    AfterValidator(partial(validate_shape, 2)),
    AfterValidator(validate_real_scalar),
]

# Tier 3: Semantic context
type Coefficients = FloatArray1D  # Shape: (n_coefficients,)
type DesignMatrix = FloatArray2D  # Shape: (n_samples, n_coefficients)
type MonomialTable = FloatArray2D  # Shape: (axis_size, n_coefficients)
type BackgroundSurface = FloatArray2D  # Shape: (H, W)
type IntensityImage = ScalarArray2D  # Shape: (H, W)
type BackgroundMask = BoolArray2D  # Shape: (H, W), True = background
