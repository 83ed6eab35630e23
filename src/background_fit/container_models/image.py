"""Image container architecture.

This module defines the data container used to pass images through
background-fitting pipelines.

Architecture
------------
::

    +--------------------------------------+
    |           ImageContainer             |
    |--------------------------------------|
    | data     : IntensityImage            |
    | metadata : MetaData                  |
    | height   : int (rows)                |
    | width    : int (columns)             |
    +--------------------------------------+
    | with_suffix(suffix) -> MetaData      |
    +--------------------------------------+

- :class:`ImageContainer` holds a single-channel 2D image of integers or floats.
- Arrays are indexed ``[y, x]``, so the shape is ``(height, width)``.
- Compared by data equality (NaN-aware).
"""

from __future__ import annotations

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from background_fit.container_models.base import (
    IntensityImage,
    Pair,
    Scale,
)


class MetaData(BaseModel):
    scale: Scale = Pair(1.0, 1.0)
    name: str | None = None

    model_config = ConfigDict(
        validate_assignment=True,
        extra="allow",
    )

    def with_suffix(self, suffix: str) -> MetaData:
        """Return a copy of the metadata with `suffix` appended to the image name."""
        name = f"{self.name}{suffix}" if self.name else None
        return self.model_copy(update={"name": name})


class ImageContainer(BaseModel):
    data: IntensityImage
    metadata: MetaData = Field(default_factory=MetaData)

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra="forbid",
        revalidate_instances="always",
    )

    @property
    def height(self) -> int:
        """Return the height (number of rows) of the image."""
        return self.data.shape[0]

    @property
    def width(self) -> int:
        """Return the width (number of columns) of the image."""
        return self.data.shape[1]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageContainer):
            return NotImplemented
        return np.array_equal(self.data, other.data, equal_nan=True)
