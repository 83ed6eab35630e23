"""
Image Mutations Module
======================

This package contains the available `ImageMutation` implementations.

Each mutation represents a single, well-defined transformation that can
be applied to an `ImageContainer`. Mutations return `returns` containers and
can be chained together in a pipeline (e.g. `returns.pipeline.flow` with `bind`).
"""

from .background import FitBackground, SubtractBackground


__all__ = ["FitBackground", "SubtractBackground"]
