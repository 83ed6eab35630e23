"""
Data container models for background-fitting pipelines.

This module provides Pydantic-based data models and annotated array types that are
propagated through the fitting functions and railway-style image mutations. They
validate shapes and element kinds at the boundary so the numerical code can assume
2D real-valued images and 2D boolean masks.
"""

from .base import Pair
from .image import ImageContainer, MetaData


__all__ = ["ImageContainer", "MetaData", "Pair"]
