"""Default fit configuration."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from background_fit.fitting.data_types import FitParameters, LeastSquaresMethod


class BackgroundFitSettings(BaseSettings):
    """
    Default parameters for background fits.

    Settings can be configured via:

    1. Environment variables (e.g., BACKGROUND_FIT_MAX_ORDER=3)
    2. .env file in the working directory
    3. Default values defined below

    All settings use the BACKGROUND_FIT_ prefix for environment variables.

    .. rubric:: Examples

    Fit cubic backgrounds on every other pixel::

        export BACKGROUND_FIT_MAX_ORDER=3
        export BACKGROUND_FIT_SAMPLING_STEP=2

    Use the SVD solver for masks that may leave the fit rank-deficient::

        BACKGROUND_FIT_METHOD=svd
    """

    max_order: Annotated[
        int,
        Field(default=2, ge=0, description="Maximum total degree of the polynomial"),
    ]
    sampling_step: Annotated[
        int,
        Field(default=1, ge=1, description="Stride of the grid of fitted pixels"),
    ]
    method: Annotated[
        LeastSquaresMethod,
        Field(
            default=LeastSquaresMethod.QR,
            description="Least-squares decomposition used to solve the fit",
        ),
    ]

    model_config = SettingsConfigDict(
        env_prefix="BACKGROUND_FIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @property
    def fit_parameters(self) -> FitParameters:
        return FitParameters(
            max_order=self.max_order,
            sampling_step=self.sampling_step,
            method=self.method,
        )

    def log_config(self) -> None:
        """Log the active fit configuration."""
        logger.info(
            f"Background fit configuration: max order {self.max_order}, "
            f"sampling step {self.sampling_step}, solver {self.method.value}"
        )


@lru_cache
def get_settings() -> BackgroundFitSettings:
    """
    Get cached settings instance.

    :return: The background fit settings, read once from the environment.
    """
    return BackgroundFitSettings()
