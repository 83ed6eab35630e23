"""Background image mutations.

.. seealso::

    :class:`FitBackground`
        Replace an image by the polynomial estimate of its background.
    :class:`SubtractBackground`
        Remove the polynomial background from an image.
"""

from typing import override

import numpy as np
from loguru import logger
from numpy.typing import ArrayLike
from returns.result import Result

from background_fit.container_models.base import BackgroundSurface
from background_fit.container_models.image import ImageContainer
from background_fit.exceptions import DimensionMismatchError
from background_fit.fitting.data_types import FitParameters, LeastSquaresMethod
from background_fit.fitting.fitter import PolynomialBackgroundFitter
from background_fit.mutations.base import ImageMutation
from background_fit.utils.logger import log_railway_function


class _BackgroundMutation(ImageMutation):
    def __init__(
        self,
        mask: ArrayLike,
        max_order: int = 2,
        sampling_step: int = 1,
        method: LeastSquaresMethod | str = LeastSquaresMethod.QR,
        invert_mask: bool = False,
    ) -> None:
        """
        :param mask: 2D boolean array, `True` for background pixels (foreground if `invert_mask`).
        :param max_order: Maximum total degree of the fitted polynomial.
        :param sampling_step: Stride of the grid of fitted pixels.
        :param method: Least-squares decomposition used to solve the fit.
        :param invert_mask: Whether `mask` marks the foreground instead of the background.
        """
        self.mask = np.asarray(mask)
        self.invert_mask = invert_mask
        self.parameters = FitParameters(
            max_order=max_order, sampling_step=sampling_step, method=method
        )

    @property
    def background_mask(self) -> ArrayLike:
        return ~self.mask if self.invert_mask else self.mask

    def _fit_background(self, image: ImageContainer) -> BackgroundSurface:
        if self.mask.shape != image.data.shape:
            raise DimensionMismatchError(
                f"Mask shape: {self.mask.shape} does not match image shape: {image.data.shape}"
            )
        fitter = PolynomialBackgroundFitter(
            max_order=self.parameters.max_order,
            sampling_step=self.parameters.sampling_step,
            method=self.parameters.method,
        )
        fitter.fit(image.data, self.background_mask)
        return fitter.evaluate(image.width, image.height)


class FitBackground(_BackgroundMutation):
    """
    Image mutation that replaces the image data by its fitted polynomial background.

    The resulting image is float64 and its name gets a `-background` suffix.
    """

    @log_railway_function(
        "Failed to fit the image background",
        "Successfully fitted the image background",
    )
    @override
    def __call__(self, image: ImageContainer) -> Result[ImageContainer, Exception]:
        return super().__call__(image)

    @override
    def apply_on_image(self, image: ImageContainer) -> ImageContainer:
        logger.info(
            f"Fitting order {self.parameters.max_order} background to image "
            f"{image.metadata.name or '<unnamed>'}"
        )
        background = self._fit_background(image)
        return ImageContainer(
            data=background, metadata=image.metadata.with_suffix("-background")
        )


class SubtractBackground(_BackgroundMutation):
    """
    Image mutation that subtracts the fitted polynomial background from the image data.

    This computation effectively acts as a high-pass filter on the image data.
    The resulting image is float64 and its name gets a `-corrected` suffix.
    """

    @log_railway_function(
        "Failed to subtract the image background",
        "Successfully subtracted the image background",
    )
    @override
    def __call__(self, image: ImageContainer) -> Result[ImageContainer, Exception]:
        return super().__call__(image)

    @override
    def apply_on_image(self, image: ImageContainer) -> ImageContainer:
        logger.info(
            f"Subtracting order {self.parameters.max_order} background from image "
            f"{image.metadata.name or '<unnamed>'}"
        )
        background = self._fit_background(image)
        return ImageContainer(
            data=np.asarray(image.data, dtype=np.float64) - background,
            metadata=image.metadata.with_suffix("-corrected"),
        )
