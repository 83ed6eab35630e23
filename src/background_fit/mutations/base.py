"""
Image Mutations Architecture
============================

This module defines how image modifications are structured and applied.

- :class:`~background_fit.container_models.image.ImageContainer` holds image data with metadata.
- :class:`ImageMutation` is an abstract interface for modifying an ImageContainer.
- Numerical work (basis, design matrix, solvers) lives in the ``fitting`` package; mutations
  only adapt it to containers.

High-level Design
-----------------

                        +---------------------------------+
                        |           ImageContainer        |
                        |---------------------------------|
                        | data     : IntensityImage       |
                        | metadata : MetaData             |
                        +---------------+-----------------+
                                        |
                                        v
                    +-------------------+----------------------+
                    |              <<abstract>>                |
                    |              ImageMutation               |
                    |------------------------------------------|
                    | + apply_on_image(T) -> T                 |
                    | + skip_predicate: bool                   |
                    +--------------------+---------------------+
                                         ^
                                         |
                      +------------------+------------------+
                      |                                     |
            +---------+---------+               +-----------+-----------+
            |   FitBackground   |               |   SubtractBackground  |
            |-------------------|               |-----------------------|
            | mask : ndarray    |               | mask : ndarray        |
            | parameters        |               | parameters            |
            +-------------------+               +-----------------------+


Example
-------

    from returns.pipeline import flow
    from returns.pointfree import bind
    from returns.result import Success
    from background_fit.container_models import ImageContainer
    from background_fit.mutations import SubtractBackground

    result = flow(
        Success(ImageContainer(data=image)),
        bind(SubtractBackground(mask=mask, max_order=2)),
    )
"""

from abc import ABC, abstractmethod

from returns.result import Result, safe

from background_fit.container_models import ImageContainer


class ImageMutation(ABC):
    """
    A single transform of an :class:`~background_fit.container_models.image.ImageContainer`.

    A mutation produces a new container that is itself valid input for the next
    mutation, so fits and corrections can be composed with `flow` and `bind`.
    Fit parameters and masks are passed to the constructor; the image is the only
    call argument.
    """

    @property
    def skip_predicate(self) -> bool:
        """
        Whether the image should pass through unchanged.

        :return bool: `True` to return the input image as is, `False` to run `apply_on_image`.
        """
        return False

    def __call__(self, image: ImageContainer) -> Result[ImageContainer, Exception]:
        """
        Run the mutation on an image, capturing raised exceptions.

        :param image: The `ImageContainer` to transform.
        :return Result: `Success` with the transformed image, or `Failure` with the exception
            raised by `apply_on_image` (e.g. a mismatching mask or an under-determined fit).
        """
        return self._apply(image)

    @safe
    def _apply(self, image: ImageContainer) -> ImageContainer:
        if self.skip_predicate:
            return image
        return self.apply_on_image(image)

    @abstractmethod
    def apply_on_image(self, image: ImageContainer) -> ImageContainer:
        """
        Transform the image, raising on invalid input.

        :param image: The input `ImageContainer`; it is not modified.
        :return ImageContainer: A new container with the transformed data.
        """
