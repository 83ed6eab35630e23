import logging
import os

import numpy as np
import pytest
from loguru import logger
from numpy.typing import NDArray

from background_fit.settings import get_settings

from .helper_functions import polynomial_image


class PropagateHandler(logging.Handler):
    """Handler that propagates loguru records to standard logging."""

    def emit(self, record: logging.LogRecord) -> None:
        logging.getLogger(record.name).handle(record)


@pytest.fixture
def caplog(caplog):
    """Fixture to enable caplog to capture loguru logs."""
    handler_id = logger.add(PropagateHandler(), format="{message}")
    yield caplog
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def default_settings(monkeypatch: pytest.MonkeyPatch):
    """Run every test against the built-in defaults, unaffected by the environment."""
    for name in list(os.environ):
        if name.upper().startswith("BACKGROUND_FIT_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def ones_image() -> NDArray[np.float64]:
    """A 10x10 image of ones."""
    return np.ones((10, 10), dtype=np.float64)


@pytest.fixture
def full_mask() -> NDArray[np.bool_]:
    """A 10x10 mask marking every pixel as background."""
    return np.ones((10, 10), dtype=bool)


@pytest.fixture
def center_hole_mask() -> NDArray[np.bool_]:
    """A 20x20 background mask with a 4x4 foreground block in the center."""
    mask = np.ones((20, 20), dtype=bool)
    mask[8:12, 8:12] = False
    return mask


@pytest.fixture
def quadratic_coefficients() -> NDArray[np.float64]:
    """Coefficients of a full order-2 polynomial, ordered as the fitted basis."""
    return np.array([10.0, -2.0, 0.5, 1.25, -0.75, 3.0])


@pytest.fixture
def quadratic_image(quadratic_coefficients: NDArray[np.float64]) -> NDArray[np.float64]:
    """A noise-free 30x40 (height x width) image of an order-2 polynomial."""
    return polynomial_image(quadratic_coefficients, max_order=2, width=40, height=30)


@pytest.fixture
def foreground_image(
    quadratic_image: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.bool_]]:
    """The quadratic image with bright foreground objects, and the mask of its background."""
    image = quadratic_image.copy()
    mask = np.ones(image.shape, dtype=bool)
    mask[5:12, 6:15] = False
    mask[18:26, 25:35] = False
    image[~mask] += 500.0
    return image, mask
