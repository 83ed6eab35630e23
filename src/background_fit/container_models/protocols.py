from typing import Protocol
import numpy as np
from numpy.typing import NDArray


class LeastSquaresSolver(Protocol):
    """Protocol for solver functions that compute polynomial coefficients from a design matrix and observed values."""

    def __call__(
        self, design_matrix: NDArray[np.float64], values: NDArray[np.float64]
    ) -> NDArray[np.float64]: ...
