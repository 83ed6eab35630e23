from numbers import Integral

from background_fit.container_models.base import Exponent, Pair


def validate_max_order(max_order: int) -> None:
    if (
        isinstance(max_order, bool)
        or not isinstance(max_order, Integral)
        or max_order < 0
    ):
        raise ValueError(
            f"Polynomial order should be a non-negative integer, got {max_order!r}"
        )


def count_coefficients(max_order: int) -> int:
    """Number of monomials x^a * y^b with total degree a + b <= `max_order` (a triangular number)."""
    validate_max_order(max_order)
    max_order = int(max_order)
    return (max_order + 1) * (max_order + 2) // 2


def generate_polynomial_exponents(max_order: int) -> tuple[Exponent, ...]:
    """
    Generate the (x, y) exponent pairs of all 2D monomials up to a given total degree.

    Index 0 is always the constant term. The terms of each order follow contiguously, with the
    power of x decreasing while the power of y increases, e.g. for `max_order=2`::

        (0, 0), (1, 0), (0, 1), (2, 0), (1, 1), (0, 2)

    :param max_order: Maximum total degree (px + py) of the polynomial terms.
    :returns: Tuple of `Pair(x, y)` exponents, one per polynomial coefficient.
    """
    validate_max_order(max_order)
    return tuple(
        Pair(order - n, n)
        for order in range(int(max_order) + 1)
        for n in range(order + 1)
    )
