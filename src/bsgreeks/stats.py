# stats.py
# Standard-normal CDF / PDF on plain floats.
# Both are total over the reals (inf included) and never raise.

from math import erf, exp, pi, sqrt

__all__ = ["norm_cdf", "norm_pdf"]

_SQRT2 = sqrt(2.0)
_INV_SQRT_2PI = 1.0 / sqrt(2.0 * pi)


def norm_cdf(z: float) -> float:
    """N(z) = 0.5 * (1 + erf(z / sqrt(2)))."""
    return 0.5 * (1.0 + erf(z / _SQRT2))


def norm_pdf(z: float) -> float:
    """phi(z) = exp(-z^2 / 2) / sqrt(2 pi)."""
    return _INV_SQRT_2PI * exp(-0.5 * z * z)
