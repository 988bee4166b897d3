"""Closed-form Black-Scholes price and Greeks for European options.

One contract type carries a ``"call"`` / ``"put"`` tag; every function below
branches on that tag instead of on separate call/put classes.

Conventions: theta is per year, vega and rho are per unit change of
volatility / rate (see :class:`~bsgreeks.core.Valuation`).
"""

from __future__ import annotations
import logging
import math
from math import log, sqrt, exp
from typing import Dict, Iterable, List, Tuple

from .core import OptionContract, Valuation, CALL, check_inputs
from .errors import NumericOverflow
from .stats import norm_cdf as _N, norm_pdf as _n

__all__ = [
    "MAX_DISCOUNT_EXPONENT",
    "discount_factor",
    "d1_d2",
    "d1_d2_raw",
    "price",
    "delta",
    "gamma",
    "theta",
    "vega",
    "rho",
    "greeks",
    "value",
    "value_many",
]

logger = logging.getLogger(__name__)

# exp() overflows a double just above 709.78; stay clear of the edge.
MAX_DISCOUNT_EXPONENT = 700.0


def discount_factor(rate: float, time_to_expiry: float, *,
                    max_exponent: float = MAX_DISCOUNT_EXPONENT) -> float:
    """exp(-r T), refusing exponents beyond ``max_exponent`` in magnitude."""
    x = rate * time_to_expiry
    if not abs(x) <= max_exponent:
        raise NumericOverflow(
            f"|r*T| = {abs(x):g} exceeds {max_exponent:g}; discount factor out of range"
        )
    return exp(-x)


# ---------------------------------------------------------------------------
# d1 / d2
# ---------------------------------------------------------------------------
def _d1_d2(S, K, T, r, sigma) -> Tuple[float, float]:
    srt = sigma * sqrt(T)
    d1 = (log(S / K) + T * (r + 0.5 * sigma * sigma)) / srt
    d2 = d1 - srt
    if not (math.isfinite(d1) and math.isfinite(d2)):
        raise NumericOverflow(f"d1/d2 not finite (d1={d1!r}, d2={d2!r})")
    return d1, d2


def d1_d2_raw(S: float, K: float, T: float, r: float, sigma: float) -> Tuple[float, float]:
    """d1, d2 on plain floats. Raises ``InvalidParameter`` on bad inputs."""
    check_inputs(S, K, T, r, sigma)
    return _d1_d2(S, K, T, r, sigma)


def d1_d2(opt: OptionContract) -> Tuple[float, float]:
    return _d1_d2(opt.spot, opt.strike, opt.time_to_expiry,
                  opt.risk_free_rate, opt.volatility)


# ---------------------------------------------------------------------------
# Price
# ---------------------------------------------------------------------------
def _price_from(S, K, disc, d1, d2, is_call):
    if is_call:
        return S * _N(d1) - K * disc * _N(d2)
    return K * disc * _N(-d2) - S * _N(-d1)


def price(opt: OptionContract) -> float:
    d1, d2 = d1_d2(opt)
    disc = discount_factor(opt.risk_free_rate, opt.time_to_expiry)
    px = _price_from(opt.spot, opt.strike, disc, d1, d2, opt.option_type == CALL)
    if not math.isfinite(px):
        raise NumericOverflow(f"price not finite ({px!r})")
    return px


# ---------------------------------------------------------------------------
# Price + Greeks in one pass
# ---------------------------------------------------------------------------
def value(opt: OptionContract) -> Valuation:
    """Price, delta, gamma, theta, vega and rho of ``opt``."""
    S, K, T = opt.spot, opt.strike, opt.time_to_expiry
    r, sigma = opt.risk_free_rate, opt.volatility

    d1, d2 = d1_d2(opt)
    logger.debug("d1=%.6f d2=%.6f for %s", d1, d2, opt)
    disc   = discount_factor(r, T)
    sqrt_T = sqrt(T)
    n_d1   = _n(d1)

    # Common to both variants
    gamma_ = n_d1 / (S * sigma * sqrt_T)
    vega_  = S * sqrt_T * n_d1
    decay  = -(S * n_d1 * sigma) / (2.0 * sqrt_T)

    px = _price_from(S, K, disc, d1, d2, opt.option_type == CALL)
    if opt.option_type == CALL:
        N_d2   = _N(d2)
        delta_ = _N(d1)
        theta_ = decay - r * K * disc * N_d2
        rho_   = K * T * disc * N_d2
    else:
        N_md2  = _N(-d2)
        delta_ = _N(d1) - 1.0
        theta_ = decay + r * K * disc * N_md2
        rho_   = -K * T * disc * N_md2

    out = Valuation(price=px, delta=delta_, gamma=gamma_,
                    theta=theta_, vega=vega_, rho=rho_)
    for name, x in out.as_dict().items():
        if not math.isfinite(x):
            raise NumericOverflow(f"{name} not finite ({x!r})")
    return out


def greeks(opt: OptionContract) -> Dict[str, float]:
    """Returns greeks with sigma in absolute units (vega is dPrice/dSigma, not per 1%)."""
    v = value(opt)
    return {"delta": v.delta, "gamma": v.gamma, "vega": v.vega,
            "theta": v.theta, "rho": v.rho}


def delta(opt: OptionContract) -> float:
    return value(opt).delta


def gamma(opt: OptionContract) -> float:
    return value(opt).gamma


def theta(opt: OptionContract) -> float:
    return value(opt).theta


def vega(opt: OptionContract) -> float:
    return value(opt).vega


def rho(opt: OptionContract) -> float:
    return value(opt).rho


def value_many(contracts: Iterable[OptionContract]) -> List[Valuation]:
    """Value each contract on its own; results follow input order."""
    return [value(opt) for opt in contracts]
