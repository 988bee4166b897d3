# black_scholes_vec.py
# Vectorised Black-Scholes pricing and Greeks.
# All public functions accept scalars *or* NumPy arrays and broadcast.
# Every element is computed independently of the others.

from __future__ import annotations
import logging
from typing import Iterable

import numpy as np
from scipy.stats import norm

from .black_scholes import MAX_DISCOUNT_EXPONENT
from .core import OptionContract, CALL, normalize_kind
from .errors import InvalidParameter, NumericOverflow

__all__ = ["bs_price_vec", "bs_greeks_vec", "bs_value_vec", "value_batch"]

logger = logging.getLogger(__name__)

_N = norm.cdf   # vectorised standard-normal CDF
_n = norm.pdf   # vectorised standard-normal PDF

_FIELDS = ("price", "delta", "gamma", "theta", "vega", "rho")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
def _as_float_arrays(S, K, T, r, sigma):
    S, K, T, r, sigma = (np.asarray(x, dtype=float) for x in (S, K, T, r, sigma))
    for name, arr in (("spot", S), ("strike", K),
                      ("time_to_expiry", T), ("volatility", sigma)):
        bad = ~(np.isfinite(arr) & (arr > 0))
        if np.any(bad):
            raise InvalidParameter(name, float(np.extract(bad, arr)[0]))
    bad = ~np.isfinite(r)
    if np.any(bad):
        raise InvalidParameter("risk_free_rate", float(np.extract(bad, r)[0]),
                               reason="must be finite")
    return S, K, T, r, sigma


def _discount(r, T) -> np.ndarray:
    x = r * T
    if np.any(~(np.abs(x) <= MAX_DISCOUNT_EXPONENT)):
        raise NumericOverflow(
            f"|r*T| exceeds {MAX_DISCOUNT_EXPONENT:g}; discount factor out of range"
        )
    return np.exp(-x)


def _d1_d2(S, K, T, r, sigma):
    """Compute d1, d2 arrays.  All inputs broadcast."""
    sig_sqrt_T = sigma * np.sqrt(T)
    d1 = (np.log(S / K) + (r + 0.5 * sigma * sigma) * T) / sig_sqrt_T
    d2 = d1 - sig_sqrt_T
    if not (np.all(np.isfinite(d1)) and np.all(np.isfinite(d2))):
        raise NumericOverflow("d1/d2 not finite for at least one element")
    return d1, d2


def _is_call(kind) -> np.ndarray:
    """Return boolean mask: True where kind is a call."""
    kind = np.asarray(kind)
    flags = [normalize_kind(k) == CALL for k in kind.flat]
    return np.array(flags, dtype=bool).reshape(kind.shape)


def _check_finite(out: dict) -> dict:
    for key, arr in out.items():
        if not np.all(np.isfinite(arr)):
            raise NumericOverflow(f"{key} not finite for at least one element")
    return out


# ---------------------------------------------------------------------------
# Vectorised price
# ---------------------------------------------------------------------------
def bs_price_vec(S, K, T, r, sigma, kind) -> np.ndarray:
    """Vectorised Black-Scholes price.

    Parameters accept scalars or arrays; NumPy broadcasting rules apply.

    Returns
    -------
    np.ndarray
        Option prices (same shape as broadcasted inputs).

    Raises
    ------
    InvalidParameter
        If any element of spot, strike, time or vol is not a positive finite
        number, or a rate is not finite.
    """
    S, K, T, r, sigma = _as_float_arrays(S, K, T, r, sigma)
    d1, d2 = _d1_d2(S, K, T, r, sigma)
    disc_r = _discount(r, T)

    call_px = S * _N(d1) - disc_r * K * _N(d2)
    put_px  = disc_r * K * _N(-d2) - S * _N(-d1)

    px = np.where(_is_call(kind), call_px, put_px)
    return _check_finite({"price": px})["price"]


# ---------------------------------------------------------------------------
# Vectorised price + Greeks
# ---------------------------------------------------------------------------
def bs_value_vec(S, K, T, r, sigma, kind) -> dict[str, np.ndarray]:
    """Vectorised price and Greeks.

    Returns dict with keys: price, delta, gamma, theta, vega, rho.
    Vega is dPrice/dSigma (absolute), theta is dPrice/dt (per year).
    """
    S, K, T, r, sigma = _as_float_arrays(S, K, T, r, sigma)
    d1, d2 = _d1_d2(S, K, T, r, sigma)
    disc_r = _discount(r, T)
    sqrt_T = np.sqrt(T)
    n_d1 = _n(d1)
    is_call = _is_call(kind)

    # Common
    gamma = n_d1 / (S * sigma * sqrt_T)
    vega  = S * n_d1 * sqrt_T
    decay = -S * n_d1 * sigma / (2 * sqrt_T)

    # Call-specific
    px_c    = S * _N(d1) - disc_r * K * _N(d2)
    delta_c = _N(d1)
    theta_c = decay - r * K * disc_r * _N(d2)
    rho_c   = K * T * disc_r * _N(d2)

    # Put-specific
    px_p    = disc_r * K * _N(-d2) - S * _N(-d1)
    delta_p = _N(d1) - 1.0
    theta_p = decay + r * K * disc_r * _N(-d2)
    rho_p   = -K * T * disc_r * _N(-d2)

    shape = np.broadcast_shapes(gamma.shape, is_call.shape)
    out = {
        "price": np.where(is_call, px_c, px_p),
        "delta": np.where(is_call, delta_c, delta_p),
        "gamma": np.broadcast_to(gamma, shape).copy(),
        "theta": np.where(is_call, theta_c, theta_p),
        "vega":  np.broadcast_to(vega, shape).copy(),
        "rho":   np.where(is_call, rho_c, rho_p),
    }
    return _check_finite(out)


def bs_greeks_vec(S, K, T, r, sigma, kind) -> dict[str, np.ndarray]:
    """Vectorised Greeks: delta, gamma, vega, theta, rho."""
    out = bs_value_vec(S, K, T, r, sigma, kind)
    del out["price"]
    return out


# ---------------------------------------------------------------------------
# Batch of contracts
# ---------------------------------------------------------------------------
def value_batch(contracts: Iterable[OptionContract]) -> dict[str, np.ndarray]:
    """Value a sequence of contracts element-wise.

    Element ``i`` of every returned array depends only on ``contracts[i]``,
    so the order and membership of the batch never change a result.
    """
    contracts = list(contracts)
    logger.debug("valuing batch of %d contracts", len(contracts))
    if not contracts:
        return {key: np.empty(0) for key in _FIELDS}

    cols = np.array(
        [(c.spot, c.strike, c.time_to_expiry, c.risk_free_rate, c.volatility)
         for c in contracts],
        dtype=float,
    )
    kinds = np.array([c.option_type for c in contracts])
    S, K, T, r, sigma = cols.T
    return bs_value_vec(S, K, T, r, sigma, kinds)
