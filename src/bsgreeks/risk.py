"""Bump-and-reprice Greeks.

Central finite differences that work with **any** pricer callable taking an
:class:`~bsgreeks.core.OptionContract`. Used to cross-check the closed-form
sensitivities and to give Greeks for pricers without analytic ones (the
Monte Carlo pricer, for instance).
"""

from __future__ import annotations

from typing import Callable

from .core import OptionContract

__all__ = ["numerical_greeks"]


def numerical_greeks(
    pricer_func: Callable[[OptionContract], float],
    opt: OptionContract,
    *,
    bump_pct: float = 0.01,
    dt: float = 1.0 / 365.0,
) -> dict[str, float]:
    """Compute Greeks via central finite differences on an arbitrary pricer.

    Parameters
    ----------
    pricer_func : callable
        ``pricer_func(contract) -> float``.
    opt : OptionContract
        Contract to bump around.
    bump_pct : float
        Relative bump size for spot and vol; absolute for rate (default 0.01).
    dt : float
        Time step in years for theta (default one calendar day).

    Returns
    -------
    dict[str, float]
        Keys: ``delta``, ``gamma``, ``vega``, ``theta``, ``rho``. Units match
        the analytic ones: theta per year, vega per unit vol.
    """
    P0 = pricer_func(opt)

    # --- Delta & Gamma (spot bump) ---
    eps_S = bump_pct * opt.spot
    P_up = pricer_func(opt.replace(spot=opt.spot + eps_S))
    P_dn = pricer_func(opt.replace(spot=opt.spot - eps_S))
    delta = (P_up - P_dn) / (2.0 * eps_S)
    gamma = (P_up - 2.0 * P0 + P_dn) / (eps_S ** 2)

    # --- Vega (vol bump) ---
    eps_v = min(max(bump_pct * opt.volatility, 1e-4), 0.5 * opt.volatility)
    P_vup = pricer_func(opt.replace(volatility=opt.volatility + eps_v))
    P_vdn = pricer_func(opt.replace(volatility=opt.volatility - eps_v))
    vega = (P_vup - P_vdn) / (2.0 * eps_v)

    # --- Theta (calendar time passing = expiry shrinking) ---
    if opt.time_to_expiry > dt:
        P_t = pricer_func(opt.replace(time_to_expiry=opt.time_to_expiry - dt))
        theta = (P_t - P0) / dt
    else:
        theta = 0.0

    # --- Rho (rate bump) ---
    eps_r = bump_pct
    P_rup = pricer_func(opt.replace(risk_free_rate=opt.risk_free_rate + eps_r))
    P_rdn = pricer_func(opt.replace(risk_free_rate=opt.risk_free_rate - eps_r))
    rho = (P_rup - P_rdn) / (2.0 * eps_r)

    return {
        "delta": float(delta),
        "gamma": float(gamma),
        "vega": float(vega),
        "theta": float(theta),
        "rho": float(rho),
    }
