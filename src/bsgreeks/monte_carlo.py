# monte_carlo.py
# Terminal-only Monte Carlo cross-check of the closed-form European price.

from __future__ import annotations
import logging
import math
from concurrent.futures import ProcessPoolExecutor

import numpy as np

from .black_scholes import discount_factor
from .core import OptionContract, CALL
from .errors import InvalidParameter

__all__ = ["euro_price_mc"]

logger = logging.getLogger(__name__)


# ---- helper: one simulation chunk (no path storage, only terminal S_T) ----

def _mc_chunk_sumstats(
    n: int,
    *,
    S0: float, K: float, T: float, r: float, sigma: float,
    kind: str, antithetic: bool, seed: np.random.SeedSequence,
):
    """
    Simulate `n` terminal draws of S_T under GBM, compute discounted payoff X and
    control variate Y = e^{-rT} S_T. Return sufficient statistics to aggregate:
        n_eff, sumX, sumX2, sumY, sumY2, sumXY
    """
    # independent RNG per chunk
    rng = np.random.default_rng(seed)
    mu  = (r - 0.5 * sigma * sigma) * T
    sig = sigma * math.sqrt(T)
    df  = discount_factor(r, T)

    Z = rng.standard_normal(n)
    if antithetic:
        Z = np.concatenate([Z, -Z], axis=0)

    # terminal price (exact scheme)
    ST = S0 * np.exp(mu + sig * Z)

    if kind == CALL:
        payoff = np.maximum(ST - K, 0.0)
    else:
        payoff = np.maximum(K - ST, 0.0)

    X = df * payoff
    Y = df * ST

    return (X.size, float(X.sum()), float((X * X).sum()),
            float(Y.sum()), float((Y * Y).sum()), float((X * Y).sum()))


def _aggregate_stats(stats_list):
    return tuple(sum(s[i] for s in stats_list) for i in range(6))


def euro_price_mc(
    opt: OptionContract,
    *,
    n_paths: int = 100_000,
    seed: int | np.random.SeedSequence | None = None,
    rng: np.random.Generator | None = None,
    chunk_size: int = 100_000,
    antithetic: bool = True,
    control_variate: bool = True,
    n_workers: int = 1,
    return_stderr: bool = True,
):
    """
    Memory-light European Monte Carlo price under GBM (terminal draw only).
    Returns (price, stderr), or just the price if ``return_stderr`` is False.

    Randomness is never global: pass ``rng`` (one draw is taken from it to
    seed the run) or ``seed``. With neither, the run is seeded from OS
    entropy. Equal seeds give equal results for any ``n_workers``.

    - ``n_paths`` normal draws; antithetic pairing doubles the sample count.
    - Optional control variate Y = e^{-rT} S_T with E[Y] = S0.
    - Optional process-level parallelism over chunks.
    """
    if n_paths <= 0:
        raise InvalidParameter("n_paths", n_paths)
    if chunk_size <= 0:
        raise InvalidParameter("chunk_size", chunk_size)
    if seed is not None and not isinstance(seed, np.random.SeedSequence) and seed < 0:
        raise InvalidParameter("seed", seed, reason="must be >= 0")

    if rng is not None:
        seed = int(rng.integers(0, 2**63 - 1))
    ss_root = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)

    chunks = []
    remaining = int(n_paths)
    while remaining > 0:
        m = min(chunk_size, remaining)
        chunks.append(m)
        remaining -= m
    child_seeds = ss_root.spawn(len(chunks))
    logger.debug("MC: %d paths in %d chunks, %d worker(s)", n_paths, len(chunks), n_workers)

    params = dict(S0=opt.spot, K=opt.strike, T=opt.time_to_expiry,
                  r=opt.risk_free_rate, sigma=opt.volatility,
                  kind=opt.option_type, antithetic=antithetic)
    if n_workers <= 1:
        stats_list = [_mc_chunk_sumstats(m, seed=ss, **params)
                      for m, ss in zip(chunks, child_seeds)]
    else:
        with ProcessPoolExecutor(max_workers=n_workers) as ex:
            futs = [ex.submit(_mc_chunk_sumstats, m, seed=ss, **params)
                    for m, ss in zip(chunks, child_seeds)]
            # keep submission order so the sum is bit-for-bit reproducible
            stats_list = [f.result() for f in futs]

    n, sumX, sumX2, sumY, sumY2, sumXY = _aggregate_stats(stats_list)

    meanX = sumX / n
    varX  = max(0.0, sumX2 / n - meanX * meanX)

    if control_variate:
        # c_hat = Cov(X,Y)/Var(Y)
        meanY = sumY / n
        varY  = max(0.0, sumY2 / n - meanY * meanY)
        covXY = (sumXY / n) - meanX * meanY
        c_hat = 0.0 if varY == 0.0 else (covXY / varY)

        EY = opt.spot  # discounted S_T is a martingale under Q
        mean = meanX - c_hat * (meanY - EY)
        var  = varX - 2.0 * c_hat * covXY + (c_hat * c_hat) * varY
    else:
        mean, var = meanX, varX

    se = math.sqrt(max(0.0, var) / n)
    return (float(mean), float(se)) if return_stderr else float(mean)
