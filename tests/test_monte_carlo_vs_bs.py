import numpy as np
import pytest
from bsgreeks import OptionContract, CALL, PUT, InvalidParameter
from bsgreeks.black_scholes import price as bs
from bsgreeks.monte_carlo import euro_price_mc


@pytest.mark.parametrize("kind", [CALL, PUT])
def test_mc_matches_bs_within_tol(kind):
    opt = OptionContract(100, 105, 1.0, 0.05, 0.1985, kind)
    mc, se = euro_price_mc(opt, n_paths=40_000, seed=1)
    assert abs(mc - bs(opt)) < 4 * se + 1e-3


def test_plain_estimator_within_tol():
    opt = OptionContract(100, 100, 1.0, 0.03, 0.25, CALL)
    mc, se = euro_price_mc(opt, n_paths=50_000, seed=3,
                           antithetic=False, control_variate=False)
    assert abs(mc - bs(opt)) < 4 * se


def test_same_seed_same_result():
    opt = OptionContract(100, 100, 1.0, 0.05, 0.2)
    a = euro_price_mc(opt, n_paths=20_000, seed=7, chunk_size=5_000)
    b = euro_price_mc(opt, n_paths=20_000, seed=7, chunk_size=5_000)
    assert a == b


def test_explicit_generator_is_reproducible():
    opt = OptionContract(100, 100, 1.0, 0.05, 0.2, PUT)
    a = euro_price_mc(opt, n_paths=10_000, rng=np.random.default_rng(11))
    b = euro_price_mc(opt, n_paths=10_000, rng=np.random.default_rng(11))
    c = euro_price_mc(opt, n_paths=10_000, rng=np.random.default_rng(12))
    assert a == b
    assert a != c


def test_control_variate_reduces_stderr():
    opt = OptionContract(100, 90, 1.0, 0.05, 0.2, CALL)
    _, se_cv = euro_price_mc(opt, n_paths=20_000, seed=5)
    _, se_plain = euro_price_mc(opt, n_paths=20_000, seed=5, control_variate=False)
    assert se_cv < se_plain


def test_price_only():
    opt = OptionContract(100, 100, 1.0, 0.05, 0.2)
    px = euro_price_mc(opt, n_paths=1_000, seed=1, return_stderr=False)
    assert isinstance(px, float)


@pytest.mark.parametrize("kwargs", [dict(n_paths=0), dict(chunk_size=0)])
def test_rejects_bad_sizes(kwargs):
    opt = OptionContract(100, 100, 1.0, 0.05, 0.2)
    with pytest.raises(InvalidParameter):
        euro_price_mc(opt, **kwargs)


def test_rejects_negative_seed():
    opt = OptionContract(100, 100, 1.0, 0.05, 0.2)
    with pytest.raises(InvalidParameter, match="seed"):
        euro_price_mc(opt, n_paths=100, seed=-1)


def test_workers_reproducible():
    opt = OptionContract(100, 100, 1.0, 0.05, 0.2)
    serial = euro_price_mc(opt, n_paths=20_000, seed=7, chunk_size=5_000, n_workers=1)
    pooled = euro_price_mc(opt, n_paths=20_000, seed=7, chunk_size=5_000, n_workers=2)
    assert pooled == serial
