"""Tests for bump-and-reprice Greeks."""

import pytest
from bsgreeks import OptionContract, CALL, PUT, greeks, price
from bsgreeks.risk import numerical_greeks

CASES = [
    OptionContract(100, 100, 1.0, 0.05, 0.2, CALL),
    OptionContract(100, 100, 1.0, 0.05, 0.2, PUT),
    OptionContract(100, 105, 1.0, 0.05, 0.1985, CALL),
    OptionContract(100, 105, 1.0, 0.05, 0.1985, PUT),
    OptionContract(120, 100, 0.5, 0.03, 0.3, PUT),
]


class TestNumericalGreeks:
    @pytest.mark.parametrize("opt", CASES)
    def test_vs_analytical_bs(self, opt):
        ng = numerical_greeks(price, opt)
        ag = greeks(opt)
        assert abs(ng["delta"] - ag["delta"]) < 0.005
        assert abs(ng["gamma"] - ag["gamma"]) < 0.002
        assert abs(ng["vega"] - ag["vega"]) < 0.5
        assert abs(ng["rho"] - ag["rho"]) < 0.5
        assert abs(ng["theta"] - ag["theta"]) < 0.05

    def test_all_keys(self):
        ng = numerical_greeks(price, CASES[0])
        assert set(ng.keys()) == {"delta", "gamma", "vega", "theta", "rho"}

    def test_put_delta_negative(self):
        ng = numerical_greeks(price, CASES[1])
        assert ng["delta"] < 0

    def test_call_theta_negative(self):
        # bumping expiry down must lose value for a long call
        ng = numerical_greeks(price, CASES[0])
        assert ng["theta"] < 0

    def test_theta_zero_inside_last_step(self):
        opt = OptionContract(100, 100, 1.0 / 730.0, 0.05, 0.2)
        assert numerical_greeks(price, opt)["theta"] == 0.0

    def test_low_vol_bump_stays_positive(self):
        opt = OptionContract(100, 100, 1.0, 0.05, 1e-5)
        ng = numerical_greeks(price, opt)
        assert ng["vega"] >= 0.0
