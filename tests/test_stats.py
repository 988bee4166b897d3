"""Tests for the standard-normal primitives."""

import math

import pytest
from bsgreeks.stats import norm_cdf, norm_pdf

ZS = [-8.0, -3.0, -1.5, -0.25, 0.0, 0.1053, 0.5, 1.0, 2.33, 6.0]


class TestNormCdf:
    def test_at_zero(self):
        assert abs(norm_cdf(0.0) - 0.5) < 1e-9

    @pytest.mark.parametrize("z", ZS)
    def test_symmetry(self, z):
        assert abs(norm_cdf(z) + norm_cdf(-z) - 1.0) < 1e-9

    def test_known_values(self):
        assert abs(norm_cdf(1.0) - 0.8413447461) < 1e-9
        assert abs(norm_cdf(-1.0) - 0.1586552539) < 1e-9
        assert abs(norm_cdf(1.959963985) - 0.975) < 1e-9

    def test_monotone_and_bounded(self):
        values = [norm_cdf(z) for z in sorted(ZS)]
        assert all(0.0 <= v <= 1.0 for v in values)
        assert all(a < b for a, b in zip(values, values[1:]))

    def test_extremes_do_not_raise(self):
        assert norm_cdf(40.0) == 1.0
        assert norm_cdf(-40.0) == 0.0
        assert norm_cdf(math.inf) == 1.0
        assert norm_cdf(-math.inf) == 0.0


class TestNormPdf:
    def test_peak(self):
        assert abs(norm_pdf(0.0) - 1.0 / math.sqrt(2.0 * math.pi)) < 1e-15

    @pytest.mark.parametrize("z", ZS)
    def test_even(self, z):
        assert abs(norm_pdf(z) - norm_pdf(-z)) < 1e-9

    def test_known_value(self):
        assert abs(norm_pdf(1.0) - 0.2419707245) < 1e-9

    def test_tails_vanish(self):
        assert norm_pdf(50.0) == 0.0
        assert norm_pdf(math.inf) == 0.0

    def test_is_cdf_derivative(self):
        h = 1e-5
        for z in (-1.0, 0.0, 0.7):
            fd = (norm_cdf(z + h) - norm_cdf(z - h)) / (2 * h)
            assert abs(fd - norm_pdf(z)) < 1e-8
