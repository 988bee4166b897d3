# bsgreeks: Black-Scholes price and Greeks for European options
# Public API

from .errors import BSGreeksError, InvalidParameter, NumericOverflow

# Data model
from .core import OptionContract, Valuation, CALL, PUT

# Statistics primitives
from .stats import norm_cdf, norm_pdf

# Closed-form scalar pricer
from .black_scholes import (
    d1_d2, d1_d2_raw, discount_factor,
    price, delta, gamma, theta, vega, rho,
    greeks, value, value_many,
)

# Vectorised / batch
from .black_scholes_vec import bs_price_vec, bs_greeks_vec, bs_value_vec, value_batch

# Cross-checks
from .risk import numerical_greeks
from .monte_carlo import euro_price_mc

__all__ = [
    # Errors
    "BSGreeksError", "InvalidParameter", "NumericOverflow",
    # Data model
    "OptionContract", "Valuation", "CALL", "PUT",
    # Statistics
    "norm_cdf", "norm_pdf",
    # Scalar
    "d1_d2", "d1_d2_raw", "discount_factor",
    "price", "delta", "gamma", "theta", "vega", "rho",
    "greeks", "value", "value_many",
    # Vectorised
    "bs_price_vec", "bs_greeks_vec", "bs_value_vec", "value_batch",
    # Cross-checks
    "numerical_greeks", "euro_price_mc",
]

__version__ = "0.1.0"
