from __future__ import annotations
import math
from dataclasses import dataclass, asdict, replace as _replace
from typing import ClassVar, Dict

from .errors import InvalidParameter

CALL = "call"
PUT  = "put"


def _require_positive(name: str, value: float) -> None:
    # NaN fails every comparison, so test finiteness first
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameter(name, value)


def check_inputs(spot: float, strike: float, time_to_expiry: float,
                 risk_free_rate: float, volatility: float) -> None:
    """Raise :class:`InvalidParameter` unless d1/d2 are defined for these inputs."""
    _require_positive("spot", spot)
    _require_positive("strike", strike)
    _require_positive("time_to_expiry", time_to_expiry)
    _require_positive("volatility", volatility)
    if not math.isfinite(risk_free_rate):
        raise InvalidParameter("risk_free_rate", risk_free_rate, reason="must be finite")


def normalize_kind(kind: str) -> str:
    """Map ``"Call"``, ``"c"``, ``"PUT"`` ... onto :data:`CALL` / :data:`PUT`."""
    s = str(kind).strip().lower()
    if s in {"call", "c"}:
        return CALL
    if s in {"put", "p"}:
        return PUT
    raise InvalidParameter("option_type", kind, reason="must be 'call' or 'put'")


# ---------------------------------------------------------------------------
# Contract: the five market inputs plus the call/put tag
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class OptionContract:
    """A European option under Black-Scholes.

    Parameters
    ----------
    spot : float
        Current underlying price, > 0.
    strike : float
        Exercise price, > 0.
    time_to_expiry : float
        Years until expiry, > 0.
    risk_free_rate : float
        Continuously-compounded rate. Any finite sign.
    volatility : float
        Annualised volatility of log-returns, > 0.
    option_type : str
        ``"call"`` (default) or ``"put"``; fixed at construction.

    Raises
    ------
    InvalidParameter
        If any input leaves d1/d2 undefined.
    """
    spot: float
    strike: float
    time_to_expiry: float          # years
    risk_free_rate: float          # continuous
    volatility: float
    option_type: str = CALL

    def __post_init__(self):
        check_inputs(self.spot, self.strike, self.time_to_expiry,
                     self.risk_free_rate, self.volatility)
        object.__setattr__(self, "option_type", normalize_kind(self.option_type))

    @property
    def is_call(self) -> bool:
        return self.option_type == CALL

    def replace(self, **changes) -> "OptionContract":
        """Copy with some fields changed; the copy is validated again."""
        return _replace(self, **changes)

    def mirror(self) -> "OptionContract":
        """Same inputs, opposite option type."""
        return self.replace(option_type=PUT if self.is_call else CALL)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Valuation:
    """Price and sensitivities of one contract.

    Units
    -----
    delta : dPrice/dSpot.
    gamma : dDelta/dSpot.
    theta : dPrice/dt per *year* of calendar time (negative for a long
        option losing time value). Divide by 365 for a per-day figure.
    vega : dPrice/dSigma per *unit* of volatility, i.e. a move from
        sigma = 0.20 to 0.21 changes the price by about ``0.01 * vega``.
        It is not quoted per percentage point.
    rho : dPrice/dRate per unit of rate.
    """
    VEGA_UNIT: ClassVar[str] = "per 1.00 change in volatility"

    price: float
    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)
