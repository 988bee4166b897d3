"""
Command-line defaults, overridable from the environment.

Usage:
    from bsgreeks.config import PricingConfig
    cfg = PricingConfig.from_env()

The pricing functions themselves never read this; it only feeds the CLI.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from .errors import InvalidParameter

logger = logging.getLogger(__name__)

ENV_PREFIX = "BSGREEKS_"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class PricingConfig:
    """Presentation and cross-check settings."""

    # Output
    decimals: int = 6                 # fixed-point places in printed results
    log_level: str = "WARNING"

    # Monte Carlo cross-check
    mc_paths: int = 100_000
    mc_seed: Optional[int] = None

    def __post_init__(self):
        if self.decimals < 0:
            raise InvalidParameter("decimals", self.decimals, reason="must be >= 0")
        if self.mc_paths <= 0:
            raise InvalidParameter("mc_paths", self.mc_paths)
        if self.mc_seed is not None and self.mc_seed < 0:
            raise InvalidParameter("mc_seed", self.mc_seed, reason="must be >= 0")
        level = str(self.log_level).upper()
        if level not in _LEVELS:
            raise InvalidParameter("log_level", self.log_level,
                                   reason=f"must be one of {', '.join(_LEVELS)}")
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PricingConfig":
        """
        Build a config from ``BSGREEKS_*`` variables; unset ones keep defaults.

        Priority is env var, then dataclass default. A value that does not
        parse raises ``InvalidParameter`` naming the variable.
        """
        environ = os.environ if environ is None else environ
        kwargs = {}
        for f in fields(cls):
            var = ENV_PREFIX + f.name.upper()
            raw = environ.get(var, "").strip()
            if not raw:
                continue
            try:
                kwargs[f.name] = raw if f.name == "log_level" else int(raw)
            except ValueError:
                raise InvalidParameter(var, raw, reason="must be an integer") from None
            logger.debug("config %s=%r from %s", f.name, kwargs[f.name], var)
        return cls(**kwargs)
