"""
Ranking configuration.

    damping_factor      share of rank passed along edges (rest is uniform)
    convergence_damper  weight of the newest delta in the running average;
                        1/N averages over roughly the last N updates, and N
                        should be close to the number of senses in the graph
    convergence_limit   the walk stops once the running average drops below
"""

import math
from dataclasses import dataclass, asdict, fields
from typing import Literal

from senserank.core.errors import ConfigurationError


@dataclass
class RankConfig:
    damping_factor: float = 0.90
    convergence_damper: float = 1.0 / 30
    convergence_limit: float = 0.03

    # Initial (mean, confidence) of every sense
    prior_mean: float = 1.0
    prior_confidence: float = 0.9

    # Incoming weight below this marks a start sense as disconnected
    disconnect_epsilon: float = 1.0e-10

    # Per-walk step cap; None walks until converged
    max_steps: int | None = 10_000

    # What to do when a neighbor's incoming weight sum is zero
    on_degenerate: Literal["skip", "raise"] = "skip"

    def __post_init__(self):
        # Written as "not (in range)" so NaN is rejected too
        if not 0.0 < self.damping_factor < 1.0:
            raise ConfigurationError(
                f"damping_factor must be in (0, 1), got {self.damping_factor}"
            )
        if not 0.0 < self.convergence_damper <= 1.0:
            raise ConfigurationError(
                f"convergence_damper must be in (0, 1], got {self.convergence_damper}"
            )
        if not (self.convergence_limit > 0.0 and math.isfinite(self.convergence_limit)):
            raise ConfigurationError(
                f"convergence_limit must be a finite number > 0, got {self.convergence_limit}"
            )
        if not math.isfinite(self.prior_mean):
            raise ConfigurationError(
                f"prior_mean must be finite, got {self.prior_mean}"
            )
        if not 0.0 <= self.prior_confidence <= 1.0:
            raise ConfigurationError(
                f"prior_confidence must be in [0, 1], got {self.prior_confidence}"
            )
        if not (self.disconnect_epsilon > 0.0 and math.isfinite(self.disconnect_epsilon)):
            raise ConfigurationError(
                f"disconnect_epsilon must be a finite number > 0, got {self.disconnect_epsilon}"
            )
        if self.max_steps is not None and self.max_steps <= 0:
            raise ConfigurationError(
                f"max_steps must be > 0 or None, got {self.max_steps}"
            )
        if self.on_degenerate not in ("skip", "raise"):
            raise ConfigurationError(
                f"on_degenerate must be 'skip' or 'raise', got {self.on_degenerate!r}"
            )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "RankConfig":
        """Build from a dict, ignoring unknown keys and None values."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known and v is not None}
        return cls(**kwargs)
