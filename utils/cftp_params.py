# utils/cftp_params.py
"""
CFTPParams

Container for every scalar that governs one perfect-sampling run:

    • x              – exit threshold
    • (α₁, β₁)       – Beta shape of the incumbent survival shock U
    • (α₂, β₂)       – Beta shape of the entrant productivity draw Z
    • T₀, ΔT, T_max  – starting horizon, horizon increment, depth bound

Default values replicate the `defaults:` section of *scenarios.yaml*.
The dataclass is *frozen* so a sampler's configuration cannot drift
between draws; build a new instance to change anything.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields

__all__ = ["CFTPParams", "FAIL_VALUE", "SIGMA_NOT_FOUND"]

FAIL_VALUE: float = -1.0        # productivity is ≥ 0, so never a valid draw
SIGMA_NOT_FOUND: int = -1


@dataclass(slots=True, frozen=True)
class CFTPParams:
    # law of motion
    exit_threshold:  float = 0.35    # x : incumbents with φ < x exit

    # shock distributions
    alpha_incumbent: float = 5.0     # U ~ Beta(α₁, β₁)
    beta_incumbent:  float = 1.0
    alpha_entrant:   float = 5.0     # Z ~ Beta(α₂, β₂)
    beta_entrant:    float = 1.0

    # horizon search
    t_start:         int = 100       # first horizon tried
    t_increment:     int = 50        # horizon growth after a failed round
    max_depth:       int = 5000      # hard bound on the horizon

    def __post_init__(self) -> None:        # lightweight validation
        if not math.isfinite(self.exit_threshold) or self.exit_threshold < 0:
            raise ValueError("exit_threshold must be finite and ≥ 0")
        for name in ("alpha_incumbent", "beta_incumbent",
                     "alpha_entrant", "beta_entrant"):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be > 0")
        if self.t_start < 1:
            raise ValueError("t_start must be ≥ 1")
        if self.t_increment < 1:
            raise ValueError("t_increment must be ≥ 1")
        if self.max_depth < self.t_start:
            raise ValueError("max_depth must be ≥ t_start")

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))
