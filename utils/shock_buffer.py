# utils/shock_buffer.py
# ────────────────────────────────────────────────────────────────────────────
# Append-only store of the i.i.d. shocks that drive one CFTP run.
#
#   • survival  U[i] ~ Beta(α₁, β₁)   – incumbent productivity multiplier
#   • entrant   Z[i] ~ Beta(α₂, β₂)   – productivity of a fresh entrant
#
# Index convention: storage index i is mathematical time −i, i.e. "i steps
# into the past".  Buffers only ever grow at the far-past end; once drawn a
# value is never overwritten, which is what lets successive rounds of the
# sampler reuse the same realisation of the recent past.
# ────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

import logging
from collections import namedtuple
from typing import List, Sequence

import numpy as np
from numpy.random import Generator

from utils.cftp_params import CFTPParams
from utils.exceptions import ShockBufferOverflowError

__all__ = ["ShockBuffer", "ShockPair"]

_LOG = logging.getLogger(__name__)

ShockPair = namedtuple("ShockPair", ["survival", "entrant"])


class ShockBuffer:
    """
    Lazily extended pair of shock sequences with a hard capacity.

    Parameters
    ----------
    params : CFTPParams
        Supplies the two Beta shapes and the depth bound; the buffer holds
        at most ``params.max_depth + 1`` pairs (indices 0..max_depth).
    rng : numpy.random.Generator
        Private stream of this buffer.  Each extension draws the survival
        block for the new indices first, then the entrant block.
    """

    __slots__ = ("_params", "_rng", "_survival", "_entrant", "_views")

    def __init__(self, params: CFTPParams, rng: Generator) -> None:
        self._params = params
        self._rng = rng
        self._survival: List[float] = []
        self._entrant: List[float] = []
        self._views: tuple[tuple[float, ...], tuple[float, ...]] | None = None

    # -- size -----------------------------------------------------------
    @property
    def capacity(self) -> int:
        return self._params.max_depth + 1

    @property
    def depth(self) -> int:
        """Deepest index drawn so far (−1 while empty)."""
        return len(self._survival) - 1

    def __len__(self) -> int:
        return len(self._survival)

    # -- growth ---------------------------------------------------------
    def extend_to(self, depth: int) -> None:
        """Draw pairs for indices ``len(self) .. depth`` inclusive."""
        n_new = depth + 1 - len(self._survival)
        if n_new <= 0:
            return
        if depth + 1 > self.capacity:
            raise ShockBufferOverflowError(
                f"requested depth {depth} exceeds max_depth {self._params.max_depth}"
            )
        p = self._params
        u = self._rng.beta(p.alpha_incumbent, p.beta_incumbent, size=n_new)
        z = self._rng.beta(p.alpha_entrant, p.beta_entrant, size=n_new)
        self._survival.extend(u.tolist())
        self._entrant.extend(z.tolist())
        self._views = None
        _LOG.debug("shock buffer: drew %d pairs, depth now %d", n_new, self.depth)

    # -- named accessors ("k steps into the past") ----------------------
    def survival_at(self, k: int) -> float:
        return self._survival[self._check(k)]

    def entrant_at(self, k: int) -> float:
        return self._entrant[self._check(k)]

    def pair_at(self, k: int) -> ShockPair:
        k = self._check(k)
        return ShockPair(self._survival[k], self._entrant[k])

    def _check(self, k: int) -> int:
        if not 0 <= k < len(self._survival):
            raise IndexError(f"no shock drawn {k} steps into the past")
        return k

    # -- bulk views for the inner loops ---------------------------------
    # Immutable snapshots, rebuilt only after an extension.
    def _snapshot(self) -> tuple[tuple[float, ...], tuple[float, ...]]:
        if self._views is None:
            self._views = (tuple(self._survival), tuple(self._entrant))
        return self._views

    @property
    def survival(self) -> Sequence[float]:
        return self._snapshot()[0]

    @property
    def entrant(self) -> Sequence[float]:
        return self._snapshot()[1]

    def to_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        """Copies of (U, Z) as float arrays, for diagnostics."""
        return (np.asarray(self._survival, dtype=float),
                np.asarray(self._entrant, dtype=float))
