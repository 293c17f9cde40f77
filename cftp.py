# cftp.py
"""
Perfect sampling from the stationary distribution of firm productivity in
an entry-exit industry, by coupling from the past.

Law of motion (see microfoundations.entry_exit):

    φ_{t+1} = h(φ_t, Z_{t+1}, U_{t+1})
            = φ_t · U_{t+1}     if φ_t ≥ x        (incumbent survives)
            = Z_{t+1}           otherwise         (exit and replacement)

Negative time indices are stored as positive ones: U[i] in this module is
U_{−i} in the mathematical description, so h_i uses (Z[i], U[i]) and the
composition h_0 ∘ h_1 ∘ … ∘ h_k maps a state k+1 periods in the past to
the present.

For a horizon T the sampler

  1) finds σ_T, the first number of backward steps after which the maximal
     incumbent (φ = 1) has been pushed below x by the survival shocks alone;
  2) evaluates the σ_T + 1 candidate histories  h_0 ∘ … ∘ h_{T-k-1}(Z[T-k]),
     k = 1..σ_T+1, one for each possible most recent exit;
  3) accepts the common value when all candidates agree *exactly*, and
     otherwise grows T and tries again with the same recent shocks.

Agreement is tested with ``==`` on purpose: coalesced candidates run through
the very same floating-point operations on the very same shocks once their
paths meet, so they are bit-identical.  A tolerance would certify histories
that have not actually merged.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Sequence

import numpy as np

from microfoundations.entry_exit import check_exit, incumbent_law, step
from utils.cftp_params import CFTPParams, FAIL_VALUE, SIGMA_NOT_FOUND
from utils.shock_buffer import ShockBuffer

__all__ = [
    "iterate_h",
    "find_sigma",
    "compute_singleton",
    "SampleResult",
    "PerfectSampler",
    "perfect",
]

_LOG = logging.getLogger(__name__)


def iterate_h(
    j: int,
    k: int,
    phi: float,
    Z: Sequence[float],
    U: Sequence[float],
    threshold: float,
) -> float:
    """Compute h_j ∘ … ∘ h_k (φ) given shock sequences Z and U.

    Steps are applied from index k down to j.  An empty range (j > k)
    returns ``phi`` unchanged.
    """
    r = phi
    for i in range(k, j - 1, -1):
        r = step(r, Z[i], U[i], threshold)
    return r


def find_sigma(T: int, U: Sequence[float], threshold: float) -> int:
    """
    Smallest k in [1, T) such that  1 · U[T-1] · … · U[T-k] < x,
    or ``SIGMA_NOT_FOUND`` if the product stays above the threshold.

    By monotonicity every firm alive T periods ago has left the market
    within σ steps, so only exits at T-1 .. T-σ-1 can seed the present.
    """
    r = 1.0
    k = 1
    while k < T:
        r = incumbent_law(r, U[T - k])
        if check_exit(r, threshold):
            return k
        k += 1
    return SIGMA_NOT_FOUND


def compute_singleton(
    sigma: int,
    T: int,
    Z: Sequence[float],
    U: Sequence[float],
    threshold: float,
) -> float:
    """
    Return the single element of

        Λ_T = { h_0 ∘ … ∘ h_{T-k-1} (Z[T-k]) : k = 1, …, σ+1 }

    when it is a singleton, and ``FAIL_VALUE`` at the first candidate that
    differs from the others.
    """
    if sigma < 1 or sigma + 1 > T:
        raise ValueError(f"sigma must lie in [1, T-1]; got sigma={sigma}, T={T}")

    k = sigma + 1
    s = iterate_h(0, T - k - 1, Z[T - k], Z, U, threshold)
    for k in range(1, sigma + 1):
        candidate = iterate_h(0, T - k - 1, Z[T - k], Z, U, threshold)
        if candidate != s:
            return FAIL_VALUE
    return s


@dataclass(slots=True, frozen=True)
class SampleResult:
    """Outcome of one call to :meth:`PerfectSampler.sample`."""
    seed:      int
    value:     float                # FAIL_VALUE when not coalesced
    depth:     int                  # horizon T of the last round
    sigma:     int                  # σ_T of the last round (−1 if none)
    rounds:    int
    coalesced: bool
    message:   Optional[str] = None

    def as_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row.pop("message")
        return row


class PerfectSampler:
    """
    Coupling-from-the-past sampler bound to one immutable configuration.

    Instances hold no per-draw state, so one sampler can serve any number
    of seeds; every call to :meth:`sample` builds its own generator and
    shock buffer.
    """

    def __init__(self, params: CFTPParams | None = None) -> None:
        self.params = params if params is not None else CFTPParams()

    def sample(self, seed: int) -> SampleResult:
        if seed < 0:
            raise ValueError(f"seed must be ≥ 0; got {seed}")
        p = self.params
        x = p.exit_threshold
        shocks = ShockBuffer(p, np.random.default_rng(seed))

        t = p.t_start
        shocks.extend_to(t)
        rounds = 0
        sigma = SIGMA_NOT_FOUND

        while True:
            rounds += 1
            sigma = find_sigma(t, shocks.survival, x)
            _LOG.debug("seed=%d  round=%d  T=%d  sigma=%d", seed, rounds, t, sigma)
            if sigma > 0:
                r = compute_singleton(sigma, t, shocks.entrant, shocks.survival, x)
                if r >= 0:
                    return SampleResult(seed=seed, value=r, depth=t, sigma=sigma,
                                        rounds=rounds, coalesced=True)

            # coalescence failed, so go round again with a deeper past
            if t + p.t_increment > p.max_depth:
                break
            t += p.t_increment
            shocks.extend_to(t)

        msg = (f"max_depth={p.max_depth} reached without coalescence "
               f"(seed={seed}); returning fail value. If this happens "
               "repeatedly, increase max_depth.")
        _LOG.warning(msg)
        return SampleResult(seed=seed, value=FAIL_VALUE, depth=t, sigma=sigma,
                            rounds=rounds, coalesced=False, message=msg)


def perfect(seed: int, params: CFTPParams | None = None) -> float:
    """One exact draw for ``seed``, or ``FAIL_VALUE`` if the bound was hit."""
    return PerfectSampler(params).sample(seed).value
