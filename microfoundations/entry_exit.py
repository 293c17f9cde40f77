# microfoundations/entry_exit.py
# Law of motion for one firm slot in the entry-exit industry.
# • Survival: an incumbent with productivity φ ≥ x carries on and its
#   productivity is hit by a multiplicative shock,  φ' = φ · U.
# • Exit: an incumbent with φ < x leaves and the slot is refilled by an
#   entrant whose productivity Z is taken as given.
# The module is intentionally *stateless*: the sampler owns the shock
# buffers and passes in the threshold and the shocks for each step.

from __future__ import annotations

__all__ = [
    "incumbent_law",
    "check_exit",
    "step",
]

# Incumbent dynamics
def incumbent_law(phi: float, u: float) -> float:
    """g(φ, U) = φ · U."""
    return phi * u


# Exit rule
def check_exit(phi: float, threshold: float) -> bool:
    """Return **True** if a firm with productivity ``phi`` exits.

    A firm sitting exactly on the threshold survives.
    """
    return phi < threshold


# full transition
def step(
    phi: float,
    entrant: float,
    survival_shock: float,
    threshold: float = 0.35,
) -> float:
    """
    h(φ, Z, U) = g(φ, U)   if φ ≥ x
               = Z         otherwise.

    ``entrant`` is returned unchanged when the incumbent exits; in the
    backward recursion it is itself the value composed from the next
    replacement further in the past.
    """
    if check_exit(phi, threshold):
        return entrant
    return incumbent_law(phi, survival_shock)
