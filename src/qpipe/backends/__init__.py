"""Simulation backends for qpipe."""

from qpipe.backends.statevector import (
    SimulationResult,
    StatevectorBackend,
    apply_gate,
    simulate,
    simulate_shots,
)

__all__ = [
    "SimulationResult",
    "StatevectorBackend",
    "apply_gate",
    "simulate",
    "simulate_shots",
]
