"""
Configuration for the qpipe simulator.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Default absolute tolerance for approximate comparisons
DEFAULT_ATOL = 1e-6


@dataclass
class SimulatorConfig:
    """Configuration for the state-vector simulator."""

    atol: float = DEFAULT_ATOL

    # Number of spectator patterns gathered per batch by the engine
    chunk_size: int = 4096

    # Sampling
    default_shots: int = 100
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.default_shots < 0:
            raise ValueError(f"default_shots must be >= 0, got {self.default_shots}")


# Default configuration instance
DEFAULT_CONFIG = SimulatorConfig()
