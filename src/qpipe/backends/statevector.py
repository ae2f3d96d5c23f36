"""
Bit-indexed statevector simulation backend.

A k-qubit gate is applied to an n-qubit state without building the
2^n x 2^n embedded operator. Every amplitude index splits uniquely into
a spectator pattern ``b0`` (target bits zero) and a target pattern ``b1``
(spectator bits zero), with ``index = b0 | b1``. For each ``b0`` the 2^k
amplitudes at ``b0 | b1`` are gathered, multiplied by the gate matrix and
scattered back. That is O(2^n * 2^k) work per gate.

Qubits are numbered from 1 and qubit 1 is the most-significant bit of an
index: qubit q sits at bit position n - q.

Memory: ~16 bytes * 2^n (complex128) per state, plus
chunk_size * 2^k amplitudes of scratch space per gate.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from numpy import ndarray

from qpipe.circuit import QuantumCircuit
from qpipe.config import DEFAULT_CONFIG, SimulatorConfig
from qpipe.errors import DomainError
from qpipe.gates import Gate
from qpipe.linalg import Ket, Operator, expected_value, fock, get_num_qubits
from qpipe.logging import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Index arithmetic
# ---------------------------------------------------------------------------

def target_offsets(targets: Sequence[int], n_qubits: int) -> ndarray:
    """
    Index offsets of every target-bit assignment, spectator bits zero.

    Entry ``i`` holds the offset for local pattern ``i`` of the gate; the
    first target is the most-significant bit of ``i``.
    """
    k = len(targets)
    local = np.arange(1 << k, dtype=np.int64)
    offsets = np.zeros(1 << k, dtype=np.int64)
    for j, q in enumerate(targets):
        offsets |= ((local >> (k - 1 - j)) & 1) << (n_qubits - q)
    return offsets


def spectator_offsets(
    targets: Sequence[int], n_qubits: int, start: int = 0, stop: int | None = None
) -> ndarray:
    """
    Index offsets of spectator-bit assignments ``start..stop-1``, target bits zero.

    Assignments are enumerated with the lowest-numbered spectator varying
    slowest. The range lets callers walk the 2^(n-k) patterns in batches.
    """
    target_set = set(targets)
    spectators = [q for q in range(1, n_qubits + 1) if q not in target_set]
    m = len(spectators)
    if stop is None:
        stop = 1 << m
    counter = np.arange(start, stop, dtype=np.int64)
    offsets = np.zeros_like(counter)
    for j, q in enumerate(spectators):
        offsets |= ((counter >> (m - 1 - j)) & 1) << (n_qubits - q)
    return offsets


# ---------------------------------------------------------------------------
# Gate application
# ---------------------------------------------------------------------------

def apply_gate(ket: Ket, gate: Gate, config: SimulatorConfig | None = None) -> Ket:
    """
    Apply ``gate`` to ``ket`` in place.

    Parameters
    ----------
    ket : Ket
        Qubit state of dimension 2^n. Its amplitudes are overwritten.
    gate : Gate
        Gate whose targets all lie in 1..n.
    config : SimulatorConfig, optional
        Supplies the batch size. Defaults to ``DEFAULT_CONFIG``.

    Returns
    -------
    Ket
        The same ``ket``, for chaining.

    Raises
    ------
    DomainError
        If the dimension of ``ket`` is not a power of 2 or a target lies
        outside the register.
    """
    config = config or DEFAULT_CONFIG
    n = get_num_qubits(ket)
    targets = gate.targets
    for q in targets:
        if q > n:
            raise DomainError(
                f"Gate '{gate.instruction_symbol}' targets qubit {q}, "
                f"outside the {n}-qubit state"
            )

    matrix_t = gate.operator().data.T
    data = ket.data
    b1 = target_offsets(targets, n)
    total = 1 << (n - len(targets))

    for start in range(0, total, config.chunk_size):
        b0 = spectator_offsets(targets, n, start, min(start + config.chunk_size, total))
        idx = b0[:, None] | b1[None, :]
        data[idx] = data[idx] @ matrix_t

    return ket


def _initial_state(n_qubits: int, initial_state: Ket | None) -> Ket:
    if initial_state is None:
        return fock(0, 1 << n_qubits)
    state = initial_state.copy()
    if len(state) != 1 << n_qubits:
        raise DomainError(
            f"Initial state has dimension {len(state)}, expected {1 << n_qubits}"
        )
    return state


def simulate(
    circuit: QuantumCircuit,
    initial_state: Ket | None = None,
    config: SimulatorConfig | None = None,
) -> Ket:
    """
    Final state of ``circuit``.

    Starts from |0...0> unless ``initial_state`` is given (it is copied,
    never modified). Steps run in pipeline order and the gates of a step
    run in listed order.
    """
    state = _initial_state(circuit.qubit_count, initial_state)
    logger.debug(
        "Simulating circuit %s: %d qubits, %d steps, %d gates",
        circuit.id, circuit.qubit_count, circuit.depth, circuit.num_gates,
    )
    for step in circuit.pipeline:
        for gate in step:
            apply_gate(state, gate, config)
    logger.debug("Finished circuit %s", circuit.id)
    return state


# ---------------------------------------------------------------------------
# Sampling
# ---------------------------------------------------------------------------

def _as_generator(seed: int | np.random.Generator | None) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def _sample(
    state: Ket,
    n_qubits: int,
    shots: int,
    rng: np.random.Generator,
    atol: float = DEFAULT_CONFIG.atol,
) -> list[str]:
    """Draw ``shots`` basis labels from the Born distribution of ``state``."""
    if shots < 0:
        raise DomainError(f"Shot count must be non-negative, got {shots}")
    probs = state.probabilities()
    total = probs.sum()
    if total == 0.0:
        raise DomainError("Cannot sample from a zero state")
    if abs(total - 1.0) > atol:
        logger.warning("State norm^2 is %.6g, renormalizing before sampling", total)
    # Normalize to handle floating point
    probs = probs / total
    outcomes = rng.choice(1 << n_qubits, size=shots, p=probs)
    return [format(int(i), f"0{n_qubits}b") for i in outcomes]


def simulate_shots(
    circuit: QuantumCircuit,
    shots_count: int | None = None,
    seed: int | np.random.Generator | None = None,
    config: SimulatorConfig | None = None,
) -> list[str]:
    """
    Simulate ``circuit`` and draw measurement readings.

    Parameters
    ----------
    circuit : QuantumCircuit
        Circuit to run.
    shots_count : int, optional
        Number of readings. Defaults to ``config.default_shots`` (100).
    seed : int | numpy.random.Generator | None
        Seed or generator for the draw.
    config : SimulatorConfig, optional
        Simulator settings. Defaults to ``DEFAULT_CONFIG``.

    Returns
    -------
    list[str]
        One zero-padded bit string per shot, qubit 1 leftmost.
    """
    config = config or DEFAULT_CONFIG
    if shots_count is None:
        shots_count = config.default_shots
    state = simulate(circuit, config=config)
    return _sample(state, circuit.qubit_count, shots_count, _as_generator(seed), config.atol)


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------

@dataclass
class SimulationResult:
    """
    Result of a quantum circuit simulation.

    Attributes
    ----------
    statevector : Ket
        Final state (length 2^n).
    readings : list[str]
        Sampled bit strings, one per shot (empty when no shots were taken).
    qubit_count : int
        Number of qubits.
    """

    statevector: Ket
    readings: list[str] = field(default_factory=list)
    qubit_count: int = 0

    @property
    def shots(self) -> int:
        return len(self.readings)

    def counts(self) -> dict[str, int]:
        """Number of occurrences of each reading, sorted by label."""
        return dict(sorted(Counter(self.readings).items()))

    def probabilities(self) -> dict[str, float]:
        """
        Born probabilities of the final state.

        Returns
        -------
        dict[str, float]
            Basis label to probability. Only includes states with
            probability > 1e-10.
        """
        probs = self.statevector.probabilities()
        return {
            format(i, f"0{self.qubit_count}b"): float(p)
            for i, p in enumerate(probs)
            if p > 1e-10
        }

    def expectation(self, observable: Operator) -> complex:
        """Expectation value <psi|O|psi> of a 2^n x 2^n observable."""
        return expected_value(observable, self.statevector)


class StatevectorBackend:
    """
    Statevector quantum simulator with an owned random generator.

    Parameters
    ----------
    seed : int | None
        Random seed for measurement sampling. Falls back to ``config.seed``.
    config : SimulatorConfig, optional
        Simulator settings. Defaults to ``DEFAULT_CONFIG``.

    Example
    -------
    >>> from qpipe import QuantumCircuit, StatevectorBackend, hadamard, control_x
    >>> qc = QuantumCircuit(2).push_gate(hadamard(1)).push_gate(control_x(1, 2))
    >>> result = StatevectorBackend(seed=42).run(qc, shots=1000)
    >>> sorted(result.counts())
    ['00', '11']
    """

    def __init__(self, seed: int | None = None, config: SimulatorConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG
        self._rng = np.random.default_rng(seed if seed is not None else self._config.seed)

    @property
    def config(self) -> SimulatorConfig:
        return self._config

    def run(
        self,
        circuit: QuantumCircuit,
        shots: int = 0,
        initial_state: Ket | None = None,
    ) -> SimulationResult:
        """
        Simulate a quantum circuit.

        Parameters
        ----------
        circuit : QuantumCircuit
            Circuit to simulate.
        shots : int
            Number of measurement shots. 0 = no sampling (statevector only).
        initial_state : Ket, optional
            Initial state. Defaults to |0...0>.

        Returns
        -------
        SimulationResult
        """
        n = circuit.qubit_count
        state = simulate(circuit, initial_state=initial_state, config=self._config)
        readings = (
            _sample(state, n, shots, self._rng, self._config.atol) if shots > 0 else []
        )
        return SimulationResult(statevector=state, readings=readings, qubit_count=n)

    def statevector(self, circuit: QuantumCircuit) -> Ket:
        """Convenience: final state only."""
        return self.run(circuit).statevector
