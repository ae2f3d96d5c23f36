"""
Quantum circuit representation.

A circuit is a fixed-size qubit register plus an append-only pipeline of
steps. Each step is a non-empty, ordered tuple of gates; the simulator
runs steps in order and the gates of a step in listed order.

Example
-------
>>> from qpipe import QuantumCircuit, hadamard, control_x
>>> qc = QuantumCircuit(qubit_count=2)
>>> qc.push_gate(hadamard(1)).push_gate(control_x(1, 2))
QuantumCircuit(qubit_count=2, bit_count=0, steps=2)
>>> qc.gate_counts()
{'h': 1, 'cx': 1}
"""

from __future__ import annotations

import uuid
from collections import Counter
from typing import Iterable, Mapping, Sequence, Union

from qpipe.errors import DomainError, StructuralError
from qpipe.gates import Gate
from qpipe.logging import get_logger

logger = get_logger(__name__)

Step = tuple[Gate, ...]


class QuantumCircuit:
    """
    Quantum circuit with ``qubit_count`` qubits and ``bit_count`` classical bits.

    Qubits are numbered from 1. The counts and the ``id`` are fixed at
    construction; only the pipeline changes, through :meth:`push_gate` and
    :meth:`pop_gate`.

    Parameters
    ----------
    qubit_count : int
        Number of quantum bits.
    bit_count : int, optional
        Number of classical bits. Defaults to 0.
    """

    def __init__(self, qubit_count: int, bit_count: int = 0) -> None:
        if qubit_count < 1:
            raise DomainError(f"Need at least 1 qubit, got {qubit_count}")
        if bit_count < 0:
            raise DomainError(f"Classical bit count must be non-negative, got {bit_count}")
        self._qubit_count = qubit_count
        self._bit_count = bit_count
        self._id = uuid.uuid4()
        self._pipeline: list[Step] = []

    # -- Properties ---------------------------------------------------------

    @property
    def qubit_count(self) -> int:
        return self._qubit_count

    @property
    def bit_count(self) -> int:
        return self._bit_count

    @property
    def id(self) -> uuid.UUID:
        return self._id

    @property
    def pipeline(self) -> tuple[Step, ...]:
        """Read-only view of the steps, in execution order."""
        return tuple(self._pipeline)

    @property
    def depth(self) -> int:
        """Number of steps in the pipeline."""
        return len(self._pipeline)

    @property
    def num_gates(self) -> int:
        """Total number of gates over all steps."""
        return sum(len(step) for step in self._pipeline)

    # -- Internal helpers ---------------------------------------------------

    def _validate_gate(self, gate: Gate) -> None:
        for q in gate.targets:
            if q > self._qubit_count:
                raise DomainError(
                    f"Gate '{gate.instruction_symbol}' targets qubit {q}, "
                    f"outside the {self._qubit_count}-qubit circuit"
                )

    def _as_step(self, gate_or_step: Union[Gate, Iterable[Gate]]) -> Step:
        if isinstance(gate_or_step, Gate):
            return (gate_or_step,)
        step = tuple(gate_or_step)
        if not step:
            raise StructuralError("Cannot push an empty step")
        for gate in step:
            if not isinstance(gate, Gate):
                raise StructuralError(
                    f"A step may only contain gates, got {type(gate).__name__}"
                )
        return step

    # -- Pipeline -----------------------------------------------------------

    def push_gate(self, gate_or_step: Union[Gate, Sequence[Gate]]) -> QuantumCircuit:
        """
        Append one gate, or one step of gates, to the pipeline.

        Every target of every gate is checked before anything is appended,
        so a failed push leaves the pipeline unchanged.

        Raises
        ------
        DomainError
            If a gate targets a qubit beyond ``qubit_count``.
        StructuralError
            If the step is empty or holds something other than gates.
        """
        step = self._as_step(gate_or_step)
        for gate in step:
            self._validate_gate(gate)

        seen: set[int] = set()
        for gate in step:
            shared = seen.intersection(gate.targets)
            if shared:
                logger.warning(
                    "Step gates share target(s) %s; they will run sequentially",
                    sorted(shared),
                )
            seen.update(gate.targets)

        self._pipeline.append(step)
        return self

    def pop_gate(self) -> QuantumCircuit:
        """Remove the last step."""
        if not self._pipeline:
            raise StructuralError("Cannot pop from an empty pipeline")
        self._pipeline.pop()
        return self

    # -- Queries ------------------------------------------------------------

    def gate_counts(self) -> dict[str, int]:
        """Number of gates per instruction symbol."""
        counts = Counter(
            gate.instruction_symbol for step in self._pipeline for gate in step
        )
        return dict(counts)

    def gates(self) -> list[Gate]:
        """All gates, flattened in execution order."""
        return [gate for step in self._pipeline for gate in step]

    def referenced_qubits(self) -> set[int]:
        return {q for step in self._pipeline for gate in step for q in gate.targets}

    # -- Transformations ----------------------------------------------------

    def _copy_into(self, qubit_count: int, steps: Iterable[Step]) -> QuantumCircuit:
        circuit = QuantumCircuit(qubit_count=qubit_count, bit_count=self._bit_count)
        for step in steps:
            circuit.push_gate(step)
        return circuit

    def widened(self, qubit_count: int) -> QuantumCircuit:
        """
        Copy of this circuit in a register of ``qubit_count`` qubits.

        Raises
        ------
        DomainError
            If ``qubit_count`` is smaller than the current register.
        """
        if qubit_count < self._qubit_count:
            raise DomainError(
                f"Cannot widen a {self._qubit_count}-qubit circuit to {qubit_count} qubits"
            )
        return self._copy_into(qubit_count, self._pipeline)

    def reordered(self, qubit_mapping: Mapping[int, int]) -> QuantumCircuit:
        """
        Copy of this circuit with gate targets relabelled.

        Qubits missing from ``qubit_mapping`` keep their index. The new
        circuit has ``max(qubit_count, max(qubit_mapping.values()))`` qubits;
        this circuit is not modified.

        Parameters
        ----------
        qubit_mapping : mapping of int to int
            Old 1-based qubit index to new 1-based qubit index.

        Raises
        ------
        DomainError
            If an index in the mapping is not positive.
        StructuralError
            If two qubits map to the same index, or a qubit that is mapped
            onto is still used by a gate but not mapped away itself.
        """
        mapping = dict(qubit_mapping)
        for old, new in mapping.items():
            if old < 1 or new < 1:
                raise DomainError(f"Invalid mapping {old} -> {new}: qubit indices start at 1")

        if len(set(mapping.values())) != len(mapping):
            raise StructuralError(f"Qubit mapping {mapping} is not injective")

        used = self.referenced_qubits()
        for new in mapping.values():
            if new not in mapping and new in used:
                raise StructuralError(
                    f"Qubit {new} is a mapping destination but is still in use; "
                    f"it must be remapped as well"
                )

        qubit_count = max([self._qubit_count, *mapping.values()])
        steps = (
            tuple(
                gate.with_targets([mapping.get(q, q) for q in gate.targets])
                for gate in step
            )
            for step in self._pipeline
        )
        return self._copy_into(qubit_count, steps)

    # -- Dunder methods -----------------------------------------------------

    def __len__(self) -> int:
        return len(self._pipeline)

    def __repr__(self) -> str:
        return (
            f"QuantumCircuit(qubit_count={self._qubit_count}, "
            f"bit_count={self._bit_count}, steps={len(self._pipeline)})"
        )

    def __str__(self) -> str:
        lines = [f"QuantumCircuit {self._id}: {self._qubit_count} qubits, {self._bit_count} bits"]
        for i, step in enumerate(self._pipeline, start=1):
            gates = ", ".join(
                f"{g.instruction_symbol}{list(g.targets)}" for g in step
            )
            lines.append(f"  step {i}: {gates}")
        return "\n".join(lines)
