"""
Instruction records exchanged with job-submission and transpilation layers.

A circuit is flattened into a list of :class:`Instruction` records, one per
gate, in execution order. Qubit indices stay 1-based. Only gates from the
built-in family can be expressed this way; a custom unitary has no
symbol the receiving side could rebuild it from.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable

from qpipe.circuit import QuantumCircuit
from qpipe.errors import StructuralError
from qpipe.gates import BuiltinGate, GateKind


class JobStatus(enum.IntEnum):
    """Lifecycle of a submitted circuit job."""

    UNKNOWN = 0
    QUEUED = 1
    RUNNING = 2
    COMPLETED = 3
    FAILED = 4
    CANCELED = 5


@dataclass(frozen=True)
class Instruction:
    """A single gate, as seen by a submission layer."""
    symbol: str
    qubits: tuple[int, ...]
    parameters: tuple[tuple[str, float], ...] = ()  # (name, value) pairs
    classical_bits: tuple[int, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "parameters": [{"name": n, "value": v} for n, v in self.parameters],
            "qubits": list(self.qubits),
            "classical_bits": list(self.classical_bits),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Instruction:
        return cls(
            symbol=data["symbol"],
            qubits=tuple(data["qubits"]),
            parameters=tuple(
                (p["name"], float(p["value"])) for p in data.get("parameters", ())
            ),
            classical_bits=tuple(data.get("classical_bits", ())),
        )


def circuit_to_instructions(circuit: QuantumCircuit) -> list[Instruction]:
    """
    Flatten a circuit's pipeline into instruction records.

    Raises
    ------
    StructuralError
        If the circuit holds a custom unitary gate.
    """
    instructions = []
    for gate in circuit.gates():
        if not isinstance(gate, BuiltinGate):
            raise StructuralError(
                f"Gate '{gate.instruction_symbol}' is a custom unitary and cannot be "
                f"serialized as an instruction"
            )
        instructions.append(
            Instruction(
                symbol=gate.instruction_symbol,
                qubits=gate.targets,
                parameters=tuple(zip(gate.kind.param_names, gate.parameters)),
            )
        )
    return instructions


def instructions_to_circuit(
    instructions: Iterable[Instruction], qubit_count: int, bit_count: int = 0
) -> QuantumCircuit:
    """
    Rebuild a circuit from instruction records, one gate per step.

    Raises
    ------
    StructuralError
        If a symbol is unknown or its parameters do not match the gate.
    DomainError
        If a qubit lies outside ``qubit_count``.
    """
    circuit = QuantumCircuit(qubit_count=qubit_count, bit_count=bit_count)
    for inst in instructions:
        try:
            kind = GateKind.from_symbol(inst.symbol)
        except KeyError as exc:
            raise StructuralError(str(exc)) from exc
        names = tuple(name for name, _ in inst.parameters)
        if names != kind.param_names:
            raise StructuralError(
                f"Gate '{kind.symbol}' expects parameters {kind.param_names}, got {names}"
            )
        circuit.push_gate(
            BuiltinGate(kind, inst.qubits, [value for _, value in inst.parameters])
        )
    return circuit
