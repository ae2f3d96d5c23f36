"""Tests for QuantumCircuit class."""

import logging
import uuid

import pytest

from qpipe import gates as g
from qpipe.circuit import QuantumCircuit
from qpipe.errors import DomainError, StructuralError
from qpipe.logging import get_logger


@pytest.fixture
def bell_circuit():
    qc = QuantumCircuit(qubit_count=2)
    qc.push_gate([g.hadamard(1)])
    qc.push_gate([g.control_x(1, 2)])
    return qc


# ---------------------------------------------------------------------------
# Basic construction
# ---------------------------------------------------------------------------

def test_empty_circuit():
    qc = QuantumCircuit(qubit_count=3)
    assert qc.qubit_count == 3
    assert qc.bit_count == 0
    assert qc.depth == 0
    assert qc.num_gates == 0
    assert qc.pipeline == ()
    assert isinstance(qc.id, uuid.UUID)


def test_circuits_get_distinct_ids():
    assert QuantumCircuit(1).id != QuantumCircuit(1).id


def test_invalid_qubit_count():
    with pytest.raises(DomainError):
        QuantumCircuit(0)


# ---------------------------------------------------------------------------
# Push / pop
# ---------------------------------------------------------------------------

def test_push_pop_gate():
    qc = QuantumCircuit(qubit_count=2)
    qc.push_gate([g.hadamard(1)])
    assert len(qc.pipeline) == 1

    qc.push_gate([g.control_x(1, 2)])
    assert len(qc.pipeline) == 2
    qc.pop_gate()
    assert len(qc.pipeline) == 1

    qc.push_gate(g.control_x(1, 2))
    assert len(qc.pipeline) == 2
    assert qc.pipeline[1] == (g.control_x(1, 2),)


def test_method_chaining():
    qc = QuantumCircuit(2)
    result = qc.push_gate(g.hadamard(1)).push_gate(g.control_x(1, 2))
    assert result is qc
    assert qc.num_gates == 2


def test_pop_empty_raises():
    with pytest.raises(StructuralError):
        QuantumCircuit(1).pop_gate()


def test_push_empty_step_raises():
    qc = QuantumCircuit(1)
    with pytest.raises(StructuralError):
        qc.push_gate([])
    assert qc.depth == 0


def test_push_non_gate_raises():
    qc = QuantumCircuit(1)
    with pytest.raises(StructuralError):
        qc.push_gate([g.hadamard(1), "x"])
    assert qc.depth == 0


def test_gate_outside_circuit_raises():
    qc = QuantumCircuit(qubit_count=2)
    with pytest.raises(DomainError):
        qc.push_gate(g.control_x(1, 3))


def test_failed_push_leaves_pipeline_unchanged(bell_circuit):
    before = bell_circuit.pipeline
    with pytest.raises(DomainError):
        bell_circuit.push_gate([g.hadamard(1), g.sigma_x(5)])
    assert bell_circuit.pipeline == before


def test_pipeline_is_read_only(bell_circuit):
    view = bell_circuit.pipeline
    assert isinstance(view, tuple)
    assert all(isinstance(step, tuple) for step in view)
    with pytest.raises(TypeError):
        view[0] = (g.sigma_x(1),)


def test_shared_target_step_logs_warning(caplog):
    logger = get_logger("qpipe.circuit")
    logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.WARNING, logger="qpipe.circuit"):
            QuantumCircuit(2).push_gate([g.hadamard(1), g.control_x(1, 2)])
    finally:
        logger.removeHandler(caplog.handler)
    assert "share target" in caplog.text


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def test_counts_and_depth():
    qc = QuantumCircuit(3)
    qc.push_gate([g.hadamard(1), g.hadamard(2), g.hadamard(3)])
    qc.push_gate(g.control_x(1, 2))
    qc.push_gate([g.rotation_x(3, 0.2), g.sigma_x(1)])
    qc.push_gate(g.hadamard(2))
    assert qc.depth == 4
    assert qc.num_gates == 7
    assert qc.gate_counts() == {"h": 4, "cx": 1, "rx": 1, "x": 1}


def test_gates_flattened_in_order(bell_circuit):
    assert bell_circuit.gates() == [g.hadamard(1), g.control_x(1, 2)]


# ---------------------------------------------------------------------------
# Reordering and widening
# ---------------------------------------------------------------------------

def test_reordered_grows_register(bell_circuit):
    larger = bell_circuit.reordered({1: 3, 2: 1})
    assert larger.pipeline[0][0] == g.hadamard(3)
    assert larger.pipeline[1][0] == g.control_x(3, 1)
    assert larger.qubit_count == 3


def test_reordered_keeps_unused_lines():
    qc = QuantumCircuit(qubit_count=4)
    qc.push_gate([g.hadamard(2), g.hadamard(3)])
    swapped = qc.reordered({2: 1, 1: 2})
    assert swapped.pipeline[0][0] == g.hadamard(1)
    assert swapped.pipeline[0][1] == g.hadamard(3)
    assert swapped.qubit_count == 4


def test_reordered_preserves_structure_and_parameters():
    qc = QuantumCircuit(3)
    qc.push_gate([g.universal(1, 0.1, 0.2, 0.3), g.sigma_y(2)])
    qc.push_gate(g.toffoli(1, 2, 3))
    moved = qc.reordered({1: 3, 3: 1})
    assert [len(step) for step in moved.pipeline] == [2, 1]
    assert moved.pipeline[0][0] == g.universal(3, 0.1, 0.2, 0.3)
    assert moved.pipeline[1][0] == g.toffoli(3, 2, 1)
    assert moved.bit_count == qc.bit_count


def test_reordered_does_not_mutate_original(bell_circuit):
    before = bell_circuit.pipeline
    bell_circuit.reordered({1: 2, 2: 1})
    assert bell_circuit.pipeline == before
    assert bell_circuit.qubit_count == 2


def test_reordered_non_injective_raises(bell_circuit):
    with pytest.raises(StructuralError):
        bell_circuit.reordered({1: 2, 2: 2})


def test_reordered_incomplete_mapping_raises(bell_circuit):
    with pytest.raises(StructuralError):
        bell_circuit.reordered({2: 1})


def test_reordered_non_positive_raises(bell_circuit):
    with pytest.raises(DomainError):
        bell_circuit.reordered({1: 0, 2: 1})


def test_widened(bell_circuit):
    wide = bell_circuit.widened(5)
    assert wide.qubit_count == 5
    assert wide.pipeline == bell_circuit.pipeline
    assert wide.id != bell_circuit.id
    with pytest.raises(DomainError):
        bell_circuit.widened(1)


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def test_repr_and_str(bell_circuit):
    assert repr(bell_circuit) == "QuantumCircuit(qubit_count=2, bit_count=0, steps=2)"
    text = str(bell_circuit)
    assert "step 1: h[1]" in text
    assert "step 2: cx[1, 2]" in text
