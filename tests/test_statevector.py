"""Tests for statevector simulation backend."""

from itertools import permutations

import numpy as np
import pytest

from qpipe import gates as g
from qpipe.backends.statevector import (
    StatevectorBackend,
    apply_gate,
    simulate,
    simulate_shots,
    spectator_offsets,
    target_offsets,
)
from qpipe.circuit import QuantumCircuit
from qpipe.config import SimulatorConfig
from qpipe.errors import DomainError
from qpipe.linalg import Ket, Operator, fock, kron, spin_down, spin_up
from qpipe.multibody import MultiBodySystem, get_embed_operator


@pytest.fixture
def backend():
    return StatevectorBackend(seed=42)


@pytest.fixture
def bell_circuit():
    qc = QuantumCircuit(qubit_count=2)
    qc.push_gate([g.hadamard(1)])
    qc.push_gate([g.control_x(1, 2)])
    return qc


def random_state(n_qubits, seed):
    rng = np.random.default_rng(seed)
    data = rng.normal(size=2**n_qubits) + 1j * rng.normal(size=2**n_qubits)
    return Ket(data / np.linalg.norm(data))


# ---------------------------------------------------------------------------
# Index arithmetic
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("targets,n", [
    ((1,), 1), ((2,), 3), ((3, 1), 3), ((2, 4), 5), ((1, 2, 3), 3), ((4, 1, 3), 6),
])
def test_offsets_partition_index_space(targets, n):
    b0 = spectator_offsets(targets, n)
    b1 = target_offsets(targets, n)
    combined = (b0[:, None] | b1[None, :]).ravel()
    assert sorted(combined.tolist()) == list(range(2**n))
    assert not np.any(b0[:, None] & b1[None, :])


def test_target_offsets_order():
    # First target is the most-significant bit of the local index
    np.testing.assert_array_equal(target_offsets((1, 3), 3), [0, 1, 4, 5])
    np.testing.assert_array_equal(target_offsets((3, 1), 3), [0, 4, 1, 5])


def test_spectator_offsets_lowest_spectator_slowest():
    np.testing.assert_array_equal(spectator_offsets((2,), 3), [0, 1, 4, 5])


def test_spectator_offsets_range():
    full = spectator_offsets((1,), 4)
    np.testing.assert_array_equal(spectator_offsets((1,), 4, 2, 6), full[2:6])


# ---------------------------------------------------------------------------
# apply_gate
# ---------------------------------------------------------------------------

def test_apply_gate_in_place():
    psi = fock(0, 2)
    result = apply_gate(psi, g.hadamard(1))
    assert result is psi
    assert psi.isclose(1 / np.sqrt(2) * (fock(0, 2) + fock(1, 2)))


def test_apply_gate_target_outside_state():
    with pytest.raises(DomainError):
        apply_gate(fock(0, 2), g.hadamard(2))


def test_apply_gate_non_qubit_state():
    with pytest.raises(DomainError):
        apply_gate(Ket([1.0, 0.0, 0.0]), g.hadamard(1))


@pytest.mark.parametrize("target", [1, 2, 3, 4])
@pytest.mark.parametrize("seed", [0, 1, 2])
def test_engine_matches_embedded_operator(target, seed):
    n = 4
    rng = np.random.default_rng(seed)
    theta, phi, lam = rng.uniform(-np.pi, np.pi, size=3)
    gate = g.universal(target, theta, phi, lam)
    psi = random_state(n, seed)

    full = get_embed_operator(gate.operator(), target, MultiBodySystem(n))
    expected = full @ psi
    actual = apply_gate(psi.copy(), gate)
    np.testing.assert_allclose(actual, expected, atol=1e-10)


@pytest.mark.parametrize("chunk_size", [1, 2, 3, 4096])
def test_chunk_size_does_not_change_result(chunk_size):
    psi = random_state(5, 11)
    gate = g.toffoli(4, 1, 3)
    reference = apply_gate(psi.copy(), gate)
    chunked = apply_gate(psi.copy(), gate, SimulatorConfig(chunk_size=chunk_size))
    np.testing.assert_allclose(chunked, reference, atol=1e-12)


def test_two_qubit_gate_matches_kron():
    psi = random_state(3, 5)
    # cz on qubits 2, 3 equals I ⊗ CZ
    full = kron(Operator(np.eye(2)), Operator(g.CZ))
    np.testing.assert_allclose(apply_gate(psi.copy(), g.control_z(2, 3)), full @ psi, atol=1e-12)


def test_custom_unitary_gate():
    psi = fock(0, 4)
    apply_gate(psi, g.unitary_gate(np.kron(g.H, g.H), [1, 2]))
    np.testing.assert_allclose(psi, [0.5, 0.5, 0.5, 0.5], atol=1e-12)


# ---------------------------------------------------------------------------
# simulate
# ---------------------------------------------------------------------------

def test_zero_state():
    np.testing.assert_allclose(simulate(QuantumCircuit(1)), [1, 0], atol=1e-12)


def test_multi_qubit_zero_state():
    expected = np.zeros(16, dtype=np.complex128)
    expected[0] = 1.0
    np.testing.assert_allclose(simulate(QuantumCircuit(4)), expected, atol=1e-12)


def test_hadamard_on_first_of_two_qubits():
    qc = QuantumCircuit(2).push_gate(g.hadamard(1))
    np.testing.assert_allclose(simulate(qc), [1 / np.sqrt(2), 0, 1 / np.sqrt(2), 0], atol=1e-12)


def test_bell_state(bell_circuit):
    up, down = spin_up(), spin_down()
    expected = 1 / np.sqrt(2.0) * (kron(up, up) + kron(down, down))
    assert simulate(bell_circuit).isclose(expected)


def test_phase_kickback():
    up, down = spin_up(), spin_down()
    minus = 1 / np.sqrt(2.0) * (up - down)
    qc = QuantumCircuit(qubit_count=2)
    qc.push_gate([g.hadamard(1), g.sigma_x(2)])
    qc.push_gate([g.hadamard(2)])
    qc.push_gate([g.control_x(1, 2)])
    assert simulate(qc).isclose(kron(minus, minus))


def test_circuit_then_inverse_is_identity():
    qc = QuantumCircuit(3)
    gates = [
        g.hadamard(1), g.rotation(2, 0.3, 1.1), g.toffoli(1, 2, 3),
        g.iswap(3, 1), g.universal(2, 0.5, -0.2, 0.9), g.pi_8(3),
    ]
    for gate in gates:
        qc.push_gate(gate)
    for gate in reversed(gates):
        qc.push_gate(gate.inverse())
    np.testing.assert_allclose(simulate(qc), fock(0, 8), atol=1e-10)


def test_simulate_from_initial_state():
    start = fock(3, 4)
    qc = QuantumCircuit(2).push_gate(g.sigma_x(1))
    assert simulate(qc, initial_state=start).isclose(fock(1, 4))
    assert start.isclose(fock(3, 4))
    with pytest.raises(DomainError):
        simulate(qc, initial_state=fock(0, 8))


def relabel_qubits(state, mapping, n):
    # Move the amplitude of each basis index to the index with qubit q written as mapping[q]
    data = np.asarray(state)
    out = np.zeros_like(data)
    for i in range(2**n):
        j = 0
        for q in range(1, n + 1):
            if (i >> (n - q)) & 1:
                j |= 1 << (n - mapping[q])
        out[j] = data[i]
    return out


@pytest.mark.parametrize("perm", list(permutations((1, 2, 3))))
def test_reordered_circuit_simulates_relabelled_state(perm):
    qc = QuantumCircuit(3)
    qc.push_gate([g.hadamard(1), g.rotation_y(2, 0.7)])
    qc.push_gate(g.toffoli(1, 2, 3))
    qc.push_gate(g.iswap(3, 1))
    qc.push_gate(g.universal(2, 0.4, -0.3, 1.2))
    qc.push_gate(g.control_x(3, 2))
    mapping = dict(zip((1, 2, 3), perm))
    expected = relabel_qubits(simulate(qc), mapping, 3)
    np.testing.assert_allclose(simulate(qc.reordered(mapping)), expected, atol=1e-12)


# ---------------------------------------------------------------------------
# Shot sampling
# ---------------------------------------------------------------------------

def test_bell_readings(bell_circuit):
    readings = simulate_shots(bell_circuit, 200, seed=3)
    assert len(readings) == 200
    assert set(readings) <= {"00", "11"}
    assert "00" in readings and "11" in readings


def test_default_shot_count(bell_circuit):
    assert len(simulate_shots(bell_circuit)) == 100
    assert len(simulate_shots(bell_circuit, config=SimulatorConfig(default_shots=7))) == 7


def test_seeded_sampling_reproducible(bell_circuit):
    assert simulate_shots(bell_circuit, 50, seed=9) == simulate_shots(bell_circuit, 50, seed=9)


def test_sampling_accepts_generator(bell_circuit):
    a = simulate_shots(bell_circuit, 30, seed=np.random.default_rng(4))
    b = simulate_shots(bell_circuit, 30, seed=np.random.default_rng(4))
    assert a == b


def test_reading_labels_are_zero_padded():
    qc = QuantumCircuit(3).push_gate(g.sigma_x(3))
    assert simulate_shots(qc, 5, seed=0) == ["001"] * 5


def test_negative_shots_raise(bell_circuit):
    with pytest.raises(DomainError):
        simulate_shots(bell_circuit, -1)


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------

def test_backend_statevector_only(backend, bell_circuit):
    result = backend.run(bell_circuit)
    assert result.readings == []
    assert result.shots == 0
    assert result.qubit_count == 2
    assert result.probabilities() == pytest.approx({"00": 0.5, "11": 0.5})


def test_backend_counts(backend, bell_circuit):
    result = backend.run(bell_circuit, shots=1000)
    counts = result.counts()
    assert set(counts) == {"00", "11"}
    assert sum(counts.values()) == 1000
    assert abs(counts["00"] - 500) < 100


def test_backend_seed_reproducible(bell_circuit):
    a = StatevectorBackend(seed=1).run(bell_circuit, shots=64).readings
    b = StatevectorBackend(seed=1).run(bell_circuit, shots=64).readings
    assert a == b


def test_backend_seed_from_config(bell_circuit):
    config = SimulatorConfig(seed=5)
    a = StatevectorBackend(config=config).run(bell_circuit, shots=32).readings
    b = StatevectorBackend(config=config).run(bell_circuit, shots=32).readings
    assert a == b


def test_backend_expectation(backend):
    qc = QuantumCircuit(1).push_gate(g.sigma_x(1))
    result = backend.run(qc)
    assert result.expectation(Operator(g.Z)) == pytest.approx(-1.0)


def test_backend_statevector_helper(backend, bell_circuit):
    sv = backend.statevector(bell_circuit)
    np.testing.assert_allclose(sv, [1 / np.sqrt(2), 0, 0, 1 / np.sqrt(2)], atol=1e-12)
