"""
qpipe: state-vector simulation of quantum circuits.

Features:
- Ket / Bra / Operator primitives on complex128 numpy arrays
- Closed gate family with exact inverses, plus custom unitaries
- Bit-indexed gate application in O(2^n) per gate
- Seeded shot sampling with an explicit numpy Generator

Quick Start:
    >>> from qpipe import QuantumCircuit, hadamard, control_x, simulate_shots
    >>> qc = QuantumCircuit(qubit_count=2)
    >>> qc.push_gate(hadamard(1)).push_gate(control_x(1, 2))
    QuantumCircuit(qubit_count=2, bit_count=0, steps=2)
    >>> sorted(set(simulate_shots(qc, 200, seed=7)))
    ['00', '11']
"""
__version__ = "0.1.0"

# Errors and configuration
from .errors import QpipeError, DomainError, StructuralError
from .config import SimulatorConfig, DEFAULT_CONFIG
from .logging import get_logger, set_log_level

# Linear algebra
from .linalg import (
    Ket,
    Bra,
    Operator,
    Eigen,
    kron,
    approx_equal,
    get_num_qubits,
    get_num_bodies,
    fock,
    spin_up,
    spin_down,
    normalize,
    ket2dm,
    fock_dm,
    expected_value,
    commute,
    anticommute,
    eye,
    sigma_p,
    sigma_m,
    create,
    destroy,
    number_op,
    coherent,
    moyal,
    wigner,
)
from .multibody import MultiBodySystem, get_embed_operator

# Gates
from .gates import (
    Gate,
    BuiltinGate,
    GateKind,
    UnitaryGate,
    InversePolicy,
    sigma_x,
    sigma_y,
    sigma_z,
    hadamard,
    phase,
    phase_dagger,
    pi_8,
    pi_8_dagger,
    x_90,
    rotation,
    rotation_x,
    rotation_y,
    rotation_z,
    phase_shift,
    universal,
    control_x,
    control_z,
    toffoli,
    iswap,
    iswap_dagger,
    unitary_gate,
    STD_GATES,
    PAULI_GATES,
)

# Circuits and simulation
from .circuit import QuantumCircuit
from .backends.statevector import (
    StatevectorBackend,
    SimulationResult,
    apply_gate,
    simulate,
    simulate_shots,
)
from .instructions import (
    Instruction,
    JobStatus,
    circuit_to_instructions,
    instructions_to_circuit,
)

__all__ = [
    # Errors and configuration
    'QpipeError',
    'DomainError',
    'StructuralError',
    'SimulatorConfig',
    'DEFAULT_CONFIG',
    'get_logger',
    'set_log_level',
    # Linear algebra
    'Ket',
    'Bra',
    'Operator',
    'Eigen',
    'kron',
    'approx_equal',
    'get_num_qubits',
    'get_num_bodies',
    'fock',
    'spin_up',
    'spin_down',
    'normalize',
    'ket2dm',
    'fock_dm',
    'expected_value',
    'commute',
    'anticommute',
    'eye',
    'sigma_p',
    'sigma_m',
    'create',
    'destroy',
    'number_op',
    'coherent',
    'moyal',
    'wigner',
    'MultiBodySystem',
    'get_embed_operator',
    # Gates
    'Gate',
    'BuiltinGate',
    'GateKind',
    'UnitaryGate',
    'InversePolicy',
    'sigma_x',
    'sigma_y',
    'sigma_z',
    'hadamard',
    'phase',
    'phase_dagger',
    'pi_8',
    'pi_8_dagger',
    'x_90',
    'rotation',
    'rotation_x',
    'rotation_y',
    'rotation_z',
    'phase_shift',
    'universal',
    'control_x',
    'control_z',
    'toffoli',
    'iswap',
    'iswap_dagger',
    'unitary_gate',
    'STD_GATES',
    'PAULI_GATES',
    # Circuits and simulation
    'QuantumCircuit',
    'StatevectorBackend',
    'SimulationResult',
    'apply_gate',
    'simulate',
    'simulate_shots',
    'Instruction',
    'JobStatus',
    'circuit_to_instructions',
    'instructions_to_circuit',
]
