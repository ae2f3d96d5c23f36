"""
Quantum gate definitions.

Matrices
    Fixed gates are complex128 numpy arrays; parameterized gates are
    functions returning arrays. Multi-qubit matrices are written in the
    gate's own target order: the first target is the most-significant bit
    of the local index.

Gates
    :class:`BuiltinGate` pairs a :class:`GateKind` from the closed family
    with 1-based targets and real parameters. :class:`UnitaryGate` carries an
    arbitrary matrix together with an explicit :class:`InversePolicy`.

Gate categories:
    - Single-qubit: X, Y, Z, H, S, Sdg, T, Tdg, X90
    - Rotations: Rx, Ry, Rz, R (two-parameter), P (phase shift), U (universal)
    - Two-qubit: CX, CZ, iSWAP, iSWAPdg
    - Three-qubit: CCX (Toffoli)

Example
-------
>>> g = control_x(1, 2)
>>> g.instruction_symbol
'cx'
>>> g.inverse() == g
True
"""

from __future__ import annotations

import abc
import enum
from operator import index
from typing import Callable, NamedTuple, Optional, Sequence

import numpy as np
from numpy import ndarray

from qpipe.config import DEFAULT_ATOL
from qpipe.errors import DomainError, StructuralError
from qpipe.linalg import Ket, Operator

# Type alias
Matrix = ndarray

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / np.sqrt(2.0)

# ---------------------------------------------------------------------------
# Single-qubit fixed gates
# ---------------------------------------------------------------------------

X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
"""Pauli-X (NOT) gate."""

Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
"""Pauli-Y gate."""

Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)
"""Pauli-Z gate."""

H = np.array([[1, 1], [1, -1]], dtype=np.complex128) * _SQRT2_INV
"""Hadamard gate."""

S = np.array([[1, 0], [0, 1j]], dtype=np.complex128)
"""S (phase) gate: sqrt(Z)."""

Sdg = np.array([[1, 0], [0, -1j]], dtype=np.complex128)
"""S-dagger gate."""

T = np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128)
"""T (pi/8) gate: sqrt(S)."""

Tdg = np.array([[1, 0], [0, np.exp(-1j * np.pi / 4)]], dtype=np.complex128)
"""T-dagger gate."""

# ---------------------------------------------------------------------------
# Single-qubit parameterized gates
# ---------------------------------------------------------------------------

def Rx(theta: float) -> Matrix:
    """Rotation around X-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)


def Ry(theta: float) -> Matrix:
    """Rotation around Y-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=np.complex128)


def Rz(theta: float) -> Matrix:
    """Rotation around Z-axis by angle theta."""
    return np.array(
        [[np.exp(-1j * theta / 2), 0], [0, np.exp(1j * theta / 2)]],
        dtype=np.complex128,
    )


def R(theta: float, phi: float) -> Matrix:
    """
    Rotation by theta around the equatorial axis at azimuth phi.

    R(θ, φ) = [[cos(θ/2), -i e^(-iφ) sin(θ/2)],
               [-i e^(iφ) sin(θ/2), cos(θ/2)]]
    """
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array(
        [
            [c, -1j * np.exp(-1j * phi) * s],
            [-1j * np.exp(1j * phi) * s, c],
        ],
        dtype=np.complex128,
    )


def P(phi: float) -> Matrix:
    """Phase shift: diagonal with entries [1, exp(i*phi)]."""
    return np.array([[1, 0], [0, np.exp(1j * phi)]], dtype=np.complex128)


def U(theta: float, phi: float, lam: float) -> Matrix:
    """
    Universal single-qubit gate.

    U(θ, φ, λ) = [[cos(θ/2), -e^(iλ) sin(θ/2)],
                  [e^(iφ) sin(θ/2), e^(i(φ+λ)) cos(θ/2)]]
    """
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array(
        [
            [c, -np.exp(1j * lam) * s],
            [np.exp(1j * phi) * s, np.exp(1j * (phi + lam)) * c],
        ],
        dtype=np.complex128,
    )


X90 = Rx(np.pi / 2)
"""X rotation by pi/2."""

# ---------------------------------------------------------------------------
# Two-qubit fixed gates (4x4 matrices)
# ---------------------------------------------------------------------------

CX = np.array(
    [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]],
    dtype=np.complex128,
)
"""Controlled-NOT gate; control is the first target."""

CZ = np.diag([1, 1, 1, -1]).astype(np.complex128)
"""Controlled-Z gate."""

iSWAP = np.array(
    [[1, 0, 0, 0], [0, 0, 1j, 0], [0, 1j, 0, 0], [0, 0, 0, 1]],
    dtype=np.complex128,
)
"""iSWAP gate."""

iSWAPdg = np.array(
    [[1, 0, 0, 0], [0, 0, -1j, 0], [0, -1j, 0, 0], [0, 0, 0, 1]],
    dtype=np.complex128,
)
"""iSWAP-dagger gate."""

# ---------------------------------------------------------------------------
# Three-qubit gates (8x8 matrices)
# ---------------------------------------------------------------------------

CCX = np.eye(8, dtype=np.complex128)
CCX[6, 6] = 0
CCX[7, 7] = 0
CCX[6, 7] = 1
CCX[7, 6] = 1
"""Toffoli (CCX) gate; controls are the first two targets."""


# ---------------------------------------------------------------------------
# Gate kinds
# ---------------------------------------------------------------------------

class GateKind(enum.Enum):
    """Closed family of built-in gates: (instruction symbol, arity, parameter names)."""

    SIGMA_X = ("x", 1, ())
    SIGMA_Y = ("y", 1, ())
    SIGMA_Z = ("z", 1, ())
    HADAMARD = ("h", 1, ())
    PHASE = ("s", 1, ())
    PHASE_DAGGER = ("s_dag", 1, ())
    PI_8 = ("t", 1, ())
    PI_8_DAGGER = ("t_dag", 1, ())
    X_90 = ("x_90", 1, ())
    ROTATION = ("r", 1, ("theta", "phi"))
    ROTATION_X = ("rx", 1, ("theta",))
    ROTATION_Y = ("ry", 1, ("theta",))
    ROTATION_Z = ("rz", 1, ("theta",))
    PHASE_SHIFT = ("p", 1, ("phi",))
    UNIVERSAL = ("u", 1, ("theta", "phi", "lambda"))
    CONTROL_X = ("cx", 2, ())
    CONTROL_Z = ("cz", 2, ())
    TOFFOLI = ("ccx", 3, ())
    ISWAP = ("iswap", 2, ())
    ISWAP_DAGGER = ("iswap_dag", 2, ())

    def __init__(self, symbol: str, arity: int, param_names: tuple[str, ...]) -> None:
        self.symbol = symbol
        self.arity = arity
        self.param_names = param_names

    @classmethod
    def from_symbol(cls, symbol: str) -> GateKind:
        for kind in cls:
            if kind.symbol == symbol:
                return kind
        raise KeyError(f"Unknown gate symbol: '{symbol}'")


# ---------------------------------------------------------------------------
# Gate base
# ---------------------------------------------------------------------------

def _validate_targets(targets: Sequence[int]) -> tuple[int, ...]:
    targets = tuple(index(t) for t in targets)
    if not targets:
        raise StructuralError("A gate needs at least one target")
    for t in targets:
        if t < 1:
            raise DomainError(f"Target {t} is not a valid 1-based qubit index")
    if len(set(targets)) != len(targets):
        raise DomainError(f"Duplicate targets in {targets}")
    return targets


class Gate(abc.ABC):
    """
    A unitary acting on an ordered tuple of 1-based target qubits.

    Gates are immutable values. Targets are checked against a circuit's
    register only when the gate is pushed onto that circuit.
    """

    __slots__ = ("_targets",)

    def __init__(self, targets: Sequence[int]) -> None:
        self._targets = _validate_targets(targets)

    @property
    def targets(self) -> tuple[int, ...]:
        return self._targets

    @property
    def arity(self) -> int:
        return len(self._targets)

    @property
    @abc.abstractmethod
    def instruction_symbol(self) -> str:
        """Symbol used in gate counts and serialized instructions."""

    @property
    @abc.abstractmethod
    def parameters(self) -> tuple[float, ...]:
        """Real parameters, in radians."""

    @property
    @abc.abstractmethod
    def display_symbols(self) -> tuple[str, ...]:
        """One display label per target."""

    @abc.abstractmethod
    def operator(self) -> Operator:
        """Unitary in target-ordered basis (first target = most-significant bit)."""

    @abc.abstractmethod
    def inverse(self) -> Gate:
        """The gate undoing this one."""

    @abc.abstractmethod
    def with_targets(self, targets: Sequence[int]) -> Gate:
        """Copy of this gate acting on ``targets`` instead."""

    def __matmul__(self, other: Ket) -> Ket:
        if not isinstance(other, Ket):
            return NotImplemented
        from qpipe.backends.statevector import apply_gate
        return apply_gate(other.copy(), self)

    def _check_arity(self, targets: Sequence[int]) -> None:
        if len(targets) != self.arity:
            raise StructuralError(
                f"Gate '{self.instruction_symbol}' acts on {self.arity} qubit(s), "
                f"got {len(targets)} targets"
            )


# ---------------------------------------------------------------------------
# Built-in gates
# ---------------------------------------------------------------------------

_GREEK = {"theta": "θ", "phi": "φ", "lambda": "λ"}


class _Rule(NamedTuple):
    matrix: Callable[..., Matrix]
    inverse: Callable[["BuiltinGate"], "BuiltinGate"]
    display: Callable[["BuiltinGate"], tuple[str, ...]]


def _fixed(matrix: Matrix) -> Callable[[], Matrix]:
    return lambda: matrix


def _self_inverse(gate: BuiltinGate) -> BuiltinGate:
    return gate


def _becomes(kind: GateKind) -> Callable[[BuiltinGate], BuiltinGate]:
    return lambda gate: BuiltinGate(kind, gate.targets)


def _negate_angle(gate: BuiltinGate) -> BuiltinGate:
    return BuiltinGate(gate.kind, gate.targets, (-gate.parameters[0],))


def _x_90_inverse(gate: BuiltinGate) -> BuiltinGate:
    return BuiltinGate(GateKind.ROTATION_X, gate.targets, (-np.pi / 2,))


def _rotation_inverse(gate: BuiltinGate) -> BuiltinGate:
    theta, phi = gate.parameters
    return BuiltinGate(GateKind.ROTATION, gate.targets, (-theta, phi))


def _universal_inverse(gate: BuiltinGate) -> BuiltinGate:
    theta, phi, lam = gate.parameters
    return BuiltinGate(GateKind.UNIVERSAL, gate.targets, (-theta, -lam, -phi))


def _labels(*labels: str) -> Callable[[BuiltinGate], tuple[str, ...]]:
    return lambda gate: labels


def _parametric_label(prefix: str) -> Callable[[BuiltinGate], tuple[str, ...]]:
    def label(gate: BuiltinGate) -> tuple[str, ...]:
        values = ",".join(
            f"{_GREEK[name]}={value:.4f}"
            for name, value in zip(gate.kind.param_names, gate.parameters)
        )
        return (f"{prefix}({values})",)
    return label


_RULES: dict[GateKind, _Rule] = {
    GateKind.SIGMA_X: _Rule(_fixed(X), _self_inverse, _labels("X")),
    GateKind.SIGMA_Y: _Rule(_fixed(Y), _self_inverse, _labels("Y")),
    GateKind.SIGMA_Z: _Rule(_fixed(Z), _self_inverse, _labels("Z")),
    GateKind.HADAMARD: _Rule(_fixed(H), _self_inverse, _labels("H")),
    GateKind.PHASE: _Rule(_fixed(S), _becomes(GateKind.PHASE_DAGGER), _labels("S")),
    GateKind.PHASE_DAGGER: _Rule(_fixed(Sdg), _becomes(GateKind.PHASE), _labels("S†")),
    GateKind.PI_8: _Rule(_fixed(T), _becomes(GateKind.PI_8_DAGGER), _labels("T")),
    GateKind.PI_8_DAGGER: _Rule(_fixed(Tdg), _becomes(GateKind.PI_8), _labels("T†")),
    GateKind.X_90: _Rule(_fixed(X90), _x_90_inverse, _labels("X_90")),
    GateKind.ROTATION: _Rule(R, _rotation_inverse, _parametric_label("R")),
    GateKind.ROTATION_X: _Rule(Rx, _negate_angle, _parametric_label("Rx")),
    GateKind.ROTATION_Y: _Rule(Ry, _negate_angle, _parametric_label("Ry")),
    GateKind.ROTATION_Z: _Rule(Rz, _negate_angle, _parametric_label("Rz")),
    GateKind.PHASE_SHIFT: _Rule(P, _negate_angle, _parametric_label("P")),
    GateKind.UNIVERSAL: _Rule(U, _universal_inverse, _parametric_label("U")),
    GateKind.CONTROL_X: _Rule(_fixed(CX), _self_inverse, _labels("*", "X")),
    GateKind.CONTROL_Z: _Rule(_fixed(CZ), _self_inverse, _labels("*", "Z")),
    GateKind.TOFFOLI: _Rule(_fixed(CCX), _self_inverse, _labels("*", "*", "X")),
    GateKind.ISWAP: _Rule(_fixed(iSWAP), _becomes(GateKind.ISWAP_DAGGER), _labels("x", "x")),
    GateKind.ISWAP_DAGGER: _Rule(_fixed(iSWAPdg), _becomes(GateKind.ISWAP), _labels("x†", "x†")),
}


class BuiltinGate(Gate):
    """
    Gate from the closed family described by :class:`GateKind`.

    Parameters
    ----------
    kind : GateKind
        Gate family member.
    targets : sequence of int
        1-based target qubits; length must equal ``kind.arity``.
    parameters : sequence of float
        Angles in radians, one per ``kind.param_names`` entry.
    """

    __slots__ = ("_kind", "_parameters")

    def __init__(
        self, kind: GateKind, targets: Sequence[int], parameters: Sequence[float] = ()
    ) -> None:
        super().__init__(targets)
        if len(self._targets) != kind.arity:
            raise StructuralError(
                f"Gate '{kind.symbol}' acts on {kind.arity} qubit(s), got targets {self._targets}"
            )
        parameters = tuple(float(p) for p in parameters)
        if len(parameters) != len(kind.param_names):
            raise StructuralError(
                f"Gate '{kind.symbol}' requires {len(kind.param_names)} parameter(s), "
                f"got {len(parameters)}"
            )
        self._kind = kind
        self._parameters = parameters

    @property
    def kind(self) -> GateKind:
        return self._kind

    @property
    def instruction_symbol(self) -> str:
        return self._kind.symbol

    @property
    def parameters(self) -> tuple[float, ...]:
        return self._parameters

    @property
    def display_symbols(self) -> tuple[str, ...]:
        return _RULES[self._kind].display(self)

    def operator(self) -> Operator:
        return Operator(_RULES[self._kind].matrix(*self._parameters))

    def inverse(self) -> BuiltinGate:
        return _RULES[self._kind].inverse(self)

    def with_targets(self, targets: Sequence[int]) -> BuiltinGate:
        self._check_arity(targets)
        return BuiltinGate(self._kind, targets, self._parameters)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BuiltinGate):
            return NotImplemented
        return (
            self._kind is other._kind
            and self._targets == other._targets
            and np.allclose(self._parameters, other._parameters, atol=DEFAULT_ATOL, rtol=0)
        )

    def __hash__(self) -> int:
        return hash((self._kind, self._targets))

    def __repr__(self) -> str:
        params = f", parameters={self._parameters}" if self._parameters else ""
        return f"Gate('{self._kind.symbol}', targets={self._targets}{params})"


# ---------------------------------------------------------------------------
# Custom unitaries
# ---------------------------------------------------------------------------

class InversePolicy(enum.Enum):
    """How a :class:`UnitaryGate` is inverted."""

    CLOSED_FORM = "closed_form"   # inverse matrix supplied at construction
    HERMITIAN = "hermitian"       # the gate is its own inverse
    UNSUPPORTED = "unsupported"   # inverse() raises StructuralError


class UnitaryGate(Gate):
    """
    Gate backed by an explicit 2^k x 2^k matrix.

    Parameters
    ----------
    matrix : array_like or Operator
        Unitary in target-ordered basis.
    targets : sequence of int
        1-based target qubits.
    instruction_symbol : str
        Symbol used in gate counts.
    inverse_policy : InversePolicy
        How :meth:`inverse` behaves.
    inverse_matrix : array_like or Operator, optional
        Required with ``InversePolicy.CLOSED_FORM``, rejected otherwise.
    display_symbols : sequence of str, optional
        One label per target. Defaults to the upper-cased symbol.
    """

    __slots__ = ("_matrix", "_symbol", "_policy", "_inverse_matrix", "_display")

    def __init__(
        self,
        matrix,
        targets: Sequence[int],
        instruction_symbol: str = "unitary",
        inverse_policy: InversePolicy = InversePolicy.UNSUPPORTED,
        inverse_matrix=None,
        display_symbols: Optional[Sequence[str]] = None,
    ) -> None:
        super().__init__(targets)
        dim = 2 ** len(self._targets)
        op = _as_operator(matrix, dim, "matrix")

        if inverse_policy is InversePolicy.CLOSED_FORM:
            if inverse_matrix is None:
                raise StructuralError("CLOSED_FORM inverse policy requires an inverse matrix")
            inverse_op = _as_operator(inverse_matrix, dim, "inverse matrix")
        elif inverse_matrix is not None:
            raise StructuralError(
                f"An inverse matrix is only accepted with CLOSED_FORM, not {inverse_policy.name}"
            )
        else:
            inverse_op = None

        if inverse_policy is InversePolicy.HERMITIAN and not op.is_hermitian():
            raise StructuralError(
                f"Gate '{instruction_symbol}' is declared Hermitian but its matrix is not"
            )

        if display_symbols is None:
            display_symbols = (instruction_symbol.upper(),) * len(self._targets)
        display_symbols = tuple(display_symbols)
        if len(display_symbols) != len(self._targets):
            raise StructuralError(
                f"Expected {len(self._targets)} display symbols, got {len(display_symbols)}"
            )

        self._matrix = op.data
        self._symbol = instruction_symbol
        self._policy = inverse_policy
        self._inverse_matrix = None if inverse_op is None else inverse_op.data
        self._display = display_symbols

    @property
    def instruction_symbol(self) -> str:
        return self._symbol

    @property
    def parameters(self) -> tuple[float, ...]:
        return ()

    @property
    def display_symbols(self) -> tuple[str, ...]:
        return self._display

    @property
    def inverse_policy(self) -> InversePolicy:
        return self._policy

    def operator(self) -> Operator:
        return Operator(self._matrix)

    def inverse(self) -> UnitaryGate:
        if self._policy is InversePolicy.HERMITIAN:
            return self
        if self._policy is InversePolicy.CLOSED_FORM:
            if self._symbol.endswith("_dag"):
                symbol = self._symbol[: -len("_dag")]
            else:
                symbol = f"{self._symbol}_dag"
            return UnitaryGate(
                self._inverse_matrix,
                self._targets,
                instruction_symbol=symbol,
                inverse_policy=InversePolicy.CLOSED_FORM,
                inverse_matrix=self._matrix,
            )
        raise StructuralError(
            f"No inverse is defined for non-Hermitian gate '{self._symbol}'"
        )

    def with_targets(self, targets: Sequence[int]) -> UnitaryGate:
        self._check_arity(targets)
        return UnitaryGate(
            self._matrix,
            targets,
            instruction_symbol=self._symbol,
            inverse_policy=self._policy,
            inverse_matrix=self._inverse_matrix,
            display_symbols=self._display,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnitaryGate):
            return NotImplemented
        return (
            self._symbol == other._symbol
            and self._targets == other._targets
            and np.allclose(self._matrix, other._matrix, atol=DEFAULT_ATOL, rtol=0)
        )

    def __hash__(self) -> int:
        return hash((self._symbol, self._targets))

    def __repr__(self) -> str:
        return (
            f"UnitaryGate('{self._symbol}', targets={self._targets}, "
            f"policy={self._policy.name})"
        )


def _as_operator(matrix, dim: int, what: str) -> Operator:
    op = matrix if isinstance(matrix, Operator) else Operator(matrix)
    if op.shape != (dim, dim):
        raise StructuralError(f"Expected a {dim}x{dim} {what}, got shape {op.shape}")
    return op


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------

def sigma_x(target: int) -> BuiltinGate:
    """Pauli-X gate."""
    return BuiltinGate(GateKind.SIGMA_X, (target,))


def sigma_y(target: int) -> BuiltinGate:
    """Pauli-Y gate."""
    return BuiltinGate(GateKind.SIGMA_Y, (target,))


def sigma_z(target: int) -> BuiltinGate:
    """Pauli-Z gate."""
    return BuiltinGate(GateKind.SIGMA_Z, (target,))


def hadamard(target: int) -> BuiltinGate:
    """Hadamard gate."""
    return BuiltinGate(GateKind.HADAMARD, (target,))


def phase(target: int) -> BuiltinGate:
    """S gate."""
    return BuiltinGate(GateKind.PHASE, (target,))


def phase_dagger(target: int) -> BuiltinGate:
    """S-dagger gate."""
    return BuiltinGate(GateKind.PHASE_DAGGER, (target,))


def pi_8(target: int) -> BuiltinGate:
    """T gate."""
    return BuiltinGate(GateKind.PI_8, (target,))


def pi_8_dagger(target: int) -> BuiltinGate:
    """T-dagger gate."""
    return BuiltinGate(GateKind.PI_8_DAGGER, (target,))


def x_90(target: int) -> BuiltinGate:
    """X rotation by pi/2."""
    return BuiltinGate(GateKind.X_90, (target,))


def rotation(target: int, theta: float, phi: float) -> BuiltinGate:
    """Rotation by theta around the equatorial axis at azimuth phi."""
    return BuiltinGate(GateKind.ROTATION, (target,), (theta, phi))


def rotation_x(target: int, theta: float) -> BuiltinGate:
    """Rotation around X-axis."""
    return BuiltinGate(GateKind.ROTATION_X, (target,), (theta,))


def rotation_y(target: int, theta: float) -> BuiltinGate:
    """Rotation around Y-axis."""
    return BuiltinGate(GateKind.ROTATION_Y, (target,), (theta,))


def rotation_z(target: int, theta: float) -> BuiltinGate:
    """Rotation around Z-axis."""
    return BuiltinGate(GateKind.ROTATION_Z, (target,), (theta,))


def phase_shift(target: int, phi: float) -> BuiltinGate:
    """Phase shift gate."""
    return BuiltinGate(GateKind.PHASE_SHIFT, (target,), (phi,))


def universal(target: int, theta: float, phi: float, lam: float) -> BuiltinGate:
    """Universal single-qubit gate."""
    return BuiltinGate(GateKind.UNIVERSAL, (target,), (theta, phi, lam))


def control_x(control: int, target: int) -> BuiltinGate:
    """Controlled-NOT gate."""
    return BuiltinGate(GateKind.CONTROL_X, (control, target))


def control_z(control: int, target: int) -> BuiltinGate:
    """Controlled-Z gate."""
    return BuiltinGate(GateKind.CONTROL_Z, (control, target))


def toffoli(control_1: int, control_2: int, target: int) -> BuiltinGate:
    """Toffoli (CCX) gate."""
    return BuiltinGate(GateKind.TOFFOLI, (control_1, control_2, target))


def iswap(target_1: int, target_2: int) -> BuiltinGate:
    """iSWAP gate."""
    return BuiltinGate(GateKind.ISWAP, (target_1, target_2))


def iswap_dagger(target_1: int, target_2: int) -> BuiltinGate:
    """iSWAP-dagger gate."""
    return BuiltinGate(GateKind.ISWAP_DAGGER, (target_1, target_2))


def unitary_gate(
    matrix,
    targets: Sequence[int],
    instruction_symbol: str = "unitary",
    inverse=None,
    display_symbols: Optional[Sequence[str]] = None,
) -> UnitaryGate:
    """
    Wrap an arbitrary unitary as a gate.

    The inverse policy is fixed here, once: a supplied ``inverse`` gives
    ``CLOSED_FORM``, a Hermitian matrix gives ``HERMITIAN``, anything else
    gives ``UNSUPPORTED``.
    """
    op = matrix if isinstance(matrix, Operator) else Operator(matrix)
    if inverse is not None:
        policy = InversePolicy.CLOSED_FORM
    elif op.is_square and op.is_hermitian():
        policy = InversePolicy.HERMITIAN
    else:
        policy = InversePolicy.UNSUPPORTED
    return UnitaryGate(
        op,
        targets,
        instruction_symbol=instruction_symbol,
        inverse_policy=policy,
        inverse_matrix=inverse,
        display_symbols=display_symbols,
    )


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------

STD_GATES: dict[str, Callable[..., BuiltinGate]] = {
    "x": sigma_x,
    "y": sigma_y,
    "z": sigma_z,
    "s": phase,
    "t": pi_8,
    "h": hadamard,
    "cx": control_x,
    "cz": control_z,
    "iswap": iswap,
    "ccx": toffoli,
}

PAULI_GATES: dict[str, Callable[..., BuiltinGate]] = {
    "x": sigma_x,
    "y": sigma_y,
    "z": sigma_z,
}
