"""
Linear-algebra primitives: state vectors, dual vectors and operators.

All data is stored as complex128 numpy arrays. The ``@`` operator is used
for every product that has a matrix shape:

    bra @ ket        -> complex (inner product)
    ket @ bra        -> Operator (outer product)
    op @ ket         -> Ket
    bra @ op         -> Bra
    op @ op          -> Operator

Example
-------
>>> psi = fock(0, 2)
>>> rho = psi @ psi.adjoint()
>>> rho.trace()
(1+0j)
"""

from __future__ import annotations

import numbers
from typing import Iterator, NamedTuple, Union

import numpy as np
from numpy import ndarray
from scipy.linalg import expm as _expm
from scipy.special import eval_genlaguerre, gammaln

from qpipe.config import DEFAULT_ATOL
from qpipe.errors import DomainError, StructuralError


# ---------------------------------------------------------------------------
# Ket
# ---------------------------------------------------------------------------

class Ket:
    """
    Column vector of complex amplitudes (a wavefunction).

    The norm is not enforced; callers are responsible for unit norm.

    Parameters
    ----------
    data : array_like
        One-dimensional sequence of amplitudes. The values are copied.
    """

    __slots__ = ("data",)

    def __init__(self, data) -> None:
        arr = np.array(data, dtype=np.complex128)
        if arr.ndim != 1:
            raise StructuralError(f"Ket data must be one-dimensional, got shape {arr.shape}")
        self.data: ndarray = arr

    def __len__(self) -> int:
        return self.data.shape[0]

    def __iter__(self) -> Iterator[complex]:
        return iter(self.data)

    def __getitem__(self, index: int) -> complex:
        return complex(self.data[index])

    # Keep numpy scalars from absorbing us in binary operators
    __array_ufunc__ = None

    def __array__(self, dtype=None, copy=None) -> ndarray:
        return _to_array(self.data, dtype, copy)

    def __add__(self, other: Ket) -> Ket:
        if not isinstance(other, Ket):
            return NotImplemented
        _require_same_length(self, other)
        return Ket(self.data + other.data)

    def __sub__(self, other: Ket) -> Ket:
        if not isinstance(other, Ket):
            return NotImplemented
        _require_same_length(self, other)
        return Ket(self.data - other.data)

    def __neg__(self) -> Ket:
        return Ket(-self.data)

    def __mul__(self, scalar) -> Ket:
        if not isinstance(scalar, numbers.Number):
            return NotImplemented
        return Ket(scalar * self.data)

    __rmul__ = __mul__

    def __matmul__(self, other: Bra) -> Operator:
        if not isinstance(other, Bra):
            return NotImplemented
        return Operator(np.outer(self.data, other.data))

    def adjoint(self) -> Bra:
        """Conjugate transpose."""
        return Bra(self)

    def copy(self) -> Ket:
        return Ket(self.data)

    @property
    def num_qubits(self) -> int:
        return get_num_qubits(self)

    def probabilities(self) -> ndarray:
        """Squared magnitude of every amplitude."""
        return np.abs(self.data) ** 2

    def norm(self) -> float:
        return float(np.linalg.norm(self.data))

    def isclose(self, other: Ket, atol: float = DEFAULT_ATOL) -> bool:
        if not isinstance(other, Ket) or len(self) != len(other):
            return False
        return bool(np.allclose(self.data, other.data, atol=atol, rtol=0))

    def __repr__(self) -> str:
        return f"Ket(dim={len(self)})"

    def __str__(self) -> str:
        lines = [f"{len(self)}-element Ket:"]
        lines.extend(str(complex(v)) for v in self.data)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Bra
# ---------------------------------------------------------------------------

class Bra:
    """
    Row vector dual to a :class:`Ket`.

    A Bra can only be built from a Ket; it holds the conjugated amplitudes.
    """

    __slots__ = ("data",)

    def __init__(self, ket: Ket) -> None:
        if not isinstance(ket, Ket):
            raise TypeError(f"A Bra can only be built from a Ket, got {type(ket).__name__}")
        self.data: ndarray = ket.data.conj()

    @classmethod
    def _from_row(cls, row: ndarray) -> Bra:
        bra = cls.__new__(cls)
        bra.data = np.asarray(row, dtype=np.complex128)
        return bra

    def __len__(self) -> int:
        return self.data.shape[0]

    def __getitem__(self, index: int) -> complex:
        return complex(self.data[index])

    def __matmul__(self, other):
        if isinstance(other, Ket):
            _require_same_length(self, other)
            return complex(np.dot(self.data, other.data))
        if isinstance(other, Operator):
            if other.shape[0] != len(self):
                raise StructuralError(
                    f"Cannot multiply a {len(self)}-element Bra by a {other.shape} Operator"
                )
            return Bra._from_row(self.data @ other.data)
        return NotImplemented

    def adjoint(self) -> Ket:
        return Ket(self.data.conj())

    @property
    def num_qubits(self) -> int:
        return get_num_qubits(self)

    def isclose(self, other: Bra, atol: float = DEFAULT_ATOL) -> bool:
        if not isinstance(other, Bra) or len(self) != len(other):
            return False
        return bool(np.allclose(self.data, other.data, atol=atol, rtol=0))

    def __repr__(self) -> str:
        return f"Bra(dim={len(self)})"


# ---------------------------------------------------------------------------
# Operator
# ---------------------------------------------------------------------------

class Eigen(NamedTuple):
    """Eigen-decomposition. Column ``vectors[:, i]`` belongs to ``values[i]``."""
    values: ndarray
    vectors: ndarray


class Operator:
    """
    Complex matrix acting on state vectors.

    Parameters
    ----------
    data : array_like
        Two-dimensional matrix. The values are copied.
    """

    __slots__ = ("data",)

    def __init__(self, data) -> None:
        arr = np.array(data, dtype=np.complex128)
        if arr.ndim != 2:
            raise StructuralError(f"Operator data must be two-dimensional, got shape {arr.shape}")
        self.data: ndarray = arr

    @property
    def shape(self) -> tuple[int, int]:
        return self.data.shape

    @property
    def is_square(self) -> bool:
        rows, cols = self.data.shape
        return rows == cols

    def __getitem__(self, key: tuple[int, int]) -> complex:
        return complex(self.data[key])

    # Keep numpy scalars from absorbing us in binary operators
    __array_ufunc__ = None

    def __array__(self, dtype=None, copy=None) -> ndarray:
        return _to_array(self.data, dtype, copy)

    def __matmul__(self, other):
        if isinstance(other, Operator):
            if self.shape[1] != other.shape[0]:
                raise StructuralError(f"Cannot multiply operators of shape {self.shape} and {other.shape}")
            return Operator(self.data @ other.data)
        if isinstance(other, Ket):
            if self.shape[1] != len(other):
                raise StructuralError(
                    f"Cannot apply a {self.shape} Operator to a {len(other)}-element Ket"
                )
            return Ket(self.data @ other.data)
        return NotImplemented

    def __add__(self, other: Operator) -> Operator:
        if not isinstance(other, Operator):
            return NotImplemented
        _require_same_shape(self, other)
        return Operator(self.data + other.data)

    def __sub__(self, other: Operator) -> Operator:
        if not isinstance(other, Operator):
            return NotImplemented
        _require_same_shape(self, other)
        return Operator(self.data - other.data)

    def __neg__(self) -> Operator:
        return Operator(-self.data)

    def __mul__(self, scalar) -> Operator:
        if not isinstance(scalar, numbers.Number):
            return NotImplemented
        return Operator(scalar * self.data)

    __rmul__ = __mul__

    def adjoint(self) -> Operator:
        """Conjugate transpose."""
        return Operator(self.data.conj().T)

    def _require_square(self, action: str) -> None:
        if not self.is_square:
            raise StructuralError(f"Operator is not square ({self.shape}); cannot compute {action}")

    def trace(self) -> complex:
        self._require_square("the trace")
        return complex(np.trace(self.data))

    def expm(self) -> Operator:
        """Matrix exponential exp(A)."""
        self._require_square("the matrix exponential")
        return Operator(_expm(self.data))

    def eigen(self) -> Eigen:
        """
        Eigen-decomposition.

        Hermitian operators return real eigenvalues in ascending order.
        """
        self._require_square("an eigen-decomposition")
        if self.is_hermitian():
            values, vectors = np.linalg.eigh(self.data)
        else:
            values, vectors = np.linalg.eig(self.data)
        return Eigen(values, vectors)

    def is_hermitian(self, atol: float = DEFAULT_ATOL) -> bool:
        self._require_square("hermiticity")
        return bool(np.allclose(self.data, self.data.conj().T, atol=atol, rtol=0))

    @property
    def num_qubits(self) -> int:
        return get_num_qubits(self)

    def isclose(self, other: Operator, atol: float = DEFAULT_ATOL) -> bool:
        if not isinstance(other, Operator) or self.shape != other.shape:
            return False
        return bool(np.allclose(self.data, other.data, atol=atol, rtol=0))

    def __repr__(self) -> str:
        return f"Operator(shape={self.shape})"

    def __str__(self) -> str:
        rows = ["    ".join(str(complex(v)) for v in row) for row in self.data]
        return "\n".join([f"{self.shape}-element Operator:"] + rows)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _to_array(data: ndarray, dtype, copy) -> ndarray:
    """``__array__`` protocol: ``copy=False`` forbids copying, ``True`` forces it."""
    if copy:
        return np.array(data, dtype=dtype, copy=True)
    arr = np.asarray(data, dtype=dtype)
    if copy is False and arr is not data:
        raise ValueError("Unable to avoid copy while creating an array as requested.")
    return arr


def _require_same_length(a: Union[Ket, Bra], b: Union[Ket, Bra]) -> None:
    if len(a) != len(b):
        raise StructuralError(f"Dimension mismatch: {len(a)} != {len(b)}")


def _require_same_shape(a: Operator, b: Operator) -> None:
    if a.shape != b.shape:
        raise StructuralError(f"Shape mismatch: {a.shape} != {b.shape}")


def _integer_log(size: int, base: int, noun: str) -> int:
    """Exact integer logarithm of ``size``; DomainError if there is none."""
    if size < 1:
        raise DomainError(f"Size {size} does not correspond to an integer number of {noun}")
    count = 0
    remaining = size
    while remaining > 1 and remaining % base == 0:
        remaining //= base
        count += 1
    if remaining != 1:
        raise DomainError(
            f"Size {size} does not correspond to an integer number of {noun} "
            f"(local dimension {base})"
        )
    return count


def _size_of(x: Union[Ket, Bra, Operator]) -> int:
    if isinstance(x, Operator):
        rows, cols = x.shape
        if rows != cols:
            raise StructuralError("Operator is not square")
        return rows
    if isinstance(x, (Ket, Bra)):
        return len(x)
    raise TypeError(f"Expected a Ket, Bra or Operator, got {type(x).__name__}")


def get_num_qubits(x: Union[Ket, Bra, Operator]) -> int:
    """
    Number of qubits spanned by a Ket, Bra or Operator.

    Raises
    ------
    StructuralError
        If an Operator is not square.
    DomainError
        If the dimension is not an exact power of 2.
    """
    return _integer_log(_size_of(x), 2, "qubits")


def get_num_bodies(x: Union[Ket, Bra, Operator], hilbert_space_size_per_body: int = 2) -> int:
    """Number of bodies of local dimension ``hilbert_space_size_per_body``."""
    if hilbert_space_size_per_body < 2:
        raise DomainError(
            f"Local dimension must be at least 2, got {hilbert_space_size_per_body}"
        )
    return _integer_log(_size_of(x), hilbert_space_size_per_body, "bodies")


def kron(a, b):
    """Kronecker product of two Kets or two Operators."""
    if isinstance(a, Ket) and isinstance(b, Ket):
        return Ket(np.kron(a.data, b.data))
    if isinstance(a, Operator) and isinstance(b, Operator):
        return Operator(np.kron(a.data, b.data))
    raise TypeError(
        f"kron expects two Kets or two Operators, got {type(a).__name__} and {type(b).__name__}"
    )


def approx_equal(a, b, atol: float = DEFAULT_ATOL) -> bool:
    """Absolute-tolerance equality for Kets, Bras and Operators."""
    if type(a) is not type(b):
        return False
    return a.isclose(b, atol=atol)


# ---------------------------------------------------------------------------
# States and operators
# ---------------------------------------------------------------------------

def fock(i: int, hspace_size: int) -> Ket:
    """The ``i``-th basis state (0-based) of a space of size ``hspace_size``."""
    if not 0 <= i < hspace_size:
        raise DomainError(f"Basis index {i} out of range for a space of size {hspace_size}")
    data = np.zeros(hspace_size, dtype=np.complex128)
    data[i] = 1.0
    return Ket(data)


def spin_up() -> Ket:
    return fock(0, 2)


def spin_down() -> Ket:
    return fock(1, 2)


def normalize(x: Ket) -> Ket:
    """Return ``x`` scaled to unit norm."""
    n = x.norm()
    if n == 0.0:
        raise DomainError("Cannot normalize a zero vector")
    return Ket(x.data / n)


def ket2dm(psi: Ket) -> Operator:
    """Density matrix |psi><psi|."""
    return psi @ psi.adjoint()


def fock_dm(i: int, hspace_size: int) -> Operator:
    return ket2dm(fock(i, hspace_size))


def expected_value(A: Operator, psi: Ket) -> complex:
    """<psi|A|psi>."""
    return psi.adjoint() @ (A @ psi)


def commute(A: Operator, B: Operator) -> Operator:
    """Commutator AB - BA."""
    return A @ B - B @ A


def anticommute(A: Operator, B: Operator) -> Operator:
    """Anticommutator AB + BA."""
    return A @ B + B @ A


def eye(size: int = 2) -> Operator:
    """Identity operator."""
    return Operator(np.eye(size, dtype=np.complex128))


def sigma_p() -> Operator:
    """Raising operator: maps |1> to |0>."""
    return Operator([[0, 1], [0, 0]])


def sigma_m() -> Operator:
    """Lowering operator: maps |0> to |1>."""
    return Operator([[0, 0], [1, 0]])


def create(hspace_size: int) -> Operator:
    """Bosonic creation operator on a truncated Fock space."""
    a_dag = np.zeros((hspace_size, hspace_size), dtype=np.complex128)
    for i in range(1, hspace_size):
        a_dag[i, i - 1] = np.sqrt(i)
    return Operator(a_dag)


def destroy(hspace_size: int) -> Operator:
    """Bosonic annihilation operator on a truncated Fock space."""
    a = np.zeros((hspace_size, hspace_size), dtype=np.complex128)
    for i in range(1, hspace_size):
        a[i - 1, i] = np.sqrt(i)
    return Operator(a)


def number_op(hspace_size: int) -> Operator:
    """Number operator diag(0, 1, ..., n-1)."""
    return Operator(np.diag(np.arange(hspace_size, dtype=np.complex128)))


def coherent(alpha: complex, hspace_size: int) -> Ket:
    """
    Coherent state with amplitude ``alpha`` on a truncated Fock space.

    |alpha|^2 is the mean photon number. The truncated state is not
    renormalized.
    """
    coeffs = np.empty(hspace_size, dtype=np.complex128)
    coeffs[0] = 1.0
    for i in range(1, hspace_size):
        coeffs[i] = coeffs[i - 1] * alpha / np.sqrt(i)
    return Ket(np.exp(-0.5 * abs(alpha) ** 2) * coeffs)


# ---------------------------------------------------------------------------
# Phase space
# ---------------------------------------------------------------------------

def moyal(eta: complex, m: int, n: int) -> complex:
    """
    Moyal function W_mn(eta) of Fock states ``m`` and ``n`` (0-based).

    W_mn(η) = 2 (-1)^n / π * sqrt(n!/m!) * (2η*)^(m-n)
              * exp(-2|η|^2) * L_n^(m-n)(4|η|^2)      for m >= n,

    and W_nm = conj(W_mn).
    """
    if m < n:
        return complex(np.conj(moyal(eta, n, m)))
    r2 = abs(eta) ** 2
    laguerre = eval_genlaguerre(n, m - n, 4.0 * r2)
    norm = np.exp(0.5 * (gammaln(n + 1) - gammaln(m + 1)))
    w = (
        2.0 * (-1) ** n / np.pi * norm
        * (2.0 * np.conj(eta)) ** (m - n)
        * np.exp(-2.0 * r2) * laguerre
    )
    return complex(w)


def wigner(rho: Operator, p: float, q: float) -> float:
    """
    Wigner function of a density matrix at phase-space point (q, p).

    Parameters
    ----------
    rho : Operator
        Density matrix in the Fock basis.
    p, q : float
        Momentum and position; the point is η = q + i p.

    Returns
    -------
    float
        W(η). The vacuum gives 2/π exp(-2|η|^2).

    Raises
    ------
    StructuralError
        If ``rho`` is not square.
    """
    size = _size_of(rho)
    eta = q + 1j * p
    w = 0.0
    for m in range(size):
        w += (rho[m, m] * moyal(eta, m, m)).real
        for n in range(m):
            w += 2.0 * (rho[m, n] * moyal(eta, m, n)).real
    return float(w)
