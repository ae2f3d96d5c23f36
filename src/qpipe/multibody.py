"""
Multi-body systems and operator embedding.

:func:`get_embed_operator` lifts a local operator into the full Hilbert
space with Kronecker products. It costs O(4^n) memory and time, so it is
the reference construction for small systems and tests; the simulator
never uses it.
"""

from __future__ import annotations

from functools import reduce

import numpy as np

from qpipe.errors import DomainError
from qpipe.linalg import Operator


class MultiBodySystem:
    """
    Tensor-factor layout of a multi-body Hilbert space.

    Parameters
    ----------
    n_body : int
        Number of bodies (e.g. qubits).
    hilbert_size_per_body : int
        Local dimension of every body. 2 for qubits.
    """

    __slots__ = ("_structure",)

    def __init__(self, n_body: int, hilbert_size_per_body: int = 2) -> None:
        if n_body < 1:
            raise DomainError(f"Need at least 1 body, got {n_body}")
        if hilbert_size_per_body < 1:
            raise DomainError(f"Local dimension must be positive, got {hilbert_size_per_body}")
        self._structure = (hilbert_size_per_body,) * n_body

    @property
    def hilbert_space_structure(self) -> tuple[int, ...]:
        """Local dimension of each body, in tensor-factor order."""
        return self._structure

    @property
    def n_body(self) -> int:
        return len(self._structure)

    @property
    def hilbert_space_size(self) -> int:
        size = 1
        for d in self._structure:
            size *= d
        return size

    def __repr__(self) -> str:
        return f"MultiBodySystem(n_body={self.n_body}, structure={list(self._structure)})"


def get_embed_operator(op: Operator, target_body_index: int, system: MultiBodySystem) -> Operator:
    """
    Build the full-space operator for a local operator acting on one body.

    Parameters
    ----------
    op : Operator
        Local operator; its size must match the target body's dimension.
    target_body_index : int
        1-based index of the body ``op`` acts on. Body 1 is the leftmost
        Kronecker factor.
    system : MultiBodySystem
        Layout of the full space.

    Returns
    -------
    Operator
        I ⊗ ... ⊗ op ⊗ ... ⊗ I

    Raises
    ------
    DomainError
        If the index is out of range or ``op`` has the wrong size.
    """
    structure = system.hilbert_space_structure
    if not 1 <= target_body_index <= len(structure):
        raise DomainError(
            f"Body index {target_body_index} out of range for a {len(structure)}-body system"
        )
    local_dim = structure[target_body_index - 1]
    if op.shape != (local_dim, local_dim):
        raise DomainError(
            f"Operator of shape {op.shape} does not act on a body of dimension {local_dim}"
        )

    factors = [
        op.data if i == target_body_index else np.eye(d, dtype=np.complex128)
        for i, d in enumerate(structure, start=1)
    ]
    return Operator(reduce(np.kron, factors))
