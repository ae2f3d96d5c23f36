"""
Exception types raised by qpipe.

Both concrete errors derive from ``ValueError`` so callers that only care
about bad input can catch that.
"""


class QpipeError(Exception):
    """Base class for all qpipe errors."""


class DomainError(QpipeError, ValueError):
    """A value lies outside the domain of the operation.

    Raised for dimensions that are not an exact power of the local
    dimension, gate targets beyond a circuit's register, and duplicate or
    non-positive targets.
    """


class StructuralError(QpipeError, ValueError):
    """An object does not have the structure an operation requires.

    Raised for non-square operators, gates without a derivable inverse,
    invalid qubit remappings and malformed circuits.
    """
