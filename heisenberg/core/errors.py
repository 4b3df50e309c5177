"""Exceptions raised by heisenberg."""


class HeisenbergError(Exception):
    """Base class for all heisenberg errors."""
    pass


class DimensionError(HeisenbergError, ValueError):
    """
    Raised when a matrix or vector operation gets operands of the wrong shape.

    Shapes are fully determined by circuit structure and qubit counts, so this
    always points at a construction bug (e.g. a miscounted qubit) rather than
    bad runtime data. Nothing inside the package catches it.
    """
    pass
