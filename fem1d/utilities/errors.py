class FEMError(Exception):
    """Base class of the errors raised by fem1d."""
    pass


class DimensionMismatchError(FEMError, ValueError):
    """Raised when tensor shapes are incompatible for an operation."""
    pass


class InvalidArgumentError(FEMError, ValueError):
    """Raised on invalid meshes, coefficients or output buffers."""
    pass


class SolverError(FEMError, RuntimeError):
    """Raised when the assembled system cannot be solved."""
    pass
