class PolicyNetError(Exception):
    """Base class for errors raised by the tensor and network core."""


class ShapeError(PolicyNetError, ValueError):
    """Raised when tensor shapes, indices or feature counts do not line up."""


class LengthError(PolicyNetError, ValueError):
    """Raised when a flat parameter vector has the wrong number of elements."""


class LogicError(PolicyNetError, RuntimeError):
    """Raised when an operation is called in an invalid state (e.g. no layers)."""
