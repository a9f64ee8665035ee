"""
Error types raised by the ray tracer.

Every invariant violation is fatal at the point of detection. The
subclasses double as the matching builtin exception so callers can catch
either the specific kind or the usual Python one.
"""


class RaytracerError(Exception):
    """Base class for all ray tracer errors."""
    pass


class ConstructionError(RaytracerError, ValueError):
    """An object was built from invalid arguments."""
    pass


class DomainError(RaytracerError, ArithmeticError):
    """A mathematical operation is undefined for its input."""
    pass


class StateError(RaytracerError, RuntimeError):
    """An operation is not allowed in the object's current state."""
    pass


class RangeError(RaytracerError, ValueError):
    """A value lies outside its permitted range."""
    pass
