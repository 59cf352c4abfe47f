"""
===============================================================================
ORBIT ENGINE - Error Types
===============================================================================
Failures surface synchronously as typed exceptions so callers can tell bad
input apart from numerical breakdown:

    InvalidParameterError      -- the caller asked for something undefined
                                  (negative eccentricity, Kepler solve on an
                                  open orbit, period of a hyperbola, ...)
    NumericalInstabilityError  -- the inputs were legal but the arithmetic
                                  degenerated (zero Newton denominator, NaN
                                  ascending node, zero node axis)
    NotRenderedError           -- a rendered-state accessor was read before
                                  the orbit was rendered

Each type also derives from the builtin it specialises, so existing
``except ValueError`` handlers keep working.
===============================================================================
"""


class OrbitError(Exception):
    """Base class for all orbit engine errors."""


class InvalidParameterError(OrbitError, ValueError):
    """Raised when an orbit parameter is outside the supported domain."""


class NumericalInstabilityError(OrbitError, ArithmeticError):
    """Raised when a computation would produce Inf/NaN instead of a value."""


class NotRenderedError(OrbitError, RuntimeError):
    """Raised when rendered state is read before ``render_at_time``."""
