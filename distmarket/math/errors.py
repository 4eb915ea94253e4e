"""Fixed-point arithmetic errors."""


class FixedPointError(ArithmeticError):
    """Base class for fixed-point arithmetic errors."""

    pass


class Overflow(FixedPointError):
    """Intermediate or final value exceeds the int256 range."""

    pass


class Underflow(FixedPointError):
    """Unsigned operation would produce a negative result."""

    pass


class DivisionByZero(FixedPointError):
    """Division by zero."""

    pass


class InvalidExponent(FixedPointError):
    """Exponent is outside the domain of exp()."""

    pass
