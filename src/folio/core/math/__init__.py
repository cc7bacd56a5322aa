"""
Core math modules для Folio

Точное рациональное число и вычисления произвольной точности.
"""

# Errors
from folio.core.math.errors import (
    DivisionByZero,
    DomainError,
    NumberError,
    Overflow,
    ParseError,
)

# Number
from folio.core.math.number import (
    DEFAULT_PRECISION,
    MAX_DECIMAL_EXPONENT,
    MAX_POWER_BITS,
    ONE,
    TWO,
    ZERO,
    Number,
)

# Transcendental
from folio.core.math.transcendental import (
    EXP_ARGUMENT_LIMIT,
    GUARD_DIGITS,
    MAX_PRECISION,
    MAX_SERIES_TERMS,
    NEWTON_MAX_ITERATIONS,
    cos,
    e,
    exp,
    ln,
    phi,
    pi,
    pow_real,
    sin,
    sqrt,
    tan,
)

# Formatting
from folio.core.math.formatting import (
    DEFAULT_FORMAT_CONFIG,
    FormatConfig,
    as_decimal,
    as_sigfigs,
)

__all__ = [
    # Errors
    "NumberError",
    "ParseError",
    "DivisionByZero",
    "DomainError",
    "Overflow",
    # Number — Constants
    "DEFAULT_PRECISION",
    "MAX_DECIMAL_EXPONENT",
    "MAX_POWER_BITS",
    "ZERO",
    "ONE",
    "TWO",
    # Number — Types
    "Number",
    # Transcendental — Constants
    "GUARD_DIGITS",
    "MAX_PRECISION",
    "MAX_SERIES_TERMS",
    "NEWTON_MAX_ITERATIONS",
    "EXP_ARGUMENT_LIMIT",
    # Transcendental — Functions
    "sqrt",
    "ln",
    "exp",
    "pow_real",
    "sin",
    "cos",
    "tan",
    "pi",
    "e",
    "phi",
    # Formatting
    "FormatConfig",
    "DEFAULT_FORMAT_CONFIG",
    "as_decimal",
    "as_sigfigs",
]
