"""Error taxonomy shared by every layer.

Construction and arithmetic errors propagate to the caller. Verification
outcomes are never errors: `BasefoldProtocol.query` returns a boolean.
"""


class BasefoldError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(BasefoldError, ValueError):
    """Invalid parameters: code family, t-vectors, config values."""


# --- Field arithmetic ---

class FieldError(BasefoldError):
    """Base class for field-arithmetic failures."""


class InvalidModulusError(FieldError, ValueError):
    """Modulus is <= 1, or not prime where a prime is required."""


class ValueExceedsModulusError(FieldError, ValueError):
    """Value is outside [0, modulus)."""


class ModulusMismatchError(FieldError, ValueError):
    """Binary operation on elements of different fields."""


class DivisionByZeroError(FieldError, ZeroDivisionError):
    """Inverse of zero (or of a non-unit under a composite modulus)."""


# --- Coding ---

class EncodingError(BasefoldError, ValueError):
    """Message length does not match the code dimension."""


class DecodingError(BasefoldError, ValueError):
    """Received word length does not match the code length."""


# --- Authentication ---

class ProofError(BasefoldError, ValueError):
    """Merkle proof requested for a missing leaf, or malformed proof data."""


class BasefoldSystemError(BasefoldError, RuntimeError):
    """Failure not attributable to the inputs (e.g. the worker pool broke)."""
