"""Prime field GF(p): scalar elements and galois-backed vectors.

FieldElement is the exact scalar type used by the verifier and the public
API. It stores plain Python ints, so intermediate products never overflow.
Vector and matrix work (encoding, folding) goes through galois arrays built
by prime_field(); to_field_array/from_field_array convert between the two.
"""

import numbers
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Union

import galois
import numpy as np

from ..errors import (
    DivisionByZeroError,
    FieldError,
    InvalidModulusError,
    ModulusMismatchError,
    ValueExceedsModulusError,
)

# --- Type Aliases ---

FieldArray = galois.FieldArray
ElementLike = Union["FieldElement", int]


# --- Scalar Field Element ---

@dataclass(frozen=True)
class FieldElement:
    """Element of Z/pZ with invariant 0 <= value < modulus."""

    value: int
    modulus: int

    def __post_init__(self):
        if not isinstance(self.value, int) or not isinstance(self.modulus, int):
            raise TypeError(
                f"value and modulus must be int, got {type(self.value).__name__}, {type(self.modulus).__name__}"
            )
        if self.modulus <= 1:
            raise InvalidModulusError(f"modulus must be > 1, got {self.modulus}")
        if self.value < 0 or self.value >= self.modulus:
            raise ValueExceedsModulusError(
                f"value {self.value} not in [0, {self.modulus})"
            )

    # --- Factories ---

    @classmethod
    def new(cls, value: int, modulus: int) -> "FieldElement":
        """Validating constructor. Raises InvalidModulusError / ValueExceedsModulusError,
        or TypeError for a non-integral value (floats are never truncated).
        """
        return cls(as_int(value), as_int(modulus))

    @classmethod
    def zero(cls, modulus: int) -> "FieldElement":
        return cls.new(0, modulus)

    @classmethod
    def one(cls, modulus: int) -> "FieldElement":
        return cls.new(1, modulus)

    @classmethod
    def random(cls, modulus: int, rng: np.random.Generator) -> "FieldElement":
        """Uniform element drawn from an explicit numpy Generator."""
        return cls.new(int(rng.integers(0, modulus)), modulus)

    # --- Arithmetic ---

    def _check(self, other: "FieldElement") -> None:
        if not isinstance(other, FieldElement):
            raise TypeError(f"expected FieldElement, got {type(other).__name__}")
        if other.modulus != self.modulus:
            raise ModulusMismatchError(
                f"moduli differ: {self.modulus} vs {other.modulus}"
            )

    def __add__(self, other: "FieldElement") -> "FieldElement":
        self._check(other)
        return FieldElement((self.value + other.value) % self.modulus, self.modulus)

    def __sub__(self, other: "FieldElement") -> "FieldElement":
        self._check(other)
        return FieldElement((self.value - other.value) % self.modulus, self.modulus)

    def __mul__(self, other: "FieldElement") -> "FieldElement":
        self._check(other)
        return FieldElement((self.value * other.value) % self.modulus, self.modulus)

    def __truediv__(self, other: "FieldElement") -> "FieldElement":
        self._check(other)
        return self * other.inverse()

    def __neg__(self) -> "FieldElement":
        return FieldElement((-self.value) % self.modulus, self.modulus)

    def __pow__(self, exponent: int) -> "FieldElement":
        return self.pow(exponent)

    def __int__(self) -> int:
        return self.value

    def __bool__(self) -> bool:
        return self.value != 0

    def __repr__(self) -> str:
        return f"FieldElement({self.value}, {self.modulus})"

    def is_zero(self) -> bool:
        return self.value == 0

    def inverse(self) -> "FieldElement":
        """Multiplicative inverse via the extended Euclidean algorithm.

        Raises:
            DivisionByZeroError: for zero, or a value sharing a factor with
                a composite modulus.
        """
        if self.value == 0:
            raise DivisionByZeroError(f"zero has no inverse modulo {self.modulus}")

        old_r, r = self.value, self.modulus
        old_s, s = 1, 0
        while r != 0:
            quotient = old_r // r
            old_r, r = r, old_r - quotient * r
            old_s, s = s, old_s - quotient * s

        if old_r != 1:
            raise DivisionByZeroError(
                f"{self.value} is not invertible modulo {self.modulus}"
            )
        return FieldElement(old_s % self.modulus, self.modulus)

    def pow(self, exponent: int) -> "FieldElement":
        """Square-and-multiply. pow(0) is one for every base, zero included.

        Negative exponents invert first.
        """
        exponent = int(exponent)
        base = self
        if exponent < 0:
            base = self.inverse()
            exponent = -exponent

        result = 1
        acc = base.value
        while exponent > 0:
            if exponent & 1:
                result = (result * acc) % self.modulus
            acc = (acc * acc) % self.modulus
            exponent >>= 1
        return FieldElement(result, self.modulus)

    def legendre_symbol(self) -> int:
        """1 for a non-zero quadratic residue, -1 for a non-residue, 0 for zero."""
        if self.value == 0:
            return 0
        euler = self.pow((self.modulus - 1) // 2).value
        return 1 if euler == 1 else -1

    def sqrt(self) -> Optional["FieldElement"]:
        """Tonelli-Shanks square root, or None for a non-residue.

        Either root may be returned. Assumes a prime modulus.
        """
        p = self.modulus
        if self.value == 0 or p == 2:
            return self
        if self.legendre_symbol() != 1:
            return None

        # p - 1 = q * 2^s with q odd
        q, s = p - 1, 0
        while q % 2 == 0:
            q //= 2
            s += 1

        z = 2
        while FieldElement(z, p).legendre_symbol() != -1:
            z += 1
            if z >= p:
                raise FieldError(f"no quadratic non-residue found; {p} is not prime")

        m = s
        c = FieldElement(z, p).pow(q)
        t = self.pow(q)
        r = self.pow((q + 1) // 2)

        while t.value != 1:
            # least i with t^(2^i) == 1
            i, probe = 0, t
            while probe.value != 1:
                probe = probe * probe
                i += 1
                if i == m:
                    return None
            b = c.pow(1 << (m - i - 1))
            m = i
            c = b * b
            t = t * c
            r = r * b

        return r


# --- galois Interop ---

def as_int(value) -> int:
    """Exact integer value of an int, numpy integer, or 0-d integer array.

    Raises:
        TypeError: for floats, strings and anything else not integral.
    """
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, np.ndarray) and value.ndim == 0:
        if isinstance(value, galois.FieldArray) or np.issubdtype(value.dtype, np.integer):
            return int(value)
    raise TypeError(f"expected an integer, got {type(value).__name__}: {value!r}")


@lru_cache(maxsize=None)
def prime_field(modulus: int) -> type:
    """Return the (cached) galois.GF(modulus) class.

    Raises:
        InvalidModulusError: if modulus <= 1 or is not prime.
    """
    if modulus <= 1:
        raise InvalidModulusError(f"modulus must be > 1, got {modulus}")
    if not galois.is_prime(modulus):
        raise InvalidModulusError(f"modulus {modulus} is not prime")
    return galois.GF(modulus)


def to_field_array(values: Iterable[ElementLike], modulus: int) -> FieldArray:
    """Convert FieldElements / ints / a galois array into a GF(modulus) array."""
    GF = prime_field(modulus)
    if isinstance(values, GF):
        return values.copy()

    ints: List[int] = []
    for v in values:
        if isinstance(v, FieldElement):
            if v.modulus != modulus:
                raise ModulusMismatchError(f"moduli differ: {v.modulus} vs {modulus}")
            ints.append(v.value)
        else:
            iv = as_int(v)
            if iv < 0 or iv >= modulus:
                raise ValueExceedsModulusError(f"value {iv} not in [0, {modulus})")
            ints.append(iv)
    return GF(ints) if ints else GF.Zeros(0)


def from_field_array(arr: FieldArray, modulus: int) -> List[FieldElement]:
    """Convert a galois array to a list of FieldElements."""
    return [FieldElement(int(x), modulus) for x in arr]


# --- Serialization ---

def byte_length(modulus: int) -> int:
    """Bytes needed to hold any element of GF(modulus)."""
    return max(1, (int(modulus - 1).bit_length() + 7) // 8)


def element_bytes(value: ElementLike, modulus: int) -> bytes:
    """Fixed-width big-endian encoding of a field value (Merkle leaf input)."""
    return int(value).to_bytes(byte_length(modulus), "big")


def elements_bytes(values: Sequence[ElementLike], modulus: int) -> List[bytes]:
    width = byte_length(modulus)
    return [int(v).to_bytes(width, "big") for v in values]
