"""
Prime Field Arithmetic

Default field: F_p with p the BLS12-377 scalar field modulus

    p = 8444461749428370424248824938781546531375899335154063827935233455917409239041

which is also the base field of decaf377. The multiplicative group has order
p-1 = 2^47 * 3 * 5 * 7 * 13 * ..., so the smallest power-map S-boxes x^3,
x^5 and x^7 are not permutations of this field.

Other prime fields are created with make_prime_field(); their elements
never mix with elements of a different field.
"""

from __future__ import annotations
from typing import Optional, Type


# BLS12-377 scalar field modulus
BLS12_377_SCALAR_MODULUS = 8444461749428370424248824938781546531375899335154063827935233455917409239041


class FieldElement:
    """
    Element of the prime field F_p.

    The modulus is a class attribute; subclasses created by
    make_prime_field() select a different prime.

    All arithmetic is exact modular arithmetic.
    """

    __slots__ = ('value',)

    MODULUS: int = BLS12_377_SCALAR_MODULUS

    def __init__(self, value: int):
        """Create field element from integer (reduced mod p)."""
        self.value = value % self.MODULUS

    def _coerce(self, other):
        if isinstance(other, int):
            return type(self)(other)
        if not isinstance(other, FieldElement):
            return NotImplemented
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot mix {type(self).__name__} and {type(other).__name__}"
            )
        return other

    # =========================================================================
    # Arithmetic Operations
    # =========================================================================

    def __add__(self, other) -> FieldElement:
        """Addition in F_p."""
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return type(self)(self.value + other.value)

    __radd__ = __add__

    def __sub__(self, other) -> FieldElement:
        """Subtraction in F_p."""
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return type(self)(self.value - other.value)

    def __rsub__(self, other) -> FieldElement:
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return type(self)(other.value - self.value)

    def __mul__(self, other) -> FieldElement:
        """Multiplication in F_p."""
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return type(self)(self.value * other.value)

    __rmul__ = __mul__

    def __neg__(self) -> FieldElement:
        """Negation in F_p."""
        return type(self)(-self.value)

    def __truediv__(self, other) -> FieldElement:
        """Division in F_p (multiplication by inverse)."""
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return self * other.inverse()

    def __pow__(self, exp: int) -> FieldElement:
        """Exponentiation (negative exponents invert first)."""
        if exp < 0:
            return self.inverse() ** (-exp)
        return type(self)(pow(self.value, exp, self.MODULUS))

    def inverse(self) -> FieldElement:
        """
        Multiplicative inverse using Fermat's little theorem.

        a^-1 = a^(p-2) mod p
        """
        if self.value == 0:
            raise ZeroDivisionError("Cannot invert zero")
        return type(self)(pow(self.value, self.MODULUS - 2, self.MODULUS))

    # =========================================================================
    # Comparison Operations
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldElement):
            return type(other) is type(self) and self.value == other.value
        if isinstance(other, int):
            return self.value == (other % self.MODULUS)
        return False

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value})"

    def __str__(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value

    # =========================================================================
    # Serialization
    # =========================================================================

    @classmethod
    def byte_size(cls) -> int:
        """Number of bytes of a canonical encoding."""
        return (cls.MODULUS.bit_length() + 7) // 8

    def to_bytes(self) -> bytes:
        """Serialize to byte_size() bytes (little-endian)."""
        return self.value.to_bytes(self.byte_size(), 'little')

    @classmethod
    def from_bytes(cls, data: bytes) -> FieldElement:
        """Deserialize canonical little-endian bytes."""
        value = int.from_bytes(data, 'little')
        if value >= cls.MODULUS:
            raise ValueError("Non-canonical field element encoding")
        return cls(value)

    @classmethod
    def from_bytes_mod_order(cls, data: bytes) -> FieldElement:
        """Interpret arbitrary-length little-endian bytes and reduce mod p."""
        return cls(int.from_bytes(data, 'little'))

    def to_int(self) -> int:
        """Convert to integer."""
        return self.value

    # =========================================================================
    # Predicates
    # =========================================================================

    def is_zero(self) -> bool:
        return self.value == 0

    def is_one(self) -> bool:
        return self.value == 1

    # =========================================================================
    # Class Methods
    # =========================================================================

    @classmethod
    def zero(cls) -> FieldElement:
        """Additive identity."""
        return cls(0)

    @classmethod
    def one(cls) -> FieldElement:
        """Multiplicative identity."""
        return cls(1)


class Fq(FieldElement):
    """BLS12-377 scalar field (the decaf377 base field)."""

    __slots__ = ()

    MODULUS = BLS12_377_SCALAR_MODULUS


def make_prime_field(modulus: int, name: Optional[str] = None) -> Type[FieldElement]:
    """
    Create a field element class for F_modulus.

    The caller is responsible for modulus being prime; only a cheap
    Fermat check against small bases is done here.
    """
    if modulus < 3 or modulus % 2 == 0:
        raise ValueError(f"Modulus must be an odd prime, got {modulus}")
    for base in (2, 3, 5, 7):
        if base % modulus and pow(base, modulus - 1, modulus) != 1:
            raise ValueError(f"Modulus {modulus} is not prime")

    return type(
        name or f"F{modulus}",
        (FieldElement,),
        {'__slots__': (), 'MODULUS': modulus},
    )
