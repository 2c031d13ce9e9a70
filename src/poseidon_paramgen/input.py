"""
Instance Parameters

InputParameters is the per-instance configuration (security target, state
width, field). RoundNumbers and Alpha are derived from it by the security
estimation rules in rounds.py and alpha.py.

All three are immutable and hashable; Transcript.domain_sep() binds all
of them into the round-constant derivation.
"""

import math
from dataclasses import dataclass
from typing import Type

from .field import FieldElement, Fq


@dataclass(frozen=True)
class InputParameters:
    """
    Configuration of one permutation instance.

    One record per supported rate (state width t = rate + capacity).
    """

    security_level: int = 128
    """Target security M in bits."""

    t: int = 3
    """State width (number of field elements)."""

    field: Type[FieldElement] = Fq
    """Field element class; its modulus is the field identity."""

    allow_inverse: bool = False
    """Whether the inverse S-box x -> x^-1 may be chosen."""

    def __post_init__(self):
        if self.security_level <= 0:
            raise ValueError(f"Security level must be positive, got {self.security_level}")
        if self.t < 2:
            raise ValueError(f"State width must be at least 2, got {self.t}")
        if not (isinstance(self.field, type) and issubclass(self.field, FieldElement)):
            raise TypeError(f"field must be a FieldElement subclass, got {self.field!r}")

    @property
    def p(self) -> int:
        """Field modulus."""
        return self.field.MODULUS

    @property
    def log_2_p(self) -> int:
        """Bit length of the modulus."""
        return self.p.bit_length()

    @property
    def rate(self) -> int:
        """Rate with a capacity of one element."""
        return self.t - 1

    def modulus_bytes(self) -> bytes:
        """Modulus as big-endian bytes of minimal length."""
        return self.p.to_bytes((self.p.bit_length() + 7) // 8, 'big')


@dataclass(frozen=True)
class RoundNumbers:
    """
    Number of full and partial rounds.

    Full rounds are split evenly before and after the partial rounds.
    """

    full: int
    """r_F: rounds applying the S-box to every state element (even)."""

    partial: int
    """r_P: rounds applying the S-box to the first element only."""

    def __post_init__(self):
        if self.full < 2 or self.full % 2:
            raise ValueError(f"Full rounds must be even and at least 2, got {self.full}")
        if self.partial < 0:
            raise ValueError(f"Partial rounds must be non-negative, got {self.partial}")

    @property
    def half_full(self) -> int:
        """Full rounds on each side of the partial rounds."""
        return self.full // 2

    @property
    def total(self) -> int:
        return self.full + self.partial

    def sbox_count(self, t: int) -> int:
        """Number of S-box evaluations in one permutation."""
        return t * self.full + self.partial

    def with_security_margin(self) -> 'RoundNumbers':
        """Two extra full rounds, 7.5% more partial rounds (rounded up)."""
        return RoundNumbers(full=self.full + 2, partial=-(-self.partial * 43 // 40))


@dataclass(frozen=True)
class Alpha:
    """
    S-box exponent.

    A positive exponent gives x -> x^alpha; exponent -1 is the inverse
    S-box x -> x^-1 with 0 mapped to 0.
    """

    exponent: int

    def __post_init__(self):
        if self.exponent != -1 and self.exponent < 3:
            raise ValueError(f"Alpha must be -1 or at least 3, got {self.exponent}")

    @classmethod
    def inverse(cls) -> 'Alpha':
        return cls(-1)

    @property
    def is_inverse(self) -> bool:
        return self.exponent == -1

    def is_permutation(self, p: int) -> bool:
        """True when x -> x^alpha is a bijection of F_p."""
        if self.is_inverse:
            return True
        return math.gcd(self.exponent, p - 1) == 1

    def apply(self, x: FieldElement) -> FieldElement:
        """Evaluate the S-box."""
        if self.is_inverse:
            return x if x.is_zero() else x.inverse()
        return x ** self.exponent

    def to_bytes(self) -> bytes:
        """Canonical encoding: signed 4-byte big-endian exponent."""
        return self.exponent.to_bytes(4, 'big', signed=True)

    def __str__(self) -> str:
        return "inverse" if self.is_inverse else str(self.exponent)
