"""
S-box Exponent Selection

x -> x^alpha is a permutation of F_p iff gcd(alpha, p - 1) = 1. Only
exponents of the form 2^k + 1 are considered, since they have the shortest
addition chains (k squarings and one multiplication).
"""

from .errors import ParameterValidationError
from .input import Alpha


CANDIDATE_EXPONENTS = (3, 5, 17)


def choose_alpha(p: int, allow_inverse: bool = False) -> Alpha:
    """
    Pick the cheapest S-box exponent that is a permutation of F_p.

    Falls back to the inverse S-box when allowed.
    """
    for exponent in CANDIDATE_EXPONENTS:
        alpha = Alpha(exponent)
        if alpha.is_permutation(p):
            return alpha

    if allow_inverse:
        return Alpha.inverse()

    raise ParameterValidationError(
        [f"no exponent in {CANDIDATE_EXPONENTS} is a permutation of F_p and the inverse S-box is not allowed"],
        context={'p': p},
    )
