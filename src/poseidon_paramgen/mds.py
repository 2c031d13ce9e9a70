"""
Mixing Matrix Generation

Cauchy matrix M[i][j] = 1 / (x_i + y_j) with x_i = i and y_j = t + j.
Every square submatrix of a Cauchy matrix is again a Cauchy matrix with
distinct x's and y's, so M is MDS (and in particular invertible) whenever
all x_i, y_j are distinct and every sum x_i + y_j is nonzero mod p,
i.e. for 3t - 2 < p.
"""

from typing import Type

from .field import FieldElement, Fq
from .square import SquareMatrix


def generate_mds(t: int, field: Type[FieldElement] = Fq) -> SquareMatrix:
    """Cauchy mixing matrix of width t."""
    if t < 1:
        raise ValueError(f"Width must be positive, got {t}")
    if 3 * t - 2 >= field.MODULUS:
        raise ValueError(f"Width {t} too large for a Cauchy matrix over F_{field.MODULUS}")

    xs = range(t)
    ys = range(t, 2 * t)
    return SquareMatrix(
        t,
        [field(x + y).inverse() for x in xs for y in ys],
        field,
    )
