"""
Square Matrix Algebra

Determinant, cofactors and inverse for small square matrices.

The determinant is computed by recursive cofactor expansion along the first
row. This is exponential in the dimension, which is acceptable here: every
mixing matrix has width <= 8 and parameters are generated once, offline.
The inverse is the adjugate divided by the determinant:

    A^-1 = transpose(cofactors(A)) * det(A)^-1

All arithmetic is exact modular arithmetic on the field's integer
representatives.
"""

from __future__ import annotations
import math
from typing import Iterable, List, Optional, Sequence, Type

from .errors import DimensionError, SingularMatrixError
from .field import FieldElement, Fq
from .matrix import Matrix, Scalar, dot_product


def _minor_values(values: Sequence[int], n: int, row: int, col: int) -> List[int]:
    """Row-major values of the matrix with `row` and `col` removed."""
    return [
        values[i * n + k]
        for i in range(n) if i != row
        for k in range(n) if k != col
    ]


def _determinant(values: Sequence[int], n: int, p: int) -> int:
    """Cofactor expansion along row 0, mod p."""
    if n == 0:
        return 1
    if n == 1:
        return values[0] % p
    if n == 2:
        a, b, c, d = values
        return (a * d - b * c) % p

    acc = 0
    for j in range(n):
        a = values[j]
        if a == 0:
            continue
        term = a * _determinant(_minor_values(values, n, 0, j), n - 1, p)
        if j % 2:
            acc -= term
        else:
            acc += term
    return acc % p


class SquareMatrix(Matrix):
    """
    N x N matrix over a prime field.

    Invertible iff determinant() != 0.
    """

    __slots__ = ()

    def __init__(
        self,
        n: int,
        elements: Iterable[Scalar],
        field: Optional[Type[FieldElement]] = None,
    ):
        super().__init__(n, n, elements, field)

    @classmethod
    def _like(cls, n_rows, n_cols, elements, field) -> Matrix:
        if n_rows == n_cols:
            return SquareMatrix(n_rows, elements, field)
        return Matrix(n_rows, n_cols, elements, field)

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def identity(cls, n: int, field: Type[FieldElement] = Fq) -> SquareMatrix:
        """Ones on the diagonal, zeros elsewhere."""
        one, zero = field.one(), field.zero()
        return cls(n, [one if i == j else zero for i in range(n) for j in range(n)], field)

    @classmethod
    def from_vec(
        cls,
        elements: Sequence[Scalar],
        field: Optional[Type[FieldElement]] = None,
    ) -> SquareMatrix:
        """Build from a row-major list whose length is a perfect square."""
        n = math.isqrt(len(elements))
        if n * n != len(elements):
            raise DimensionError(
                f"{len(elements)} elements do not form a square matrix",
                context={'n_elements': len(elements)},
            )
        return cls(n, elements, field)

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Scalar]],
        field: Optional[Type[FieldElement]] = None,
    ) -> SquareMatrix:
        return cls.from_matrix(Matrix.from_rows(rows, field))

    @classmethod
    def from_matrix(cls, matrix: Matrix) -> SquareMatrix:
        """View a square Matrix as a SquareMatrix (copies)."""
        if matrix.n_rows != matrix.n_cols:
            raise DimensionError(
                f"Matrix of shape {matrix.shape} is not square",
                context={'shape': matrix.shape},
            )
        return cls(matrix.n_rows, matrix.elements, matrix.field)

    @property
    def dim(self) -> int:
        return self.n_rows

    # =========================================================================
    # Algebra
    # =========================================================================

    def _values(self) -> List[int]:
        return [e.value for e in self._elements]

    def determinant(self) -> FieldElement:
        """Exact determinant by recursive cofactor expansion."""
        return self.field(_determinant(self._values(), self.dim, self.field.MODULUS))

    def is_invertible(self) -> bool:
        return not self.determinant().is_zero()

    def minor(self, i: int, j: int) -> SquareMatrix:
        """Matrix with row i and column j removed."""
        self._index(i, j)
        return SquareMatrix(
            self.dim - 1,
            _minor_values(self._elements, self.dim, i, j),
            self.field,
        )

    def cofactors(self) -> SquareMatrix:
        """Entry (i, j) is (-1)^(i+j) * det(minor(i, j))."""
        n, p = self.dim, self.field.MODULUS
        values = self._values()
        elements = []
        for i in range(n):
            for j in range(n):
                det = _determinant(_minor_values(values, n, i, j), n - 1, p)
                elements.append(-det if (i + j) % 2 else det)
        return SquareMatrix(n, elements, self.field)

    def adjugate(self) -> SquareMatrix:
        return self.cofactors().transpose()

    def inverse(self) -> SquareMatrix:
        """
        Inverse via the adjugate formula.

        Raises SingularMatrixError when the determinant is zero.
        """
        det = self.determinant()
        if det.is_zero():
            raise SingularMatrixError(
                f"{self.dim}x{self.dim} matrix has zero determinant",
                context={'dim': self.dim},
            )
        return self.adjugate().scale(det.inverse())

    def mul_vector(self, vector: Sequence[Scalar]) -> List[FieldElement]:
        """Compute M * v for a column vector v given as a list."""
        if len(vector) != self.dim:
            raise DimensionError(
                f"Vector of length {len(vector)} does not match {self.dim}x{self.dim} matrix",
                context={'dim': self.dim, 'length': len(vector)},
            )
        if self.dim == 0:
            return []
        vector = [self.field(v) if isinstance(v, int) else v for v in vector]
        return [dot_product(row, vector) for row in self.rows()]
