"""
Matrices over a Prime Field

A Matrix is a shape (n_rows, n_cols) over a flat, row-major backing list:

    linear index = row * n_cols + col

The shape is validated once at construction; every operation returns a
freshly allocated matrix and never aliases its inputs.
"""

from __future__ import annotations
from typing import Iterable, List, Optional, Sequence, Tuple, Type, Union

from .errors import DimensionError
from .field import FieldElement, Fq


Scalar = Union[FieldElement, int]


def dot_product(a: Sequence[FieldElement], b: Sequence[FieldElement]) -> FieldElement:
    """
    Dot product of two vectors of equal length.

    Both operands are produced internally with matching dimensions, so a
    length mismatch is a programming error rather than a DimensionError.
    """
    if len(a) != len(b):
        raise ValueError(f"Vectors have different lengths: {len(a)} != {len(b)}")
    if not a:
        raise ValueError("Cannot take dot product of empty vectors")

    acc = a[0] * b[0]
    for x, y in zip(a[1:], b[1:]):
        acc = acc + x * y
    return acc


def mat_mul(lhs: Matrix, rhs: Matrix) -> Matrix:
    """
    Matrix product lhs * rhs.

    Raises DimensionError unless lhs.n_cols == rhs.n_rows.
    The result has shape (lhs.n_rows, rhs.n_cols).
    """
    if lhs.n_cols != rhs.n_rows:
        raise DimensionError(
            "Matrix dimensions do not allow multiplication",
            context={'lhs': lhs.shape, 'rhs': rhs.shape},
        )
    if lhs.field is not rhs.field:
        raise TypeError(f"Cannot multiply {lhs.field.__name__} and {rhs.field.__name__} matrices")

    if lhs.n_cols == 0:
        return Matrix.zeros(lhs.n_rows, rhs.n_cols, lhs.field)

    # Rows of the transposed rhs are the columns of rhs
    columns = rhs.transpose().rows()
    elements = [
        dot_product(row, column)
        for row in lhs.rows()
        for column in columns
    ]
    return type(lhs)._like(lhs.n_rows, rhs.n_cols, elements, lhs.field)


class Matrix:
    """
    Rectangular matrix over a prime field.

    Elements may be given as field elements or ints (reduced into `field`).
    The field defaults to the type of the first element, else Fq.
    """

    __slots__ = ('_n_rows', '_n_cols', '_field', '_elements', '_read_only')

    def __init__(
        self,
        n_rows: int,
        n_cols: int,
        elements: Iterable[Scalar],
        field: Optional[Type[FieldElement]] = None,
    ):
        elements = list(elements)
        if n_rows < 0 or n_cols < 0:
            raise DimensionError(
                f"Negative matrix dimensions {n_rows}x{n_cols}",
                context={'shape': (n_rows, n_cols)},
            )
        if len(elements) != n_rows * n_cols:
            raise DimensionError(
                f"Expected {n_rows * n_cols} elements for a {n_rows}x{n_cols} matrix, "
                f"got {len(elements)}",
                context={'shape': (n_rows, n_cols), 'n_elements': len(elements)},
            )

        if field is None:
            field = next(
                (type(e) for e in elements if isinstance(e, FieldElement)),
                Fq,
            )

        self._n_rows = n_rows
        self._n_cols = n_cols
        self._field = field
        self._elements = [_to_field(e, field) for e in elements]
        self._read_only = False

    @classmethod
    def _like(
        cls,
        n_rows: int,
        n_cols: int,
        elements: List[FieldElement],
        field: Type[FieldElement],
    ) -> Matrix:
        """Construct an operation result of the given shape."""
        return Matrix(n_rows, n_cols, elements, field)

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Scalar]],
        field: Optional[Type[FieldElement]] = None,
    ) -> Matrix:
        """Build a matrix from a list of equal-length rows."""
        n_rows = len(rows)
        n_cols = len(rows[0]) if rows else 0
        for i, row in enumerate(rows):
            if len(row) != n_cols:
                raise DimensionError(
                    f"Row {i} has {len(row)} elements, expected {n_cols}",
                    context={'row': i},
                )
        return Matrix(n_rows, n_cols, [e for row in rows for e in row], field)

    @classmethod
    def zeros(cls, n_rows: int, n_cols: int, field: Type[FieldElement] = Fq) -> Matrix:
        return Matrix(n_rows, n_cols, [field.zero()] * (n_rows * n_cols), field)

    # =========================================================================
    # Element Access
    # =========================================================================

    @property
    def n_rows(self) -> int:
        return self._n_rows

    @property
    def n_cols(self) -> int:
        return self._n_cols

    @property
    def field(self) -> Type[FieldElement]:
        return self._field

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.n_rows, self.n_cols)

    @property
    def elements(self) -> Tuple[FieldElement, ...]:
        """Row-major elements (read-only view)."""
        return tuple(self._elements)

    @property
    def is_read_only(self) -> bool:
        return self._read_only

    def _index(self, i: int, j: int) -> int:
        if not (0 <= i < self.n_rows and 0 <= j < self.n_cols):
            raise IndexError(
                f"Index ({i}, {j}) out of range for {self.n_rows}x{self.n_cols} matrix"
            )
        return i * self.n_cols + j

    def get_element(self, i: int, j: int) -> FieldElement:
        return self._elements[self._index(i, j)]

    def set_element(self, i: int, j: int, value: Scalar) -> None:
        index = self._index(i, j)
        if self._read_only:
            raise TypeError("Matrix is read-only")
        self._elements[index] = _to_field(value, self.field)

    def __getitem__(self, key: Tuple[int, int]) -> FieldElement:
        i, j = key
        return self.get_element(i, j)

    def __setitem__(self, key: Tuple[int, int], value: Scalar) -> None:
        i, j = key
        self.set_element(i, j, value)

    def rows(self) -> List[List[FieldElement]]:
        """Copy of the rows as lists."""
        c = self.n_cols
        return [self._elements[i * c:(i + 1) * c] for i in range(self.n_rows)]

    def row_vector(self, i: int) -> Matrix:
        """Row i as a 1 x n_cols matrix."""
        self._index(i, 0)
        c = self.n_cols
        return Matrix(1, c, self._elements[i * c:(i + 1) * c], self.field)

    def column_vector(self, j: int) -> Matrix:
        """Column j as an n_rows x 1 matrix."""
        self._index(0, j)
        return Matrix(self.n_rows, 1, self._elements[j::self.n_cols], self.field)

    # =========================================================================
    # Operations
    # =========================================================================

    def transpose(self) -> Matrix:
        """Swap dimensions; element (i, j) moves to (j, i)."""
        r, c = self.n_rows, self.n_cols
        elements = [self._elements[i * c + j] for j in range(c) for i in range(r)]
        return type(self)._like(c, r, elements, self.field)

    def hadamard_product(self, other: Matrix) -> Matrix:
        """Element-wise product; shapes must match exactly."""
        self._check_same_shape(other, 'hadamard product')
        elements = [a * b for a, b in zip(self._elements, other._elements)]
        return type(self)._like(self.n_rows, self.n_cols, elements, self.field)

    def scale(self, scalar: Scalar) -> Matrix:
        """Multiply every element by a scalar."""
        elements = [e * scalar for e in self._elements]
        return type(self)._like(self.n_rows, self.n_cols, elements, self.field)

    def __add__(self, other: Matrix) -> Matrix:
        self._check_same_shape(other, 'addition')
        elements = [a + b for a, b in zip(self._elements, other._elements)]
        return type(self)._like(self.n_rows, self.n_cols, elements, self.field)

    def __sub__(self, other: Matrix) -> Matrix:
        self._check_same_shape(other, 'subtraction')
        elements = [a - b for a, b in zip(self._elements, other._elements)]
        return type(self)._like(self.n_rows, self.n_cols, elements, self.field)

    def __neg__(self) -> Matrix:
        return type(self)._like(
            self.n_rows, self.n_cols, [-e for e in self._elements], self.field
        )

    def __mul__(self, other):
        """Matrix product with a Matrix, scaling with a scalar."""
        if isinstance(other, Matrix):
            return mat_mul(self, other)
        if isinstance(other, (FieldElement, int)):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, (FieldElement, int)):
            return self.scale(other)
        return NotImplemented

    def __matmul__(self, other: Matrix) -> Matrix:
        return mat_mul(self, other)

    def _check_same_shape(self, other: Matrix, operation: str) -> None:
        if self.shape != other.shape:
            raise DimensionError(
                f"Shapes {self.shape} and {other.shape} do not match for {operation}",
                context={'lhs': self.shape, 'rhs': other.shape},
            )

    # =========================================================================
    # Copies & Conversion
    # =========================================================================

    def copy(self) -> Matrix:
        """Writable copy."""
        return type(self)._like(self.n_rows, self.n_cols, list(self._elements), self.field)

    def read_only(self) -> Matrix:
        """Copy that rejects set_element()."""
        frozen = self.copy()
        frozen._read_only = True
        return frozen

    def to_int_rows(self) -> List[List[int]]:
        return [[e.value for e in row] for row in self.rows()]

    # =========================================================================
    # Comparison
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and self._elements == other._elements

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.n_rows}x{self.n_cols}, {self.to_int_rows()})"


def _to_field(value: Scalar, field: Type[FieldElement]) -> FieldElement:
    if isinstance(value, FieldElement):
        if type(value) is not field:
            raise TypeError(f"Element of {type(value).__name__} in a {field.__name__} matrix")
        return value
    if isinstance(value, int):
        return field(value)
    raise TypeError(f"Cannot use {type(value).__name__} as a matrix element")
