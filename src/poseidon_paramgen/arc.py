"""
Round Constants

ArcMatrix: one row of additive round constants per round, derived from a
domain-separated transcript (Arc = AddRoundConstant).

OptimizedArcMatrix: the same constants with the partial-round rows moved
forward through the mixing matrix, so that a full constant vector is added
once before the partial rounds and every later partial round only adds a
single constant to the first state element. For round index i running
backward over the partial rounds:

    u       = M^-1 * c_{i+1}
    c_i     = c_i + (0, u_1, ..., u_{t-1})
    c_{i+1} = (u_0, 0, ..., 0)

This follows calc_equivalent_constants from Appendix B of the Poseidon
paper (poseidonperm_x3_64_24_optimized.sage). The permutation output is
unchanged for every input; see permutation.permute_optimized().
"""

from __future__ import annotations
import logging
from typing import List, Tuple, Type

from .errors import DimensionError, InvalidMixingMatrixError, SingularMatrixError
from .field import FieldElement
from .input import Alpha, InputParameters, RoundNumbers
from .matrix import Matrix
from .square import SquareMatrix
from .tags import ROUND_CONSTANTS_LABEL
from .transcript import Transcript

log = logging.getLogger(__name__)


def sparse_rows(round_numbers: RoundNumbers) -> range:
    """Rows of an OptimizedArcMatrix that are zero beyond column 0."""
    r_f = round_numbers.half_full
    return range(r_f + 1, r_f + round_numbers.partial)


def partial_rows(round_numbers: RoundNumbers) -> range:
    """Rows belonging to partial rounds."""
    r_f = round_numbers.half_full
    return range(r_f, r_f + round_numbers.partial)


class ArcMatrix:
    """
    Matrix of round constants, shape (total rounds, t).

    Row r holds the constants added in round r. Read-only.
    """

    __slots__ = ('_matrix',)

    def __init__(self, matrix: Matrix):
        self._matrix = matrix if matrix.is_read_only else matrix.read_only()

    @classmethod
    def generate(
        cls,
        input: InputParameters,
        round_numbers: RoundNumbers,
        alpha: Alpha,
    ) -> ArcMatrix:
        """
        Derive the round constants for an instance.

        Pure function of its arguments: the transcript is bound to every
        parameter before the first constant is drawn.
        """
        transcript = Transcript(ROUND_CONSTANTS_LABEL)
        transcript.domain_sep(input, round_numbers, alpha)

        n_rows = round_numbers.total
        elements = [transcript.derive_field_element() for _ in range(n_rows * input.t)]
        transcript.finish()

        log.debug(
            "generated %dx%d round constants (M=%d, r_F=%d, r_P=%d, alpha=%s)",
            n_rows, input.t, input.security_level,
            round_numbers.full, round_numbers.partial, alpha,
        )
        return cls(Matrix(n_rows, input.t, elements, input.field))

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def matrix(self) -> Matrix:
        return self._matrix

    @property
    def n_rows(self) -> int:
        return self.matrix.n_rows

    @property
    def n_cols(self) -> int:
        return self.matrix.n_cols

    @property
    def shape(self) -> Tuple[int, int]:
        return self.matrix.shape

    @property
    def field(self) -> Type[FieldElement]:
        return self.matrix.field

    @property
    def elements(self) -> Tuple[FieldElement, ...]:
        return self.matrix.elements

    def get_element(self, i: int, j: int) -> FieldElement:
        return self.matrix.get_element(i, j)

    def row(self, i: int) -> List[FieldElement]:
        """Constants of round i."""
        return self.matrix.row_vector(i).rows()[0]

    def rows(self) -> List[List[FieldElement]]:
        return self.matrix.rows()

    def transpose(self) -> Matrix:
        return self.matrix.transpose()

    def to_int_rows(self) -> List[List[int]]:
        return self.matrix.to_int_rows()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.matrix == other.matrix

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.n_rows}x{self.n_cols})"


class OptimizedArcMatrix(ArcMatrix):
    """Round constants rearranged for the optimized partial-round schedule."""

    __slots__ = ()

    @classmethod
    def transform(
        cls,
        arc: ArcMatrix,
        mds: Matrix,
        round_numbers: RoundNumbers,
    ) -> OptimizedArcMatrix:
        """
        Move partial-round constants forward through the mixing matrix.

        Raises InvalidMixingMatrixError if `mds` is non-square, not of
        width arc.n_cols, or singular. Raises TypeError if `arc` is already
        optimized.
        """
        if isinstance(arc, OptimizedArcMatrix):
            raise TypeError("Round constants are already optimized")
        t = arc.n_cols
        mds_inverse = _mixing_inverse(mds, t, arc.field)
        if arc.n_rows != round_numbers.total:
            raise DimensionError(
                f"Round constants have {arc.n_rows} rows, expected {round_numbers.total}",
                context={'shape': arc.shape, 'total_rounds': round_numbers.total},
            )

        rows = arc.rows()
        zero = arc.field.zero()
        r_f = round_numbers.half_full

        for i in range(round_numbers.total - r_f - 2, r_f - 1, -1):
            moved = mds_inverse.mul_vector(rows[i + 1])
            rows[i] = [rows[i][0]] + [c + u for c, u in zip(rows[i][1:], moved[1:])]
            rows[i + 1] = [moved[0]] + [zero] * (t - 1)

        log.debug(
            "moved constants of %d partial rounds forward (t=%d)",
            max(round_numbers.partial - 1, 0), t,
        )
        return cls(Matrix.from_rows(rows, arc.field))


def _mixing_inverse(mds: Matrix, t: int, field: Type[FieldElement]) -> SquareMatrix:
    if mds.n_rows != mds.n_cols:
        raise InvalidMixingMatrixError(
            f"Mixing matrix of shape {mds.shape} is not square",
            context={'shape': mds.shape},
        )
    if mds.n_rows != t:
        raise InvalidMixingMatrixError(
            f"Mixing matrix has width {mds.n_rows}, state width is {t}",
            context={'shape': mds.shape, 't': t},
        )
    if mds.field is not field:
        raise InvalidMixingMatrixError(
            f"Mixing matrix is over {mds.field.__name__}, constants over {field.__name__}"
        )
    try:
        return SquareMatrix.from_matrix(mds).inverse()
    except SingularMatrixError as e:
        raise InvalidMixingMatrixError(
            "Mixing matrix is not invertible",
            context={'shape': mds.shape},
        ) from e
