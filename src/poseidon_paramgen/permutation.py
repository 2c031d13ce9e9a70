"""
Reference Permutation Schedules

A straightforward evaluation of the permutation, used to check that the
optimized round constants describe the same function as the original ones.
Not intended for hashing throughput.

Unoptimized schedule (every round r):

    x = M * S_r(x + c_r)

where S_r applies the S-box to every element in full rounds and to x[0]
only in partial rounds. Full rounds are split evenly around the partial
rounds.

Optimized schedule (partial region only):

    x = x + c'_{r_f}
    for each partial round r:
        x[0] = S(x[0])
        x[0] += c'_{r_f + r + 1}[0]     (all but the last partial round)
        x = M * x
"""

from __future__ import annotations
from typing import TYPE_CHECKING, List, Sequence

from .arc import ArcMatrix, OptimizedArcMatrix
from .errors import DimensionError
from .field import FieldElement
from .input import Alpha, RoundNumbers
from .matrix import Matrix
from .square import SquareMatrix

if TYPE_CHECKING:
    from .parameters import ParameterSet


def _prepare(state: Sequence, arc: ArcMatrix, mds: Matrix):
    if len(state) != arc.n_cols:
        raise DimensionError(
            f"State has {len(state)} elements, expected {arc.n_cols}",
            context={'t': arc.n_cols, 'length': len(state)},
        )
    field = arc.field
    state = [field(x) if isinstance(x, int) else x for x in state]
    if not isinstance(mds, SquareMatrix):
        mds = SquareMatrix.from_matrix(mds)
    return state, mds


def _full_round(state, constants, mds: SquareMatrix, alpha: Alpha) -> List[FieldElement]:
    return mds.mul_vector([alpha.apply(x + c) for x, c in zip(state, constants)])


def _partial_round(state, constants, mds: SquareMatrix, alpha: Alpha) -> List[FieldElement]:
    state = [x + c for x, c in zip(state, constants)]
    state[0] = alpha.apply(state[0])
    return mds.mul_vector(state)


def apply_rounds(
    state: Sequence,
    arc: ArcMatrix,
    mds: Matrix,
    round_numbers: RoundNumbers,
    alpha: Alpha,
) -> List[FieldElement]:
    """Evaluate the permutation with unoptimized round constants."""
    state, mds = _prepare(state, arc, mds)
    r_f = round_numbers.half_full

    for r in range(round_numbers.total):
        if r_f <= r < r_f + round_numbers.partial:
            state = _partial_round(state, arc.row(r), mds, alpha)
        else:
            state = _full_round(state, arc.row(r), mds, alpha)
    return state


def apply_optimized_rounds(
    state: Sequence,
    optimized_arc: OptimizedArcMatrix,
    mds: Matrix,
    round_numbers: RoundNumbers,
    alpha: Alpha,
) -> List[FieldElement]:
    """Evaluate the permutation with optimized round constants."""
    state, mds = _prepare(state, optimized_arc, mds)
    r_f = round_numbers.half_full
    r_P = round_numbers.partial

    for r in range(r_f):
        state = _full_round(state, optimized_arc.row(r), mds, alpha)

    if r_P:
        state = [x + c for x, c in zip(state, optimized_arc.row(r_f))]
        for r in range(r_P):
            state[0] = alpha.apply(state[0])
            if r < r_P - 1:
                state[0] = state[0] + optimized_arc.get_element(r_f + r + 1, 0)
            state = mds.mul_vector(state)

    for r in range(r_f + r_P, round_numbers.total):
        state = _full_round(state, optimized_arc.row(r), mds, alpha)
    return state


def permute(parameter_set: ParameterSet, state: Sequence) -> List[FieldElement]:
    """Permutation of a state of t field elements (reference schedule)."""
    return apply_rounds(
        state,
        parameter_set.arc,
        parameter_set.mds,
        parameter_set.round_numbers,
        parameter_set.alpha,
    )


def permute_optimized(parameter_set: ParameterSet, state: Sequence) -> List[FieldElement]:
    """Same permutation, evaluated with the optimized round constants."""
    return apply_optimized_rounds(
        state,
        parameter_set.optimized_arc,
        parameter_set.mds,
        parameter_set.round_numbers,
        parameter_set.alpha,
    )
