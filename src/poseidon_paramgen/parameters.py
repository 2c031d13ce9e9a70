"""
Parameter Sets

ParameterSet bundles everything the permutation needs for one instance:

    (InputParameters, RoundNumbers, Alpha, mixing matrix M,
     ArcMatrix, OptimizedArcMatrix)

It is validated once, at construction, and every failed check is reported
together in a single ParameterValidationError. An invalid ParameterSet is
never returned. Matrices are stored read-only.

generate_parameters() derives a complete set from InputParameters.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import blake3

from .alpha import choose_alpha
from .arc import ArcMatrix, OptimizedArcMatrix, partial_rows, sparse_rows
from .errors import ParameterValidationError
from .input import Alpha, InputParameters, RoundNumbers
from .matrix import Matrix
from .mds import generate_mds
from .rounds import choose_round_numbers
from .square import SquareMatrix
from .tags import ParamgenTag, tag_bytes

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterSet:
    """
    Validated, immutable parameters of one permutation instance.
    """

    input: InputParameters
    """Instance configuration (security level, width, field)."""

    round_numbers: RoundNumbers
    """Full and partial round counts."""

    alpha: Alpha
    """S-box exponent."""

    mds: SquareMatrix
    """Mixing matrix (t x t, invertible)."""

    arc: ArcMatrix
    """Round constants, one row per round."""

    optimized_arc: OptimizedArcMatrix
    """Round constants for the optimized partial-round schedule."""

    def __post_init__(self):
        failures = validate(
            self.input,
            self.round_numbers,
            self.alpha,
            self.mds,
            self.arc,
            self.optimized_arc,
        )
        if failures:
            raise ParameterValidationError(
                failures,
                context={
                    't': self.input.t,
                    'r_F': self.round_numbers.full,
                    'r_P': self.round_numbers.partial,
                },
            )
        object.__setattr__(self, 'mds', SquareMatrix.from_matrix(self.mds).read_only())

    # ==========================================================================
    # Accessors
    # ==========================================================================

    @property
    def t(self) -> int:
        return self.input.t

    @property
    def rate(self) -> int:
        return self.input.rate

    # ==========================================================================
    # Serialization
    # ==========================================================================

    def serialize(self) -> bytes:
        """
        Canonical serialization.

        Format:
            security_level(8) || t(8) || modulus_len(2) || modulus ||
            allow_inverse(1) || r_F(8) || r_P(8) || alpha(4) ||
            M elements || arc elements || optimized arc elements

        Field elements are little-endian, fixed width.
        """
        modulus = self.input.modulus_bytes()
        parts = [
            self.input.security_level.to_bytes(8, 'big'),
            self.input.t.to_bytes(8, 'big'),
            len(modulus).to_bytes(2, 'big'),
            modulus,
            bytes([self.input.allow_inverse]),
            self.round_numbers.full.to_bytes(8, 'big'),
            self.round_numbers.partial.to_bytes(8, 'big'),
            self.alpha.to_bytes(),
        ]
        for matrix in (self.mds, self.arc, self.optimized_arc):
            parts.extend(e.to_bytes() for e in matrix.elements)
        return b''.join(parts)

    def fingerprint(self) -> str:
        """BLAKE3 digest (hex) of the canonical serialization."""
        h = blake3.blake3(tag_bytes(ParamgenTag.FINGERPRINT))
        h.update(self.serialize())
        return h.hexdigest()

    def __hash__(self) -> int:
        return hash(self.fingerprint())

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready view; field elements as decimal strings."""
        def _rows(matrix) -> List[List[str]]:
            return [[str(v) for v in row] for row in matrix.to_int_rows()]

        return {
            'modulus': str(self.input.p),
            'security_level': self.input.security_level,
            't': self.input.t,
            'rate': self.input.rate,
            'allow_inverse': self.input.allow_inverse,
            'alpha': str(self.alpha),
            'r_F': self.round_numbers.full,
            'r_P': self.round_numbers.partial,
            'mds': _rows(self.mds),
            'arc': _rows(self.arc),
            'optimized_arc': _rows(self.optimized_arc),
            'fingerprint': self.fingerprint(),
        }


def validate(
    input: InputParameters,
    round_numbers: RoundNumbers,
    alpha: Alpha,
    mds: Matrix,
    arc: ArcMatrix,
    optimized_arc: OptimizedArcMatrix,
) -> List[str]:
    """Run every parameter check and return the list of failures."""
    failures: List[str] = []
    t, field = input.t, input.field

    # Alpha
    if not alpha.is_permutation(input.p):
        failures.append(f"alpha={alpha} is not a permutation of the field (gcd(alpha, p-1) != 1)")
    if alpha.is_inverse and not input.allow_inverse:
        failures.append("inverse S-box selected but not allowed by the input parameters")

    # Mixing matrix
    mds_ok = False
    if not isinstance(mds, Matrix):
        failures.append(f"mixing matrix must be a Matrix, got {type(mds).__name__}")
    else:
        if mds.field is not field:
            failures.append(f"mixing matrix is over {mds.field.__name__}, expected {field.__name__}")
        if mds.n_rows != mds.n_cols:
            failures.append(f"mixing matrix is not square: shape {mds.shape}")
        else:
            if mds.n_rows != t:
                failures.append(f"mixing matrix width {mds.n_rows} does not match state width {t}")
            if mds.field is field and SquareMatrix.from_matrix(mds).determinant().is_zero():
                failures.append("mixing matrix is not invertible")
            elif mds.field is field and mds.n_rows == t:
                mds_ok = True

    # Round constants
    arc_ok = isinstance(arc, ArcMatrix) and not isinstance(arc, OptimizedArcMatrix)
    if not arc_ok:
        failures.append(f"round constants must be an ArcMatrix, got {type(arc).__name__}")
    else:
        if arc.field is not field:
            failures.append(f"round constants are over {arc.field.__name__}, expected {field.__name__}")
        if arc.n_cols != t:
            failures.append(f"round constants width {arc.n_cols} does not match state width {t}")
        if arc.n_rows != round_numbers.total:
            failures.append(
                f"round constants have {arc.n_rows} rows, expected {round_numbers.total} "
                f"(r_F={round_numbers.full}, r_P={round_numbers.partial})"
            )
            arc_ok = False

    # Optimized round constants
    if not isinstance(optimized_arc, OptimizedArcMatrix):
        failures.append(
            f"optimized round constants must be an OptimizedArcMatrix, got {type(optimized_arc).__name__}"
        )
    elif arc_ok:
        if optimized_arc.field is not arc.field:
            failures.append("optimized round constants are over a different field than the round constants")
        elif optimized_arc.shape != arc.shape:
            failures.append(
                f"optimized round constants shape {optimized_arc.shape} does not match {arc.shape}"
            )
        else:
            layout = _check_optimized_layout(arc, optimized_arc, round_numbers)
            failures.extend(layout)
            if mds_ok and not layout and arc.n_cols == t and arc.field is field:
                expected = OptimizedArcMatrix.transform(arc, mds, round_numbers)
                if optimized_arc.matrix != expected.matrix:
                    failures.append("optimized round constants do not match transform(arc, mds)")

    return failures


def _check_optimized_layout(
    arc: ArcMatrix,
    optimized_arc: OptimizedArcMatrix,
    round_numbers: RoundNumbers,
) -> List[str]:
    failures = []
    moved = partial_rows(round_numbers)
    arc_rows, opt_rows = arc.rows(), optimized_arc.rows()

    changed = [i for i in range(arc.n_rows) if i not in moved and arc_rows[i] != opt_rows[i]]
    if changed:
        failures.append(f"optimized round constants differ outside the partial rounds (rows {changed})")

    dense = [i for i in sparse_rows(round_numbers) if any(not e.is_zero() for e in opt_rows[i][1:])]
    if dense:
        failures.append(f"optimized partial-round constants are not sparse (rows {dense})")
    return failures


def generate_parameters(
    input: InputParameters,
    round_numbers: Optional[RoundNumbers] = None,
    alpha: Optional[Alpha] = None,
    mds: Optional[Matrix] = None,
) -> ParameterSet:
    """
    Derive a complete ParameterSet.

    Omitted pieces come from choose_alpha(), choose_round_numbers() and
    generate_mds(). Raises InvalidMixingMatrixError for an unusable `mds`
    and ParameterValidationError if the assembled set fails validation.
    """
    if alpha is None:
        alpha = choose_alpha(input.p, input.allow_inverse)
    if round_numbers is None:
        round_numbers = choose_round_numbers(input, alpha)
    if mds is None:
        mds = generate_mds(input.t, input.field)

    arc = ArcMatrix.generate(input, round_numbers, alpha)
    optimized_arc = OptimizedArcMatrix.transform(arc, mds, round_numbers)

    parameter_set = ParameterSet(
        input=input,
        round_numbers=round_numbers,
        alpha=alpha,
        mds=mds,
        arc=arc,
        optimized_arc=optimized_arc,
    )
    log.debug(
        "parameter set t=%d M=%d alpha=%s r_F=%d r_P=%d fingerprint=%s",
        input.t, input.security_level, alpha,
        round_numbers.full, round_numbers.partial, parameter_set.fingerprint()[:16],
    )
    return parameter_set
