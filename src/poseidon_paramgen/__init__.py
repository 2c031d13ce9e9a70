"""
poseidon-paramgen: Parameter Generation for Poseidon Permutations

Derives and validates the fixed parameters of a Poseidon-style permutation
over a prime field:

- S-box exponent alpha and round numbers (r_F, r_P) from the attack bounds
- Cauchy mixing matrix M
- Round constants from a domain-separated transcript
- Optimized round constants for the partial rounds

Usage:
    from poseidon_paramgen import InputParameters, generate_parameters

    params = generate_parameters(InputParameters(security_level=128, t=3))
    params.round_numbers        # RoundNumbers(full=8, partial=31)
    params.alpha                # Alpha(exponent=17)
    params.arc.row(0)           # constants of the first round

    # Named instances
    from poseidon_paramgen import rate_parameters
    params = rate_parameters(2)
"""

# Field
from .field import FieldElement, Fq, BLS12_377_SCALAR_MODULUS, make_prime_field

# Errors
from .errors import (
    ErrorCode,
    ParamgenError,
    DimensionError,
    SingularMatrixError,
    InvalidMixingMatrixError,
    ParameterValidationError,
)

# Matrices
from .matrix import Matrix, dot_product, mat_mul
from .square import SquareMatrix

# Instance parameters
from .input import InputParameters, RoundNumbers, Alpha

# Constant derivation
from .tags import ParamgenTag, tag_bytes
from .transcript import Transcript, TranscriptState
from .arc import ArcMatrix, OptimizedArcMatrix

# Security estimation
from .alpha import choose_alpha
from .rounds import choose_round_numbers, is_secure
from .mds import generate_mds

# Parameter sets
from .parameters import ParameterSet, generate_parameters, validate
from .permutation import permute, permute_optimized, apply_rounds, apply_optimized_rounds
from .instances import INSTANCES, rate_parameters

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Field
    "FieldElement",
    "Fq",
    "BLS12_377_SCALAR_MODULUS",
    "make_prime_field",
    # Errors
    "ErrorCode",
    "ParamgenError",
    "DimensionError",
    "SingularMatrixError",
    "InvalidMixingMatrixError",
    "ParameterValidationError",
    # Matrices
    "Matrix",
    "SquareMatrix",
    "dot_product",
    "mat_mul",
    # Instance parameters
    "InputParameters",
    "RoundNumbers",
    "Alpha",
    # Constant derivation
    "ParamgenTag",
    "tag_bytes",
    "Transcript",
    "TranscriptState",
    "ArcMatrix",
    "OptimizedArcMatrix",
    # Security estimation
    "choose_alpha",
    "choose_round_numbers",
    "is_secure",
    "generate_mds",
    # Parameter sets
    "ParameterSet",
    "generate_parameters",
    "validate",
    "permute",
    "permute_optimized",
    "apply_rounds",
    "apply_optimized_rounds",
    "INSTANCES",
    "rate_parameters",
]
