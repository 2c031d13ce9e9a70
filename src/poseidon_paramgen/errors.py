"""
Parameter Generation Errors

Structured exceptions for the matrix layer and parameter assembly. Each
carries a stable integer code and an optional context mapping so callers
can classify failures without string matching.

- DimensionError            : shape mismatch (recoverable, inspect shapes)
- SingularMatrixError       : inverse of a matrix with zero determinant
- InvalidMixingMatrixError  : mixing matrix unusable for the transform
- ParameterValidationError  : a ParameterSet failed one or more checks

Out-of-range element access raises the built-in IndexError.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Iterable, List, Mapping, Optional


class ErrorCode(IntEnum):
    """Stable error codes."""
    GENERIC = 1000
    DIMENSION = 1001
    SINGULAR_MATRIX = 1002
    INVALID_MIXING_MATRIX = 1003
    PARAMETER_VALIDATION = 1004


class ParamgenError(Exception):
    """
    Base class for parameter generation errors.

    Parameters
    ----------
    message : str
        Human-readable description.
    code : ErrorCode | int
        Stable code for programmatic handling.
    context : Mapping[str, Any] | None
        Optional structured fields (shapes, round counts, ...).
    """

    default_code = ErrorCode.GENERIC

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.code: int = int(code if code is not None else self.default_code)
        self.context: Dict[str, Any] = dict(context) if context else {}

    def __str__(self) -> str:
        tail = f" context={self.context}" if self.context else ""
        return f"[{self.code}] {self.message}{tail}"

    def to_dict(self) -> Dict[str, Any]:
        """Structured view suitable for logs or JSON output."""
        out: Dict[str, Any] = {
            "code": self.code,
            "error": type(self).__name__,
            "message": self.message,
        }
        if self.context:
            out["context"] = dict(self.context)
        return out


class DimensionError(ParamgenError, ValueError):
    """Operands have incompatible shapes."""

    default_code = ErrorCode.DIMENSION


class SingularMatrixError(ParamgenError, ZeroDivisionError):
    """Matrix has determinant zero and cannot be inverted."""

    default_code = ErrorCode.SINGULAR_MATRIX


class InvalidMixingMatrixError(ParamgenError, ValueError):
    """Mixing matrix is non-square, of the wrong width, or singular."""

    default_code = ErrorCode.INVALID_MIXING_MATRIX


class ParameterValidationError(ParamgenError, ValueError):
    """One or more parameter checks failed; `failures` lists all of them."""

    default_code = ErrorCode.PARAMETER_VALIDATION

    def __init__(
        self,
        failures: Iterable[str],
        *,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.failures: List[str] = list(failures)
        message = "; ".join(self.failures) or "parameter validation failed"
        super().__init__(message, context=context)

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["failures"] = list(self.failures)
        return out
