"""
Error taxonomy + a small success-or-error container.

Components return `Result` values instead of raising; the HTTP layer is the
only place that turns an error into a status code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar


T = TypeVar("T")


class ShimError(Exception):
    """Base class; `error` is the machine code echoed to clients."""
    error = "shim_error"
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"error": self.error, "detail": self.detail}


class UnresolvableIdentifier(ShimError):
    error = "unresolvable_identifier"
    status_code = 400


class InvalidParameter(ShimError):
    error = "invalid_parameter"
    status_code = 400


class LevelOutOfRange(ShimError):
    error = "level_out_of_range"
    status_code = 400


class MalformedMetadata(ShimError):
    error = "malformed_metadata"
    status_code = 502


class UpstreamUnavailable(ShimError):
    error = "upstream_unavailable"
    status_code = 502


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """
    Either a value or a ShimError, never both.

    Usage:
        r = parse_level("3")
        if not r.ok:
            return Result.failure(r.error)
        level = r.value
    """
    value: Optional[T] = None
    error: Optional[ShimError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ShimError) -> "Result[T]":
        return cls(error=error)
