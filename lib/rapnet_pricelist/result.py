from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from .errors import ApiError, AuthError, NetworkError, RapnetClientError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    kind: str
    message: str
    status_code: int | None = None
    details: str | None = None
    error: RapnetClientError | None = field(default=None, repr=False, compare=False)

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        if self.error is not None:
            raise self.error
        raise RapnetClientError(self.message)

    def unwrap_or(self, default: Any) -> Any:
        return default

    @classmethod
    def from_exception(cls, exc: ApiError | NetworkError) -> "Err":
        if isinstance(exc, AuthError):
            kind = "auth"
        elif isinstance(exc, ApiError):
            kind = "api"
        else:
            kind = "network"
        return cls(
            kind=kind,
            message=str(exc),
            status_code=getattr(exc, "status_code", None),
            details=getattr(exc, "details", None),
            error=exc,
        )


Result = Union[Ok[T], Err]
