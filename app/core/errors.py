# app/core/errors.py
"""
Result types for the storefront core.

Cart, checkout and review operations report expected failures (bad input,
missing product, not enough stock) as values instead of raising. Routers
turn a Failure into an HTTPException with `raise_for_failure`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from fastapi import HTTPException, status

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    AUTH = "auth"
    STOCK = "stock"


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.AUTH: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.STOCK: status.HTTP_400_BAD_REQUEST,
}


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def validation(cls, message: str) -> "Failure":
        return cls(ErrorKind.VALIDATION, message)

    @classmethod
    def not_found(cls, message: str) -> "Failure":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def auth(cls, message: str) -> "Failure":
        return cls(ErrorKind.AUTH, message)

    @classmethod
    def stock(cls, message: str) -> "Failure":
        return cls(ErrorKind.STOCK, message)


Result = Success[T] | Failure


def raise_for_failure(result: "Result[T]") -> T:
    """
    Unwrap a Success, or raise the HTTPException matching a Failure.

    Raises:
        HTTPException: 400 (validation/stock), 404 (not found), 401 (auth).
    """
    if isinstance(result, Failure):
        raise HTTPException(
            status_code=HTTP_STATUS_BY_KIND[result.kind],
            detail=result.message,
        )
    return result.value
