from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ErrorDescriptor(BaseModel):
    """Store failure shown to the user verbatim."""
    message: str


class StoreResult(BaseModel, Generic[T]):
    """Outcome of a gateway call: either ``data`` or ``error``."""
    data: T | None = None
    error: ErrorDescriptor | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "StoreResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, message: str) -> "StoreResult[T]":
        return cls(error=ErrorDescriptor(message=message))
