"""Discriminated success/failure wrapper returned at stage boundaries."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class StepResult(BaseModel, Generic[T]):
    """``{success, data, error}`` envelope.

    ``data`` is set only when ``success`` is true; ``error`` only when it
    is false.
    """

    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: T) -> StepResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> StepResult[T]:
        return cls(success=False, error=error)
