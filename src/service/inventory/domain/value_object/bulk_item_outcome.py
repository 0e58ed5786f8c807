from typing import Generic, Optional, TypeVar

import attrs

from src.platform.exception.exceptions import CustomBaseError


T = TypeVar('T')


@attrs.define(frozen=True)
class BulkItemOutcome(Generic[T]):
    """Result of one item of a bulk operation, kept at its input position."""

    index: int
    status_code: int
    result: Optional[T] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error_code is None

    @classmethod
    def success(cls, *, index: int, result: T, status_code: int = 200) -> 'BulkItemOutcome[T]':
        return cls(index=index, status_code=status_code, result=result)

    @classmethod
    def failure(cls, *, index: int, error: CustomBaseError) -> 'BulkItemOutcome[T]':
        return cls(
            index=index,
            status_code=error.status_code,
            error_code=error.code,
            error_message=error.message,
        )
