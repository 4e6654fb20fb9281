"""
Result models returned by editor, resolver and import operations.

Operations never raise to their caller; they report through these models.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class OperationResult(BaseModel):
    """Outcome of a single user-triggered operation"""
    ok: bool
    message: Optional[str] = None
    status_code: Optional[int] = None
    data: Optional[Any] = None

    @classmethod
    def success(cls, message: Optional[str] = None, data: Any = None) -> "OperationResult":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(cls, message: str, status_code: Optional[int] = None) -> "OperationResult":
        return cls(ok=False, message=message, status_code=status_code)


class ValidationResult(BaseModel):
    """Validation outcome with one message per violated rule"""
    errors: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0] if self.errors else None

    def add(self, message: str) -> None:
        if message not in self.errors:
            self.errors.append(message)
