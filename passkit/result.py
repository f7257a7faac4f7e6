from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class PassError(Exception):
    """Descriptive failure reported by an optimization pass."""

    def __init__(self, message: str, *, pass_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.pass_id = pass_id

    def __str__(self) -> str:
        if self.pass_id:
            return f"{self.pass_id}: {self.message}"
        return self.message


@dataclass(frozen=True)
class PassResult:
    """Tagged success/failure returned by every pass.

    On failure `ir` is the input IR, untouched.
    """

    ir: Any
    error: PassError | None = None

    def __post_init__(self) -> None:
        if self.error is not None and not isinstance(self.error, PassError):
            raise TypeError(
                f"PassResult.error must be a PassError or None (type={type(self.error).__name__})"
            )

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, ir: Any) -> "PassResult":
        return cls(ir=ir, error=None)

    @classmethod
    def failure(cls, ir: Any, error: PassError | str) -> "PassResult":
        if isinstance(error, str):
            if not error.strip():
                raise ValueError("PassResult.failure requires a non-empty error message")
            error = PassError(error.strip())
        return cls(ir=ir, error=error)

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.ir
