from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from passkit.result import PassError, PassResult


class PassFn(Protocol):
    def __call__(self, ir: Any, *, logger: logging.Logger) -> PassResult:
        ...


@dataclass(frozen=True)
class PassRef:
    id: str
    fn: PassFn
    doc: str | None = None
    source: str | None = None
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise TypeError("PassRef.id must be a non-empty string")
        object.__setattr__(self, "id", self.id.strip())

        if not callable(self.fn):
            raise TypeError(f"PassRef.fn must be callable (type={type(self.fn).__name__})")

        if self.doc is not None and (not isinstance(self.doc, str) or not self.doc.strip()):
            raise TypeError("PassRef.doc must be a non-empty string or None")
        if self.source is not None and (
            not isinstance(self.source, str) or not self.source.strip()
        ):
            raise TypeError("PassRef.source must be a non-empty string or None")

        if self.tags:
            object.__setattr__(
                self, "tags", tuple(str(tag).strip() for tag in self.tags if str(tag).strip())
            )

    def run(self, ir: Any, *, logger: logging.Logger) -> PassResult:
        result = self.fn(ir, logger=logger)
        if not isinstance(result, PassResult):
            raise TypeError(
                f"Pass returned non-PassResult (pass={self.id}, type={type(result).__name__})"
            )
        if result.error is not None and result.error.pass_id is None:
            labelled = PassError(result.error.message, pass_id=self.id)
            return PassResult.failure(result.ir, labelled)
        return result
