"""Execution engine for ordered pass sequences.

This module is intentionally app-agnostic and must not import `kube_ir.*`.
"""

from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Literal, Protocol, TypeAlias

from passkit.pass_types import PassRef
from passkit.result import PassError

OnError: TypeAlias = Literal["continue", "halt"]
ALLOWED_ON_ERROR: tuple[str, ...] = ("continue", "halt")


def utc_now_iso8601() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class PassRecord:
    pass_id: str
    index: int
    ok: bool
    started_at: str
    duration_ms: float
    error: str | None = None


@dataclass(frozen=True)
class PipelineRun:
    ir: Any
    records: tuple[PassRecord, ...] = ()
    errors: tuple[PassError, ...] = ()
    halted: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors


class PassRecorder(Protocol):
    def on_pass_start(
        self, logger: logging.Logger, pass_id: str, *, index: int, total: int
    ) -> None:
        ...

    def on_pass_end(self, logger: logging.Logger, record: PassRecord) -> None:
        ...

    def on_pass_error(self, logger: logging.Logger, pass_id: str, exc: Exception) -> None:
        ...


class DefaultPassRecorder:
    def on_pass_start(
        self, logger: logging.Logger, pass_id: str, *, index: int, total: int
    ) -> None:
        logger.debug("Pass %d/%d: %s", index + 1, total, pass_id)

    def on_pass_end(self, logger: logging.Logger, record: PassRecord) -> None:
        if record.ok:
            logger.info("Completed pass %s (duration_ms=%.3f)", record.pass_id, record.duration_ms)
            return
        logger.warning("Pass %s failed: %s", record.pass_id, record.error)

    def on_pass_error(self, logger: logging.Logger, pass_id: str, exc: Exception) -> None:
        logger.error("Pass raised: %s (%s: %s)", pass_id, type(exc).__name__, exc)


class NullPassRecorder:
    def on_pass_start(
        self, logger: logging.Logger, pass_id: str, *, index: int, total: int
    ) -> None:
        return

    def on_pass_end(self, logger: logging.Logger, record: PassRecord) -> None:
        return

    def on_pass_error(self, logger: logging.Logger, pass_id: str, exc: Exception) -> None:
        return


@dataclass(frozen=True)
class PassPipeline:
    """Threads one IR value through passes in order.

    Each pass runs on a deep copy of the current IR, and that copy is only
    promoted when the pass succeeds. A failed pass therefore never leaks a partial
    mutation, neither to later passes nor to the caller's own IR object.
    """

    passes: tuple[PassRef, ...]
    on_error: OnError = "continue"
    recorder: PassRecorder = field(default_factory=DefaultPassRecorder)

    def __post_init__(self) -> None:
        passes = tuple(self.passes)
        seen: set[str] = set()
        for ref in passes:
            if not isinstance(ref, PassRef):
                raise TypeError(f"PassPipeline.passes must contain PassRef (type={type(ref).__name__})")
            if ref.id in seen:
                raise ValueError(f"Duplicate pass in pipeline: {ref.id}")
            seen.add(ref.id)
        object.__setattr__(self, "passes", passes)

        if self.on_error not in ALLOWED_ON_ERROR:
            raise ValueError(f"Invalid on_error policy: {self.on_error}")

        for name in ("on_pass_start", "on_pass_end", "on_pass_error"):
            method = getattr(self.recorder, name, None)
            if method is None or not callable(method):
                raise TypeError(f"Pass recorder missing required method: {name}")

    @classmethod
    def of(
        cls,
        passes: Iterable[PassRef],
        *,
        on_error: OnError = "continue",
        recorder: PassRecorder | None = None,
    ) -> "PassPipeline":
        return cls(
            passes=tuple(passes),
            on_error=on_error,
            recorder=recorder or DefaultPassRecorder(),
        )

    def run(self, ir: Any, *, logger: logging.Logger) -> PipelineRun:
        records: list[PassRecord] = []
        errors: list[PassError] = []
        total = len(self.passes)
        current = ir

        for index, ref in enumerate(self.passes):
            self.recorder.on_pass_start(logger, ref.id, index=index, total=total)
            working = copy.deepcopy(current)
            started_at = utc_now_iso8601()
            start = time.perf_counter()
            try:
                result = ref.run(working, logger=logger)
            except Exception as exc:
                self.recorder.on_pass_error(logger, ref.id, exc)
                raise
            duration_ms = (time.perf_counter() - start) * 1000.0

            error = result.error
            if error is None:
                current = result.ir
                record = PassRecord(
                    pass_id=ref.id,
                    index=index,
                    ok=True,
                    started_at=started_at,
                    duration_ms=duration_ms,
                )
                records.append(record)
                self.recorder.on_pass_end(logger, record)
                continue

            errors.append(error)
            record = PassRecord(
                pass_id=ref.id,
                index=index,
                ok=False,
                started_at=started_at,
                duration_ms=duration_ms,
                error=error.message,
            )
            records.append(record)
            self.recorder.on_pass_end(logger, record)

            if self.on_error == "halt":
                logger.error("Halting pass pipeline after failed pass %s", ref.id)
                return PipelineRun(
                    ir=current, records=tuple(records), errors=tuple(errors), halted=True
                )

        return PipelineRun(ir=current, records=tuple(records), errors=tuple(errors), halted=False)
