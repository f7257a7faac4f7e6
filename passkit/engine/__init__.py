"""Pass engine primitives (app-agnostic)."""

from .pipeline import (
    ALLOWED_ON_ERROR,
    DefaultPassRecorder,
    NullPassRecorder,
    OnError,
    PassPipeline,
    PassRecord,
    PassRecorder,
    PipelineRun,
    utc_now_iso8601,
)

__all__ = [
    "ALLOWED_ON_ERROR",
    "DefaultPassRecorder",
    "NullPassRecorder",
    "OnError",
    "PassPipeline",
    "PassRecord",
    "PassRecorder",
    "PipelineRun",
    "utc_now_iso8601",
]
