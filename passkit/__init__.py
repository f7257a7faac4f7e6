"""Reusable optimization-pass kernel (result type, pass registry, pass driver).

This package is intentionally independent of `kube_ir.*`. Anything specific to the
IR being transformed must live in the consuming application.
"""

from passkit.config_namespace import ConfigNamespace
from passkit.engine.pipeline import (
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
from passkit.pass_registry import PassRegistry
from passkit.pass_types import PassFn, PassRef
from passkit.result import PassError, PassResult

__all__ = [
    "ALLOWED_ON_ERROR",
    "ConfigNamespace",
    "DefaultPassRecorder",
    "NullPassRecorder",
    "OnError",
    "PassError",
    "PassFn",
    "PassPipeline",
    "PassRecord",
    "PassRecorder",
    "PassRef",
    "PassRegistry",
    "PassResult",
    "PipelineRun",
    "utc_now_iso8601",
]
