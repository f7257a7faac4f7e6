from __future__ import annotations

import logging
from typing import Iterable

from kube_ir.optimize.image_pull_policy import ImagePullPolicyOptimizer
from kube_ir.optimize.registry import get_pass_registry
from kube_ir.types.ir import IR
from passkit.engine.pipeline import OnError, PassPipeline, PassRecorder, PipelineRun
from passkit.pass_types import PassRef

DEFAULT_PASS_SEQUENCE: tuple[str, ...] = ("optimize.image_pull_policy",)


def resolve_passes(selectors: Iterable[str]) -> tuple[PassRef, ...]:
    return get_pass_registry().resolve_sequence(selectors)


def optimize_ir(
    ir: IR,
    *,
    logger: logging.Logger,
    passes: Iterable[str] | None = None,
    on_error: OnError = "continue",
    recorder: PassRecorder | None = None,
) -> PipelineRun:
    """Run the configured optimization passes over `ir` in order."""

    ir.validate()
    selectors = tuple(passes) if passes is not None else DEFAULT_PASS_SEQUENCE
    pipeline = PassPipeline.of(resolve_passes(selectors), on_error=on_error, recorder=recorder)
    logger.info("Optimizing IR %s (passes: %s)", ir.name, ", ".join(p.id for p in pipeline.passes))
    return pipeline.run(ir, logger=logger)


__all__ = [
    "DEFAULT_PASS_SEQUENCE",
    "ImagePullPolicyOptimizer",
    "get_pass_registry",
    "optimize_ir",
    "resolve_passes",
]
