from __future__ import annotations

import logging

from kube_ir.types.ir import IR, ImagePullPolicy
from passkit.pass_types import PassRef
from passkit.result import PassResult

PASS_ID = "optimize.image_pull_policy"

DEFAULT_IMAGE_PULL_POLICY = ImagePullPolicy.ALWAYS

_logger = logging.getLogger(__name__)


class ImagePullPolicyOptimizer:
    """Gives every container an explicit image pull policy.

    Unset policies become `Always`; policies that are already set are left as-is,
    so running the pass on its own output is a no-op. The IR is mutated in place
    and the pass cannot fail.
    """

    def optimize(self, ir: IR, *, logger: logging.Logger | None = None) -> PassResult:
        log = logger or _logger
        defaulted = 0
        for service in ir.services.values():
            for container in service.containers:
                if container.image_pull_policy == ImagePullPolicy.UNSET:
                    container.image_pull_policy = DEFAULT_IMAGE_PULL_POLICY
                    defaulted += 1
        log.debug(
            "Defaulted image pull policy to %s for %d container(s)",
            DEFAULT_IMAGE_PULL_POLICY.value,
            defaulted,
        )
        return PassResult.success(ir)


def _run(ir: IR, *, logger: logging.Logger) -> PassResult:
    return ImagePullPolicyOptimizer().optimize(ir, logger=logger)


PASS = PassRef(
    id=PASS_ID,
    fn=_run,
    doc="Set imagePullPolicy to Always on every container that leaves it unset.",
    source="kube_ir.optimize.image_pull_policy",
    tags=("containers", "idempotent"),
)

__all_passes__ = [PASS]
