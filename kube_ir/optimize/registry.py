from __future__ import annotations

from functools import lru_cache

from passkit.pass_registry import PassRegistry
from passkit.pass_types import PassRef


@lru_cache(maxsize=1)
def get_pass_registry() -> PassRegistry:
    # Pass modules export `__all_passes__`; this is the single collection point.
    from kube_ir.optimize import image_pull_policy  # noqa: PLC0415

    refs: list[PassRef] = []
    for module in (image_pull_policy,):
        exported = getattr(module, "__all_passes__", None)
        if isinstance(exported, (list, tuple)):
            refs.extend(exported)

    return PassRegistry.from_refs(refs)
