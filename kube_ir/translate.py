from __future__ import annotations

from kube_ir.types.ir import IR, Container, Service
from kube_ir.types.plan import Plan


def build_ir(plan: Plan) -> IR:
    """Seed an IR from a plan: one service per plan entry, pull policies left unset.

    Only the first option of each plan entry is used. The IR service is named
    after that option's `serviceName` (which defaults to the plan key), so two
    plan entries resolving to the same service name are rejected. The plan is
    not mutated.
    """

    ir = IR.new(plan)
    for key, options in plan.services.items():
        if not options:
            continue
        option = options[0]
        name = option.service_name
        if name in ir.services:
            raise ValueError(
                f"Plan entries resolve to the same service name {name!r} (plan key: {key})"
            )
        containers = [
            Container(name=container_name, image=option.image or "")
            for container_name in option.containers or (name,)
        ]
        replicas = option.replicas if option.replicas is not None else 1
        ir.add_service(Service(name=name, replicas=replicas, containers=containers))
    return ir
