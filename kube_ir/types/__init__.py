from kube_ir.types.ir import IR, Container, ImagePullPolicy, Service
from kube_ir.types.plan import Plan, PlanService, load_plan, new_plan

__all__ = [
    "Container",
    "IR",
    "ImagePullPolicy",
    "Plan",
    "PlanService",
    "Service",
    "load_plan",
    "new_plan",
]
