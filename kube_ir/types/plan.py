"""Discovery plan: the upstream artifact an IR is seeded from."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

PLAN_API_VERSION = "kube-ir/v1alpha1"
PLAN_KIND = "Plan"
DEFAULT_PLAN_NAME = "myproject"


@dataclass(frozen=True)
class PlanService:
    service_name: str
    image: str | None = None
    replicas: int | None = None
    containers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.service_name, str) or not self.service_name.strip():
            raise TypeError("PlanService.service_name must be a non-empty string")
        object.__setattr__(self, "service_name", self.service_name.strip())
        if self.containers:
            object.__setattr__(
                self, "containers", tuple(str(name).strip() for name in self.containers)
            )


@dataclass
class Plan:
    name: str = DEFAULT_PLAN_NAME
    root_dir: str = "."
    services: dict[str, list[PlanService]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], *, source: str = "<plan>") -> "Plan":
        if not isinstance(raw, Mapping):
            raise ValueError(f"Plan document must be a mapping: {source}")

        kind = raw.get("kind", PLAN_KIND)
        if kind != PLAN_KIND:
            raise ValueError(f"Invalid plan kind in {source}: expected {PLAN_KIND}, got {kind!r}")

        metadata = raw.get("metadata") or {}
        if not isinstance(metadata, Mapping):
            raise ValueError(f"{source}: metadata must be a mapping")
        name = metadata.get("name", DEFAULT_PLAN_NAME)
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"{source}: metadata.name must be a non-empty string")

        spec = raw.get("spec") or {}
        if not isinstance(spec, Mapping):
            raise ValueError(f"{source}: spec must be a mapping")
        inputs = spec.get("inputs") or {}
        if not isinstance(inputs, Mapping):
            raise ValueError(f"{source}: spec.inputs must be a mapping")

        root_dir = inputs.get("rootDir", ".")
        if not isinstance(root_dir, str):
            raise ValueError(f"{source}: spec.inputs.rootDir must be a string")

        raw_services = inputs.get("services") or {}
        if not isinstance(raw_services, Mapping):
            raise ValueError(f"{source}: spec.inputs.services must be a mapping")

        services: dict[str, list[PlanService]] = {}
        for key, options in raw_services.items():
            path = f"spec.inputs.services.{key}"
            if not isinstance(options, list):
                raise ValueError(f"{source}: {path} must be a list of service options")
            services[str(key)] = [
                _parse_plan_service(option, path=f"{path}[{idx}]", source=source, key=str(key))
                for idx, option in enumerate(options)
            ]

        return cls(name=name.strip(), root_dir=root_dir, services=services)

    def to_dict(self) -> dict[str, Any]:
        services: dict[str, Any] = {}
        for key, options in self.services.items():
            rows: list[dict[str, Any]] = []
            for option in options:
                row: dict[str, Any] = {"serviceName": option.service_name}
                if option.image is not None:
                    row["image"] = option.image
                if option.replicas is not None:
                    row["replicas"] = option.replicas
                if option.containers:
                    row["containers"] = list(option.containers)
                rows.append(row)
            services[key] = rows
        return {
            "apiVersion": PLAN_API_VERSION,
            "kind": PLAN_KIND,
            "metadata": {"name": self.name},
            "spec": {"inputs": {"rootDir": self.root_dir, "services": services}},
        }


def _parse_plan_service(raw: Any, *, path: str, source: str, key: str) -> PlanService:
    if not isinstance(raw, Mapping):
        raise ValueError(f"{source}: {path} must be a mapping")

    service_name = raw.get("serviceName", key)
    if not isinstance(service_name, str) or not service_name.strip():
        raise ValueError(f"{source}: {path}.serviceName must be a non-empty string")

    image = raw.get("image")
    if image is not None and not isinstance(image, str):
        raise ValueError(f"{source}: {path}.image must be a string")

    replicas = raw.get("replicas")
    if replicas is not None:
        if isinstance(replicas, bool) or not isinstance(replicas, int) or replicas < 0:
            raise ValueError(f"{source}: {path}.replicas must be a non-negative int")

    containers = raw.get("containers") or []
    if not isinstance(containers, list):
        raise ValueError(f"{source}: {path}.containers must be a list of names")
    for idx, name in enumerate(containers):
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"{source}: {path}.containers[{idx}] must be a non-empty string")

    return PlanService(
        service_name=service_name,
        image=image,
        replicas=replicas,
        containers=tuple(containers),
    )


def new_plan() -> Plan:
    return Plan()


def load_plan(path: str) -> Plan:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        payload = {}
    return Plan.from_dict(payload, source=path)
