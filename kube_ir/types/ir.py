"""In-memory IR of Kubernetes-style workloads, progressively rewritten by passes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from kube_ir.types.plan import Plan


class ImagePullPolicy(str, Enum):
    ALWAYS = "Always"
    IF_NOT_PRESENT = "IfNotPresent"
    NEVER = "Never"
    UNSET = ""

    @classmethod
    def parse(cls, value: Any, path: str) -> "ImagePullPolicy":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNSET
        if isinstance(value, str):
            normalized = value.strip()
            for member in cls:
                if member.value == normalized:
                    return member
        allowed = ", ".join(member.value for member in cls if member.value)
        raise ValueError(f"Invalid image pull policy for {path}: {value!r} (allowed: {allowed})")


@dataclass
class Container:
    name: str
    image: str = ""
    image_pull_policy: ImagePullPolicy = ImagePullPolicy.UNSET

    def __post_init__(self) -> None:
        self.image_pull_policy = ImagePullPolicy.parse(
            self.image_pull_policy, f"containers.{self.name}.imagePullPolicy"
        )


@dataclass
class Service:
    name: str
    replicas: int = 1
    containers: list[Container] = field(default_factory=list)


@dataclass
class IR:
    name: str
    root_dir: str = "."
    services: dict[str, Service] = field(default_factory=dict)

    @classmethod
    def new(cls, plan: Plan) -> "IR":
        return cls(name=plan.name, root_dir=plan.root_dir, services={})

    def add_service(self, service: Service) -> None:
        if service.name in self.services:
            raise ValueError(f"Duplicate service in IR: {service.name}")
        self.services[service.name] = service

    def containers(self) -> Iterator[tuple[str, Container]]:
        for service_name, service in self.services.items():
            for container in service.containers:
                yield service_name, container

    def validate(self) -> None:
        for key, service in self.services.items():
            if service.name != key:
                raise ValueError(
                    f"Service name mismatch in IR: key={key!r} name={service.name!r}"
                )
            if isinstance(service.replicas, bool) or not isinstance(service.replicas, int):
                raise ValueError(f"services.{key}.replicas must be an int")
            if service.replicas < 0:
                raise ValueError(f"services.{key}.replicas must be >= 0 (got {service.replicas})")
