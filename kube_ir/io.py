"""YAML read/write for IR documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import yaml

from kube_ir.types.ir import IR, Container, ImagePullPolicy, Service


def ir_to_dict(ir: IR) -> dict[str, Any]:
    services: dict[str, Any] = {}
    for key, service in ir.services.items():
        containers: list[dict[str, Any]] = []
        for container in service.containers:
            row: dict[str, Any] = {"name": container.name}
            if container.image:
                row["image"] = container.image
            policy = ImagePullPolicy.parse(
                container.image_pull_policy, f"services.{key}.containers.{container.name}"
            )
            if policy != ImagePullPolicy.UNSET:
                row["imagePullPolicy"] = policy.value
            containers.append(row)
        services[key] = {"replicas": service.replicas, "containers": containers}
    return {"name": ir.name, "rootDir": ir.root_dir, "services": services}


def _require_mapping(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{path} must be a mapping (type={type(value).__name__})")
    return value


def ir_from_dict(raw: Any) -> IR:
    doc = _require_mapping(raw, "IR document")

    name = doc.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError("name must be a non-empty string")
    root_dir = doc.get("rootDir", ".")
    if not isinstance(root_dir, str):
        raise ValueError("rootDir must be a string")

    ir = IR(name=name.strip(), root_dir=root_dir)
    raw_services = _require_mapping(doc.get("services") or {}, "services")
    for key, raw_service in raw_services.items():
        path = f"services.{key}"
        service_doc = _require_mapping(raw_service or {}, path)

        replicas = service_doc.get("replicas", 1)
        if isinstance(replicas, bool) or not isinstance(replicas, int) or replicas < 0:
            raise ValueError(f"{path}.replicas must be a non-negative int (got {replicas!r})")

        raw_containers = service_doc.get("containers") or []
        if not isinstance(raw_containers, list):
            raise ValueError(f"{path}.containers must be a list")

        containers: list[Container] = []
        for idx, raw_container in enumerate(raw_containers):
            container_path = f"{path}.containers[{idx}]"
            container_doc = _require_mapping(raw_container, container_path)
            container_name = container_doc.get("name")
            if not isinstance(container_name, str) or not container_name.strip():
                raise ValueError(f"{container_path}.name must be a non-empty string")
            image = container_doc.get("image") or ""
            if not isinstance(image, str):
                raise ValueError(f"{container_path}.image must be a string")
            containers.append(
                Container(
                    name=container_name.strip(),
                    image=image,
                    image_pull_policy=ImagePullPolicy.parse(
                        container_doc.get("imagePullPolicy"),
                        f"{container_path}.imagePullPolicy",
                    ),
                )
            )

        ir.add_service(Service(name=str(key), replicas=replicas, containers=containers))
    return ir


def load_ir(path: str) -> IR:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    try:
        return ir_from_dict(payload)
    except ValueError as exc:
        raise ValueError(f"Invalid IR document {path}: {exc}") from exc


def dump_ir(ir: IR, path: str | None = None) -> str:
    text = yaml.safe_dump(ir_to_dict(ir), sort_keys=False, allow_unicode=True)
    if path is not None:
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(text)
    return text
