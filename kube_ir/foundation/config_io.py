"""Run-config discovery for `kube_ir`.

Resolution order:
  1. an explicit `--config` path,
  2. the file named by `$KUBE_IR_CONFIG`,
  3. `config/config.yaml` under the project root found from the start directory,
     with `config/config.local.yaml` merged on top when present,
  4. nothing at all, in which case built-in defaults apply.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import yaml

DEFAULT_CONFIG_ENV_VAR = "KUBE_IR_CONFIG"
CONFIG_DIR = "config"
BASE_CONFIG_NAME = "config.yaml"
LOCAL_CONFIG_NAME = "config.local.yaml"
PROJECT_MARKERS = ("pyproject.toml", ".git")

ConfigSource = Literal["explicit", "env", "project", "project+local", "defaults"]


@dataclass(frozen=True)
class LoadedConfig:
    data: dict[str, Any]
    source: ConfigSource
    paths: tuple[str, ...] = ()


def find_project_root(start: str | os.PathLike[str] | None = None) -> Path | None:
    here = Path(start or os.getcwd()).resolve()
    if here.is_file():
        here = here.parent
    for candidate in (here, *here.parents):
        if any((candidate / marker).exists() for marker in PROJECT_MARKERS):
            return candidate
    return None


def read_yaml_mapping(path: str | os.PathLike[str]) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Config file must contain a YAML mapping: {path}")
    return dict(payload)


def merge_overlay(
    base: Mapping[str, Any], overlay: Mapping[str, Any], *, path: str = ""
) -> dict[str, Any]:
    """Overlay sections merge key by key; scalars and lists from the overlay win.

    A section in one file that is a scalar or list in the other is an error.
    """

    merged = dict(base)
    for key, value in overlay.items():
        key_path = f"{path}.{key}" if path else str(key)
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_overlay(current, value, path=key_path)
        elif current is not None and value is not None and (
            isinstance(current, Mapping) != isinstance(value, Mapping)
            or isinstance(current, list) != isinstance(value, list)
        ):
            raise ValueError(
                f"Invalid config overlay merge at {key_path}: "
                f"{type(current).__name__} in base, {type(value).__name__} in overlay"
            )
        else:
            merged[key] = value
    return merged


def load_config(
    *,
    config_path: str | os.PathLike[str] | None = None,
    env_var: str | None = DEFAULT_CONFIG_ENV_VAR,
    config_dir: str | os.PathLike[str] | None = None,
    start_dir: str | os.PathLike[str] | None = None,
) -> LoadedConfig:
    """Load the run config following the module-level resolution order.

    `config_dir` skips project-root discovery and reads the base/local pair from
    that directory; a missing base file there is an error rather than a fallback.
    """

    explicit = str(config_path).strip() if config_path is not None else ""
    if explicit:
        resolved = os.path.abspath(os.path.expanduser(explicit))
        return LoadedConfig(read_yaml_mapping(resolved), "explicit", (resolved,))

    from_env = os.environ.get(env_var, "").strip() if env_var else ""
    if from_env:
        resolved = os.path.abspath(os.path.expandvars(os.path.expanduser(from_env)))
        return LoadedConfig(read_yaml_mapping(resolved), "env", (resolved,))

    if config_dir is not None:
        directory = Path(config_dir)
        if not (directory / BASE_CONFIG_NAME).is_file():
            raise FileNotFoundError(f"Missing base config file: {directory / BASE_CONFIG_NAME}")
    else:
        root = find_project_root(start_dir)
        directory = root / CONFIG_DIR if root is not None else None
        if directory is None or not (directory / BASE_CONFIG_NAME).is_file():
            return LoadedConfig({}, "defaults")

    base_path = (directory / BASE_CONFIG_NAME).resolve()
    data = read_yaml_mapping(base_path)
    local_path = directory / LOCAL_CONFIG_NAME
    if not local_path.is_file():
        return LoadedConfig(data, "project", (str(base_path),))

    local_path = local_path.resolve()
    data = merge_overlay(data, read_yaml_mapping(local_path))
    return LoadedConfig(data, "project+local", (str(base_path), str(local_path)))
