"""Strict configuration namespace helper for `passkit`."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable

_MISSING = object()


@dataclass
class ConfigNamespace:
    """Typed view over one config mapping that remembers which keys were read.

    Anything never read is reported by `unknown_key_paths()` / `assert_consumed()`,
    so typos in a config file surface instead of silently falling back to defaults.
    """

    data: Mapping[str, Any]
    path: str
    _seen: set[str] = field(default_factory=set, init=False, repr=False)
    _children: dict[str, "ConfigNamespace"] = field(default_factory=dict, init=False, repr=False)

    def key_path(self, key: str) -> str:
        return f"{self.path}.{key}" if self.path else key

    def _take(self, key: str, default: Any) -> Any:
        if not isinstance(key, str) or not key.strip():
            raise TypeError("ConfigNamespace key must be a non-empty string")
        key = key.strip()
        if key in self._children:
            raise ValueError(f"{self.key_path(key)} already read as a nested namespace")
        self._seen.add(key)
        if key in self.data:
            return self.data[key]
        if default is _MISSING:
            raise ValueError(f"Missing required config key: {self.key_path(key)}")
        return default

    def unknown_key_paths(self) -> list[str]:
        """Dotted paths of every key nobody read, nested namespaces included."""

        out = sorted(self.key_path(str(key)) for key in self.data if key not in self._seen)
        for child in self._children.values():
            out.extend(child.unknown_key_paths())
        return out

    def assert_consumed(self) -> None:
        unknown = [key for key in self.data if key not in self._seen]
        if unknown:
            known = ", ".join(sorted(self._seen)) or "<none>"
            raise ValueError(
                f"Unknown config keys under {self.path or '<root>'}: "
                f"{', '.join(sorted(str(key) for key in unknown))} (known: {known})"
            )
        for child in self._children.values():
            child.assert_consumed()

    def namespace(self, key: str) -> "ConfigNamespace":
        """Nested section; a missing or null section reads as empty."""

        raw = self._take(key, None)
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise TypeError(f"{self.key_path(key)} must be a mapping (type={type(raw).__name__})")
        child = ConfigNamespace(dict(raw), path=self.key_path(key.strip()))
        self._children[key.strip()] = child
        return child

    def get_bool(self, key: str, *, default: bool | object = _MISSING) -> bool:
        value = self._take(key, default)
        if not isinstance(value, bool):
            raise TypeError(
                f"{self.key_path(key)} must be a boolean (type={type(value).__name__})"
            )
        return value

    def get_str(
        self,
        key: str,
        *,
        default: str | None | object = _MISSING,
        nullable: bool = False,
        choices: Iterable[str] | None = None,
    ) -> str | None:
        value = self._take(key, default)
        if value is None:
            if nullable:
                return None
            raise ValueError(f"{self.key_path(key)} cannot be null")
        if not isinstance(value, str):
            raise TypeError(f"{self.key_path(key)} must be a string (type={type(value).__name__})")
        value = value.strip()
        if not value:
            raise ValueError(f"{self.key_path(key)} cannot be empty")
        if choices is not None:
            allowed = tuple(choices)
            if value not in allowed:
                raise ValueError(
                    f"{self.key_path(key)} must be one of: {', '.join(allowed)} (got {value!r})"
                )
        return value

    def get_list_str(
        self,
        key: str,
        *,
        default: list[str] | tuple[str, ...] | object = _MISSING,
    ) -> list[str]:
        raw = self._take(key, default)
        if not isinstance(raw, (list, tuple)):
            raise TypeError(
                f"{self.key_path(key)} must be a list of strings (type={type(raw).__name__})"
            )
        items: list[str] = []
        for idx, item in enumerate(raw):
            if not isinstance(item, str) or not item.strip():
                raise ValueError(f"{self.key_path(key)}[{idx}] must be a non-empty string")
            items.append(item.strip())
        return items
