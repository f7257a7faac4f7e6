from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from typing import Any, Iterable

from passkit.pass_types import PassRef

TAG_SELECTOR_PREFIX = "tag:"


def _short_name(pass_id: str) -> str:
    return pass_id.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class PassRegistry:
    """Known passes, addressable by full id, by short name, or by `tag:<tag>`.

    The short name is the last dotted segment (`image_pull_policy` for
    `optimize.image_pull_policy`) and only resolves while it is unique.
    """

    _by_id: dict[str, PassRef]
    _by_short_name: dict[str, tuple[str, ...]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        index: dict[str, list[str]] = {}
        for pass_id in sorted(self._by_id):
            index.setdefault(_short_name(pass_id), []).append(pass_id)
        object.__setattr__(
            self, "_by_short_name", {name: tuple(ids) for name, ids in index.items()}
        )

    @classmethod
    def from_refs(cls, refs: Iterable[PassRef]) -> "PassRegistry":
        entries: dict[str, PassRef] = {}
        for ref in refs:
            if ref.id in entries:
                raise ValueError(f"Duplicate pass id: {ref.id}")
            entries[ref.id] = ref
        return cls(_by_id=entries)

    def available(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_id))

    def describe(self) -> tuple[dict[str, Any], ...]:
        return tuple(
            {"pass_id": ref.id, "doc": ref.doc, "source": ref.source, "tags": list(ref.tags)}
            for ref in (self._by_id[pass_id] for pass_id in self.available())
        )

    def with_tag(self, tag: str) -> tuple[PassRef, ...]:
        wanted = (tag or "").strip()
        return tuple(
            self._by_id[pass_id]
            for pass_id in self.available()
            if wanted in self._by_id[pass_id].tags
        )

    def suggest(self, selector: str, *, limit: int = 3) -> tuple[str, ...]:
        key = (selector or "").strip()
        if not key:
            return ()
        close_names = difflib.get_close_matches(
            _short_name(key), list(self._by_short_name), n=limit
        )
        out = [pass_id for name in close_names for pass_id in self._by_short_name[name]]
        if not out:
            out = difflib.get_close_matches(key, list(self.available()), n=limit)
        return tuple(out[:limit])

    def _unknown(self, selector: str) -> ValueError:
        available = ", ".join(self.available()) or "<none>"
        message = f"Unknown pass id: {selector} (available: {available})"
        suggestions = self.suggest(selector)
        if suggestions:
            message += f" (did you mean: {', '.join(suggestions)})"
        return ValueError(message)

    def resolve(self, selector: str) -> PassRef:
        if not isinstance(selector, str) or not selector.strip():
            raise ValueError("pass selector must be a non-empty string")
        key = selector.strip()

        if key in self._by_id:
            return self._by_id[key]
        if "." in key:
            raise self._unknown(key)

        candidates = self._by_short_name.get(key, ())
        if len(candidates) > 1:
            raise ValueError(f"Ambiguous pass id: {key} (matches: {', '.join(candidates)})")
        if not candidates:
            raise self._unknown(key)
        return self._by_id[candidates[0]]

    def resolve_sequence(self, selectors: Iterable[str]) -> tuple[PassRef, ...]:
        """Resolve selectors in order; each pass may be selected at most once."""

        refs: list[PassRef] = []
        chosen: dict[str, str] = {}
        for selector in selectors:
            key = selector.strip() if isinstance(selector, str) else selector
            if isinstance(key, str) and key.startswith(TAG_SELECTOR_PREFIX):
                tag = key[len(TAG_SELECTOR_PREFIX) :].strip()
                matched = self.with_tag(tag)
                if not matched:
                    raise ValueError(f"No pass carries tag: {tag!r}")
            else:
                matched = (self.resolve(key),)

            for ref in matched:
                if ref.id in chosen:
                    raise ValueError(
                        f"Pass {ref.id} selected twice (by {chosen[ref.id]!r} and {key!r})"
                    )
                chosen[ref.id] = key
                refs.append(ref)
        return tuple(refs)
