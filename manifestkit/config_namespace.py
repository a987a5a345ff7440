"""Strict mapping reader used for build requests and image type options.

Every key read is recorded; `assert_consumed()` turns leftover keys (typos, options an
image type does not know) into errors that carry the full dotted path.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable

_MISSING = object()


def _join_path(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def _type_name(value: Any) -> str:
    return type(value).__name__


@dataclass
class ConfigNamespace:
    """One level of a request mapping, addressed by `path` in error messages."""

    data: Mapping[str, Any]
    path: str
    _consumed: set[str] = field(default_factory=set, init=False, repr=False)
    _children: dict[str, "ConfigNamespace"] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.data, Mapping):
            raise TypeError(f"{self.path or '<root>'} must be a mapping (type={_type_name(self.data)})")

    def _key_path(self, key: str) -> str:
        return _join_path(self.path, key.strip())

    def keys(self) -> tuple[str, ...]:
        return tuple(str(key) for key in self.data)

    def consumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(self._consumed))

    def unconsumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(str(key) for key in self.data if key not in self._consumed))

    def assert_consumed(self) -> None:
        leftover = self.unconsumed_keys()
        if leftover:
            consumed = ", ".join(self.consumed_keys()) or "<none>"
            raise ValueError(
                f"Unknown config keys under {self.path or '<root>'}: {', '.join(leftover)} (consumed: {consumed})"
            )
        for child in self._children.values():
            child.assert_consumed()

    def _read(self, key: str, default: Any) -> Any:
        if not isinstance(key, str) or not key.strip():
            raise TypeError("ConfigNamespace key must be a non-empty string")
        name = key.strip()
        if name in self._children:
            raise ValueError(f"{self._key_path(name)} already accessed as a nested namespace")

        self._consumed.add(name)
        if name in self.data:
            return self.data[name]
        if default is _MISSING:
            raise ValueError(f"Missing required config key: {self._key_path(name)}")
        return default

    def _child(self, key: str, data: Mapping[str, Any], *, path: str) -> "ConfigNamespace":
        child = ConfigNamespace(dict(data), path=path)
        self._children[key] = child
        return child

    def namespace(
        self,
        key: str,
        *,
        default: Mapping[str, Any] | None | object = _MISSING,
    ) -> "ConfigNamespace":
        name = (key or "").strip()
        if not name:
            raise TypeError("ConfigNamespace key must be a non-empty string")
        if name in self._children:
            return self._children[name]

        raw = self.data.get(name)
        self._consumed.add(name)
        child_path = self._key_path(name)

        if raw is None:
            if default is _MISSING:
                raise ValueError(f"Missing required config namespace: {child_path}")
            if default is not None and not isinstance(default, Mapping):
                raise TypeError(f"default for {child_path} must be a mapping or None")
            return self._child(name, default or {}, path=child_path)  # type: ignore[arg-type]

        if not isinstance(raw, Mapping):
            raise TypeError(f"{child_path} must be a mapping (type={_type_name(raw)})")
        return self._child(name, raw, path=child_path)

    def get_bool(self, key: str, *, default: bool | object = _MISSING) -> bool:
        if default is not _MISSING and not isinstance(default, bool):
            raise TypeError(f"{self._key_path(key)} default must be a boolean")

        value = self._read(key, default)
        if not isinstance(value, bool):
            raise TypeError(f"{self._key_path(key)} must be a boolean (type={_type_name(value)})")
        return value

    def get_int(
        self,
        key: str,
        *,
        default: int | object = _MISSING,
        min_value: int | None = None,
        max_value: int | None = None,
    ) -> int:
        label = self._key_path(key)
        if default is not _MISSING and (isinstance(default, bool) or not isinstance(default, int)):
            raise TypeError(f"{label} default must be an int")

        value = self._read(key, default)
        # bool is an int subclass; YAML `yes` must not pass as 1.
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{label} must be an int (type={_type_name(value)})")
        if min_value is not None and value < min_value:
            raise ValueError(f"{label} must be >= {min_value} (got {value})")
        if max_value is not None and value > max_value:
            raise ValueError(f"{label} must be <= {max_value} (got {value})")
        return value

    def get_str(
        self,
        key: str,
        *,
        default: str | None | object = _MISSING,
        allow_empty: bool = False,
        choices: Iterable[str] | None = None,
    ) -> str | None:
        label = self._key_path(key)
        if default is not _MISSING and default is not None and not isinstance(default, str):
            raise TypeError(f"{label} default must be a string or None")

        raw = self._read(key, default)
        if raw is None:
            return None
        if not isinstance(raw, str):
            raise TypeError(f"{label} must be a string (type={_type_name(raw)})")

        value = raw.strip()
        if not value and not allow_empty:
            raise ValueError(f"{label} cannot be empty")
        if choices is not None:
            allowed = sorted({str(choice).strip() for choice in choices if str(choice).strip()})
            if value not in allowed:
                raise ValueError(f"{label} must be one of: {', '.join(allowed) or '<none>'} (got {value!r})")
        return value

    def get_scalar(self, key: str, *, default: str | int | None | object = _MISSING) -> str | int | None:
        """Return a string or int value unconverted, for fields that accept either."""

        raw = self._read(key, default)
        if raw is None or (isinstance(raw, (str, int)) and not isinstance(raw, bool)):
            return raw
        raise TypeError(f"{self._key_path(key)} must be a string or an int (type={_type_name(raw)})")

    def get_mapping(
        self,
        key: str,
        *,
        default: Mapping[str, Any] | object = _MISSING,
    ) -> dict[str, Any]:
        """Return a mapping value as a plain dict; its own keys are left to the caller."""

        label = self._key_path(key)
        if default is not _MISSING and not isinstance(default, Mapping):
            raise TypeError(f"{label} default must be a mapping")

        raw = self._read(key, default)
        if raw is None and default is not _MISSING:
            raw = default
        if not isinstance(raw, Mapping):
            raise TypeError(f"{label} must be a mapping (type={_type_name(raw)})")
        return dict(raw)

    def get_list_mapping(
        self,
        key: str,
        *,
        default: list[Mapping[str, Any]] | tuple[Mapping[str, Any], ...] | object = _MISSING,
        allow_empty: bool = False,
    ) -> list["ConfigNamespace"]:
        """Read a list of mappings; each item becomes a strict child namespace ``key[idx]``."""

        label = self._key_path(key)
        if default is not _MISSING and not isinstance(default, (list, tuple)):
            raise TypeError(f"{label} default must be a list[dict]")

        raw = self._read(key, default)
        if not isinstance(raw, (list, tuple)):
            raise TypeError(f"{label} must be a list[dict] (type={_type_name(raw)})")
        if not raw and not allow_empty:
            raise ValueError(f"{label} cannot be empty")

        items: list[ConfigNamespace] = []
        for idx, item in enumerate(raw):
            item_path = f"{label}[{idx}]"
            if not isinstance(item, Mapping):
                raise TypeError(f"{item_path} must be a mapping (type={_type_name(item)})")
            items.append(self._child(f"{key.strip()}[{idx}]", item, path=item_path))
        return items
