"""Ordered configuration tree used by workflow definitions.

A Config wraps a plain dict of JSON-like values. Key order is the
declaration order of the source document and is preserved by every
operation, because subtask ordering in a workflow depends on it.

Nested mappings are stored as plain dicts and handed out as new Config
instances by get_nested_or_empty(), so callers never share state with
the tree they read from.

Usage:
    config = Config({"+a": {"sh>": "echo a"}, "default": {"retry": 2}})
    config.keys()                          # ["+a", "default"]
    config.get_nested_or_empty("default")  # Config({"retry": 2})
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from copy import deepcopy
from typing import Any

from flowgraph.errors import ConfigError


class Config:
    """Ordered mapping of configuration keys to JSON-like values.

    Mutable unless produced by freeze(); values read with get() are copies.
    """

    __slots__ = ("_data", "_frozen")

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        if data is None:
            data = {}
        if isinstance(data, Config):
            data = data._data
        if not isinstance(data, Mapping):
            raise ConfigError(
                f"Config must be an object, got {type(data).__name__}", config=data
            )
        self._data: dict[str, Any] = {str(k): _unwrap(v) for k, v in data.items()}
        self._frozen = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """Create a Config from a mapping (deep copied)."""
        return cls(data)

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the tree as plain dicts and lists."""
        return deepcopy(self._data)

    def has(self, key: str) -> bool:
        return key in self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Return a copy of the value at key, or default if absent."""
        if key not in self._data:
            return default
        return deepcopy(self._data[key])

    def keys(self) -> list[str]:
        """Return keys in declaration order."""
        return list(self._data)

    def set(self, key: str, value: Any) -> Config:
        self._check_mutable()
        self._data[key] = _unwrap(value)
        return self

    def remove(self, key: str) -> Config:
        """Remove key if present."""
        self._check_mutable()
        self._data.pop(key, None)
        return self

    def deep_copy(self) -> Config:
        """Return a mutable copy, also of a read-only Config."""
        return Config(self._data)

    def freeze(self) -> Config:
        """Return a read-only copy; mutators on it raise ConfigError."""
        frozen = Config(self._data)
        frozen._frozen = True
        return frozen

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise ConfigError("Config is read-only", config=self.to_dict())

    def set_all(self, other: Config | Mapping[str, Any]) -> Config:
        """Overlay other onto this config; other's keys win.

        Args:
            other: Config or mapping to copy keys from.

        Returns:
            self, for chaining.
        """
        self._check_mutable()
        for key, value in _items(other):
            self._data[key] = deepcopy(value)
        return self

    def set_all_missing(self, other: Config | Mapping[str, Any]) -> Config:
        """Copy keys from other that are not already set here.

        Existing keys keep their value and position; new keys are appended
        in other's order.

        Args:
            other: Config or mapping to fill gaps from.

        Returns:
            self, for chaining.
        """
        self._check_mutable()
        for key, value in _items(other):
            if key not in self._data:
                self._data[key] = deepcopy(value)
        return self

    def get_nested_or_empty(self, key: str) -> Config:
        """Return the nested mapping at key, or an empty Config.

        Raises:
            ConfigError: If the value at key is not a mapping.
        """
        value = self._data.get(key)
        if value is None:
            return Config()
        if not isinstance(value, Mapping):
            raise ConfigError(
                f"Expected an object for key '{key}' but got {type(value).__name__}",
                config=self.to_dict(),
            )
        return Config(value)

    def get_bool(self, key: str, default: bool) -> bool:
        """Return a boolean option.

        Accepts real booleans and the strings "true"/"false" in any case.

        Raises:
            ConfigError: If the value cannot be read as a boolean.
        """
        value = self._data.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        raise ConfigError(
            f"Expected a boolean for key '{key}' but got {value!r}",
            config=self.to_dict(),
        )

    def get_list_or_empty(self, key: str) -> list[str]:
        """Return a list of strings at key, or an empty list.

        Raises:
            ConfigError: If the value is not a list of strings.
        """
        value = self._data.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise ConfigError(
                f"Expected a list for key '{key}' but got {type(value).__name__}",
                config=self.to_dict(),
            )
        result: list[str] = []
        for item in value:
            # YAML reads bare numbers as int; names are always strings
            if isinstance(item, int) and not isinstance(item, bool):
                item = str(item)
            if not isinstance(item, str):
                raise ConfigError(
                    f"Expected a list of strings for key '{key}' but got {item!r}",
                    config=self.to_dict(),
                )
            result.append(item)
        return result

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Config):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Config({self._data!r})"


def _unwrap(value: Any) -> Any:
    """Deep copy a value, converting nested Config instances to dicts."""
    if isinstance(value, Config):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {str(k): _unwrap(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_unwrap(v) for v in value]
    return deepcopy(value)


def _items(other: Config | Mapping[str, Any]) -> list[tuple[str, Any]]:
    if isinstance(other, Config):
        return list(other._data.items())
    return [(str(k), _unwrap(v)) for k, v in other.items()]
