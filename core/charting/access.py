"""Dot-path access into ChartConfig values.

Property metadata addresses config fields by dot-path (`legend.position`,
`x_axis.show_grid`). A path that the live variant does not define is reported
as missing instead of raising, which is how cross-variant access is rejected
at runtime.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, is_dataclass, replace
from typing import Any, Final, TypeVar

T = TypeVar("T")


class _Missing:
    """Sentinel type for "no value at this path"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final[Any] = _Missing()


def _init_field_names(value: object) -> frozenset[str]:
    if not is_dataclass(value) or isinstance(value, type):
        return frozenset()
    return frozenset(f.name for f in fields(value) if f.init)


def get_config_value(config: object, key: str, default: Any = MISSING) -> Any:
    """Return the value at dot-path `key`, or `default` when the path does not exist.

    Args:
        config: A ChartConfig (or any nested config dataclass).
        key: Dot-separated field path.
        default: Value returned for unknown paths.

    Returns:
        The field value, or `default`.
    """

    value: Any = config
    for part in key.split("."):
        if not is_dataclass(value) or isinstance(value, type):
            return default
        if part not in {f.name for f in fields(value)}:
            return default
        value = getattr(value, part)
    return value


def has_config_key(config: object, key: str) -> bool:
    """Return True when dot-path `key` exists on this config's variant."""

    return get_config_value(config, key) is not MISSING


def replace_config_value(config: T, key: str, value: Any) -> T | None:
    """Return a copy of `config` with dot-path `key` set to `value`.

    Lists are stored as tuples when the current value is a tuple. A mapping
    written over a nested config is applied field by field; any other
    non-config value there is rejected. The `type` tag is not writable.

    Returns:
        The updated config, or None when `key` is not writable on this variant.
    """

    head, _, rest = key.partition(".")
    if head not in _init_field_names(config):
        return None
    current = getattr(config, head)
    if rest:
        updated = replace_config_value(current, rest, value)
        if updated is None:
            return None
        return replace(config, **{head: updated})  # type: ignore[type-var]
    if is_dataclass(current) and not isinstance(current, type) and isinstance(value, Mapping):
        nested: Any = current
        for sub_key, sub_value in value.items():
            nested = replace_config_value(nested, str(sub_key), sub_value)
            if nested is None:
                return None
        return replace(config, **{head: nested})  # type: ignore[type-var]
    if is_dataclass(current) and not isinstance(value, type(current)):
        return None
    if isinstance(current, tuple) and isinstance(value, list):
        value = tuple(value)
    return replace(config, **{head: value})  # type: ignore[type-var]
