"""Convert dataclass values into ordered `dict`/`list` graphs."""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from typing import Any, Callable

from .config import Config
from .errors import MarshalHookError, UnsupportedValueError
from .fields import FieldSpec, resolve_fields


def is_struct(v: Any) -> bool:
    return is_dataclass(v) and not isinstance(v, type)


def deref(v: Any, config: Config) -> Any:
    """Follow references (`Ref` and friends) until a concrete value or None."""
    steps = 0
    while v is not None:
        unwrap = getattr(type(v), "__structmap_deref__", None)
        if unwrap is None:
            return v
        if steps >= config.max_depth:
            raise UnsupportedValueError(
                f"reference chain longer than {config.max_depth} steps (cyclic Ref?)"
            )
        v = unwrap(v)
        steps += 1
    return None


def is_nil(v: Any) -> bool:
    if v is None:
        return True
    unwrap = getattr(type(v), "__structmap_deref__", None)
    if unwrap is not None:
        return unwrap(v) is None
    check = _capability(v, "is_nil")
    if check is not None:
        return bool(check())
    return False


def is_zero(v: Any) -> bool:
    if is_nil(v):
        return True
    check = _capability(v, "is_zero")
    if check is not None:
        return bool(check())
    if isinstance(v, numbers.Number):
        return v == 0
    if isinstance(v, (str, bytes, bytearray, Mapping, list, tuple, set, frozenset)):
        return len(v) == 0
    if is_struct(v):
        return all(is_zero(getattr(v, f.name)) for f in fields(v))
    return False


def _capability(v: Any, name: str) -> Callable[[], Any] | None:
    if isinstance(v, type):
        return None
    fn = getattr(v, name, None)
    return fn if callable(fn) else None


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def convert_value(v: Any, *, config: Config, path: str = "") -> Any:
    """Convert one value: hook, dataclass, list/tuple, or pass-through."""
    v = deref(v, config)
    if v is None:
        return None

    hook = _capability(v, "marshal_map_value")
    if hook is not None:
        try:
            return hook()
        except Exception as e:  # noqa: BLE001 - user hook boundary
            raise MarshalHookError(path or type(v).__name__, e) from e

    if is_struct(v):
        return encode_struct(v, config=config, path=path)
    if isinstance(v, Mapping):
        # Raw mappings are kept as-is, keys and values included.
        return v
    if isinstance(v, (list, tuple)):
        return [convert_value(item, config=config, path=f"{path}[{i}]") for i, item in enumerate(v)]
    return v


def encode_struct(v: Any, *, config: Config, path: str = "") -> dict[str, Any]:
    """Encode a dataclass instance into a dict keyed by output name (recursively)."""
    shape = resolve_fields(type(v), config)
    out: dict[str, Any] = {}
    for fs in shape.fields:
        raw = _field_value(v, fs, config)
        if fs.omit_nil and is_nil(raw):
            continue
        if fs.omit_zero and (is_nil(raw) if fs.dynamic else is_zero(raw)):
            continue
        if fs.as_value:
            out[fs.output_name] = raw
            continue
        out[fs.output_name] = convert_value(raw, config=config, path=_join(path, fs.source_name))
    return out


def _field_value(v: Any, fs: FieldSpec, config: Config) -> Any:
    # Promoted fields live behind one or more embedded values; a nil one yields None.
    for name in fs.path[:-1]:
        v = deref(getattr(v, name), config)
        if v is None:
            return None
    return getattr(v, fs.path[-1])
