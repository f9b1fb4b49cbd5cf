"""Public marshalling entry points."""

from __future__ import annotations

from typing import Any

from .config import Config
from .encode import convert_value, deref, encode_struct, is_struct
from .errors import UnsupportedValueError


def marshal(value: Any, config: Config | None = None) -> dict[str, Any]:
    """Marshal a dataclass instance (or a `Ref` to one) into a dict.

    Uses `Config.from_env()` when `config` is omitted.
    """
    return marshal_with_config(value, config if config is not None else Config.from_env())


def marshal_with_config(value: Any, config: Config) -> dict[str, Any]:
    v = deref(value, config)
    if not is_struct(v):
        raise UnsupportedValueError(f"marshal: expected a dataclass instance, got {type(v).__name__}")
    return encode_struct(v, config=config, path=type(v).__name__)


def marshal_slice(values: Any, config: Config | None = None) -> list[Any]:
    """Marshal a list/tuple of dataclass instances into a list of dicts, in order."""
    return marshal_slice_with_config(values, config if config is not None else Config.from_env())


def marshal_slice_with_config(values: Any, config: Config) -> list[Any]:
    seq = deref(values, config)
    if not isinstance(seq, (list, tuple)):
        raise UnsupportedValueError(f"marshal_slice: expected a list or tuple, got {type(seq).__name__}")

    out: list[Any] = []
    for i, item in enumerate(seq):
        v = deref(item, config)
        if is_struct(v):
            out.append(encode_struct(v, config=config, path=f"[{i}]"))
        else:
            # Non-dataclass elements are tolerated and converted like any field value.
            out.append(convert_value(v, config=config, path=f"[{i}]"))
    return out
