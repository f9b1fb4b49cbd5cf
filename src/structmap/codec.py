"""MessagePack hand-off for marshalled values."""

from __future__ import annotations

from typing import Any

import msgpack

from .api import marshal, marshal_slice
from .config import Config
from .errors import DecodeError, EncodeError


def packb(value: Any, config: Config | None = None) -> bytes:
    """Marshal a dataclass instance and encode the result to MessagePack."""
    return _packb(marshal(value, config))


def packb_slice(values: Any, config: Config | None = None) -> bytes:
    """Marshal a list/tuple of dataclass instances and encode it to MessagePack."""
    return _packb(marshal_slice(values, config))


def unpackb(payload: bytes) -> Any:
    """Decode a MessagePack payload into plain dict/list values."""
    try:
        return msgpack.unpackb(payload, raw=False, strict_map_key=False)
    except Exception as e:  # noqa: BLE001 - boundary decoding error
        raise DecodeError(str(e)) from e


def _packb(obj: Any) -> bytes:
    try:
        return msgpack.packb(obj, use_bin_type=True)
    except Exception as e:  # noqa: BLE001 - encode boundary
        raise EncodeError(str(e)) from e
