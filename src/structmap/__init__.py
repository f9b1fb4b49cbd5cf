"""structmap: marshal dataclasses into generic ordered dicts."""

from __future__ import annotations

from . import codec, errors
from .api import marshal, marshal_slice, marshal_slice_with_config, marshal_with_config
from .config import Config
from .fields import TypeShape, resolve_fields
from .values import Ref, field

__all__ = [
    "Config",
    "Ref",
    "TypeShape",
    "codec",
    "errors",
    "field",
    "marshal",
    "marshal_slice",
    "marshal_slice_with_config",
    "marshal_with_config",
    "resolve_fields",
]
