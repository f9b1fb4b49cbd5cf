"""Domain-specific errors for structmap."""

from __future__ import annotations


class StructMapError(Exception):
    """Base error for structmap."""


class ConfigError(StructMapError):
    """Raised when a configuration value (or environment override) is invalid."""


class UnsupportedValueError(StructMapError):
    """Raised when an entry point receives a value it cannot marshal."""


class ResolutionError(StructMapError):
    """Raised when the visible field set of a dataclass cannot be resolved."""


class MarshalHookError(StructMapError):
    """Raised when a value's `marshal_map_value` hook fails.

    `path` names the field (or element) whose hook raised; the original
    exception is kept as `cause` and as `__cause__`.
    """

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


class EncodeError(StructMapError):
    """Raised when a marshalled value cannot be encoded to MessagePack."""


class DecodeError(StructMapError):
    """Raised when a payload cannot be decoded from MessagePack."""
