"""Reference boxes and dataclass field helpers."""

from __future__ import annotations

from dataclasses import MISSING
from dataclasses import field as dc_field
from typing import Any, Generic, Optional, TypeVar

from .config import DEFAULT_TAG_KEYWORD

T = TypeVar("T")

EMBEDDED_KEY = "embedded"


class Ref(Generic[T]):
    """A nilable reference to a value.

    Marshalling looks through a `Ref` to its target; `Ref(None)` behaves like
    `None`.
    """

    __slots__ = ("value",)

    def __init__(self, value: Optional[T] = None) -> None:
        self.value = value

    def __structmap_deref__(self) -> Optional[T]:
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash((Ref, self.value))

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"


def field(
    *,
    tag: str | None = None,
    embedded: bool | type = False,
    tag_keyword: str = DEFAULT_TAG_KEYWORD,
    default: Any = MISSING,
    default_factory: Any = MISSING,
    metadata: dict[str, Any] | None = None,
    **kwargs: Any,
) -> Any:
    """`dataclasses.field` with structmap metadata attached.

    `embedded` may be True (the target class comes from the annotation) or
    the embedded class itself.
    """
    meta = dict(metadata or {})
    if tag is not None:
        meta[tag_keyword] = tag
    if embedded:
        meta[EMBEDDED_KEY] = embedded
    if default is not MISSING:
        kwargs["default"] = default
    if default_factory is not MISSING:
        kwargs["default_factory"] = default_factory
    return dc_field(metadata=meta, **kwargs)
