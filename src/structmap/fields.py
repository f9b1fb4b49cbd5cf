"""Visible-field resolution for dataclasses (embedding, shadowing, tags)."""

from __future__ import annotations

import logging
import threading
import types
import typing
from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Union

from .config import Config
from .errors import ResolutionError, UnsupportedValueError
from .tags import parse_tag
from .values import EMBEDDED_KEY, Ref

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSpec:
    source_name: str
    output_name: str
    # Attribute names from the root instance down to this field.
    path: tuple[str, ...]
    depth: int
    tagged: bool = False
    omit_zero: bool = False
    omit_nil: bool = False
    as_value: bool = False
    # Declared as Any/object: omitZero only drops None.
    dynamic: bool = False


@dataclass(frozen=True)
class TypeShape:
    cls: type
    tag_keyword: str
    fields: tuple[FieldSpec, ...]

    def output_names(self) -> list[str]:
        return [f.output_name for f in self.fields]


# (dataclass, tag keyword) -> shape
_SHAPES: dict[tuple[type, str], TypeShape] = {}
_SHAPES_LOCK = threading.Lock()


def clear_cache() -> None:
    with _SHAPES_LOCK:
        _SHAPES.clear()


def resolve_fields(cls: type, config: Config) -> TypeShape:
    """Return the ordered, de-duplicated output fields of dataclass `cls`.

    Shapes are cached per `(cls, config.tag_keyword)`. Computation happens
    outside the lock; when two threads race on the same key the first insert
    wins and both get an equal shape.
    """
    if not (isinstance(cls, type) and is_dataclass(cls)):
        raise UnsupportedValueError(f"expected a dataclass type, got {cls!r}")

    key = (cls, config.tag_keyword)
    with _SHAPES_LOCK:
        shape = _SHAPES.get(key)
    if shape is not None:
        return shape

    shape = TypeShape(
        cls=cls,
        tag_keyword=config.tag_keyword,
        fields=tuple(_dominant_fields(cls, _candidate_fields(cls, config))),
    )
    logger.debug(
        "resolved %s under tag %r: %s",
        cls.__qualname__,
        config.tag_keyword,
        shape.output_names(),
    )
    with _SHAPES_LOCK:
        return _SHAPES.setdefault(key, shape)


def _candidate_fields(cls: type, config: Config) -> list[FieldSpec]:
    """Walk `cls` and its embedded dataclasses breadth-first.

    Candidates come out ordered by depth, then declaration order. Each queued
    entry carries the chain of classes that embedded it, so a class embedding
    itself (directly or through others) fails on first repeat.
    """
    out: list[FieldSpec] = []
    level: list[tuple[type, tuple[str, ...], tuple[type, ...]]] = [(cls, (), (cls,))]
    depth = 0
    while level:
        if depth > config.max_depth:
            raise ResolutionError(
                f"{cls.__qualname__}: embedding nested deeper than {config.max_depth} levels"
            )
        next_level: list[tuple[type, tuple[str, ...], tuple[type, ...]]] = []
        for owner, prefix, chain in level:
            for f in fields(owner):
                tag = parse_tag(f.metadata.get(config.tag_keyword))
                if tag.ignored:
                    continue
                path = (*prefix, f.name)

                # Embedded dataclasses promote their fields unless renamed by a tag.
                if f.metadata.get(EMBEDDED_KEY) and not tag.name:
                    target = _embedded_target(owner, f)
                    if target is not None:
                        if target in chain:
                            raise ResolutionError(
                                f"{cls.__qualname__}: cyclic embedding of "
                                f"{target.__qualname__} via {'.'.join(path)}"
                            )
                        next_level.append((target, path, (*chain, target)))
                        continue

                if f.name.startswith("_"):
                    continue
                out.append(
                    FieldSpec(
                        source_name=f.name,
                        output_name=tag.name or f.name,
                        path=path,
                        depth=depth,
                        tagged=bool(tag.name),
                        omit_zero=tag.omit_zero,
                        omit_nil=tag.omit_nil,
                        as_value=tag.as_value,
                        dynamic=_is_dynamic_annotation(f.type),
                    )
                )
        level = next_level
        depth += 1
    return out


def _is_dynamic_annotation(t: Any) -> bool:
    # `Any`/`object` fields hold interface-like values whose only zero is None.
    if isinstance(t, str):
        return t.strip() in {"Any", "typing.Any", "object"}
    return t is Any or t is object


def _embedded_target(owner: type, f: Any) -> type | None:
    """Return the dataclass an embedded field promotes from, if any."""
    marker = f.metadata.get(EMBEDDED_KEY)
    if isinstance(marker, type):
        t: Any = marker
    elif isinstance(f.type, str):
        try:
            hints = typing.get_type_hints(owner)
        except Exception as e:  # noqa: BLE001 - annotation evaluation boundary
            raise ResolutionError(
                f"{owner.__qualname__}.{f.name}: cannot resolve embedded type {f.type!r}: {e}"
            ) from e
        t = hints.get(f.name)
    else:
        t = f.type
    t = _unwrap_reference_type(t)
    if isinstance(t, type) and is_dataclass(t):
        return t
    return None


def _unwrap_reference_type(t: Any) -> Any:
    # Optional[T], T | None and Ref[T] all embed T.
    while True:
        origin = typing.get_origin(t)
        if origin is Ref:
            t = typing.get_args(t)[0]
            continue
        if origin is Union or origin is types.UnionType:
            args = [a for a in typing.get_args(t) if a is not type(None)]
            if len(args) != 1:
                return t
            t = args[0]
            continue
        return t


def _dominant_fields(cls: type, candidates: list[FieldSpec]) -> list[FieldSpec]:
    by_name: dict[str, list[FieldSpec]] = {}
    for c in candidates:
        by_name.setdefault(c.output_name, []).append(c)

    winners: dict[str, FieldSpec | None] = {}
    for name, group in by_name.items():
        winner = _dominant_field(group)
        if winner is None:
            logger.debug("%s: dropping ambiguous field %r", cls.__qualname__, name)
        winners[name] = winner

    return [c for c in candidates if winners[c.output_name] is c]


def _dominant_field(group: list[FieldSpec]) -> FieldSpec | None:
    """Pick the field that shadows the others sharing its output name.

    The shallowest candidate wins. Among equally shallow candidates a single
    tagged one wins; otherwise the name is ambiguous and nothing is emitted.
    """
    min_depth = min(c.depth for c in group)
    top = [c for c in group if c.depth == min_depth]
    if len(top) == 1:
        return top[0]
    tagged = [c for c in top if c.tagged]
    if len(tagged) == 1:
        return tagged[0]
    return None
