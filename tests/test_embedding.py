from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import pytest

from structmap import Config, Ref, field, marshal, marshal_with_config, resolve_fields
from structmap.errors import ResolutionError


@dataclass
class Deeper:
    _unexported: int
    Exported: int


@dataclass
class Go:
    Deeper: Deeper = field(embedded=True)


@dataclass
class WeMust:
    Go: Go = field(embedded=Go)


@dataclass
class TopLevelStruct:
    AnInt: int
    WeMust: WeMust = field(embedded=True)


def test_simple_embedded_structs():
    s = TopLevelStruct(42, WeMust(Go(Deeper(1, 2))))
    assert marshal(s) == {"AnInt": 42, "Exported": 2}


@dataclass
class LevelThree:
    # Shadowed by LevelTwoLeft.AString.
    AString: str
    # Shadowed by LevelTwoLeft.AFloat, despite the tag.
    AFloat: float = field(tag="AFloat")


@dataclass
class LevelTwoLeft:
    AnInt: int
    AString: str
    AFloat: float


@dataclass
class LevelTwoRight:
    # Ties with LevelTwoLeft.AnInt; the tag makes this one dominant.
    AnInt: int = field(tag="AnInt")
    LevelThree: LevelThree = field(embedded=True)


@dataclass
class LevelOne:
    LevelTwoLeft: LevelTwoLeft = field(embedded=True)
    LevelTwoRight: LevelTwoRight = field(embedded=True)


def test_contending_embedded_structs():
    s = LevelOne(
        LevelTwoLeft(100, "foo", 3.14),
        LevelTwoRight(200, LevelThree("bar", 6.28)),
    )
    assert marshal(s) == {
        "AnInt": 200,  # From LevelTwoRight
        "AString": "foo",  # From LevelTwoLeft
        "AFloat": 3.14,  # From LevelTwoLeft
    }


def test_shape_is_ordered_by_depth_then_declaration():
    shape = resolve_fields(LevelOne, Config())
    assert shape.output_names() == ["AString", "AFloat", "AnInt"]
    assert [f.path for f in shape.fields] == [
        ("LevelTwoLeft", "AString"),
        ("LevelTwoLeft", "AFloat"),
        ("LevelTwoRight", "AnInt"),
    ]
    assert {f.depth for f in shape.fields} == {1}


@dataclass
class Left:
    Name: str
    Left: int


@dataclass
class Right:
    Name: str
    Right: int


@dataclass
class Ambiguous:
    ID: int
    Left: Left = field(embedded=True)
    Right: Right = field(embedded=True)


def test_equal_depth_untagged_fields_are_dropped():
    s = Ambiguous(1, Left("l", 2), Right("r", 3))
    assert marshal(s) == {"ID": 1, "Left": 2, "Right": 3}


@dataclass
class Inner:
    Name: str


@dataclass
class Middle:
    Inner: Inner = field(embedded=True)


@dataclass
class Shallow:
    Name: str


@dataclass
class MixedDepths:
    Middle: Middle = field(embedded=True)
    Shallow: Shallow = field(embedded=True)


def test_shallower_promoted_field_wins():
    s = MixedDepths(Middle(Inner("deep")), Shallow("shallow"))
    assert marshal(s) == {"Name": "shallow"}


@dataclass
class Base:
    ID: int
    Note: str = field(tag="note,omitNil", default=None)


@dataclass
class HiddenBase:
    Visible: int
    _hidden: int = 0


@dataclass
class Document:
    Title: str
    Meta: Optional[Ref[Base]] = field(embedded=True, default=None)
    _base: HiddenBase = field(embedded=True, default_factory=lambda: HiddenBase(7))


def test_unexported_embedded_struct_still_promotes():
    d = Document("t", Ref(Base(1, "n")), HiddenBase(9, 10))
    assert marshal(d) == {"Title": "t", "ID": 1, "note": "n", "Visible": 9}


def test_nil_embedded_reference_yields_none_fields():
    d = Document("t", Ref(None))
    assert marshal(d) == {"Title": "t", "ID": None, "Visible": 7}

    d = Document("t", None)
    assert marshal(d) == {"Title": "t", "ID": None, "Visible": 7}


@dataclass
class Named:
    Inner: Inner = field(embedded=True, tag="inner")
    Count: int = field(embedded=True, default=0)
    _secret: Inner = field(embedded=True, tag="secret", default=None)


def test_tagged_embedded_struct_is_a_normal_field():
    s = Named(Inner("x"), 3, Inner("hidden"))
    assert marshal(s) == {"inner": {"Name": "x"}, "Count": 3}


@dataclass
class Node:
    Value: int
    Next: Optional[Node] = field(embedded=True, default=None)


def test_cyclic_embedding_fails_fast():
    with pytest.raises(ResolutionError, match=r"cyclic embedding of Node via Next"):
        marshal(Node(1))


@dataclass
class Twin:
    Value: int
    A: Optional[Twin] = field(embedded=True, default=None)
    B: Optional[Twin] = field(embedded=True, default=None)


@dataclass
class Indirect:
    Value: int
    Via: Optional[Ref[Hop]] = field(embedded=True, default=None)


@dataclass
class Hop:
    Back: Optional[Indirect] = field(embedded=True, default=None)


def test_self_embedding_through_several_paths_fails_fast():
    with pytest.raises(ResolutionError, match=r"cyclic embedding of Twin via A"):
        marshal(Twin(1))


def test_indirect_cyclic_embedding_fails_fast():
    with pytest.raises(ResolutionError, match=r"cyclic embedding of Indirect via Via.Back"):
        resolve_fields(Indirect, Config())


@dataclass
class Pair:
    ID: int
    First: Inner = field(embedded=True)
    Second: Inner = field(embedded=True)


def test_same_class_embedded_on_sibling_paths_is_not_cyclic():
    # Both copies of Inner.Name tie at depth 1 and cancel out.
    assert marshal(Pair(1, Inner("a"), Inner("b"))) == {"ID": 1}


@dataclass
class ThreeDeep:
    TopLevelStruct: TopLevelStruct = field(embedded=True)


def test_max_depth_is_configurable_and_failures_are_not_cached():
    s = ThreeDeep(TopLevelStruct(42, WeMust(Go(Deeper(1, 2)))))
    with pytest.raises(ResolutionError):
        marshal_with_config(s, Config(max_depth=2))
    assert marshal_with_config(s, Config(max_depth=4)) == {"AnInt": 42, "Exported": 2}


@dataclass
class Unresolvable:
    Thing: MissingType = field(embedded=True)  # noqa: F821


def test_unresolvable_embedded_annotation():
    with pytest.raises(ResolutionError, match=r"Unresolvable.Thing"):
        resolve_fields(Unresolvable, Config())


def test_ambiguous_fields_are_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="structmap.fields"):
        resolve_fields(Ambiguous, Config())
    assert "Ambiguous: dropping ambiguous field 'Name'" in caplog.text


@dataclass
class RenamedLeft:
    Name: str = field(tag="left_name")


@dataclass
class PlainRight:
    Name: str


@dataclass
class DistinctNames:
    RenamedLeft: RenamedLeft = field(embedded=True)
    PlainRight: PlainRight = field(embedded=True)


def test_equal_depth_fields_renamed_apart_both_survive():
    s = DistinctNames(RenamedLeft("l"), PlainRight("r"))
    assert marshal(s) == {"left_name": "l", "Name": "r"}


@dataclass
class DeepRenamed:
    AFloat: float = field(tag="a_float")


@dataclass
class ShallowFloat:
    AFloat: float
    DeepRenamed: DeepRenamed = field(embedded=True)


@dataclass
class FloatHolder:
    ShallowFloat: ShallowFloat = field(embedded=True)


def test_groups_with_different_output_names_do_not_interact():
    s = FloatHolder(ShallowFloat(1.5, DeepRenamed(2.5)))
    assert marshal(s) == {"AFloat": 1.5, "a_float": 2.5}
    shape = resolve_fields(FloatHolder, Config())
    assert [(f.output_name, f.depth) for f in shape.fields] == [("AFloat", 1), ("a_float", 2)]
