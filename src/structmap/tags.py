from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Recognized options, lowercased.
_OPT_OMIT_ZERO = "omitzero"
_OPT_OMIT_NIL = "omitnil"
_OPT_VALUE = "value"


@dataclass(frozen=True)
class TagSpec:
    name: str = ""
    omit_zero: bool = False
    omit_nil: bool = False
    as_value: bool = False
    ignored: bool = False


def parse_tag(raw: Any) -> TagSpec:
    """Parse a `name[,opt,...]` tag.

    Parsing never fails: non-string tags are treated as absent and unknown
    options are skipped.
    """
    if not isinstance(raw, str):
        return TagSpec()
    name, _, rest = raw.partition(",")
    name = name.strip()
    if name == "-":
        return TagSpec(ignored=True)

    opts = {o.strip().lower() for o in rest.split(",")} if rest else set()
    return TagSpec(
        name=name,
        omit_zero=_OPT_OMIT_ZERO in opts,
        omit_nil=_OPT_OMIT_NIL in opts,
        as_value=_OPT_VALUE in opts,
    )
