from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigError

DEFAULT_TAG_KEYWORD = "map"

# Bounds embedding depth and successive Ref unwraps.
DEFAULT_MAX_DEPTH = 32


@dataclass(frozen=True)
class Config:
    tag_keyword: str = DEFAULT_TAG_KEYWORD
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if not isinstance(self.tag_keyword, str) or not self.tag_keyword:
            raise ConfigError("tag_keyword must be a non-empty string")
        if not isinstance(self.max_depth, int) or isinstance(self.max_depth, bool) or self.max_depth < 1:
            raise ConfigError("max_depth must be a positive int")

    @classmethod
    def from_env(cls) -> "Config":
        """Return the default config, honouring environment overrides.

        Override with `STRUCTMAP_TAG_KEYWORD` and `STRUCTMAP_MAX_DEPTH`.
        """
        tag_keyword = os.environ.get("STRUCTMAP_TAG_KEYWORD") or DEFAULT_TAG_KEYWORD
        raw_depth = os.environ.get("STRUCTMAP_MAX_DEPTH")
        max_depth = DEFAULT_MAX_DEPTH
        if raw_depth:
            try:
                max_depth = int(raw_depth)
            except ValueError:
                raise ConfigError(f"STRUCTMAP_MAX_DEPTH: not an integer: {raw_depth!r}") from None
        return cls(tag_keyword=tag_keyword, max_depth=max_depth)
