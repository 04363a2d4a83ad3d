"""Parser configuration for kdlnode."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_MAX_DEPTH = 256
MAX_DEPTH_ENV = "KDLNODE_MAX_DEPTH"


@dataclass(frozen=True)
class ParserConfig:
    """Settings applied to a single parse."""

    # Deepest allowed nesting of children blocks. Each level costs three
    # stack frames, so limits near sys.getrecursionlimit() / 3 and above are
    # cut short by the interpreter; that also surfaces as P008
    max_depth: int = DEFAULT_MAX_DEPTH
    # Name reported in diagnostics
    filename: str = "<string>"

    def __post_init__(self) -> None:
        if not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {self.max_depth!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ParserConfig":
        """Build a config from ``KDLNODE_MAX_DEPTH``; explicit overrides win."""
        env = os.environ if environ is None else environ
        values = {}
        raw_depth = env.get(MAX_DEPTH_ENV)
        if raw_depth:
            try:
                values["max_depth"] = int(raw_depth)
            except ValueError as exc:
                raise ValueError(f"{MAX_DEPTH_ENV} must be an integer, got {raw_depth!r}") from exc
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
