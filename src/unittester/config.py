from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, field_validator

TestFilter = Callable[[str], bool]


class SessionConfig(BaseModel):
    """Settings applied to a UnitTester by ``UnitTester.configure``."""

    model_config = ConfigDict(extra="forbid")

    color: bool = True
    hide_pass: bool = False
    only: list[str] = []
    exclude: list[str] = []

    @field_validator("only", "exclude", mode="before")
    @classmethod
    def normalize_patterns(cls, v: str | list[str] | None) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("only", "exclude")
    @classmethod
    def expand_patterns(cls, v: list[str]) -> list[str]:
        # ${VAR} and ${VAR:-default} select tests from the environment
        expanded = [expandvars(pattern) for pattern in v]
        return [pattern for pattern in expanded if pattern]

    def build_filter(self) -> TestFilter | None:
        """Return a predicate over test ids, or None to run everything."""
        if not self.only and not self.exclude:
            return None

        only = list(self.only)
        exclude = list(self.exclude)

        def should_run(name: str) -> bool:
            if only and not any(fnmatchcase(name, p) for p in only):
                return False
            return not any(fnmatchcase(name, p) for p in exclude)

        return should_run


def load_config(path: Path) -> SessionConfig:
    """Load and validate a session config from a YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return SessionConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    return SessionConfig(**raw)
