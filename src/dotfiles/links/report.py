"""Outcome of a filesystem pass over the managed targets."""

from __future__ import annotations

import dataclasses
import pathlib


@dataclasses.dataclass
class LinkReport:
    created: list[pathlib.Path] = dataclasses.field(default_factory=list)
    removed: list[pathlib.Path] = dataclasses.field(default_factory=list)
    copied: list[pathlib.Path] = dataclasses.field(default_factory=list)
    skipped: list[pathlib.Path] = dataclasses.field(default_factory=list)
    warnings: list[str] = dataclasses.field(default_factory=list)
    errors: list[str] = dataclasses.field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
