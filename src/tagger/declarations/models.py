"""Rule and declaration models parsed from sidecar files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union


@dataclass(frozen=True, slots=True)
class FilePatternRule:
    """Tag regular files in the declaring directory whose name matches ``pattern``.

    Attributes:
        pattern: Compiled filename pattern, searched against the bare file name.
        labels: Tag labels applied to every matching file.
    """

    pattern: re.Pattern[str]
    labels: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DirectoryTagRule:
    """Tag the declaring directory itself.

    Attributes:
        labels: Tag labels applied to the directory.
    """

    labels: tuple[str, ...]


Rule = Union[FilePatternRule, DirectoryTagRule]


@dataclass(frozen=True, slots=True)
class Declaration:
    """Ordered rules read from one sidecar file.

    Attributes:
        rules: Rules in file order.
        source: Sidecar file the rules were read from, when known.
    """

    rules: tuple[Rule, ...] = ()
    source: Path | None = None

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    @property
    def directory_rules(self) -> tuple[DirectoryTagRule, ...]:
        """Return only the rules that tag the declaring directory itself."""
        return tuple(rule for rule in self.rules if isinstance(rule, DirectoryTagRule))


__all__ = ["FilePatternRule", "DirectoryTagRule", "Rule", "Declaration"]
