"""Result models produced while resolving tag queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Mapping, NamedTuple


class QueryMode(str, Enum):
    """How hits from several labels are combined into a report."""

    OR = "or"
    AND = "and"


class Hit(NamedTuple):
    """A declared label found on a filesystem entry."""

    label: str
    path: str


class TaggedFiles:
    """Mapping of declared tag labels to the set of paths carrying them."""

    def __init__(self, hits: Mapping[str, Iterable[str]] | None = None) -> None:
        self._hits: dict[str, set[str]] = {}
        for label, paths in (hits or {}).items():
            self._hits[label] = set(paths)

    def add(self, label: str, path: str) -> None:
        """Record ``path`` under ``label``."""
        self._hits.setdefault(label, set()).add(path)

    def add_hits(self, hits: Iterable[Hit]) -> None:
        for label, path in hits:
            self.add(label, path)

    def update(self, other: TaggedFiles) -> None:
        """Union every label's hits from ``other`` into this mapping."""
        for label, paths in other.items():
            self._hits.setdefault(label, set()).update(paths)

    def labels(self) -> list[str]:
        return sorted(self._hits)

    def items(self) -> Iterator[tuple[str, frozenset[str]]]:
        for label, paths in self._hits.items():
            yield label, frozenset(paths)

    def to_dict(self) -> dict[str, list[str]]:
        """Return labels and hit paths as sorted plain data."""
        return {label: sorted(self._hits[label]) for label in sorted(self._hits)}

    def __getitem__(self, label: str) -> frozenset[str]:
        return frozenset(self._hits[label])

    def __contains__(self, label: object) -> bool:
        return label in self._hits

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels())

    def __len__(self) -> int:
        return len(self._hits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TaggedFiles):
            return NotImplemented
        return self._hits == other._hits

    def __repr__(self) -> str:
        return f"TaggedFiles({self.to_dict()!r})"


@dataclass(slots=True)
class SearchReport:
    """Outcome of searching one or more roots for tag queries.

    Attributes:
        queries: Tag queries as supplied by the caller.
        mode: Combination mode used for ``results``.
        roots: Canonical roots whose hits were merged.
        tagged: Merged label hits across every resolved root.
        results: Combined mapping ready for presentation, sorted.
        errors: Messages for queries, roots, or trees that were skipped.
    """

    queries: list[str]
    mode: QueryMode
    roots: list[Path] = field(default_factory=list)
    tagged: TaggedFiles = field(default_factory=TaggedFiles)
    results: dict[str, list[str]] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        """Return a JSON-ready representation of the report."""
        return {
            "mode": self.mode.value,
            "queries": list(self.queries),
            "roots": [str(root) for root in self.roots],
            "results": self.results,
            "errors": list(self.errors),
        }


__all__ = ["QueryMode", "Hit", "TaggedFiles", "SearchReport"]
