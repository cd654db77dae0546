"""High-level search orchestration across several roots."""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from tagger.declarations.locator import DeclarationLocator
from tagger.errors import TaggerError

from .aggregate import combine, merge_results
from .models import QueryMode, SearchReport, TaggedFiles
from .tree import TreeResolver

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RootOutcome:
    """Result of resolving one root: hits on success, a message on failure."""

    root: Path
    tagged: TaggedFiles | None = None
    error: str | None = None


def compile_queries(queries: Iterable[str]) -> tuple[list[re.Pattern[str]], list[str]]:
    """Compile tag queries once, collecting messages for those that fail.

    Returns:
        tuple[list[re.Pattern[str]], list[str]]: Compiled queries and errors.
    """
    compiled: list[re.Pattern[str]] = []
    errors: list[str] = []
    for query in queries:
        try:
            compiled.append(re.compile(query))
        except re.error as exc:
            errors.append(f"Invalid tag query {query!r}: {exc}")
    return compiled, errors


class TagSearch:
    """Resolve tag queries over several roots and combine the hits."""

    def __init__(self, *, workers: int = 1, locator: DeclarationLocator | None = None) -> None:
        self.workers = max(1, workers)
        self.resolver = TreeResolver(locator)

    def run(
        self,
        roots: Iterable[Path],
        queries: Sequence[str],
        *,
        mode: QueryMode = QueryMode.AND,
    ) -> SearchReport:
        """Search ``roots`` for ``queries`` and return the combined report.

        Invalid queries, unreadable roots, and trees that fail mid-walk are
        recorded on the report and skipped; the remaining work still runs.

        Args:
            roots: Root directories to search.
            queries: Tag queries (regular expressions over label text).
            mode: How label hits are combined.

        Returns:
            SearchReport: Merged hits, combined results, and collected errors.
        """
        report = SearchReport(queries=list(queries), mode=QueryMode(mode))
        compiled, query_errors = compile_queries(queries)
        for message in query_errors:
            self._record(report, message)

        canonical: list[Path] = []
        for root in roots:
            try:
                canonical.append(Path(root).expanduser().resolve(strict=True))
            except (OSError, RuntimeError) as exc:
                self._record(report, f"Unable to resolve root {root}: {exc}")

        outcomes = self._resolve_all(canonical, compiled)
        completed: list[TaggedFiles] = []
        for outcome in outcomes:
            if outcome.tagged is None:
                self._record(report, outcome.error or f"{outcome.root}: resolution failed.")
                continue
            report.roots.append(outcome.root)
            completed.append(outcome.tagged)

        report.tagged = merge_results(completed)
        report.results = combine(report.tagged, report.mode, report.queries)
        return report

    def _resolve_all(
        self, roots: Sequence[Path], queries: Sequence[re.Pattern[str]]
    ) -> list[RootOutcome]:
        if self.workers == 1 or len(roots) < 2:
            return [self._resolve_root(root, queries) for root in roots]
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(lambda root: self._resolve_root(root, queries), roots))

    def _resolve_root(self, root: Path, queries: Sequence[re.Pattern[str]]) -> RootOutcome:
        try:
            return RootOutcome(root=root, tagged=self.resolver.resolve(root, queries))
        except TaggerError as exc:
            return RootOutcome(root=root, error=f"{root}: {exc}")

    @staticmethod
    def _record(report: SearchReport, message: str) -> None:
        LOGGER.warning("%s", message)
        report.errors.append(message)


__all__ = ["RootOutcome", "TagSearch", "compile_queries"]
