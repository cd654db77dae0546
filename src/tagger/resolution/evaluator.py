"""Evaluate declaration rules against a directory entry and a tag query.

Two patterns meet here and run in opposite directions: a rule's declared
filename pattern is searched against a literal child name, while the
caller's tag query is searched against each literal declared label.
"""

from __future__ import annotations

import re
from pathlib import Path

from tagger.declarations.models import Declaration, DirectoryTagRule, FilePatternRule

from .models import Hit


def _matching_labels(labels: tuple[str, ...], query: re.Pattern[str]) -> list[str]:
    return [label for label in labels if query.search(label)]


def evaluate(declaration: Declaration, child: Path, query: re.Pattern[str]) -> list[Hit]:
    """Return the hits ``declaration`` produces for ``child`` under ``query``.

    Every rule is evaluated independently. File-pattern rules only apply to
    regular files and hit the file itself; directory-tag rules hit the
    directory that owns ``child`` no matter what kind of entry it is.

    Args:
        declaration: Rules declared for the directory containing ``child``.
        child: Direct child entry of the declaring directory.
        query: Compiled tag query, searched against each declared label.

    Returns:
        list[Hit]: Hits in rule order; empty when nothing matches.
    """
    hits: list[Hit] = []
    is_file: bool | None = None
    for rule in declaration:
        if isinstance(rule, FilePatternRule):
            if is_file is None:
                is_file = child.is_file()
            if not is_file or not rule.pattern.search(child.name):
                continue
            hits.extend(Hit(label, str(child)) for label in _matching_labels(rule.labels, query))
        elif isinstance(rule, DirectoryTagRule):
            owner = str(child.parent)
            hits.extend(Hit(label, owner) for label in _matching_labels(rule.labels, query))
    return hits


def directory_hits(declaration: Declaration, directory: Path, query: re.Pattern[str]) -> list[Hit]:
    """Return the directory-tag hits of ``declaration`` for ``directory`` alone."""
    hits: list[Hit] = []
    for rule in declaration.directory_rules:
        hits.extend(Hit(label, str(directory)) for label in _matching_labels(rule.labels, query))
    return hits


__all__ = ["evaluate", "directory_hits"]
