"""Resolve tag queries across a single root directory."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Sequence

from tagger.declarations.locator import DeclarationLocator, is_sidecar
from tagger.errors import ResolutionError

from .evaluator import directory_hits, evaluate
from .models import TaggedFiles

LOGGER = logging.getLogger(__name__)


class TreeResolver:
    """Evaluate every declared directory under a root against tag queries."""

    def __init__(self, locator: DeclarationLocator | None = None) -> None:
        self.locator = locator or DeclarationLocator()

    def resolve(self, root: Path, queries: Sequence[re.Pattern[str]]) -> TaggedFiles:
        """Collect hits for ``queries`` under ``root``.

        Only the direct children of a declaring directory are evaluated
        against its rules; nested directories need their own sidecar.

        Args:
            root: Canonical root directory.
            queries: Compiled tag queries.

        Returns:
            TaggedFiles: Hits keyed by the declared label that matched.

        Raises:
            ResolutionError: If the tree or a declaring directory cannot be read.
        """
        tagged = TaggedFiles()
        association = self.locator.locate(root)
        LOGGER.debug("Found %d declared directories under %s.", len(association), root)

        for directory in sorted(association):
            declaration = association[directory]
            try:
                children = sorted(
                    child for child in directory.iterdir() if not is_sidecar(child.name)
                )
            except OSError as exc:
                raise ResolutionError(f"Unable to list {directory}: {exc}") from exc

            try:
                for query in queries:
                    if not children:
                        tagged.add_hits(directory_hits(declaration, directory, query))
                    for child in children:
                        tagged.add_hits(evaluate(declaration, child, query))
            except OSError as exc:
                raise ResolutionError(f"Unable to inspect entries of {directory}: {exc}") from exc
        return tagged


__all__ = ["TreeResolver"]
