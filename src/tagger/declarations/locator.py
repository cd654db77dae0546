"""Discover sidecar files and associate them with the directories they declare."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from tagger.errors import DeclarationParseError, ResolutionError

from .models import Declaration
from .parser import parse_declaration

LOGGER = logging.getLogger(__name__)

SIDECAR_FILENAMES = frozenset({".tagger.yaml", "tagger.yaml"})


def is_sidecar(name: str) -> bool:
    """Return True when ``name`` is a recognized sidecar filename."""
    return name in SIDECAR_FILENAMES


class DeclarationLocator:
    """Walk a directory tree and parse every sidecar file found in it."""

    def locate(self, root: Path) -> dict[Path, Declaration]:
        """Map each declaring directory under ``root`` to its declaration.

        Symbolic links are never followed. Entries are visited in sorted order,
        so when a directory holds both sidecar names the later name
        (``tagger.yaml``) replaces the earlier one.

        Args:
            root: Directory to search.

        Returns:
            dict[Path, Declaration]: Canonical directory path to declaration.
            Sidecars that fail to decode or parse are logged and left out.

        Raises:
            ResolutionError: If the tree or a sidecar file cannot be read.
        """
        association: dict[Path, Declaration] = {}
        for sidecar in self._iter_sidecars(root):
            try:
                directory = sidecar.parent.resolve(strict=True)
                text = sidecar.read_text(encoding="utf-8")
            except OSError as exc:
                raise ResolutionError(f"Unable to read sidecar {sidecar}: {exc}") from exc
            except UnicodeDecodeError as exc:
                LOGGER.warning("Ignoring declaration: %s is not valid UTF-8 (%s).", sidecar, exc)
                continue

            try:
                declaration = parse_declaration(text, source=sidecar)
            except DeclarationParseError as exc:
                LOGGER.warning("Ignoring declaration: %s", exc)
                continue

            if directory in association:
                LOGGER.info("%s replaces %s.", sidecar, association[directory].source)
            association[directory] = declaration
            LOGGER.debug("Loaded %d rule(s) from %s.", len(declaration), sidecar)
        return association

    def _iter_sidecars(self, root: Path) -> Iterator[Path]:
        def _raise(exc: OSError) -> None:
            raise ResolutionError(f"Unable to walk {exc.filename or root}: {exc}") from exc

        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise, followlinks=False):
            dirnames.sort()
            for name in sorted(filenames):
                if is_sidecar(name):
                    candidate = Path(dirpath, name)
                    try:
                        regular = candidate.is_file()
                    except OSError as exc:
                        raise ResolutionError(f"Unable to inspect {candidate}: {exc}") from exc
                    if regular:
                        yield candidate


__all__ = ["DeclarationLocator", "SIDECAR_FILENAMES", "is_sidecar"]
