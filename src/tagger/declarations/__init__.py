"""Sidecar declaration parsing and discovery."""

from .locator import SIDECAR_FILENAMES, DeclarationLocator, is_sidecar
from .models import Declaration, DirectoryTagRule, FilePatternRule, Rule
from .parser import parse_declaration

__all__ = [
    "SIDECAR_FILENAMES",
    "Declaration",
    "DeclarationLocator",
    "DirectoryTagRule",
    "FilePatternRule",
    "Rule",
    "is_sidecar",
    "parse_declaration",
]
