"""Parse sidecar YAML into declarations.

A sidecar holds a YAML list. Each entry is either a file-pattern rule or a
directory-tag rule, written with an explicit tag::

    - !Tag [readme\\.txt, [doc, onboarding]]
    - !DirTag [project-x, urgent]

The mapping spelling (``- Tag: [...]`` / ``- DirTag: [...]``) and untagged
lists (``[pattern, [labels]]`` or ``[label, ...]``) are accepted as well.

The document is composed rather than constructed so every scalar keeps its
literal text: a label written as ``2024`` or ``yes`` stays a string.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml

from tagger.errors import DeclarationParseError

from .models import Declaration, DirectoryTagRule, FilePatternRule, Rule

LOGGER = logging.getLogger(__name__)

FILE_PATTERN_KIND = "Tag"
DIRECTORY_TAG_KIND = "DirTag"
_KINDS = (FILE_PATTERN_KIND, DIRECTORY_TAG_KIND)
_SEQ_TAG = "tag:yaml.org,2002:seq"


def parse_declaration(text: str, *, source: Path | None = None) -> Declaration:
    """Parse sidecar contents into a declaration.

    Args:
        text: Raw YAML text of the sidecar file.
        source: Path of the sidecar, used in messages and kept on the result.

    Returns:
        Declaration: Parsed rules in file order. Rules whose filename pattern
        does not compile are logged and left out.

    Raises:
        DeclarationParseError: If the YAML is invalid or an entry has an
            unrecognized shape.
    """
    try:
        root = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as exc:
        raise DeclarationParseError(f"{_origin(source)}invalid YAML: {exc}") from exc

    if root is None:
        return Declaration(source=source)
    if not isinstance(root, yaml.SequenceNode) or root.tag != _SEQ_TAG:
        raise DeclarationParseError(f"{_origin(source)}expected a list of tag rules.")

    rules: list[Rule] = []
    for position, entry in enumerate(root.value, start=1):
        kind, body = _split_entry(entry, source=source, position=position)
        rule = _build_rule(kind, body, source=source, position=position)
        if rule is not None:
            rules.append(rule)
    return Declaration(rules=tuple(rules), source=source)


def _split_entry(
    node: yaml.Node, *, source: Path | None, position: int
) -> tuple[str, yaml.Node]:
    """Return the rule kind and the node holding its arguments."""
    if node.tag.startswith("!"):
        kind = node.tag[1:]
        if kind in _KINDS:
            return kind, node
        raise DeclarationParseError(
            f"{_origin(source)}rule {position} has unknown tag {node.tag!r}."
        )

    if isinstance(node, yaml.MappingNode) and len(node.value) == 1:
        key, value = node.value[0]
        if isinstance(key, yaml.ScalarNode) and key.value in _KINDS:
            return key.value, value

    if isinstance(node, yaml.SequenceNode):
        items = node.value
        if (
            len(items) == 2
            and isinstance(items[0], yaml.ScalarNode)
            and isinstance(items[1], yaml.SequenceNode)
        ):
            return FILE_PATTERN_KIND, node
        if all(isinstance(item, yaml.ScalarNode) for item in items):
            return DIRECTORY_TAG_KIND, node

    raise DeclarationParseError(f"{_origin(source)}rule {position} is not a recognized rule.")


def _build_rule(
    kind: str, body: yaml.Node, *, source: Path | None, position: int
) -> Rule | None:
    if kind == DIRECTORY_TAG_KIND:
        return DirectoryTagRule(labels=_scalars(body, source=source, position=position))

    if not isinstance(body, yaml.SequenceNode) or len(body.value) != 2:
        raise DeclarationParseError(
            f"{_origin(source)}rule {position} must be [filename-pattern, [labels]]."
        )
    pattern_node, labels_node = body.value
    if not isinstance(pattern_node, yaml.ScalarNode):
        raise DeclarationParseError(
            f"{_origin(source)}rule {position} filename pattern must be a string."
        )
    labels = _scalars(labels_node, source=source, position=position)

    try:
        pattern = re.compile(pattern_node.value)
    except re.error as exc:
        LOGGER.warning(
            "%sskipping rule %d: invalid filename pattern %r (%s).",
            _origin(source),
            position,
            pattern_node.value,
            exc,
        )
        return None
    return FilePatternRule(pattern=pattern, labels=labels)


def _scalars(node: yaml.Node, *, source: Path | None, position: int) -> tuple[str, ...]:
    if not isinstance(node, yaml.SequenceNode) or not all(
        isinstance(item, yaml.ScalarNode) for item in node.value
    ):
        raise DeclarationParseError(
            f"{_origin(source)}rule {position} labels must be a list of strings."
        )
    return tuple(item.value for item in node.value)


def _origin(source: Path | None) -> str:
    return f"{source}: " if source is not None else ""


__all__ = ["parse_declaration", "FILE_PATTERN_KIND", "DIRECTORY_TAG_KIND"]
