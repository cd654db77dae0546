"""Tests for parsing sidecar declarations."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tagger.declarations import DirectoryTagRule, FilePatternRule, parse_declaration
from tagger.errors import DeclarationParseError


def test_parse_tagged_rules() -> None:
    declaration = parse_declaration("- !Tag [foo.txt, [foo-tag]]\n- !DirTag [project-x, urgent]\n")

    file_rule, dir_rule = declaration.rules
    assert isinstance(file_rule, FilePatternRule)
    assert file_rule.pattern.pattern == "foo.txt"
    assert file_rule.labels == ("foo-tag",)
    assert isinstance(dir_rule, DirectoryTagRule)
    assert dir_rule.labels == ("project-x", "urgent")


def test_parse_block_style_rule() -> None:
    text = """
    - !Tag
        - bar.txt
        - [bar-tag]
    """

    declaration = parse_declaration(text)

    assert declaration.rules == (
        FilePatternRule(pattern=declaration.rules[0].pattern, labels=("bar-tag",)),
    )
    assert declaration.rules[0].pattern.pattern == "bar.txt"


def test_parse_mapping_and_untagged_shapes() -> None:
    text = "\n".join(
        [
            "- Tag: ['.*\\.md', [docs]]",
            "- DirTag: [archive]",
            "- ['report-\\d+\\.pdf', [reports, finance]]",
            "- [2024, yes]",
        ]
    )

    rules = parse_declaration(text).rules

    assert [type(rule) for rule in rules] == [
        FilePatternRule,
        DirectoryTagRule,
        FilePatternRule,
        DirectoryTagRule,
    ]
    assert rules[2].labels == ("reports", "finance")
    # Scalars keep their literal spelling instead of YAML's typed values.
    assert rules[3].labels == ("2024", "yes")


def test_empty_document_is_empty_declaration(tmp_path: Path) -> None:
    source = tmp_path / "tagger.yaml"

    declaration = parse_declaration("", source=source)

    assert len(declaration) == 0
    assert declaration.source == source


def test_invalid_filename_pattern_skips_only_that_rule(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="tagger")

    declaration = parse_declaration("- !Tag ['(unclosed', [broken]]\n- !Tag [readme, [doc]]\n")

    assert len(declaration) == 1
    assert declaration.rules[0].labels == ("doc",)
    assert "invalid filename pattern" in caplog.text


@pytest.mark.parametrize(
    "text",
    [
        "foo: bar",
        "- !Unknown [a]",
        "- plain-string",
        "- !Tag [only-pattern]",
        "- !Tag [pattern, not-a-list]",
        "- !DirTag [[nested]]",
        "- [a, [b], c]",
        "- [unterminated",
    ],
)
def test_malformed_structure_raises(text: str) -> None:
    with pytest.raises(DeclarationParseError):
        parse_declaration(text)


def test_parse_error_mentions_source(tmp_path: Path) -> None:
    source = tmp_path / ".tagger.yaml"

    with pytest.raises(DeclarationParseError, match="tagger.yaml"):
        parse_declaration("just text", source=source)
