"""Tests for searching several roots through the TagSearch pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from tagger.errors import ResolutionError
from tagger.resolution import QueryMode, TagSearch, TaggedFiles, compile_queries
from tagger.resolution.tree import TreeResolver


def _write(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _two_roots(tmp_path: Path) -> tuple[Path, Path]:
    first = tmp_path / "first"
    second = tmp_path / "second"
    _write(first / "tagger.yaml", "- !Tag ['f[12]', [x]]\n")
    _write(first / "f1")
    _write(first / "f2")
    _write(second / "tagger.yaml", "- !Tag ['f[23]', [y]]\n")
    _write(second / "f2")
    _write(second / "f3")
    return first, second


def test_compile_queries_reports_invalid_patterns() -> None:
    compiled, errors = compile_queries(["ok", "(bad", "^fine$"])

    assert [pattern.pattern for pattern in compiled] == ["ok", "^fine$"]
    assert len(errors) == 1
    assert "(bad" in errors[0]


def test_or_mode_merges_roots(tmp_path: Path) -> None:
    first, second = _two_roots(tmp_path)

    report = TagSearch().run([first, second], ["x", "y"], mode=QueryMode.OR)

    assert report.errors == []
    assert report.roots == [first.resolve(), second.resolve()]
    assert report.results == {
        "x": [str(first.resolve() / "f1"), str(first.resolve() / "f2")],
        "y": [str(second.resolve() / "f2"), str(second.resolve() / "f3")],
    }


def test_and_mode_intersects_by_path(tmp_path: Path) -> None:
    root = tmp_path / "docs"
    _write(root / "tagger.yaml", "- !Tag ['f[12]', [x]]\n- !Tag ['f[23]', [y]]\n")
    for name in ("f1", "f2", "f3"):
        _write(root / name)

    report = TagSearch().run([root], ["x", "y"], mode=QueryMode.AND)

    assert report.results == {"x, y": [str(root.resolve() / "f2")]}


def test_invalid_query_and_missing_root_are_skipped(tmp_path: Path) -> None:
    first, _ = _two_roots(tmp_path)

    report = TagSearch().run(
        [tmp_path / "missing", first], ["x", "[broken"], mode=QueryMode.OR
    )

    assert report.roots == [first.resolve()]
    assert list(report.results) == ["x"]
    assert len(report.errors) == 2
    assert any("missing" in message for message in report.errors)
    assert any("[broken" in message for message in report.errors)


def test_failing_root_does_not_block_others(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    first, second = _two_roots(tmp_path)
    original = TreeResolver.resolve

    def _resolve(self: TreeResolver, root: Path, queries) -> TaggedFiles:
        if root == first.resolve():
            raise ResolutionError("disk vanished")
        return original(self, root, queries)

    monkeypatch.setattr(TreeResolver, "resolve", _resolve)

    report = TagSearch(workers=2).run([first, second], ["x", "y"], mode=QueryMode.OR)

    assert report.roots == [second.resolve()]
    assert list(report.results) == ["y"]
    assert report.errors == [f"{first.resolve()}: disk vanished"]


def test_workers_produce_same_results_as_sequential(tmp_path: Path) -> None:
    roots = []
    for index in range(4):
        root = tmp_path / f"root-{index}"
        _write(root / "tagger.yaml", f"- !DirTag [shared, only-{index}]\n")
        _write(root / "item.txt")
        roots.append(root)

    sequential = TagSearch().run(roots, ["shared", "only"], mode=QueryMode.OR)
    parallel = TagSearch(workers=3).run(roots, ["shared", "only"], mode=QueryMode.OR)

    assert parallel.results == sequential.results
    assert parallel.tagged == sequential.tagged
    assert sequential.results["shared"] == sorted(str(root.resolve()) for root in roots)


def test_report_payload_is_serializable(tmp_path: Path) -> None:
    first, _ = _two_roots(tmp_path)

    payload = TagSearch().run([first], ["x"]).to_payload()

    assert payload["mode"] == "and"
    assert payload["queries"] == ["x"]
    assert payload["roots"] == [str(first.resolve())]
    assert payload["results"] == {"x": [str(first.resolve() / "f1"), str(first.resolve() / "f2")]}
    assert payload["errors"] == []


def test_undecodable_sidecar_keeps_other_roots(tmp_path: Path) -> None:
    bad = tmp_path / "bad"
    bad.mkdir()
    (bad / "tagger.yaml").write_bytes(b"- !DirTag [\xff\xfe]\n")
    _write(bad / "item.txt")
    good = tmp_path / "good"
    _write(good / "tagger.yaml", "- !DirTag [ok]\n")
    _write(good / "item.txt")

    report = TagSearch().run([bad, good], ["ok"], mode=QueryMode.OR)

    assert report.results == {"ok": [str(good.resolve())]}
    assert report.roots == [bad.resolve(), good.resolve()]


def test_entry_inspection_failure_is_reported_per_root(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    first, second = _two_roots(tmp_path)
    blocked = first.resolve()
    original_is_file = Path.is_file

    def _is_file(self: Path, **kwargs: object) -> bool:
        if self.parent == blocked and self.name != "tagger.yaml":
            raise PermissionError(13, "Permission denied", str(self))
        return original_is_file(self, **kwargs)

    monkeypatch.setattr(Path, "is_file", _is_file)

    report = TagSearch().run([first, second], ["x", "y"], mode=QueryMode.OR)

    assert report.roots == [second.resolve()]
    assert list(report.results) == ["y"]
    assert len(report.errors) == 1
    assert "Permission denied" in report.errors[0]
