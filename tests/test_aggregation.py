"""Tests for merging and combining tag hits."""

from __future__ import annotations

from tagger.resolution import QueryMode, TaggedFiles, combine, intersect_hits, merge_results


def test_merge_unions_labels_and_paths() -> None:
    first = TaggedFiles({"x": ["/r1/a", "/r1/b"]})
    second = TaggedFiles({"x": ["/r1/b", "/r2/c"], "y": ["/r2/d"]})

    merged = merge_results([first, second])

    assert merged.to_dict() == {"x": ["/r1/a", "/r1/b", "/r2/c"], "y": ["/r2/d"]}
    assert first.to_dict() == {"x": ["/r1/a", "/r1/b"]}


def test_merge_disjoint_roots_keeps_paths_separate() -> None:
    results = [TaggedFiles({"alpha": ["/one/a"]}), TaggedFiles({"beta": ["/two/b"]})]

    merged = merge_results(results)

    assert merged.labels() == ["alpha", "beta"]
    assert merged["alpha"] == {"/one/a"}
    assert merged["beta"] == {"/two/b"}


def test_and_mode_intersects_all_labels() -> None:
    aggregated = TaggedFiles({"x": ["f1", "f2"], "y": ["f2", "f3"]})

    combined = combine(aggregated, QueryMode.AND, ["x", "y"])

    assert combined == {"x, y": ["f2"]}


def test_and_mode_with_no_hits_is_empty() -> None:
    assert combine(TaggedFiles(), QueryMode.AND, ["a", "b"]) == {"a, b": []}
    assert intersect_hits(TaggedFiles()) == set()


def test_or_mode_passes_labels_through_sorted() -> None:
    aggregated = TaggedFiles({"zeta": ["b", "a"], "alpha": ["c"]})

    combined = combine(aggregated, QueryMode.OR, ["z", "a"])

    assert list(combined) == ["alpha", "zeta"]
    assert combined["zeta"] == ["a", "b"]


def test_or_superset_and_subset_relationship() -> None:
    aggregated = TaggedFiles({"p": ["1", "2", "3"], "q": ["2", "3"], "r": ["3", "4"]})

    union = combine(aggregated, QueryMode.OR, ["p", "q", "r"])
    intersection = set(combine(aggregated, QueryMode.AND, ["p", "q", "r"])["p, q, r"])

    for label in aggregated:
        assert set(union[label]) == set(aggregated[label])
        assert intersection <= aggregated[label]
    assert intersection == {"3"}
