"""Merge per-root hits and combine them into a report mapping."""

from __future__ import annotations

from typing import Iterable, Sequence

from .models import QueryMode, TaggedFiles


def merge_results(results: Iterable[TaggedFiles]) -> TaggedFiles:
    """Union hits per label across several results without mutating them."""
    merged = TaggedFiles()
    for result in results:
        merged.update(result)
    return merged


def intersect_hits(aggregated: TaggedFiles) -> set[str]:
    """Return the paths present under every label; empty when there are no labels."""
    intersection: set[str] | None = None
    for _, paths in aggregated.items():
        intersection = set(paths) if intersection is None else intersection & paths
    return intersection or set()


def combine(
    aggregated: TaggedFiles,
    mode: QueryMode,
    queries: Sequence[str],
) -> dict[str, list[str]]:
    """Shape aggregated hits into the mapping handed to presentation.

    Args:
        aggregated: Hits merged across all roots.
        mode: ``OR`` keeps one entry per matched label. ``AND`` reports a single
            entry, keyed by the queries joined with ``", "``, holding the paths
            carried by every matched label.
        queries: Tag queries as supplied by the caller.

    Returns:
        dict[str, list[str]]: Keys and hit paths in sorted order.
    """
    if QueryMode(mode) is QueryMode.OR:
        return aggregated.to_dict()
    return {", ".join(queries): sorted(intersect_hits(aggregated))}


__all__ = ["merge_results", "intersect_hits", "combine"]
