"""Tag resolution engine."""

from .aggregate import combine, intersect_hits, merge_results
from .evaluator import directory_hits, evaluate
from .models import Hit, QueryMode, SearchReport, TaggedFiles
from .pipeline import TagSearch, compile_queries
from .tree import TreeResolver

__all__ = [
    "Hit",
    "QueryMode",
    "SearchReport",
    "TagSearch",
    "TaggedFiles",
    "TreeResolver",
    "combine",
    "compile_queries",
    "directory_hits",
    "evaluate",
    "intersect_hits",
    "merge_results",
]
