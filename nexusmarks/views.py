from __future__ import annotations

from typing import List, Sequence

from .model import ALL_CATEGORIES, Bookmark


def compute_categories(bookmarks: Sequence[Bookmark]) -> List[str]:
    """Sentinel first, then each category in order of first appearance."""
    out = [ALL_CATEGORIES]
    seen = {ALL_CATEGORIES}
    for b in bookmarks:
        if b.category in seen:
            continue
        seen.add(b.category)
        out.append(b.category)
    return out


def matches_query(bm: Bookmark, query: str) -> bool:
    if not query:
        return True
    q = query.lower()
    return (
        q in bm.title.lower()
        or q in bm.description.lower()
        or q in bm.url.lower()
        or any(q in t.lower() for t in bm.tags)
    )


def compute_filtered_view(
    bookmarks: Sequence[Bookmark],
    active_category: str = ALL_CATEGORIES,
    query: str = "",
) -> List[Bookmark]:
    out: List[Bookmark] = []
    for b in bookmarks:
        if active_category != ALL_CATEGORIES and b.category != active_category:
            continue
        if not matches_query(b, query):
            continue
        out.append(b)
    return out
