from __future__ import annotations

import time
import uuid
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from .log import get_logger
from .model import DISLIKE, LIKE, UNCATEGORIZED, VOTE_TYPES, Bookmark, NewBookmark

log = get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return uuid.uuid4().hex


def clean_tags(tags: Sequence[str]) -> List[str]:
    return [t.strip() for t in tags if t and t.strip()]


def add_bookmark(
    bookmarks: Sequence[Bookmark],
    data: NewBookmark,
    *,
    now_ms: Optional[Callable[[], int]] = None,
    new_id: Optional[Callable[[], str]] = None,
) -> Tuple[List[Bookmark], Bookmark]:
    """Create a record from user input and prepend it.

    Blank title falls back to the url, blank category to UNCATEGORIZED.
    Returns the new collection and the created record.
    """
    clock = now_ms or _now_ms
    make_id = new_id or _new_id

    existing_ids = {b.id for b in bookmarks}
    bid = make_id()
    while bid in existing_ids:
        bid = make_id()

    created_at = clock()
    if bookmarks:
        created_at = max(created_at, max(b.created_at for b in bookmarks))

    url = data.url.strip()
    bm = Bookmark(
        id=bid,
        url=url,
        title=data.title.strip() or url,
        description=data.description.strip(),
        category=data.category.strip() or UNCATEGORIZED,
        tags=clean_tags(data.tags),
        created_at=created_at,
        likes=0,
        dislikes=0,
        user_vote=None,
    )
    log.debug("Added bookmark id=%s url=%s", bm.id, bm.url)
    return [bm, *bookmarks], bm


def delete_bookmark(bookmarks: Sequence[Bookmark], bookmark_id: str) -> List[Bookmark]:
    out = [b for b in bookmarks if b.id != bookmark_id]
    if len(out) == len(bookmarks):
        log.debug("Delete ignored; no bookmark with id=%s", bookmark_id)
    return out


def apply_vote(bm: Bookmark, vote: str) -> Bookmark:
    """Toggle the local viewer's vote on one record.

    Voting the same way twice retracts the vote. Switching sides retracts the
    previous vote before applying the new one. A recorded vote whose counter is
    already zero is corrupt input and is not clamped.
    """
    if vote not in VOTE_TYPES:
        raise ValueError(f"vote must be one of {VOTE_TYPES}, got {vote!r}")

    likes = bm.likes
    dislikes = bm.dislikes
    current = bm.user_vote

    if current == vote:
        if vote == LIKE:
            likes -= 1
        else:
            dislikes -= 1
        new_vote = None
    else:
        if current == LIKE:
            likes -= 1
        elif current == DISLIKE:
            dislikes -= 1

        if vote == LIKE:
            likes += 1
        else:
            dislikes += 1
        new_vote = vote

    return replace(bm, likes=likes, dislikes=dislikes, user_vote=new_vote)


def toggle_vote(bookmarks: Sequence[Bookmark], bookmark_id: str, vote: str) -> List[Bookmark]:
    if vote not in VOTE_TYPES:
        raise ValueError(f"vote must be one of {VOTE_TYPES}, got {vote!r}")
    return [apply_vote(b, vote) if b.id == bookmark_id else b for b in bookmarks]


def find_bookmark(bookmarks: Sequence[Bookmark], bookmark_id: str) -> Optional[Bookmark]:
    for b in bookmarks:
        if b.id == bookmark_id:
            return b
    return None
