from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Protocol, Sequence

from .kv_sqlite import SQLiteKV
from .log import get_logger
from .model import Bookmark
from .seed import seed_bookmarks
from .theme import SYSTEM, THEME_MODES

log = get_logger(__name__)

BOOKMARKS_KEY = "nexus_bookmarks"
THEME_KEY = "nexus_theme"
DB_FILENAME = "nexusmarks.sqlite"


class KeyValue(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


def migrate_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Fill vote fields missing from records saved before voting existed."""
    out = dict(raw)
    if out.get("likes") is None:
        out["likes"] = 0
    if out.get("dislikes") is None:
        out["dislikes"] = 0
    if "userVote" not in out:
        out["userVote"] = None
    return out


class BookmarkStore:
    def __init__(self, kv: KeyValue):
        self.kv = kv

    @classmethod
    def at(cls, state_dir: str | Path) -> "BookmarkStore":
        return cls(SQLiteKV(Path(state_dir) / DB_FILENAME))

    def load(self) -> List[Bookmark]:
        """Stored collection, or the seed dataset when nothing usable is stored.

        Migration runs here, once per load, before records enter memory.
        """
        raw = self.kv.get(BOOKMARKS_KEY)
        if raw is None:
            log.info("No stored bookmarks; starting from the default set.")
            return seed_bookmarks()
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            bookmarks = [Bookmark.from_dict(migrate_record(item)) for item in data]
            ids = [b.id for b in bookmarks]
            if len(set(ids)) != len(ids):
                raise ValueError("duplicate bookmark ids")
            return bookmarks
        except (ValueError, KeyError, TypeError, OverflowError, RecursionError) as e:
            log.warning("Stored bookmarks are unreadable (%s); falling back to the default set.", e)
            return seed_bookmarks()

    def save(self, bookmarks: Sequence[Bookmark]) -> None:
        payload = json.dumps([b.to_dict() for b in bookmarks], ensure_ascii=False)
        self.kv.set(BOOKMARKS_KEY, payload)
        log.debug("Saved %d bookmarks.", len(bookmarks))

    def load_theme(self) -> str:
        raw = self.kv.get(THEME_KEY)
        if raw in THEME_MODES:
            return raw
        if raw is not None:
            log.warning("Ignoring unknown stored theme %r.", raw)
        return SYSTEM

    def save_theme(self, mode: str) -> None:
        if mode not in THEME_MODES:
            raise ValueError(f"theme must be one of {THEME_MODES}, got {mode!r}")
        self.kv.set(THEME_KEY, mode)
