from __future__ import annotations

from typing import List, Optional

from . import collection
from .log import get_logger
from .model import ALL_CATEGORIES, Bookmark, NewBookmark
from .store import BookmarkStore
from .theme import ThemeController
from .views import compute_categories, compute_filtered_view

log = get_logger(__name__)


class Session:
    """Owns the bookmark collection, filters and theme for one local profile.

    Every mutation replaces the collection with a new list and saves it.
    Filters are transient and start empty on each open().
    """

    def __init__(self, store: BookmarkStore, bookmarks: List[Bookmark], theme: ThemeController):
        self.store = store
        self._bookmarks = bookmarks
        self.theme = theme
        self.query = ""
        self.active_category = ALL_CATEGORIES

    @classmethod
    def open(cls, store: BookmarkStore, *, system_is_dark: Optional[bool] = None) -> "Session":
        bookmarks = store.load()
        theme = ThemeController(store.load_theme(), system_is_dark=system_is_dark)
        log.debug("Session opened with %d bookmarks, theme=%s", len(bookmarks), theme.mode)
        return cls(store, bookmarks, theme)

    @property
    def bookmarks(self) -> List[Bookmark]:
        return list(self._bookmarks)

    def _commit(self, bookmarks: List[Bookmark]) -> None:
        self._bookmarks = bookmarks
        self.store.save(bookmarks)

    def add(self, data: NewBookmark) -> Bookmark:
        bookmarks, bm = collection.add_bookmark(self._bookmarks, data)
        self._commit(bookmarks)
        log.info("Added %s (%s)", bm.title, bm.id)
        return bm

    def delete(self, bookmark_id: str) -> bool:
        before = len(self._bookmarks)
        bookmarks = collection.delete_bookmark(self._bookmarks, bookmark_id)
        if len(bookmarks) == before:
            return False
        self._commit(bookmarks)
        log.info("Deleted %s", bookmark_id)
        return True

    def vote(self, bookmark_id: str, vote: str) -> Optional[Bookmark]:
        if collection.find_bookmark(self._bookmarks, bookmark_id) is None:
            return None
        bookmarks = collection.toggle_vote(self._bookmarks, bookmark_id, vote)
        self._commit(bookmarks)
        return collection.find_bookmark(bookmarks, bookmark_id)

    def get(self, bookmark_id: str) -> Optional[Bookmark]:
        return collection.find_bookmark(self._bookmarks, bookmark_id)

    @property
    def categories(self) -> List[str]:
        return compute_categories(self._bookmarks)

    @property
    def visible(self) -> List[Bookmark]:
        return compute_filtered_view(self._bookmarks, self.active_category, self.query)

    def cycle_theme(self) -> str:
        mode = self.theme.cycle()
        self.store.save_theme(mode)
        return mode

    def set_theme(self, mode: str) -> str:
        self.theme.set_mode(mode)
        self.store.save_theme(mode)
        return mode
