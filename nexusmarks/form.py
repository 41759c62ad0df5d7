from __future__ import annotations

import re
import threading
from concurrent.futures import Future
from typing import List, Optional, Protocol

from .enrich import EnrichmentOutcome
from .log import get_logger
from .model import NewBookmark

log = get_logger(__name__)

_TAG_SPLIT = re.compile(r"[,，\s]+")

ANALYSIS_FAILED_NOTICE = "AI 识别失败，请检查网络或稍后重试。"


class FormError(ValueError):
    pass


class Analyzer(Protocol):
    def analyze_async(self, url: str) -> "Future[EnrichmentOutcome]": ...


def parse_tags(text: str) -> List[str]:
    """Split on ASCII commas, full-width commas or whitespace; drop empties."""
    return [t for t in _TAG_SPLIT.split(text or "") if t]


class AddBookmarkForm:
    """Transient state of the add-bookmark dialog.

    Analysis results are applied only if the form is still open and no newer
    analysis was started; a late result after close() is dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.is_open = False
        self.analyzing = False
        self.notice: Optional[str] = None
        self._generation = 0
        self._settled = threading.Event()
        self._settled.set()
        self._reset_fields()

    def _reset_fields(self) -> None:
        self.url = ""
        self.title = ""
        self.description = ""
        self.category = ""
        self.tags_text = ""

    def open(self) -> None:
        with self._lock:
            self.is_open = True
            self.notice = None

    def close(self) -> None:
        with self._lock:
            self.is_open = False
            self.analyzing = False
            self._generation += 1
            self._reset_fields()
            self._settled.set()

    def take_notice(self) -> Optional[str]:
        with self._lock:
            msg, self.notice = self.notice, None
        return msg

    def start_analysis(self, analyzer: Analyzer) -> Optional["Future[EnrichmentOutcome]"]:
        with self._lock:
            if not self.is_open or self.analyzing or not self.url.strip():
                return None
            self.analyzing = True
            self._generation += 1
            generation = self._generation
            url = self.url.strip()
            self._settled.clear()

        try:
            fut = analyzer.analyze_async(url)
        except Exception as e:
            log.warning("Could not start analysis for %s: %s", url, e)
            with self._lock:
                if generation == self._generation:
                    self.analyzing = False
                    self.notice = ANALYSIS_FAILED_NOTICE
                    self._settled.set()
            return None
        fut.add_done_callback(lambda f: self._finish_analysis(generation, f))
        return fut

    def wait_analysis(self, timeout: Optional[float] = None) -> bool:
        """Block until the latest analysis has been applied or discarded."""
        return self._settled.wait(timeout)

    def _finish_analysis(self, generation: int, fut: "Future[EnrichmentOutcome]") -> None:
        try:
            self._apply_outcome(generation, fut)
        finally:
            with self._lock:
                if generation == self._generation or not self.is_open:
                    self._settled.set()

    def _apply_outcome(self, generation: int, fut: "Future[EnrichmentOutcome]") -> None:
        try:
            outcome = fut.result()
        except Exception as e:
            # Analyzer broke its own contract; treat like a failed analysis.
            log.warning("Analysis task failed: %s", e)
            outcome = EnrichmentOutcome(url=self.url, error=str(e))

        with self._lock:
            if generation != self._generation or not self.is_open:
                log.debug("Discarding analysis result for a closed or superseded form.")
                return
            self.analyzing = False
            r = outcome.result
            self.title = r.title
            self.description = r.description
            self.category = r.category
            self.tags_text = ", ".join(r.tags)
            if not outcome.ok:
                self.notice = ANALYSIS_FAILED_NOTICE

    def submit(self) -> NewBookmark:
        with self._lock:
            if not self.url.strip():
                raise FormError("url is required")
            data = NewBookmark(
                url=self.url.strip(),
                title=self.title,
                description=self.description,
                category=self.category,
                tags=parse_tags(self.tags_text),
            )
        self.close()
        return data
