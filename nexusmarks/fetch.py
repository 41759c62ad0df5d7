from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

import httpx
from bs4 import BeautifulSoup  # type: ignore

from .log import get_logger

log = get_logger(__name__)


@dataclass
class PageMeta:
    ok: bool
    status: Optional[int]
    final_url: Optional[str]
    title: Optional[str]
    description: Optional[str]
    snippet: Optional[str]
    fetch_ms: int
    error: Optional[str] = None


def fetch_page_meta(
    url: str,
    *,
    timeout_s: int,
    user_agent: str,
    max_bytes: int,
) -> PageMeta:
    """Fetch one page and pull out title, meta description and a text snippet.

    Never raises; failures come back as ok=False with the error text.
    """
    t0 = time.time()
    timeout = httpx.Timeout(timeout_s, connect=timeout_s)
    headers = {"User-Agent": user_agent}
    try:
        with httpx.Client(follow_redirects=True, headers=headers, timeout=timeout) as client:
            r = client.get(url)
            content = r.content[:max_bytes]
            title, desc, snippet = _extract_meta(content)
            ms = int((time.time() - t0) * 1000)
            return PageMeta(
                ok=(200 <= r.status_code < 400),
                status=r.status_code,
                final_url=str(r.url),
                title=title,
                description=desc,
                snippet=snippet,
                fetch_ms=ms,
            )
    except Exception as e:
        ms = int((time.time() - t0) * 1000)
        log.debug("Page fetch failed for %s: %s", url, e)
        return PageMeta(
            ok=False,
            status=None,
            final_url=None,
            title=None,
            description=None,
            snippet=None,
            fetch_ms=ms,
            error=str(e),
        )


def _extract_meta(content: bytes) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    if not content:
        return None, None, None
    try:
        soup = BeautifulSoup(content, "lxml")
        title = soup.title.get_text(strip=True) if soup.title else None
        desc = None
        m = soup.find("meta", attrs={"name": "description"}) or soup.find("meta", attrs={"property": "og:description"})
        if m and m.get("content"):
            desc = m.get("content").strip()

        parts: List[str] = []
        for p in soup.find_all("p"):
            t = p.get_text(" ", strip=True)
            if t:
                parts.append(t)
            if sum(len(x) for x in parts) > 800:
                break
        snippet = " ".join(parts)
        snippet = snippet[:1000] if snippet else None
        return title or None, desc or None, snippet
    except Exception:
        return None, None, None
