from __future__ import annotations

import json
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

from .config import Settings
from .fetch import PageMeta, fetch_page_meta
from .log import get_logger
from .model import UNCATEGORIZED
from .openai_client import AnalysisResult, analyze_request

log = get_logger(__name__)


SYSTEM_PROMPT_ANALYZE = """You describe websites for a personal bookmark manager.

Given a URL (or site name) and, when available, text fetched from the page:
- title: short site name, at most 15 characters.
- description: one sentence on what the site is for, at most 30 characters, in Chinese.
- category: broad category, at most 4 characters, in Chinese
  (for example: 开发工具, 设计灵感, 学习资源, 新闻资讯, 娱乐, 人工智能).
- tags: 3-4 keywords describing the site's core features.

If the page could not be fetched, infer from the URL itself.

Output must be strict JSON for the schema (no extra text).
"""


def fallback_result() -> AnalysisResult:
    return AnalysisResult(
        title="未知网站",
        description="无法自动获取描述，请手动输入。",
        category=UNCATEGORIZED,
        tags=["待整理"],
    )


@dataclass
class EnrichmentOutcome:
    """Result of one analysis. `result` is always usable; `ok` says whether it came from the model."""

    url: str
    result: AnalysisResult = field(default_factory=fallback_result)
    ok: bool = False
    error: Optional[str] = None


def build_payload(url: str, page: Optional[PageMeta]) -> str:
    data = {"url": url}
    if page is not None and page.ok:
        data["page"] = {
            "final_url": page.final_url,
            "title": page.title,
            "description": page.description,
            "snippet": page.snippet,
        }
    return json.dumps(data, ensure_ascii=False)


def _is_empty(result: AnalysisResult) -> bool:
    return not (result.title.strip() or result.description.strip() or result.category.strip() or result.tags)


def analyze(url: str, cfg: Settings) -> EnrichmentOutcome:
    """Ask the model to describe `url`. Single attempt; failures become the fallback."""
    url = (url or "").strip()
    if not url:
        return EnrichmentOutcome(url=url, error="empty url")

    page = None
    if cfg.enrich_fetch_page:
        page = fetch_page_meta(
            url,
            timeout_s=cfg.fetch_timeout_s,
            user_agent=cfg.fetch_user_agent,
            max_bytes=cfg.fetch_max_bytes,
        )
        if not page.ok:
            log.info("Page not reachable (%s); analyzing from the URL alone.", page.error or page.status)

    try:
        res = analyze_request(
            model=cfg.openai_model,
            timeout_s=cfg.openai_timeout_s,
            max_output_tokens=cfg.openai_max_output_tokens,
            system_prompt=SYSTEM_PROMPT_ANALYZE,
            user_payload=build_payload(url, page),
            use_web_search=cfg.openai_web_search,
            reasoning_effort=cfg.openai_reasoning_effort,
        )
    except Exception as e:
        log.warning("AI analysis failed for %s: %s", url, e)
        return EnrichmentOutcome(url=url, error=str(e) or type(e).__name__)

    if _is_empty(res.parsed):
        log.warning("AI analysis for %s came back empty.", url)
        return EnrichmentOutcome(url=url, error="empty response")

    tags = [t.strip() for t in res.parsed.tags if t and t.strip()]
    result = res.parsed.model_copy(update={"tags": tags})
    return EnrichmentOutcome(url=url, result=result, ok=True)


class Enricher:
    """Runs analyses on a worker thread so callers can keep handling input."""

    def __init__(self, cfg: Settings, *, executor: Optional[ThreadPoolExecutor] = None):
        self.cfg = cfg
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="nexus-enrich")

    def analyze(self, url: str) -> EnrichmentOutcome:
        return analyze(url, self.cfg)

    def analyze_async(self, url: str) -> "Future[EnrichmentOutcome]":
        return self._executor.submit(analyze, url, self.cfg)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)
