import json

import nexusmarks.enrich as enrich
from nexusmarks.config import Settings
from nexusmarks.fetch import PageMeta
from nexusmarks.openai_client import AnalysisResult, OpenAIAnalysis


def _cfg(**kw) -> Settings:
    cfg = Settings(state_dir="/tmp/unused")
    cfg.enrich_fetch_page = False
    for k, v in kw.items():
        setattr(cfg, k, v)
    return cfg


def _returns(result: AnalysisResult, calls: list):
    def _fake(**kwargs):
        calls.append(kwargs)
        return OpenAIAnalysis(parsed=result, ms=1)

    return _fake


def test_successful_analysis_is_returned(monkeypatch):
    calls = []
    result = AnalysisResult(title="Example", description="示例网站", category="工具", tags=["demo", " ", "web"])
    monkeypatch.setattr(enrich, "analyze_request", _returns(result, calls))

    out = enrich.analyze("https://example.com", _cfg())

    assert out.ok is True
    assert out.error is None
    assert out.result.title == "Example"
    assert out.result.tags == ["demo", "web"]
    assert len(calls) == 1
    assert json.loads(calls[0]["user_payload"]) == {"url": "https://example.com"}


def test_failure_returns_fallback_after_single_attempt(monkeypatch):
    calls = []

    def _boom(**kwargs):
        calls.append(kwargs)
        raise RuntimeError("connection reset")

    monkeypatch.setattr(enrich, "analyze_request", _boom)
    out = enrich.analyze("https://example.com", _cfg())

    assert out.ok is False
    assert "connection reset" in out.error
    assert out.result == enrich.fallback_result()
    assert out.result.title == "未知网站"
    assert out.result.category == "未分类"
    assert out.result.tags == ["待整理"]
    assert len(calls) == 1


def test_empty_model_answer_is_treated_as_failure(monkeypatch):
    empty = AnalysisResult(title=" ", description="", category="", tags=[])
    monkeypatch.setattr(enrich, "analyze_request", _returns(empty, []))
    out = enrich.analyze("https://example.com", _cfg())
    assert out.ok is False
    assert out.result == enrich.fallback_result()


def test_blank_url_short_circuits():
    out = enrich.analyze("   ", _cfg())
    assert out.ok is False
    assert out.result == enrich.fallback_result()


def test_page_meta_is_sent_as_context_when_fetched(monkeypatch):
    calls = []
    page = PageMeta(
        ok=True, status=200, final_url="https://example.com/", title="Example Domain",
        description="For examples", snippet="hello", fetch_ms=3,
    )
    monkeypatch.setattr(enrich, "fetch_page_meta", lambda url, **kw: page)
    monkeypatch.setattr(enrich, "analyze_request", _returns(AnalysisResult(title="E", description="d", category="c"), calls))

    enrich.analyze("https://example.com", _cfg(enrich_fetch_page=True))

    payload = json.loads(calls[0]["user_payload"])
    assert payload["page"]["title"] == "Example Domain"
    assert payload["page"]["snippet"] == "hello"


def test_unreachable_page_still_asks_model_from_url(monkeypatch):
    calls = []
    page = PageMeta(ok=False, status=None, final_url=None, title=None, description=None, snippet=None, fetch_ms=3, error="dns")
    monkeypatch.setattr(enrich, "fetch_page_meta", lambda url, **kw: page)
    monkeypatch.setattr(enrich, "analyze_request", _returns(AnalysisResult(title="E", description="d", category="c"), calls))

    out = enrich.analyze("https://example.com", _cfg(enrich_fetch_page=True))

    assert out.ok is True
    assert "page" not in json.loads(calls[0]["user_payload"])


def test_analyze_async_resolves_to_outcome(monkeypatch):
    monkeypatch.setattr(enrich, "analyze_request", _returns(AnalysisResult(title="E", description="d", category="c"), []))
    enricher = enrich.Enricher(_cfg())
    try:
        out = enricher.analyze_async("https://example.com").result(timeout=5)
    finally:
        enricher.shutdown()
    assert out.ok is True
    assert out.result.title == "E"
