from __future__ import annotations

import re
import time
from dataclasses import dataclass
from typing import Any, List

from openai import OpenAI
from pydantic import BaseModel, Field

from .log import get_logger

log = get_logger(__name__)


class AnalysisResult(BaseModel):
    title: str = Field(..., description="Short site name, at most 15 characters.")
    description: str = Field(..., description="One sentence on what the site does, at most 30 characters.")
    category: str = Field(..., description="Broad category, at most 4 characters.")
    tags: List[str] = Field(default_factory=list, description="3-4 keywords describing the site.")


@dataclass
class OpenAIAnalysis:
    parsed: AnalysisResult
    ms: int


def analyze_request(
    *,
    model: str,
    timeout_s: int,
    max_output_tokens: int,
    system_prompt: str,
    user_payload: str,
    use_web_search: bool = False,
    reasoning_effort: str = "low",
) -> OpenAIAnalysis:
    """One Responses API call parsed into AnalysisResult. Raises on any failure."""
    t0 = time.time()
    client = OpenAI(timeout=timeout_s, max_retries=0)
    log.info(
        "OpenAI request start (analyze): model=%s timeout_s=%d max_output_tokens=%d",
        model,
        timeout_s,
        max_output_tokens,
    )
    resp = client.responses.parse(
        model=model,
        input=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_payload},
        ],
        text_format=AnalysisResult,
        max_output_tokens=max_output_tokens,
        **_request_extras(use_web_search=use_web_search, reasoning_effort=reasoning_effort),
    )
    ms = int((time.time() - t0) * 1000)

    parsed = getattr(resp, "output_parsed", None)
    if not isinstance(parsed, AnalysisResult):
        log.warning("OpenAI output_parsed missing/invalid (analyze). Parsing output text instead.")
        text = getattr(resp, "output_text", None) or ""
        if not text and hasattr(resp, "model_dump"):
            text = _extract_output_text(resp.model_dump())
        parsed = _parse_analysis_from_text(text)

    log.info("OpenAI request done (analyze): title=%r elapsed_ms=%d", parsed.title, ms)
    return OpenAIAnalysis(parsed=parsed, ms=ms)


def _parse_analysis_from_text(raw_text: str) -> AnalysisResult:
    raw = (raw_text or "").strip()
    if not raw:
        raise ValueError("OpenAI returned empty text; cannot parse AnalysisResult JSON")

    # Common pattern: fenced JSON output.
    m = re.search(r"```json\s*(.*?)\s*```", raw, flags=re.IGNORECASE | re.DOTALL)
    if m:
        raw = m.group(1).strip()

    try:
        return AnalysisResult.model_validate_json(raw)
    except Exception:
        # Best-effort extraction of the first JSON object in the text.
        start = raw.find("{")
        end = raw.rfind("}")
        if start >= 0 and end > start:
            return AnalysisResult.model_validate_json(raw[start : end + 1])
        raise


def _request_extras(*, use_web_search: bool, reasoning_effort: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if use_web_search:
        out["tools"] = [{"type": "web_search_preview"}]
    eff = (reasoning_effort or "").strip().lower()
    if eff in {"minimal", "low", "medium", "high"}:
        out["reasoning"] = {"effort": eff}
    return out


def _extract_output_text(payload: dict[str, Any]) -> str:
    direct = payload.get("output_text")
    if isinstance(direct, str) and direct.strip():
        return direct

    chunks: List[str] = []
    output = payload.get("output")
    if isinstance(output, list):
        for item in output:
            if not isinstance(item, dict):
                continue
            content = item.get("content")
            if not isinstance(content, list):
                continue
            for part in content:
                if not isinstance(part, dict):
                    continue
                ptype = str(part.get("type", "")).lower()
                if ptype in {"output_text", "text"}:
                    text = part.get("text")
                    if isinstance(text, str):
                        chunks.append(text)
                    elif isinstance(text, dict):
                        value = text.get("value")
                        if isinstance(value, str):
                            chunks.append(value)
    return "\n".join(x for x in chunks if x).strip()
