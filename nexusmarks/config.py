from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None else v


def _default_state_dir() -> str:
    base = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return str(Path(base) / "nexusmarks")


@dataclass
class Settings:
    # Storage
    state_dir: str = ""

    # OpenAI enrichment
    openai_model: str = "gpt-5-mini"
    openai_timeout_s: int = 60
    openai_max_output_tokens: int = 2_000
    openai_reasoning_effort: str = "low"
    openai_web_search: bool = True

    # Page fetch used as grounding for enrichment
    enrich_fetch_page: bool = True
    fetch_timeout_s: int = 10
    fetch_user_agent: str = "nexusmarks/0.1 (+https://example.invalid)"
    fetch_max_bytes: int = 350_000

    # Logging / UX
    log_level: str = "INFO"
    no_color: bool = False

    def __post_init__(self) -> None:
        if not self.state_dir:
            self.state_dir = _default_state_dir()

    @staticmethod
    def from_env() -> "Settings":
        s = Settings()
        s.state_dir = _env_str("NEXUS_STATE_DIR", s.state_dir)

        s.openai_model = _env_str("NEXUS_OPENAI_MODEL", s.openai_model)
        s.openai_timeout_s = _env_int("NEXUS_OPENAI_TIMEOUT_S", s.openai_timeout_s)
        s.openai_max_output_tokens = _env_int("NEXUS_OPENAI_MAX_OUTPUT_TOKENS", s.openai_max_output_tokens)
        s.openai_reasoning_effort = _env_str("NEXUS_OPENAI_REASONING_EFFORT", s.openai_reasoning_effort)
        s.openai_web_search = _env_bool("NEXUS_OPENAI_WEB_SEARCH", s.openai_web_search)

        s.enrich_fetch_page = _env_bool("NEXUS_ENRICH_FETCH_PAGE", s.enrich_fetch_page)
        s.fetch_timeout_s = _env_int("NEXUS_FETCH_TIMEOUT_S", s.fetch_timeout_s)
        s.fetch_user_agent = _env_str("NEXUS_FETCH_UA", s.fetch_user_agent)
        s.fetch_max_bytes = _env_int("NEXUS_FETCH_MAX_BYTES", s.fetch_max_bytes)

        s.log_level = _env_str("NEXUS_LOG_LEVEL", s.log_level)
        s.no_color = _env_bool("NEXUS_NO_COLOR", s.no_color)
        return s

    @staticmethod
    def from_file(path: Path) -> "Settings":
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        s = Settings.from_env()
        for k, v in data.items():
            if hasattr(s, k):
                setattr(s, k, v)
        return s


def load_settings(config_path: Optional[str]) -> Settings:
    if config_path:
        return Settings.from_file(Path(config_path))
    return Settings.from_env()
