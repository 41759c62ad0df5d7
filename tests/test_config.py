from pathlib import Path

from nexusmarks.config import Settings, load_settings


def test_state_dir_defaults_under_xdg_data_home(monkeypatch, tmp_path: Path):
    monkeypatch.delenv("NEXUS_STATE_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    s = Settings.from_env()
    assert s.state_dir == str(tmp_path / "nexusmarks")


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("NEXUS_OPENAI_MODEL", "gpt-test")
    monkeypatch.setenv("NEXUS_OPENAI_TIMEOUT_S", "5")
    monkeypatch.setenv("NEXUS_ENRICH_FETCH_PAGE", "0")
    s = Settings.from_env()
    assert s.openai_model == "gpt-test"
    assert s.openai_timeout_s == 5
    assert s.enrich_fetch_page is False


def test_bad_int_env_keeps_default(monkeypatch):
    monkeypatch.setenv("NEXUS_FETCH_TIMEOUT_S", "soon")
    assert Settings.from_env().fetch_timeout_s == Settings().fetch_timeout_s


def test_yaml_file_wins_over_env_and_ignores_unknown_keys(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("NEXUS_LOG_LEVEL", "DEBUG")
    cfg = tmp_path / "nexus.yaml"
    cfg.write_text("log_level: WARNING\nstate_dir: /tmp/nx\nnot_a_setting: 1\n", encoding="utf-8")
    s = load_settings(str(cfg))
    assert s.log_level == "WARNING"
    assert s.state_dir == "/tmp/nx"
    assert not hasattr(s, "not_a_setting")
