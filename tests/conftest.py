import sys
from pathlib import Path

import pytest

# Allow `import nexusmarks` without installing the package.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _block_network_calls(monkeypatch):
    """Tests must never trigger real OpenAI requests or page fetches."""

    def _blocked(*_args, **_kwargs):
        raise AssertionError("Network call attempted during tests")

    import nexusmarks.enrich as enrich

    monkeypatch.setattr(enrich, "analyze_request", _blocked)
    monkeypatch.setattr(enrich, "fetch_page_meta", _blocked)
    monkeypatch.delenv("NEXUS_SYSTEM_THEME", raising=False)
    monkeypatch.delenv("COLORFGBG", raising=False)
