# pyright: standard
from pathlib import Path

import pytest


@pytest.fixture
def layertree_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Points LAYERTREE_HOME at a temporary directory and clears perspective settings."""
    home = tmp_path / "layertree-home"
    monkeypatch.setenv("LAYERTREE_HOME", str(home))
    monkeypatch.delenv("LAYERTREE_VIEWER_ID", raising=False)
    monkeypatch.delenv("LAYERTREE_BOT_IDS", raising=False)
    return home
