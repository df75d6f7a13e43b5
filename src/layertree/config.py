import os
from pathlib import Path

from msgspec import Struct, field

from layertree.exceptions import ConfigurationError

HOME_ENV = "LAYERTREE_HOME"
VIEWER_ENV = "LAYERTREE_VIEWER_ID"
BOT_IDS_ENV = "LAYERTREE_BOT_IDS"


class Settings(Struct, frozen=True):
    data_dir: Path
    viewer_id: str | None = None
    bot_ids: frozenset[str] = field(default_factory=frozenset)

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "messages"


def _default_data_dir() -> Path:
    xdg_data = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg_data) if xdg_data else Path.home() / ".local" / "share"
    return base / "layertree"


def parse_id_list(raw: str | None) -> frozenset[str]:
    """Splits a comma-separated id list, dropping blanks."""
    if not raw:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


def load_settings() -> Settings:
    """
    Reads settings from LAYERTREE_HOME, LAYERTREE_VIEWER_ID and LAYERTREE_BOT_IDS.
    """
    data_dir = _default_data_dir()
    if env_home := os.environ.get(HOME_ENV):
        data_dir = Path(env_home)
        if not data_dir.is_absolute():
            raise ConfigurationError(f"{HOME_ENV} must be an absolute path")

    return Settings(
        data_dir=data_dir,
        viewer_id=os.environ.get(VIEWER_ENV) or None,
        bot_ids=parse_id_list(os.environ.get(BOT_IDS_ENV)),
    )
