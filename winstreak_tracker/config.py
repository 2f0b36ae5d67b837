from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

APP_NAME = "DBD Winstreaks"
DATA_DIR_NAME = "Winstreaks"
DATA_DIR_ENV = "WINSTREAK_DATA_DIR"

DEFAULT_PB_LINKS = {"4k": "3k"}


def get_documents_folder() -> Path:
    """The user's Documents folder (My Documents on Windows)."""
    if sys.platform.startswith("win"):
        import ctypes.wintypes

        CSIDL_PERSONAL = 5
        SHGFP_TYPE_CURRENT = 0
        buf = ctypes.create_unicode_buffer(ctypes.wintypes.MAX_PATH)
        ctypes.windll.shell32.SHGetFolderPathW(None, CSIDL_PERSONAL, None, SHGFP_TYPE_CURRENT, buf)
        if buf.value:
            return Path(buf.value)
    return Path.home() / "Documents"


def get_config_folder() -> Path:
    """Per-user settings folder: LocalAppData on Windows, XDG config elsewhere."""
    if sys.platform.startswith("win"):
        base = os.getenv("LOCALAPPDATA")
        return Path(base) / APP_NAME if base else Path.home() / "AppData" / "Local" / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    xdg = os.getenv("XDG_CONFIG_HOME")
    return (Path(xdg) if xdg else Path.home() / ".config") / "dbd-winstreaks"


@dataclass
class Settings:
    """User toggles persisted in settings.json."""

    obs_enabled: bool = True
    wrap_navigation: bool = True
    pb_links: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PB_LINKS))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        settings = cls()
        if isinstance(data.get("obs_enabled"), bool):
            settings.obs_enabled = data["obs_enabled"]
        if isinstance(data.get("wrap_navigation"), bool):
            settings.wrap_navigation = data["wrap_navigation"]
        links = data.get("pb_links")
        if isinstance(links, dict):
            settings.pb_links = {str(k): str(v) for k, v in links.items() if isinstance(v, str)}
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "obs_enabled": self.obs_enabled,
            "wrap_navigation": self.wrap_navigation,
            "pb_links": dict(self.pb_links),
        }


@dataclass
class AppConfig:
    """Where everything lives on disk.

    data_dir holds the files the streamer touches (portraits, category
    lists, streaks, OBS output); config_dir holds settings and the log.
    """

    data_dir: Path
    config_dir: Path

    @classmethod
    def default(cls, data_dir: Optional[Path] = None, config_dir: Optional[Path] = None) -> "AppConfig":
        if data_dir is None:
            env = os.getenv(DATA_DIR_ENV)
            data_dir = Path(env) if env else get_documents_folder() / DATA_DIR_NAME
        if config_dir is None:
            config_dir = get_config_folder()
        return cls(Path(data_dir), Path(config_dir))

    @property
    def media_dir(self) -> Path:
        return self.data_dir / "media"

    @property
    def names_file(self) -> Path:
        return self.data_dir / "names.json"

    @property
    def killer_categories_file(self) -> Path:
        return self.data_dir / "killer_streaks.txt"

    @property
    def survivor_categories_file(self) -> Path:
        return self.data_dir / "survivor_streaks.txt"

    @property
    def streaks_file(self) -> Path:
        return self.data_dir / "streaks.json"

    @property
    def icons_dir(self) -> Path:
        return self.data_dir / "icons"

    @property
    def obs_dir(self) -> Path:
        return self.data_dir / "obs"

    @property
    def settings_file(self) -> Path:
        return self.config_dir / "settings.json"

    @property
    def log_file(self) -> Path:
        return self.config_dir / "winstreak.log"

    def ensure_dirs(self) -> None:
        for path in (self.data_dir, self.media_dir, self.icons_dir, self.obs_dir, self.config_dir):
            path.mkdir(parents=True, exist_ok=True)


def load_settings(path) -> Settings:
    path = Path(path)
    if not path.exists():
        return Settings()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable settings %s: %s", path, exc)
        return Settings()
    if not isinstance(data, dict):
        logger.warning("Ignoring settings %s: expected a JSON object", path)
        return Settings()
    return Settings.from_dict(data)


def save_settings(path, settings: Settings) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings.to_dict(), f, indent=4)
