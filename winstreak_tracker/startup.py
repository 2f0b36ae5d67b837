from __future__ import annotations

import logging

from .categories import DEFAULT_KILLER_CATEGORIES, DEFAULT_SURVIVOR_CATEGORIES, CategoryConfig
from .config import AppConfig, Settings
from .errors import AssetDirectoryMissing
from .roster import KILLER, SURVIVOR, CharacterRoster
from .session import SessionController
from .store import StreakStore

logger = logging.getLogger(__name__)


def build_session(config: AppConfig, settings: Settings, saver) -> SessionController:
    """Read everything from disk and wire up a SessionController.

    Nothing in here is fatal: a missing portrait folder gives an empty
    roster, broken category files give one default category and an
    unreadable streak file gives an empty store.
    """
    roster = CharacterRoster(config.media_dir, config.names_file)
    try:
        roster.build()
    except AssetDirectoryMissing as exc:
        logger.warning("%s; starting with no characters", exc)

    categories = {
        KILLER: CategoryConfig(config.killer_categories_file, DEFAULT_KILLER_CATEGORIES).categories_or_default(),
        SURVIVOR: CategoryConfig(config.survivor_categories_file, DEFAULT_SURVIVOR_CATEGORIES).categories_or_default(),
    }

    store = StreakStore()
    store.load(config.streaks_file)

    return SessionController(
        roster,
        categories,
        store,
        saver,
        pb_links=settings.pb_links,
        wrap=settings.wrap_navigation,
    )
