"""Win streak and personal best tracker for streaming overlays."""

from .categories import CategoryConfig
from .errors import (
    AssetDirectoryMissing,
    NoCategoriesDefined,
    PersistedStateUnreadable,
    PersistenceWriteFailure,
    WinstreakError,
)
from .names import normalize_name
from .roster import Character, CharacterRoster
from .session import SessionController
from .store import StreakRecord, StreakStore

__version__ = "1.1.0"

__all__ = [
    "AssetDirectoryMissing",
    "CategoryConfig",
    "Character",
    "CharacterRoster",
    "NoCategoriesDefined",
    "PersistedStateUnreadable",
    "PersistenceWriteFailure",
    "SessionController",
    "StreakRecord",
    "StreakStore",
    "WinstreakError",
    "normalize_name",
]
