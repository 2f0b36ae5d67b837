class WinstreakError(Exception):
    """Base exception for the tracker."""


class AssetDirectoryMissing(WinstreakError):
    """Raised when the portrait folder does not exist."""


class NoCategoriesDefined(WinstreakError):
    """Raised when a category file has no usable lines."""


class PersistedStateUnreadable(WinstreakError):
    """Raised when the streak file cannot be parsed at all."""


class PersistenceWriteFailure(WinstreakError):
    """Raised when the streak file could not be written (disk full, permissions)."""
