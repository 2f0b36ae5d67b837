from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Tuple

from .errors import PersistedStateUnreadable
from .persistence import atomic_write_json

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

Key = Tuple[str, str]


@dataclass(frozen=True)
class StreakRecord:
    current: int = 0
    personal_best: int = 0

    def won(self) -> "StreakRecord":
        current = self.current + 1
        return StreakRecord(current, max(self.personal_best, current))

    def lost(self) -> "StreakRecord":
        return StreakRecord(0, self.personal_best)

    def to_dict(self) -> Dict[str, int]:
        return {"current": self.current, "personal_best": self.personal_best}

    @classmethod
    def from_dict(cls, data) -> "StreakRecord":
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        current = data.get("current", 0)
        best = data.get("personal_best", 0)
        for value in (current, best):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"invalid counter {value!r}")
        if best < current:
            raise ValueError(f"personal best {best} below current streak {current}")
        return cls(current, best)


ZERO = StreakRecord()


class StreakStore:
    """Current streak and personal best per (character, category).

    Storage is sparse: pairs that were never touched read as zero and are
    not written out.
    """

    def __init__(self):
        self._records: Dict[Key, StreakRecord] = {}

    def get(self, character: str, category: str) -> StreakRecord:
        return self._records.get((character, category), ZERO)

    def record_win(self, character: str, category: str) -> StreakRecord:
        record = self.get(character, category).won()
        self._records[(character, category)] = record
        return record

    def record_loss(self, character: str, category: str) -> StreakRecord:
        record = self.get(character, category).lost()
        self._records[(character, category)] = record
        return record

    def raise_best(self, character: str, category: str, value: int) -> StreakRecord:
        old = self.get(character, category)
        if value <= old.personal_best:
            return old
        record = StreakRecord(old.current, value)
        self._records[(character, category)] = record
        return record

    def items(self) -> Iterator[Tuple[Key, StreakRecord]]:
        return iter(sorted(self._records.items()))

    def __len__(self):
        return len(self._records)

    def __contains__(self, key):
        return key in self._records

    # ---- persistence ----

    def snapshot(self) -> Dict[str, Any]:
        streaks: Dict[str, Dict[str, Dict[str, int]]] = {}
        for (character, category), record in self.items():
            streaks.setdefault(character, {})[category] = record.to_dict()
        return {"version": FORMAT_VERSION, "streaks": streaks}

    def save(self, path) -> None:
        atomic_write_json(Path(path), self.snapshot())
        logger.debug("Saved %d streak records to %s", len(self._records), path)

    def load(self, path) -> int:
        """Replace the contents with records read from ``path``.

        Never raises: a missing or unreadable file leaves the store empty.
        Returns the number of records loaded.
        """
        self._records = {}
        path = Path(path)
        if not path.exists():
            logger.info("No streak file at %s, starting fresh", path)
            return 0
        try:
            document = read_document(path)
        except PersistedStateUnreadable as exc:
            logger.warning("%s; starting with no streaks", exc)
            return 0

        skipped = 0
        for character, categories in document.items():
            if not isinstance(categories, dict):
                logger.warning("Skipping streaks for %r: expected an object", character)
                skipped += 1
                continue
            for category, data in categories.items():
                try:
                    self._records[(character, category)] = StreakRecord.from_dict(data)
                except ValueError as exc:
                    logger.warning("Skipping streak %s / %s: %s", character, category, exc)
                    skipped += 1
        if skipped:
            logger.warning("Loaded %d streak records from %s, skipped %d malformed",
                           len(self._records), path, skipped)
        else:
            logger.info("Loaded %d streak records from %s", len(self._records), path)
        return len(self._records)


def read_document(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        raise PersistedStateUnreadable(f"Could not read {path}: {exc}") from exc
    if not isinstance(data, dict) or not isinstance(data.get("streaks"), dict):
        raise PersistedStateUnreadable(f"{path} has no streak table")
    version = data.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        logger.warning("%s has format version %r, reading it as version %d", path, version, FORMAT_VERSION)
    return data["streaks"]
