from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Union

from .errors import AssetDirectoryMissing
from .roster import KILLER, Character, CharacterRoster
from .store import ZERO, StreakRecord, StreakStore

logger = logging.getLogger(__name__)

NO_CHARACTER = "No characters found"


class SessionController:
    """The one stateful object the window binds to.

    Holds the selected character and category, turns view intents into
    store updates and hands a snapshot to ``saver`` after every change.
    Navigation wraps around at both ends of the roster unless ``wrap`` is off.
    """

    def __init__(
        self,
        roster: CharacterRoster,
        categories: Mapping[str, Sequence[str]],
        store: StreakStore,
        saver,
        pb_links: Optional[Mapping[str, str]] = None,
        wrap: bool = True,
    ):
        if not categories.get(KILLER) or not all(categories.values()):
            raise ValueError("every role needs at least one category, and killers must be present")
        self.roster = roster
        self.categories = {role: list(names) for role, names in categories.items()}
        self.store = store
        self.saver = saver
        self.pb_links = dict(pb_links or {})
        self.wrap = wrap
        self.character_index: Optional[int] = roster.clamp(None)
        self.category_index = 0
        self._listeners: List[Callable[["SessionController"], None]] = []

    # ---- observers ----

    def subscribe(self, callback: Callable[["SessionController"], None]) -> None:
        self._listeners.append(callback)

    def _changed(self) -> None:
        for callback in list(self._listeners):
            callback(self)

    # ---- read accessors ----

    @property
    def character(self) -> Optional[Character]:
        if self.character_index is None:
            return None
        return self.roster[self.character_index]

    @property
    def has_character(self) -> bool:
        return self.character is not None

    @property
    def character_name(self) -> str:
        return self.character.name if self.character else NO_CHARACTER

    @property
    def character_image(self):
        return self.character.image_path if self.character else None

    @property
    def character_names(self) -> List[str]:
        return [c.name for c in self.roster]

    @property
    def category_names(self) -> List[str]:
        role = self.character.role if self.character else KILLER
        return self.categories.get(role) or self.categories[KILLER]

    @property
    def category_label(self) -> str:
        return self.category_names[self.category_index]

    @property
    def record(self) -> StreakRecord:
        if not self.character:
            return ZERO
        return self.store.get(self.character.key, self.category_label)

    @property
    def current(self) -> int:
        return self.record.current

    @property
    def personal_best(self) -> int:
        return self.record.personal_best

    # ---- selection ----

    def select_character(self, which: Union[int, str]) -> bool:
        if isinstance(which, int):
            index = which if 0 <= which < len(self.roster) else None
        else:
            index = self.roster.find(which)
        if index is None:
            logger.debug("Ignoring unknown character %r", which)
            return False
        self._set_character(index)
        return True

    def select_category(self, which: Union[int, str]) -> bool:
        names = self.category_names
        if isinstance(which, int):
            index = which if 0 <= which < len(names) else None
        else:
            index = names.index(which) if which in names else None
        if index is None:
            logger.debug("Ignoring unknown category %r", which)
            return False
        self.category_index = index
        self._changed()
        return True

    def next_character(self) -> None:
        self._step(1)

    def previous_character(self) -> None:
        self._step(-1)

    def _step(self, delta: int) -> None:
        if self.character_index is None:
            return
        index = self.character_index + delta
        if self.wrap:
            index %= len(self.roster)
        else:
            index = max(0, min(index, len(self.roster) - 1))
        self._set_character(index)

    def _set_character(self, index: int) -> None:
        label = self.category_label
        self.character_index = index
        names = self.category_names
        self.category_index = names.index(label) if label in names else 0
        self._changed()

    def rescan(self) -> None:
        label = self.category_label
        try:
            self.roster.rescan()
        except AssetDirectoryMissing as exc:
            logger.warning("%s", exc)
            self.roster.characters = []
        self.character_index = self.roster.clamp(self.character_index)
        names = self.category_names
        self.category_index = names.index(label) if label in names else 0
        self._changed()

    # ---- intents ----

    def win(self) -> StreakRecord:
        character = self.character
        if character is None:
            return ZERO
        self.store.record_win(character.key, self.category_label)
        if character.role == KILLER:
            for source, target in self.pb_links.items():
                best = self.store.get(character.key, source).personal_best
                if best:
                    self.store.raise_best(character.key, target, best)
        self._persist()
        return self.record

    def loss(self) -> StreakRecord:
        character = self.character
        if character is None:
            return ZERO
        record = self.store.record_loss(character.key, self.category_label)
        self._persist()
        return record

    def _persist(self) -> None:
        self.saver.submit(self.store.snapshot())
        self._changed()

    def display(self) -> Dict[str, object]:
        """Everything the window shows, in one dict."""
        return {
            "character_name": self.character_name,
            "character_image": self.character_image,
            "character_names": self.character_names,
            "category_names": self.category_names,
            "category_label": self.category_label,
            "current": self.current,
            "personal_best": self.personal_best,
        }
