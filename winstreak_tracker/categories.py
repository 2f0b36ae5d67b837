from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from .errors import NoCategoriesDefined

logger = logging.getLogger(__name__)

DEFAULT_KILLER_CATEGORIES = ("4k", "3k", "Perkless 4k", "Perkless 3k")
DEFAULT_SURVIVOR_CATEGORIES = ("Solo escape", "3 out")

COMMENT = "#"

INSTRUCTIONS = """\
# Streak Categories
# Each line is one streak type you want to track, e.g. "Perkless 4k".
# Every character gets its own counter and personal best per category.
# Lines starting with # are comments and are ignored, as are empty lines.
# Duplicate names only count once. Restart the tracker after editing.
#
# Default categories:
"""


def parse_categories(text: str) -> List[str]:
    categories = []
    seen = set()
    for line in text.splitlines():
        name = line.strip()
        if not name or name.startswith(COMMENT):
            continue
        if name in seen:
            logger.debug("Ignoring duplicate category %r", name)
            continue
        seen.add(name)
        categories.append(name)
    return categories


class CategoryConfig:
    """Streak categories read from a hand-edited text file."""

    def __init__(self, path, defaults: Sequence[str]):
        if not defaults:
            raise ValueError("at least one default category is required")
        self.path = Path(path)
        self.defaults = list(defaults)

    def load_or_create(self) -> List[str]:
        if not self.path.exists():
            self.create_default()
            return list(self.defaults)

        categories = parse_categories(self.path.read_text(encoding="utf-8"))
        if not categories:
            raise NoCategoriesDefined(f"No categories defined in {self.path}")
        return categories

    def categories_or_default(self) -> List[str]:
        """Like load_or_create, but never fails: falls back to the first default."""
        try:
            return self.load_or_create()
        except NoCategoriesDefined as exc:
            logger.warning("%s, using %r", exc, self.defaults[0])
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s (%s), using %r", self.path, exc, self.defaults[0])
        return [self.defaults[0]]

    def create_default(self) -> None:
        text = INSTRUCTIONS + "".join(f"{name}\n" for name in self.defaults)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not create %s: %s", self.path, exc)
        else:
            logger.info("Created category file %s", self.path)
