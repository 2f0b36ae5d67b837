from __future__ import annotations

import json
import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .errors import AssetDirectoryMissing
from .names import normalize_name

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp"}

KILLER = "killer"
SURVIVOR = "survivor"


@dataclass(frozen=True)
class Character:
    key: str
    name: str
    image_path: Path

    @property
    def role(self) -> str:
        return SURVIVOR if self.key.lower().startswith(SURVIVOR) else KILLER


def is_portrait(path: Path) -> bool:
    """True when Pillow can identify the file as an image. Size is not checked."""
    if path.suffix.lower() not in IMAGE_EXTENSIONS or not path.is_file():
        return False
    try:
        with Image.open(path) as img:
            img.verify()
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError,
            SyntaxError, ValueError, IndexError, struct.error) as exc:
        logger.warning("Skipping unreadable portrait %s: %s", path.name, exc)
        return False
    return True


def load_overrides(path: Optional[Path]) -> Tuple[Dict[str, str], List[str]]:
    """Read display-name overrides and an optional explicit order.

    Accepts either a flat ``{key: name}`` mapping or
    ``{"names": {key: name}, "order": [key, ...]}``.
    """
    if path is None or not path.exists():
        return {}, []
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable name overrides %s: %s", path, exc)
        return {}, []
    if not isinstance(data, dict):
        logger.warning("Ignoring name overrides %s: expected a JSON object", path)
        return {}, []

    if "names" in data or "order" in data:
        names = data.get("names", {})
        order = data.get("order", [])
    else:
        names, order = data, []
    if not isinstance(names, dict):
        names = {}
    if not isinstance(order, list):
        order = []
    names = {str(k): str(v) for k, v in names.items() if isinstance(v, str) and v.strip()}
    order = [str(k) for k in order]
    return names, order


class CharacterRoster:
    """Characters discovered from a folder of portraits."""

    def __init__(self, asset_directory, overrides_path=None):
        self.asset_directory = Path(asset_directory)
        self.overrides_path = Path(overrides_path) if overrides_path else None
        self.characters: List[Character] = []

    def build(self) -> List[Character]:
        if not self.asset_directory.is_dir():
            raise AssetDirectoryMissing(f"Portrait folder not found: {self.asset_directory}")

        names, order = load_overrides(self.overrides_path)
        found = {}
        for path in self.asset_directory.iterdir():
            if not is_portrait(path):
                continue
            key = path.stem
            if key in found:
                logger.warning("Duplicate portrait for %s, keeping %s", key, found[key].image_path.name)
                continue
            found[key] = Character(key=key, name=names.get(key) or normalize_name(key), image_path=path)

        by_name = {}
        for c in found.values():
            by_name.setdefault(c.name, []).append(c.key)
        for name, keys in by_name.items():
            if len(keys) > 1:
                logger.warning("Portraits %s all show as %r; pick them by position or rename one in names.json",
                               ", ".join(sorted(keys)), name)

        rank = {key: i for i, key in enumerate(order)}
        self.characters = sorted(
            found.values(),
            key=lambda c: (rank.get(c.key, len(rank)), c.key),
        )
        logger.info("Roster built with %d characters from %s", len(self.characters), self.asset_directory)
        return self.characters

    def rescan(self) -> List[Character]:
        return self.build()

    def clamp(self, index: Optional[int]) -> Optional[int]:
        if not self.characters:
            return None
        if index is None:
            return 0
        return max(0, min(index, len(self.characters) - 1))

    def find(self, key_or_name: str) -> Optional[int]:
        for i, c in enumerate(self.characters):
            if c.key == key_or_name:
                return i
        for i, c in enumerate(self.characters):
            if c.name == key_or_name:
                return i
        return None

    def __len__(self):
        return len(self.characters)

    def __getitem__(self, index) -> Character:
        return self.characters[index]
