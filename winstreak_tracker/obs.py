"""Plain files for OBS text and image sources.

Point an OBS "Text (GDI+)" source at ``Current Streak.txt`` and an image
source at ``Current Character.png``; they refresh whenever the files change.
"""
from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

from PIL import Image

from .roster import SURVIVOR

logger = logging.getLogger(__name__)

LIVE = "LIVE"
ICON_SIZE = (300, 300)


class ObsExporter:
    def __init__(self, output_dir, icons_dir=None, enabled=True):
        self.output_dir = Path(output_dir)
        self.icons_dir = Path(icons_dir) if icons_dir else None
        self.enabled = enabled
        self._last_image = None
        self._last_role = None

    def __call__(self, session) -> None:
        """Session listener: rewrite the files after every change."""
        if not self.enabled or not session.has_character:
            return
        try:
            self.write(session)
        except OSError as exc:
            logger.warning("Could not update OBS files in %s: %s", self.output_dir, exc)

    def write(self, session) -> None:
        character = session.character
        streak = session.current
        best = session.personal_best
        best_text = str(best) if best > 0 else LIVE
        self.output_dir.mkdir(parents=True, exist_ok=True)

        (self.output_dir / "Current Streak.txt").write_text(str(streak), encoding="utf-8")
        (self.output_dir / "Current Best.txt").write_text(best_text, encoding="utf-8")
        (self.output_dir / "Current Stats.json").write_text(json.dumps({
            "character": character.name,
            "category": session.category_label,
            "current_streak": streak,
            "personal_best": best if best > 0 else LIVE,
        }, indent=2), encoding="utf-8")

        # Survivor portraits are per group size; the overlay only says "Survivor"
        name = "Survivor" if character.role == SURVIVOR else character.name
        (self.output_dir / "Current Character.txt").write_text(name, encoding="utf-8")

        portrait = self.output_dir / "Current Character.png"
        if character.image_path.exists():
            source = (character.image_path, character.image_path.stat().st_mtime_ns)
            if source != self._last_image or not portrait.exists():
                shutil.copyfile(character.image_path, portrait)
                self._last_image = source
        if character.role != self._last_role or not (self.output_dir / "Streak Icon.png").exists():
            self._write_role_icons(character.role)
            self._last_role = character.role

    def _write_role_icons(self, role: str) -> None:
        role_icon = self._icon("Survivor Icon.png" if role == SURVIVOR else "Killer Icon.png")
        if role_icon:
            shutil.copyfile(role_icon, self.output_dir / "Current Role.png")

        streak_icon = self.output_dir / "Streak Icon.png"
        escape_icon = self._icon("Escape Icon.png") if role == SURVIVOR else None
        if escape_icon:
            shutil.copyfile(escape_icon, streak_icon)
        else:
            Image.new("RGBA", ICON_SIZE, (0, 0, 0, 0)).save(streak_icon)

    def _icon(self, filename):
        if self.icons_dir is None:
            return None
        path = self.icons_dir / filename
        return path if path.exists() else None
