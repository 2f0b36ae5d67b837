from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

PORTRAIT_SIZE = (96, 96)
ICON_SIZE = (300, 300)

KILLERS_IN_ORDER = [
    "The Trapper", "The Wraith", "The Hillbilly", "The Nurse", "The Shape",
    "The Hag", "The Doctor", "The Huntress", "The Cannibal", "The Nightmare",
    "The Pig", "The Clown", "The Spirit", "The Legion", "The Plague",
    "The Ghost Face", "The Demogorgon", "The Oni", "The Deathslinger",
    "The Executioner", "The Blight", "The Twins", "The Trickster", "The Nemesis",
    "The Cenobite", "The Artist", "The Onryō", "The Dredge", "The Mastermind",
    "The Knight", "The Skull Merchant", "The Singularity", "The Xenomorph",
    "The Good Guy", "The Unknown", "The Lich", "The Dark Lord", "The Houndmaster",
    "The Ghoul"
]

ROLE_ICONS = {
    "Killer Icon.png": "Killer",
    "Survivor Icon.png": "Survivor",
}


def _font(size):
    try:
        return ImageFont.truetype("arial.ttf", size)
    except OSError:
        return ImageFont.load_default()


def _centered_label(size, label, font_size, color=(30, 30, 30)):
    img = Image.new("RGB", size, color=color)
    d = ImageDraw.Draw(img)
    font = _font(font_size)
    bbox = d.multiline_textbbox((0, 0), label, font=font)
    w, h = bbox[2] - bbox[0], bbox[3] - bbox[1]
    d.multiline_text(((size[0] - w) / 2, (size[1] - h) / 2), label,
                     fill=(200, 200, 200), font=font, align="center")
    return img


def generate_placeholders(media_dir, icons_dir=None) -> List[Path]:
    """Write a labelled grey portrait for every killer (and Survivor) that has none.

    Existing files are never overwritten. Returns the paths that were created.
    """
    media_dir = Path(media_dir)
    media_dir.mkdir(parents=True, exist_ok=True)
    created = []

    for name in KILLERS_IN_ORDER + ["Survivor"]:
        path = media_dir / f"{name.replace(' ', '_')}.png"
        if path.exists():
            continue
        _centered_label(PORTRAIT_SIZE, name.replace("The ", "The\n", 1), 12).save(path)
        created.append(path)

    if icons_dir is not None:
        icons_dir = Path(icons_dir)
        icons_dir.mkdir(parents=True, exist_ok=True)
        for filename, label in ROLE_ICONS.items():
            path = icons_dir / filename
            if path.exists():
                continue
            _centered_label(ICON_SIZE, label, 28, color=(25, 25, 25)).save(path)
            created.append(path)

    logger.info("Generated %d placeholder images", len(created))
    return created
