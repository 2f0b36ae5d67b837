import struct
import zlib
from pathlib import Path

import pytest
from PIL import Image


def make_portrait(folder: Path, filename: str, size=(96, 96)) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / filename
    Image.new("RGB", size, color=(30, 30, 30)).save(path)
    return path


def write_huge_png_header(folder: Path, filename: str, width=20000, height=20000) -> Path:
    """A tiny PNG whose header claims an enormous image."""
    def chunk(kind, data):
        body = kind + data
        return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body) & 0xFFFFFFFF)

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / filename
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IDAT", b"") + chunk(b"IEND", b""))
    return path


class RecordingSaver:
    """Saver stand-in that keeps every submitted snapshot."""

    def __init__(self):
        self.documents = []

    def submit(self, document):
        self.documents.append(document)
        return True


@pytest.fixture
def media_dir(tmp_path):
    folder = tmp_path / "media"
    make_portrait(folder, "TheNurse.png")
    make_portrait(folder, "The_Trapper.png")
    make_portrait(folder, "Survivor.png")
    return folder


@pytest.fixture
def saver():
    return RecordingSaver()
