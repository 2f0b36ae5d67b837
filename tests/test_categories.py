import pytest

from winstreak_tracker.categories import (
    DEFAULT_KILLER_CATEGORIES,
    CategoryConfig,
    parse_categories,
)
from winstreak_tracker.errors import NoCategoriesDefined


def test_missing_file_is_created_with_instructions(tmp_path):
    path = tmp_path / "killer_streaks.txt"
    config = CategoryConfig(path, DEFAULT_KILLER_CATEGORIES)

    assert config.load_or_create() == list(DEFAULT_KILLER_CATEGORIES)

    text = path.read_text(encoding="utf-8")
    assert text.startswith("#")
    assert parse_categories(text) == list(DEFAULT_KILLER_CATEGORIES)


def test_created_file_reads_back_the_same(tmp_path):
    path = tmp_path / "cats.txt"
    CategoryConfig(path, ["Solo escape", "3 out"]).load_or_create()

    assert CategoryConfig(path, ["other"]).load_or_create() == ["Solo escape", "3 out"]


def test_parse_skips_comments_blanks_and_duplicates(tmp_path):
    path = tmp_path / "cats.txt"
    path.write_text("# my streaks\n\n  4k  \nPerkless 4k\n   # indented comment\n4k\n\t\nNo Mither\n")

    assert CategoryConfig(path, ["x"]).load_or_create() == ["4k", "Perkless 4k", "No Mither"]


def test_comment_only_file_raises(tmp_path):
    path = tmp_path / "cats.txt"
    path.write_text("# nothing here\n\n   \n#4k\n")

    with pytest.raises(NoCategoriesDefined):
        CategoryConfig(path, DEFAULT_KILLER_CATEGORIES).load_or_create()


def test_comment_only_file_falls_back_to_one_default(tmp_path):
    path = tmp_path / "cats.txt"
    path.write_text("# nothing here\n\n")

    assert CategoryConfig(path, DEFAULT_KILLER_CATEGORIES).categories_or_default() == ["4k"]


def test_unwritable_location_still_returns_defaults(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    config = CategoryConfig(blocker / "cats.txt", ["Default"])

    assert config.categories_or_default() == ["Default"]


def test_defaults_required(tmp_path):
    with pytest.raises(ValueError):
        CategoryConfig(tmp_path / "cats.txt", [])
