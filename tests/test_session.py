import pytest

from winstreak_tracker.roster import KILLER, SURVIVOR, CharacterRoster
from winstreak_tracker.session import NO_CHARACTER, SessionController
from winstreak_tracker.store import StreakRecord, StreakStore

from conftest import make_portrait, write_huge_png_header

CATEGORIES = {
    KILLER: ["4k", "3k", "Perkless 4k"],
    SURVIVOR: ["Solo escape", "3 out"],
}


def make_session(media_dir, saver, **kwargs):
    roster = CharacterRoster(media_dir)
    roster.build()
    return SessionController(roster, CATEGORIES, StreakStore(), saver, **kwargs)


@pytest.fixture
def session(media_dir, saver):
    return make_session(media_dir, saver)


def test_starts_on_first_character_and_category(session, media_dir):
    assert session.character_name == "Survivor"
    assert session.character_image == media_dir / "Survivor.png"
    assert session.category_names == ["Solo escape", "3 out"]
    assert session.category_label == "Solo escape"
    assert session.current == 0
    assert session.personal_best == 0
    assert session.character_names == ["Survivor", "The Nurse", "The Trapper"]


def test_select_character_by_index_key_and_name(session):
    assert session.select_character(1)
    assert session.character_name == "The Nurse"
    assert session.select_character("The_Trapper")
    assert session.character_name == "The Trapper"
    assert session.select_character("The Nurse")
    assert session.character.key == "TheNurse"


def test_unknown_selection_is_ignored(session):
    session.select_character(1)
    assert not session.select_character("The Clown")
    assert not session.select_character(7)
    assert not session.select_category("Perkless 3k")
    assert not session.select_category(-1)
    assert session.character_name == "The Nurse"
    assert session.category_label == "4k"


def test_navigation_wraps(session):
    session.previous_character()
    assert session.character_name == "The Trapper"
    session.next_character()
    assert session.character_name == "Survivor"
    session.next_character()
    session.next_character()
    assert session.character_name == "The Trapper"


def test_navigation_clamps_when_wrap_is_off(media_dir, saver):
    session = make_session(media_dir, saver, wrap=False)
    session.previous_character()
    assert session.character_name == "Survivor"
    session.select_character(2)
    session.next_character()
    assert session.character_name == "The Trapper"


def test_category_follows_role(session):
    session.select_character("The Nurse")
    assert session.category_names == ["4k", "3k", "Perkless 4k"]
    session.select_category("Perkless 4k")
    session.select_character("The Trapper")
    assert session.category_label == "Perkless 4k"
    session.select_character("Survivor")
    assert session.category_label == "Solo escape"


def test_win_win_loss_through_session(session, saver):
    session.select_character("The Nurse")
    session.select_category("Perkless 4k")
    session.win()
    session.win()
    assert (session.current, session.personal_best) == (2, 2)
    session.loss()

    assert (session.current, session.personal_best) == (0, 2)
    assert len(saver.documents) == 3
    assert saver.documents[-1]["streaks"]["TheNurse"]["Perkless 4k"] == {"current": 0, "personal_best": 2}


def test_read_after_win_sees_new_value_before_save_completes(session):
    class SlowSaver:
        def __init__(self):
            self.pending = []

        def submit(self, document):
            self.pending.append(document)

    session.saver = SlowSaver()
    session.select_character("The Nurse")
    session.win()

    assert session.current == 1
    assert session.saver.pending


def test_counters_follow_selection(session):
    session.select_character("The Nurse")
    session.win()
    session.select_character("The Trapper")
    assert session.current == 0
    session.select_character("The Nurse")
    assert session.current == 1
    session.select_category("3k")
    assert session.current == 0


def test_4k_best_carries_over_to_3k(media_dir, saver):
    session = make_session(media_dir, saver, pb_links={"4k": "3k"})
    session.select_character("The Nurse")
    session.win()
    session.win()

    record = session.store.get("TheNurse", "3k")
    assert record == StreakRecord(0, 2)


def test_links_do_not_apply_to_survivors(media_dir, saver):
    session = make_session(media_dir, saver, pb_links={"Solo escape": "3 out"})
    session.win()
    assert session.store.get("Survivor", "3 out") == StreakRecord(0, 0)


def test_listeners_run_after_changes(session):
    seen = []
    session.subscribe(lambda s: seen.append((s.character_name, s.current)))

    session.select_character("The Nurse")
    session.win()
    session.loss()

    assert seen == [("The Nurse", 0), ("The Nurse", 1), ("The Nurse", 0)]


def test_empty_roster(tmp_path, saver):
    roster = CharacterRoster(tmp_path)
    roster.build()
    session = SessionController(roster, CATEGORIES, StreakStore(), saver)

    assert session.character_index is None
    assert not session.has_character
    assert session.character_name == NO_CHARACTER
    assert session.character_image is None
    assert session.character_names == []
    assert session.category_names == CATEGORIES[KILLER]

    session.next_character()
    session.previous_character()
    assert session.win() == StreakRecord(0, 0)
    assert session.loss() == StreakRecord(0, 0)
    assert saver.documents == []


def test_rescan_clamps_selection(session, media_dir):
    session.select_character("The Trapper")
    (media_dir / "The_Trapper.png").unlink()
    (media_dir / "TheNurse.png").unlink()

    session.rescan()

    assert session.character_index == 0
    assert session.character_name == "Survivor"


def test_rescan_from_empty_selects_first(tmp_path, saver):
    roster = CharacterRoster(tmp_path)
    roster.build()
    session = SessionController(roster, CATEGORIES, StreakStore(), saver)
    make_portrait(tmp_path, "TheHag.png")

    session.rescan()

    assert session.character_name == "The Hag"


def test_rescan_with_missing_folder_empties_roster(tmp_path, saver):
    folder = tmp_path / "media"
    make_portrait(folder, "TheHag.png")
    session = make_session(folder, saver)
    (folder / "TheHag.png").unlink()
    folder.rmdir()

    session.rescan()

    assert session.character_index is None
    assert session.character_name == NO_CHARACTER


def test_display_values(session):
    session.select_character("The Nurse")
    session.win()

    assert session.display() == {
        "character_name": "The Nurse",
        "character_image": session.roster[1].image_path,
        "character_names": ["Survivor", "The Nurse", "The Trapper"],
        "category_names": ["4k", "3k", "Perkless 4k"],
        "category_label": "4k",
        "current": 1,
        "personal_best": 1,
    }


def test_killer_categories_required(media_dir, saver):
    roster = CharacterRoster(media_dir)
    with pytest.raises(ValueError):
        SessionController(roster, {SURVIVOR: ["Solo escape"]}, StreakStore(), saver)


def test_rescan_skips_oversized_portrait(session, media_dir):
    write_huge_png_header(media_dir, "TheHag.png")

    session.rescan()

    assert session.character_names == ["Survivor", "The Nurse", "The Trapper"]


def test_same_display_name_reachable_by_position(tmp_path, saver):
    make_portrait(tmp_path, "TheNurse.png")
    make_portrait(tmp_path, "The_Nurse.png")
    session = make_session(tmp_path, saver)

    assert session.select_character(1)
    session.win()

    assert session.character.key == "The_Nurse"
    assert session.store.get("The_Nurse", "4k").current == 1
    assert session.store.get("TheNurse", "4k").current == 0
