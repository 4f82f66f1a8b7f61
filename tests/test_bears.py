import random

import pytest

from honeybear.bears import BEARS, Bear, Bears


def test_get_bear_by_name():
    assert BEARS.get_bear("Happy").file == "bear_happy.jpg"


def test_get_unknown_bear():
    assert BEARS.get_bear("Grizzly") is None


def test_boot_bear_is_sleeping():
    assert BEARS.get_bear_by_category("boot", "").name == "Sleeping"


def test_category_and_sub_category_filter():
    bears = Bears(BEARS, rng=random.Random(3))
    for _ in range(30):
        bear = bears.get_bear_by_category("standard", "idle")
        assert bear.category == "standard"
        assert bear.sub_category == "idle"


def test_category_without_sub_category():
    for _ in range(30):
        bear = BEARS.get_bear_by_category("glitch", "")
        assert bear.category == "glitch"


def test_empty_category_picks_any():
    for _ in range(30):
        assert BEARS.get_bear_by_category("", "") in BEARS


def test_no_match_is_none():
    assert BEARS.get_bear_by_category("emote", "bored") is None
    assert Bears().get_bear_by_category("", "") is None


def test_file_data(tmp_path):
    (tmp_path / "bear_happy.jpg").write_bytes(b"jpegdata")
    assert BEARS.get_bear("Happy").file_data(tmp_path) == b"jpegdata"


def test_file_data_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        Bear("Ghost", "ghost.jpg", "special").file_data(tmp_path)