"""
Tests for best-score and skin persistence.
"""

import pytest

from shield_snake.config import DEFAULT_SKIN
from shield_snake.storage import ScoreStore


@pytest.fixture
def store(tmp_path):
    return ScoreStore(tmp_path / "data" / "best.txt", tmp_path / "data" / "skin.txt")


class TestScoreStore:
    def test_missing_files_use_defaults(self, store):
        assert store.load_best() == 0
        assert store.load_skin() == DEFAULT_SKIN

    def test_record_keeps_the_best(self, store):
        assert store.record(40) == 40
        assert store.record(25) == 40
        assert store.load_best() == 40
        assert store.record(70) == 70
        assert store.highscore_file.read_text(encoding="utf-8") == "70"

    def test_corrupt_score_reads_as_zero(self, store):
        store.highscore_file.parent.mkdir(parents=True)
        store.highscore_file.write_text("not a number", encoding="utf-8")
        assert store.load_best() == 0

    def test_skin_round_trip(self, store):
        store.save_skin("lava")
        assert store.load_skin() == "lava"

    def test_unknown_skin(self, store):
        with pytest.raises(ValueError):
            store.save_skin("plaid")
        store.skin_file.parent.mkdir(parents=True, exist_ok=True)
        store.skin_file.write_text("plaid", encoding="utf-8")
        assert store.load_skin() == DEFAULT_SKIN
