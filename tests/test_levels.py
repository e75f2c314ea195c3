"""
Tests for level data loading and the puzzle resolver.
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.puzzle import LevelResolver, load_levels


SAMPLE_LEVELS = {
    "1": {"target": 10, "numbers": [4, 6]},
    "3": {"target": 3, "numbers": [6, 2, 4]},
}


def test_resolve_authored_level():
    resolver = LevelResolver(SAMPLE_LEVELS)
    puzzle = resolver.resolve(3)

    assert puzzle.target == 3
    assert puzzle.values == [6, 2, 4]
    assert [tile.position for tile in puzzle.tiles] == [0, 1, 2]
    assert puzzle.level == 3
    assert not puzzle.is_fallback


def test_tile_ids_are_unique():
    resolver = LevelResolver(SAMPLE_LEVELS)
    first = resolver.resolve(1)
    second = resolver.resolve(1)

    ids = [tile.id for tile in first.tiles + second.tiles]
    assert len(ids) == len(set(ids))


def test_fallback_for_missing_level():
    """Level 9999: [2,3,4,5] shifted by 9999 % 5 = 4, target 6 + 7."""
    resolver = LevelResolver(SAMPLE_LEVELS)
    puzzle = resolver.resolve(9999)

    assert puzzle.values == [6, 7, 8, 9]
    assert puzzle.target == 13
    assert puzzle.is_fallback
    assert [tile.position for tile in puzzle.tiles] == [0, 1, 2, 3]


def test_fallback_repeats_every_five_levels():
    resolver = LevelResolver({})
    assert resolver.resolve(5).values == [2, 3, 4, 5]
    assert resolver.resolve(5).target == 5
    assert resolver.resolve(7).values == resolver.resolve(12).values


def test_resolve_rejects_level_below_one():
    resolver = LevelResolver(SAMPLE_LEVELS)
    with pytest.raises(ValueError):
        resolver.resolve(0)


def test_exists_and_max_authored_level():
    resolver = LevelResolver(SAMPLE_LEVELS)
    assert resolver.exists(1)
    assert not resolver.exists(2)
    assert resolver.max_authored_level() == 3
    assert resolver.authored_levels() == [1, 3]
    assert LevelResolver({}).max_authored_level() == 0


def test_difficulty_score():
    assert LevelResolver.difficulty_score(1) == 1
    assert LevelResolver.difficulty_score(5) == 1
    assert LevelResolver.difficulty_score(6) == 2
    assert LevelResolver.difficulty_score(500) == 10


def test_bundled_levels():
    resolver = LevelResolver()
    assert resolver.exists(1)
    assert resolver.max_authored_level() == 25

    puzzle = resolver.resolve(5)
    assert puzzle.target == 3
    assert puzzle.values == [6, 2, 4]


def test_load_levels_skips_malformed_entries(tmp_path):
    levels_file = tmp_path / "levels.json"
    levels_file.write_text(json.dumps({
        "1": {"target": 10, "numbers": [4, 6]},
        "two": {"target": 10, "numbers": [4, 6]},
        "3": {"target": 10},
        "4": {"target": 10, "numbers": [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]},
        "5": {"target": 10, "numbers": [4, -6]},
        "7": {"target": 60, "numbers": [4, 51]},
        "8": {"target": 99, "numbers": [50, 49]},
        "6": [1, 2],
    }), encoding="utf-8")

    levels = load_levels(levels_file)
    assert list(levels) == ["1", "8"]


def test_load_levels_missing_or_corrupt_file(tmp_path):
    assert load_levels(tmp_path / "missing.json") == {}

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    assert load_levels(corrupt) == {}

    # Everything falls back, play continues
    assert LevelResolver(load_levels(corrupt)).resolve(2).is_fallback
