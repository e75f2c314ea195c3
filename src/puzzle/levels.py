"""
Levels Module - Authored level data and the puzzle resolver.

Level content is a JSON object keyed by level number:

    {"1": {"target": 10, "numbers": [4, 6]}, ...}

It is loaded once at startup and never modified. Levels without authored
data resolve to a deterministic fallback puzzle so play never dead-ends.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .board import Puzzle
from .operations import MAX_GRID_SIZE, MAX_NUMBER_VALUE

logger = logging.getLogger(__name__)

# Bundled level data
DEFAULT_LEVELS_FILE = Path(__file__).parent / "data" / "levels.json"

# Fallback puzzle shape: these values shifted by level % 5
FALLBACK_BASE_NUMBERS = (2, 3, 4, 5)


def _parse_entry(key: str, entry: Any) -> Optional[Dict[str, Any]]:
    """Validate one authored entry, returning None if it must be skipped."""
    if not str(key).isdigit() or int(key) < 1:
        logger.warning(f"Skipping level with invalid key: {key!r}")
        return None
    if not isinstance(entry, dict):
        logger.warning(f"Skipping level {key}: entry is not an object")
        return None

    target = entry.get("target")
    numbers = entry.get("numbers")
    if not isinstance(target, int) or not isinstance(numbers, list) or not numbers:
        logger.warning(f"Skipping level {key}: missing target or numbers")
        return None
    if len(numbers) > MAX_GRID_SIZE:
        logger.warning(f"Skipping level {key}: {len(numbers)} numbers exceeds grid size {MAX_GRID_SIZE}")
        return None
    if not all(isinstance(n, int) and 0 < n <= MAX_NUMBER_VALUE for n in numbers):
        logger.warning(f"Skipping level {key}: numbers must be integers from 1 to {MAX_NUMBER_VALUE}")
        return None

    return {"target": target, "numbers": list(numbers)}


def load_levels(path: Union[str, Path, None] = None) -> Dict[str, Dict[str, Any]]:
    """
    Load authored level data from a JSON file.

    Args:
        path: Level file (defaults to the bundled levels.json)

    Returns:
        Mapping of level key to {"target", "numbers"}. Empty if the file
        is missing or unreadable; malformed entries are skipped.
    """
    levels_file = Path(path) if path else DEFAULT_LEVELS_FILE

    if not levels_file.exists():
        logger.warning(f"Level file not found: {levels_file}, every level will use fallback puzzles")
        return {}

    try:
        with open(levels_file, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.error(f"Failed to load levels from {levels_file}: {e}")
        return {}

    if not isinstance(raw, dict):
        logger.error(f"Level file {levels_file} must contain a JSON object")
        return {}

    levels: Dict[str, Dict[str, Any]] = {}
    for key, entry in raw.items():
        parsed = _parse_entry(key, entry)
        if parsed is not None:
            levels[str(int(key))] = parsed

    logger.info(f"Loaded {len(levels)} levels from {levels_file}")
    return levels


class LevelResolver:
    """
    Maps level numbers to concrete puzzles.

    Attributes:
        levels: Authored level data keyed by level number string
    """

    def __init__(self, levels: Optional[Mapping[str, Mapping[str, Any]]] = None):
        """
        Initialize resolver.

        Args:
            levels: Authored data (defaults to the bundled level file)
        """
        self.levels: Mapping[str, Mapping[str, Any]] = (
            load_levels() if levels is None else dict(levels)
        )

    def resolve(self, level: int) -> Puzzle:
        """
        Build the puzzle for a level.

        Args:
            level: Level number (1-based)

        Returns:
            Authored puzzle, or the fallback puzzle if none is authored

        Raises:
            ValueError: If level is below 1
        """
        if level < 1:
            raise ValueError(f"Level must be at least 1, got {level}")

        data = self.levels.get(str(level))
        if data is None:
            logger.warning(f"Level {level} not found in level data, using fallback")
            return self.fallback(level)

        return Puzzle.from_values(
            target=data["target"],
            values=data["numbers"],
            level=level,
            prefix=f"level_{level}",
        )

    def fallback(self, level: int) -> Puzzle:
        """
        Deterministic fallback puzzle.

        Every base value is offset by level % 5 and the target is the sum
        of the first two values, so the shape repeats every 5 levels.
        """
        offset = level % 5
        values = [value + offset for value in FALLBACK_BASE_NUMBERS]
        return Puzzle.from_values(
            target=values[0] + values[1],
            values=values,
            level=level,
            prefix=f"fallback_{level}",
            is_fallback=True,
        )

    def exists(self, level: int) -> bool:
        """Check whether authored data exists for a level."""
        return str(level) in self.levels

    def max_authored_level(self) -> int:
        """Highest authored level number (0 if nothing is authored)."""
        if not self.levels:
            return 0
        return max(int(key) for key in self.levels)

    def authored_levels(self) -> List[int]:
        """All authored level numbers, ascending."""
        return sorted(int(key) for key in self.levels)

    @staticmethod
    def difficulty_score(level: int) -> int:
        """Difficulty from 1 to 10, stepping up every 5 levels."""
        return min(math.ceil(level / 5), 10)
