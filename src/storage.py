"""
Storage Module for Total

Async key-value storage for player progress (current level and completed
levels). Values are stored as strings, the way a mobile key-value store
holds them.

Read failures fall back to defaults so gameplay never stops on a broken
store. Write failures raise StorageError and are left to the caller.
"""

import asyncio
import json
import logging
import os
import queue
import tempfile
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

# Storage keys
CURRENT_LEVEL_KEY = "total_current_level"
COMPLETED_LEVELS_KEY = "total_completed_levels"


class StorageError(Exception):
    """Raised when the underlying store cannot be read or written."""


class KeyValueStore(ABC):
    """Async string key-value store."""

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent."""
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store a value."""
        pass

    @abstractmethod
    async def remove_items(self, keys: Iterable[str]) -> None:
        """Remove keys (missing keys are ignored)."""
        pass


class MemoryStore(KeyValueStore):
    """In-process store, used by tests and as a throwaway profile."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove_items(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    Store backed by a single JSON object file.

    File I/O runs in a worker thread so awaiting callers never block the
    event loop. The whole file is rewritten on every change: the new
    contents go to a temporary file that then replaces the old one, so a
    reader never sees a half-written file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (ValueError, OSError) as e:
            # ValueError covers both bad JSON and bad UTF-8
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not contain a JSON object")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=self.path.parent,
                                             prefix=f".{self.path.name}.", suffix=".tmp",
                                             delete=False) as f:
                tmp_name = f.name
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    def _set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def _remove(self, keys: List[str]) -> None:
        with self._lock:
            data = self._read()
            for key in keys:
                data.pop(key, None)
            self._write(data)

    async def get_item(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read)
        return data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)

    async def remove_items(self, keys: Iterable[str]) -> None:
        await asyncio.to_thread(self._remove, list(keys))


@dataclass
class GameStats:
    """
    Progress summary.

    Attributes:
        current_level: Level the player is on
        total_completed: Number of completed levels
        highest_level: Highest of current and completed levels
        completion_percentage: completed / highest, rounded, 0-100
    """
    current_level: int = 1
    total_completed: int = 0
    highest_level: int = 1
    completion_percentage: int = 0


def _require_level(level: int) -> None:
    if level < 1:
        raise ValueError(f"Level must be at least 1, got {level}")


class ProgressStorage:
    """
    Player progress on top of a KeyValueStore.

    Example:
        storage = ProgressStorage(JsonFileStore("progress.json"))
        level = await storage.get_current_level()
        await storage.add_completed_level(level)
        await storage.set_current_level(level + 1)
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def get_current_level(self) -> int:
        """
        Get the current level.

        Returns:
            Stored level, or 1 if absent or unreadable
        """
        try:
            raw = await self.store.get_item(CURRENT_LEVEL_KEY)
            return int(raw) if raw else 1
        except (StorageError, ValueError) as e:
            logger.error(f"Failed to get current level: {e}")
            return 1

    async def set_current_level(self, level: int) -> None:
        """
        Save the current level.

        Raises:
            ValueError: If level is below 1
            StorageError: If the store cannot be written
        """
        _require_level(level)
        try:
            await self.store.set_item(CURRENT_LEVEL_KEY, str(level))
        except StorageError as e:
            logger.error(f"Failed to save current level: {e}")
            raise

    async def get_completed_levels(self) -> List[int]:
        """
        Get completed levels.

        Returns:
            Sorted unique level numbers, or [] if absent or unreadable
        """
        try:
            raw = await self.store.get_item(COMPLETED_LEVELS_KEY)
            if not raw:
                return []
            return sorted({int(level) for level in json.loads(raw)})
        except (StorageError, ValueError, TypeError) as e:
            logger.error(f"Failed to get completed levels: {e}")
            return []

    async def add_completed_level(self, level: int) -> None:
        """
        Mark a level as completed. Adding a level twice is a no-op.

        Raises:
            ValueError: If level is below 1
            StorageError: If the store cannot be written
        """
        _require_level(level)
        completed = await self.get_completed_levels()
        if level in completed:
            return

        completed.append(level)
        completed.sort()
        try:
            await self.store.set_item(COMPLETED_LEVELS_KEY, json.dumps(completed))
        except StorageError as e:
            logger.error(f"Failed to save completed level: {e}")
            raise

    async def clear_all_progress(self) -> None:
        """
        Remove all saved progress.

        Raises:
            StorageError: If the store cannot be written
        """
        try:
            await self.store.remove_items([CURRENT_LEVEL_KEY, COMPLETED_LEVELS_KEY])
        except StorageError as e:
            logger.error(f"Failed to clear progress: {e}")
            raise

    async def get_highest_completed_level(self) -> int:
        """Highest completed level (0 if none)."""
        completed = await self.get_completed_levels()
        return max(completed) if completed else 0

    async def is_level_completed(self, level: int) -> bool:
        """Check whether a level has been completed."""
        return level in await self.get_completed_levels()

    async def get_game_stats(self) -> GameStats:
        """Summarize progress."""
        current_level, completed = await asyncio.gather(
            self.get_current_level(),
            self.get_completed_levels(),
        )
        highest_level = max([current_level, *completed])
        percentage = round(len(completed) / highest_level * 100) if highest_level > 0 else 0
        return GameStats(
            current_level=current_level,
            total_completed=len(completed),
            highest_level=highest_level,
            completion_percentage=percentage,
        )


SaveJob = Callable[[], Awaitable[bool]]


class SaveQueue:
    """
    First-in first-out runner for persistence coroutines.

    Jobs are submitted from any thread and run one at a time, each on a
    fresh event loop, by the single thread that calls run(). Progress
    writes are read-modify-write sequences and must never overlap.

    Example:
        saves = SaveQueue()
        worker = threading.Thread(target=saves.run)
        worker.start()
        saves.submit(lambda: progression.save_progress(3, 4))
        saves.close()
        worker.join()
    """

    def __init__(self):
        self._jobs: "queue.Queue[Optional[SaveJob]]" = queue.Queue()

    def submit(self, job: SaveJob) -> None:
        """
        Queue a job.

        Args:
            job: Factory returning the coroutine to run
        """
        self._jobs.put(job)

    def close(self) -> None:
        """Stop run() after the jobs already queued."""
        self._jobs.put(None)

    def run(self, on_result: Optional[Callable[[bool], None]] = None,
            on_error: Optional[Callable[[str], None]] = None) -> None:
        """
        Run queued jobs until close() is reached. Blocks while idle.

        Args:
            on_result: Called with each job's result
            on_error: Called with the message of a job that raised ValueError
        """
        while True:
            job = self._jobs.get()
            if job is None:
                logger.debug("Save queue closed")
                return

            try:
                result = asyncio.run(job())
            except ValueError as e:
                logger.error(f"Progress write rejected: {e}")
                if on_error:
                    on_error(str(e))
                continue

            if on_result:
                on_result(bool(result))
