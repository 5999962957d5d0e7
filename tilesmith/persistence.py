"""
PersistenceStrategy interface for pluggable level storage.

The editor core only needs two operations from storage: overwrite the single
save slot with a level blob, and read that slot back. Everything else (where
the bytes live, how they get there) belongs to the strategy.

Two included implementations:
1. InMemoryPersistence - dict-based slot storage, data lost on exit (testing)
2. JsonFilePersistence - one JSON file per slot on disk (the default for the runner)

Async design rationale:
- Saving must not block rendering or input handling, so the runner schedules
  save/load coroutines as tasks on the event loop
- File I/O runs in a worker thread (asyncio.to_thread)
- initialize() and close() manage backend lifecycle (directories, handles)

Usage pattern:
    persistence = JsonFilePersistence("saves")
    await persistence.initialize()

    await persistence.save(level.serialize())
    blob = await persistence.load()   # None when nothing was saved yet

    await persistence.close()
"""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from .config import Config
from .errors import LevelParseError

DEFAULT_SLOT = "tilemap-level"


class PersistenceStrategy(ABC):
    """Abstract base class for level persistence.

    Strategies are addressed by one fixed slot key; every save overwrites it.
    Blobs are opaque strings to the strategy (the level JSON produced by
    ``Level.serialize``).
    """

    def __init__(self, slot: str = DEFAULT_SLOT):
        self.slot = slot

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the persistence backend.

        Called once before the first save/load.

        Raises:
            Exception: If initialization fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Close the persistence backend.

        Raises:
            Exception: If cleanup fails
        """
        pass

    @abstractmethod
    async def save(self, blob: str) -> None:
        """
        Overwrite the save slot with ``blob``.

        Args:
            blob: Serialized level

        Raises:
            Exception: If save fails
        """
        pass

    @abstractmethod
    async def load(self) -> Optional[str]:
        """
        Read the save slot.

        Returns:
            The stored blob, or None if the slot was never written

        Raises:
            LevelParseError: If the stored bytes cannot be read as text
            Exception: If retrieval fails
        """
        pass


class InMemoryPersistence(PersistenceStrategy):
    """In-memory slot storage using a Python dict (no files).

    Data is lost when the process exits. Several instances can share one
    ``store`` dict to simulate a browser's local storage across sessions.
    """

    def __init__(self, slot: str = DEFAULT_SLOT, store: Optional[Dict[str, str]] = None):
        super().__init__(slot)
        self.store: Dict[str, str] = store if store is not None else {}

    async def initialize(self) -> None:
        """No-op for in-memory storage."""
        pass

    async def close(self) -> None:
        """
        No-op: data is kept after close so callers can inspect it.
        """
        pass

    async def save(self, blob: str) -> None:
        self.store[self.slot] = blob

    async def load(self) -> Optional[str]:
        return self.store.get(self.slot)


class JsonFilePersistence(PersistenceStrategy):
    """File-based persistence: the slot is ``{base_path}/{slot}.json``.

    The file holds the level blob verbatim so it stays human-readable and can
    be exchanged with the browser editor's exported levels.

    Writes go to a temporary sibling first and are then renamed over the slot
    file, so a crash mid-write never leaves a truncated level behind.
    """

    def __init__(self, base_path: Path | str | None = None, slot: str = DEFAULT_SLOT):
        super().__init__(slot)
        self.base_path = Path(base_path) if base_path is not None else Config.SAVE_DIR

    @property
    def path(self) -> Path:
        return self.base_path / f"{self.slot}.json"

    async def initialize(self) -> None:
        await asyncio.to_thread(self.base_path.mkdir, parents=True, exist_ok=True)

    async def close(self) -> None:
        # Nothing to clean up for file persistence
        return None

    async def save(self, blob: str) -> None:
        path = self.path
        tmp_path = path.with_suffix(".json.tmp")

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(blob, "utf-8")
            tmp_path.replace(path)

        await asyncio.to_thread(_write)

    async def load(self) -> Optional[str]:
        """Read the slot file.

        Raises:
            LevelParseError: If the file is not valid UTF-8 text.
        """
        path = self.path
        if not path.exists():
            return None
        data = await asyncio.to_thread(path.read_bytes)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise LevelParseError("save slot is not valid UTF-8", underlying=exc) from exc
