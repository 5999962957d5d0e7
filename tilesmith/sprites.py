"""Asynchronous sprite-sheet cache keyed by role name.

Sheets are requested once at session start and decoded off the event loop.
Readers never wait: ``get`` returns ``None`` until a sheet is ready and the
compositor simply skips whatever depends on it.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, Optional

import pygame

from .logging_utils import log_error, log_info

ImageLoader = Callable[[str], pygame.Surface]


def load_image(uri: str) -> pygame.Surface:
    """Decode an image file into a surface.

    Runs in a worker thread, so it must not touch the display; alpha
    conversion for the current video mode happens lazily on first use.
    """
    return pygame.image.load(uri)


class SpriteCache:
    """Role -> loaded surface, populated asynchronously, never invalidated."""

    def __init__(
        self,
        loader: Optional[ImageLoader] = None,
        on_ready: Optional[Callable[[str], None]] = None,
    ):
        self.loader = loader or load_image
        # Called with the role name once its sheet is available.
        self.on_ready = on_ready
        self._images: Dict[str, pygame.Surface] = {}
        self._pending: Dict[str, asyncio.Task] = {}

    def request(self, role: str, uri: str) -> None:
        """Start loading ``uri`` for ``role`` unless it is loaded or in flight.

        Must be called while an asyncio event loop is running.
        """
        if role in self._images or role in self._pending:
            return
        loop = asyncio.get_running_loop()
        self._pending[role] = loop.create_task(self._load(role, uri))

    def get(self, role: str) -> Optional[pygame.Surface]:
        return self._images.get(role)

    def is_ready(self, role: str) -> bool:
        return role in self._images

    def is_pending(self, role: str) -> bool:
        return role in self._pending

    async def wait_all(self) -> None:
        """Wait for every in-flight load to finish (successfully or not)."""
        while self._pending:
            await asyncio.gather(*self._pending.values(), return_exceptions=True)

    async def _load(self, role: str, uri: str) -> None:
        try:
            image = await asyncio.to_thread(self.loader, uri)
        except (pygame.error, OSError, ValueError) as exc:
            # The role stays not-ready; a later request() may retry.
            log_error(f"Sprite sheet '{role}' failed to load from {uri}: {exc}")
            return
        finally:
            self._pending.pop(role, None)

        self._images[role] = image
        log_info(f"Sprite sheet '{role}' ready ({image.get_width()}x{image.get_height()})")
        if self.on_ready is not None:
            self.on_ready(role)
