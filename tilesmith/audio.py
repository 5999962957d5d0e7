"""Best-effort jump sound cue."""

from __future__ import annotations

from typing import Optional

import pygame

from .logging_utils import log_info


class JumpCue:
    """Plays the jump sound; any audio failure is logged once and ignored.

    The mixer and the sound file are loaded lazily on the first ``play`` so a
    session without an audio device, or without the sound file, still runs.
    """

    def __init__(self, uri: str):
        self.uri = uri
        self._sound: Optional[pygame.mixer.Sound] = None
        self._disabled = False
        self.plays = 0

    def play(self) -> None:
        self.plays += 1
        if self._disabled:
            return
        try:
            if self._sound is None:
                if pygame.mixer.get_init() is None:
                    pygame.mixer.init()
                self._sound = pygame.mixer.Sound(self.uri)
            self._sound.play()
        except (pygame.error, OSError) as exc:
            self._disabled = True
            log_info(f"Jump sound disabled: {exc}")
