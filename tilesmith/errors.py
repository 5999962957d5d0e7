"""Exception types raised by the Tilesmith core.

Only malformed level data and unknown layer names are errors. Out-of-range
coordinates and sprite sheets that have not finished loading are handled by
clamping, no-ops or render skips and never raise.
"""

from __future__ import annotations


class TilesmithError(Exception):
    """Base class for all Tilesmith errors."""


class LevelParseError(TilesmithError):
    """Raised when a level blob fails JSON, shape or dimension validation.

    The caller's current level is never modified when this is raised.
    """

    def __init__(self, reason: str, *, underlying: Exception | None = None) -> None:
        self.reason = reason
        self.underlying = underlying
        message = (
            f"Level blob rejected: {reason}\n\n"
            "Remediation tips:\n"
            "  - Check the save slot was written by this editor version\n"
            "  - Every layer must hold exactly GRID_HEIGHT rows of GRID_WIDTH cells\n"
            "  - Layer names must be unique"
        )
        super().__init__(message)


class UnknownLayerError(TilesmithError, KeyError):
    """Raised when an operation names a layer the level does not have."""

    def __init__(self, name: str, known: list[str]) -> None:
        self.name = name
        self.known = known
        # KeyError repr-quotes its argument; pass a full sentence instead.
        super().__init__(f"Unknown layer '{name}' (known layers: {', '.join(known)})")

    def __str__(self) -> str:
        return self.args[0]
