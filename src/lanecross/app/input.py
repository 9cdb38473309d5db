"""
Keyboard input for the game window.

Arrow keys and WASD map to grid directions. Each key press becomes one
direction event; holding a key does not repeat.
"""

from typing import Optional

import pygame

from lanecross.core.events import Event, direction_event

KEY_DIRECTIONS: dict[int, str] = {
    pygame.K_LEFT: "left",
    pygame.K_RIGHT: "right",
    pygame.K_UP: "up",
    pygame.K_DOWN: "down",
    pygame.K_a: "left",
    pygame.K_d: "right",
    pygame.K_w: "up",
    pygame.K_s: "down",
}


def direction_for_key(key: int) -> Optional[str]:
    """Direction for a pygame key code, or None for unmapped keys."""
    return KEY_DIRECTIONS.get(key)


class DirectionPad:
    """
    Turns key presses into direction events.

    Remembers the last direction for the debug overlay.
    """

    def __init__(self) -> None:
        self._last_direction: str | None = None
        self._presses = 0

    @property
    def last_direction(self) -> str | None:
        return self._last_direction

    @property
    def presses(self) -> int:
        return self._presses

    def press(self, key: int) -> Event | None:
        """Map a key press to a direction event (None if the key is not mapped)."""
        direction = direction_for_key(key)
        if direction is None:
            return None

        self._last_direction = direction
        self._presses += 1
        return direction_event(direction, source="keyboard")
