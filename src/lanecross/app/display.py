"""
Frame display for the game window.

Holds the latest frame as a numpy buffer and turns it into a pygame
surface for blitting.
"""

import pygame
import numpy as np
from numpy.typing import NDArray


class FrameDisplay:
    """
    Window-side copy of the rendered frame.

    Uses a numpy buffer and renders to a pygame surface
    with integer scaling.
    """

    def __init__(self, width: int, height: int) -> None:
        self._width = width
        self._height = height
        self._buffer = np.zeros((height, width, 3), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def set_buffer(self, buffer: NDArray[np.uint8]) -> None:
        if buffer.shape == self._buffer.shape:
            np.copyto(self._buffer, buffer)
        else:
            # Crop or pad to the display size
            resized = np.zeros_like(self._buffer)
            h = min(buffer.shape[0], self._height)
            w = min(buffer.shape[1], self._width)
            resized[:h, :w] = buffer[:h, :w]
            np.copyto(self._buffer, resized)

    def get_buffer(self) -> NDArray[np.uint8]:
        return self._buffer.copy()

    def render(self, scale: int = 1) -> pygame.Surface:
        """
        Render buffer to a pygame surface.

        Args:
            scale: Pixel scale factor

        Returns:
            pygame.Surface with rendered frame
        """
        surface = pygame.surfarray.make_surface(self._buffer.swapaxes(0, 1))
        if scale == 1:
            return surface
        size = (self._width * scale, self._height * scale)
        return pygame.transform.scale(surface, size)
