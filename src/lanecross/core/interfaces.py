"""
Abstract collaborator interfaces for the game core.

The simulation never touches pixels, files or the clock directly. It
draws through a Canvas, looks sprites up through a SpriteSource and is
driven by a FrameScheduler. The pygame window and the numpy renderer
implement these; tests use small in-memory fakes.
"""

from abc import ABC, abstractmethod
from typing import Callable, Tuple

import numpy as np
from numpy.typing import NDArray

Color = Tuple[int, int, int]
FrameCallback = Callable[[float], None]


class Canvas(ABC):
    """Rendering collaborator: full-scene redraw every frame."""

    @abstractmethod
    def clear_frame(self) -> None:
        """Clear the whole frame before a redraw."""
        ...

    @abstractmethod
    def draw_image(self, sprite_id: str, x: float, y: float) -> None:
        """Draw a preloaded sprite with its top-left corner at (x, y)."""
        ...

    @abstractmethod
    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Color,
        scale: int = 3,
    ) -> None:
        """
        Draw a line of text.

        Args:
            text: Text to draw
            x: Left edge
            y: Text baseline (bottom of the glyphs)
            color: RGB color tuple
            scale: Font scale factor
        """
        ...


class SpriteSource(ABC):
    """Resource collaborator: sprite id to drawable lookup."""

    @abstractmethod
    def get(self, sprite_id: str) -> NDArray[np.uint8]:
        """
        Get a loaded sprite.

        Returns:
            numpy array of shape (height, width, 4) with RGBA values
        """
        ...

    @abstractmethod
    def __contains__(self, sprite_id: object) -> bool:
        ...


class FrameScheduler(ABC):
    """Scheduling collaborator: runs one callback per display frame."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds (monotonic)."""
        ...

    @abstractmethod
    def request_next_frame(self, callback: FrameCallback) -> None:
        """
        Run callback on the next frame.

        The callback receives the frame timestamp in seconds.
        """
        ...
