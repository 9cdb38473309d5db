"""Frame buffer renderer for LANECROSS."""

import numpy as np
from numpy.typing import NDArray

from lanecross.core.interfaces import Canvas, Color, SpriteSource
from lanecross.graphics.primitives import clear, draw_image, draw_text, text_size


class FrameRenderer(Canvas):
    """Canvas that draws into an RGB numpy frame buffer.

    The buffer is redrawn from scratch every frame and handed to the
    display afterwards.
    """

    def __init__(
        self,
        sprites: SpriteSource,
        width: int,
        height: int,
        background: Color = (255, 255, 255),
    ) -> None:
        self.sprites = sprites
        self.width = width
        self.height = height
        self.background = background
        self.buffer: NDArray[np.uint8] = np.zeros((height, width, 3), dtype=np.uint8)
        clear(self.buffer, background)

    def clear_frame(self) -> None:
        clear(self.buffer, self.background)

    def draw_image(self, sprite_id: str, x: float, y: float) -> None:
        image = self.sprites.get(sprite_id)
        draw_image(self.buffer, image, int(round(x)), int(round(y)))

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Color,
        scale: int = 3,
    ) -> None:
        # y is the baseline; the bitmap font draws from its top edge
        _, height = text_size(text, scale)
        draw_text(self.buffer, text, int(round(x)), int(round(y)) - height, color, scale=scale)
