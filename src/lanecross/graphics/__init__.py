"""Graphics module for LANECROSS rendering."""

from lanecross.graphics.renderer import FrameRenderer
from lanecross.graphics.sprites import SpriteLibrary, SPRITE_IDS

__all__ = [
    "FrameRenderer",
    "SpriteLibrary",
    "SPRITE_IDS",
]
