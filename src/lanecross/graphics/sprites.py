"""Sprite loading and caching.

Sprites are RGBA numpy arrays. A sprite is read from ``<assets>/<id>.png``
when that file exists; otherwise a procedurally drawn stand-in is used, so
the game runs without any art assets installed. Everything is loaded once
before the frame loop starts.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from lanecross.core.interfaces import SpriteSource
from lanecross.graphics.primitives import (
    draw_circle,
    draw_diamond,
    draw_ellipse,
    draw_line,
    draw_rect,
)

logger = logging.getLogger(__name__)

# Sprite canvas matches the tile art: 101 wide, 171 tall with a transparent top
SPRITE_WIDTH = 101
SPRITE_HEIGHT = 171

SPRITE_IDS = (
    "water-block",
    "stone-block",
    "grass-block",
    "enemy-bug",
    "char-boy",
    "gem-blue",
    "gem-green",
    "star",
)

Sprite = NDArray[np.uint8]


def _blank() -> Sprite:
    return np.zeros((SPRITE_HEIGHT, SPRITE_WIDTH, 4), dtype=np.uint8)


def _block(top: tuple, side: tuple, edge: tuple) -> Sprite:
    img = _blank()
    draw_rect(img, 0, 50, SPRITE_WIDTH, 84, top + (255,))
    draw_rect(img, 0, 134, SPRITE_WIDTH, 37, side + (255,))
    draw_rect(img, 0, 50, SPRITE_WIDTH, 84, edge + (255,), filled=False)
    return img


def _enemy_bug() -> Sprite:
    img = _blank()
    # Legs under the shell
    for lx in (26, 46, 66):
        draw_line(img, lx, 112, lx - 8, 138, (40, 20, 20, 255), thickness=3)
    draw_ellipse(img, 46, 112, 40, 24, (200, 40, 40, 255))
    draw_line(img, 46, 90, 46, 134, (90, 10, 10, 255), thickness=2)
    draw_circle(img, 86, 112, 14, (60, 20, 20, 255))
    draw_circle(img, 92, 106, 4, (255, 255, 255, 255))
    draw_circle(img, 92, 118, 4, (255, 255, 255, 255))
    return img


def _char_boy() -> Sprite:
    img = _blank()
    draw_rect(img, 38, 128, 8, 16, (50, 50, 90, 255))
    draw_rect(img, 55, 128, 8, 16, (50, 50, 90, 255))
    draw_rect(img, 33, 100, 35, 30, (60, 110, 220, 255))
    draw_circle(img, 50, 84, 19, (240, 200, 160, 255))
    draw_rect(img, 31, 64, 39, 10, (110, 70, 30, 255))
    draw_circle(img, 43, 84, 3, (30, 30, 30, 255))
    draw_circle(img, 57, 84, 3, (30, 30, 30, 255))
    return img


def _gem(color: tuple, shine: tuple) -> Sprite:
    img = _blank()
    draw_diamond(img, 50, 118, 24, 30, color + (255,))
    draw_diamond(img, 44, 110, 8, 10, shine + (255,))
    return img


def _star() -> Sprite:
    img = _blank()
    gold = (250, 210, 40, 255)
    draw_diamond(img, 50, 118, 34, 9, gold)
    draw_diamond(img, 50, 118, 9, 34, gold)
    draw_circle(img, 50, 118, 13, gold)
    draw_circle(img, 50, 118, 6, (255, 245, 170, 255))
    return img


_BUILDERS: Dict[str, Callable[[], Sprite]] = {
    "water-block": lambda: _block((70, 140, 230), (40, 90, 170), (110, 170, 245)),
    "stone-block": lambda: _block((150, 150, 150), (105, 105, 105), (125, 125, 125)),
    "grass-block": lambda: _block((100, 190, 80), (120, 85, 50), (80, 160, 60)),
    "enemy-bug": _enemy_bug,
    "char-boy": _char_boy,
    "gem-blue": lambda: _gem((50, 110, 230), (170, 200, 255)),
    "gem-green": lambda: _gem((40, 180, 90), (170, 240, 190)),
    "star": _star,
}


def build_sprite(sprite_id: str) -> Sprite:
    """Draw a stand-in sprite.

    Raises:
        KeyError: If there is no builder for sprite_id
    """
    return _BUILDERS[sprite_id]()


def load_image(path: Path) -> Sprite:
    """Read an image file into an RGBA array of shape (height, width, 4)."""
    with Image.open(path) as img:
        return np.array(img.convert("RGBA"), dtype=np.uint8)


class SpriteLibrary(SpriteSource):
    """Preloaded sprite cache keyed by sprite id."""

    def __init__(self, assets_path: Optional[Path] = None) -> None:
        self._assets_path = assets_path
        self._sprites: Dict[str, Sprite] = {}

    def load(self, sprite_ids: Iterable[str] = SPRITE_IDS) -> None:
        """Load sprites, from files where present, else drawn procedurally."""
        for sprite_id in sprite_ids:
            if sprite_id in self._sprites:
                continue

            path = self._asset_file(sprite_id)
            if path is not None:
                self._sprites[sprite_id] = load_image(path)
                logger.debug(f"Loaded sprite {sprite_id} from {path}")
            else:
                self._sprites[sprite_id] = build_sprite(sprite_id)
                logger.debug(f"Built sprite {sprite_id}")

        logger.info(f"Sprite library ready: {len(self._sprites)} sprites")

    def _asset_file(self, sprite_id: str) -> Optional[Path]:
        if self._assets_path is None:
            return None
        path = self._assets_path / f"{sprite_id}.png"
        return path if path.is_file() else None

    def get(self, sprite_id: str) -> Sprite:
        try:
            return self._sprites[sprite_id]
        except KeyError:
            raise KeyError(f"Sprite not loaded: {sprite_id}") from None

    def __contains__(self, sprite_id: object) -> bool:
        return sprite_id in self._sprites

    def __len__(self) -> int:
        return len(self._sprites)
