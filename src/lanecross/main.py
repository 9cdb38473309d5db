"""
Main entry point for LANECROSS.

Loads settings, builds the simulation and its collaborators,
and runs the game window until it is closed.
"""

import asyncio
import logging
import random
import sys

from lanecross.config.settings import Settings, get_settings
from lanecross.core.engine import Engine
from lanecross.core.events import EventBus


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


async def run_game(settings: Settings) -> None:
    """Wire everything together and run the window loop."""
    from lanecross.app.window import GameWindow, WindowConfig
    from lanecross.game.simulation import Simulation
    from lanecross.graphics.renderer import FrameRenderer
    from lanecross.graphics.sprites import SpriteLibrary

    logger = logging.getLogger(__name__)

    event_bus = EventBus()

    # Resources must be ready before the first frame
    sprites = SpriteLibrary(settings.assets_path)
    sprites.load()

    width, height = settings.frame_size
    renderer = FrameRenderer(sprites, width, height)

    rng = random.Random(settings.seed)
    simulation = Simulation.from_settings(settings, rng=rng, event_bus=event_bus)

    window = GameWindow(
        renderer,
        config=WindowConfig(
            width=width,
            height=height,
            title=settings.title,
            scale=settings.display.scale,
            fps=settings.display.fps,
            show_debug=settings.debug,
        ),
        event_bus=event_bus,
        status_provider=simulation.status_lines,
    )

    engine = Engine(simulation, renderer, window, event_bus=event_bus)
    engine.start()

    if settings.seed is not None:
        logger.info(f"Using seed {settings.seed}")

    try:
        await window.run()
    finally:
        engine.stop()
        logger.info(f"Session high score: {simulation.high_score}")


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    logger = logging.getLogger(__name__)

    try:
        settings = get_settings()
    except ValueError as e:
        setup_logging()
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    setup_logging(settings.debug)
    logger.info("LANECROSS starting...")

    try:
        asyncio.run(run_game(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("LANECROSS stopped")


if __name__ == "__main__":
    main()
