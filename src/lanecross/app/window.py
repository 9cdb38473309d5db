"""
Main game window using pygame.

Hosts the frame loop: it collects keyboard input, runs the frame
callback registered by the engine, and shows the rendered frame.
"""

import pygame
import asyncio
import logging
import time
from typing import Callable
from dataclasses import dataclass

from ..core.events import EventBus, EventType, Event
from ..core.interfaces import FrameCallback, FrameScheduler
from ..graphics.renderer import FrameRenderer
from .display import FrameDisplay
from .input import DirectionPad

logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """Game window configuration."""
    width: int = 505
    height: int = 606
    title: str = "LANECROSS"
    scale: int = 1
    fps: int = 60
    show_debug: bool = False

    # Colors
    bg_color: tuple[int, int, int] = (255, 255, 255)
    panel_color: tuple[int, int, int] = (20, 20, 30)
    text_color: tuple[int, int, int] = (200, 200, 220)


class GameWindow(FrameScheduler):
    """
    pygame window that schedules frames and delivers input.

    Keyboard Mapping:
        ARROWS / WASD: Move one cell
        F1: Toggle debug overlay
        F2: Capture screenshot
        ESC / Q: Exit
    """

    def __init__(
        self,
        renderer: FrameRenderer,
        config: WindowConfig | None = None,
        event_bus: EventBus | None = None,
        status_provider: Callable[[], list[str]] | None = None,
    ) -> None:
        self.config = config or WindowConfig()
        self.renderer = renderer
        self.event_bus = event_bus or EventBus()
        self._status_provider = status_provider

        # Pygame setup
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._running = False
        self._frame_count = 0
        self._show_debug = self.config.show_debug

        self.display = FrameDisplay(self.config.width, self.config.height)
        self.pad = DirectionPad()

        # Callback registered for the next frame
        self._next_frame: FrameCallback | None = None

        self._font: pygame.font.Font | None = None

        logger.info("GameWindow created")

    # FrameScheduler
    def now(self) -> float:
        return time.monotonic()

    def request_next_frame(self, callback: FrameCallback) -> None:
        self._next_frame = callback

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        size = (
            self.config.width * self.config.scale,
            self.config.height * self.config.scale,
        )
        self._screen = pygame.display.set_mode(size, pygame.DOUBLEBUF)
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont(None, 18)

        logger.info(f"Pygame initialized: {size[0]}x{size[1]}")

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        """Handle key press."""
        key = event.key

        if key == pygame.K_ESCAPE or key == pygame.K_q:
            self._running = False
        elif key == pygame.K_F1:
            self._show_debug = not self._show_debug
        elif key == pygame.K_F2:
            self._capture_screenshot()
        else:
            move = self.pad.press(key)
            if move is not None:
                self.event_bus.emit(move)

    def _run_frame_callback(self) -> None:
        """Run the callback registered for this frame, if any."""
        callback = self._next_frame
        self._next_frame = None
        if callback is not None:
            callback(self.now())

    def _render(self) -> None:
        """Show the latest frame."""
        if not self._screen:
            return

        self._screen.fill(self.config.bg_color)

        self.display.set_buffer(self.renderer.buffer)
        self._screen.blit(self.display.render(self.config.scale), (0, 0))

        if self._show_debug:
            self._render_debug_panel()

        pygame.display.flip()

    def debug_lines(self) -> list[str]:
        """Text shown in the F1 debug overlay."""
        lines = [
            f"FPS: {self._clock.get_fps():.1f}" if self._clock else "FPS: --",
            f"Window frame: {self._frame_count}",
            f"Last key: {self.pad.last_direction or '-'}  Presses: {self.pad.presses}",
        ]
        if self._status_provider is not None:
            lines.extend(self._status_provider())
        return lines

    def _render_debug_panel(self) -> None:
        """Render the debug information overlay."""
        if not self._font:
            return

        lines = self.debug_lines()
        width = 230
        height = 10 + 18 * len(lines)
        x = self._screen.get_width() - width - 6
        y = self._screen.get_height() - height - 6

        panel = pygame.Surface((width, height), pygame.SRCALPHA)
        panel.fill(self.config.panel_color + (200,))
        self._screen.blit(panel, (x, y))

        ty = y + 6
        for line in lines:
            text_surface = self._font.render(line, True, self.config.text_color)
            self._screen.blit(text_surface, (x + 8, ty))
            ty += 18

    def _capture_screenshot(self) -> None:
        """Capture and save a screenshot."""
        if self._screen:
            filename = f"screenshot_{self._frame_count}.png"
            pygame.image.save(self._screen, filename)
            logger.info(f"Screenshot saved: {filename}")

    async def run(self) -> None:
        """Main window loop."""
        self._init_pygame()
        self._running = True

        logger.info("Window loop started")

        while self._running:
            # Handle input
            self._handle_events()

            # Run the scheduled frame
            self._run_frame_callback()

            # Process event queue
            await self.event_bus.process_queue()

            # Show it
            self._render()

            # Frame timing
            if self._clock:
                self._clock.tick(self.config.fps)

            self._frame_count += 1

            # Yield to other tasks
            await asyncio.sleep(0)

        self.event_bus.emit(Event(EventType.SHUTDOWN, source="window"))
        self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        pygame.quit()
        logger.info("Window closed")

    def stop(self) -> None:
        """Stop the window loop."""
        self._running = False
