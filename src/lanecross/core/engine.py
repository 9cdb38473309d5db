"""
Game engine: drives the simulation one frame at a time.

The engine never loops by itself. Each frame callback computes the
wall-clock delta since the previous frame, runs one simulation tick and
asks the scheduler for the next frame. Direction events from the event
bus are buffered into the simulation and applied at the next tick.
"""

import logging
from typing import Callable, List, Optional

from lanecross.core.events import EVENT_DIRECTIONS, Event, EventBus, tick_event
from lanecross.core.interfaces import Canvas, FrameScheduler
from lanecross.game.simulation import Simulation

logger = logging.getLogger(__name__)


class Engine:
    """Connects a Simulation to its canvas, scheduler and input events."""

    def __init__(
        self,
        simulation: Simulation,
        canvas: Canvas,
        scheduler: FrameScheduler,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.simulation = simulation
        self.canvas = canvas
        self.scheduler = scheduler
        self.event_bus = event_bus

        self._running = False
        self._last_time = 0.0
        self._frame_count = 0
        self._last_delta = 0.0
        self._unsubscribers: List[Callable[[], None]] = []

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def last_delta(self) -> float:
        return self._last_delta

    def start(self) -> None:
        """Subscribe to input and run the first frame immediately."""
        if self._running:
            return

        self._running = True
        if self.event_bus is not None:
            for event_type in EVENT_DIRECTIONS:
                self._unsubscribers.append(
                    self.event_bus.subscribe(event_type, self._on_direction)
                )

        self._last_time = self.scheduler.now()
        logger.info("Engine started")
        self._frame(self._last_time)

    def stop(self) -> None:
        if not self._running:
            return

        self._running = False
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        logger.info(f"Engine stopped after {self._frame_count} frames")

    def _on_direction(self, event: Event) -> None:
        self.simulation.queue_input(EVENT_DIRECTIONS.get(event.type))

    def _frame(self, now: float) -> None:
        if not self._running:
            return

        dt = max(0.0, now - self._last_time)
        self._last_time = now
        self._last_delta = dt

        try:
            self.simulation.tick(dt, self.canvas)
        except Exception:
            self.stop()
            raise

        self._frame_count += 1
        if self.event_bus is not None:
            self.event_bus.emit(tick_event(dt, self._frame_count))

        self.scheduler.request_next_frame(self._frame)
