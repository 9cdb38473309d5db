"""Core framework components for LANECROSS."""

from .events import EventBus, Event, EventType
from .interfaces import Canvas, FrameScheduler, SpriteSource

__all__ = ["EventBus", "Event", "EventType", "Canvas", "FrameScheduler", "SpriteSource"]
