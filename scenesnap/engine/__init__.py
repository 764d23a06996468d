"""Rendering engine interface and the software reference engine."""

from .base import Engine, Node, OffscreenSurface, Scheduler, UpdateMode
from .software import FrameLoopScheduler, SoftwareEngine

__all__ = [
    "Engine",
    "Node",
    "OffscreenSurface",
    "Scheduler",
    "UpdateMode",
    "FrameLoopScheduler",
    "SoftwareEngine",
]
