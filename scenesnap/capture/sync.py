"""Frame synchronization before readback."""

import logging

from ..engine.base import Engine, Scheduler, UpdateMode
from .target import RenderTarget

logger = logging.getLogger(__name__)

SETTLE_TICKS = 2


class FrameSynchronizer:
    """Drives the render target until a fully drawn frame is available."""

    def __init__(self, engine: Engine, scheduler: Scheduler):
        self.engine = engine
        self.scheduler = scheduler

    def _wait_for_draw(self) -> None:
        self.scheduler.wait_ticks(SETTLE_TICKS)
        self.scheduler.wait_frame_drawn()

    def synchronize(self, target: RenderTarget, delay_seconds: float) -> None:
        """
        Wait for first draw, the settle delay, then one more draw in update-once mode.

        Args:
            target: Attached render target.
            delay_seconds: Settle delay; skipped when zero.
        """
        self._wait_for_draw()

        if delay_seconds > 0:
            logger.info(f"Waiting {delay_seconds}s before capture")
            self.scheduler.wait_timer(delay_seconds)

        self.engine.set_update_mode(target.surface, UpdateMode.ONCE)
        self._wait_for_draw()
        logger.debug("Frame synchronized")
