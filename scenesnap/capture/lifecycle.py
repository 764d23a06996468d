"""Capture lifecycle: sequences the pipeline and maps every failure to exit status 1."""

import logging
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, TextIO

from ..config.capture import CaptureConfig, resolve_capture_config
from ..engine.base import Engine, Node, Scheduler
from ..utils.exceptions import CaptureError
from ..utils.logging import LOG_PREFIX
from .naming import build_filename
from .persist import OutputArtifact, persist, read_back
from .scene import SceneAcquirer, SceneHandle
from .sync import FrameSynchronizer
from .target import RenderTarget, create_render_target, release_render_target

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
SUCCESS_PREFIX = "SUCCESS:"


class CaptureState(Enum):
    """Pipeline states, in order."""

    IDLE = "idle"
    CONFIG_LOADED = "config_loaded"
    SCENE_READY = "scene_ready"
    TARGET_ATTACHED = "target_attached"
    SYNCHRONIZED = "synchronized"
    CAPTURED = "captured"
    PERSISTED = "persisted"
    CLEANED_UP = "cleaned_up"
    TERMINATED_SUCCESS = "terminated_success"
    TERMINATED_FAILURE = "terminated_failure"


class CaptureLifecycle:
    """Runs exactly one capture and reports an exit status."""

    def __init__(
        self,
        engine: Engine,
        scheduler: Scheduler,
        pipeline_node: Node,
        config_file: Path,
        output_dir: Path,
        clock: Callable[[], datetime] = datetime.now,
        stdout: Optional[TextIO] = None,
    ):
        """
        Initialize capture lifecycle.

        Args:
            engine: Host engine.
            scheduler: Frame loop scheduler.
            pipeline_node: The pipeline's own node in the engine tree.
            config_file: Path to the capture config JSON.
            output_dir: Directory that receives the image.
            clock: Wall-clock source for the filename timestamp.
            stdout: Stream for the SUCCESS line. Defaults to sys.stdout.
        """
        self.engine = engine
        self.scheduler = scheduler
        self.pipeline_node = pipeline_node
        self.config_file = config_file
        self.output_dir = output_dir
        self.clock = clock
        self.stdout = stdout

        self.state = CaptureState.IDLE
        self.config: Optional[CaptureConfig] = None
        self.scene: Optional[SceneHandle] = None
        self.target: Optional[RenderTarget] = None
        self.artifact: Optional[OutputArtifact] = None

    def _transition(self, state: CaptureState) -> None:
        logger.debug(f"Capture state: {self.state.value} -> {state.value}")
        self.state = state

    def run(self) -> int:
        """
        Run the pipeline.

        Returns:
            EXIT_SUCCESS if the image was written, EXIT_FAILURE otherwise.
        """
        if self.state is not CaptureState.IDLE:
            raise RuntimeError("Capture lifecycle can only run once")

        try:
            self._run_pipeline()
        except CaptureError as e:
            return self._fail(f"{type(e).__name__}: {e}")
        except Exception as e:
            logger.debug("Unexpected capture failure", exc_info=True)
            return self._fail(f"Unexpected error: {e}")

        self._transition(CaptureState.TERMINATED_SUCCESS)
        return EXIT_SUCCESS

    def _run_pipeline(self) -> None:
        self.config = resolve_capture_config(self.config_file)
        self._transition(CaptureState.CONFIG_LOADED)

        self.scene = SceneAcquirer(self.engine, self.scheduler).acquire(self.config)
        self._transition(CaptureState.SCENE_READY)

        self.target = create_render_target(
            self.engine, self.pipeline_node, self.scene, self.config
        )
        self._transition(CaptureState.TARGET_ATTACHED)

        FrameSynchronizer(self.engine, self.scheduler).synchronize(
            self.target, self.config.delay_seconds
        )
        self._transition(CaptureState.SYNCHRONIZED)

        pixels = read_back(self.engine, self.target)
        self._transition(CaptureState.CAPTURED)

        filename = build_filename(
            self.scene.name,
            self.config.width,
            self.config.height,
            self.config.delay_seconds,
            self.clock(),
        )
        self.artifact = persist(self.engine, pixels, self.output_dir, filename)
        self._transition(CaptureState.PERSISTED)

        stdout = self.stdout or sys.stdout
        print(f"{SUCCESS_PREFIX}{self.artifact.absolute_path}", file=stdout, flush=True)

        self._cleanup()
        self._transition(CaptureState.CLEANED_UP)

    def _cleanup(self) -> None:
        try:
            self.config_file.unlink()
            logger.debug(f"Removed capture config {self.config_file}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"{LOG_PREFIX} Could not remove capture config: {e}")

        try:
            release_render_target(self.engine, self.target)
        except Exception as e:
            logger.warning(f"{LOG_PREFIX} Could not release render target: {e}")

    def _fail(self, message: str) -> int:
        logger.error(f"{LOG_PREFIX} Capture failed in state '{self.state.value}': {message}")
        self._transition(CaptureState.TERMINATED_FAILURE)
        return EXIT_FAILURE


def terminate(engine: Engine, exit_code: int) -> None:
    """Stop the host and exit the process."""
    engine.quit(exit_code)
    sys.exit(exit_code)
