"""Custom exception classes for SceneSnap."""

from typing import Optional


class SceneSnapError(Exception):
    """Base exception for SceneSnap."""

    pass


class ConfigurationError(SceneSnapError):
    """Exception raised for application settings errors."""

    pass


class EngineError(SceneSnapError):
    """Exception raised for rendering engine errors."""

    pass


class CaptureError(SceneSnapError):
    """Base exception for failures inside the capture pipeline."""

    pass


class ConfigError(CaptureError):
    """Exception raised when the capture config is missing, unreadable or malformed."""

    pass


class SceneLoadError(CaptureError):
    """Exception raised when a named scene resource cannot be resolved."""

    pass


class NoActiveSceneError(CaptureError):
    """Exception raised when there is no running scene to borrow."""

    pass


class ReadbackError(CaptureError):
    """Exception raised when the render target has no pixel buffer."""

    pass


class EncodeError(CaptureError):
    """Exception raised when the image file cannot be written."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class CaptureRequestError(SceneSnapError):
    """Exception raised when a requested capture run does not succeed."""

    pass
