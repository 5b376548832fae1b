"""
Exceptions raised by the yolov3 package.

Everything derives from `YoloError` so callers can catch the whole family,
while the builtin bases keep `except FileNotFoundError` style handling working.
"""

from __future__ import annotations


class YoloError(Exception):
    """Base class for yolov3 errors."""


class PathNotFoundError(YoloError, FileNotFoundError):
    """A model file required to build the net does not exist."""


class WeightsNotFoundError(PathNotFoundError):
    def __init__(self, path: str = "") -> None:
        super().__init__("path to net weights not found")
        self.path = path


class ConfigNotFoundError(PathNotFoundError):
    def __init__(self, path: str = "") -> None:
        super().__init__("path to net config not found")
        self.path = path


class LabelReadError(YoloError, OSError):
    """The label file could not be read."""


class BackendRejectedError(YoloError):
    """The inference engine refused the requested backend."""


class TargetRejectedError(YoloError):
    """The inference engine refused the requested target device."""


class TensorDecodeError(YoloError, ValueError):
    """An output tensor could not be interpreted as YOLO detections."""


class DetectorClosedError(YoloError, RuntimeError):
    """A detection call was made on a detector that was already closed."""
