from __future__ import annotations

import enum
import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from .net import NeuralNet

DEFAULT_INPUT_WIDTH = 416
DEFAULT_INPUT_HEIGHT = 416

DEFAULT_CONF_THRESHOLD = 0.5
DEFAULT_NMS_THRESHOLD = 0.4

NetFactory = Callable[[str, str], NeuralNet]


class Backend(enum.IntEnum):
    """Compute backends; values mirror `cv2.dnn.DNN_BACKEND_*`."""

    DEFAULT = 0
    HALIDE = 1
    INFERENCE_ENGINE = 2
    OPENCV = 3
    VKCOM = 4
    CUDA = 5


class Target(enum.IntEnum):
    """Target devices; values mirror `cv2.dnn.DNN_TARGET_*`."""

    CPU = 0
    OPENCL = 1
    OPENCL_FP16 = 2
    MYRIAD = 3
    VULKAN = 4
    FPGA = 5
    CUDA = 6
    CUDA_FP16 = 7


def default_net_factory(weights_path: str, config_path: str) -> NeuralNet:
    """Build the OpenCV DNN engine for the given darknet model files."""
    from .backends.opencv_backend import OpenCvNet

    return OpenCvNet(weights_path, config_path)


@dataclass(frozen=True)
class Config:
    """
    Settings of the network used for object detection.

    A zero (or None) input dimension and a missing `new_net` are filled in by
    `resolved()`. Thresholds are used as given, so a zero threshold stays zero.

    - input_width/input_height: size of the blob fed to the network
    - confidence_threshold: minimum confidence before an object counts as detected
    - nms_threshold: IoU above which an overlapping box is suppressed
    - backend/target: engine selectors passed through untouched
    - new_net: factory `(weights_path, config_path) -> NeuralNet`, used to inject a custom net
    """

    input_width: Optional[int] = DEFAULT_INPUT_WIDTH
    input_height: Optional[int] = DEFAULT_INPUT_HEIGHT
    confidence_threshold: float = DEFAULT_CONF_THRESHOLD
    nms_threshold: float = DEFAULT_NMS_THRESHOLD
    backend: Backend = Backend.DEFAULT
    target: Target = Target.CPU
    new_net: Optional[NetFactory] = None

    def __post_init__(self) -> None:
        for key in ("input_width", "input_height"):
            value = getattr(self, key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{key} must be an integer")
            if value < 0:
                raise ValueError(f"{key} must be >= 0")
        for key in ("confidence_threshold", "nms_threshold"):
            value = getattr(self, key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{key} must be a number")

    def resolved(self) -> "Config":
        """Return a copy with every unset field replaced by its default."""
        return replace(
            self,
            input_width=self.input_width or DEFAULT_INPUT_WIDTH,
            input_height=self.input_height or DEFAULT_INPUT_HEIGHT,
            new_net=self.new_net or default_net_factory,
        )


def default_config() -> Config:
    """Config used to create a working yolov3 net out of the box."""
    return Config(new_net=default_net_factory)


def _require_number(payload: Dict[str, Any], key: str, default: float) -> float:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _require_int(payload: Dict[str, Any], key: str, default: int) -> int:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return int(value)


def _require_member(payload: Dict[str, Any], key: str, enum_cls: Any, default: Any) -> Any:
    value = payload.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"{key} must be one of {[m.name.lower() for m in enum_cls]}")
    try:
        return enum_cls[value.strip().upper()]
    except KeyError as exc:
        raise ValueError(f"Unknown {key}: {value!r}") from exc


def load_config(path: Union[str, Path]) -> Config:
    """
    Load detector settings from a JSON object.

    Example:

        {"input_width": 608, "input_height": 608, "confidence_threshold": 0.6,
         "nms_threshold": 0.4, "backend": "cuda", "target": "cuda"}

    Missing keys keep their defaults; unknown keys are rejected.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Detector config not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid detector config JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Detector config must be a JSON object")

    allowed = {
        "input_width",
        "input_height",
        "confidence_threshold",
        "nms_threshold",
        "backend",
        "target",
    }
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown detector config keys: {unknown}")

    return Config(
        input_width=_require_int(payload, "input_width", DEFAULT_INPUT_WIDTH),
        input_height=_require_int(payload, "input_height", DEFAULT_INPUT_HEIGHT),
        confidence_threshold=_require_number(payload, "confidence_threshold", DEFAULT_CONF_THRESHOLD),
        nms_threshold=_require_number(payload, "nms_threshold", DEFAULT_NMS_THRESHOLD),
        backend=_require_member(payload, "backend", Backend, Backend.DEFAULT),
        target=_require_member(payload, "target", Target, Target.CPU),
    )
