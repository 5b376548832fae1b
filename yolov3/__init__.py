"""
YOLOv3 object detection on top of the OpenCV DNN module.

OpenCV reads the darknet model and runs the forward pass; this package turns
the three YOLO output layers into labeled, confidence-gated, non-overlapping
bounding boxes. Decoding and suppression only need NumPy, so they can be used
on tensors produced by any engine that implements `NeuralNet`.
"""

from .types import BoundingBox, ObjectDetection
from .errors import (
    BackendRejectedError,
    ConfigNotFoundError,
    DetectorClosedError,
    LabelReadError,
    PathNotFoundError,
    TargetRejectedError,
    TensorDecodeError,
    WeightsNotFoundError,
    YoloError,
)
from .net import NeuralNet
from .config import (
    DEFAULT_CONF_THRESHOLD,
    DEFAULT_INPUT_HEIGHT,
    DEFAULT_INPUT_WIDTH,
    DEFAULT_NMS_THRESHOLD,
    Backend,
    Config,
    Target,
    default_config,
    load_config,
)
from .labels import load_labels
from .nms import NMSConfig, nms, suppress
from .postprocess import Candidates, decode_outputs
from .detector import Detector, new_net, new_net_with_config

__all__ = [
    "BoundingBox",
    "ObjectDetection",
    "YoloError",
    "PathNotFoundError",
    "WeightsNotFoundError",
    "ConfigNotFoundError",
    "LabelReadError",
    "BackendRejectedError",
    "TargetRejectedError",
    "TensorDecodeError",
    "DetectorClosedError",
    "NeuralNet",
    "DEFAULT_INPUT_WIDTH",
    "DEFAULT_INPUT_HEIGHT",
    "DEFAULT_CONF_THRESHOLD",
    "DEFAULT_NMS_THRESHOLD",
    "Backend",
    "Target",
    "Config",
    "default_config",
    "load_config",
    "load_labels",
    "NMSConfig",
    "nms",
    "suppress",
    "Candidates",
    "decode_outputs",
    "Detector",
    "new_net",
    "new_net_with_config",
]
