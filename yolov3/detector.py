from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from .config import Config, default_config
from .errors import ConfigNotFoundError, DetectorClosedError, WeightsNotFoundError
from .labels import load_labels
from .net import NeuralNet
from .nms import suppress
from .postprocess import ClassFilter, decode_outputs
from .types import ObjectDetection

PathLike = Union[str, Path]

LOGGER = logging.getLogger(__name__)

INPUT_LAYER = "data"
# One output layer per YOLOv3 detection scale.
OUTPUT_LAYERS = ("yolo_82", "yolo_94", "yolo_106")


class Detector:
    """
    YOLOv3 detector: blob -> forward pass -> decode -> NMS.

    Expects BGR frames (OpenCV-style) as `np.ndarray` and returns
    `ObjectDetection`s in frame pixel coordinates, highest confidence first.

    The underlying engine is not safe for concurrent forward passes; use one
    detector per worker or serialize calls.
    """

    def __init__(self, net: NeuralNet, labels: Sequence[str], config: Optional[Config] = None):
        cfg = (config or Config()).resolved()
        self.net = net
        self.labels = list(labels)
        self.input_width = cfg.input_width
        self.input_height = cfg.input_height
        self.confidence_threshold = cfg.confidence_threshold
        self.nms_threshold = cfg.nms_threshold
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def get_detections(self, frame: np.ndarray) -> List[ObjectDetection]:
        return self.get_detections_with_filter(frame, None)

    def get_detections_with_filter(
        self,
        frame: np.ndarray,
        class_filter: Optional[ClassFilter] = None,
    ) -> List[ObjectDetection]:
        """
        Detect objects in `frame`, dropping any whose class name is in `class_filter`.
        """

        if self._closed:
            raise DetectorClosedError("detector is closed")
        if frame is None or not hasattr(frame, "shape"):
            raise TypeError("frame must be a NumPy array (BGR).")

        blob = cv2.dnn.blobFromImage(
            frame,
            1.0 / 255.0,
            (self.input_width, self.input_height),
            (0, 0, 0, 0),
            swapRB=True,
            crop=False,
        )
        self.net.set_input(blob, INPUT_LAYER)
        outputs = self.net.forward_layers(list(OUTPUT_LAYERS))

        frame_h, frame_w = frame.shape[:2]
        return self.process_outputs((frame_w, frame_h), outputs, class_filter)

    def process_outputs(
        self,
        frame_size: Tuple[int, int],
        outputs: Sequence[np.ndarray],
        class_filter: Optional[ClassFilter] = None,
    ) -> List[ObjectDetection]:
        """
        Decode and suppress raw output tensors for a frame of (width, height).
        """

        candidates = decode_outputs(
            outputs,
            frame_size,
            self.labels,
            self.confidence_threshold,
            class_filter,
        )
        if len(candidates) == 0:
            LOGGER.debug("No candidates above confidence %.3f", self.confidence_threshold)
            return []

        keep = suppress(candidates.boxes, candidates.confidences, self.confidence_threshold, self.nms_threshold)
        LOGGER.debug("Kept %d of %d candidates after NMS", keep.size, len(candidates))
        return [candidates.detections[int(i)] for i in keep]

    def close(self) -> None:
        """Release the underlying engine. Calling it again does nothing."""
        if self._closed:
            return
        self._closed = True
        self.net.close()
        LOGGER.info("Closed yolov3 net")

    def __enter__(self) -> "Detector":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def new_net(weights_path: PathLike, config_path: PathLike, labels_path: PathLike) -> Detector:
    """
    Create a detector for the given darknet weights, cfg and label file.

    Typical usage:
        with new_net("data/yolov3.weights", "data/yolov3.cfg", "data/coco.names") as net:
            detections = net.get_detections(frame)
    """

    return new_net_with_config(weights_path, config_path, labels_path, default_config())


def new_net_with_config(
    weights_path: PathLike,
    config_path: PathLike,
    labels_path: PathLike,
    config: Config,
) -> Detector:
    """
    Create a detector with custom settings.

    Raises:
        WeightsNotFoundError / ConfigNotFoundError: a model file does not exist
        LabelReadError: the label file cannot be read
        Any error raised by the engine while selecting backend or target, unchanged
    """

    if not Path(weights_path).exists():
        raise WeightsNotFoundError(str(weights_path))
    if not Path(config_path).exists():
        raise ConfigNotFoundError(str(config_path))

    labels = load_labels(labels_path)
    cfg = config.resolved()

    net = cfg.new_net(str(weights_path), str(config_path))
    try:
        net.set_preferable_backend(cfg.backend)
        net.set_preferable_target(cfg.target)
    except Exception:
        net.close()
        raise

    LOGGER.info(
        "Loaded yolov3 net (%d labels, input %dx%d, backend=%s, target=%s)",
        len(labels),
        cfg.input_width,
        cfg.input_height,
        getattr(cfg.backend, "name", cfg.backend),
        getattr(cfg.target, "name", cfg.target),
    )
    return Detector(net, labels, cfg)
