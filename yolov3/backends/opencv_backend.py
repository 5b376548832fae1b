from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence, Union

import numpy as np

from ..errors import BackendRejectedError, TargetRejectedError

PathLike = Union[str, Path]

LOGGER = logging.getLogger(__name__)


class OpenCvNet:
    """
    `NeuralNet` backed by the OpenCV DNN module.

    Loads a Darknet model with `cv2.dnn.readNet` and forwards blobs through it.
    Backend/target selectors are passed straight to OpenCV.
    """

    def __init__(self, weights_path: PathLike, config_path: PathLike):
        try:
            import cv2  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError("OpenCV is required for OpenCvNet. Install with `pip install opencv-python`.") from e

        self._cv2 = cv2
        self.weights_path = Path(weights_path)
        self.config_path = Path(config_path)
        LOGGER.info("Reading darknet model %s (%s)", self.weights_path, self.config_path)
        self._net = cv2.dnn.readNet(str(self.weights_path), str(self.config_path))

    def set_preferable_backend(self, backend: int) -> None:
        try:
            self._net.setPreferableBackend(int(backend))
        except self._cv2.error as exc:
            raise BackendRejectedError(f"OpenCV rejected backend {backend!r}: {exc}") from exc

    def set_preferable_target(self, target: int) -> None:
        try:
            self._net.setPreferableTarget(int(target))
        except self._cv2.error as exc:
            raise TargetRejectedError(f"OpenCV rejected target {target!r}: {exc}") from exc

    def set_input(self, blob: np.ndarray, name: str) -> None:
        self._net.setInput(blob, name)

    def forward_layers(self, layer_names: Sequence[str]) -> List[np.ndarray]:
        return list(self._net.forward(list(layer_names)))

    def close(self) -> None:
        # cv2.dnn.Net is freed once the last reference goes away.
        self._net = None
