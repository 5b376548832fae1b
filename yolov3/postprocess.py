from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import TensorDecodeError
from .types import BoundingBox, ObjectDetection

# Row layout of a YOLOv3 output layer: [cx, cy, w, h, objectness, class_scores...]
BOX_COLUMNS = 4
SCORES_OFFSET = 5

ClassFilter = Union[AbstractSet[str], Mapping[str, bool]]


@dataclass
class Candidates:
    """
    Confidence-gated detections plus the parallel arrays NMS works on.
    """

    detections: List[ObjectDetection] = field(default_factory=list)
    boxes: np.ndarray = field(default_factory=lambda: np.empty((0, 4), dtype=np.int64))
    confidences: np.ndarray = field(default_factory=lambda: np.empty((0,), dtype=np.float32))

    def __len__(self) -> int:
        return len(self.detections)


def decode_outputs(
    outputs: Sequence[np.ndarray],
    frame_size: Tuple[int, int],
    labels: Sequence[str],
    confidence_threshold: float,
    class_filter: Optional[ClassFilter] = None,
) -> Candidates:
    """
    Convert raw YOLOv3 output tensors into candidate detections.

    Arg:
        outputs: one 2-D float32 tensor per output layer, one row per prediction
        frame_size: (width, height) of the frame the boxes are scaled to
        labels: class names indexed by class id
        confidence_threshold: rows must score strictly above this to be kept
        class_filter: class names to drop regardless of their confidence

    Candidates keep encounter order: tensor order, then row order.
    """

    frame_w, frame_h = frame_size
    excluded = _excluded_names(class_filter)

    detections: List[ObjectDetection] = []
    boxes: List[np.ndarray] = []
    confidences: List[np.ndarray] = []
    for index, tensor in enumerate(outputs):
        data = _as_rows(tensor, index)
        if data.shape[0] == 0:
            continue

        class_ids, scores = best_classes(data[:, SCORES_OFFSET:])
        if int(class_ids.max()) >= len(labels):
            raise TensorDecodeError(
                f"output tensor {index} predicts class {int(class_ids.max())} "
                f"but only {len(labels)} labels are loaded"
            )

        keep = scores > confidence_threshold
        if excluded:
            keep &= np.array([labels[cid] not in excluded for cid in class_ids], dtype=bool)
        rows = np.where(keep)[0]
        if rows.size == 0:
            continue

        rects = pixel_boxes(data[rows], frame_w, frame_h)
        for row, rect in zip(rows, rects):
            class_id = int(class_ids[row])
            detections.append(
                ObjectDetection(
                    class_id=class_id,
                    class_name=labels[class_id],
                    bounding_box=BoundingBox(*(int(v) for v in rect)),
                    confidence=float(scores[row]),
                )
            )
        boxes.append(rects)
        confidences.append(scores[rows])

    if not detections:
        return Candidates()
    return Candidates(
        detections=detections,
        boxes=np.concatenate(boxes, axis=0),
        confidences=np.concatenate(confidences, axis=0),
    )


def best_classes(scores: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Per-row class id and confidence of a (N, C) score matrix.

    Scans with a strict `>` from an initial best of 0, so the lowest index wins
    ties and a row without any positive score resolves to (0, 0).
    NaN scores never win.
    """

    n = scores.shape[0]
    if scores.ndim != 2 or scores.shape[1] == 0:
        return np.zeros((n,), dtype=np.int64), np.zeros((n,), dtype=scores.dtype)

    scores = np.where(np.isnan(scores), 0, scores)
    class_ids = np.argmax(scores, axis=1)
    confidences = scores[np.arange(n), class_ids]
    unset = ~(confidences > 0)
    class_ids[unset] = 0
    confidences[unset] = 0
    return class_ids, confidences


def class_id_and_confidence(scores: Sequence[float]) -> Tuple[int, float]:
    class_ids, confidences = best_classes(np.asarray(scores).reshape(1, -1))
    return int(class_ids[0]), float(confidences[0])


def pixel_boxes(rows: np.ndarray, frame_w: int, frame_h: int) -> np.ndarray:
    """
    Map normalized (cx, cy, w, h) rows to integer xyxy boxes in frame pixels.

    Rows with fewer than four coordinate columns map to the zero box.
    """

    if rows.shape[1] < BOX_COLUMNS:
        return np.zeros((rows.shape[0], 4), dtype=np.int64)

    scale = np.array([frame_w, frame_h, frame_w, frame_h], dtype=rows.dtype)
    cx, cy, w, h = (rows[:, :BOX_COLUMNS] * scale).astype(np.int64).T
    left = cx - (w / 2).astype(np.int64)
    top = cy - (h / 2).astype(np.int64)
    return np.stack([left, top, left + w, top + h], axis=1)


def calculate_bounding_box(row: Sequence[float], frame_size: Tuple[int, int]) -> BoundingBox:
    frame_w, frame_h = frame_size
    rect = pixel_boxes(np.asarray(row, dtype=np.float32).reshape(1, -1), frame_w, frame_h)[0]
    return BoundingBox(*(int(v) for v in rect))


# ------------------------------------------------------------------ #
# Helper internal
# ------------------------------------------------------------------ #
def _as_rows(tensor: np.ndarray, index: int) -> np.ndarray:
    dtype = getattr(tensor, "dtype", None)
    if dtype != np.float32:
        raise TensorDecodeError(f"output tensor {index} must hold float32 values, got {dtype}")
    if tensor.ndim != 2:
        raise TensorDecodeError(f"output tensor {index} must be 2-D, got shape {tensor.shape}")
    return tensor


def _excluded_names(class_filter: Optional[ClassFilter]) -> AbstractSet[str]:
    if not class_filter:
        return frozenset()
    if isinstance(class_filter, Mapping):
        return frozenset(name for name, excluded in class_filter.items() if excluded)
    return frozenset(class_filter)
