from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass
class NMSConfig:
    iou_threshold: float = 0.4


def _iou(box: np.ndarray, others: np.ndarray) -> np.ndarray:
    """
    IoU of one xyxy box against (N,4) boxes.

    A pair whose combined area is zero counts as a full overlap, so duplicate
    empty boxes suppress each other.
    """

    xx1 = np.maximum(box[0], others[:, 0])
    yy1 = np.maximum(box[1], others[:, 1])
    xx2 = np.minimum(box[2], others[:, 2])
    yy2 = np.minimum(box[3], others[:, 3])

    w = np.maximum(0.0, xx2 - xx1)
    h = np.maximum(0.0, yy2 - yy1)
    inter = w * h
    total = (box[2] - box[0]) * (box[3] - box[1]) + (others[:, 2] - others[:, 0]) * (others[:, 3] - others[:, 1])
    union = total - inter
    iou = inter / np.maximum(union, 1e-6)
    return np.where(total <= 0, 1.0, iou)


def box_iou(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Intersection-over-Union of two xyxy boxes, as used by `nms`.
    """

    others = np.asarray(b, dtype=np.float64).reshape(1, 4)
    return float(_iou(np.asarray(a, dtype=np.float64), others)[0])


def nms(boxes: np.ndarray, scores: np.ndarray, cfg: NMSConfig) -> np.ndarray:
    """
    Greedy NumPy NMS. Expects boxes shape (N,4) in xyxy and scores shape (N,).

    Boxes are visited by descending score; ties keep their input order. A box is
    kept when its IoU with every box kept so far is <= `cfg.iou_threshold`.
    Returns indices of boxes to keep, highest score first.
    """

    if boxes.size == 0:
        return np.empty((0,), dtype=np.int64)

    boxes = boxes.astype(np.float64)
    order = np.argsort(-np.asarray(scores, dtype=np.float64), kind="stable")
    keep = []

    while order.size > 0:
        i = order[0]
        keep.append(i)

        iou = _iou(boxes[i], boxes[order[1:]])
        inds = np.where(iou <= cfg.iou_threshold)[0]
        order = order[inds + 1]

    return np.array(keep, dtype=np.int64)


def suppress(
    boxes: np.ndarray,
    confidences: np.ndarray,
    score_threshold: float,
    nms_threshold: float,
) -> np.ndarray:
    """
    Indices of the candidates that survive confidence gating and NMS.

    Every kept index is returned, index 0 included wherever it lands in the
    ordering.
    """

    boxes = np.asarray(boxes).reshape(-1, 4)
    confidences = np.asarray(confidences).reshape(-1)
    if boxes.shape[0] == 0:
        return np.empty((0,), dtype=np.int64)

    candidates = np.where(confidences > score_threshold)[0]
    if candidates.size == 0:
        return np.empty((0,), dtype=np.int64)

    keep_local = nms(boxes[candidates], confidences[candidates], NMSConfig(iou_threshold=nms_threshold))
    return candidates[keep_local]
