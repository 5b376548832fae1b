from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned rectangle in frame pixel coordinates.

    Coordinates are not clamped to the frame; they can be negative or extend
    past the frame edges.
    """

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def area(self) -> int:
        return self.width * self.height

    def as_xyxy(self) -> Tuple[int, int, int, int]:
        return self.left, self.top, self.right, self.bottom


ZERO_BOX = BoundingBox(0, 0, 0, 0)


@dataclass(frozen=True)
class ObjectDetection:
    """
    An object detected by the network.
    """

    class_id: int
    class_name: str
    bounding_box: BoundingBox
    confidence: float
