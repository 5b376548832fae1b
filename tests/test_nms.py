import unittest

import numpy as np

from yolov3.nms import NMSConfig, box_iou, nms, suppress


class TestBoxIou(unittest.TestCase):
    def test_identical_boxes(self) -> None:
        self.assertAlmostEqual(box_iou((0, 0, 10, 10), (0, 0, 10, 10)), 1.0)

    def test_touching_boxes_do_not_overlap(self) -> None:
        self.assertEqual(box_iou((1, 1, 3, 3), (-1, 1, 1, 3)), 0.0)

    def test_half_overlap(self) -> None:
        # intersection 50, union 150
        self.assertAlmostEqual(box_iou((0, 0, 10, 10), (5, 0, 15, 10)), 1.0 / 3.0)

    def test_empty_boxes_count_as_full_overlap(self) -> None:
        self.assertEqual(box_iou((0, 0, 0, 0), (0, 0, 0, 0)), 1.0)

    def test_empty_box_against_real_box(self) -> None:
        self.assertEqual(box_iou((0, 0, 0, 0), (0, 0, 10, 10)), 0.0)


class TestSuppress(unittest.TestCase):
    def test_no_candidates(self) -> None:
        keep = suppress(np.empty((0, 4)), np.empty((0,)), 0.5, 0.4)
        self.assertEqual(keep.size, 0)

    def test_non_overlapping_boxes_are_all_kept(self) -> None:
        boxes = np.array([[1, 1, 3, 3], [-1, 1, 1, 3]])
        keep = suppress(boxes, np.array([9.0, 9.0], dtype=np.float32), 0.0, 0.0)
        self.assertEqual(keep.tolist(), [0, 1])

    def test_overlapping_lower_confidence_is_suppressed(self) -> None:
        boxes = np.array([[-1, 1, 1, 3], [-1, 1, 1, 3]])
        keep = suppress(boxes, np.array([9.0, 10.0], dtype=np.float32), 0.0, 0.4)
        self.assertEqual(keep.tolist(), [1])

    def test_result_is_ordered_by_confidence(self) -> None:
        boxes = np.array([[0, 0, 10, 10], [100, 100, 110, 110], [200, 200, 210, 210]])
        keep = suppress(boxes, np.array([0.6, 0.9, 0.7]), 0.5, 0.4)
        self.assertEqual(keep.tolist(), [1, 2, 0])

    def test_first_candidate_kept_when_not_first_in_result(self) -> None:
        # Index 0 ranks second here. All kept indices are returned, including 0 in
        # a non-leading position (an older index-collection loop dropped it).
        boxes = np.array([[0, 0, 10, 10], [50, 50, 60, 60]])
        keep = suppress(boxes, np.array([0.6, 0.9]), 0.5, 0.4)
        self.assertEqual(keep.tolist(), [1, 0])

    def test_scores_at_threshold_are_gated(self) -> None:
        boxes = np.array([[0, 0, 10, 10], [50, 50, 60, 60]])
        keep = suppress(boxes, np.array([0.5, 0.9]), 0.5, 0.4)
        self.assertEqual(keep.tolist(), [1])

    def test_iou_equal_to_threshold_is_kept(self) -> None:
        # intersection 50, union 100
        boxes = np.array([[0, 0, 10, 10], [0, 0, 10, 5]])
        keep = suppress(boxes, np.array([0.9, 0.8]), 0.0, 0.5)
        self.assertEqual(keep.tolist(), [0, 1])
        keep = suppress(boxes, np.array([0.9, 0.8]), 0.0, 0.3)
        self.assertEqual(keep.tolist(), [0])

    def test_duplicate_zero_boxes_keep_only_the_best(self) -> None:
        # Rows without box columns all decode to the zero box.
        boxes = np.array([[0, 0, 0, 0], [0, 0, 0, 0]])
        keep = suppress(boxes, np.array([0.9, 0.8]), 0.5, 0.4)
        self.assertEqual(keep.tolist(), [0])


class TestNms(unittest.TestCase):
    def test_disjoint_boxes_ordered_by_score(self) -> None:
        boxes = np.array([[0, 0, 1, 1], [10, 10, 11, 11], [20, 20, 21, 21]], dtype=np.float32)
        keep = nms(boxes, np.array([0.1, 0.3, 0.2]), NMSConfig(iou_threshold=0.5))
        self.assertEqual(keep.tolist(), [1, 2, 0])

    def test_suppressed_box_does_not_suppress_others(self) -> None:
        # b overlaps a (suppressed); c overlaps b but not a, so c survives.
        boxes = np.array([[0, 0, 10, 10], [4, 0, 14, 10], [9, 0, 19, 10]], dtype=np.float32)
        keep = nms(boxes, np.array([0.9, 0.8, 0.7]), NMSConfig(iou_threshold=0.3))
        self.assertEqual(keep.tolist(), [0, 2])


if __name__ == "__main__":
    unittest.main()
