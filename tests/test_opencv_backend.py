import unittest

import cv2
import numpy as np

from yolov3.backends.opencv_backend import OpenCvNet
from yolov3.config import Backend, Target
from yolov3.errors import BackendRejectedError, TargetRejectedError


class _FakeDnnNet:
    def __init__(self, reject: bool = False):
        self.reject = reject
        self.calls = []

    def setPreferableBackend(self, backend):
        if self.reject:
            raise cv2.error("backend not available")
        self.calls.append(("backend", backend))

    def setPreferableTarget(self, target):
        if self.reject:
            raise cv2.error("target not available")
        self.calls.append(("target", target))

    def setInput(self, blob, name):
        self.calls.append(("input", name))

    def forward(self, names):
        self.calls.append(("forward", names))
        return tuple(np.zeros((1, 85), dtype=np.float32) for _ in names)


def _wrap(dnn_net: _FakeDnnNet) -> OpenCvNet:
    net = OpenCvNet.__new__(OpenCvNet)
    net._cv2 = cv2
    net._net = dnn_net
    return net


class TestOpenCvNet(unittest.TestCase):
    def test_selectors_passed_as_ints(self) -> None:
        dnn_net = _FakeDnnNet()
        net = _wrap(dnn_net)
        net.set_preferable_backend(Backend.CUDA)
        net.set_preferable_target(Target.CUDA)
        self.assertEqual(dnn_net.calls, [("backend", 5), ("target", 6)])

    def test_rejected_backend(self) -> None:
        with self.assertRaises(BackendRejectedError) as ctx:
            _wrap(_FakeDnnNet(reject=True)).set_preferable_backend(Backend.VKCOM)
        self.assertIsInstance(ctx.exception.__cause__, cv2.error)

    def test_rejected_target(self) -> None:
        with self.assertRaises(TargetRejectedError):
            _wrap(_FakeDnnNet(reject=True)).set_preferable_target(Target.MYRIAD)

    def test_forward_layers_returns_list(self) -> None:
        dnn_net = _FakeDnnNet()
        net = _wrap(dnn_net)
        net.set_input(np.zeros((1, 3, 416, 416), dtype=np.float32), "data")
        outputs = net.forward_layers(("yolo_82", "yolo_94", "yolo_106"))
        self.assertIsInstance(outputs, list)
        self.assertEqual(len(outputs), 3)
        self.assertEqual(dnn_net.calls[-1], ("forward", ["yolo_82", "yolo_94", "yolo_106"]))

    def test_close_drops_engine(self) -> None:
        net = _wrap(_FakeDnnNet())
        net.close()
        self.assertIsNone(net._net)


if __name__ == "__main__":
    unittest.main()
