"""
Inference engines implementing the `yolov3.net.NeuralNet` protocol.

Engines are kept in a separate module so the decoding and suppression code
stays importable without touching the native runtime.
"""

from __future__ import annotations

from .opencv_backend import OpenCvNet

__all__ = ["OpenCvNet"]
