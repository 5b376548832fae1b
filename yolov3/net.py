from __future__ import annotations

from typing import List, Protocol, Sequence

import numpy as np


class NeuralNet(Protocol):
    """
    Capability interface an inference engine must satisfy to back a detector.

    The production implementation is `OpenCvNet`; tests substitute a stub that
    returns fixed tensors.
    """

    def set_preferable_backend(self, backend: int) -> None:
        ...

    def set_preferable_target(self, target: int) -> None:
        ...

    def set_input(self, blob: np.ndarray, name: str) -> None:
        ...

    def forward_layers(self, layer_names: Sequence[str]) -> List[np.ndarray]:
        ...

    def close(self) -> None:
        ...
