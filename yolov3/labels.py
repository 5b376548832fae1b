from __future__ import annotations

from pathlib import Path
from typing import List, Union

from .errors import LabelReadError


def load_labels(labels_path: Union[str, Path]) -> List[str]:
    """
    Load class names from a newline-delimited file such as `coco.names`.

    The class id of a name is its 0-based line number. Lines are kept as-is:
    no stripping, and the empty entry after a trailing newline is preserved.
    Bytes that are not valid UTF-8 are kept as surrogate escapes.
    """

    try:
        with open(labels_path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            content = f.read()
    except OSError as exc:
        raise LabelReadError(f"Could not read labels from {labels_path}: {exc}") from exc
    return content.split("\n")
