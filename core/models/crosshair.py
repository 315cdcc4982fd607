"""
Crosshair texture data model.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple


@dataclass(frozen=True)
class CrosshairItem:
    """A crosshair texture available in the thumbnails directory."""

    name: str  # File name including extension
    path: Path
    size: Tuple[int, int] = (0, 0)  # Decoded (width, height), zero if unknown

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]
