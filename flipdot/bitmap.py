from __future__ import annotations

import logging
from typing import Iterator, List, Tuple

import numpy as np
from PIL import Image

from .errors import OutOfBoundsError

logger = logging.getLogger(__name__)

ON_GLYPH = "⚫️"
OFF_GLYPH = "⚪️"

ON_COLOR = (255, 255, 255, 0)
OFF_COLOR = (0, 0, 0, 0)


class Bitmap:
    """
    A Bitmap holds the on/off state of every dot on a flip-dot panel.

    Cells are indexed [x][y] with x in [0, width) and y in [0, height); row 0
    is the top of the panel. The dimensions are fixed once created.

    Setting a dot outside the bitmap is logged and ignored, so animation code
    can draw shapes that run off the edge. Pass strict=True to raise
    OutOfBoundsError instead.

    Args:
        - width (int): number of columns
        - height (int): number of rows
        - strict (bool): raise on out-of-range writes instead of ignoring them
    """

    def __init__(self, width: int, height: int, strict: bool = False):
        if width <= 0 or height <= 0:
            raise ValueError(f"Bitmap size must be positive, got ({width}x{height})")

        self.width = width
        self.height = height
        self.strict = strict
        self.cells = np.zeros((width, height), dtype=bool)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set(self, x: int, y: int, state: bool) -> bool:
        """
        Set the dot at (x, y) on or off.

        Returns True if a cell was written, False if the coordinate was out of
        range and the call was skipped.
        """
        if not self.in_bounds(x, y):
            if self.strict:
                raise OutOfBoundsError(x, y, self.width, self.height)
            if not 0 <= x < self.width:
                logger.warning(
                    "Skipping set() with x %d out of range [0, %d)", x, self.width
                )
            else:
                logger.warning(
                    "Skipping set() with y %d out of range [0, %d)", y, self.height
                )
            return False

        self.cells[x, y] = bool(state)
        return True

    def get(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            raise IndexError(
                f"Coordinate ({x},{y}) out of range for {self.width}x{self.height} bitmap"
            )
        return bool(self.cells[x, y])

    def get_as_bit(self, x: int, y: int) -> int:
        return 1 if self.get(x, y) else 0

    def clear(self, state: bool = False) -> None:
        self.cells.fill(bool(state))

    def column(self, x: int) -> List[bool]:
        """The dots of column x, top row first."""
        if not 0 <= x < self.width:
            raise IndexError(f"Column {x} out of range [0, {self.width})")
        return [bool(v) for v in self.cells[x]]

    def set_data(self, arr: np.ndarray) -> None:
        """
        Load the whole bitmap from an image-oriented array of shape
        (height, width), where arr[y][x] is the dot at (x, y).
        """
        arr = np.asarray(arr)
        if arr.shape != (self.height, self.width):
            raise ValueError(
                f"bitmap shape must match array shape. "
                f"bitmap: {(self.height, self.width)}, array: {arr.shape}"
            )
        self.cells = arr.T.astype(bool)

    def color(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """RGBA color of a dot; assumes white dots on a black board."""
        return ON_COLOR if self.get(x, y) else OFF_COLOR

    def to_image(self, scale: int = 1) -> Image.Image:
        """Render the bitmap as a 1-bit Pillow image, optionally scaled up."""
        img = Image.fromarray(self.cells.T.astype(np.uint8) * 255).convert("1")
        if scale > 1:
            img = img.resize(
                (self.width * scale, self.height * scale), Image.Resampling.NEAREST
            )
        return img

    def render(self, on: str = ON_GLYPH, off: str = OFF_GLYPH) -> Iterator[str]:
        """
        Lazily render the bitmap one row at a time, one glyph per dot.

        Each call returns a fresh iterator, so a rendering can be restarted by
        calling render() again.
        """
        for y in range(self.height):
            yield "".join(on if self.cells[x, y] else off for x in range(self.width))

    def __iter__(self) -> Iterator[str]:
        return self.render()

    def __str__(self) -> str:
        return "\n".join(self.render())

    def __repr__(self) -> str:
        return f"Bitmap(width={self.width}, height={self.height})"
