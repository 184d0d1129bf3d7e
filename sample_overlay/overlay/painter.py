from __future__ import annotations

from typing import Tuple

from .cursor import Cursor
from .surface import RasterSurface


class OverlayPainter:
    """Draws the cursor indicator: an X plus a square outline."""

    def __init__(
        self,
        surface: RasterSurface,
        *,
        box_side: int = 20,
        line_width: int = 5,
        color: Tuple[int, int, int, int] = (255, 255, 0, 255),
    ) -> None:
        self._surface = surface
        self._box_side = box_side
        self._line_width = line_width
        self._color = color

    @property
    def color(self) -> Tuple[int, int, int, int]:
        return self._color

    def paint(self, cursor: Cursor, size: float) -> None:
        """Draw the indicator for ``cursor``.

        Args:
            cursor: Indicator centre in surface pixels.
            size: Half extent of the X. The box starts at the X's top-left
                corner and keeps its configured side length.
        """
        left = round(cursor.x - size)
        top = round(cursor.y - size)
        right = round(cursor.x + size)
        bottom = round(cursor.y + size)

        self._surface.stroke_line((left, top), (right, bottom), self._color, self._line_width)
        self._surface.stroke_line((left, bottom), (right, top), self._color, self._line_width)

        # The box keeps its own side length; it only shares the anchor with the X.
        self._surface.stroke_rect(
            (left, top),
            (left + self._box_side, top + self._box_side),
            self._color,
            self._line_width,
        )
