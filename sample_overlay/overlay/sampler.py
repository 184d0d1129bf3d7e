import math

from .cursor import Cursor
from .surface import RasterSurface


class RegionSampler:
    """Reads the square pixel window under the cursor.

    The window's side length is fixed at construction. ``half_size`` passed
    to :meth:`sample` only offsets the top-left corner, so a 20 pixel window
    sampled with ``half_size=3`` still returns 20x20 pixels.
    """

    def __init__(self, surface: RasterSurface, side_length: int = 20) -> None:
        if side_length <= 0:
            raise ValueError(f"side_length must be positive, got {side_length}")
        self._surface = surface
        self._side = side_length

    @property
    def side_length(self) -> int:
        return self._side

    @property
    def byte_length(self) -> int:
        return self._side * self._side * 4

    def origin(self, cursor: Cursor, half_size: float) -> tuple[int, int]:
        # Truncate toward zero like a canvas getImageData() call.
        return math.trunc(cursor.x - half_size), math.trunc(cursor.y - half_size)

    def sample(self, cursor: Cursor, half_size: float) -> bytes:
        """Return the RGBA window whose top-left is ``half_size`` before ``cursor``.

        Args:
            cursor: Selection point in surface pixels.
            half_size: Offset of the window's top-left corner from the cursor.

        Returns:
            ``side_length**2 * 4`` bytes, row-major. Pixels off the surface
            read as zero.
        """
        x, y = self.origin(cursor, half_size)
        return self._surface.read_region(x, y, self._side, self._side)
