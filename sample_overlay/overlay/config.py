"""Typed configuration for the sampling overlay."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

from ..core.config_loader import ConfigLoader
from ..core.logging_config import coerce_level

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.txt"

# Accent colour for the cursor indicator, RGB.
YELLOW = (255, 255, 0)


@dataclass(frozen=True)
class OverlayConfig:
    surface_width: int = 1280
    surface_height: int = 960
    tick_interval_ms: int = 20

    # Sampling aperture. The side length is fixed; the half size only
    # positions the top-left corner relative to the cursor.
    sample_side: int = 20
    sample_half_size: int = 10

    # Indicator geometry is configured separately from the aperture.
    indicator_half_size: int = 10
    indicator_box_side: int = 20
    indicator_line_width: int = 5
    indicator_color_r: int = YELLOW[0]
    indicator_color_g: int = YELLOW[1]
    indicator_color_b: int = YELLOW[2]

    log_level: str = "info"

    def __post_init__(self) -> None:
        for name in (
            "surface_width",
            "surface_height",
            "tick_interval_ms",
            "sample_side",
            "indicator_box_side",
            "indicator_line_width",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        for name in ("indicator_color_r", "indicator_color_g", "indicator_color_b"):
            if not 0 <= getattr(self, name) <= 255:
                raise ValueError(f"{name} must be within 0-255, got {getattr(self, name)!r}")
        try:
            coerce_level(self.log_level)
        except ValueError:
            raise ValueError(f"log_level must be a logging level name, got {self.log_level!r}") from None

    @property
    def surface_size(self) -> Tuple[int, int]:
        return (self.surface_width, self.surface_height)

    @property
    def accent_rgba(self) -> Tuple[int, int, int, int]:
        return (self.indicator_color_r, self.indicator_color_g, self.indicator_color_b, 255)

    @property
    def sample_byte_length(self) -> int:
        return self.sample_side * self.sample_side * 4

    @classmethod
    def defaults(cls) -> dict[str, Any]:
        return asdict(cls())

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "OverlayConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in values.items() if key in known})

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "OverlayConfig":
        """Read ``config_path`` (bundled config.txt by default) and apply overrides.

        Overrides with a value of ``None`` are skipped so argparse namespaces
        can be passed through directly.
        """
        path = config_path or DEFAULT_CONFIG_PATH
        values = ConfigLoader.load(path, defaults=cls.defaults(), strict=True)
        if overrides:
            values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.from_mapping(values)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


__all__ = ["OverlayConfig", "DEFAULT_CONFIG_PATH"]
