"""Live video sampling overlay: pick a point, stream the pixels around it."""

from importlib import metadata

try:
    __version__ = metadata.version("sample-overlay")
except metadata.PackageNotFoundError:  # pragma: no cover - local dev
    __version__ = "0.0.0"

__all__ = ["__version__"]
