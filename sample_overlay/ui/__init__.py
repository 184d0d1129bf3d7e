"""Tk presentation for the sampling overlay."""

from .tk_view import TkSurfaceView

__all__ = ["TkSurfaceView"]
