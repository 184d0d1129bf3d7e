"""Tk canvas that displays a raster surface and forwards clicks."""

from __future__ import annotations

import io
import logging
from typing import Any, Callable, Optional

import numpy as np

try:
    import tkinter as tk
except Exception:  # pragma: no cover
    tk = None  # type: ignore

from PIL import Image

from ..core.logging_utils import ensure_structured_logger
from ..overlay.cursor import PointerEvent, SurfaceBounds

PointerHandler = Callable[[PointerEvent], Any]

# Log-once flag so a broken display does not spam every tick
_logged_show_error = False


class TkSurfaceView:
    """Shows the surface stretched over a ``tk.Canvas``.

    Implements the surface display protocol: :meth:`bounds` reports the
    canvas' on-screen rectangle and :meth:`show` repaints it. Left clicks are
    turned into :class:`PointerEvent` objects in screen coordinates, which
    map onto the surface through those same bounds.
    """

    def __init__(
        self,
        parent: "tk.Misc",
        *,
        width: int = 640,
        height: int = 480,
        on_pointer: Optional[PointerHandler] = None,
        logger: Optional[logging.Logger] = None,
        background: str = "#1e1e1e",
    ) -> None:
        if tk is None:
            raise RuntimeError("Tkinter not available")

        self._logger = ensure_structured_logger(logger, fallback_name="ui.tk_view")
        self._on_pointer = on_pointer
        self._photo_ref = None

        self.canvas = tk.Canvas(
            parent,
            width=width,
            height=height,
            bg=background,
            highlightthickness=0,
            borderwidth=0,
        )
        self.canvas.bind("<Button-1>", self._handle_click)

    def set_pointer_handler(self, handler: Optional[PointerHandler]) -> None:
        self._on_pointer = handler

    # ------------------------------------------------------------------
    # SurfaceDisplay protocol

    def bounds(self) -> SurfaceBounds:
        return SurfaceBounds(
            left=float(self.canvas.winfo_rootx()),
            top=float(self.canvas.winfo_rooty()),
            width=float(self.canvas.winfo_width()),
            height=float(self.canvas.winfo_height()),
        )

    def show(self, pixels: np.ndarray) -> None:
        canvas_w = self.canvas.winfo_width()
        canvas_h = self.canvas.winfo_height()

        # Skip if canvas not yet realized
        if canvas_w <= 1 or canvas_h <= 1:
            return

        try:
            image = Image.fromarray(pixels).convert("RGB")
            if image.size != (canvas_w, canvas_h):
                image = image.resize((canvas_w, canvas_h), Image.Resampling.BILINEAR)

            # Native Tk PhotoImage from PPM avoids the ImageTk dependency
            ppm_data = io.BytesIO()
            image.save(ppm_data, format="PPM")
            photo = tk.PhotoImage(data=ppm_data.getvalue())

            self.canvas.delete("all")
            self.canvas.create_image(0, 0, anchor="nw", image=photo)
            self._photo_ref = photo
        except tk.TclError as exc:
            global _logged_show_error
            if not _logged_show_error:
                self._logger.debug("Surface display update failed: %s", exc)
                _logged_show_error = True

    # ------------------------------------------------------------------
    # Input

    def _handle_click(self, event: "tk.Event") -> Optional[str]:
        pointer = PointerEvent(
            page_x=event.x_root,
            page_y=event.y_root,
            client_x=event.x_root,
            client_y=event.y_root,
        )
        if self._on_pointer is not None:
            self._on_pointer(pointer)
        return "break" if pointer.default_prevented else None


__all__ = ["TkSurfaceView"]
