"""
Dialog Rendering with Cairo

Paints a ``DialogFrame`` into an off-screen Cairo image and copies the
result into the dialog window. The renderer makes no layout decisions:
positions, colors, fonts and text all come from the frame.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Tuple
import cairo

if TYPE_CHECKING:
    from .connection import Connection
    from .dialogs import DialogFrame, Font


class DialogRenderer:
    """Renders dialog frames into X windows."""

    def __init__(self, conn: Connection):
        """Initialize the renderer.

        Args:
            conn: Protocol adapter used to upload the finished image
        """
        self.conn = conn

    @contextmanager
    def _surface(self, width: int, height: int) -> Iterator[cairo.ImageSurface]:
        """Image surface that is released however the drawing ends."""
        surface = cairo.ImageSurface(cairo.FORMAT_RGB24, width, height)
        try:
            yield surface
        finally:
            surface.finish()

    def render(self, window: int, frame: DialogFrame):
        """Paint a frame and copy it into the window.

        Args:
            window: Target dialog window
            frame: Background and text lines to paint
        """
        with self._surface(frame.width, frame.height) as surface:
            ctx = cairo.Context(surface)

            self.fill_rectangle(ctx, 0, 0, frame.width, frame.height, frame.background)
            for line in frame.lines:
                self.draw_text(
                    ctx,
                    line.text,
                    line.x,
                    line.y,
                    line.foreground,
                    line.background,
                    line.font,
                )

            surface.flush()
            self.conn.put_image(
                window,
                frame.width,
                frame.height,
                bytes(surface.get_data()),
                surface.get_stride(),
            )

    def fill_rectangle(
        self,
        ctx: cairo.Context,
        x: int,
        y: int,
        width: int,
        height: int,
        color: Tuple[int, int, int, int],
    ):
        self._set_color(ctx, color)
        ctx.rectangle(x, y, width, height)
        ctx.fill()

    def draw_text(
        self,
        ctx: cairo.Context,
        text: str,
        x: int,
        y: int,
        foreground: Tuple[int, int, int, int],
        background: Tuple[int, int, int, int],
        font: Font,
    ):
        """Draw one line of text with its baseline at ``y``.

        Like an X image text request, the text's own extent is filled with
        the background color first.
        """
        if not text:
            return

        ctx.select_font_face(
            font.family, cairo.FONT_SLANT_NORMAL, cairo.FONT_WEIGHT_NORMAL
        )
        ctx.set_font_size(font.size)

        extents = ctx.font_extents()
        text_width = ctx.text_extents(text).x_advance
        self.fill_rectangle(
            ctx, x, y - extents[0], text_width, extents[0] + extents[1], background
        )

        self._set_color(ctx, foreground)
        ctx.move_to(x, y)
        ctx.show_text(text)

    def _set_color(self, ctx: cairo.Context, color: Tuple[int, int, int, int]):
        """Set Cairo source color from RGBA tuple."""
        r, g, b, a = color
        ctx.set_source_rgba(r / 255.0, g / 255.0, b / 255.0, a / 255.0)
