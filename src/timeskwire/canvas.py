"""PDF render sink built on reportlab."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from timeskwire.errors import RenderLayoutError
from timeskwire.layout import Align, Line, Rectangle, Text

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

    from timeskwire.layout import Color, Instruction

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Helvetica-Bold"


def _rgb(color: Color) -> tuple[float, float, float]:
    return (color[0] / 255, color[1] / 255, color[2] / 255)


class PdfCanvas:
    """
    One-page PDF drawing surface.

    Use as a context manager: the document is written when the block exits
    normally and discarded when it exits with an exception.

    Parameters
    ----------
    filename : str
        Path of the PDF to write.
    pagesize : tuple[float, float]
        Page width and height in points.
    font : str, optional
        Name of a reportlab standard font, by default Helvetica-Bold.
    """

    def __init__(self, filename: str, pagesize: tuple[float, float], font: str = DEFAULT_FONT) -> None:
        width, height = pagesize
        if width <= 0 or height <= 0:
            raise RenderLayoutError(f"page dimensions must be positive, got {width}x{height}")
        self.filename = filename
        self.pagesize = pagesize
        self.font = font
        self._canvas: canvas.Canvas | None = None

    def __enter__(self) -> PdfCanvas:
        self._canvas = canvas.Canvas(self.filename, pagesize=self.pagesize)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        pdf, self._canvas = self._canvas, None
        if exc_type is not None:
            logger.debug("Discarding %s after error: %s", self.filename, exc)
            return
        pdf.showPage()
        pdf.save()
        logger.info("Wrote report to %s", self.filename)

    @property
    def pdf(self) -> canvas.Canvas:
        if self._canvas is None:
            raise RenderLayoutError("canvas used outside of its 'with' block")
        return self._canvas

    def measure(self, text: str, size: float) -> float:
        """Width of ``text`` in points at font ``size``."""
        return pdfmetrics.stringWidth(text, self.font, size)

    def line(self, line: Line) -> None:
        self.pdf.setStrokeColorRGB(*_rgb(line.color))
        self.pdf.setLineWidth(line.width)
        self.pdf.line(line.x1, line.y1, line.x2, line.y2)

    def rectangle(self, rect: Rectangle) -> None:
        self.pdf.setFillColorRGB(*_rgb(rect.color))
        self.pdf.rect(rect.x, rect.y, rect.width, rect.height, stroke=0, fill=1)

    def _prepare_text(self, text: Text) -> None:
        self.pdf.setFillColorRGB(*_rgb(text.color))
        self.pdf.setFont(self.font, text.size)

    def left_text(self, text: Text) -> None:
        self._prepare_text(text)
        self.pdf.drawString(text.x, text.y, text.text)

    def right_text(self, text: Text) -> None:
        self._prepare_text(text)
        self.pdf.drawRightString(text.x, text.y, text.text)

    def center_text(self, text: Text) -> None:
        self._prepare_text(text)
        self.pdf.drawCentredString(text.x, text.y, text.text)

    def draw(self, instruction: Instruction) -> None:
        """Replay one layout instruction."""
        if isinstance(instruction, Line):
            self.line(instruction)
        elif isinstance(instruction, Rectangle):
            self.rectangle(instruction)
        elif isinstance(instruction, Text):
            if instruction.align is Align.LEFT:
                self.left_text(instruction)
            elif instruction.align is Align.RIGHT:
                self.right_text(instruction)
            else:
                self.center_text(instruction)
        else:
            raise RenderLayoutError(f"unknown drawing instruction: {instruction!r}")

    def draw_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.draw(instruction)
