"""PDF renderer -- sheet paths and legends to a one-page PDF.

All geometry arrives in **inches**.  This module converts to PDF points
at the drawing boundary::

    points = inches * 72.0

Paint mapping:
    ``stroke``       -> ``drawPath(stroke=1, fill=0)``
    ``fill``         -> ``drawPath(stroke=0, fill=1)``
    ``fill_stroke``  -> ``drawPath(stroke=1, fill=1)``
"""

from __future__ import annotations

import io
import logging
from pathlib import Path as FilePath

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from keycap_overlay.path_ir.operations import (
    ClosePath,
    CurveTo,
    LegendText,
    LineTo,
    MoveTo,
    Path,
)
from keycap_overlay.sheet import Sheet
from keycap_overlay.utils.fs import atomic_write_bytes

logger = logging.getLogger(__name__)

PT_PER_IN = 72.0


class RenderError(Exception):
    """Raised when a sheet cannot be drawn."""

    pass


def _pt(value_in: float) -> float:
    """Convert inches to PDF points."""
    return value_in * PT_PER_IN


class PdfRenderer:
    """Draw a ``Sheet`` with reportlab.

    Parameters
    ----------
    sheet : Sheet
        Composed page (inches).
    title : str
        PDF document title.
    """

    def __init__(self, sheet: Sheet, title: str = "Keycap overlay") -> None:
        self._sheet = sheet
        self._title = title

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render_bytes(self) -> bytes:
        """Render the sheet and return the PDF file contents."""
        buf = io.BytesIO()
        c = canvas.Canvas(
            buf,
            pagesize=(_pt(self._sheet.page_width), _pt(self._sheet.page_height)),
        )
        c.setTitle(self._title)
        c.setCreator("keycap_overlay")

        for path in self._sheet.paths:
            self._draw_path(c, path)
        for legend in self._sheet.legends:
            self._draw_legend(c, legend)

        c.showPage()
        c.save()
        return buf.getvalue()

    def write(self, path: str | FilePath) -> FilePath:
        """Render and write the PDF atomically; return the output path."""
        path = FilePath(path)
        data = self.render_bytes()
        try:
            atomic_write_bytes(path, data)
        except OSError as e:
            raise RenderError(f"Failed to write {path}: {e}") from e
        logger.info("Wrote %s (%d bytes)", path, len(data))
        return path

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def _draw_path(self, c: canvas.Canvas, path: Path) -> None:
        p = c.beginPath()
        for op in path.ops:
            if isinstance(op, MoveTo):
                p.moveTo(_pt(op.x), _pt(op.y))
            elif isinstance(op, LineTo):
                p.lineTo(_pt(op.x), _pt(op.y))
            elif isinstance(op, CurveTo):
                p.curveTo(
                    _pt(op.x1), _pt(op.y1),
                    _pt(op.x2), _pt(op.y2),
                    _pt(op.x), _pt(op.y),
                )
            elif isinstance(op, ClosePath):
                p.close()
            else:
                raise RenderError(f"Unsupported path operation: {type(op).__name__}")

        c.saveState()
        c.setLineWidth(_pt(path.line_width))
        c.setStrokeColorRGB(*path.color)
        c.setFillColorRGB(*path.color)
        c.drawPath(
            p,
            stroke=1 if path.paint in ("stroke", "fill_stroke") else 0,
            fill=1 if path.paint in ("fill", "fill_stroke") else 0,
        )
        c.restoreState()

    def _draw_legend(self, c: canvas.Canvas, legend: LegendText) -> None:
        if (
            legend.font not in pdfmetrics.standardFonts
            and legend.font not in pdfmetrics.getRegisteredFontNames()
        ):
            raise RenderError(f"Unknown font '{legend.font}'")

        c.saveState()
        c.setFont(legend.font, legend.size_pt)
        c.setFillColorRGB(*legend.color)
        c.drawCentredString(_pt(legend.x), _pt(legend.y), legend.text)
        c.restoreState()
