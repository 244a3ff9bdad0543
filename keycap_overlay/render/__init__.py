"""
Rendering module.

Draws composed sheets to PDF with unit conversion (inches -> points).
"""

from keycap_overlay.render.pdf import PdfRenderer, RenderError

__all__ = ["PdfRenderer", "RenderError"]
