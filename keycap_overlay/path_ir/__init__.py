"""
Path Intermediate Representation module.

Defines drawing operations and paintable paths as immutable dataclasses.
This vocabulary is the contract between overlay geometry and rendering.

All coordinates are in inches, page-native (lower-left origin, +Y up).
"""

from keycap_overlay.path_ir.operations import (
    BLACK,
    ClosePath,
    CurveTo,
    LegendText,
    LineTo,
    MoveTo,
    Path,
    PathOp,
    Point,
    polyline,
)

__all__ = [
    "BLACK",
    "ClosePath",
    "CurveTo",
    "LegendText",
    "LineTo",
    "MoveTo",
    "Path",
    "PathOp",
    "Point",
    "polyline",
]
