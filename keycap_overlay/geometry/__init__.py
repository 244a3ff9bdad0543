"""
Overlay geometry module.

Pure functions that turn physical measurements into vector paths:
rounded rectangles, registration marks, key grids, and page tiling.
"""

from keycap_overlay.geometry import key_grid, registration, tiling
from keycap_overlay.geometry.arcs import (
    ARC_MAGIC,
    arc_radial_error,
    bezier_point,
    rounded_rectangle,
)
from keycap_overlay.geometry.key_grid import VOYAGER_LAYOUT, KeyGridPaths
from keycap_overlay.geometry.tiling import (
    LayoutInfeasibleError,
    LayoutPlacement,
    fit_copies,
    plan,
)

__all__ = [
    "ARC_MAGIC",
    "KeyGridPaths",
    "LayoutInfeasibleError",
    "LayoutPlacement",
    "VOYAGER_LAYOUT",
    "arc_radial_error",
    "bezier_point",
    "fit_copies",
    "key_grid",
    "plan",
    "registration",
    "rounded_rectangle",
    "tiling",
]
