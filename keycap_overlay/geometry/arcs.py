"""Rounded rectangles built from straight edges and cubic Bézier arcs.

Each quarter circle is approximated by one cubic Bézier whose control
points sit ``ARC_MAGIC * radius`` from the arc end points along the
adjoining edges.  The tangents at both ends therefore line up with the
straight edges, so the corner joins them smoothly.  The radial error of
the approximation is about 0.027 % of the radius (always outward).
The control points are anchored on the arc end points, not on the
rectangle corner: offsets measured from the corner would bend the arc
away from the circle.

Provides:
    - rounded_rectangle(): closed path, lower-left corner anchored
    - bezier_point(): cubic evaluation (numpy) for sampling curves
    - arc_radial_error(): worst-case deviation of one corner arc

All coordinates in inches, lower-left origin, +Y up.
"""

from __future__ import annotations

import logging

import numpy as np

from keycap_overlay.configs.loader import DegenerateGeometryError
from keycap_overlay.path_ir.operations import (
    ClosePath,
    CurveTo,
    LineTo,
    MoveTo,
    Path,
)

logger = logging.getLogger(__name__)

# Control-point offset / radius for a one-segment quarter circle:
# 4/3 * (sqrt(2) - 1)
ARC_MAGIC = 0.552284749


def rounded_rectangle(
    x: float,
    y: float,
    width: float,
    height: float,
    radius_x: float,
    radius_y: float | None = None,
    **style,
) -> Path:
    """Closed rounded rectangle.

    Parameters
    ----------
    x, y : float
        Lower-left corner of the bounding box (inches).
    width, height : float
        Size of the bounding box.  Must be >= 0.
    radius_x, radius_y : float
        Corner radii along X and Y.  ``radius_y`` defaults to
        ``radius_x``.  Radii larger than half the side are clamped.
    **style
        ``paint``, ``line_width``, ``color`` forwarded to ``Path``.

    Returns
    -------
    Path
        ``MoveTo`` at the start of the bottom edge, then edge/arc pairs
        counter-clockwise, then ``ClosePath``.

    Raises
    ------
    DegenerateGeometryError
        If a size or radius is negative.
    """
    if radius_y is None:
        radius_y = radius_x
    if width < 0 or height < 0:
        raise DegenerateGeometryError(
            f"Rectangle size must be >= 0, got {width} x {height}"
        )
    if radius_x < 0 or radius_y < 0:
        raise DegenerateGeometryError(
            f"Corner radii must be >= 0, got ({radius_x}, {radius_y})"
        )

    rx = min(radius_x, width / 2.0)
    ry = min(radius_y, height / 2.0)
    if (rx, ry) != (radius_x, radius_y):
        logger.warning(
            "Corner radii (%.4f, %.4f) clamped to (%.4f, %.4f) for a "
            "%.4f x %.4f rectangle",
            radius_x, radius_y, rx, ry, width, height,
        )

    kx = rx * ARC_MAGIC
    ky = ry * ARC_MAGIC
    right = x + width
    top = y + height

    ops = (
        MoveTo(x + rx, y),
        LineTo(right - rx, y),
        CurveTo(right - rx + kx, y, right, y + ry - ky, right, y + ry),
        LineTo(right, top - ry),
        CurveTo(right, top - ry + ky, right - rx + kx, top, right - rx, top),
        LineTo(x + rx, top),
        CurveTo(x + rx - kx, top, x, top - ry + ky, x, top - ry),
        LineTo(x, y + ry),
        CurveTo(x, y + ry - ky, x + rx - kx, y, x + rx, y),
        ClosePath(),
    )
    return Path(ops=ops, **style)


def bezier_point(
    p0: np.ndarray,
    p1: np.ndarray,
    p2: np.ndarray,
    p3: np.ndarray,
    t: np.ndarray,
) -> np.ndarray:
    """Evaluate a cubic Bézier at parameter values *t*.

    Parameters
    ----------
    p0, p1, p2, p3 : np.ndarray
        Control points, shape (2,).
    t : np.ndarray
        Parameter values in [0, 1], shape (N,).

    Returns
    -------
    np.ndarray
        Points on the curve, shape (N, 2).

    Notes
    -----
    B(t) = (1-t)³·p0 + 3(1-t)²t·p1 + 3(1-t)t²·p2 + t³·p3
    """
    t = np.atleast_1d(np.asarray(t, dtype=float))[:, None]
    u = 1.0 - t
    return (
        (u ** 3) * np.asarray(p0, dtype=float)
        + 3.0 * (u ** 2) * t * np.asarray(p1, dtype=float)
        + 3.0 * u * (t ** 2) * np.asarray(p2, dtype=float)
        + (t ** 3) * np.asarray(p3, dtype=float)
    )


def arc_radial_error(radius: float, samples: int = 257) -> float:
    """Worst-case |distance - radius| of one approximated quarter circle.

    The arc runs from ``(radius, 0)`` to ``(0, radius)`` around the
    origin, built the same way as the corners of ``rounded_rectangle``.
    """
    k = radius * ARC_MAGIC
    pts = bezier_point(
        np.array([radius, 0.0]),
        np.array([radius, k]),
        np.array([k, radius]),
        np.array([0.0, radius]),
        np.linspace(0.0, 1.0, samples),
    )
    dist = np.hypot(pts[:, 0], pts[:, 1])
    return float(np.max(np.abs(dist - radius)))
