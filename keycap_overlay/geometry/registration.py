"""Print-and-cut registration marks.

A cutter with an optical sensor finds the printed sheet by three
fiducials placed just inside the page insets::

    ■ ─────────────────────────────── ┐
    (filled square, top left)         │ (L, top right)

    │
    └──── (L, bottom left)

The marks are emitted once per page, not per overlay copy.  Paths use
the page-native frame (lower-left origin, +Y up); insets are measured
from the page edges, so "``inset_top`` below the top edge" is
``page_height - inset_top``.
"""

from __future__ import annotations

from keycap_overlay.configs.loader import RegistrationGeometry
from keycap_overlay.path_ir.operations import Path, polyline


def registration_square(
    page_width: float, page_height: float, geom: RegistrationGeometry,
) -> Path:
    """Filled square whose top-left corner sits at the top-left insets."""
    left = geom.inset_left_in
    top = page_height - geom.inset_top_in
    size = geom.square_size_in
    return polyline(
        [
            (left, top),
            (left + size, top),
            (left + size, top - size),
            (left, top - size),
        ],
        closed=True,
        paint="fill_stroke",
        line_width=geom.line_width_in,
        color=geom.color,
    )


def registration_bottom_left(
    page_width: float, page_height: float, geom: RegistrationGeometry,
) -> Path:
    """Right angle at the bottom-left: down the left inset, then right."""
    left = geom.inset_left_in
    bottom = geom.inset_bottom_in
    length = geom.line_length_in
    return polyline(
        [
            (left, bottom + length),
            (left, bottom),
            (left + length, bottom),
        ],
        line_width=geom.line_width_in,
        color=geom.color,
    )


def registration_top_right(
    page_width: float, page_height: float, geom: RegistrationGeometry,
) -> Path:
    """Right angle at the top-right: along the top inset, then down."""
    right = page_width - geom.inset_right_in
    top = page_height - geom.inset_top_in
    length = geom.line_length_in
    return polyline(
        [
            (right - length, top),
            (right, top),
            (right, top - length),
        ],
        line_width=geom.line_width_in,
        color=geom.color,
    )


def generate(
    page_width: float,
    page_height: float,
    geometry: RegistrationGeometry,
) -> tuple[Path, Path, Path]:
    """All three registration marks for one page.

    Parameters
    ----------
    page_width, page_height : float
        Physical page size (inches).
    geometry : RegistrationGeometry
        Mark profile.

    Returns
    -------
    tuple[Path, Path, Path]
        ``(square, bottom_left_L, top_right_L)``.

    Raises
    ------
    DegenerateGeometryError
        If the insets leave no usable page area.
    """
    geometry.check_fits(page_width, page_height)
    return (
        registration_square(page_width, page_height, geometry),
        registration_bottom_left(page_width, page_height, geometry),
        registration_top_right(page_width, page_height, geometry),
    )
