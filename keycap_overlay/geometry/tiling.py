"""Vertical tiling of overlay copies on one page.

The usable height between the top and bottom page insets is filled with
as many copies as fit, spread so that the first copy touches the top
inset, the last touches the bottom inset, and the leftover space is
shared evenly between copies.  When that shared gap is smaller than the
minimum cut clearance, one copy is dropped and the gap recomputed, until
the gap fits or a single copy remains.

Placements are lower-left corners in page coordinates (inches, +Y up).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from keycap_overlay.path_ir.operations import Point

logger = logging.getLogger(__name__)

# Keeps exact fits (e.g. 9.0 / 2.25) from flooring one copy short.
_FIT_EPS = 1e-9


class LayoutInfeasibleError(Exception):
    """Raised when not even one overlay copy fits on the page."""

    pass


@dataclass(frozen=True, slots=True)
class LayoutPlacement:
    """Where one overlay copy lands on the page.

    Parameters
    ----------
    copy_index : int
        0 for the top copy, increasing downward.
    origin_offset : Point
        Page position of the copy's lower-left corner.
    """

    copy_index: int
    origin_offset: Point


def _gap(available: float, overlay_height: float, count: int) -> float:
    return (available - count * overlay_height) / (count - 1)


def fit_copies(
    available_height: float,
    overlay_height: float,
    min_gap: float,
) -> tuple[int, float]:
    """Copy count and even inter-copy gap for a column of overlays.

    Parameters
    ----------
    available_height : float
        Height between the page insets (inches).
    overlay_height : float
        Height of one overlay.  Must be > 0.
    min_gap : float
        Smallest acceptable gap between copies.

    Returns
    -------
    tuple[int, float]
        ``(count, gap)``; ``gap`` is 0.0 for a single copy.

    Raises
    ------
    LayoutInfeasibleError
        If ``available_height < overlay_height``.
    """
    if overlay_height <= 0:
        raise LayoutInfeasibleError(
            f"overlay height must be > 0, got {overlay_height}"
        )

    count = math.floor(available_height / overlay_height + _FIT_EPS)
    if count < 1:
        raise LayoutInfeasibleError(
            f"Overlay height {overlay_height:.3f} in exceeds the available "
            f"page height {available_height:.3f} in"
        )

    while count > 1 and _gap(available_height, overlay_height, count) < min_gap:
        logger.debug(
            "%d copies leave a %.4f in gap (< %.4f), dropping one",
            count,
            _gap(available_height, overlay_height, count),
            min_gap,
        )
        count -= 1

    gap = _gap(available_height, overlay_height, count) if count > 1 else 0.0
    return count, gap


def plan(
    page_width: float,
    page_height: float,
    overlay_width: float,
    overlay_height: float,
    inset_top: float,
    inset_bottom: float,
    min_gap: float,
) -> tuple[LayoutPlacement, ...]:
    """Placements for every overlay copy on one page, top to bottom.

    Copy ``i`` has its top edge ``i * (overlay_height + gap)`` below the
    top inset and is centred horizontally on the page.

    Raises
    ------
    LayoutInfeasibleError
        If no copy fits vertically, or the overlay is wider than the page.
    """
    if overlay_width > page_width:
        raise LayoutInfeasibleError(
            f"Overlay width {overlay_width:.3f} in exceeds the page width "
            f"{page_width:.3f} in"
        )

    available = page_height - inset_top - inset_bottom
    count, gap = fit_copies(available, overlay_height, min_gap)

    left = (page_width - overlay_width) / 2.0
    top = page_height - inset_top
    placements = tuple(
        LayoutPlacement(
            copy_index=i,
            origin_offset=(left, top - (i + 1) * overlay_height - i * gap),
        )
        for i in range(count)
    )
    logger.debug(
        "Tiled %d copies of %.3f in with %.4f in gap", count, overlay_height, gap,
    )
    return placements
