"""Compose one printable sheet from the geometry modules.

Order on the sheet: registration marks (once per page), then for each
tiled copy its outline, keys and legends, all translated from the
overlay frame onto the page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from keycap_overlay.configs.loader import (
    OverlayConfig,
    OverlayModel,
    RegistrationGeometry,
)
from keycap_overlay.geometry import key_grid, registration, tiling
from keycap_overlay.geometry.tiling import LayoutPlacement
from keycap_overlay.intents import RenderIntents
from keycap_overlay.path_ir.operations import LegendText, Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sheet:
    """Page size plus everything to draw on it (inches)."""

    page_width: float
    page_height: float
    paths: tuple[Path, ...]
    legends: tuple[LegendText, ...]
    placements: tuple[LayoutPlacement, ...]


def compose_sheet(
    config: OverlayConfig,
    model: OverlayModel,
    intents: RenderIntents,
    registration_geometry: RegistrationGeometry | None = None,
) -> Sheet:
    """Build the sheet for *model* according to *intents*.

    Parameters
    ----------
    config : OverlayConfig
        Loaded profiles (page, cut-line and legend styles).
    model : OverlayModel
        Overlay to tile.
    intents : RenderIntents
        Which layers to draw.
    registration_geometry : RegistrationGeometry | None
        Mark profile; ``None`` uses the config default.

    Raises
    ------
    LayoutInfeasibleError
        If no copy fits on the page.
    """
    page = config.page
    g = model.geometry

    placements = tiling.plan(
        page.width_in,
        page.height_in,
        g.width_in,
        g.height_in,
        page.inset_top_in,
        page.inset_bottom_in,
        page.overlay_min_gap_in,
    )

    paths: list[Path] = []
    legends: list[LegendText] = []

    if intents.registration:
        reg = registration_geometry or config.get_registration()
        paths.extend(registration.generate(page.width_in, page.height_in, reg))

    if intents.outlines or intents.legends:
        overlay = key_grid.generate(
            g,
            show_outline=intents.outlines,
            layout=model.layout,
            legend_style=config.legend if intents.legends else None,
            line_width=config.cut_line.width_in,
            color=config.cut_line.color,
        )
        for placement in placements:
            dx, dy = placement.origin_offset
            if intents.outlines:
                paths.extend(p.translated(dx, dy) for p in overlay.all_paths())
            legends.extend(t.translated(dx, dy) for t in overlay.legends)

    logger.info(
        "Sheet for '%s' (%s): %d copies, %d paths, %d legends",
        model.name,
        intents.mode,
        len(placements),
        len(paths),
        len(legends),
    )
    return Sheet(
        page_width=page.width_in,
        page_height=page.height_in,
        paths=tuple(paths),
        legends=tuple(legends),
        placements=placements,
    )
