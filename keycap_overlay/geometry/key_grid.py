"""Overlay outline, key cut-outs and legend anchors for one overlay.

The key matrix is centred horizontally on the overlay and hangs from its
top edge: row 0 starts ``key_row_1_offset_in`` below the top, each
following row one ``key_row_pitch_in`` lower.  Cells are visited
row-major; a ``KeyLayout`` override can suppress a cell or make a key
span several rows/columns (the Voyager ENTER key spans rows 2-3 of
column 5).

Coordinates are relative to the overlay's own lower-left corner, +Y up.
The sheet composer translates them onto the page.
"""

from __future__ import annotations

from dataclasses import dataclass

from keycap_overlay.configs.loader import (
    CellOverride,
    KeyLayout,
    LegendStyle,
    OverlayGeometry,
)
from keycap_overlay.geometry.arcs import rounded_rectangle
from keycap_overlay.path_ir.operations import LegendText, Path

VOYAGER_LAYOUT = KeyLayout(
    rows=4,
    cols=10,
    overrides={
        (2, 5): CellOverride(height_rows=2),
        (3, 5): CellOverride(suppressed=True),
    },
)
"""4 x 10 matrix with a two-row ENTER key at row 2, column 5."""


@dataclass(frozen=True, slots=True)
class KeyCell:
    """Placement of one drawn key (overlay frame, inches)."""

    row: int
    col: int
    x: float
    y_top: float
    width: float
    height: float

    @property
    def y(self) -> float:
        """Bottom edge."""
        return self.y_top - self.height


@dataclass(frozen=True, slots=True)
class KeyGridPaths:
    """Everything drawn for one overlay copy."""

    outline: Path | None
    keys: tuple[Path, ...]
    legends: tuple[LegendText, ...] = ()

    def all_paths(self) -> list[Path]:
        paths = [] if self.outline is None else [self.outline]
        paths.extend(self.keys)
        return paths


def key_cells(
    geometry: OverlayGeometry, layout: KeyLayout = VOYAGER_LAYOUT,
) -> list[KeyCell]:
    """Positions and sizes of every drawn key, row-major.

    Suppressed cells are skipped; spanning keys grow by whole pitches.
    """
    g = geometry
    x0 = (
        g.width_in / 2.0
        - (layout.cols / 2.0) * g.key_col_pitch_in
        + (g.key_col_pitch_in - g.key_width_in) / 2.0
    )

    cells: list[KeyCell] = []
    for row in range(layout.rows):
        y_top = g.height_in - row * g.key_row_pitch_in - g.key_row_1_offset_in
        for col in range(layout.cols):
            cell = layout.cell(row, col)
            if cell.suppressed:
                continue
            cells.append(KeyCell(
                row=row,
                col=col,
                x=x0 + col * g.key_col_pitch_in,
                y_top=y_top,
                width=g.key_width_in + (cell.width_cols - 1) * g.key_col_pitch_in,
                height=g.key_height_in + (cell.height_rows - 1) * g.key_row_pitch_in,
            ))
    return cells


def generate(
    geometry: OverlayGeometry,
    show_outline: bool,
    layout: KeyLayout = VOYAGER_LAYOUT,
    legend_style: LegendStyle | None = None,
    **style,
) -> KeyGridPaths:
    """Outline, key rectangles and legends for one overlay.

    Parameters
    ----------
    geometry : OverlayGeometry
        Overlay and key dimensions.
    show_outline : bool
        Include the overlay's rounded outline.
    layout : KeyLayout
        Matrix shape, overrides and optional legend table.
    legend_style : LegendStyle | None
        When given, one ``LegendText`` is produced per drawn key with a
        non-blank legend, centred just above the key's top edge.
    **style
        ``paint``, ``line_width``, ``color`` for the outline and keys.

    Returns
    -------
    KeyGridPaths
        ``keys`` holds ``layout.key_count`` paths in row-major order.
    """
    g = geometry
    outline = None
    if show_outline:
        outline = rounded_rectangle(
            0.0, 0.0, g.width_in, g.height_in, g.corner_radius_in, **style,
        )

    keys: list[Path] = []
    legends: list[LegendText] = []
    for cell in key_cells(g, layout):
        keys.append(rounded_rectangle(
            cell.x, cell.y, cell.width, cell.height,
            g.key_corner_radius_in, **style,
        ))

        text = layout.legend(cell.row, cell.col)
        if legend_style is not None and text:
            legends.append(LegendText(
                x=cell.x + cell.width / 2.0,
                y=cell.y_top + legend_style.baseline_offset_in,
                text=text,
                font=legend_style.font,
                size_pt=legend_style.size_pt,
                color=legend_style.color,
            ))

    return KeyGridPaths(outline=outline, keys=tuple(keys), legends=tuple(legends))
