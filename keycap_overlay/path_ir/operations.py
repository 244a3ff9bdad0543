"""Path IR -- the vocabulary between overlay geometry and the renderer.

Every drawing step is an immutable, slotted dataclass.  Operations use
**inch** units in the page-native frame (origin at the lower-left
corner, +Y up).  Conversion to PDF points happens only in the renderer.

Grouping
--------
A *Path* is a tuple of operations that the renderer paints as one unit
(stroke, fill, or both) with a single line width and colour.  A path
always begins with ``MoveTo``; ``ClosePath`` returns to the start of the
current subpath.

Text
----
``LegendText`` is not a path operation.  It is an anchor for one legend
string, drawn centred on its baseline by the renderer.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field, replace
from typing import Iterator, Literal

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Point = tuple[float, float]
"""``(x, y)`` in inches."""

RGB = tuple[float, float, float]
"""Colour components in [0, 1]."""

Paint = Literal["stroke", "fill", "fill_stroke"]

BLACK: RGB = (0.0, 0.0, 0.0)

# Nominal cut-line width (0.1 mm) used when no style is given.
DEFAULT_LINE_WIDTH_IN = 0.1 / 25.4


def _check_color(color: RGB) -> None:
    if len(color) != 3:
        raise ValueError(f"color must have 3 components, got {color!r}")
    for ch in color:
        if not 0.0 <= ch <= 1.0:
            raise ValueError(f"color components must be in [0, 1], got {color!r}")


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PathOp(ABC):
    """Base class for all path operations."""

    def translated(self, dx: float, dy: float) -> PathOp:
        return self


# ---------------------------------------------------------------------------
# Drawing operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MoveTo(PathOp):
    """Start a new subpath at ``(x, y)`` without drawing."""

    x: float
    y: float

    def translated(self, dx: float, dy: float) -> MoveTo:
        return MoveTo(self.x + dx, self.y + dy)


@dataclass(frozen=True, slots=True)
class LineTo(PathOp):
    """Straight segment from the current point to ``(x, y)``."""

    x: float
    y: float

    def translated(self, dx: float, dy: float) -> LineTo:
        return LineTo(self.x + dx, self.y + dy)


@dataclass(frozen=True, slots=True)
class CurveTo(PathOp):
    """Cubic Bézier from the current point to ``(x, y)``.

    Parameters
    ----------
    x1, y1 : float
        First control point (tangent at the start).
    x2, y2 : float
        Second control point (tangent at the end).
    x, y : float
        End point.
    """

    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float

    def translated(self, dx: float, dy: float) -> CurveTo:
        return CurveTo(
            self.x1 + dx, self.y1 + dy,
            self.x2 + dx, self.y2 + dy,
            self.x + dx, self.y + dy,
        )


@dataclass(frozen=True, slots=True)
class ClosePath(PathOp):
    """Straight segment back to the start of the current subpath."""

    pass


# ---------------------------------------------------------------------------
# Paintable units
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Path:
    """One paintable path.

    Parameters
    ----------
    ops : tuple[PathOp, ...]
        Drawing operations; the first must be ``MoveTo``.
    paint : ``"stroke"`` | ``"fill"`` | ``"fill_stroke"``
        How the renderer paints the path.
    line_width : float
        Stroke width in inches.
    color : RGB
        Stroke and fill colour.
    """

    ops: tuple[PathOp, ...]
    paint: Paint = "stroke"
    line_width: float = DEFAULT_LINE_WIDTH_IN
    color: RGB = BLACK

    def __post_init__(self) -> None:
        if not self.ops:
            raise ValueError("Path requires at least one operation")
        if not isinstance(self.ops[0], MoveTo):
            raise ValueError(
                f"Path must start with MoveTo, got {type(self.ops[0]).__name__}"
            )
        if self.paint not in ("stroke", "fill", "fill_stroke"):
            raise ValueError(
                f"paint must be 'stroke', 'fill' or 'fill_stroke', "
                f"got {self.paint!r}"
            )
        if self.line_width < 0:
            raise ValueError(f"line_width must be >= 0, got {self.line_width}")
        _check_color(self.color)

    @property
    def is_closed(self) -> bool:
        return isinstance(self.ops[-1], ClosePath)

    def curves(self) -> Iterator[tuple[Point, CurveTo]]:
        """Yield ``(start_point, curve)`` for every ``CurveTo`` in order."""
        current: Point = (0.0, 0.0)
        for op in self.ops:
            if isinstance(op, CurveTo):
                yield current, op
            if isinstance(op, (MoveTo, LineTo, CurveTo)):
                current = (op.x, op.y)

    def vertices(self) -> list[Point]:
        """On-curve points (segment end points), control points excluded."""
        return [
            (op.x, op.y)
            for op in self.ops
            if isinstance(op, (MoveTo, LineTo, CurveTo))
        ]

    def bounds(self) -> tuple[float, float, float, float]:
        """``(min_x, min_y, max_x, max_y)`` over on-curve points."""
        pts = self.vertices()
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        return min(xs), min(ys), max(xs), max(ys)

    def translated(self, dx: float, dy: float) -> Path:
        """Return a copy shifted by ``(dx, dy)`` inches."""
        return replace(self, ops=tuple(op.translated(dx, dy) for op in self.ops))


@dataclass(frozen=True, slots=True)
class LegendText:
    """Legend string anchored at the centre of its baseline.

    Parameters
    ----------
    x, y : float
        Anchor in inches.
    text : str
        Legend text, non-empty.
    font : str
        Renderer font name (a PDF base font such as ``"Helvetica"``).
    size_pt : float
        Font size in points.
    """

    x: float
    y: float
    text: str
    font: str = "Helvetica"
    size_pt: float = 6.0
    color: RGB = field(default=BLACK)

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("LegendText requires non-empty text")
        if self.size_pt <= 0:
            raise ValueError(f"size_pt must be > 0, got {self.size_pt}")
        _check_color(self.color)

    def translated(self, dx: float, dy: float) -> LegendText:
        return replace(self, x=self.x + dx, y=self.y + dy)


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def polyline(
    points: list[Point],
    closed: bool = False,
    **style,
) -> Path:
    """Build a path through *points*: move -> line -> ... [-> close].

    Parameters
    ----------
    points : list[Point]
        Ordered vertices (inches).  Must have >= 2 points.
    closed : bool
        Append ``ClosePath``.
    **style
        ``paint``, ``line_width``, ``color`` forwarded to ``Path``.
    """
    if len(points) < 2:
        raise ValueError(f"polyline requires >= 2 points, got {len(points)}")

    ops: list[PathOp] = [MoveTo(*points[0])]
    ops.extend(LineTo(x, y) for x, y in points[1:])
    if closed:
        ops.append(ClosePath())
    return Path(ops=tuple(ops), **style)
