"""Configuration loader for overlay generation.

Loads and validates ``profiles.yaml`` into typed, frozen dataclasses.
All physical values (page size and insets, registration marks, overlay
and key dimensions, key-layout overrides, legend style) come from the
config -- nothing is hardcoded in the geometry modules.

Lengths are stored in **inches** throughout Python.  Line widths are
written in millimetres in the YAML file (``*_mm`` keys) and converted to
inches here.  Conversion to PDF points happens only in the renderer.

Usage::

    from keycap_overlay.configs.loader import load_config
    cfg = load_config()                        # default path
    cfg = load_config("/custom/profiles.yaml") # explicit path
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from keycap_overlay.utils.fs import load_yaml

logger = logging.getLogger(__name__)

MM_PER_IN = 25.4


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


class DegenerateGeometryError(ConfigError):
    """Raised when geometry values would produce malformed paths.

    Examples: a corner radius larger than half a side, a key wider than
    its pitch, a negative size.
    """

    pass


def _require_positive(owner: str, **values: float) -> None:
    for name, val in values.items():
        if val <= 0:
            raise DegenerateGeometryError(f"{owner}.{name} must be > 0, got {val}")


def _require_non_negative(owner: str, **values: float) -> None:
    for name, val in values.items():
        if val < 0:
            raise DegenerateGeometryError(f"{owner}.{name} must be >= 0, got {val}")


def _mapping(raw: Any, where: str) -> Mapping[str, Any]:
    """Return *raw* if it is a YAML mapping, else raise ``ConfigError``."""
    if not isinstance(raw, Mapping):
        raise ConfigError(f"{where} must be a mapping, got {type(raw).__name__}")
    return raw


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PageConfig:
    """Physical page and the printable area used for tiling (inches)."""

    width_in: float
    height_in: float
    inset_left_in: float
    inset_right_in: float
    inset_top_in: float
    inset_bottom_in: float
    overlay_min_gap_in: float
    name: str = "letter"

    def __post_init__(self) -> None:
        _require_positive("page", width_in=self.width_in, height_in=self.height_in)
        _require_non_negative(
            "page",
            inset_left_in=self.inset_left_in,
            inset_right_in=self.inset_right_in,
            inset_top_in=self.inset_top_in,
            inset_bottom_in=self.inset_bottom_in,
            overlay_min_gap_in=self.overlay_min_gap_in,
        )
        if self.inset_left_in + self.inset_right_in >= self.width_in:
            raise DegenerateGeometryError(
                f"Page insets leave no usable width: "
                f"{self.inset_left_in} + {self.inset_right_in} >= {self.width_in}"
            )
        if self.inset_top_in + self.inset_bottom_in >= self.height_in:
            raise DegenerateGeometryError(
                f"Page insets leave no usable height: "
                f"{self.inset_top_in} + {self.inset_bottom_in} >= {self.height_in}"
            )

    @property
    def available_height_in(self) -> float:
        """Height between the top and bottom insets."""
        return self.height_in - self.inset_top_in - self.inset_bottom_in


@dataclass(frozen=True)
class RegistrationGeometry:
    """Registration (print-and-cut alignment) mark profile.

    Insets are measured from the page edges.  ``line_width_in`` applies
    to all three marks.
    """

    inset_left_in: float
    inset_right_in: float
    inset_top_in: float
    inset_bottom_in: float
    square_size_in: float
    line_length_in: float
    line_width_in: float
    color: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        _require_non_negative(
            "registration",
            inset_left_in=self.inset_left_in,
            inset_right_in=self.inset_right_in,
            inset_top_in=self.inset_top_in,
            inset_bottom_in=self.inset_bottom_in,
            square_size_in=self.square_size_in,
            line_length_in=self.line_length_in,
            line_width_in=self.line_width_in,
        )

    def check_fits(self, page_width_in: float, page_height_in: float) -> None:
        """Raise ``DegenerateGeometryError`` unless the insets leave page area."""
        if self.inset_left_in + self.inset_right_in >= page_width_in:
            raise DegenerateGeometryError(
                f"Registration insets leave no usable width on a "
                f"{page_width_in} in page"
            )
        if self.inset_top_in + self.inset_bottom_in >= page_height_in:
            raise DegenerateGeometryError(
                f"Registration insets leave no usable height on a "
                f"{page_height_in} in page"
            )


@dataclass(frozen=True)
class OverlayGeometry:
    """Overlay outline and key-matrix dimensions (inches).

    ``key_row_1_offset_in`` is the distance from the overlay's top edge
    to the top edge of the first key row.
    """

    width_in: float
    height_in: float
    corner_radius_in: float
    key_col_pitch_in: float
    key_row_pitch_in: float
    key_row_1_offset_in: float
    key_width_in: float
    key_height_in: float
    key_corner_radius_in: float

    def __post_init__(self) -> None:
        _require_positive(
            "overlay",
            width_in=self.width_in,
            height_in=self.height_in,
            key_col_pitch_in=self.key_col_pitch_in,
            key_row_pitch_in=self.key_row_pitch_in,
            key_width_in=self.key_width_in,
            key_height_in=self.key_height_in,
        )
        _require_non_negative(
            "overlay",
            corner_radius_in=self.corner_radius_in,
            key_row_1_offset_in=self.key_row_1_offset_in,
            key_corner_radius_in=self.key_corner_radius_in,
        )
        if self.key_width_in >= self.key_col_pitch_in:
            raise DegenerateGeometryError(
                f"key_width_in ({self.key_width_in}) must be smaller than "
                f"key_col_pitch_in ({self.key_col_pitch_in})"
            )
        if self.key_height_in >= self.key_row_pitch_in:
            raise DegenerateGeometryError(
                f"key_height_in ({self.key_height_in}) must be smaller than "
                f"key_row_pitch_in ({self.key_row_pitch_in})"
            )
        if self.corner_radius_in > min(self.width_in, self.height_in) / 2.0:
            raise DegenerateGeometryError(
                f"corner_radius_in ({self.corner_radius_in}) exceeds half of "
                f"min(width_in, height_in)"
            )
        if self.key_corner_radius_in > min(self.key_width_in, self.key_height_in) / 2.0:
            raise DegenerateGeometryError(
                f"key_corner_radius_in ({self.key_corner_radius_in}) exceeds "
                f"half of min(key_width_in, key_height_in)"
            )


@dataclass(frozen=True)
class CellOverride:
    """Per-cell key-layout override.

    Parameters
    ----------
    suppressed : bool
        Draw nothing for this cell (covered by a neighbouring tall/wide key).
    height_rows : int
        Number of rows the key spans, downward from its own row.
    width_cols : int
        Number of columns the key spans, rightward from its own column.
    """

    suppressed: bool = False
    height_rows: int = 1
    width_cols: int = 1

    def __post_init__(self) -> None:
        if self.height_rows < 1 or self.width_cols < 1:
            raise ConfigError(
                f"height_rows and width_cols must be >= 1, "
                f"got {self.height_rows}, {self.width_cols}"
            )


NORMAL_CELL = CellOverride()


@dataclass(frozen=True)
class KeyLayout:
    """Key matrix shape with declarative per-cell overrides.

    ``legends`` is an optional ``rows x cols`` table; blank entries draw
    no legend.
    """

    rows: int
    cols: int
    overrides: Mapping[tuple[int, int], CellOverride] = field(default_factory=dict)
    legends: tuple[tuple[str, ...], ...] | None = None

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ConfigError(
                f"Key layout needs at least one row and column, "
                f"got {self.rows}x{self.cols}"
            )
        for (row, col), cell in self.overrides.items():
            if not (0 <= row < self.rows and 0 <= col < self.cols):
                raise ConfigError(
                    f"Override ({row}, {col}) outside {self.rows}x{self.cols} grid"
                )
            if cell.suppressed:
                continue
            if row + cell.height_rows > self.rows or col + cell.width_cols > self.cols:
                raise ConfigError(
                    f"Key ({row}, {col}) spans past the edge of the "
                    f"{self.rows}x{self.cols} grid"
                )
            for r in range(row, row + cell.height_rows):
                for c in range(col, col + cell.width_cols):
                    if (r, c) != (row, col) and not self.cell(r, c).suppressed:
                        raise ConfigError(
                            f"Key ({row}, {col}) covers ({r}, {c}), which "
                            f"must be suppressed"
                        )
        if self.legends is not None:
            if len(self.legends) != self.rows or any(
                len(line) != self.cols for line in self.legends
            ):
                raise ConfigError(
                    f"Legend table must be {self.rows}x{self.cols}"
                )
            for (row, col), cell in self.overrides.items():
                if cell.suppressed and self.legends[row][col]:
                    raise ConfigError(
                        f"Suppressed cell ({row}, {col}) has a legend "
                        f"{self.legends[row][col]!r}"
                    )

    def cell(self, row: int, col: int) -> CellOverride:
        """Return the override for ``(row, col)`` (normal if none)."""
        return self.overrides.get((row, col), NORMAL_CELL)

    def legend(self, row: int, col: int) -> str:
        if self.legends is None:
            return ""
        return self.legends[row][col]

    @property
    def key_count(self) -> int:
        """Number of keys actually drawn (suppressed cells excluded)."""
        suppressed = sum(1 for cell in self.overrides.values() if cell.suppressed)
        return self.rows * self.cols - suppressed


@dataclass(frozen=True)
class OverlayModel:
    """One calculator model: geometry plus key layout."""

    name: str
    description: str
    file_prefix: str
    geometry: OverlayGeometry
    layout: KeyLayout


@dataclass(frozen=True)
class LineStyle:
    """Stroke style for cut lines (outline and keys)."""

    width_in: float
    color: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class LegendStyle:
    """Legend text style.

    ``baseline_offset_in`` is the distance from a key's top edge up to
    the legend baseline.
    """

    font: str = "Helvetica"
    size_pt: float = 6.0
    baseline_offset_in: float = 0.03
    color: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class LoggingConfig:
    """Keyword arguments for ``utils.logging_config.setup_logging``."""

    log_level: str = "INFO"
    log_file: str | None = None
    json: bool = False
    color: bool = True


@dataclass(frozen=True)
class OverlayConfig:
    """Complete configuration loaded from ``profiles.yaml``.

    All linear dimensions are in **inches**.
    """

    page: PageConfig
    registrations: dict[str, RegistrationGeometry]
    default_registration: str
    layouts: dict[str, KeyLayout]
    models: dict[str, OverlayModel]
    default_model: str
    cut_line: LineStyle
    legend: LegendStyle
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # -- Convenience helpers ------------------------------------------------

    def get_model(self, name: str | None = None) -> OverlayModel:
        """Return the named overlay model (default if ``None``)."""
        name = self.default_model if name is None else name
        if name not in self.models:
            raise ConfigError(
                f"Unknown overlay model '{name}'. "
                f"Available: {list(self.models.keys())}"
            )
        return self.models[name]

    def get_registration(self, name: str | None = None) -> RegistrationGeometry:
        """Return the named registration profile (default if ``None``)."""
        name = self.default_registration if name is None else name
        if name not in self.registrations:
            raise ConfigError(
                f"Unknown registration profile '{name}'. "
                f"Available: {list(self.registrations.keys())}"
            )
        return self.registrations[name]


# ---------------------------------------------------------------------------
# Section parsers
# ---------------------------------------------------------------------------


def _parse_color(raw: Any, where: str) -> tuple[float, float, float]:
    if raw is None:
        return (0.0, 0.0, 0.0)
    if not isinstance(raw, (list, tuple)) or len(raw) != 3:
        raise ConfigError(f"{where}.color must be a list of 3 numbers, got {raw!r}")
    color = (float(raw[0]), float(raw[1]), float(raw[2]))
    if any(not 0.0 <= ch <= 1.0 for ch in color):
        raise ConfigError(f"{where}.color components must be in [0, 1], got {raw!r}")
    return color


def _parse_page(data: dict[str, Any]) -> PageConfig:
    try:
        return PageConfig(
            name=str(data.get("name", "letter")),
            width_in=float(data["width_in"]),
            height_in=float(data["height_in"]),
            inset_left_in=float(data["inset_left_in"]),
            inset_right_in=float(data["inset_right_in"]),
            inset_top_in=float(data["inset_top_in"]),
            inset_bottom_in=float(data["inset_bottom_in"]),
            overlay_min_gap_in=float(data.get("overlay_min_gap_in", 0.1)),
        )
    except KeyError as e:
        raise ConfigError(f"page is missing field {e}") from e


def _parse_registration(name: str, data: dict[str, Any]) -> RegistrationGeometry:
    try:
        return RegistrationGeometry(
            inset_left_in=float(data["inset_left_in"]),
            inset_right_in=float(data["inset_right_in"]),
            inset_top_in=float(data["inset_top_in"]),
            inset_bottom_in=float(data["inset_bottom_in"]),
            square_size_in=float(data["square_size_in"]),
            line_length_in=float(data["line_length_in"]),
            line_width_in=float(data["line_width_mm"]) / MM_PER_IN,
            color=_parse_color(data.get("color"), f"registration.{name}"),
        )
    except KeyError as e:
        raise ConfigError(f"Registration profile '{name}' is missing field {e}") from e


def _parse_overrides(
    name: str, raw: list[dict[str, Any]] | None,
) -> dict[tuple[int, int], CellOverride]:
    overrides: dict[tuple[int, int], CellOverride] = {}
    if raw is not None and not isinstance(raw, list):
        raise ConfigError(f"Layout '{name}' overrides must be a list")
    for entry in raw or []:
        entry = _mapping(entry, f"Layout '{name}' override")
        if "row" not in entry or "col" not in entry:
            raise ConfigError(f"Layout '{name}' override needs 'row' and 'col': {entry}")
        key = (int(entry["row"]), int(entry["col"]))
        if key in overrides:
            raise ConfigError(f"Layout '{name}' has duplicate override for {key}")
        overrides[key] = CellOverride(
            suppressed=bool(entry.get("suppressed", False)),
            height_rows=int(entry.get("height_rows", 1)),
            width_cols=int(entry.get("width_cols", 1)),
        )
    return overrides


def _parse_layout(name: str, data: dict[str, Any]) -> KeyLayout:
    legends_raw = data.get("legends")
    legends = None
    if legends_raw is not None:
        legends = tuple(
            tuple("" if text is None else str(text) for text in line)
            for line in legends_raw
        )
    try:
        return KeyLayout(
            rows=int(data["rows"]),
            cols=int(data["cols"]),
            overrides=_parse_overrides(name, data.get("overrides")),
            legends=legends,
        )
    except KeyError as e:
        raise ConfigError(f"Layout '{name}' is missing field {e}") from e


def _parse_model(
    name: str, data: dict[str, Any], layouts: dict[str, KeyLayout],
) -> OverlayModel:
    layout_name = data.get("layout")
    if layout_name not in layouts:
        raise ConfigError(
            f"Overlay model '{name}' references unknown layout "
            f"'{layout_name}'. Available: {list(layouts.keys())}"
        )
    g = _mapping(data.get("geometry") or {}, f"Overlay model '{name}' geometry")
    try:
        geometry = OverlayGeometry(
            width_in=float(g["width_in"]),
            height_in=float(g["height_in"]),
            corner_radius_in=float(g["corner_radius_in"]),
            key_col_pitch_in=float(g["key_col_pitch_in"]),
            key_row_pitch_in=float(g["key_row_pitch_in"]),
            key_row_1_offset_in=float(g["key_row_1_offset_in"]),
            key_width_in=float(g["key_width_in"]),
            key_height_in=float(g["key_height_in"]),
            key_corner_radius_in=float(g["key_corner_radius_in"]),
        )
    except KeyError as e:
        raise ConfigError(f"Overlay model '{name}' geometry is missing field {e}") from e

    return OverlayModel(
        name=name,
        description=str(data.get("description", "")),
        file_prefix=str(data.get("file_prefix", name)),
        geometry=geometry,
        layout=layouts[layout_name],
    )


def _parse_logging(data: dict[str, Any]) -> LoggingConfig:
    return LoggingConfig(
        log_level=str(data.get("log_level", "INFO")).upper(),
        log_file=data.get("log_file"),
        json=bool(data.get("json", False)),
        color=bool(data.get("color", True)),
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _validate_config(cfg: OverlayConfig) -> None:
    """Validate cross-field consistency.

    Raises
    ------
    ConfigError
        On any invalid combination.
    """
    page = cfg.page

    # -- Registration marks leave page area ---------------------------------
    for name, reg in cfg.registrations.items():
        try:
            reg.check_fits(page.width_in, page.height_in)
        except DegenerateGeometryError as e:
            raise DegenerateGeometryError(f"Registration '{name}': {e}") from e
        # Overlays are tiled between the page insets; marks further in
        # than those insets land on the top or bottom copy.
        if (
            reg.inset_top_in > page.inset_top_in
            or reg.inset_bottom_in > page.inset_bottom_in
        ):
            logger.warning(
                "Registration '%s' insets (top %.3f, bottom %.3f) exceed the "
                "page insets (top %.3f, bottom %.3f); marks may overlap overlays",
                name,
                reg.inset_top_in,
                reg.inset_bottom_in,
                page.inset_top_in,
                page.inset_bottom_in,
            )

    # -- Defaults exist ------------------------------------------------------
    if cfg.default_registration not in cfg.registrations:
        raise ConfigError(
            f"default_registration '{cfg.default_registration}' is not defined"
        )
    if cfg.default_model not in cfg.models:
        raise ConfigError(f"default_model '{cfg.default_model}' is not defined")

    # -- Every overlay fits the page -----------------------------------------
    usable_width = page.width_in - page.inset_left_in - page.inset_right_in
    for name, model in cfg.models.items():
        g = model.geometry
        if g.width_in > usable_width:
            raise ConfigError(
                f"Overlay '{name}' is wider ({g.width_in} in) than the "
                f"usable page width ({usable_width:.3f} in)"
            )
        if g.height_in > page.available_height_in:
            raise ConfigError(
                f"Overlay '{name}' is taller ({g.height_in} in) than the "
                f"usable page height ({page.available_height_in:.3f} in)"
            )
        rows_span = (
            g.key_row_1_offset_in
            + (model.layout.rows - 1) * g.key_row_pitch_in
            + g.key_height_in
        )
        if rows_span > g.height_in:
            logger.warning(
                "Overlay '%s': key rows extend %.3f in below the outline",
                name,
                rows_span - g.height_in,
            )
        if model.layout.cols * g.key_col_pitch_in > g.width_in:
            logger.warning(
                "Overlay '%s': key columns are wider than the outline", name,
            )

    if cfg.cut_line.width_in <= 0:
        raise ConfigError("cut_line.width_mm must be > 0")
    if cfg.legend.size_pt <= 0:
        raise ConfigError(f"legend.size_pt must be > 0, got {cfg.legend.size_pt}")


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> OverlayConfig:
    """Load and validate the overlay profile file.

    Parameters
    ----------
    path : str | Path | None
        Path to ``profiles.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    OverlayConfig
        Validated, frozen configuration.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ConfigError
        If the file cannot be parsed, is empty or incomplete, holds a
        value of the wrong type, or is inconsistent.
    """
    if path is None:
        path = Path(__file__).parent / "profiles.yaml"
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    try:
        data = load_yaml(path)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    if not data:
        raise ConfigError(f"Empty configuration file: {path}")

    for section in ("page", "registration", "key_layouts", "overlays"):
        if not data.get(section):
            raise ConfigError(f"Missing required section '{section}' in {path}")

    try:
        page = _parse_page(_mapping(data["page"], "page"))
        registrations = {
            name: _parse_registration(name, _mapping(reg, f"registration.{name}"))
            for name, reg in _mapping(data["registration"], "registration").items()
        }
        layouts = {
            name: _parse_layout(name, _mapping(layout, f"key_layouts.{name}"))
            for name, layout in _mapping(data["key_layouts"], "key_layouts").items()
        }
        models = {
            name: _parse_model(name, _mapping(model, f"overlays.{name}"), layouts)
            for name, model in _mapping(data["overlays"], "overlays").items()
        }

        cut = _mapping(data.get("cut_line") or {}, "cut_line")
        leg = _mapping(data.get("legend") or {}, "legend")
        cfg = OverlayConfig(
            page=page,
            registrations=registrations,
            default_registration=str(
                data.get("default_registration", next(iter(registrations)))
            ),
            layouts=layouts,
            models=models,
            default_model=str(data.get("default_overlay", next(iter(models)))),
            cut_line=LineStyle(
                width_in=float(cut.get("width_mm", 0.1)) / MM_PER_IN,
                color=_parse_color(cut.get("color"), "cut_line"),
            ),
            legend=LegendStyle(
                font=str(leg.get("font", "Helvetica")),
                size_pt=float(leg.get("size_pt", 6.0)),
                baseline_offset_in=float(leg.get("baseline_offset_in", 0.03)),
                color=_parse_color(leg.get("color"), "legend"),
            ),
            logging=_parse_logging(
                _mapping(data.get("logging") or {}, "logging")
            ),
        )

        _validate_config(cfg)
    except KeyError as exc:
        raise ConfigError(f"Missing required configuration key: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid configuration value: {exc}") from exc

    logger.info(
        "Configuration loaded: %d overlay model(s), %d registration profile(s)",
        len(models),
        len(registrations),
    )
    return cfg
