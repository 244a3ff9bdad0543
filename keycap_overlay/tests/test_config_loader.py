"""Tests for the overlay profile loader.

Validates:
    - Default ``profiles.yaml`` loads and has the expected models
    - Line widths are converted from mm to inches
    - Missing sections and bad values raise ``ConfigError``
    - Geometry problems raise ``DegenerateGeometryError``
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest
import yaml

from keycap_overlay.configs.loader import (
    ConfigError,
    DegenerateGeometryError,
    OverlayConfig,
    PageConfig,
    load_config,
)
from keycap_overlay.utils.fs import load_yaml

DEFAULT_PROFILES = (
    Path(__file__).resolve().parents[1] / "configs" / "profiles.yaml"
)


@pytest.fixture(scope="module")
def cfg() -> OverlayConfig:
    return load_config()


@pytest.fixture()
def raw() -> dict[str, Any]:
    return copy.deepcopy(load_yaml(DEFAULT_PROFILES))


def _write(tmp_path: Path, data: dict[str, Any]) -> Path:
    path = tmp_path / "profiles.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Default profile file
# ---------------------------------------------------------------------------


class TestDefaultProfiles:
    def test_loads(self, cfg: OverlayConfig) -> None:
        assert isinstance(cfg, OverlayConfig)

    def test_models(self, cfg: OverlayConfig) -> None:
        assert set(cfg.models) == {"hp", "sm"}
        assert cfg.default_model == "hp"
        assert cfg.get_model().file_prefix == "voyager"
        assert cfg.get_model("sm").file_prefix == "dm1xl"

    def test_hp_geometry(self, cfg: OverlayConfig) -> None:
        g = cfg.get_model("hp").geometry
        assert g.width_in == pytest.approx(4.65)
        assert g.height_in == pytest.approx(2.10)
        assert g.key_row_1_offset_in == pytest.approx(0.133)

    def test_sm_geometry(self, cfg: OverlayConfig) -> None:
        g = cfg.get_model("sm").geometry
        assert g.width_in == pytest.approx(4.75)
        assert g.key_col_pitch_in == pytest.approx(0.475)

    def test_page(self, cfg: OverlayConfig) -> None:
        assert (cfg.page.width_in, cfg.page.height_in) == (8.5, 11.0)
        assert cfg.page.available_height_in == pytest.approx(9.351)

    def test_line_widths_converted_to_inches(self, cfg: OverlayConfig) -> None:
        assert cfg.get_registration().line_width_in == pytest.approx(0.5 / 25.4)
        assert cfg.cut_line.width_in == pytest.approx(0.1 / 25.4)

    def test_shared_layout(self, cfg: OverlayConfig) -> None:
        hp = cfg.get_model("hp").layout
        assert hp is cfg.get_model("sm").layout
        assert hp.key_count == 39
        assert hp.cell(2, 5).height_rows == 2
        assert hp.cell(3, 5).suppressed

    def test_legend_table(self, cfg: OverlayConfig) -> None:
        layout = cfg.layouts["voyager"]
        assert layout.legend(0, 0) == "A"
        assert layout.legend(3, 5) == ""

    def test_unknown_model(self, cfg: OverlayConfig) -> None:
        with pytest.raises(ConfigError, match="Unknown overlay model 'ti'"):
            cfg.get_model("ti")

    def test_unknown_registration(self, cfg: OverlayConfig) -> None:
        with pytest.raises(ConfigError, match="Unknown registration profile"):
            cfg.get_registration("cricut")

    def test_frozen(self, cfg: OverlayConfig) -> None:
        with pytest.raises(AttributeError):
            cfg.default_model = "sm"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Custom files
# ---------------------------------------------------------------------------


class TestCustomProfiles:
    def test_round_trip_file(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        cfg = load_config(_write(tmp_path, raw))
        assert set(cfg.models) == {"hp", "sm"}

    def test_extra_model(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["overlays"]["mini"] = copy.deepcopy(raw["overlays"]["hp"])
        raw["overlays"]["mini"]["file_prefix"] = "mini"
        cfg = load_config(_write(tmp_path, raw))
        assert cfg.get_model("mini").file_prefix == "mini"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "profiles.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigError, match="Empty"):
            load_config(path)

    @pytest.mark.parametrize(
        "section", ["page", "registration", "key_layouts", "overlays"],
    )
    def test_missing_section(
        self, tmp_path: Path, raw: dict[str, Any], section: str,
    ) -> None:
        del raw[section]
        with pytest.raises(ConfigError, match=section):
            load_config(_write(tmp_path, raw))

    def test_missing_geometry_field(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        del raw["overlays"]["hp"]["geometry"]["key_width_in"]
        with pytest.raises(ConfigError, match="key_width_in"):
            load_config(_write(tmp_path, raw))

    def test_unknown_layout(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["overlays"]["hp"]["layout"] = "qwerty"
        with pytest.raises(ConfigError, match="unknown layout 'qwerty'"):
            load_config(_write(tmp_path, raw))

    def test_unknown_default_model(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["default_overlay"] = "ti"
        with pytest.raises(ConfigError, match="default_model"):
            load_config(_write(tmp_path, raw))

    def test_key_wider_than_pitch(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["overlays"]["sm"]["geometry"]["key_width_in"] = 0.5
        with pytest.raises(DegenerateGeometryError, match="key_width_in"):
            load_config(_write(tmp_path, raw))

    def test_overlay_wider_than_page(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["overlays"]["hp"]["geometry"]["width_in"] = 8.0
        with pytest.raises(ConfigError, match="wider"):
            load_config(_write(tmp_path, raw))

    def test_registration_insets_too_large(
        self, tmp_path: Path, raw: dict[str, Any],
    ) -> None:
        raw["registration"]["cameo4_no_mat"]["inset_top_in"] = 6.0
        raw["registration"]["cameo4_no_mat"]["inset_bottom_in"] = 6.0
        with pytest.raises(DegenerateGeometryError, match="cameo4_no_mat"):
            load_config(_write(tmp_path, raw))

    def test_bad_color(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["legend"]["color"] = [0.0, 0.0]
        with pytest.raises(ConfigError, match="legend.color"):
            load_config(_write(tmp_path, raw))

    def test_duplicate_override(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["key_layouts"]["voyager"]["overrides"].append(
            {"row": 3, "col": 5, "suppressed": True}
        )
        with pytest.raises(ConfigError, match="duplicate"):
            load_config(_write(tmp_path, raw))

    def test_legend_on_suppressed_cell(
        self, tmp_path: Path, raw: dict[str, Any],
    ) -> None:
        raw["key_layouts"]["voyager"]["legends"][3][5] = "LSTx"
        with pytest.raises(ConfigError, match="Suppressed cell"):
            load_config(_write(tmp_path, raw))

    def test_rows_below_outline_warns(
        self, tmp_path: Path, raw: dict[str, Any], caplog: pytest.LogCaptureFixture,
    ) -> None:
        raw["overlays"]["hp"]["geometry"]["key_row_1_offset_in"] = 0.4
        with caplog.at_level("WARNING"):
            load_config(_write(tmp_path, raw))
        assert "below the outline" in caplog.text

    def test_log_level_upper_cased(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["logging"]["log_level"] = "debug"
        assert load_config(_write(tmp_path, raw)).logging.log_level == "DEBUG"

    def test_registration_inside_tiling_area_warns(
        self, tmp_path: Path, raw: dict[str, Any], caplog: pytest.LogCaptureFixture,
    ) -> None:
        raw["registration"]["cameo4_no_mat"]["inset_top_in"] = 0.9
        with caplog.at_level("WARNING"):
            load_config(_write(tmp_path, raw))
        assert "may overlap overlays" in caplog.text

    def test_matching_insets_do_not_warn(
        self, tmp_path: Path, raw: dict[str, Any], caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level("WARNING"):
            load_config(_write(tmp_path, raw))
        assert "may overlap" not in caplog.text


# ---------------------------------------------------------------------------
# Malformed files
# ---------------------------------------------------------------------------


class TestMalformedProfiles:
    def test_non_numeric_value(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["overlays"]["hp"]["geometry"]["width_in"] = "wide"
        with pytest.raises(ConfigError, match="Invalid configuration value"):
            load_config(_write(tmp_path, raw))

    def test_non_numeric_page_value(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["page"]["height_in"] = [11]
        with pytest.raises(ConfigError, match="Invalid configuration value"):
            load_config(_write(tmp_path, raw))

    def test_section_written_as_list(
        self, tmp_path: Path, raw: dict[str, Any],
    ) -> None:
        raw["registration"] = [raw["registration"]["cameo4_no_mat"]]
        with pytest.raises(ConfigError, match="registration must be a mapping"):
            load_config(_write(tmp_path, raw))

    def test_entry_written_as_scalar(
        self, tmp_path: Path, raw: dict[str, Any],
    ) -> None:
        raw["overlays"]["sm"] = "dm1xl"
        with pytest.raises(ConfigError, match="overlays.sm must be a mapping"):
            load_config(_write(tmp_path, raw))

    def test_override_not_a_mapping(
        self, tmp_path: Path, raw: dict[str, Any],
    ) -> None:
        raw["key_layouts"]["voyager"]["overrides"].append(5)
        with pytest.raises(ConfigError, match="override must be a mapping"):
            load_config(_write(tmp_path, raw))

    def test_geometry_not_a_mapping(
        self, tmp_path: Path, raw: dict[str, Any],
    ) -> None:
        raw["overlays"]["hp"]["geometry"] = [4.65, 2.10]
        with pytest.raises(ConfigError, match="geometry must be a mapping"):
            load_config(_write(tmp_path, raw))

    def test_unparsable_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "profiles.yaml"
        path.write_text("page: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(path)

    def test_top_level_list(self, tmp_path: Path) -> None:
        path = tmp_path / "profiles.yaml"
        path.write_text("- page\n- overlays\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping at the top level"):
            load_config(path)


class TestPageConfig:
    def test_insets_leave_no_height(self) -> None:
        with pytest.raises(DegenerateGeometryError, match="usable height"):
            PageConfig(
                width_in=8.5, height_in=2.0,
                inset_left_in=0.5, inset_right_in=0.5,
                inset_top_in=1.0, inset_bottom_in=1.0,
                overlay_min_gap_in=0.1,
            )

    def test_negative_min_gap(self) -> None:
        with pytest.raises(DegenerateGeometryError, match="overlay_min_gap_in"):
            PageConfig(
                width_in=8.5, height_in=11.0,
                inset_left_in=0.5, inset_right_in=0.5,
                inset_top_in=0.5, inset_bottom_in=0.5,
                overlay_min_gap_in=-0.1,
            )
