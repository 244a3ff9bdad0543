"""Tests for print-and-cut registration marks.

Uses the Cameo 4 (no mat) profile on a US Letter page.
"""

from __future__ import annotations

import pytest

from keycap_overlay.configs.loader import (
    MM_PER_IN,
    DegenerateGeometryError,
    RegistrationGeometry,
)
from keycap_overlay.geometry import registration
from keycap_overlay.path_ir.operations import ClosePath, LineTo, MoveTo

PAGE_W = 8.5
PAGE_H = 11.0


def _flat(points: list[tuple[float, float]]) -> list[float]:
    return [c for p in points for c in p]


@pytest.fixture()
def cameo4() -> RegistrationGeometry:
    return RegistrationGeometry(
        inset_left_in=0.625,
        inset_right_in=0.625,
        inset_top_in=0.625,
        inset_bottom_in=1.024,
        square_size_in=0.2,
        line_length_in=0.5,
        line_width_in=0.5 / MM_PER_IN,
    )


class TestRegistrationMarks:
    def test_three_marks(self, cameo4: RegistrationGeometry) -> None:
        marks = registration.generate(PAGE_W, PAGE_H, cameo4)
        assert len(marks) == 3

    def test_square_top_left_corner(self, cameo4: RegistrationGeometry) -> None:
        square, _, _ = registration.generate(PAGE_W, PAGE_H, cameo4)
        min_x, min_y, max_x, max_y = square.bounds()
        # Top-left corner 0.625 in from the left and from the top
        assert min_x == pytest.approx(0.625)
        assert PAGE_H - max_y == pytest.approx(0.625)
        assert max_x - min_x == pytest.approx(0.2)
        assert max_y - min_y == pytest.approx(0.2)

    def test_square_is_filled_and_closed(self, cameo4: RegistrationGeometry) -> None:
        square, _, _ = registration.generate(PAGE_W, PAGE_H, cameo4)
        assert square.paint == "fill_stroke"
        assert isinstance(square.ops[-1], ClosePath)

    def test_bottom_left_l(self, cameo4: RegistrationGeometry) -> None:
        _, bottom_left, _ = registration.generate(PAGE_W, PAGE_H, cameo4)
        assert bottom_left.paint == "stroke"
        assert not bottom_left.is_closed
        assert _flat(bottom_left.vertices()) == pytest.approx(_flat([
            (0.625, 1.524),
            (0.625, 1.024),
            (1.125, 1.024),
        ]))

    def test_top_right_l(self, cameo4: RegistrationGeometry) -> None:
        _, _, top_right = registration.generate(PAGE_W, PAGE_H, cameo4)
        right = PAGE_W - 0.625
        top = PAGE_H - 0.625
        assert _flat(top_right.vertices()) == pytest.approx(_flat([
            (right - 0.5, top),
            (right, top),
            (right, top - 0.5),
        ]))

    def test_l_shapes_are_move_line_line(self, cameo4: RegistrationGeometry) -> None:
        _, bl, tr = registration.generate(PAGE_W, PAGE_H, cameo4)
        for mark in (bl, tr):
            assert [type(op) for op in mark.ops] == [MoveTo, LineTo, LineTo]

    def test_line_width_and_color_from_profile(
        self, cameo4: RegistrationGeometry,
    ) -> None:
        for mark in registration.generate(PAGE_W, PAGE_H, cameo4):
            assert mark.line_width == pytest.approx(0.5 / 25.4)
            assert mark.color == (0.0, 0.0, 0.0)


class TestRegistrationValidation:
    def test_negative_inset(self) -> None:
        with pytest.raises(DegenerateGeometryError, match="inset_left_in"):
            RegistrationGeometry(
                inset_left_in=-0.1,
                inset_right_in=0.625,
                inset_top_in=0.625,
                inset_bottom_in=1.024,
                square_size_in=0.2,
                line_length_in=0.5,
                line_width_in=0.02,
            )

    def test_insets_leave_no_area(self, cameo4: RegistrationGeometry) -> None:
        with pytest.raises(DegenerateGeometryError, match="usable width"):
            registration.generate(1.0, PAGE_H, cameo4)
