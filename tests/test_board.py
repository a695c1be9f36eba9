"""Tests for board geometry and answer forms."""

from __future__ import annotations

import random

import pytest

from callcenter.domain.questions import board, forms


class TestDefaultPosition:
    def test_within_spawn_area_with_default_size(self):
        position = board.default_position(random.Random(7))
        assert 0 <= position["x"] <= board.SPAWN_WIDTH
        assert 0 <= position["y"] <= board.SPAWN_HEIGHT
        assert position["width"] == board.DEFAULT_CARD_WIDTH
        assert position["height"] == board.DEFAULT_CARD_HEIGHT


class TestClampPosition:
    def test_enforces_minimum_size(self):
        position = board.clamp_position(10, 20, 100, 50)
        assert position == {
            "x": 10,
            "y": 20,
            "width": board.MIN_CARD_WIDTH,
            "height": board.MIN_CARD_HEIGHT,
        }

    def test_keeps_cards_in_positive_quadrant(self):
        position = board.clamp_position(-50, -1, 400, 300)
        assert position["x"] == 0
        assert position["y"] == 0
        assert position["width"] == 400


class TestFitToScreen:
    def test_empty_board(self):
        assert board.fit_to_screen([], 1000, 800) is None

    def test_never_zooms_past_one(self):
        viewport = board.fit_to_screen([{"x": 0, "y": 0, "width": 100, "height": 100}], 2000, 2000)
        assert viewport.zoom == 1.0
        # Content centred
        assert viewport.pan_x == pytest.approx(950)
        assert viewport.pan_y == pytest.approx(950)

    def test_zooms_out_to_fit_with_padding(self):
        positions = [
            {"x": 0, "y": 0, "width": 300, "height": 200},
            {"x": 1700, "y": 800, "width": 300, "height": 200},
        ]
        viewport = board.fit_to_screen(positions, 1100, 1100)
        # Content is 2000 x 1000; width is the limiting side
        assert viewport.zoom == pytest.approx(0.5)
        assert viewport.pan_x == pytest.approx(50)
        assert viewport.pan_y == pytest.approx(300)

    def test_accounts_for_offset_content(self):
        viewport = board.fit_to_screen([{"x": 500, "y": 500, "width": 100, "height": 100}], 300, 300)
        assert viewport.zoom == 1.0
        assert viewport.pan_x == pytest.approx(-400)

    @pytest.mark.parametrize("size", [100, 60])
    def test_tiny_viewport_keeps_positive_zoom(self, size):
        viewport = board.fit_to_screen([{"x": 0, "y": 0, "width": 300, "height": 200}], size, size)
        assert viewport.zoom == board.MIN_FIT_ZOOM


class TestForms:
    FIELDS = [
        {"id": "name", "label": "Customer name", "required": True},
        {"id": "order", "label": "", "required": True},
        {"id": "note", "label": "Note", "required": False},
    ]

    def test_lists_missing_required_labels(self):
        assert forms.missing_required_fields(self.FIELDS, {"note": "x"}) == [
            "Customer name",
            "order",
        ]

    def test_blank_value_counts_as_missing(self):
        assert forms.missing_required_fields(self.FIELDS, {"name": "", "order": "42"}) == [
            "Customer name"
        ]

    def test_complete_form(self):
        assert forms.missing_required_fields(self.FIELDS, {"name": "Ann", "order": "42"}) == []

    def test_render_fills_placeholders(self):
        answer = forms.render_answer("Hello {name}, order {order} ships today.", {"name": "Ann", "order": "42"})
        assert answer == "Hello Ann, order 42 ships today."

    def test_render_replaces_first_occurrence_only(self):
        assert forms.render_answer("{name} and {name}", {"name": "Ann"}) == "Ann and {name}"

    def test_unknown_placeholders_are_left_alone(self):
        assert forms.render_answer("Order {order}", {"name": "Ann"}) == "Order {order}"

    def test_missing_template(self):
        assert forms.render_answer(None, {"name": "Ann"}) == ""
