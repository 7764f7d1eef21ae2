"""Tests for the Editor facade: scene commands, history, loading and stores."""
from __future__ import annotations

import math
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from editor import Editor
from models import InvalidSceneFormat, Mode, Rectangle
from scene_io import InMemoryRemoteStore
from settings import AppSettings, EngineSettings
from canvas.state import PointerEvent


def ev(x, y, **kw):
    return PointerEvent(float(x), float(y), **kw)


def drag(editor, start, end, **kw):
    editor.pointer_down(ev(*start, **kw))
    editor.pointer_move(ev(*end, **kw))
    editor.pointer_up(ev(*end, **kw))


def click(editor, x, y):
    drag(editor, (x, y), (x, y))


@pytest.fixture()
def editor():
    return Editor()


@pytest.fixture()
def with_rect():
    ed = Editor()
    ed.set_tool(Mode.RECTANGLE)
    drag(ed, (10, 10), (110, 60))
    return ed


# ─────────────────────────────────────────────────────────
# End-to-end rectangle scenario
# ─────────────────────────────────────────────────────────


class TestRectangleScenario:
    def test_draw_resize_undo_delete(self, editor):
        editor.set_tool(Mode.RECTANGLE)
        drag(editor, (10, 10), (110, 60))
        (r,) = editor.shapes
        assert (r.x, r.y, r.width, r.height) == (10, 10, 100, 50)
        assert editor.tool == Mode.SELECT

        click(editor, 60, 35)
        assert editor.selected is r
        drag(editor, (110, 60), (160, 110))
        assert (r.width, r.height) == pytest.approx((150, 100))

        assert editor.undo()
        (restored,) = editor.shapes
        assert (restored.width, restored.height) == pytest.approx((100, 50))
        assert editor.selected is None

        click(editor, 60, 35)
        assert editor.delete_selected()
        assert editor.shapes == []
        assert editor.selected is None

    def test_undo_then_redo_is_identity(self, with_rect):
        before = with_rect.scene_records()
        assert with_rect.undo()
        assert with_rect.shapes == []
        assert with_rect.redo()
        assert with_rect.scene_records() == before

    def test_out_of_range_is_noop(self, editor):
        assert not editor.undo()
        assert not editor.redo()


# ─────────────────────────────────────────────────────────
# Delete / rename
# ─────────────────────────────────────────────────────────


class TestSceneCommands:
    def test_delete_without_selection(self, with_rect):
        assert not with_rect.delete_selected()
        assert len(with_rect.state.history) == 2

    def test_rename(self, with_rect):
        r = with_rect.shapes[0]
        assert with_rect.rename(r.id, "  Table ")
        assert r.name == "Table"
        assert len(with_rect.state.history) == 3

    def test_blank_rename_uses_default(self, with_rect):
        r = with_rect.shapes[0]
        with_rect.rename(r.id, "Table")
        assert with_rect.rename(r.id, "   ")
        assert r.name == "Untitled"

    def test_rename_noops(self, with_rect):
        r = with_rect.shapes[0]
        assert not with_rect.rename("missing", "x")
        assert not with_rect.rename(r.id, "Untitled")
        assert len(with_rect.state.history) == 2


# ─────────────────────────────────────────────────────────
# Property edits
# ─────────────────────────────────────────────────────────


class TestSetProperty:
    def test_needs_selection(self, with_rect):
        assert not with_rect.set_property("width_cm", 10)

    def test_commits_and_updates_style(self, with_rect):
        click(with_rect, 60, 35)
        assert with_rect.set_property("stroke_color", "#FF0000")
        assert with_rect.selected.stroke_color == "#FF0000"
        assert with_rect.state.style.stroke_color == "#FF0000"
        assert len(with_rect.state.history) == 3

        with_rect.set_tool(Mode.CIRCLE)
        drag(with_rect, (300, 300), (340, 300))
        assert with_rect.shapes[-1].stroke_color == "#FF0000"

    def test_geometry_edit(self, with_rect):
        click(with_rect, 60, 35)
        assert with_rect.set_property("rotation_deg", 90)
        assert with_rect.selected.rotation == pytest.approx(math.pi / 2)
        assert with_rect.inspect()["rotation_deg"] == 90.0

    def test_bad_value_changes_nothing(self, with_rect):
        click(with_rect, 60, 35)
        before = with_rect.scene_records()
        with pytest.raises(ValueError):
            with_rect.set_property("width_cm", "wide")
        with pytest.raises(KeyError):
            with_rect.set_property("diameter_cm", 3)
        assert with_rect.scene_records() == before
        assert len(with_rect.state.history) == 2

    def test_name_edit_matches_rename(self, with_rect):
        click(with_rect, 60, 35)
        assert with_rect.set_property("name", " Desk ")
        assert with_rect.selected.name == "Desk"
        assert with_rect.set_property("name", "")
        assert with_rect.selected.name == "Untitled"
        assert len(with_rect.state.history) == 4

    def test_unchanged_value_does_not_commit(self, with_rect):
        click(with_rect, 60, 35)
        assert not with_rect.set_property("width_cm", 20)
        assert len(with_rect.state.history) == 2


# ─────────────────────────────────────────────────────────
# Loading and stores
# ─────────────────────────────────────────────────────────


class TestLoading:
    def test_load_resets_history(self, with_rect):
        records = with_rect.scene_records()
        other = Editor()
        other.load_records(records)
        assert other.scene_records() == records
        assert (len(other.state.history), other.state.history.index) == (1, 0)
        assert not other.can_undo

    def test_invalid_load_leaves_state(self, with_rect):
        before = with_rect.scene_records()
        with pytest.raises(InvalidSceneFormat):
            with_rect.load_records([{"type": "rectangle", "x": "nope"}])
        with pytest.raises(InvalidSceneFormat):
            with_rect.load_records("not a list")
        assert with_rect.scene_records() == before
        assert len(with_rect.state.history) == 2

    def test_store_round_trip(self, with_rect):
        store = InMemoryRemoteStore()
        drawing_id = with_rect.save_to_store(store, "Room")
        fresh = Editor()
        fresh.load_from_store(store, drawing_id)
        assert fresh.scene_records() == with_rect.scene_records()
        assert [d.name for d in store.list()] == ["Room"]

    def test_load_shapes_are_copied(self, editor):
        r = Rectangle(x=0, y=0, width=20, height=20)
        editor.load_shapes([r])
        r.x = 100
        assert editor.shapes[0].x == 0


# ─────────────────────────────────────────────────────────
# Configuration and notifications
# ─────────────────────────────────────────────────────────


class TestEditorSetup:
    def test_from_app_settings(self):
        app = AppSettings()
        app.defaults.fill_color = "#123456"
        app.defaults.shape_name = "Part"
        app.units.show_dimensions = False
        ed = Editor.from_app_settings(app)
        assert ed.state.style.fill_color == "#123456"
        assert ed.state.show_dimensions is False
        ed.set_tool(Mode.RECTANGLE)
        drag(ed, (0, 0), (50, 50))
        assert ed.shapes[0].name == "Part"
        assert ed.shapes[0].fill_color == "#123456"

    def test_callbacks(self, editor):
        changed = []
        status = []
        editor.configure_callbacks(on_changed=lambda: changed.append(1), on_status=status.append)
        editor.set_tool(Mode.LINE)
        editor.load_records([])
        assert changed
        assert status == ["Loaded 0 shape(s)"]

    def test_cancel_leaves_drawing_tool(self, editor):
        editor.set_tool(Mode.LINE)
        editor.cancel()
        assert editor.tool == Mode.SELECT

    def test_zoom_commands(self):
        ed = Editor(EngineSettings(zoom_step=2.0))
        ed.zoom_in((0, 0))
        assert ed.viewport.scale == pytest.approx(2.0)
        ed.zoom_out((0, 0))
        ed.zoom_out((0, 0))
        assert ed.viewport.scale == pytest.approx(0.5)
        ed.reset_view()
        assert ed.viewport.scale == 1.0
