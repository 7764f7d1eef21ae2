"""Tests for settings.py: TOML persistence and engine settings derivation."""
from __future__ import annotations

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from settings import AppSettings, EngineSettings, SettingsManager, engine_settings


class TestSettingsManager:
    def test_defaults_without_file(self, tmp_path):
        sm = SettingsManager(settings_dir=tmp_path)
        s = sm.settings
        assert s.canvas.handles.size == 8.0
        assert s.canvas.handles.rotate_offset == 30.0
        assert s.canvas.zoom.min_scale == 0.1
        assert s.canvas.zoom.max_scale == 10.0
        assert s.units.pixels_per_cm == 5.0
        assert s.defaults.fill_color == "#E5E7EB"
        assert not sm.get_settings_path().exists()

    def test_ensure_file_complete_writes_all_sections(self, tmp_path):
        sm = SettingsManager(settings_dir=tmp_path)
        sm.ensure_file_complete()
        text = sm.get_settings_path().read_text(encoding="utf-8")
        for section in ("[general]", "[canvas.handles]", "[canvas.zoom]", "[units]",
                        "[defaults.style]", "[history]"):
            assert section in text

    def test_save_and_reload(self, tmp_path):
        sm = SettingsManager(settings_dir=tmp_path)
        sm.settings.canvas.handles.size = 12.0
        sm.settings.units.pixels_per_cm = 10.0
        sm.settings.defaults.shape_name = "Box"
        sm.settings.history.max_depth = 50
        sm.save()

        again = SettingsManager(settings_dir=tmp_path).settings
        assert again.canvas.handles.size == 12.0
        assert again.units.pixels_per_cm == 10.0
        assert again.defaults.shape_name == "Box"
        assert again.history.max_depth == 50

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        (tmp_path / "settings.toml").write_text("[canvas.snap]\nangle_deg = 15.0\n", encoding="utf-8")
        s = SettingsManager(settings_dir=tmp_path).settings
        assert s.canvas.snap.angle_deg == 15.0
        assert s.canvas.shapes.min_size == 10.0

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "settings.toml").write_text("this is = = not toml", encoding="utf-8")
        s = SettingsManager(settings_dir=tmp_path).settings
        assert s == AppSettings()

    def test_inverted_zoom_range_reset(self, tmp_path):
        (tmp_path / "settings.toml").write_text(
            "[canvas.zoom]\nmin_scale = 5.0\nmax_scale = 1.0\n", encoding="utf-8"
        )
        s = SettingsManager(settings_dir=tmp_path).settings
        assert (s.canvas.zoom.min_scale, s.canvas.zoom.max_scale) == (0.1, 10.0)

    def test_workspace_dir(self, tmp_path):
        sm = SettingsManager(settings_dir=tmp_path)
        assert sm.get_workspace_dir().name == "SketchDesk"
        sm.settings.workspace_dir = str(tmp_path / "drawings")
        assert sm.get_workspace_dir() == tmp_path / "drawings"


class TestEngineSettings:
    def test_defaults_match_app_defaults(self):
        assert engine_settings(AppSettings()) == EngineSettings()

    def test_derived_from_app_settings(self):
        app = AppSettings()
        app.canvas.shapes.min_size = 4.0
        app.canvas.zoom.step = 1.25
        app.defaults.shape_name = "Part"
        es = engine_settings(app)
        assert es.min_shape_size == 4.0
        assert es.zoom_step == 1.25
        assert es.default_shape_name == "Part"
