"""
settings.py

Persistent settings management for SketchDesk.

Handles cross-platform settings storage using TOML format with platformdirs
for proper user config directory detection.

Settings file location:
    - Windows: %APPDATA%/sketchdesk/settings.toml
    - macOS: ~/Library/Application Support/sketchdesk/settings.toml
    - Linux: ~/.config/sketchdesk/settings.toml

Default values are documented in comments throughout this file.
If settings.toml is corrupted, these defaults will be used.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

# TOML reading - use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

APP_NAME = "sketchdesk"

# Global settings manager instance (singleton)
_settings_manager: Optional["SettingsManager"] = None


def get_settings() -> "SettingsManager":
    """Get the global settings manager instance.

    Returns:
        The singleton SettingsManager instance.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager


# =============================================================================
# Canvas Settings
# =============================================================================

@dataclass
class CanvasHandleSettings:
    """Resize and rotation handle settings.

    All values are in screen pixels; the engine divides them by the
    current zoom so handles keep a constant on-screen size.

    Defaults:
        size: 8.0
        rotate_offset: 30.0
        hit_factor: 1.5
        border_color: "#2563EB"
    """
    size: float = 8.0               # Default: 8.0 pixels
    rotate_offset: float = 30.0     # Default: 30.0 pixels above the top edge
    hit_factor: float = 1.5         # Default: 1.5x handle size pick radius
    border_color: str = "#2563EB"   # Default: blue


@dataclass
class CanvasShapeSettings:
    """Shape sizing settings.

    Defaults:
        min_size: 10.0
    """
    min_size: float = 10.0  # Default: 10.0 pixels (on screen, at any zoom)


@dataclass
class CanvasLineSettings:
    """Line picking settings.

    Defaults:
        select_tolerance: 5.0
    """
    select_tolerance: float = 5.0  # Default: 5.0 pixels beyond half the stroke


@dataclass
class CanvasZoomSettings:
    """Zoom behavior settings.

    Defaults:
        min_scale: 0.1
        max_scale: 10.0
        step: 1.1
    """
    min_scale: float = 0.1   # Default: 0.1 (10%)
    max_scale: float = 10.0  # Default: 10.0 (1000%)
    step: float = 1.1        # Default: 1.1 (10% per wheel notch)


@dataclass
class CanvasSnapSettings:
    """Angle snapping settings (active while Shift is held).

    Defaults:
        angle_deg: 45.0
    """
    angle_deg: float = 45.0  # Default: 45 degrees


@dataclass
class CanvasSettings:
    """All canvas-related settings."""
    handles: CanvasHandleSettings = field(default_factory=CanvasHandleSettings)
    shapes: CanvasShapeSettings = field(default_factory=CanvasShapeSettings)
    lines: CanvasLineSettings = field(default_factory=CanvasLineSettings)
    zoom: CanvasZoomSettings = field(default_factory=CanvasZoomSettings)
    snap: CanvasSnapSettings = field(default_factory=CanvasSnapSettings)


# =============================================================================
# Units / Defaults / History
# =============================================================================

@dataclass
class UnitSettings:
    """Dimension annotation settings.

    Defaults:
        pixels_per_cm: 5.0
        show_dimensions: True
    """
    pixels_per_cm: float = 5.0   # Default: 5 world units per centimetre
    show_dimensions: bool = True  # Default: True


@dataclass
class DefaultStyleSettings:
    """Default style applied to newly drawn shapes.

    Defaults:
        stroke_color: "#000000"
        fill_color: "#E5E7EB"
        line_width: 1.0
        shape_name: "Untitled"
    """
    stroke_color: str = "#000000"  # Default: black
    fill_color: str = "#E5E7EB"    # Default: light gray
    line_width: float = 1.0        # Default: 1.0 pixel
    shape_name: str = "Untitled"   # Default name for new rectangles/circles


@dataclass
class HistorySettings:
    """Undo history settings.

    Defaults:
        max_depth: 0
    """
    max_depth: int = 0  # Default: 0 (unlimited)


# =============================================================================
# Main App Settings
# =============================================================================

@dataclass
class AppSettings:
    """Application settings with default values.

    Attributes:
        workspace_dir: Default directory for opening/saving drawings.
        canvas: Canvas interaction settings.
        units: Dimension annotation settings.
        defaults: Default style for new shapes.
        history: Undo history settings.
    """
    # Workspace directory for drawing save/load (empty = ~/Documents/SketchDesk)
    workspace_dir: str = ""

    # Nested settings categories
    canvas: CanvasSettings = field(default_factory=CanvasSettings)
    units: UnitSettings = field(default_factory=UnitSettings)
    defaults: DefaultStyleSettings = field(default_factory=DefaultStyleSettings)
    history: HistorySettings = field(default_factory=HistorySettings)


# =============================================================================
# Engine Settings
# =============================================================================

@dataclass(frozen=True)
class EngineSettings:
    """Flat view of the numbers the interaction engine needs.

    The engine only ever sees this value, never the global settings
    manager, so it can be built directly in tests.
    """
    handle_size: float = 8.0
    handle_hit_factor: float = 1.5
    rotate_offset: float = 30.0
    min_shape_size: float = 10.0
    line_select_tolerance: float = 5.0
    min_scale: float = 0.1
    max_scale: float = 10.0
    zoom_step: float = 1.1
    snap_angle_deg: float = 45.0
    pixels_per_cm: float = 5.0
    default_shape_name: str = "Untitled"
    history_depth: int = 0


def engine_settings(app: Optional[AppSettings] = None) -> EngineSettings:
    """Build EngineSettings from application settings.

    Args:
        app: Application settings. Defaults to the global settings.

    Returns:
        EngineSettings populated from ``app``.
    """
    if app is None:
        app = get_settings().settings
    c = app.canvas
    return EngineSettings(
        handle_size=c.handles.size,
        handle_hit_factor=c.handles.hit_factor,
        rotate_offset=c.handles.rotate_offset,
        min_shape_size=c.shapes.min_size,
        line_select_tolerance=c.lines.select_tolerance,
        min_scale=c.zoom.min_scale,
        max_scale=c.zoom.max_scale,
        zoom_step=c.zoom.step,
        snap_angle_deg=c.snap.angle_deg,
        pixels_per_cm=app.units.pixels_per_cm,
        default_shape_name=app.defaults.shape_name,
        history_depth=app.history.max_depth,
    )


# =============================================================================
# Settings Manager
# =============================================================================

class SettingsManager:
    """Manages loading, saving, and accessing application settings.

    Settings are stored in a TOML file at the platform-appropriate location.
    If the settings file doesn't exist, defaults are used and the file is
    created on first save.

    Args:
        app_name: Application name used for the config directory.
        settings_dir: Override for the config directory (used by tests).
    """

    def __init__(self, app_name: str = APP_NAME, settings_dir: Optional[Path] = None):
        if settings_dir is None:
            settings_dir = Path(platformdirs.user_config_dir(app_name))
        self.settings_dir = Path(settings_dir)
        self.settings_file = self.settings_dir / "settings.toml"
        self.settings = self.load()
        self._needs_save = not self.settings_file.exists()  # Save if file didn't exist

    def ensure_file_complete(self) -> None:
        """Ensure settings file exists with all sections. Call once at startup."""
        if self._needs_save or not self.settings_file.exists():
            self.save()
            self._needs_save = False

    def load(self) -> AppSettings:
        """Load settings from the TOML file.

        Returns:
            AppSettings instance with values from file or defaults if file
            doesn't exist or is invalid.
        """
        if not self.settings_file.exists():
            return AppSettings()

        try:
            with open(self.settings_file, "rb") as f:
                data = tomllib.load(f)

            return self._parse_toml(data)
        except (OSError, tomllib.TOMLDecodeError, AttributeError):
            # If file is corrupted or invalid, return defaults
            return AppSettings()

    def _parse_toml(self, data: Dict[str, Any]) -> AppSettings:
        """Parse TOML data into AppSettings.

        Args:
            data: Parsed TOML dictionary.

        Returns:
            AppSettings instance populated from TOML data.
        """
        settings = AppSettings()

        # General section
        general = data.get("general", {})
        settings.workspace_dir = general.get("workspace_dir", settings.workspace_dir)

        # Canvas section
        canvas = data.get("canvas", {})
        if "handles" in canvas:
            h = canvas["handles"]
            settings.canvas.handles.size = h.get("size", settings.canvas.handles.size)
            settings.canvas.handles.rotate_offset = h.get("rotate_offset", settings.canvas.handles.rotate_offset)
            settings.canvas.handles.hit_factor = h.get("hit_factor", settings.canvas.handles.hit_factor)
            settings.canvas.handles.border_color = h.get("border_color", settings.canvas.handles.border_color)
        if "shapes" in canvas:
            s = canvas["shapes"]
            settings.canvas.shapes.min_size = s.get("min_size", settings.canvas.shapes.min_size)
        if "lines" in canvas:
            li = canvas["lines"]
            settings.canvas.lines.select_tolerance = li.get("select_tolerance", settings.canvas.lines.select_tolerance)
        if "zoom" in canvas:
            zm = canvas["zoom"]
            settings.canvas.zoom.min_scale = zm.get("min_scale", settings.canvas.zoom.min_scale)
            settings.canvas.zoom.max_scale = zm.get("max_scale", settings.canvas.zoom.max_scale)
            settings.canvas.zoom.step = zm.get("step", settings.canvas.zoom.step)
        if "snap" in canvas:
            sn = canvas["snap"]
            settings.canvas.snap.angle_deg = sn.get("angle_deg", settings.canvas.snap.angle_deg)

        # Units section
        units = data.get("units", {})
        settings.units.pixels_per_cm = units.get("pixels_per_cm", settings.units.pixels_per_cm)
        settings.units.show_dimensions = units.get("show_dimensions", settings.units.show_dimensions)

        # Defaults section
        defaults = data.get("defaults", {})
        if "style" in defaults:
            st = defaults["style"]
            settings.defaults.stroke_color = st.get("stroke_color", settings.defaults.stroke_color)
            settings.defaults.fill_color = st.get("fill_color", settings.defaults.fill_color)
            settings.defaults.line_width = st.get("line_width", settings.defaults.line_width)
            settings.defaults.shape_name = st.get("shape_name", settings.defaults.shape_name)

        # History section
        history = data.get("history", {})
        settings.history.max_depth = history.get("max_depth", settings.history.max_depth)

        # Keep the zoom range non-empty so zoom requests always clamp cleanly
        if settings.canvas.zoom.min_scale <= 0 or settings.canvas.zoom.min_scale > settings.canvas.zoom.max_scale:
            settings.canvas.zoom = CanvasZoomSettings()

        return settings

    def save(self) -> None:
        """Save current settings to the TOML file.

        Creates the settings directory if it doesn't exist.
        """
        # Ensure directory exists
        self.settings_dir.mkdir(parents=True, exist_ok=True)

        # Convert settings to TOML structure
        data = self._to_toml_dict()

        with open(self.settings_file, "wb") as f:
            tomli_w.dump(data, f)

    def _to_toml_dict(self) -> Dict[str, Any]:
        """Convert settings to a TOML-compatible dictionary structure.

        Returns:
            Dictionary organized by TOML sections.
        """
        s = self.settings
        return {
            "general": {
                "workspace_dir": s.workspace_dir,
            },
            "canvas": {
                "handles": {
                    "size": s.canvas.handles.size,
                    "rotate_offset": s.canvas.handles.rotate_offset,
                    "hit_factor": s.canvas.handles.hit_factor,
                    "border_color": s.canvas.handles.border_color,
                },
                "shapes": {
                    "min_size": s.canvas.shapes.min_size,
                },
                "lines": {
                    "select_tolerance": s.canvas.lines.select_tolerance,
                },
                "zoom": {
                    "min_scale": s.canvas.zoom.min_scale,
                    "max_scale": s.canvas.zoom.max_scale,
                    "step": s.canvas.zoom.step,
                },
                "snap": {
                    "angle_deg": s.canvas.snap.angle_deg,
                },
            },
            "units": {
                "pixels_per_cm": s.units.pixels_per_cm,
                "show_dimensions": s.units.show_dimensions,
            },
            "defaults": {
                "style": {
                    "stroke_color": s.defaults.stroke_color,
                    "fill_color": s.defaults.fill_color,
                    "line_width": s.defaults.line_width,
                    "shape_name": s.defaults.shape_name,
                },
            },
            "history": {
                "max_depth": s.history.max_depth,
            },
        }

    def to_toml(self) -> str:
        """Convert current settings to a TOML-formatted string.

        Returns:
            TOML representation of the current settings.
        """
        data = self._to_toml_dict()
        return tomli_w.dumps(data)

    def get_workspace_dir(self) -> Path:
        """Get the resolved workspace directory path.

        Returns:
            Path to workspace directory. Falls back to ~/Documents/SketchDesk
            if workspace_dir setting is empty.
        """
        if self.settings.workspace_dir:
            return Path(self.settings.workspace_dir)
        return Path.home() / "Documents" / "SketchDesk"

    def get_settings_path(self) -> Path:
        """Get the path to the settings file.

        Returns:
            Path object pointing to the settings file location.
        """
        return self.settings_file
