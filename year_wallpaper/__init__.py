"""Year-progress dot calendar wallpapers."""

from .wallpaper import (
    DEFAULT_THEME,
    DEVICES,
    CalendarParameters,
    DeviceProfile,
    Dot,
    FooterLine,
    GridGeometry,
    LayoutEngine,
    LayoutParameters,
    SafeZone,
    Scene,
    Theme,
    generate,
    generate_svg,
    is_leap_year,
)
from .svg import render_svg

__version__ = "0.1.0"
