"""
Year Progress Dot Wallpaper - layout generator

Maps a year, a reference day and layout parameters to the exact geometry of
a dot-calendar wallpaper: one dot per day, the reference day emphasized with
a ringed marker, and a two-line footer (days left / percent completed).

Architecture:
    CalendarParameters - year + reference date, derived progress metrics
    SafeZone / DeviceProfile - screen resolution + safe zones
    LayoutParameters   - canvas, margins, grid shape, spacing, footer
    Theme              - colors shared by the SVG and PNG outputs
    LayoutEngine       - fits the dot field into the usable area
    generate()         - builds the Scene for one wallpaper

Nothing here reads the clock or touches the filesystem; "today" is always
passed in by the caller.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Dict, Tuple

# ─────────────────────────── Calendar ─────────────────────────


def is_leap_year(year: int) -> bool:
    """Gregorian leap rule."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class CalendarParameters:
    """
    The year being drawn and the day to highlight.

    reference_date may fall outside the year. Progress metrics are then
    clamped to the first or last day, and no dot is marked as today.
    """
    year: int
    reference_date: date

    def __post_init__(self):
        if not date.min.year <= self.year <= date.max.year:
            raise ValueError(
                f"year must be in [{date.min.year}, {date.max.year}], got {self.year}"
            )

    @property
    def days_in_year(self) -> int:
        return 366 if is_leap_year(self.year) else 365

    @property
    def jan1(self) -> date:
        return date(self.year, 1, 1)

    @property
    def in_year(self) -> bool:
        return self.reference_date.year == self.year

    @property
    def day_index(self) -> int:
        """0-based day of year for reference_date, clamped into the year."""
        raw = (self.reference_date - self.jan1).days
        return _clamp(raw, 0, self.days_in_year - 1)

    @property
    def days_completed(self) -> int:
        return self.day_index + 1

    @property
    def days_remaining(self) -> int:
        return self.days_in_year - self.days_completed

    @property
    def percent_complete(self) -> float:
        """Share of the year completed, one decimal."""
        return _round_half_up(self.days_completed / self.days_in_year * 1000) / 10

    def day(self, index: int) -> date:
        return self.jan1 + timedelta(days=index)


# ─────────────────────────── Device Profiles ──────────────────

@dataclass(frozen=True)
class SafeZone:
    """Region to avoid placing content (in pixels from edge)."""
    top: int = 0
    bottom: int = 0
    left: int = 0
    right: int = 0


@dataclass(frozen=True)
class DeviceProfile:
    """
    Screen resolution and lock screen safe zones.

    Top keeps the dots clear of the lock screen clock, bottom keeps the
    footer clear of the flashlight/camera buttons and home indicator.
    """
    name: str
    width: int
    height: int
    safe_zone: SafeZone

    @property
    def slug(self) -> str:
        return "".join(ch if ch.isalnum() else "-" for ch in self.name.lower()).strip("-")


DEVICE_IPHONE_15_PRO = DeviceProfile(
    name="iPhone 15 Pro",
    width=1179,
    height=2556,
    safe_zone=SafeZone(top=320, bottom=160, left=80, right=80),
)
DEVICE_STANDARD = DeviceProfile(
    name="iPhone 13 Pro",
    width=1170,
    height=2532,
    safe_zone=SafeZone(top=320, bottom=160, left=80, right=80),
)
DEVICE_MAX = DeviceProfile(
    name="iPhone 16 Pro Max",
    width=1320,
    height=2868,
    safe_zone=SafeZone(top=360, bottom=180, left=88, right=88),
)

DEVICES: Dict[str, DeviceProfile] = {
    "iphone15pro": DEVICE_IPHONE_15_PRO,
    "standard": DEVICE_STANDARD,
    "max": DEVICE_MAX,
}


# ─────────────────────────── Layout Parameters ────────────────

@dataclass(frozen=True)
class LayoutParameters:
    """
    Everything that shapes the wallpaper apart from the calendar itself.

    Defaults reproduce the iPhone 15 Pro lock screen layout:

        width, height        1179 x 2556 canvas
        margin_x             80   left and right inset (symmetric)
        margin_top           320  keeps the field below the clock
        margin_bottom        160
        cols, rows           19 x 20 = 380 cells, enough for a leap year
        gap_ratio            0.55 gap = dot diameter * gap_ratio
        dot_fill_ratio       0.78 radius = (diameter / 2) * dot_fill_ratio
        emphasis_scale       1.35 today's marker radius multiplier
        ring_width           3    today's ring stroke
        enable_progress_ramp True past dots brighten through the year
        show_footer          True "N days left" / "P% completed"
        footer_gap_ratio     1.6  footer offset below field, in diameters
        footer_size          34   primary footer line (px)
        footer_muted_size    28   muted footer line (px)
    """
    width: int = 1179
    height: int = 2556

    margin_x: int = 80
    margin_top: int = 320
    margin_bottom: int = 160

    cols: int = 19
    rows: int = 20

    gap_ratio: float = 0.55
    dot_fill_ratio: float = 0.78

    emphasis_scale: float = 1.35
    ring_width: float = 3

    enable_progress_ramp: bool = True

    show_footer: bool = True
    footer_gap_ratio: float = 1.6
    footer_size: int = 34
    footer_muted_size: int = 28

    def __post_init__(self):
        for name in ("width", "height", "cols", "rows"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        for name in (
            "margin_x", "margin_top", "margin_bottom",
            "gap_ratio", "dot_fill_ratio", "emphasis_scale", "ring_width",
            "footer_gap_ratio", "footer_size", "footer_muted_size",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")

    @classmethod
    def for_device(cls, device: DeviceProfile, **overrides) -> "LayoutParameters":
        """Layout sized to a device, margins taken from its safe zone."""
        zone = device.safe_zone
        params = cls(
            width=device.width,
            height=device.height,
            margin_x=max(zone.left, zone.right),
            margin_top=zone.top,
            margin_bottom=zone.bottom,
        )
        return replace(params, **overrides) if overrides else params

    @property
    def cell_count(self) -> int:
        return self.cols * self.rows


# ─────────────────────────── Theme ────────────────────────────

@dataclass(frozen=True)
class Theme:
    """
    Colors for the wallpaper.

    bg0, bg1:    Background gradient, top to bottom.
    dot:         Dot fill; per-dot opacity carries past/future.
    accent:      Today's ring.
    today_fill:  Today's translucent fill.
    glow:        Drop shadow around today's marker.
    """
    bg0: str = "#070A0F"
    bg1: str = "#0B1220"
    dot: str = "#FFFFFF"
    accent: str = "#7DD3FC"
    today_fill: str = "rgba(255,255,255,0.22)"
    glow: str = "rgba(125, 211, 252, 0.35)"

    def to_dict(self) -> dict:
        return {
            "background": [self.bg0, self.bg1],
            "dot": self.dot,
            "accent": self.accent,
            "today_fill": self.today_fill,
            "glow": self.glow,
        }


DEFAULT_THEME = Theme()


# ─────────────────────────── Scene ────────────────────────────

@dataclass(frozen=True)
class GridGeometry:
    """Fitted dot field. origin is the top-left corner of the field."""
    diameter: int
    gap: int
    field_width: int
    field_height: int
    origin_x: int
    origin_y: int

    @property
    def step(self) -> int:
        return self.diameter + self.gap

    @property
    def field_center_x(self) -> float:
        return self.origin_x + self.field_width / 2

    @property
    def field_bottom_y(self) -> int:
        return self.origin_y + self.field_height

    def center(self, index: int, cols: int) -> Tuple[float, float]:
        row, col = divmod(index, cols)
        half = self.diameter / 2
        return (
            self.origin_x + col * self.step + half,
            self.origin_y + row * self.step + half,
        )


@dataclass(frozen=True)
class Dot:
    index: int
    day: date
    cx: float
    cy: float
    r: float
    opacity: float
    is_today: bool
    is_past_or_today: bool


@dataclass(frozen=True)
class FooterLine:
    x: float
    y: int
    text: str
    style: str  # "footer" | "footerMuted"


@dataclass(frozen=True)
class Scene:
    """Resolution-independent description of one wallpaper."""
    width: int
    height: int
    calendar: CalendarParameters
    grid: GridGeometry
    dots: Tuple[Dot, ...]
    footer: Tuple[FooterLine, ...] = ()
    ring_width: float = 3
    footer_size: int = 34
    footer_muted_size: int = 28
    theme: Theme = field(default=DEFAULT_THEME)

    @property
    def today(self) -> Dot | None:
        for dot in self.dots:
            if dot.is_today:
                return dot
        return None


# ─────────────────────────── Layout Engine ────────────────────

class LayoutEngine:
    """
    Fits a cols x rows dot field into the canvas minus its margins.

    The diameter is the largest integer for which both the full row
    (cols dots + cols-1 gaps) and the full column fit, so cells stay
    square and the field is as large as the tighter axis allows. The
    field is then centered in the usable area on each axis.
    """

    FLAT_PAST_OPACITY = 0.18
    FLAT_FUTURE_OPACITY = 0.10
    RAMP_START_OPACITY = 0.14
    RAMP_END_OPACITY = 0.26
    RAMP_FUTURE_OPACITY = 0.09
    FOOTER_LINE_SPACING = 1.1

    @classmethod
    def fit(cls, layout: LayoutParameters) -> GridGeometry:
        usable_w = layout.width - 2 * layout.margin_x
        usable_h = layout.height - layout.margin_top - layout.margin_bottom

        denom_w = layout.cols + (layout.cols - 1) * layout.gap_ratio
        denom_h = layout.rows + (layout.rows - 1) * layout.gap_ratio

        diameter = max(0, math.floor(min(usable_w / denom_w, usable_h / denom_h)))
        gap = math.floor(diameter * layout.gap_ratio)

        field_w = layout.cols * diameter + (layout.cols - 1) * gap
        field_h = layout.rows * diameter + (layout.rows - 1) * gap

        return GridGeometry(
            diameter=diameter,
            gap=gap,
            field_width=field_w,
            field_height=field_h,
            origin_x=layout.margin_x + (usable_w - field_w) // 2,
            origin_y=layout.margin_top + (usable_h - field_h) // 2,
        )

    @classmethod
    def opacity(cls, index: int, day_index: int, days_in_year: int, ramp: bool) -> float:
        """Fill opacity of an ordinary (non-today) dot."""
        past = index <= day_index
        if not ramp:
            return cls.FLAT_PAST_OPACITY if past else cls.FLAT_FUTURE_OPACITY
        if not past:
            return cls.RAMP_FUTURE_OPACITY
        progress = _clamp(index / max(1, days_in_year - 1), 0.0, 1.0)
        return _lerp(cls.RAMP_START_OPACITY, cls.RAMP_END_OPACITY, progress)

    @classmethod
    def dots(
        cls, calendar: CalendarParameters, layout: LayoutParameters, grid: GridGeometry
    ) -> Tuple[Dot, ...]:
        days = calendar.days_in_year
        day_index = calendar.day_index
        base_r = (grid.diameter / 2) * layout.dot_fill_ratio

        out = []
        # Cells past the last day stay empty.
        for i in range(min(layout.cell_count, days)):
            cx, cy = grid.center(i, layout.cols)
            day = calendar.day(i)
            is_today = day == calendar.reference_date
            out.append(Dot(
                index=i,
                day=day,
                cx=cx,
                cy=cy,
                r=base_r * layout.emphasis_scale if is_today else base_r,
                opacity=cls.opacity(i, day_index, days, layout.enable_progress_ramp),
                is_today=is_today,
                is_past_or_today=i <= day_index,
            ))
        return tuple(out)

    @classmethod
    def footer(
        cls, calendar: CalendarParameters, layout: LayoutParameters, grid: GridGeometry
    ) -> Tuple[FooterLine, ...]:
        if not layout.show_footer:
            return ()
        y1 = math.floor(grid.field_bottom_y + grid.diameter * layout.footer_gap_ratio)
        y2 = y1 + math.floor(layout.footer_size * cls.FOOTER_LINE_SPACING)
        x = grid.field_center_x
        percent = format_number(calendar.percent_complete)
        return (
            FooterLine(x=x, y=y1, text=f"{calendar.days_remaining} days left", style="footer"),
            FooterLine(x=x, y=y2, text=f"{percent}% completed", style="footerMuted"),
        )


def format_number(value) -> str:
    """Shortest decimal form, integral floats without a trailing '.0'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# ─────────────────────────── Entry points ─────────────────────

def generate(
    calendar: CalendarParameters,
    layout: LayoutParameters | None = None,
    theme: Theme = DEFAULT_THEME,
) -> Scene:
    """Build the scene for one wallpaper. Pure: same inputs, same scene."""
    layout = layout or LayoutParameters()
    grid = LayoutEngine.fit(layout)
    return Scene(
        width=layout.width,
        height=layout.height,
        calendar=calendar,
        grid=grid,
        dots=LayoutEngine.dots(calendar, layout, grid),
        footer=LayoutEngine.footer(calendar, layout, grid),
        ring_width=layout.ring_width,
        footer_size=layout.footer_size,
        footer_muted_size=layout.footer_muted_size,
        theme=theme,
    )


def generate_svg(
    calendar: CalendarParameters,
    layout: LayoutParameters | None = None,
    theme: Theme = DEFAULT_THEME,
) -> str:
    """generate() followed by SVG serialization."""
    from .svg import render_svg

    return render_svg(generate(calendar, layout, theme))
