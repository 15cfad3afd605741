"""
Command-line wallpaper generator.

Writes, into the output directory:
  - year-dots-{year}-{device}.svg and/or .png
  - progress.json  (reference day, progress metrics, theme colors)
"""

from __future__ import annotations

import argparse
import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional

from . import raster
from .config import Settings
from .fonts import FontCache
from .log import setup_logging
from .svg import render_svg
from .wallpaper import (
    DEVICES,
    CalendarParameters,
    LayoutParameters,
    Scene,
    format_number,
    generate,
)


def export_metadata(scene: Scene, now: datetime, output_dir: Path) -> Path:
    """Save progress metadata as JSON. Returns the written path."""
    cal = scene.calendar
    meta = {
        "generated_at": now.isoformat(),
        "year": cal.year,
        "today": cal.reference_date.isoformat(),
        "in_year": cal.in_year,
        "days_in_year": cal.days_in_year,
        "days_completed": cal.days_completed,
        "days_left": cal.days_remaining,
        "percent_complete": cal.percent_complete,
        "size": [scene.width, scene.height],
        "theme": scene.theme.to_dict(),
    }
    meta_path = output_dir / "progress.json"
    meta_path.write_text(json.dumps(meta, indent=2))
    print(f"  Metadata:  {meta_path}")
    return meta_path


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="year-wallpaper",
        description="Render a year-progress dot calendar wallpaper.",
    )
    parser.add_argument("--year", type=int, help="Year to draw (default: current UTC year)")
    parser.add_argument(
        "--today", type=date.fromisoformat,
        help="Day to highlight, YYYY-MM-DD (default: current UTC date)",
    )
    parser.add_argument(
        "--device", choices=sorted(DEVICES), default="iphone15pro",
        help="Screen size and safe zones preset",
    )
    parser.add_argument("--width", type=int, help="Override the device width")
    parser.add_argument("--height", type=int, help="Override the device height")
    parser.add_argument("--format", choices=("svg", "png", "both"), default="both")
    parser.add_argument("--output-dir", type=Path, default=Path(settings.output_dir))
    parser.add_argument(
        "--font-url", default=settings.font_url,
        help="Font embedded in PNG output (empty string: none)",
    )
    parser.add_argument("--no-ramp", action="store_true", help="Flat past/future opacity")
    parser.add_argument("--no-footer", action="store_true", help="Omit the footer text")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point."""
    settings = Settings.from_env()
    args = build_parser(settings).parse_args(argv)
    setup_logging(settings.log_level)

    now = datetime.now(timezone.utc)
    today = args.today or now.date()
    year = args.year or today.year

    device = DEVICES[args.device]
    overrides = {
        "enable_progress_ramp": not args.no_ramp,
        "show_footer": not args.no_footer,
    }
    if args.width:
        overrides["width"] = args.width
    if args.height:
        overrides["height"] = args.height
    layout = LayoutParameters.for_device(device, **overrides)

    calendar = CalendarParameters(year=year, reference_date=today)
    scene = generate(calendar, layout)

    output_dir: Path = args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = f"year-dots-{year}-{device.slug}"

    print(f"Generating {year} for {device.name} ({layout.width}x{layout.height})")
    print(
        f"  Today={today.isoformat()}  Left={calendar.days_remaining}  "
        f"Done={format_number(calendar.percent_complete)}%"
    )

    svg = render_svg(scene)
    if args.format in ("svg", "both"):
        path = output_dir / f"{stem}.svg"
        path.write_text(svg, encoding="utf-8")
        print(f"  Wrote: {path}")

    if args.format in ("png", "both"):
        font_bytes = FontCache(timeout=settings.font_timeout).get(args.font_url)
        png = raster.render(svg, font_bytes, theme=scene.theme, ring_width=layout.ring_width)
        path = output_dir / f"{stem}.png"
        path.write_bytes(png)
        print(f"  Wrote: {path}")

    export_metadata(scene, now, output_dir)

    print("\nDone.")


if __name__ == "__main__":
    main()
