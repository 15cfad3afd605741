"""SVG serialization of a wallpaper Scene."""

from __future__ import annotations

from xml.sax.saxutils import escape

from .wallpaper import Dot, FooterLine, Scene, format_number as _n

FONT_STACK = "ui-sans-serif, -apple-system, system-ui, Segoe UI, Roboto, Helvetica, Arial"


def _dot(dot: Dot) -> str:
    if dot.is_today:
        return f"""
    <g class="todayGlow">
      <circle class="todayFill" cx="{_n(dot.cx)}" cy="{_n(dot.cy)}" r="{_n(dot.r)}" />
      <circle class="todayRing" cx="{_n(dot.cx)}" cy="{_n(dot.cy)}" r="{_n(dot.r)}" />
    </g>"""
    return (
        f'\n    <circle class="dot" cx="{_n(dot.cx)}" cy="{_n(dot.cy)}" '
        f'r="{_n(dot.r)}" fill-opacity="{_n(dot.opacity)}" />'
    )


def _text(line: FooterLine) -> str:
    return f"""
  <text class="{line.style}" x="{_n(line.x)}" y="{line.y}" text-anchor="middle">
    {escape(line.text)}
  </text>"""


def _style(scene: Scene) -> str:
    t = scene.theme
    return f"""    <style>
      :root {{
        --bg0: {t.bg0};
        --bg1: {t.bg1};

        --dot: {t.dot};

        --accent: {t.accent};
        --todayFill: {t.today_fill};
        --ringW: {_n(scene.ring_width)}px;
      }}

      .bg {{ fill: url(#bgGrad); }}

      .dot {{ fill: var(--dot); }}

      .todayFill {{ fill: var(--todayFill); }}
      .todayRing {{ fill: none; stroke: var(--accent); stroke-width: var(--ringW); }}
      .todayGlow {{ filter: drop-shadow(0 0 18px {t.glow}); }}

      .footer {{
        fill: rgba(255,255,255,0.80);
        font-family: {FONT_STACK};
        font-weight: 700;
        font-size: {scene.footer_size}px;
        letter-spacing: 0.5px;
      }}
      .footerMuted {{
        fill: rgba(255,255,255,0.52);
        font-family: {FONT_STACK};
        font-weight: 600;
        font-size: {scene.footer_muted_size}px;
        letter-spacing: 0.3px;
      }}
    </style>"""


def render_svg(scene: Scene) -> str:
    """Serialize the scene as a standalone SVG document."""
    w, h = scene.width, scene.height
    dots = "".join(_dot(d) for d in scene.dots)
    footer = "".join(_text(line) for line in scene.footer)

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}">
  <defs>
{_style(scene)}

    <linearGradient id="bgGrad" x1="0" y1="0" x2="0" y2="1">
      <stop offset="0%" stop-color="var(--bg0)" />
      <stop offset="100%" stop-color="var(--bg1)" />
    </linearGradient>
  </defs>

  <rect class="bg" x="0" y="0" width="{w}" height="{h}"/>

  <g id="dots">
    {dots}
  </g>

  {footer}
</svg>"""
