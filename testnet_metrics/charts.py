from datetime import date
from html import escape
from typing import List

from .views import ChartPoint

WIDTH = 640
HEIGHT = 320
MARGIN_LEFT = 48
MARGIN_RIGHT = 16
MARGIN_TOP = 16
MARGIN_BOTTOM = 36
GRID_LINES = 4
LINE_COLOR = "#7afbaf"


def _y_ticks(max_value: int) -> List[int]:
    step = max(1, -(-max_value // GRID_LINES))
    return [step * i for i in range(GRID_LINES + 1)]


def _tooltip(point: ChartPoint) -> str:
    day = date.fromisoformat(point.date)
    return f"{day:%b} {day.day}, {day.year}: {point.value} nodes"


def generate_line_chart_svg(points: List[ChartPoint]) -> str:
    """Generate an SVG line chart of new node records per day."""
    plot_w = WIDTH - MARGIN_LEFT - MARGIN_RIGHT
    plot_h = HEIGHT - MARGIN_TOP - MARGIN_BOTTOM
    ticks = _y_ticks(max((p.value for p in points), default=0))
    y_max = ticks[-1]

    def x_at(i):
        if len(points) == 1:
            return MARGIN_LEFT + plot_w / 2
        return MARGIN_LEFT + plot_w * i / (len(points) - 1)

    def y_at(value):
        return MARGIN_TOP + plot_h - plot_h * value / y_max

    svg_parts = [f'<svg class="chart" viewBox="0 0 {WIDTH} {HEIGHT}" preserveAspectRatio="none" role="img">']

    # Horizontal grid with y axis labels
    for tick in ticks:
        y = y_at(tick)
        svg_parts.append(f'''
            <line x1="{MARGIN_LEFT}" y1="{y:.1f}" x2="{WIDTH - MARGIN_RIGHT}" y2="{y:.1f}"
                  stroke="#333" stroke-dasharray="3 3"/>
            <text x="{MARGIN_LEFT - 10}" y="{y:.1f}" fill="#666" font-size="12"
                  text-anchor="end" dominant-baseline="middle">{tick}</text>
        ''')

    # X axis labels, thinned out so long timeframes stay readable
    label_every = max(1, len(points) // 7)
    for i, point in enumerate(points):
        if i % label_every:
            continue
        svg_parts.append(f'''
            <text x="{x_at(i):.1f}" y="{HEIGHT - MARGIN_BOTTOM + 22}" fill="#666" font-size="12"
                  text-anchor="middle">{escape(point.label)}</text>
        ''')

    coords = " ".join(f"{x_at(i):.1f},{y_at(p.value):.1f}" for i, p in enumerate(points))
    svg_parts.append(f'<polyline points="{coords}" fill="none" stroke="{LINE_COLOR}" stroke-width="2"/>')

    # Invisible hover targets carrying the tooltip
    for i, point in enumerate(points):
        svg_parts.append(f'''
            <circle cx="{x_at(i):.1f}" cy="{y_at(point.value):.1f}" r="6" fill="{LINE_COLOR}" opacity="0">
                <title>{escape(_tooltip(point))}</title>
            </circle>
        ''')

    svg_parts.append('</svg>')
    return '\n'.join(svg_parts)
