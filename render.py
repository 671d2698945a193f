import random
from html import escape
from typing import Dict, Optional, Tuple

from config import CFG
from models import Container

def _color(name: str) -> str:
    rng = random.Random(sum(name.encode("utf-8")) * 7919 + len(name))
    r = rng.randint(40, 200)
    g = rng.randint(40, 200)
    b = rng.randint(40, 200)
    return f"rgb({r},{g},{b})"

def render_container(root: Container, scale: Optional[float] = None) -> Tuple[str, str]:
    """Return ``(svg, legend_html)`` for a laid-out container."""
    scale = CFG.SVG_SCALE if scale is None else float(scale)

    palette: Dict[str, str] = {}
    for child in root.children:
        palette.setdefault(child.name, _color(child.name))

    x1 = max((c.box.x0 + c.box.width for c in root.children if c.box), default=0.0)
    y1 = max((c.box.y0 + c.box.height for c in root.children if c.box), default=0.0)
    svg_w = int(x1 * scale) + 2
    svg_h = int(y1 * scale) + 2

    rects = []
    for child in root.children:
        if child.box is None:
            continue
        x0, y0, w0, h0 = child.box.to_tuple()
        x = int(x0 * scale)
        y = int(y0 * scale)
        w = int(w0 * scale)
        h = int(h0 * scale)
        label = escape(child.name)
        rects.append(
            f'<rect x="{x}" y="{y}" width="{w}" height="{h}" fill="{palette[child.name]}" stroke="black" stroke-width="1"/>'
            f'<text x="{x+4}" y="{y+14}" font-size="12" fill="black">{label}</text>'
        )
    frame = f'<rect x="1" y="1" width="{svg_w-2}" height="{svg_h-2}" fill="none" stroke="black" stroke-width="2"/>'
    svg = (
        f'<svg class="layout-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{frame}{"".join(rects)}</svg>'
    )

    legend = "".join(
        f"<li><span class='swatch' style='background:{c}'></span>{escape(n)}</li>"
        for n, c in palette.items()
    )
    return svg, legend
