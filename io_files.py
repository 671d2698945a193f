"""Helpers for writing layout outputs to disk."""

from __future__ import annotations

import os

from config import CFG
from models import Container


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def write_coords(root: Container, base_dir: str) -> str:
    """Write the position and size of every laid-out block to the configured text file."""

    path = _resolve_output_path(base_dir, CFG.COORDS_OUT, "coords.txt")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    placed = [c for c in root.children if c.box is not None]
    with open(path, "w", encoding="utf-8") as f:
        if not placed:
            f.write("No solution\n")
        else:
            for child in placed:
                x, y, w, h = child.box.to_tuple()
                unit = child.box.unit
                f.write(
                    f"{child.name} @ ({x:.2f},{y:.2f}) size ({w:.2f}×{h:.2f}) {unit}\n"
                )
    return path


def write_layout_view_html(svg: str, legend_html: str, base_dir: str) -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = _resolve_output_path(base_dir, CFG.LAYOUT_HTML, "layout_view.html")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>Table Layout</title></head>
<body>
<h1>Table Layout</h1>
<section>{svg}</section>
<section><h3>Legend</h3><ul>{legend_html}</ul></section>
</body></html>"""
        )
    return path


__all__ = ["write_coords", "write_layout_view_html"]
