# app.py — JSON preview service for the table layout solver
from __future__ import annotations
import os
import time
import warnings
from typing import Any, Dict, Tuple

from flask import Flask, request, send_from_directory, jsonify

from config import CFG
from io_files import write_coords, write_layout_view_html
from layout import realize_solution
from models import Container, Solution
from render import render_container
from solver.brute_force import InfeasibleLayoutWarning
from solver.orchestrator import solve_table
from table_parser import parse_table

from progress import (
    reset as progress_reset,
    as_json as progress_json,
    start_timer as progress_start,
    set_status, set_done,
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _resolve_output_paths(configured: str, fallback: str) -> Tuple[str, str, str]:
    name = (configured or "").strip() or fallback
    if os.path.isabs(name):
        full_path = name
    else:
        full_path = os.path.abspath(os.path.join(BASE_DIR, name))
    directory = os.path.dirname(full_path) or BASE_DIR
    filename = os.path.basename(full_path) or fallback
    return full_path, directory, filename


_COORDS_FULL_PATH, COORDS_DIR, COORDS_FILENAME = _resolve_output_paths(
    CFG.COORDS_OUT, "coords.txt"
)
_LAYOUT_FULL_PATH, LAYOUT_DIR, LAYOUT_FILENAME = _resolve_output_paths(
    CFG.LAYOUT_HTML, "layout_view.html"
)

app = Flask(__name__)


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    return f"{m}m {s}s"


def _finalize_solver_progress(ok_flag: bool, strategy_text: str) -> None:
    """Write the terminal solver status without clobbering failure states."""

    set_status("Solved" if ok_flag else "Error")
    set_done(ok_flag, reason=strategy_text)


def _solution_payload(solution: Solution, root: Container) -> Dict[str, Any]:
    return {
        "feasible": solution.feasible,
        "strategy": solution.strategy,
        "objective": solution.objective,
        "badness": solution.badness,
        "widths": list(solution.widths),
        "heights": list(solution.heights),
        "selection": [
            {"row": i, "col": j, "candidate": k}
            for (i, j), k in sorted(solution.selection.items())
        ],
        "children": [
            {
                "name": child.name,
                "box": list(child.box.to_tuple()),
                "unit": child.box.unit,
            }
            for child in root.children
        ],
        "units": {
            "x0": root.units.x0,
            "y0": root.units.y0,
            "width": root.units.width,
            "height": root.units.height,
        },
        "order": root.order,
        "withjs": root.withjs,
        "withoutjs": root.withoutjs,
    }


@app.route("/layout", methods=["POST"])
def layout():
    progress_reset()
    progress_start()
    set_status("Solving")
    t0 = time.time()

    payload = request.get_json(silent=True)
    table, width, height, err = parse_table(payload)
    if err or table is None:
        reason = f"Bad table: {err or 'nothing parsed from request'}"
        _finalize_solver_progress(False, reason)
        return jsonify({"ok": False, "reason": reason}), 400

    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", InfeasibleLayoutWarning)
            solution = solve_table(table, width, height)
    except ValueError as e:
        reason = str(e)
        _finalize_solver_progress(False, reason)
        return jsonify({"ok": False, "reason": reason}), 400

    root = realize_solution(table, solution)
    notes = [str(w.message) for w in caught if issubclass(w.category, InfeasibleLayoutWarning)]
    strategy_text = notes[0] if notes else f"Solved via {solution.strategy}"
    _finalize_solver_progress(True, strategy_text)

    svg_markup, legend_html = render_container(root)
    write_coords(root, BASE_DIR)
    write_layout_view_html(svg_markup, legend_html, BASE_DIR)

    body = {"ok": True, "note": strategy_text, "elapsed_str": _fmt_elapsed(time.time() - t0)}
    body.update(_solution_payload(solution, root))
    body["svg"] = svg_markup
    return jsonify(body)


@app.route("/download/coords")
def download_coords():
    return send_from_directory(COORDS_DIR, COORDS_FILENAME, as_attachment=True)


@app.route("/download/html")
def download_html():
    return send_from_directory(LAYOUT_DIR, LAYOUT_FILENAME, as_attachment=True)


@app.route("/progress")
def progress():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
