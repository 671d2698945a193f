# solver/milp.py — exact table layout as a mixed integer linear program
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from ortools.linear_solver import pywraplp

from config import CFG
from models import Solution
from progress import _emit_log, set_best_objective, set_feasible
from solver.evaluator import _min_height, _min_width
from table import Table

log = logging.getLogger(__name__)

_SOLVED = (pywraplp.Solver.OPTIMAL, pywraplp.Solver.FEASIBLE)


def exact_backend_available(backend: Optional[str] = None) -> bool:
    """Return ``True`` when OR-Tools can instantiate the named MIP backend."""
    name = (CFG.EXACT_BACKEND if backend is None else backend) or ""
    if not name.strip():
        return False
    return pywraplp.Solver.CreateSolver(name.strip()) is not None


def is_approx_integer(x: float, tol: float) -> bool:
    return abs(x - round(x)) < tol


def _add_proportions(solver, vars_, focus, prop, label: str) -> None:
    if prop is None:
        return
    first = focus[0]
    for k in range(1, len(focus)):
        # vars[f1] / prop[0] == vars[fk] / prop[k], multiplied out
        solver.Add(
            vars_[first] * prop[k] == vars_[focus[k]] * prop[0],
            f"{label}_prop_{k}",
        )


def solve_milp(
    table: Table,
    width: float,
    height: float,
    *,
    backend: Optional[str] = None,
    time_limit_s: Optional[float] = None,
    integrality_tol: Optional[float] = None,
    sum_tol: Optional[float] = None,
) -> Optional[Solution]:
    """Solve the layout exactly.

    Returns ``None`` when the backend is missing, the model is infeasible,
    the candidate selection comes back fractional, or the returned sizes miss
    the available area by more than ``sum_tol``; the caller is expected to
    fall back to the exhaustive search in those cases.

    When several focus lines have no proportion constraint, any split of the
    slack among them is optimal and the backend picks one.  The objective is
    the same as the exhaustive search's, the individual focus sizes may not be.
    """
    backend = (CFG.EXACT_BACKEND if backend is None else backend).strip()
    time_limit_s = CFG.EXACT_TIME_LIMIT_S if time_limit_s is None else float(time_limit_s)
    tol = CFG.INTEGRALITY_TOL if integrality_tol is None else float(integrality_tol)
    sum_tol = CFG.SUM_TOL if sum_tol is None else float(sum_tol)
    width = float(width)
    height = float(height)

    solver = pywraplp.Solver.CreateSolver(backend) if backend else None
    if solver is None:
        log.info("MIP backend %r unavailable", backend)
        return None

    m, n = table.shape

    # 0-1 configuration variables for every cell with multiple candidates
    c_index: List[Tuple[int, int, int]] = []
    for i, j in table.choice_cells():
        for k in range(len(table[i, j])):
            c_index.append((i, j, k))
    c = [solver.BoolVar(f"c_{i}_{j}_{k}") for i, j, k in c_index]

    w = [solver.NumVar(0.0, width, f"w_{j}") for j in range(n)]
    h = [solver.NumVar(0.0, height, f"h_{i}") for i in range(m)]

    solver.Maximize(
        solver.Sum([w[j] for j in table.x_focus]) + solver.Sum([h[i] for i in table.y_focus])
    )

    _add_proportions(solver, w, table.x_focus, table.x_prop, "w")
    _add_proportions(solver, h, table.y_focus, table.y_prop, "h")

    # candidates of one cell are mutually exclusive
    groups: Dict[Tuple[int, int], List[int]] = {}
    for l, (i, j, _k) in enumerate(c_index):
        groups.setdefault((i, j), []).append(l)
    for (i, j), ls in groups.items():
        solver.Add(solver.Sum([c[l] for l in ls]) == 1, f"one_{i}_{j}")

    # an unselected candidate imposes nothing
    for l, (i, j, k) in enumerate(c_index):
        block = table[i, j][k]
        minw, minh = _min_width(block), _min_height(block)
        if minw is not None:
            solver.Add(w[j] >= minw * c[l])
        if minh is not None:
            solver.Add(h[i] >= minh * c[l])

    for i, j, cands in table.populated_cells():
        if len(cands) != 1:
            continue
        minw, minh = _min_width(cands[0]), _min_height(cands[0])
        if minw is not None:
            solver.Add(w[j] >= minw)
        if minh is not None:
            solver.Add(h[i] >= minh)

    solver.Add(solver.Sum(w) == width, "width_total")
    solver.Add(solver.Sum(h) == height, "height_total")

    if time_limit_s and time_limit_s > 0:
        solver.SetTimeLimit(int(time_limit_s * 1000))

    _emit_log(
        "MILP started",
        backend=backend,
        table=repr(table),
        binaries=len(c),
    )
    status = solver.Solve()

    if status not in _SOLVED:
        log.info("MILP status %s; deferring to exhaustive search", status)
        _emit_log("MILP finished", status=status, outcome="defer")
        return None

    c_values = [v.solution_value() for v in c]
    if not all(is_approx_integer(x, tol) for x in c_values):
        log.info("MILP returned a fractional candidate selection; deferring")
        _emit_log("MILP finished", status=status, outcome="fractional")
        return None

    selection: Dict[Tuple[int, int], int] = {}
    for (i, j, k), x in zip(c_index, c_values):
        if round(x) == 1:
            selection[(i, j)] = k

    widths = [v.solution_value() for v in w]
    heights = [v.solution_value() for v in h]
    if abs(sum(widths) - width) > sum_tol or abs(sum(heights) - height) > sum_tol:
        log.info("MILP sizes miss the area (%g x %g); deferring", sum(widths), sum(heights))
        _emit_log("MILP finished", status=status, outcome="sum_mismatch")
        return None
    objective = sum(widths[j] for j in table.x_focus) + sum(heights[i] for i in table.y_focus)

    set_best_objective(objective)
    set_feasible(True)
    _emit_log("MILP finished", status=status, outcome="solved", objective=f"{objective:.6g}")
    return Solution(
        widths=widths,
        heights=heights,
        selection=selection,
        objective=objective,
        feasible=True,
        strategy="milp",
    )


__all__ = ["exact_backend_available", "is_approx_integer", "solve_milp"]
