# solver/brute_force.py — exhaustive search over candidate combinations
from __future__ import annotations

import itertools
import logging
import math
import warnings
from typing import Optional

from config import CFG
from models import Solution
from progress import _emit_log, set_best_objective, set_combinations, set_feasible
from solver.evaluator import Choice, Evaluation, SizingEvaluator
from table import Table

log = logging.getLogger(__name__)


class InfeasibleLayoutWarning(UserWarning):
    """The table cannot be laid out at the requested size; best effort returned."""


def count_combinations(table: Table) -> int:
    return math.prod(len(table[cell]) for cell in table.choice_cells())


def iter_choices(table: Table):
    """Yield every choice in a fixed order.

    Cells are taken row-major and candidate indices ascend, the last cell
    varying fastest (``itertools.product`` order).  Ties between equally good
    combinations are resolved in favour of the first one yielded.
    """
    cells = table.choice_cells()
    ranges = [range(len(table[cell])) for cell in cells]
    for combo in itertools.product(*ranges):
        yield dict(zip(cells, combo))


def solution_from_evaluation(
    evaluator: SizingEvaluator, choice: Choice, ev: Evaluation, strategy: str
) -> Solution:
    return Solution(
        widths=evaluator.widths(ev),
        heights=evaluator.heights(ev),
        selection=dict(choice),
        objective=ev.objective,
        feasible=ev.feasible,
        badness=ev.badness,
        strategy=strategy,
    )


def solve_brute_force(table: Table, width: float, height: float) -> Solution:
    """Score every candidate combination and keep the best one.

    The best feasible combination (largest objective) wins.  If nothing is
    feasible, the combination with the least badness is laid out anyway and
    an :class:`InfeasibleLayoutWarning` is issued.
    """
    width = float(width)
    height = float(height)
    evaluator = SizingEvaluator(table)

    total = count_combinations(table)
    if total > CFG.BRUTE_FORCE_WARN_COMBOS:
        log.warning("Exhaustive layout search over %d combinations", total)
    _emit_log("Brute force started", table=repr(table), combinations=total)

    best_choice: Optional[Choice] = None
    max_objective = 0.0
    min_badness = math.inf
    feasible = False
    seen = 0

    for choice in iter_choices(table):
        seen += 1
        ev = evaluator.evaluate(choice, width, height)
        if ev.feasible:
            if ev.objective > max_objective or not feasible:
                max_objective = ev.objective
                min_badness = 0.0
                best_choice = choice
            feasible = True
        elif not feasible and ev.badness < min_badness:
            min_badness = ev.badness
            best_choice = choice

    set_combinations(seen)

    if best_choice is None:
        # NaN minimums never compare; lay out the first combination.
        best_choice = next(iter_choices(table))

    if not feasible:
        msg = f"Table cannot be correctly laid out at {width:g} × {height:g}"
        log.warning("%s (badness %.6g)", msg, min_badness)
        warnings.warn(msg, InfeasibleLayoutWarning, stacklevel=2)

    ev = evaluator.evaluate(best_choice, width, height)
    solution = solution_from_evaluation(evaluator, best_choice, ev, "brute_force")
    set_best_objective(solution.objective)
    set_feasible(solution.feasible)
    _emit_log(
        "Brute force finished",
        combinations=seen,
        objective=f"{solution.objective:.6g}",
        feasible=solution.feasible,
        badness=None if solution.feasible else f"{solution.badness:.6g}",
    )
    return solution


__all__ = [
    "InfeasibleLayoutWarning",
    "count_combinations",
    "iter_choices",
    "solve_brute_force",
]
