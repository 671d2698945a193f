# Orchestrator: exact MILP strategy with exhaustive fallback
from __future__ import annotations

import logging
from typing import Optional

from config import CFG
from layout import realize_solution
from models import Container, Solution
from progress import _emit_log, set_strategy
from solver.brute_force import solve_brute_force
from solver.milp import exact_backend_available, solve_milp
from table import Table

log = logging.getLogger(__name__)


class LayoutStrategy:
    """Common contract: ``solve`` returns a Solution, or ``None`` to defer."""

    name = "base"

    def solve(self, table: Table, width: float, height: float) -> Optional[Solution]:
        raise NotImplementedError


class BruteForceStrategy(LayoutStrategy):
    name = "brute_force"

    def solve(self, table: Table, width: float, height: float) -> Optional[Solution]:
        return solve_brute_force(table, width, height)


class ExactStrategy(LayoutStrategy):
    name = "milp"

    def __init__(
        self,
        backend: Optional[str] = None,
        time_limit_s: Optional[float] = None,
        integrality_tol: Optional[float] = None,
    ) -> None:
        self.backend = CFG.EXACT_BACKEND if backend is None else backend
        self.time_limit_s = time_limit_s
        self.integrality_tol = integrality_tol

    def solve(self, table: Table, width: float, height: float) -> Optional[Solution]:
        return solve_milp(
            table,
            width,
            height,
            backend=self.backend,
            time_limit_s=self.time_limit_s,
            integrality_tol=self.integrality_tol,
        )


def default_strategy() -> LayoutStrategy:
    backend = (CFG.EXACT_BACKEND or "").strip()
    if backend and exact_backend_available(backend):
        return ExactStrategy(backend)
    return BruteForceStrategy()


def _check_area(width: float, height: float) -> None:
    try:
        w, h = float(width), float(height)
    except Exception as e:
        raise ValueError(f"Bad area: width/height must be numbers ({e})") from e
    if not (w > 0 and h > 0):
        raise ValueError(f"Bad area: width/height must be positive, got {width} × {height}")


def solve_table(
    table: Table,
    width: float,
    height: float,
    strategy: Optional[LayoutStrategy] = None,
) -> Solution:
    """Solve ``table`` for the given area.

    The configured strategy runs first; whenever it defers (returns ``None``)
    the exhaustive search produces the answer instead.
    """
    _check_area(width, height)
    strategy = strategy or default_strategy()

    set_strategy(strategy.name)
    solution = strategy.solve(table, width, height)
    if solution is None:
        if isinstance(strategy, BruteForceStrategy):
            raise RuntimeError("Exhaustive search returned no solution")
        log.info("Strategy %s deferred; running exhaustive search", strategy.name)
        _emit_log("Strategy fallback", source=strategy.name, target="brute_force")
        set_strategy(BruteForceStrategy.name)
        solution = solve_brute_force(table, width, height)
    return solution


def realize(
    table: Table,
    width: float,
    height: float,
    strategy: Optional[LayoutStrategy] = None,
) -> Container:
    """Lay out ``table`` in a ``width`` × ``height`` area and return the container."""
    solution = solve_table(table, width, height, strategy)
    return realize_solution(table, solution)


__all__ = [
    "BruteForceStrategy",
    "ExactStrategy",
    "LayoutStrategy",
    "default_strategy",
    "realize",
    "solve_table",
]
