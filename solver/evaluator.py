# solver/evaluator.py — sizing model shared by the exhaustive and exact strategies
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from models import Block, Cell
from table import Table

Choice = Dict[Cell, int]


def _min_width(block: Block) -> Optional[float]:
    v = getattr(block, "min_width", None)
    return None if v is None else float(v)


def _min_height(block: Block) -> Optional[float]:
    v = getattr(block, "min_height", None)
    return None if v is None else float(v)


@dataclass(frozen=True)
class Evaluation:
    min_col_widths: Tuple[float, ...]
    min_row_heights: Tuple[float, ...]
    focus_col_widths: Tuple[float, ...]
    focus_row_heights: Tuple[float, ...]
    objective: float
    feasible: bool
    badness: float


class SizingEvaluator:
    """Scores one concrete candidate choice against an available area.

    A *choice* maps every multi-candidate cell ``(i, j)`` to the index of its
    selected candidate; cells with a single candidate need no entry.  Nothing
    is cached between calls, so one evaluator can score any number of
    choices in any order.
    """

    def __init__(self, table: Table) -> None:
        self.table = table

    def chosen(self, choice: Choice, i: int, j: int) -> Optional[Block]:
        cands = self.table.children[i][j]
        if not cands:
            return None
        if len(cands) == 1:
            return cands[0]
        return cands[choice[(i, j)]]

    def min_sizes(self, choice: Choice) -> Tuple[List[float], List[float]]:
        """Minimum width per column and minimum height per row.

        Each entry is the largest defined minimum among the chosen blocks in
        that column / row, so every chosen block fits; lines without any
        defined minimum get 0.
        """
        m, n = self.table.shape
        cols: List[Optional[float]] = [None] * n
        rows: List[Optional[float]] = [None] * m
        for i, j, _ in self.table.populated_cells():
            block = self.chosen(choice, i, j)
            mw, mh = _min_width(block), _min_height(block)
            if mw is not None and (cols[j] is None or mw > cols[j]):
                cols[j] = mw
            if mh is not None and (rows[i] is None or mh > rows[i]):
                rows[i] = mh
        return (
            [0.0 if v is None else v for v in cols],
            [0.0 if v is None else v for v in rows],
        )

    @staticmethod
    def focus_split(
        mins: Sequence[float],
        focus: Sequence[int],
        prop: Optional[Sequence[float]],
        available: float,
    ) -> List[float]:
        """Share the space left by the non-focus minimums among the focus lines."""
        focus_min = sum(mins[k] for k in focus)
        total = available - sum(mins) + focus_min
        if prop is not None:
            return [p * total for p in prop]
        extra = (total - focus_min) / len(focus)
        return [mins[k] + extra for k in focus]

    def evaluate(self, choice: Choice, width: float, height: float) -> Evaluation:
        t = self.table
        min_cols, min_rows = self.min_sizes(choice)
        focus_cols = self.focus_split(min_cols, t.x_focus, t.x_prop, width)
        focus_rows = self.focus_split(min_rows, t.y_focus, t.y_prop, height)

        min_w = sum(min_cols)
        min_h = sum(min_rows)
        objective = sum(focus_cols) + sum(focus_rows)

        feasible = (
            min_w < width
            and min_h < height
            and all(fw >= min_cols[j] for fw, j in zip(focus_cols, t.x_focus))
            and all(fh >= min_rows[i] for fh, i in zip(focus_rows, t.y_focus))
        )
        badness = 0.0 if feasible else max(min_w - width, 0.0) + max(min_h - height, 0.0)

        return Evaluation(
            tuple(min_cols), tuple(min_rows),
            tuple(focus_cols), tuple(focus_rows),
            objective, feasible, badness,
        )

    def widths(self, ev: Evaluation) -> List[float]:
        out = list(ev.min_col_widths)
        for k, j in enumerate(self.table.x_focus):
            out[j] = ev.focus_col_widths[k]
        return out

    def heights(self, ev: Evaluation) -> List[float]:
        out = list(ev.min_row_heights)
        for k, i in enumerate(self.table.y_focus):
            out[i] = ev.focus_row_heights[k]
        return out
