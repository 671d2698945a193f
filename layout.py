"""Turn a solved column/row sizing into positioned blocks."""

from __future__ import annotations

from config import CFG
from models import BoundingBox, Container, Solution
from table import Table


def realize_solution(table: Table, solution: Solution) -> Container:
    """Copy the selected candidate of every populated cell into a new container.

    Each copy is given the bounding box of its cell; empty cells are skipped.
    """
    root = Container(
        units=table.units,
        order=table.order,
        withjs=table.withjs,
        withoutjs=table.withoutjs,
    )

    x_edges = solution.col_edges
    y_edges = solution.row_edges

    for i, j, cands in table.populated_cells():
        if len(cands) == 1:
            child = cands[0].copy()
        else:
            child = cands[solution.selection[(i, j)]].copy()
        w = solution.widths[j]
        h = solution.heights[i]
        child.box = BoundingBox(x_edges[j] - w, y_edges[i] - h, w, h, unit=CFG.LENGTH_UNIT)
        root.compose(child)

    return root


__all__ = ["realize_solution"]
