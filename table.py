# table.py — grid of candidate blocks plus the focus band to maximise
from __future__ import annotations

import math
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from models import Block, Cell, UnitBox


class TableError(ValueError):
    """Raised when a table cannot be constructed or indexed."""


def _normalize_focus(focus: Iterable[int], limit: int, axis: str) -> Tuple[int, ...]:
    out: List[int] = []
    seen = set()
    try:
        for raw in focus:
            k = int(raw)
            if k < 0 or k >= limit:
                raise TableError(f"Bad {axis} focus: index {k} outside 0..{limit - 1}")
            if k in seen:
                raise TableError(f"Bad {axis} focus: duplicate index {k}")
            seen.add(k)
            out.append(k)
    except TableError:
        raise
    except Exception as e:
        raise TableError(f"Bad {axis} focus: {e}") from e
    if not out:
        raise TableError(f"Bad {axis} focus: empty range")
    return tuple(out)


def _normalize_prop(prop: Optional[Sequence[float]], focus: Tuple[int, ...], axis: str) -> Optional[List[float]]:
    if prop is None:
        return None
    weights = [float(p) for p in prop]
    if len(weights) != len(focus):
        raise TableError(
            f"Bad {axis} proportion: {len(weights)} weights for {len(focus)} focus indices"
        )
    if not all(math.isfinite(p) and p > 0 for p in weights):
        raise TableError(f"Bad {axis} proportion: weights must be positive and finite")
    total = sum(weights)
    return [p / total for p in weights]


class Table:
    """An m × n grid whose cells hold lists of candidate blocks.

    ``x_focus`` / ``y_focus`` name the columns / rows (0-based) whose combined
    size the solver maximises.  ``x_prop`` / ``y_prop`` optionally fix the
    ratio between those focus columns / rows and are normalised to sum to 1.
    ``units``, ``order``, ``withjs`` and ``withoutjs`` are forwarded untouched
    to the container produced by the layout.
    """

    def __init__(
        self,
        m: int,
        n: int,
        x_focus: Iterable[int],
        y_focus: Iterable[int],
        *,
        x_prop: Optional[Sequence[float]] = None,
        y_prop: Optional[Sequence[float]] = None,
        units: Optional[UnitBox] = None,
        order: int = 0,
        withjs: bool = False,
        withoutjs: bool = False,
    ) -> None:
        try:
            m, n = int(m), int(n)
        except Exception as e:
            raise TableError("Bad grid: m/n must be integers") from e
        if m <= 0 or n <= 0:
            raise TableError("Bad grid: m/n must be positive")

        self.m = m
        self.n = n
        self.x_focus = _normalize_focus(x_focus, n, "x")
        self.y_focus = _normalize_focus(y_focus, m, "y")
        self.x_prop = _normalize_prop(x_prop, self.x_focus, "x")
        self.y_prop = _normalize_prop(y_prop, self.y_focus, "y")
        self.units = units if units is not None else UnitBox()
        self.order = int(order)
        self.withjs = bool(withjs)
        self.withoutjs = bool(withoutjs)
        self.children: List[List[List[Block]]] = [[[] for _ in range(n)] for _ in range(m)]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.m, self.n

    def _check_index(self, key) -> Cell:
        try:
            i, j = key
            i, j = int(i), int(j)
        except Exception as e:
            raise TableError(f"Bad cell index: {key!r}") from e
        if not (0 <= i < self.m and 0 <= j < self.n):
            raise TableError(f"Cell index {(i, j)} outside {self.m} × {self.n} grid")
        return i, j

    def __getitem__(self, key) -> List[Block]:
        i, j = self._check_index(key)
        return self.children[i][j]

    def __setitem__(self, key, value) -> None:
        i, j = self._check_index(key)
        if value is None:
            blocks: List[Block] = []
        elif isinstance(value, Block) or hasattr(value, "min_width"):
            blocks = [value]
        else:
            try:
                blocks = list(value)
            except TypeError as e:
                raise TableError(f"Cell {(i, j)}: not a block or list of blocks: {value!r}") from e
        for b in blocks:
            if not hasattr(b, "min_width") or not hasattr(b, "min_height"):
                raise TableError(f"Cell {(i, j)}: not a block: {b!r}")
        self.children[i][j] = blocks

    def populated_cells(self) -> Iterator[Tuple[int, int, List[Block]]]:
        """Yield ``(i, j, candidates)`` for every non-empty cell, row-major."""
        for i in range(self.m):
            for j in range(self.n):
                cands = self.children[i][j]
                if cands:
                    yield i, j, cands

    def choice_cells(self) -> List[Cell]:
        """Cells holding more than one candidate, in row-major order."""
        return [(i, j) for i, j, cands in self.populated_cells() if len(cands) > 1]

    def __repr__(self) -> str:
        return (
            f"Table({self.m}x{self.n}, x_focus={list(self.x_focus)}, "
            f"y_focus={list(self.y_focus)}, choices={len(self.choice_cells())})"
        )