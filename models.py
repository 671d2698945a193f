
from dataclasses import dataclass, field, replace
from itertools import accumulate
from typing import Any, Dict, List, Optional, Tuple

from config import CFG

Cell = Tuple[int, int]


@dataclass(frozen=True)
class BoundingBox:
    x0: float
    y0: float
    width: float
    height: float
    unit: str = CFG.LENGTH_UNIT

    def to_tuple(self):
        return (
            round(self.x0, 6),
            round(self.y0, 6),
            round(self.width, 6),
            round(self.height, 6),
        )


@dataclass(frozen=True)
class UnitBox:
    """Coordinate system a container declares for its children."""
    x0: float = 0.0
    y0: float = 0.0
    width: float = 1.0
    height: float = 1.0


@dataclass
class Block:
    """A renderable candidate for one table cell."""
    name: str
    min_width: Optional[float] = None
    min_height: Optional[float] = None
    box: Optional[BoundingBox] = None
    payload: Any = None

    def copy(self) -> "Block":
        return replace(self)


@dataclass
class Container:
    units: UnitBox = field(default_factory=UnitBox)
    order: int = 0
    withjs: bool = False
    withoutjs: bool = False
    children: List[Block] = field(default_factory=list)

    def compose(self, child: Block) -> "Container":
        self.children.append(child)
        return self


@dataclass
class Solution:
    widths: List[float]
    heights: List[float]
    selection: Dict[Cell, int]
    objective: float
    feasible: bool = True
    badness: float = 0.0
    strategy: str = ""

    @property
    def col_edges(self) -> List[float]:
        return list(accumulate(self.widths))

    @property
    def row_edges(self) -> List[float]:
        return list(accumulate(self.heights))
