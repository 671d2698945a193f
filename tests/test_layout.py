from layout import realize_solution
from models import Block, BoundingBox, Solution, UnitBox
from table import Table


def test_boxes_follow_prefix_sums_and_empty_cells_are_skipped():
    units = UnitBox(0, 0, 10, 10)
    tbl = Table(2, 3, [1], [0], units=units, order=5, withjs=True)
    tbl[0, 0] = Block("a")
    tbl[0, 2] = [Block("b0"), Block("b1")]
    tbl[1, 1] = Block("c")

    sol = Solution(
        widths=[10.0, 20.0, 30.0],
        heights=[15.0, 25.0],
        selection={(0, 2): 1},
        objective=35.0,
    )
    root = realize_solution(tbl, sol)

    assert root.units == units
    assert root.order == 5
    assert root.withjs is True
    assert [c.name for c in root.children] == ["a", "b1", "c"]
    assert [c.box.to_tuple() for c in root.children] == [
        (0.0, 0.0, 10.0, 15.0),
        (30.0, 0.0, 30.0, 15.0),
        (10.0, 15.0, 20.0, 25.0),
    ]


def test_candidates_are_copied_not_mutated():
    original = Block("solo", min_width=1, box=BoundingBox(1, 2, 3, 4))
    tbl = Table(1, 1, [0], [0])
    tbl[0, 0] = original

    root = realize_solution(tbl, Solution([50.0], [40.0], {}, 90.0))

    placed = root.children[0]
    assert placed is not original
    assert original.box == BoundingBox(1, 2, 3, 4)
    assert placed.box == BoundingBox(0.0, 0.0, 50.0, 40.0)


def test_edges_are_running_sums():
    sol = Solution([1.0, 2.0, 3.0], [4.0, 5.0], {}, 0.0)
    assert sol.col_edges == [1.0, 3.0, 6.0]
    assert sol.row_edges == [4.0, 9.0]
