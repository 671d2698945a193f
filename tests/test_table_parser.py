import pytest

from models import UnitBox
from table_parser import parse_table


def _payload(**overrides):
    payload = {
        "rows": 1,
        "cols": 2,
        "width": 100,
        "height": "40",
        "x_focus": [0, 1],
        "y_focus": {"start": 0, "stop": 1},
        "cells": [
            {"row": 0, "col": 0, "candidates": [{"name": "left", "min_width": "20"}]},
            {"row": 0, "col": 1, "candidates": [{"min_width": 30}, {"min_width": 10, "min_height": 5}]},
        ],
    }
    payload.update(overrides)
    return payload


def test_parse_full_payload():
    table, width, height, err = parse_table(
        _payload(x_prop=[1, 3], order="2", withjs="true", units={"width": 5, "height": 5})
    )
    assert err is None
    assert (width, height) == (100.0, 40.0)
    assert table.shape == (1, 2)
    assert table.x_focus == (0, 1)
    assert table.y_focus == (0,)
    assert table.x_prop == pytest.approx([0.25, 0.75])
    assert table.order == 2
    assert table.withjs is True
    assert table.units == UnitBox(0.0, 0.0, 5.0, 5.0)
    assert [b.name for b in table[0, 0]] == ["left"]
    assert table[0, 0][0].min_width == 20.0
    assert [b.name for b in table[0, 1]] == ["r0c1#0", "r0c1#1"]
    assert table.choice_cells() == [(0, 1)]


def test_single_block_cell_without_candidates_key():
    table, _, _, err = parse_table(
        _payload(cells=[{"row": 0, "col": 1, "name": "solo", "min_height": 7}])
    )
    assert err is None
    assert table[0, 1][0].name == "solo"
    assert table[0, 1][0].min_height == 7.0
    assert table[0, 0] == []


@pytest.mark.parametrize(
    "payload, needle",
    [
        (None, "nothing parsed"),
        ({}, "nothing parsed"),
        (_payload(rows="x"), "rows/cols"),
        (_payload(width=None), "width/height"),
        (_payload(x_focus=None), "x_focus"),
        (_payload(x_prop=[1]), "proportion"),
        (_payload(x_focus=[5]), "focus"),
        (_payload(x_focus={"start": 0, "stop": 1e12}), "focus"),
        (_payload(y_focus={"start": 3, "stop": 3}), "empty"),
        (_payload(x_prop=["nan", 1]), "proportion"),
        (_payload(cells=[{"row": 3, "col": 0}]), "outside"),
        (_payload(cells=["junk"]), "Bad cell"),
    ],
)
def test_parse_errors_are_reported(payload, needle):
    table, _, _, err = parse_table(payload)
    assert table is None
    assert needle in err
