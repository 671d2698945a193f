# table_parser.py — tolerant JSON → Table parser for the preview service
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from models import Block, UnitBox
from table import Table, TableError

ParseResult = Tuple[Optional[Table], float, float, Optional[str]]


def _to_float(x: Any) -> Optional[float]:
    try:
        return float(x)
    except Exception:
        return None


def _to_int(x: Any) -> Optional[int]:
    try:
        return int(float(x))
    except Exception:
        return None


def _to_bool(x: Any) -> bool:
    if isinstance(x, str):
        return x.strip().lower() in ("1", "true", "yes", "on")
    return bool(x)


def _first(payload: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in payload and payload[k] is not None:
            return payload[k]
    return None


def _parse_focus(raw: Any) -> Optional[Iterable[int]]:
    """Accept ``[0, 1]``, ``{"start": 0, "stop": 2}`` or a bare index."""
    if raw is None:
        return None
    if isinstance(raw, dict):
        start = _to_int(raw.get("start"))
        stop = _to_int(raw.get("stop"))
        if start is None or stop is None:
            return None
        # indices are checked lazily against the grid size
        return range(start, stop)
    if isinstance(raw, (list, tuple)):
        out = [_to_int(v) for v in raw]
        return None if any(v is None for v in out) else out
    single = _to_int(raw)
    return None if single is None else [single]


def _parse_prop(raw: Any) -> Optional[List[float]]:
    if raw is None:
        return None
    vals = [_to_float(v) for v in (raw if isinstance(raw, (list, tuple)) else [raw])]
    if any(v is None for v in vals):
        raise TableError(f"Bad proportion: {raw!r}")
    return vals


def _parse_units(raw: Any) -> Optional[UnitBox]:
    if not isinstance(raw, dict):
        return None
    vals = {k: _to_float(raw.get(k)) for k in ("x0", "y0", "width", "height")}
    return UnitBox(**{k: v for k, v in vals.items() if v is not None})


def _parse_block(raw: Any, fallback_name: str) -> Block:
    if not isinstance(raw, dict):
        raise TableError(f"Bad candidate: {raw!r}")
    return Block(
        name=str(raw.get("name") or fallback_name),
        min_width=_to_float(raw.get("min_width")),
        min_height=_to_float(raw.get("min_height")),
        payload=raw.get("payload"),
    )


def parse_table(payload: Any) -> ParseResult:
    """
    Return (table, width, height, error_message_or_None).
    ``table`` is None whenever an error message is returned.
    """
    if not isinstance(payload, dict) or not payload:
        return None, 0.0, 0.0, "nothing parsed from request"

    m = _to_int(_first(payload, "rows", "m"))
    n = _to_int(_first(payload, "cols", "n"))
    if not m or not n:
        return None, 0.0, 0.0, "rows/cols missing or not numeric"

    width = _to_float(payload.get("width"))
    height = _to_float(payload.get("height"))
    if width is None or height is None:
        return None, 0.0, 0.0, "width/height missing or not numeric"

    x_focus = _parse_focus(payload.get("x_focus"))
    y_focus = _parse_focus(payload.get("y_focus"))
    if x_focus is None or y_focus is None:
        return None, width, height, "x_focus/y_focus missing or malformed"

    try:
        table = Table(
            m,
            n,
            x_focus,
            y_focus,
            x_prop=_parse_prop(payload.get("x_prop")),
            y_prop=_parse_prop(payload.get("y_prop")),
            units=_parse_units(payload.get("units")),
            order=_to_int(payload.get("order")) or 0,
            withjs=_to_bool(payload.get("withjs", False)),
            withoutjs=_to_bool(payload.get("withoutjs", False)),
        )
        for cell in payload.get("cells") or []:
            if not isinstance(cell, dict):
                raise TableError(f"Bad cell entry: {cell!r}")
            i = _to_int(cell.get("row"))
            j = _to_int(cell.get("col"))
            if i is None or j is None:
                raise TableError(f"Bad cell entry: {cell!r}")
            cands = cell.get("candidates")
            if cands is None:
                cands = [cell]
            table[i, j] = [
                _parse_block(c, f"r{i}c{j}" if len(cands) == 1 else f"r{i}c{j}#{k}")
                for k, c in enumerate(cands)
            ]
    except TableError as e:
        return None, width, height, str(e)

    return table, width, height, None


__all__ = ["parse_table"]
