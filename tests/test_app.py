import pytest

pytest.importorskip("flask")

import app as app_module
from solver import orchestrator


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(app_module, "BASE_DIR", str(tmp_path))
    monkeypatch.setattr(orchestrator.CFG, "EXACT_BACKEND", "", raising=False)
    app_module.app.config["TESTING"] = True
    return app_module.app.test_client()


def _payload(**overrides):
    payload = {
        "rows": 1,
        "cols": 2,
        "width": 100,
        "height": 40,
        "x_focus": [0, 1],
        "y_focus": [0],
        "cells": [
            {"row": 0, "col": 0, "name": "left", "min_width": 20},
            {"row": 0, "col": 1, "name": "right", "min_width": 30},
        ],
    }
    payload.update(overrides)
    return payload


def test_layout_endpoint_solves_and_writes_outputs(client, tmp_path):
    resp = client.post("/layout", json=_payload())
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert body["feasible"] is True
    assert body["strategy"] == "brute_force"
    assert body["widths"] == pytest.approx([45.0, 55.0])
    assert [c["name"] for c in body["children"]] == ["left", "right"]
    assert body["svg"].startswith("<svg")
    assert (tmp_path / "coords.txt").exists()
    assert (tmp_path / "layout_view.html").exists()


def test_layout_endpoint_reports_infeasible_size(client):
    resp = client.post("/layout", json=_payload(width=10))
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["ok"] is True
    assert body["feasible"] is False
    assert "cannot be correctly laid out" in body["note"]
    assert sum(body["widths"]) == pytest.approx(10.0)


def test_layout_endpoint_rejects_bad_table(client):
    resp = client.post("/layout", json=_payload(x_prop=[1, 2, 3]))
    assert resp.status_code == 400
    assert "proportion" in resp.get_json()["reason"]


def test_layout_endpoint_rejects_bad_area(client):
    resp = client.post("/layout", json=_payload(height=0))
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False


def test_progress_endpoint_is_not_cached(client):
    client.post("/layout", json=_payload())
    resp = client.get("/progress")
    assert resp.status_code == 200
    assert resp.headers["Cache-Control"] == "no-store, max-age=0"
    snap = resp.get_json()
    assert snap["done"] is True
    assert snap["strategy"] == "brute_force"


def test_finalize_solver_progress_respects_ok_flag(monkeypatch):
    calls = {"status": [], "done": []}

    monkeypatch.setattr(app_module, "set_status", lambda v: calls["status"].append(v))
    monkeypatch.setattr(
        app_module,
        "set_done",
        lambda ok=None, *, reason=None, message=None: calls["done"].append((ok, reason)),
    )

    app_module._finalize_solver_progress(True, "All good")
    assert calls["status"][-1] == "Solved"
    assert calls["done"][-1] == (True, "All good")

    app_module._finalize_solver_progress(False, "error happened")
    assert calls["status"][-1] == "Error"
    assert calls["done"][-1] == (False, "error happened")


def test_layout_endpoint_rejects_oversized_focus_range(client):
    resp = client.post("/layout", json=_payload(x_focus={"start": 0, "stop": 10**12}))
    assert resp.status_code == 400
    assert "focus" in resp.get_json()["reason"]
