from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional

# ------------------------------
# Thread-safe global progress state
# ------------------------------

PROGRESS_LOCK = threading.Lock()


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("solver.attempt_log")
    if logger.handlers:
        return logger

    log_path = Path(__file__).resolve().parent / "logs" / "layout_attempts.log"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    except Exception:
        # If the logger cannot be initialised we silently continue; progress
        # tracking should not break the solver.
        logger.handlers.clear()
    return logger


ATTEMPT_LOGGER = _init_logger()


def _log_enabled() -> bool:
    return bool(ATTEMPT_LOGGER.handlers)


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    try:
        return f"{float(seconds):.2f}s"
    except Exception:
        return None


def _emit_log(event: str, **fields: Any) -> None:
    if not _log_enabled():
        return
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    try:
        if extras:
            ATTEMPT_LOGGER.info("%s | %s", event, " ".join(extras))
        else:
            ATTEMPT_LOGGER.info("%s", event)
    except Exception:
        # Logging failures must never bubble back to callers.
        pass


# Single source of truth for the /progress endpoint
PROGRESS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Solving | Solved | Error
    "strategy": "",            # milp | brute_force
    "combinations": 0,         # candidate combinations scored so far
    "best_objective": None,    # focus-band size of the incumbent
    "feasible": None,          # False when the layout overflows the area
    "elapsed_start": None,
    "elapsed": 0.0,
    "message": "",
    "done": False,
    "ok": None,
    "run_id": 0,               # monotonically increasing identifier
}

# ------------------------------
# Helpers
# ------------------------------

def _now() -> float:
    return time.time()

def _touch_elapsed_locked() -> None:
    t0 = PROGRESS.get("elapsed_start")
    if t0 is not None:
        PROGRESS["elapsed"] = _now() - float(t0)

def reset() -> None:
    with PROGRESS_LOCK:
        try:
            current_run_id = int(PROGRESS.get("run_id", 0))
        except Exception:
            current_run_id = 0
        PROGRESS.update({
            "status": "Idle",
            "strategy": "",
            "combinations": 0,
            "best_objective": None,
            "feasible": None,
            "elapsed_start": None,
            "elapsed": 0.0,
            "message": "",
            "done": False,
            "ok": None,
            "run_id": current_run_id + 1,
        })
        _emit_log("Progress reset", run_id=PROGRESS["run_id"])

def start_timer() -> None:
    with PROGRESS_LOCK:
        PROGRESS["elapsed_start"] = _now()
        PROGRESS["elapsed"] = 0.0

# ------------------------------
# Setters (tolerant)
# ------------------------------

def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)

def set_strategy(v: Any) -> None:
    with PROGRESS_LOCK:
        strategy = "" if v is None else str(v)
        if strategy != PROGRESS.get("strategy"):
            _emit_log("Strategy started", strategy=strategy)
        PROGRESS["strategy"] = strategy

def set_combinations(n: Any) -> None:
    try:
        i = int(n)
    except Exception:
        i = 0
    with PROGRESS_LOCK:
        PROGRESS["combinations"] = max(0, i)
        _touch_elapsed_locked()

def set_best_objective(v: Any) -> None:
    try:
        f = None if v is None else float(v)
    except Exception:
        f = None
    with PROGRESS_LOCK:
        PROGRESS["best_objective"] = f

def set_feasible(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["feasible"] = None if v is None else bool(v)

def set_done(ok: Any = None, *, reason: Any = None, message: Any = None) -> None:
    """Mark the run complete.

    The boolean flag controls the final status when provided; otherwise the
    status is left alone (``"Solved"`` if nothing was set).  Any supplied
    ``reason``/``message`` is surfaced via the ``message`` field.
    """

    final_status: Optional[str] = None
    ok_flag: Optional[bool] = None
    if ok is not None:
        ok_flag = bool(ok)
        final_status = "Solved" if ok_flag else "Error"

    final_message = message if message is not None else reason

    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        if final_status is not None:
            PROGRESS["status"] = final_status
        elif PROGRESS.get("status") in ("", "Idle", None):
            PROGRESS["status"] = "Solved"
            ok_flag = True
        if final_message is not None:
            PROGRESS["message"] = str(final_message)
        PROGRESS["done"] = True
        if ok_flag is not None:
            PROGRESS["ok"] = ok_flag
        _emit_log(
            "Run finished",
            status=PROGRESS.get("status"),
            ok=PROGRESS.get("ok"),
            strategy=PROGRESS.get("strategy"),
            combinations=PROGRESS.get("combinations"),
            feasible=PROGRESS.get("feasible"),
            duration=_fmt_seconds(PROGRESS.get("elapsed")),
            message=PROGRESS.get("message"),
        )

# ------------------------------
# Snapshots for the UI
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        return {k: v for k, v in PROGRESS.items() if k != "elapsed_start"}

def as_json() -> Dict[str, Any]:
    # Alias used by /progress
    return snapshot()
