# config.py
import os

# ======= Exact (MILP) strategy =======
# Name of the OR-Tools linear-solver backend; empty string disables the
# exact strategy and forces the exhaustive search.
EXACT_BACKEND        = os.getenv("TL_EXACT_BACKEND", "SCIP").strip()
EXACT_TIME_LIMIT_S   = float(os.getenv("TL_EXACT_TIME_LIMIT_S", "10"))
INTEGRALITY_TOL      = float(os.getenv("TL_INTEGRALITY_TOL", "1e-8"))

# ======= Exhaustive search =======
# Above this many combinations a warning is logged; the search is never cut short.
BRUTE_FORCE_WARN_COMBOS = int(os.getenv("TL_BRUTE_FORCE_WARN_COMBOS", "100000"))

# ======= Numeric tolerances =======
SUM_TOL              = float(os.getenv("TL_SUM_TOL", "1e-6"))

# ======= Units / rendering =======
LENGTH_UNIT          = os.getenv("TL_LENGTH_UNIT", "mm")
SVG_SCALE            = float(os.getenv("TL_SVG_SCALE", "4.0"))   # px per length unit

# ======= Output names =======
COORDS_OUT  = os.getenv("TL_COORDS_OUT", "coords.txt")
LAYOUT_HTML = os.getenv("TL_LAYOUT_HTML", "layout_view.html")


class CFG:
    EXACT_BACKEND      = EXACT_BACKEND
    EXACT_TIME_LIMIT_S = EXACT_TIME_LIMIT_S
    INTEGRALITY_TOL    = INTEGRALITY_TOL

    BRUTE_FORCE_WARN_COMBOS = BRUTE_FORCE_WARN_COMBOS

    SUM_TOL = SUM_TOL

    LENGTH_UNIT = LENGTH_UNIT
    SVG_SCALE   = SVG_SCALE

    COORDS_OUT  = COORDS_OUT
    LAYOUT_HTML = LAYOUT_HTML
