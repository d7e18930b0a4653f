"""
BAR Units Catalog - Web API
============================
FastAPI server exposing the classified unit catalog and the option list
for the unit search combobox.

Usage:
    python -m bar_units.web
    python cli.py web [--port 8080] [--data data/units]
"""

from pathlib import Path
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
import uvicorn

from bar_units.classify import classify_all
from bar_units.facets import build_facet_index, list_icon_files, search_options
from bar_units.io import ICONS_DIR, UNITS_PATH, load_unit_defs
from bar_units.models import UnitProfile
from bar_units.table import DEFAULT_COLUMNS

BASE_URL = "/BAR-units-db"

app = FastAPI(title="BAR Units Catalog")

# Module-level cache: units path -> {unit_id: UnitProfile}
_cache: Dict[str, Dict[str, UnitProfile]] = {}


# ---------------------------------------------------------------------------
# Pydantic models for responses
# ---------------------------------------------------------------------------

class UnitOut(BaseModel):
    id: str
    name: str
    description: str = ""
    faction: str
    type: str
    role: str = ""
    tags: List[str] = []
    tech_level: int = 1
    metal_cost: Optional[float] = None
    energy_cost: Optional[float] = None
    health: Optional[float] = None
    sight_distance: Optional[float] = None
    speed: Optional[float] = None
    construction_speed: Optional[float] = None
    build_time: Optional[float] = None
    weapon_range: Optional[float] = None
    constructor: bool = False
    icon_path: Optional[str] = None
    buildpic_path: Optional[str] = None
    faction_icon_path: Optional[str] = None


class SearchOption(BaseModel):
    value: str
    label: str
    kind: str
    icon: Optional[str] = None


class ColumnOut(BaseModel):
    label: str
    sort_key: Optional[str] = None
    align: str = "end"
    th_classes: str = ""


# ---------------------------------------------------------------------------
# Catalog loading
# ---------------------------------------------------------------------------

def load_catalog(units_path=None) -> Dict[str, UnitProfile]:
    """Classify all units under units_path. Cached per path."""
    path = Path(units_path) if units_path else UNITS_PATH
    key = str(path)
    if key not in _cache:
        profiles = classify_all(load_unit_defs(path))
        _cache[key] = {p.id: p for p in profiles}
        print(f"[catalog] Loaded {len(profiles)} units from {path}")
    return _cache[key]


def clear_cache():
    _cache.clear()


def _catalog() -> Dict[str, UnitProfile]:
    try:
        return load_catalog(getattr(app.state, "units_path", None))
    except FileNotFoundError as e:
        raise HTTPException(500, str(e))


# ---------------------------------------------------------------------------
# API Endpoints
# ---------------------------------------------------------------------------

@app.get("/api/units", response_model=List[UnitOut])
def api_units():
    """Every unit profile, in data file order."""
    return [UnitOut(**p.to_dict()) for p in _catalog().values()]


@app.get("/api/units/{unit_id}", response_model=UnitOut)
def api_unit_detail(unit_id: str):
    profile = _catalog().get(unit_id)
    if profile is None:
        raise HTTPException(404, f"Unit not found: {unit_id}")
    return UnitOut(**profile.to_dict())


@app.get("/api/search-options", response_model=List[SearchOption])
def api_search_options():
    """Faction and tag options for the unit search combobox."""
    options = build_facet_index(_catalog().values(), list_icon_files(ICONS_DIR))
    return [SearchOption(**o) for o in search_options(options, BASE_URL)]


@app.get("/api/columns", response_model=List[ColumnOut])
def api_columns():
    return [
        ColumnOut(label=c.label, sort_key=c.sort_key, align=c.align, th_classes=c.th_classes())
        for c in DEFAULT_COLUMNS
    ]


def start_server(port: int = 8080, units_path=None):
    """Start the uvicorn server."""
    if units_path:
        app.state.units_path = str(units_path)
    print(f"Starting BAR Units Catalog at http://localhost:{port}")
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")


if __name__ == "__main__":
    start_server()
