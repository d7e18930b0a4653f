"""
BAR Units Catalog - I/O
========================
Load raw unit definitions from YAML or JSON files.

A data file maps unit ids to their definition records. A directory is
read file by file (sorted by name); later files override earlier ids.
"""

import json
from pathlib import Path
from typing import Dict

import yaml

from bar_units.models import InvalidInputError

DATA_DIR = Path(__file__).parent.parent / "data"
UNITS_PATH = DATA_DIR / "units"
ICONS_DIR = DATA_DIR / "icons"

UNIT_FILE_SUFFIXES = (".yaml", ".yml", ".json")


def _load_file(path: Path) -> Dict[str, dict]:
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError(f"{path}: expected a mapping of unit ids, got {type(data).__name__}")
    return {str(k): v for k, v in data.items()}


def load_unit_defs(path) -> Dict[str, dict]:
    """Return {unit_id: raw definition} from a file or a directory of files."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Unit data not found: {path}")

    if path.is_file():
        return _load_file(path)

    units: Dict[str, dict] = {}
    for f in sorted(path.iterdir()):
        if f.is_file() and f.suffix.lower() in UNIT_FILE_SUFFIXES:
            units.update(_load_file(f))
    return units


def export_profiles_json(profiles, filepath: str):
    """Write classified profiles as a JSON list (one object per unit)."""
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump([p.to_dict() for p in profiles], f, indent=2)
