"""
BAR Units Catalog - Unit Classifier
====================================
Turns raw unit definitions (nested game data records) into UnitProfiles
with stable facets: faction, type, role, tags and tech level.

Pure functions only. Missing or malformed nested fields are treated as
absent; the only hard failure is a record that is not a mapping.
"""

import re
from collections.abc import Mapping
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Tuple

from bar_units.models import (
    Faction, InvalidInputError, UnitDefinition, UnitProfile, UnitType, WeaponDef,
)


# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

FACTION_PREFIXES = [
    ("arm", Faction.ARMADA),
    ("cor", Faction.CORTEX),
    ("leg", Faction.LEGION),
]

ICON_KEY_TYPES = {
    "air": UnitType.AIR,
    "bot": UnitType.BOT,
    "kbot": UnitType.BOT,
    "vehicle": UnitType.VEHICLE,
    "hover": UnitType.HOVER,
    "ship": UnitType.SHIP,
    "sub": UnitType.SUBMARINE,
    "amphib": UnitType.AMPHIBIOUS,
}

UNIT_GROUP_ROLES = {
    "builder": "Builder",
    "buildert2": "Builder",
    "buildert3": "Builder",
    "weapon": "Weapon",
    "weaponaa": "Weapon",
    "weaponsub": "Weapon",
    "aa": "Anti-Air",
    "sub": "Sub",
    "util": "Utility",
    "metal": "Metal",
    "energy": "Energy",
    "explo": "Explosive",
    "emp": "EMP",
    "antinuke": "Anti-Nuke",
    "nuke": "Nuke",
}

# Long range plasma cannons and similar game-ending static artillery
GAME_ENDER_ARTILLERY = frozenset([
    "armbrtha", "corint", "armvulc", "corbuzz", "leglrpc", "legstarfall",
])

COMMANDER_KEY = "commander"
_COMMANDER_RE = re.compile(r"^(arm|cor|leg)com")
_NUMERIC_SUFFIX_RE = re.compile(r"\d+$")


# ---------------------------------------------------------------------------
# Raw field coercion
# ---------------------------------------------------------------------------

def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _int(value: Any) -> Optional[int]:
    num = _number(value)
    if num is None:
        return None
    try:
        return int(num)
    except (OverflowError, ValueError):
        return None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first_number(raw: Mapping, *keys: str) -> Optional[float]:
    for key in keys:
        num = _number(raw.get(key))
        if num is not None:
            return num
    return None


def _weapon_refs(raw_weapons: Any) -> Tuple[str, ...]:
    if not isinstance(raw_weapons, (list, tuple)):
        return ()
    refs = []
    for weapon in raw_weapons:
        if isinstance(weapon, Mapping):
            name = _text(weapon.get("def"))
            if name:
                refs.append(name.lower())
    return tuple(refs)


def _weapon_defs(raw_defs: Any) -> Optional[Dict[str, WeaponDef]]:
    if not isinstance(raw_defs, Mapping):
        return None
    defs = {}
    for name, body in raw_defs.items():
        if not isinstance(name, str):
            continue
        rng = _number(body.get("range")) if isinstance(body, Mapping) else None
        defs[name.lower()] = WeaponDef(name=name.lower(), range=rng)
    return defs


def parse_unit_definition(raw: Any) -> UnitDefinition:
    """Build a typed UnitDefinition from a raw game data record."""
    if not isinstance(raw, Mapping):
        raise InvalidInputError(
            f"unit definition must be a mapping, got {type(raw).__name__}"
        )

    custom = raw.get("customparams")
    if not isinstance(custom, Mapping):
        custom = {}

    build_options = raw.get("buildoptions")
    if isinstance(build_options, (list, tuple)):
        build_options = tuple(str(b) for b in build_options if b is not None)
    else:
        build_options = ()

    unit_group = custom.get("unitgroup")

    return UnitDefinition(
        icon=_text(raw.get("icon")),
        buildpic=_text(raw.get("buildpic")),
        name=_text(raw.get("name")),
        description=_text(raw.get("description")),
        metal_cost=_first_number(raw, "metalcost", "buildcostmetal"),
        energy_cost=_first_number(raw, "energycost", "buildcostenergy"),
        health=_number(raw.get("health")),
        sight_distance=_number(raw.get("sightdistance")),
        speed=_number(raw.get("speed")),
        construction_speed=_number(raw.get("workertime")),
        build_time=_number(raw.get("buildtime")),
        transport_capacity=_int(raw.get("transportcapacity")) or 0,
        build_options=build_options,
        weapons=_weapon_refs(raw.get("weapons")),
        weapon_defs=_weapon_defs(raw.get("weapondefs")),
        unit_group=unit_group if isinstance(unit_group, str) else None,
        tech_level=_int(custom.get("techlevel")),
    )


# ---------------------------------------------------------------------------
# Facet derivation
# ---------------------------------------------------------------------------

def derive_faction(unit_id: str) -> Faction:
    """Faction from the id prefix. Matched case-insensitively, so "ARMpw" is Armada."""
    lowered = unit_id.lower()
    for prefix, faction in FACTION_PREFIXES:
        if lowered.startswith(prefix):
            return faction
    return Faction.UNKNOWN


def icon_key(icon: Optional[str]) -> str:
    """Normalized token of an icon file name, e.g. "icons/bot2_t1.png" -> "bot".

    Returns "" when there is no icon and "commander" for commander icons.
    """
    if not icon:
        return ""
    stem = PurePosixPath(icon.replace("\\", "/")).stem
    if _COMMANDER_RE.match(stem):
        return COMMANDER_KEY
    token = stem.split("_")[0]
    return _NUMERIC_SUFFIX_RE.sub("", token)


def derive_type(key: str) -> UnitType:
    if not key:
        return UnitType.BUILDING
    if key == COMMANDER_KEY:
        return UnitType.BOT
    return ICON_KEY_TYPES.get(key, UnitType.BUILDING)


def derive_role(unit_id: str, key: str, unit_type: UnitType,
                defn: UnitDefinition) -> str:
    # Order matters: each later rule overrides the defaults of the earlier ones.
    if key == COMMANDER_KEY:
        return "Commander"
    if unit_type == UnitType.AIR and defn.transport_capacity > 0:
        return "Transport"

    role = UNIT_GROUP_ROLES.get(defn.unit_group or "", "")

    if unit_type == UnitType.BUILDING:
        if key == "factory":
            return "Factory"
        if role == "Weapon":
            return "Artillery" if unit_id in GAME_ENDER_ARTILLERY else "Defense"
    return role


def derive_tags(unit_type: UnitType, role: str, constructor: bool,
                tech_level: int) -> Tuple[str, ...]:
    tags = []
    if unit_type == UnitType.BUILDING:
        tags.append("Building")
        if role == "Artillery":
            tags.extend(["Defense", "Artillery"])
        elif role:
            tags.append(role)
    else:
        tags.append("Unit")
        tags.append(unit_type.value)
        if role:
            tags.append(role)
    if constructor:
        tags.append("Constructor")
    tags.append(f"T{tech_level}")
    return tuple(dict.fromkeys(tags))


def max_weapon_range(defn: UnitDefinition) -> Optional[float]:
    if not defn.weapons or not defn.weapon_defs:
        return None
    ranges = []
    for ref in defn.weapons:
        weapon = defn.weapon_defs.get(ref)
        if weapon is not None and weapon.range is not None:
            ranges.append(weapon.range)
    return max(ranges) if ranges else None


# ---------------------------------------------------------------------------
# Asset paths
# ---------------------------------------------------------------------------

def icon_path(defn: UnitDefinition) -> Optional[str]:
    return f"/images/{defn.icon}" if defn.icon else None


def buildpic_path(defn: UnitDefinition) -> Optional[str]:
    if not defn.buildpic:
        return None
    image = re.sub(r"\.dds$", ".png", defn.buildpic.lower())
    return f"/images/unitpics/{image}"


def faction_icon_path(faction: Faction) -> str:
    return f"/images/factions/{faction.value.lower()}.png"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def classify(unit_id: str, raw: Any) -> UnitProfile:
    """Classify one raw unit record into a UnitProfile."""
    defn = raw if isinstance(raw, UnitDefinition) else parse_unit_definition(raw)

    faction = derive_faction(unit_id)
    key = icon_key(defn.icon)
    unit_type = derive_type(key)
    role = derive_role(unit_id, key, unit_type, defn)
    tech_level = defn.tech_level if defn.tech_level and defn.tech_level >= 1 else 1
    constructor = len(defn.build_options) > 0

    return UnitProfile(
        id=unit_id,
        faction=faction,
        type=unit_type,
        role=role,
        tags=derive_tags(unit_type, role, constructor, tech_level),
        tech_level=tech_level,
        metal_cost=defn.metal_cost,
        energy_cost=defn.energy_cost,
        health=defn.health,
        sight_distance=defn.sight_distance,
        speed=defn.speed,
        construction_speed=defn.construction_speed,
        build_time=defn.build_time,
        weapon_range=max_weapon_range(defn),
        constructor=constructor,
        icon_path=icon_path(defn),
        buildpic_path=buildpic_path(defn),
        faction_icon_path=faction_icon_path(faction),
        name=defn.name or unit_id,
        description=defn.description or "",
    )


def classify_all(units: Mapping) -> List[UnitProfile]:
    """Classify every record of a {unit_id: raw} mapping, keeping its order."""
    return [classify(unit_id, raw) for unit_id, raw in units.items()]
