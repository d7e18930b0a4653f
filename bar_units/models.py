"""
BAR Units Catalog - Data Models
================================
Dataclasses and enums shared by the classifier, facet index and the
search/filter/sort engine.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional, Tuple


class InvalidInputError(ValueError):
    """Raised when a unit record is not a mapping at all."""


# ---------------------------------------------------------------------------
# Facet enums
# ---------------------------------------------------------------------------

class Faction(Enum):
    ARMADA = "Armada"
    CORTEX = "Cortex"
    LEGION = "Legion"
    UNKNOWN = "Unknown"


class UnitType(Enum):
    BUILDING = "Building"
    BOT = "Bot"
    VEHICLE = "Vehicle"
    HOVER = "Hover"
    SHIP = "Ship"
    SUBMARINE = "Submarine"
    AMPHIBIOUS = "Amphibious"
    AIR = "Air"


class FacetKind(Enum):
    TAG = "tag"
    FACTION = "faction"


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


# ---------------------------------------------------------------------------
# Unit definitions (typed view of the raw game data)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeaponDef:
    name: str
    range: Optional[float] = None


@dataclass(frozen=True)
class UnitDefinition:
    """Raw unit record with every field optional and defaults made explicit."""
    icon: Optional[str] = None
    buildpic: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

    metal_cost: Optional[float] = None
    energy_cost: Optional[float] = None
    health: Optional[float] = None
    sight_distance: Optional[float] = None
    speed: Optional[float] = None
    construction_speed: Optional[float] = None
    build_time: Optional[float] = None

    transport_capacity: int = 0
    build_options: Tuple[str, ...] = ()
    weapons: Tuple[str, ...] = ()                      # lower-cased weapon def names
    weapon_defs: Optional[Dict[str, WeaponDef]] = None  # None when absent in source

    unit_group: Optional[str] = None   # customparams.unitgroup
    tech_level: Optional[int] = None   # customparams.techlevel


# ---------------------------------------------------------------------------
# Derived profile
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnitProfile:
    id: str
    faction: Faction
    type: UnitType
    role: str = ""
    tags: Tuple[str, ...] = ()
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

    name: str = ""
    description: str = ""

    def to_dict(self) -> dict:
        data = asdict(self)
        data["faction"] = self.faction.value
        data["type"] = self.type.value
        data["tags"] = list(self.tags)
        return data


# ---------------------------------------------------------------------------
# Facets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FacetOption:
    kind: FacetKind
    value: str
    label: str
    icon: Optional[str] = None


# ---------------------------------------------------------------------------
# Filter and sort state
# ---------------------------------------------------------------------------

@dataclass
class FilterState:
    """Current selection of the unit search. Never persisted."""
    selected_tags: List[str] = field(default_factory=list)
    selected_factions: List[str] = field(default_factory=list)
    free_text: str = ""

    def update(self, tags, factions, text: str = ""):
        self.selected_tags = list(dict.fromkeys(tags))
        self.selected_factions = list(dict.fromkeys(factions))
        self.free_text = (text or "").strip().lower()

    def is_empty(self) -> bool:
        return not (self.selected_tags or self.selected_factions or self.free_text)


@dataclass(frozen=True)
class SortState:
    column_key: Optional[str] = None
    direction: SortDirection = SortDirection.ASC
