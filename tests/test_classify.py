"""Tests for the unit classifier."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from bar_units.classify import (
    GAME_ENDER_ARTILLERY, classify, derive_faction, icon_key, parse_unit_definition,
)
from bar_units.models import Faction, InvalidInputError, UnitType


# ---------------------------------------------------------------------------
# Faction
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("unit_id, faction", [
    ("armcom", Faction.ARMADA),
    ("ARMpw", Faction.ARMADA),
    ("corak", Faction.CORTEX),
    ("Corint", Faction.CORTEX),
    ("legcom", Faction.LEGION),
    ("raptor_queen", Faction.UNKNOWN),
    ("xarm", Faction.UNKNOWN),
    ("", Faction.UNKNOWN),
])
def test_faction_from_id_prefix(unit_id, faction):
    assert derive_faction(unit_id) == faction
    assert classify(unit_id, {}).faction == faction


# ---------------------------------------------------------------------------
# Icon key and type
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("icon, key", [
    (None, ""),
    ("", ""),
    ("bot_t1_raid.png", "bot"),
    ("icons/bot2_t1.png", "bot"),
    ("ship3.png", "ship"),
    ("kbot.png", "kbot"),
    ("armcom.png", "commander"),
    ("unitpics/corcom_scav.png", "commander"),
    ("factory.png", "factory"),
])
def test_icon_key(icon, key):
    assert icon_key(icon) == key


@pytest.mark.parametrize("icon, unit_type", [
    ("air_t1.png", UnitType.AIR),
    ("bot_t1.png", UnitType.BOT),
    ("kbot_t2.png", UnitType.BOT),
    ("vehicle_t1.png", UnitType.VEHICLE),
    ("hover_t2.png", UnitType.HOVER),
    ("ship_t1.png", UnitType.SHIP),
    ("sub_t1.png", UnitType.SUBMARINE),
    ("amphib_t2_worker.png", UnitType.AMPHIBIOUS),
    ("armcom.png", UnitType.BOT),
    ("factory.png", UnitType.BUILDING),
    ("something_else.png", UnitType.BUILDING),
])
def test_type_from_icon(icon, unit_type):
    assert classify("armx", {"icon": icon}).type == unit_type


def test_no_icon_is_building():
    assert classify("armllt", {}).type == UnitType.BUILDING


# ---------------------------------------------------------------------------
# Role
# ---------------------------------------------------------------------------

def test_commander_role_wins_over_unit_group(classify_one):
    p = classify_one("corcom", icon="corcom.png", customparams={"unitgroup": "builder"})
    assert p.role == "Commander"
    assert p.type == UnitType.BOT


def test_air_transport_role(classify_one):
    p = classify_one("armatlas", icon="air_t1_transport.png", transportcapacity=1,
                     customparams={"unitgroup": "util"})
    assert p.role == "Transport"


def test_transport_capacity_needs_air(classify_one):
    p = classify_one("armthovr", icon="hover_t2.png", transportcapacity=8,
                     customparams={"unitgroup": "util"})
    assert p.role == "Utility"


@pytest.mark.parametrize("group, role", [
    ("builder", "Builder"),
    ("buildert2", "Builder"),
    ("buildert3", "Builder"),
    ("weapon", "Weapon"),
    ("weaponaa", "Weapon"),
    ("weaponsub", "Weapon"),
    ("aa", "Anti-Air"),
    ("sub", "Sub"),
    ("util", "Utility"),
    ("metal", "Metal"),
    ("energy", "Energy"),
    ("explo", "Explosive"),
    ("emp", "EMP"),
    ("antinuke", "Anti-Nuke"),
    ("nuke", "Nuke"),
    ("bogus", ""),
])
def test_unit_group_vocabulary(group, role):
    p = classify("armunit", {"icon": "bot_t1.png", "customparams": {"unitgroup": group}})
    assert p.role == role


def test_factory_building_role():
    p = classify("armlab", {"icon": "factory.png", "customparams": {"unitgroup": "builder"}})
    assert p.role == "Factory"
    assert p.tags == ("Building", "Factory", "T1")


def test_building_weapon_is_defense():
    p = classify("armllt", {"customparams": {"unitgroup": "weapon"}})
    assert p.role == "Defense"
    assert p.tags == ("Building", "Defense", "T1")


@pytest.mark.parametrize("unit_id", sorted(GAME_ENDER_ARTILLERY))
def test_game_ender_artillery(unit_id):
    p = classify(unit_id, {"customparams": {"unitgroup": "weapon", "techlevel": 2}})
    assert p.role == "Artillery"
    assert p.tags == ("Building", "Defense", "Artillery", "T2")


def test_mobile_weapon_keeps_weapon_role():
    p = classify("armbrtha", {"icon": "bot_t1.png", "customparams": {"unitgroup": "weapon"}})
    assert p.role == "Weapon"


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

def test_tags_for_mobile_constructor(profiles):
    armck = next(p for p in profiles if p.id == "armck")
    assert armck.tags == ("Unit", "Bot", "Builder", "Constructor", "T1")
    assert armck.constructor is True


def test_commander_tags(profiles):
    armcom = next(p for p in profiles if p.id == "armcom")
    assert armcom.tags == ("Unit", "Bot", "Commander", "Constructor", "T1")


def test_submarine_tags_are_unique(classify_one):
    p = classify_one("armsub", icon="sub_t1.png", customparams={"unitgroup": "sub"})
    assert p.tags == ("Unit", "Submarine", "Sub", "T1")
    assert len(p.tags) == len(set(p.tags))


def test_every_profile_has_one_tech_tag(profiles):
    for p in profiles:
        tech_tags = [t for t in p.tags if t.startswith("T") and t[1:].isdigit()]
        assert tech_tags == [f"T{p.tech_level}"]
        assert ("Building" in p.tags) != ("Unit" in p.tags)


@pytest.mark.parametrize("custom, level", [
    ({}, 1),
    ({"techlevel": 2}, 2),
    ({"techlevel": "3"}, 3),
    ({"techlevel": None}, 1),
    ({"techlevel": "high"}, 1),
    ({"techlevel": 0}, 1),
])
def test_tech_level(custom, level):
    p = classify("armx", {"customparams": custom})
    assert p.tech_level == level
    assert f"T{level}" in p.tags


def test_empty_build_options_is_not_constructor(classify_one):
    p = classify_one("armx", buildoptions=[])
    assert p.constructor is False
    assert "Constructor" not in p.tags


# ---------------------------------------------------------------------------
# Stats and defaults
# ---------------------------------------------------------------------------

def test_missing_fields_have_defaults():
    p = classify("mystery", {})
    assert p.faction == Faction.UNKNOWN
    assert p.type == UnitType.BUILDING
    assert p.role == ""
    assert p.tech_level == 1
    assert p.tags == ("Building", "T1")
    assert p.metal_cost is None
    assert p.health is None
    assert p.weapon_range is None
    assert p.icon_path is None
    assert p.buildpic_path is None
    assert p.name == "mystery"


def test_malformed_nested_fields_are_ignored():
    p = classify("armx", {
        "customparams": "not a table",
        "buildoptions": "armsolar",
        "weapons": [None, "x", {"def": 5}],
        "weapondefs": ["nope"],
        "metalcost": True,
        "health": {"max": 5},
    })
    assert p.role == ""
    assert p.constructor is False
    assert p.weapon_range is None
    assert p.metal_cost is None
    assert p.health is None


def test_legacy_cost_fields(classify_one):
    p = classify_one("armx", buildcostmetal=100, buildcostenergy=900)
    assert p.metal_cost == 100
    assert p.energy_cost == 900


def test_stat_fields(classify_one):
    p = classify_one("armx", metalcost=10, energycost=20, health=30, sightdistance=40,
                     speed=50, workertime=60, buildtime=70)
    assert (p.metal_cost, p.energy_cost, p.health, p.sight_distance,
            p.speed, p.construction_speed, p.build_time) == (10, 20, 30, 40, 50, 60, 70)


def test_weapon_range_is_max_of_resolved_defs(classify_one):
    p = classify_one(
        "armx",
        weapons=[{"def": "GUN"}, {"def": "Cannon"}, {"def": "missing"}],
        weapondefs={"gun": {"range": 300}, "cannon": {"range": 650}},
    )
    assert p.weapon_range == 650


def test_weapon_range_without_defs(classify_one):
    assert classify_one("armx", weapons=[{"def": "gun"}]).weapon_range is None
    assert classify_one("armx", weapondefs={"gun": {"range": 1}}).weapon_range is None


def test_asset_paths(classify_one):
    p = classify_one("corak", icon="bot_t1_raid.png", buildpic="CORAK.DDS")
    assert p.icon_path == "/images/bot_t1_raid.png"
    assert p.buildpic_path == "/images/unitpics/corak.png"
    assert p.faction_icon_path == "/images/factions/cortex.png"


def test_non_mapping_raises():
    with pytest.raises(InvalidInputError):
        classify("armx", ["not", "a", "mapping"])
    with pytest.raises(InvalidInputError):
        parse_unit_definition(None)


def test_classify_accepts_parsed_definition():
    defn = parse_unit_definition({"icon": "air_t1.png", "metalcost": "75"})
    p = classify("armfig", defn)
    assert p.type == UnitType.AIR
    assert p.metal_cost == 75.0


def test_classify_is_deterministic(raw_units):
    a = [classify(k, v) for k, v in raw_units.items()]
    b = [classify(k, v) for k, v in raw_units.items()]
    assert a == b
