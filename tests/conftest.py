"""Shared test fixtures for the BAR units catalog test suite."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is on the path so `bar_units` imports work
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bar_units.classify import classify, classify_all
from bar_units.facets import build_facet_index, search_options
from bar_units.models import FilterState
from bar_units.table import UnitTable
from bar_units.widgets import MultiSelect, TextBox


@pytest.fixture
def raw_units():
    """A small mixed roster covering every faction and most types."""
    return {
        "armcom": {
            "name": "Armada Commander",
            "description": "Commander",
            "icon": "armcom.png",
            "metalcost": 2700,
            "energycost": 26000,
            "buildoptions": ["armsolar", "armmex"],
            "weapons": [{"def": "ARMCOMLASER"}],
            "weapondefs": {"armcomlaser": {"range": 300}},
            "customparams": {"unitgroup": "builder"},
        },
        "armck": {
            "name": "Construction Bot",
            "description": "Tech 1 Constructor",
            "icon": "bot_t1_worker.png",
            "metalcost": 110,
            "buildoptions": ["armsolar"],
            "customparams": {"unitgroup": "builder"},
        },
        "armpw": {
            "name": "Pawn",
            "description": "Fast Infantry Bot",
            "icon": "bot_t1_raid.png",
            "metalcost": 54,
            "customparams": {"unitgroup": "weapon"},
        },
        "corak": {
            "name": "Grunt",
            "description": "Light Assault Bot",
            "icon": "bot_t1_raid.png",
            "metalcost": 45,
            "customparams": {"unitgroup": "weapon"},
        },
        "corcrash": {
            "name": "Trasher",
            "description": "Anti-Air Bot",
            "icon": "kbot_t1_aa.png",
            "metalcost": 120,
            "customparams": {"unitgroup": "aa"},
        },
        "cormex": {
            "name": "Metal Extractor",
            "description": "Extracts Metal",
            "metalcost": 50,
            "customparams": {"unitgroup": "metal"},
        },
        "corint": {
            "name": "Intimidator",
            "description": "Long Range Plasma Cannon",
            "metalcost": 3800,
            "customparams": {"unitgroup": "weapon", "techlevel": 2},
        },
        "legcom": {
            "name": "Legion Commander",
            "description": "Commander",
            "icon": "legcom.png",
            "metalcost": 2600,
            "buildoptions": ["legmex"],
            "customparams": {"unitgroup": "builder"},
        },
    }


@pytest.fixture
def profiles(raw_units):
    return classify_all(raw_units)


@pytest.fixture
def facet_options(profiles):
    return build_facet_index(profiles)


@pytest.fixture
def table(profiles):
    """An initialized units table with the default columns."""
    t = UnitTable(profiles)
    t.initialize()
    return t


@pytest.fixture
def select(facet_options):
    return MultiSelect(search_options(facet_options))


@pytest.fixture
def text_input():
    return TextBox()


@pytest.fixture
def filter_state():
    return FilterState()


@pytest.fixture
def classify_one():
    """classify() with an empty-ish record builder: classify_one(id, **fields)."""
    def _classify(unit_id, **fields):
        return classify(unit_id, fields)
    return _classify
