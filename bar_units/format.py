"""
BAR Units Catalog - Output Formatting
======================================
Number formatting and pretty-printing of unit tables and profiles.
"""

from typing import Iterable, List, Sequence

from bar_units.models import FacetKind, FacetOption, UnitProfile
from bar_units.table import TableRow

THIN_SPACE = "\u2009"


def format_number(value, precision: int = 0) -> str:
    """Round and group thousands with a thin space: 1234567.8 -> "1 234 568"."""
    if value is None:
        return ""
    rounded = round(float(value), precision)
    text = f"{rounded:.{precision}f}" if precision > 0 else f"{rounded:.0f}"
    int_part, _, dec_part = text.partition(".")
    sign = ""
    if int_part.startswith("-"):
        sign, int_part = "-", int_part[1:]

    groups = []
    while len(int_part) > 3:
        groups.insert(0, int_part[-3:])
        int_part = int_part[:-3]
    groups.insert(0, int_part)
    formatted = sign + THIN_SPACE.join(groups)

    if precision > 0 and dec_part:
        return f"{formatted}.{dec_part.ljust(precision, '0')}"
    return formatted


def _cell(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def print_units_table(profiles: Sequence[UnitProfile], rows: Iterable[TableRow]):
    by_id = {p.id: p for p in profiles}
    rows = list(rows)
    print()
    print(f" {'Unit':<16} {'Faction':<8} {'Tech':>4} {'Metal':>8} {'Energy':>8} "
          f"{'Health':>8} {'Range':>6}  Tags")
    print("-" * 90)
    for row in rows:
        p = by_id.get(row.id)
        if p is None:
            continue
        print(f" {p.id:<16} {p.faction.value:<8} {p.tech_level:>4} "
              f"{_cell(p.metal_cost):>8} {_cell(p.energy_cost):>8} "
              f"{_cell(p.health):>8} {_cell(p.weapon_range):>6}  {', '.join(p.tags)}")
    print(f"\n{len(rows)} of {len(profiles)} units shown")


def print_profile(p: UnitProfile):
    print(f"Unit: {p.id}")
    if p.name != p.id:
        print(f"  Name:         {p.name}")
    if p.description:
        print(f"  Description:  {p.description}")
    print(f"  Faction:      {p.faction.value}")
    print(f"  Type:         {p.type.value}")
    print(f"  Role:         {p.role or '-'}")
    print(f"  Tags:         {', '.join(p.tags)}")
    print(f"  Tech level:   {p.tech_level}")
    print(f"  Metal:        {_cell(p.metal_cost)}")
    print(f"  Energy:       {_cell(p.energy_cost)}")
    print(f"  Build time:   {_cell(p.build_time)}")
    print(f"  Health:       {_cell(p.health)}")
    print(f"  Speed:        {_cell(p.speed)}")
    print(f"  Sight:        {_cell(p.sight_distance)}")
    print(f"  Build power:  {_cell(p.construction_speed)}")
    print(f"  Weapon range: {_cell(p.weapon_range)}")
    print(f"  Icon:         {p.icon_path or '-'}")
    print(f"  Buildpic:     {p.buildpic_path or '-'}")


def print_facets(options: List[FacetOption]):
    for kind in (FacetKind.FACTION, FacetKind.TAG):
        group = [o for o in options if o.kind == kind]
        print(f"\n--- {kind.value.upper()}S ({len(group)}) ---")
        for o in group:
            icon = f"  [{o.icon}]" if o.icon else ""
            print(f"  {o.label}{icon}")
