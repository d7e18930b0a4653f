"""
BAR Units Catalog - Units Table
================================
Column definitions with their sort keys, the per-row DOM data attributes
read by the row predicate, and an in-memory sortable/searchable table that
behaves like the DataTables widget rendered on the units page.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from bar_units.models import UnitProfile
from bar_units.widgets import Element, Order, RowPredicate


# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Column:
    label: str
    sort_key: Optional[str] = None     # data-sort-key on the <th>
    attr: Optional[str] = None         # UnitProfile attribute shown in the cell
    align: str = "end"
    extra_classes: str = ""

    def th_classes(self) -> str:
        classes = f"py-1 group text-{self.align} font-normal focus:outline-hidden"
        if self.extra_classes:
            classes += f" {self.extra_classes}"
        return classes


DEFAULT_COLUMNS = [
    Column("", attr="buildpic_path", align="start"),
    Column("Name", "name", "name", align="start"),
    Column("Faction", "faction", "faction", align="start"),
    Column("Tech", "tech", "tech_level"),
    Column("Metal", "metal", "metal_cost"),
    Column("Energy", "energy", "energy_cost"),
    Column("Build time", "buildtime", "build_time"),
    Column("Health", "health", "health"),
    Column("Speed", "speed", "speed"),
    Column("Range", "range", "weapon_range"),
    Column("Sight", "sight", "sight_distance"),
    Column("Build power", "buildpower", "construction_speed"),
]


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------

@dataclass
class TableRow:
    id: str
    attrs: Dict[str, str] = field(default_factory=dict)
    cells: List[Any] = field(default_factory=list)


def _cell_value(profile: UnitProfile, attr: Optional[str]) -> Any:
    if attr is None:
        return None
    value = getattr(profile, attr)
    return getattr(value, "value", value)


def build_row(profile: UnitProfile, columns: Sequence[Column] = DEFAULT_COLUMNS) -> TableRow:
    """Render one unit as a table row with its machine-readable attributes."""
    search_text = " ".join(t for t in (profile.name, profile.description) if t)
    return TableRow(
        id=profile.id,
        attrs={
            "data-unit-id": profile.id,
            "data-search": search_text.lower(),
            "data-tags": " ".join(profile.tags),
            "data-faction": profile.faction.value,
        },
        cells=[_cell_value(profile, c.attr) for c in columns],
    )


# ---------------------------------------------------------------------------
# In-memory table widget
# ---------------------------------------------------------------------------

class UnitTable:
    """Sortable, searchable table with a DataTables-like surface."""

    def __init__(self, profiles: Sequence[UnitProfile] = (),
                 columns: Sequence[Column] = DEFAULT_COLUMNS,
                 element: Optional[Element] = None):
        self.columns = list(columns)
        self.rows = [build_row(p, self.columns) for p in profiles]
        self.element = element or Element(id="units-table", attrs={"data-units-table": ""})
        self.initialized = False
        self.draw_count = 0
        self._searches: List[RowPredicate] = []
        self._order: Order = []
        self._order_listeners: List[Callable[[], None]] = []
        self._visible: List[TableRow] = list(self.rows)

    def initialize(self):
        self.initialized = True
        self.draw()

    # -- headers -----------------------------------------------------------

    def header_sort_keys(self) -> List[Optional[str]]:
        return [c.sort_key for c in self.columns]

    # -- search ------------------------------------------------------------

    def add_search(self, predicate: RowPredicate):
        self._searches.append(predicate)

    @property
    def search_count(self) -> int:
        return len(self._searches)

    # -- ordering ----------------------------------------------------------

    def get_order(self) -> Order:
        return list(self._order)

    def set_order(self, column: int, direction: str):
        self._order = [(column, direction)]
        self._emit_order()

    def add_order(self, column: int, direction: str):
        """Shift-click: append a secondary sort column."""
        self._order = [o for o in self._order if o[0] != column] + [(column, direction)]
        self._emit_order()

    def clear_order(self):
        self._order = []
        self._emit_order()

    def on_order(self, callback: Callable[[], None]):
        self._order_listeners.append(callback)

    def click_header(self, column: int):
        """Header click cycles asc -> desc -> unsorted, then redraws."""
        current = self._order[0] if self._order else None
        if current is None or current[0] != column:
            self.set_order(column, "asc")
        elif current[1] == "asc":
            self.set_order(column, "desc")
        else:
            self.clear_order()
        self.draw()

    def _emit_order(self):
        for cb in list(self._order_listeners):
            cb()

    # -- drawing -----------------------------------------------------------

    def draw(self):
        visible = [r for r in self.rows if all(s(r.attrs) for s in self._searches)]
        # Stable sorts applied from the last key to the primary one
        for column, direction in reversed(self._order):
            present = [r for r in visible if r.cells[column] is not None]
            missing = [r for r in visible if r.cells[column] is None]
            present.sort(key=lambda r: _sort_value(r.cells[column]),
                         reverse=(direction == "desc"))
            visible = present + missing
        self._visible = visible
        self.draw_count += 1

    def visible_rows(self) -> List[TableRow]:
        return list(self._visible)

    def visible_ids(self) -> List[str]:
        return [r.id for r in self._visible]


def _sort_value(value: Any):
    if isinstance(value, str):
        return (1, value.lower())
    return (0, value)
