"""
BAR Units Catalog - Sort URL Sync
==================================
Keeps the table's primary sort and the `sort` query parameter in step.

URL contract:  ?sort=<key>   ascending
               ?sort=-<key>  descending
               (absent)      default order
"""

from typing import Dict, Optional, Tuple

from bar_units.models import SortDirection, SortState
from bar_units.widgets import (
    Location, TableWidget, get_query_param, set_query_param,
)

SORT_PARAM = "sort"
SORT_MARKER = "data-sort-synced"


def parse_sort_param(value: Optional[str]) -> Optional[SortState]:
    if not value:
        return None
    desc = value.startswith("-")
    key = value[1:] if desc else value
    if not key:
        return None
    return SortState(column_key=key,
                     direction=SortDirection.DESC if desc else SortDirection.ASC)


def format_sort_param(state: Optional[SortState]) -> Optional[str]:
    if state is None or not state.column_key:
        return None
    if state.direction == SortDirection.DESC:
        return f"-{state.column_key}"
    return state.column_key


def parse_direction(value: Optional[str]) -> Optional[SortDirection]:
    """Widget direction string to SortDirection, None when unrecognized."""
    try:
        return SortDirection(value)
    except ValueError:
        return None


def header_index(table: TableWidget) -> Tuple[Dict[str, int], Dict[int, str]]:
    """(sort_key -> column index, column index -> sort_key) from the headers."""
    key_to_index = {}
    index_to_key = {}
    for i, key in enumerate(table.header_sort_keys()):
        if key:
            key_to_index[key] = i
            index_to_key[i] = key
    return key_to_index, index_to_key


class SortSync:
    def __init__(self, table: TableWidget, location: Location):
        self.table = table
        self.location = location
        self.key_to_index, self.index_to_key = header_index(table)

    def current_state(self) -> Optional[SortState]:
        order = self.table.get_order()
        if not order:
            return None
        column, direction = order[0]
        key = self.index_to_key.get(column)
        direction = parse_direction(direction)
        if key is None or direction is None:
            return None
        return SortState(column_key=key, direction=direction)

    def restore(self) -> bool:
        """Apply the sort from the URL. Unknown or malformed values are ignored."""
        state = parse_sort_param(get_query_param(self.location.href, SORT_PARAM))
        if state is None:
            return False
        column = self.key_to_index.get(state.column_key)
        if column is None:
            print(f"[sort] Ignoring unknown sort key: {state.column_key}")
            return False
        self.table.set_order(column, state.direction.value)
        self.table.draw()
        return True

    def on_order(self):
        order = self.table.get_order()
        if not order:
            href = set_query_param(self.location.href, SORT_PARAM, None)
        else:
            column, direction = order[0]
            key = self.index_to_key.get(column)
            direction = parse_direction(direction)
            if key is None or direction is None:
                return
            state = SortState(column_key=key, direction=direction)
            href = set_query_param(self.location.href, SORT_PARAM, format_sort_param(state))
        if href != self.location.href:
            self.location.replace_state(href)


def setup_sort_sync(table: TableWidget, location: Location) -> Optional[SortSync]:
    """Restore the URL sort and follow later sort changes. Once per table."""
    if table.element.has_attr(SORT_MARKER):
        return None
    table.element.set_attr(SORT_MARKER)
    sync = SortSync(table, location)
    sync.restore()
    table.on_order(sync.on_order)
    return sync
