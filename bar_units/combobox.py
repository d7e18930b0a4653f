"""
BAR Units Catalog - Combobox Bridge
====================================
Adapts the multi-select combobox (tag + faction options) and its free-text
input into FilterState updates, and tag chip clicks elsewhere on the page
into programmatic selection changes.
"""

from typing import List, Optional, Sequence

from bar_units.filters import apply_filters
from bar_units.models import FacetKind, FilterState
from bar_units.widgets import MultiSelectWidget, TableWidget, TextInput

BOUND_MARKER = "data-search-bound"


class ComboboxBridge:
    def __init__(self, select: MultiSelectWidget, text_input: TextInput,
                 table: TableWidget, state: Optional[FilterState] = None):
        self.select = select
        self.text_input = text_input
        self.table = table
        self.state = state or FilterState()
        self._suppress_open = False
        self._kinds = {o["value"]: o.get("kind", FacetKind.TAG.value) for o in select.options}

    def bind(self) -> bool:
        """Attach listeners once per widget. Returns False if already bound."""
        if self.select.element.has_attr(BOUND_MARKER):
            return False
        self.select.element.set_attr(BOUND_MARKER)
        self.select.on_change(self.on_selection_change)
        self.text_input.on_input(self.on_input)
        self.text_input.on_keydown(self.on_keydown)
        self.text_input.on_focus(self.request_open)
        return True

    # -- state -------------------------------------------------------------

    def _partition(self, values: Sequence[str]):
        tags, factions = [], []
        for v in values:
            if self._kinds.get(v) == FacetKind.FACTION.value:
                factions.append(v)
            else:
                tags.append(v)
        return tags, factions

    def apply_filters(self):
        tags, factions = self._partition(self.select.get_selected())
        apply_filters(self.table, self.state, tags, factions, self.text_input.value)

    def _set_selection(self, values: Sequence[str]):
        """Single entry point for selection mutations."""
        self.select.set_selected(list(values))
        self.apply_filters()

    def _add_to_selection(self, value: str) -> bool:
        selected = self.select.get_selected()
        if value in selected:
            return False
        self._set_selection(selected + [value])
        return True

    def _match_option(self, text: str) -> Optional[str]:
        wanted = text.strip().lower()
        if not wanted:
            return None
        for value in self._kinds:
            if value.lower() == wanted:
                return value
        return None

    # -- events ------------------------------------------------------------

    def on_selection_change(self):
        self.apply_filters()

    def on_input(self):
        self.apply_filters()

    def on_keydown(self, key: str):
        if key == "Enter":
            value = self._match_option(self.text_input.value)
            if value is None:
                return
            self.text_input.value = ""
            if not self._add_to_selection(value):
                self.apply_filters()
        elif key == "Backspace" and not self.text_input.value:
            selected: List[str] = self.select.get_selected()
            if selected:
                self._set_selection(selected[:-1])

    def on_tag_chip_click(self, value: str):
        # Focus moves to the input after the click; don't let it reopen the dropdown
        self._suppress_open = True
        if value in self._kinds:
            self._add_to_selection(value)
        self.select.close()

    def request_open(self) -> bool:
        if self._suppress_open:
            self._suppress_open = False
            return False
        self.select.open()
        return True
