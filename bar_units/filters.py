"""
BAR Units Catalog - Filter State & Row Predicate
=================================================
Conjunctive filtering of table rows by selected tags, selected factions
and a free-text fragment.

A row is visible iff every selected tag and every selected faction appears
as a whole token in the row's attributes, and the free text (if any) is a
substring of the row's name + description. An empty selection of a kind
does not filter on that kind.
"""

import re
from typing import Dict, Iterable, Mapping

from bar_units.models import FilterState
from bar_units.widgets import TableWidget

FILTER_MARKER = "data-filter-installed"

# Tokens are separated by whitespace or commas. Hyphens belong to the token
# so "Air" never matches inside "Anti-Air".
_TOKEN_CHARS = r"[\w-]"


def token_match(token: str, text: str) -> bool:
    """Whole-token, case-insensitive match of token within text."""
    if not token:
        return False
    pattern = rf"(?<!{_TOKEN_CHARS}){re.escape(token)}(?!{_TOKEN_CHARS})"
    return re.search(pattern, text or "", re.IGNORECASE) is not None


def row_matches(attrs: Mapping[str, str], state: FilterState) -> bool:
    tags = attrs.get("data-tags", "")
    for tag in state.selected_tags:
        if not token_match(tag, tags):
            return False

    faction = attrs.get("data-faction", "")
    for selected in state.selected_factions:
        if not token_match(selected, faction):
            return False

    if state.free_text:
        if state.free_text not in attrs.get("data-search", "").lower():
            return False
    return True


def make_predicate(state: FilterState):
    def predicate(attrs: Dict[str, str]) -> bool:
        return row_matches(attrs, state)
    return predicate


def install_filter(table: TableWidget, state: FilterState) -> bool:
    """Register the row predicate once per table instance and redraw.

    Returns True when it was installed by this call.
    """
    if table.element.has_attr(FILTER_MARKER):
        return False
    table.element.set_attr(FILTER_MARKER)
    table.add_search(make_predicate(state))
    table.draw()
    return True


def apply_filters(table: TableWidget, state: FilterState,
                  tags: Iterable[str], factions: Iterable[str], text: str = ""):
    """Recompute every filter dimension and redraw the table once."""
    state.update(tags, factions, text)
    if not install_filter(table, state):
        table.draw()
