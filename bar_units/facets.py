"""
BAR Units Catalog - Facet Index
================================
Distinct faction and tag values across the unit collection, each with a
display icon. Rendered into the option list of the unit search combobox.
"""

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from bar_units.models import FacetKind, FacetOption, UnitProfile

ICON_SUFFIXES = (".png", ".svg", ".webp", ".jpg")


def list_icon_files(directory) -> List[Path]:
    """Icon assets available to the tag facets. Missing directory -> []."""
    root = Path(directory)
    if not root.is_dir():
        return []
    return sorted(p for p in root.iterdir()
                  if p.is_file() and p.suffix.lower() in ICON_SUFFIXES)


def _tag_icon(tag: str, icon_files: Sequence) -> Optional[str]:
    wanted = tag.lower()
    for f in icon_files:
        path = Path(f)
        if path.stem.lower() == wanted:
            return f"images/icons/{path.name}"
    return None


def build_facet_index(profiles: Iterable[UnitProfile],
                      icon_files: Sequence = ()) -> List[FacetOption]:
    """Faction options followed by tag options, each sorted case-insensitively."""
    faction_icons: Dict[str, Optional[str]] = {}
    tags: Dict[str, None] = {}
    for p in profiles:
        faction_icons.setdefault(p.faction.value, p.faction_icon_path)
        for tag in p.tags:
            tags.setdefault(tag, None)

    options = [
        FacetOption(
            kind=FacetKind.FACTION,
            value=faction,
            label=faction.capitalize(),
            icon=faction_icons[faction],
        )
        for faction in sorted(faction_icons, key=str.lower)
    ]
    options.extend(
        FacetOption(
            kind=FacetKind.TAG,
            value=tag,
            label=tag,
            icon=_tag_icon(tag, icon_files),
        )
        for tag in sorted(tags, key=str.lower)
    )
    return options


# ---------------------------------------------------------------------------
# Combobox option payload
# ---------------------------------------------------------------------------

def _relative_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def search_options(options: Iterable[FacetOption], base_url: str = "") -> List[dict]:
    result = []
    for opt in options:
        item = {"value": opt.value, "label": opt.label, "kind": opt.kind.value}
        if opt.icon:
            css = "inline-block rounded-full" if opt.kind == FacetKind.FACTION else "inline-block"
            item["icon"] = f'<img class="{css}" src="{_relative_url(base_url, opt.icon)}" />'
        result.append(item)
    return result


def search_options_json(options: Iterable[FacetOption], base_url: str = "") -> str:
    return json.dumps(search_options(options, base_url))
