"""
BAR Units Catalog - Page Wiring
================================
Mounts the unit search, waits for the table widget to finish its own
asynchronous initialization, then installs the row filter and the sort
URL sync.

Everything runs on one asyncio loop. Initialization can be triggered
again (e.g. by a second navigation event); elements that are already
mounted or bound are marked and skipped.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from bar_units.combobox import ComboboxBridge
from bar_units.facets import build_facet_index, search_options_json
from bar_units.filters import install_filter
from bar_units.models import UnitProfile
from bar_units.sort_sync import SortSync, setup_sort_sync
from bar_units.table import UnitTable
from bar_units.widgets import (
    BrowserLocation, Element, Location, MultiSelect, TableWidget, TextBox,
)

MOUNTED_MARKER = "data-mounted"


@dataclass
class ReadinessConfig:
    interval: float = 0.05               # seconds between polls
    max_attempts: Optional[int] = None   # None = poll for the page lifetime


async def next_frame():
    """Let pending widget work settle before touching it."""
    await asyncio.sleep(0)


async def wait_for_table(probe: Callable[[], Optional[TableWidget]],
                         config: Optional[ReadinessConfig] = None,
                         ready: Optional[Awaitable] = None) -> Optional[TableWidget]:
    """Return the table once it is initialized.

    With a `ready` awaitable the widget's own notification is used;
    otherwise `probe` is polled every `config.interval` seconds.
    """
    if ready is not None:
        await ready
        return probe()

    config = config or ReadinessConfig()
    attempts = 0
    while True:
        table = probe()
        if table is not None:
            return table
        attempts += 1
        if config.max_attempts is not None and attempts >= config.max_attempts:
            return None
        await asyncio.sleep(config.interval)


def parse_options(text: Optional[str]) -> List[dict]:
    """Option payload from the embedded JSON. Anything malformed yields []."""
    try:
        data = json.loads(text or "[]")
    except json.JSONDecodeError as e:
        print(f"[unit_search] Failed to parse unit search options: {e}")
        return []
    if not isinstance(data, list):
        print(f"[unit_search] Expected a list of options, got {type(data).__name__}")
        return []
    options = [o for o in data if isinstance(o, dict) and isinstance(o.get("value"), str)]
    if len(options) != len(data):
        print(f"[unit_search] Dropped {len(data) - len(options)} malformed options")
    return options


class CatalogPage:
    def __init__(self, mount_target: Optional[Element],
                 options_script: Optional[Element],
                 table_probe: Callable[[], Optional[TableWidget]],
                 location: Location,
                 config: Optional[ReadinessConfig] = None,
                 table_ready: Optional[Awaitable] = None):
        self.mount_target = mount_target
        self.options_script = options_script
        self.table_probe = table_probe
        self.location = location
        self.config = config or ReadinessConfig()
        self.table_ready = table_ready

        self.select: Optional[MultiSelect] = None
        self.text_input: Optional[TextBox] = None
        self.bridge: Optional[ComboboxBridge] = None
        self.sort_sync: Optional[SortSync] = None
        self.table: Optional[TableWidget] = None

    async def init(self):
        await next_frame()
        self.mount_search()
        table = await wait_for_table(self.table_probe, self.config, self.table_ready)
        if table is None:
            return
        self.table_ready = None
        self.bind_table(table)

    def mount_search(self) -> bool:
        if self.mount_target is None or self.options_script is None:
            return False
        if self.mount_target.has_attr(MOUNTED_MARKER):
            return False
        self.mount_target.set_attr(MOUNTED_MARKER, "true")

        options = parse_options(self.options_script.text)
        self.select = MultiSelect(options, element=Element(id="unit-search-select"))
        self.text_input = TextBox()
        return True

    def bind_table(self, table: TableWidget):
        self.table = table
        if self.select is not None and self.bridge is None:
            self.bridge = ComboboxBridge(self.select, self.text_input, table)
            self.bridge.bind()
            install_filter(table, self.bridge.state)
        sync = setup_sort_sync(table, self.location)
        if sync is not None:
            self.sort_sync = sync


# ---------------------------------------------------------------------------
# Headless page assembly
# ---------------------------------------------------------------------------

def build_page(profiles: Sequence[UnitProfile], href: str = "http://localhost/",
               icon_files: Sequence = (), base_url: str = "",
               config: Optional[ReadinessConfig] = None) -> CatalogPage:
    """Assemble a page over in-memory widgets. The table starts uninitialized."""
    options = build_facet_index(profiles, icon_files)
    table = UnitTable(profiles)
    page = CatalogPage(
        mount_target=Element(id="unit-search-mount"),
        options_script=Element(id="unit-search-options",
                               text=search_options_json(options, base_url)),
        table_probe=lambda: table if table.initialized else None,
        location=BrowserLocation(href),
        config=config,
    )
    page.table = table
    return page


def run_page(page: CatalogPage, initialize_table: bool = True) -> CatalogPage:
    table = page.table
    if initialize_table and isinstance(table, UnitTable) and not table.initialized:
        table.initialize()
    asyncio.run(page.init())
    return page
