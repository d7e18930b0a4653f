"""
BAR Units Catalog - CLI Entry Point
====================================
Usage:
    python cli.py list [--data data/units] [--sort -metal]
    python cli.py show <unit_id> [--data data/units]
    python cli.py facets [--icons data/icons] [--json]
    python cli.py search [--tag Bot] [--faction Cortex] [--text com] [--sort -metal]
    python cli.py web [--port 8080]
"""

import argparse
import sys

from bar_units.classify import classify_all
from bar_units.facets import build_facet_index, list_icon_files, search_options_json
from bar_units.format import print_facets, print_profile, print_units_table
from bar_units.io import ICONS_DIR, UNITS_PATH, load_unit_defs
from bar_units.page import build_page, run_page
from bar_units.widgets import set_query_param

BASE_URL = "/BAR-units-db"


def _load_profiles(args):
    try:
        return classify_all(load_unit_defs(args.data))
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading units: {e}")
        sys.exit(1)


SORT_FLAGS = ("--sort", "-s")


def normalize_sort_args(argv):
    """Join `--sort -metal` into `--sort=-metal` so argparse keeps the value.

    A descending key starts with "-" and would otherwise read as a flag.
    """
    out = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in SORT_FLAGS and i + 1 < len(argv) and argv[i + 1].startswith("-") \
                and len(argv[i + 1]) > 1 and not argv[i + 1].startswith("--"):
            out.append(f"--sort={argv[i + 1]}")
            i += 2
            continue
        out.append(arg)
        i += 1
    return out


def _page_for(profiles, sort):
    href = "http://localhost/"
    if sort:
        href = set_query_param(href, "sort", sort)
    return run_page(build_page(profiles, href=href))


def cmd_list(args):
    profiles = _load_profiles(args)
    page = _page_for(profiles, args.sort)
    print_units_table(profiles, page.table.visible_rows())

    if args.export_json:
        from bar_units.io import export_profiles_json
        export_profiles_json(profiles, args.export_json)
        print(f"\nExported JSON to {args.export_json}")


def cmd_show(args):
    profiles = _load_profiles(args)
    for p in profiles:
        if p.id == args.unit_id:
            print_profile(p)
            return
    print(f"Unit not found: {args.unit_id}")
    sys.exit(1)


def cmd_facets(args):
    profiles = _load_profiles(args)
    options = build_facet_index(profiles, list_icon_files(args.icons))
    if args.json:
        print(search_options_json(options, args.base_url))
    else:
        print_facets(options)


def cmd_search(args):
    profiles = _load_profiles(args)
    page = _page_for(profiles, args.sort)
    bridge = page.bridge

    # Same path as a user picking options and typing in the combobox
    for value in (args.faction or []) + (args.tag or []):
        if page.select.option(value) is None:
            print(f"[search] Unknown option: {value}")
            continue
        page.select.click_option(value)
    if args.text:
        page.text_input.type(args.text)
    else:
        bridge.apply_filters()

    print_units_table(profiles, page.table.visible_rows())
    print(f"URL: {page.location.href}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="BAR Units Catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--data", default=str(UNITS_PATH),
                        help=f"Unit data file or directory (default: {UNITS_PATH})")
    sub = parser.add_subparsers(dest="command", help="Command to run")

    # list
    p_list = sub.add_parser("list", aliases=["ls"], help="List all classified units")
    p_list.add_argument("--sort", "-s", default=None,
                        help="Sort key, '-' prefix for descending (e.g. --sort -metal)")
    p_list.add_argument("--export-json", default=None,
                        help="Export classified profiles as JSON")

    # show
    p_show = sub.add_parser("show", help="Show one unit profile")
    p_show.add_argument("unit_id", help="Unit id, e.g. armcom")

    # facets
    p_fac = sub.add_parser("facets", help="List faction and tag facets")
    p_fac.add_argument("--icons", default=str(ICONS_DIR),
                       help=f"Tag icon directory (default: {ICONS_DIR})")
    p_fac.add_argument("--json", action="store_true",
                       help="Print the combobox option payload as JSON")
    p_fac.add_argument("--base-url", default=BASE_URL,
                       help=f"Prefix for icon URLs (default: {BASE_URL})")

    # search
    p_search = sub.add_parser("search", help="Filter units like the unit search page")
    p_search.add_argument("--tag", "-t", action="append", default=None,
                          help="Selected tag (repeatable)")
    p_search.add_argument("--faction", "-f", action="append", default=None,
                          help="Selected faction (repeatable)")
    p_search.add_argument("--text", default=None, help="Free-text fragment")
    p_search.add_argument("--sort", "-s", default=None,
                          help="Sort key, '-' prefix for descending (e.g. --sort -metal)")

    # web
    p_web = sub.add_parser("web", aliases=["serve"], help="Start the catalog API server")
    p_web.add_argument("--port", type=int, default=8080,
                       help="Port to serve on (default: 8080)")

    if argv is None:
        argv = sys.argv[1:]
    args = parser.parse_args(normalize_sort_args(argv))

    if args.command in ("list", "ls"):
        cmd_list(args)
    elif args.command == "show":
        cmd_show(args)
    elif args.command == "facets":
        cmd_facets(args)
    elif args.command == "search":
        cmd_search(args)
    elif args.command in ("web", "serve"):
        from bar_units.web import start_server
        start_server(port=args.port, units_path=args.data)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
