"""Command line entry point for onenote CLI."""

from __future__ import annotations

import argparse
import logging
import sys

from onenote_cli.core import DEFAULT_BASE, API_MAX_LIMIT, AuthRejected, CredentialMissing, OneNoteError
from onenote_cli.core.config import FAST_MODE_DAYS, MAX_CONSECUTIVE_FAILURES
from onenote_cli.commands import (
    cmd_auth_set,
    cmd_auth_info,
    cmd_notebooks_list,
    cmd_sections_list,
    cmd_pages_list,
    cmd_pages_search,
    cmd_pages_get,
    cmd_export,
)
from onenote_cli.mcp_server import cmd_mcp

logger = logging.getLogger("onenote_cli")


def _link(value: str) -> str:
    return value.strip().strip("\"'")


def build_parser():
    parser = argparse.ArgumentParser(prog="onenote", description="OneNote CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd")

    # auth
    p_auth = sub.add_parser("auth", help="Authentication")
    sub_auth = p_auth.add_subparsers(dest="auth_cmd")

    p_auth_set = sub_auth.add_parser("set", help="Save an access token to the token file")
    p_auth_set.add_argument("--token", required=True, help="Bearer token for the Graph API")
    p_auth_set.set_defaults(func=cmd_auth_set)

    p_auth_info = sub_auth.add_parser("info", help=f"Show the signed-in user ({DEFAULT_BASE}/me)")
    p_auth_info.set_defaults(func=cmd_auth_info)

    # notebooks / sections
    p_nb = sub.add_parser("notebooks", help="Notebooks")
    sub_nb = p_nb.add_subparsers(dest="notebooks_cmd")
    p_nb_list = sub_nb.add_parser("list", help="List notebooks")
    p_nb_list.add_argument("--json", action="store_true", help="Output raw JSON")
    p_nb_list.set_defaults(func=cmd_notebooks_list)

    p_sec = sub.add_parser("sections", help="Sections")
    sub_sec = p_sec.add_subparsers(dest="sections_cmd")
    p_sec_list = sub_sec.add_parser("list", help="List sections")
    p_sec_list.add_argument("--notebook-id", help="Only sections of this notebook")
    p_sec_list.add_argument("--json", action="store_true", help="Output raw JSON")
    p_sec_list.set_defaults(func=cmd_sections_list)

    # pages
    p_pages = sub.add_parser("pages", help="Pages")
    sub_pages = p_pages.add_subparsers(dest="pages_cmd")

    p_pl = sub_pages.add_parser("list", help="List pages of a section")
    p_pl.add_argument("--top", type=int, help=f"Page size (max {API_MAX_LIMIT})")
    p_pl.add_argument("--next-link", type=_link, help="Continue from a previous listing")
    p_pl.add_argument("--fetch-all", action="store_true", help="Follow every continuation link")
    p_pl.add_argument("--section-id", help="Section to list (default: first section of the configured notebook)")
    p_pl.add_argument("--pick", action="store_true", help="Choose the section interactively")
    p_pl.add_argument("--json", action="store_true", help="Output raw JSON")
    p_pl.set_defaults(func=cmd_pages_list)

    p_ps = sub_pages.add_parser("search", help="Search pages by title")
    p_ps.add_argument("term", nargs="?", help="Title keyword (omit to list all pages)")
    p_ps.add_argument("--section-id", help="Search only this section")
    p_ps.add_argument("--json", action="store_true", help="Output raw JSON")
    p_ps.set_defaults(func=cmd_pages_search)

    p_pg = sub_pages.add_parser("get", help="Download one page as HTML")
    p_pg.add_argument("page_id", help="Page ID")
    p_pg.add_argument("--out-dir", default="output", help="Output directory (default: ./output)")
    p_pg.add_argument("--no-snippet", dest="snippet", action="store_false", help="Do not print a text preview")
    p_pg.set_defaults(func=cmd_pages_get)

    # export
    p_exp = sub.add_parser("export", help="Export the pages listed in a manifest")
    p_exp.add_argument("--manifest", required=True, help="Page list as printed by 'onenote pages list'")
    p_exp.add_argument("--out-dir", required=True, help="Output directory")
    p_exp.add_argument("--fast", action="store_true", help="Skip pages with a recent export")
    p_exp.add_argument("--fast-days", type=int, default=FAST_MODE_DAYS, help="Freshness window for --fast in days")
    p_exp.add_argument(
        "--max-failures",
        type=int,
        default=MAX_CONSECUTIVE_FAILURES,
        help="Stop after this many consecutive failures",
    )
    p_exp.add_argument("--failed-log", help="Failure log path (default: <out-dir>/failed-downloads.txt)")
    p_exp.set_defaults(func=cmd_export)

    # agent tool server
    p_mcp = sub.add_parser("mcp", help="Run the MCP tool server on stdio")
    p_mcp.set_defaults(func=cmd_mcp)

    groups = {"auth": p_auth, "notebooks": p_nb, "sections": p_sec, "pages": p_pages}
    return parser, groups


def main(argv=None):
    parser, groups = build_parser()
    args, unknown = parser.parse_known_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if unknown:
        logger.debug("Ignoring unrecognized arguments: %s", " ".join(unknown))

    if not args.cmd:
        parser.print_help()
        return 0
    if not hasattr(args, "func"):
        groups[args.cmd].print_help()
        return 0
    try:
        return args.func(args)
    except (CredentialMissing, AuthRejected) as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Re-authenticate and save a new token: onenote auth set --token <token>", file=sys.stderr)
        return 2
    except OneNoteError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
