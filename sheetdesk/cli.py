#!/usr/bin/env python3
"""
SheetDesk CLI: import, browse, edit and export stored spreadsheet files.

USAGE:
  python -m sheetdesk.cli import members.xlsx                  # Store (or replace) a file
  python -m sheetdesk.cli list                                 # List stored files
  python -m sheetdesk.cli show members.xlsx --search smith     # Page through a file
  python -m sheetdesk.cli show members.xlsx --sort MEMBER-DESC --page 2
  python -m sheetdesk.cli edit members.xlsx 4 NAME="Jane Doe"  # Edit row 4 (full-file index)
  python -m sheetdesk.cli delete-member members.xlsx 1007      # Delete rows with MEMBER 1007
  python -m sheetdesk.cli export members.xlsx --output out.xlsx
  python -m sheetdesk.cli delete members.xlsx --yes

  python -m sheetdesk.cli serve --port 8000                    # Start API server
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import pandas as pd

from sheetdesk.config import DEFAULT_PAGE_SIZE, EXPORTS_FOLDER, STORAGE_FOLDER
from sheetdesk.data.normalize import coerce_text
from sheetdesk.data.storage import FileStorage
from sheetdesk.data.store import RecordStore
from sheetdesk.errors import PersistenceError, SheetDeskError
from sheetdesk.workspace import NoticeLevel, Workspace


# ---------------------------------------------------------------------------
# Collaborators: stdin confirmation, printed notices
# ---------------------------------------------------------------------------

def _console_confirm(title: str, text: str) -> bool:
    answer = input(f"  {title} {text} [y/N] ").strip().lower()
    return answer in ("y", "yes")


def _always_confirm(title: str, text: str) -> bool:
    return True


class PrintNotifier:
    def notify(self, level: NoticeLevel, title: str, message: str) -> None:
        print(f"  [{level.value}] {title} {message}")


def _workspace(args) -> Workspace:
    try:
        store = RecordStore(FileStorage(STORAGE_FOLDER)).load()
    except PersistenceError as exc:
        print(f"  Error: cannot load stored files: {exc}")
        raise
    confirm = _always_confirm if getattr(args, "yes", False) else _console_confirm
    return Workspace(store, confirm=confirm, notifier=PrintNotifier())


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_import(args):
    """Store one or more spreadsheet files."""
    ws = _workspace(args)
    for path in args.files:
        path = Path(path)
        dataset = ws.upload(path.read_bytes(), path.name)
        print(f"   {dataset.name}: {len(dataset.headers)} columns, {len(dataset.rows):,} rows")


def cmd_list(args):
    """List stored files."""
    ws = _workspace(args)
    files = ws.datasets()
    if not files:
        print("\n  No files stored yet. Import one with: sheetdesk import <file>\n")
        return
    print(f"\nFILES ({len(files)}):\n")
    for i, f in enumerate(files, 1):
        print(f"{i:<4}{f.name[:50]:<52}{f.columns:>4} cols {f.rows:>8,} rows")
    print()


def cmd_show(args):
    """Print one page of a stored file."""
    ws = _workspace(args)
    dataset = ws.select(args.name)
    ws.search(args.search or "")
    ws.sort(args.sort)
    ws.set_page_size(args.page_size)
    ws.go_to_page(args.page)
    page = ws.visible_page()

    print(f"\n  {dataset.name}  |  search: {ws.query.filter_text or '-'}  |  sort: {ws.query.sort_token or '-'}\n")
    if page.rows:
        matrix = [[r.get(h, "") for h in dataset.headers] for r in page.records]
        frame = pd.DataFrame(matrix, index=page.indices, columns=dataset.headers)
        print(frame.to_string())
    else:
        print("  (no rows)")
    print(f"\n  Page {page.page_number} of {page.total_pages or 1}  ({page.total_rows:,} matching rows)\n")


def cmd_edit(args):
    """Edit fields of one row, addressed by its index in the full file."""
    ws = _workspace(args)
    ws.select(args.name)
    ws.begin_edit(args.index)
    for assignment in args.fields:
        field, sep, value = assignment.partition("=")
        if not sep:
            print(f"  Ignoring '{assignment}' (expected FIELD=VALUE)")
            continue
        ws.set_field(field, coerce_text(value))
    ws.save_edit()


def cmd_delete_member(args):
    """Delete every row with the given MEMBER id."""
    ws = _workspace(args)
    ws.select(args.name)
    result = ws.delete_member(args.member)
    if result.applied:
        print(f"   Removed {result.affected} row(s)")


def cmd_delete(args):
    """Delete a stored file."""
    ws = _workspace(args)
    ws.delete_file(args.name)


def cmd_export(args):
    """Write a stored file back out as a spreadsheet."""
    ws = _workspace(args)
    content = ws.export(args.name)
    out = Path(args.output) if args.output else EXPORTS_FOLDER / args.name
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(content)
    print(f"\n  Exported to: {out}\n")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting SheetDesk API on port {args.port}...")
    uvicorn.run("sheetdesk.main:app", host=args.host, port=args.port, reload=args.reload)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SheetDesk: spreadsheet import, search, edit and export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    import_parser = subparsers.add_parser("import", help="Store spreadsheet file(s)")
    import_parser.add_argument("files", nargs="+", help=".xlsx, .xls or .csv file(s)")
    import_parser.set_defaults(func=cmd_import)

    list_parser = subparsers.add_parser("list", help="List stored files")
    list_parser.set_defaults(func=cmd_list)

    show_parser = subparsers.add_parser("show", help="Show a page of a stored file")
    show_parser.add_argument("name", help="Stored file name")
    show_parser.add_argument("--search", help="Free-text filter")
    show_parser.add_argument("--sort", help="<column>-ASC or <column>-DESC")
    show_parser.add_argument("--page", type=int, default=1, help="Page number (default 1)")
    show_parser.add_argument("--page-size", type=int, default=DEFAULT_PAGE_SIZE,
                             help=f"Rows per page (default {DEFAULT_PAGE_SIZE})")
    show_parser.set_defaults(func=cmd_show)

    edit_parser = subparsers.add_parser("edit", help="Edit one row")
    edit_parser.add_argument("name", help="Stored file name")
    edit_parser.add_argument("index", type=int, help="Row index in the full file (0-based)")
    edit_parser.add_argument("fields", nargs="+", help="FIELD=VALUE assignments")
    edit_parser.add_argument("--yes", action="store_true", help="Skip confirmation")
    edit_parser.set_defaults(func=cmd_edit)

    member_parser = subparsers.add_parser("delete-member", help="Delete rows by MEMBER id")
    member_parser.add_argument("name", help="Stored file name")
    member_parser.add_argument("member", help="Numeric MEMBER id")
    member_parser.add_argument("--yes", action="store_true", help="Skip confirmation")
    member_parser.set_defaults(func=cmd_delete_member)

    delete_parser = subparsers.add_parser("delete", help="Delete a stored file")
    delete_parser.add_argument("name", help="Stored file name")
    delete_parser.add_argument("--yes", action="store_true", help="Skip confirmation")
    delete_parser.set_defaults(func=cmd_delete)

    export_parser = subparsers.add_parser("export", help="Export a stored file")
    export_parser.add_argument("name", help="Stored file name")
    export_parser.add_argument("--output", help=f"Output path (default: {EXPORTS_FOLDER}/<name>)")
    export_parser.set_defaults(func=cmd_export)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address (default 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    if not args.command:
        parser.print_help()
        return 0

    try:
        args.func(args)
    except SheetDeskError:
        # already reported
        return 1
    except OSError as exc:
        print(f"  Error: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
