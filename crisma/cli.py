# crisma/cli.py
"""
Bulk-import participants from a TSV file without opening the console.

Each run logs in to the backend with the given credentials (a fresh process
holds no session cookie), loads the participant list and posts the file.

Usage:
  crisma-import participants.tsv --username admin --password secret
  crisma-import participants.tsv --base-url http://127.0.0.1:8000
"""
from __future__ import annotations

import argparse
import getpass
import logging
import os
from dataclasses import replace
from typing import List, Optional

from crisma.api_client import ApiError
from crisma.config import load_settings
from crisma.context import AppContext
from crisma.logging_config import setup_logging
from crisma.schemas import LoginPayload
from crisma.services.list_view import PageState


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="crisma-import", description=__doc__.strip().splitlines()[0])
    ap.add_argument("file", help="Tab-separated export (e.g. from Google Sheets)")
    ap.add_argument("--base-url", default=None, help="Backend URL (default: CRISMA_API_BASE_URL)")
    ap.add_argument("--username", default=os.getenv("CRISMA_USERNAME"))
    ap.add_argument("--password", default=os.getenv("CRISMA_PASSWORD"))
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None, ctx: Optional[AppContext] = None) -> int:
    args = build_parser().parse_args(argv)
    log = setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    if ctx is None:
        settings = load_settings()
        if args.base_url:
            settings = replace(settings, api_base_url=args.base_url.rstrip("/"))
        ctx = AppContext(settings=settings)

    if ctx.start() is None:
        if not args.username:
            log.error("Login required. Pass --username/--password or set CRISMA_USERNAME.")
            return 2
        password = args.password or getpass.getpass("Password: ")
        try:
            ctx.login(LoginPayload(username=args.username, password=password))
        except ApiError as exc:
            log.error("Login failed: %s", exc.message)
            return 2

    if ctx.participants.load() == PageState.ERROR:
        log.error("Could not load participants: %s", ctx.participants.error)
        return 1
    before = len(ctx.participants.items)

    widget = ctx.open_import()
    try:
        selected = widget.select_file(args.file)
    except OSError as exc:
        log.error("Cannot read %s: %s", args.file, exc)
        return 1
    if not selected:
        log.error("Cannot read %s: %s", args.file, widget.error)
        return 1
    result = widget.submit()
    if result is None:
        log.error("Import failed: %s", widget.error)
        return 1

    print(widget.success_message)
    print(f"Participants: {before} -> {len(ctx.participants.items)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
