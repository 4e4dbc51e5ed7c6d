#!/usr/bin/env python3
"""
Wellness Journal command line
Usage: wellness-journal {progress,add,list,delete,share,chat} ...
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from wellness_journal.config import get_settings
from wellness_journal.core.models import JournalEntry, JournalError
from wellness_journal.services.ai_service import AssistantService
from wellness_journal.services.entry_store import JsonEntryStore
from wellness_journal.services.progress_service import ProgressService
from wellness_journal.ui.progress import format_snapshot, mood_emoji, share_text
from wellness_journal.utils.datetime_utils import parse_timestamp
from wellness_journal.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{get_settings().APP_NAME}: journal entries and progress tracking")
    parser.add_argument("--data-file", type=str, help="Entry store file (default from settings)")
    sub = parser.add_subparsers(dest="command", required=True)

    progress = sub.add_parser("progress", help="Show progress statistics")
    progress.add_argument("--owner", required=True, help="Owner id")
    progress.add_argument("--json", action="store_true", help="Print as JSON")

    add = sub.add_parser("add", help="Add a journal entry")
    add.add_argument("--owner", required=True, help="Owner id")
    add.add_argument("--mood", type=int, choices=range(1, 6), help="Mood level 1-5")
    add.add_argument("--emotion", action="append", default=[], help="Emotion tag (repeatable)")
    add.add_argument("--title", default="", help="Entry title")
    add.add_argument("--content", default="", help="Entry text")
    add.add_argument("--at", help="ISO timestamp (default: now)")

    listing = sub.add_parser("list", help="List journal entries")
    listing.add_argument("--owner", required=True, help="Owner id")

    delete = sub.add_parser("delete", help="Delete a journal entry")
    delete.add_argument("--owner", required=True, help="Owner id")
    delete.add_argument("--entry", required=True, help="Entry id")

    share = sub.add_parser("share", help="Print a shareable progress summary")
    share.add_argument("--owner", required=True, help="Owner id")

    chat = sub.add_parser("chat", help="Talk to the wellness assistant")
    chat.add_argument("message", help="Your message")

    return parser


async def load_snapshot(store: JsonEntryStore, owner: str):
    service = ProgressService(store, owner)
    await service.start()
    await service.stop()
    return service


def run(args: argparse.Namespace) -> int:
    settings = get_settings()

    if args.command == "chat":
        assistant = AssistantService(settings)
        print(asyncio.run(assistant.chat(args.message)))
        return 0

    store = JsonEntryStore(args.data_file or settings.entries_path)

    if args.command == "add":
        created_at = None
        if args.at:
            created_at = parse_timestamp(args.at)
            if created_at is None:
                print(f"❌ Invalid timestamp: {args.at}", file=sys.stderr)
                return 2
        entry = store.insert(JournalEntry.create(
            args.owner, mood_level=args.mood, emotions=args.emotion,
            title=args.title, content=args.content, created_at=created_at,
        ))
        print(f"✅ Entry saved: {entry.entry_id}")
        return 0

    if args.command == "list":
        for entry in store.list_all(args.owner):
            emotions = ", ".join(sorted(entry.emotions))
            print(f"{entry.entry_id}  {entry.created_at}  {mood_emoji(entry.mood)}  {entry.title}  {emotions}")
        return 0

    if args.command == "delete":
        entry = store.get(args.entry)
        if entry is None or entry.owner_id != args.owner:
            print(f"❌ Entry not found: {args.entry}", file=sys.stderr)
            return 1
        store.delete(args.entry)
        print(f"🗑️ Entry deleted: {args.entry}")
        return 0

    service = asyncio.run(load_snapshot(store, args.owner))
    if service.load_error:
        print(f"❌ {service.load_error}. Please try again.", file=sys.stderr)
        return 1

    if args.command == "share":
        print(share_text(service.snapshot))
    elif args.json:
        print(json.dumps(service.snapshot.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(format_snapshot(service.snapshot))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    try:
        return run(args)
    except JournalError as e:
        logger.error(f"❌ {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
