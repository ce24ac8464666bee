"""CLI entry point for trellokit."""

from __future__ import annotations

import argparse
import logging
import os
import shlex
import subprocess
import sys
import tempfile
from dataclasses import replace
from pathlib import Path

from trellokit.card_text import CardContents, parse_card_text
from trellokit.config import load_credentials, load_env_file
from trellokit.exceptions import CardParseError, TrelloError
from trellokit.filtering import filter_board
from trellokit.logging_config import setup_logging
from trellokit.trello_client import TrelloClient

logger = logging.getLogger(__name__)

EPILOG = """
Credentials:
    export TRELLO_API_KEY="your-key"
    export TRELLO_TOKEN="your-token"
    (or put them in a .env file; override its path with TRELLO_ENV_FILE)

Examples:
    trellokit boards
    trellokit show Bm0nnz1R --filter "bug|urgent"
    trellokit edit 5f2b1c0e9a1d4b3c2a1f0e9d
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trellokit",
        description="Browse and edit Trello boards from the terminal",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Errors only")
    verbosity.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--log-file", help="Also write timestamped logs to this file")
    parser.add_argument(
        "--no-verify-ssl", action="store_true", help="Disable SSL certificate verification"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    boards = commands.add_parser("boards", help="List your open boards")
    boards.set_defaults(handler=cmd_boards)

    show = commands.add_parser("show", help="Show a board with its lists and cards")
    show.add_argument("board_id")
    show.add_argument("--filter", dest="label_filter", help="Only cards with a label matching REGEX")
    show.add_argument(
        "--case-sensitive", action="store_true", help="Match the label filter case-sensitively"
    )
    show.set_defaults(handler=cmd_show)

    card = commands.add_parser("card", help="Show a card and its attachments")
    card.add_argument("card_id")
    card.set_defaults(handler=cmd_card)

    edit = commands.add_parser("edit", help="Edit a card's name and description in $EDITOR")
    edit.add_argument("card_id")
    edit.set_defaults(handler=cmd_edit)

    attach = commands.add_parser("attach", help="Upload a file as a card attachment")
    attach.add_argument("card_id")
    attach.add_argument("file", type=Path)
    attach.set_defaults(handler=cmd_attach)

    return parser


def resolve_log_level(args: argparse.Namespace) -> str:
    if args.verbose:
        return "DEBUG"
    if args.quiet:
        return "ERROR"
    if args.log_level:
        return args.log_level.upper()
    return "INFO"


# ===== Commands =====


def cmd_boards(client: TrelloClient, args: argparse.Namespace) -> None:
    boards = client.get_boards()
    logger.info(f"Found {len(boards)} open board(s)")
    for board in boards:
        print(f"{board.name} ({board.id})")


def cmd_show(client: TrelloClient, args: argparse.Namespace) -> None:
    board = client.fetch_nested(client.get_board(args.board_id))
    if args.label_filter:
        board = filter_board(board, args.label_filter, ignore_case=not args.case_sensitive)
    print(board.render())


def cmd_card(client: TrelloClient, args: argparse.Namespace) -> None:
    card = client.get_card(args.card_id)
    print(card.render())
    for attachment in client.get_card_attachments(args.card_id):
        print()
        print(attachment.render())


def cmd_attach(client: TrelloClient, args: argparse.Namespace) -> None:
    if not args.file.is_file():
        logger.error(f"❌ File not found: {args.file}")
        sys.exit(1)
    attachment = client.apply_attachment(args.card_id, args.file)
    logger.info(f"✅ Attached {attachment.name}")
    print(attachment.render())


def get_editor() -> str:
    return os.getenv("VISUAL") or os.getenv("EDITOR") or "vi"


def edit_text(initial: str) -> str:
    """Open ``initial`` in the user's editor and return the saved text.

    Files are read back in text mode, so CRLF line endings become '\\n'.
    """
    with tempfile.NamedTemporaryFile("w", suffix=".md", prefix="trellokit-", delete=False) as f:
        f.write(initial)
        path = f.name
    try:
        subprocess.run([*shlex.split(get_editor()), path], check=True)
        with open(path) as f:
            edited = f.read()
    finally:
        os.unlink(path)

    # Most editors append a final newline on save
    if edited.endswith("\n") and not initial.endswith("\n"):
        edited = edited[:-1]
    return edited


def confirm(prompt: str) -> bool:
    try:
        return input(prompt).strip().lower() in {"y", "yes"}
    except EOFError:
        return False


def cmd_edit(client: TrelloClient, args: argparse.Namespace) -> None:
    card = client.get_card(args.card_id)
    text = card.render()

    # Edits are measured against what the untouched text parses to
    baseline = parse_card_text(text)
    if baseline != CardContents(name=card.name, desc=card.desc):
        logger.warning(
            "⚠️  Card name contains a blank line; saving will move the text after it "
            "into the description"
        )

    while True:
        try:
            text = edit_text(text)
        except subprocess.CalledProcessError as e:
            logger.error(f"❌ Editor exited with status {e.returncode}, card not changed")
            sys.exit(1)
        try:
            contents = parse_card_text(text)
            break
        except CardParseError as e:
            logger.error(f"❌ {e}")
            if not confirm("Re-open the editor? [y/N] "):
                logger.error("Card not changed")
                sys.exit(1)

    if contents == baseline:
        logger.info("No changes")
        return

    updated = client.update_card(replace(card, name=contents.name, desc=contents.desc))
    logger.info(f"✅ Updated card: {updated.name}")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(resolve_log_level(args), args.log_file)

    load_env_file()
    credentials = load_credentials()
    if credentials is None:
        logger.error("❌ Error: Missing required Trello credentials")
        logger.error("\nRequired environment variables:")
        logger.error("  TRELLO_API_KEY     - Your Trello API key")
        logger.error("  TRELLO_TOKEN       - Your Trello API token")
        logger.error("\nGet credentials at: https://trello.com/power-ups/admin")
        sys.exit(1)

    if args.no_verify_ssl:
        import urllib3

        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        logger.info("🔓 SSL verification disabled")

    client = TrelloClient(
        credentials.api_key,
        credentials.token,
        host=credentials.host,
        verify_ssl=not args.no_verify_ssl,
    )

    try:
        args.handler(client, args)
    except TrelloError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except ValueError as e:
        # Invalid label filter regex
        logger.error(f"❌ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
