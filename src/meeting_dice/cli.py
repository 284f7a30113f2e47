"""Command-line entrypoint: choose who is going to be the next meeting chair."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from meeting_dice.config import data_file_path, get_settings
from meeting_dice.errors import StateFileError
from meeting_dice.logging_setup import configure_logging
from meeting_dice.persistence.state_store import StateStore
from meeting_dice.rotation.prompt import ConsolePrompter
from meeting_dice.service import Invocation, MeetingDiceService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meeting-dice",
        description="Choose who is gonna be the next meeting chair.",
        epilog="All mutations are applied before listing and rolling the dice.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        dest="list_members",
        help="List members, hidden members and the last chair and note-taker.",
    )
    parser.add_argument("--last-chair", metavar="NAME", help="Specify who was the last meeting chair.")
    parser.add_argument(
        "--last-note-taker", metavar="NAME", help="Specify who was the last note-taker."
    )

    add = parser.add_mutually_exclusive_group()
    add.add_argument("--add-member", metavar="NAME", help="Add a new member to the team.")
    add.add_argument("--add-members", metavar="NAME", nargs="+", help="Add members to the team.")

    hide = parser.add_mutually_exclusive_group()
    hide.add_argument(
        "--hide-member", metavar="NAME", help="Leave a member out of this round only."
    )
    hide.add_argument(
        "--hide-members", metavar="NAME", nargs="+", help="Leave members out of this round only."
    )

    remove = parser.add_mutually_exclusive_group()
    remove.add_argument("--remove-member", metavar="NAME", help="Remove a member of the team.")
    remove.add_argument(
        "--remove-members", metavar="NAME", nargs="+", help="Remove members of the team."
    )

    parser.add_argument(
        "--note-taker", action="store_true", help="Also choose a note-taker when rolling."
    )
    parser.add_argument("--run", action="store_true", help="Roll the dice.")
    parser.add_argument("--seed", help="Seed the dice for a reproducible draw.")
    parser.add_argument("--data-file", type=Path, help="Use this state file instead of the default.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _one_or_many(single: str | None, many: list[str] | None) -> list[str]:
    if single is not None:
        return [single]
    return list(many or [])


def invocation_from_args(args: argparse.Namespace) -> Invocation:
    return Invocation(
        list_members=args.list_members,
        last_chair=args.last_chair,
        last_note_taker=args.last_note_taker,
        add=_one_or_many(args.add_member, args.add_members),
        remove=_one_or_many(args.remove_member, args.remove_members),
        hide=_one_or_many(args.hide_member, args.hide_members),
        note_taker=args.note_taker,
        run=args.run,
        seed=args.seed,
    )


def main(
    argv: list[str] | None = None,
    read_line: Callable[[], str] = input,
    write: Callable[[str], None] = print,
) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"error: invalid settings: {e}", file=sys.stderr)
        return EXIT_USAGE
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        path = args.data_file or data_file_path(settings)
        store = StateStore.load_or_create(path)
        service = MeetingDiceService(
            store,
            confirm=ConsolePrompter(read_line=read_line, write=write).confirm,
            write=write,
        )
        result = service.execute(invocation_from_args(args))
    except StateFileError as e:
        logger.debug("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except (EOFError, KeyboardInterrupt):
        print("error: aborted before the draw was confirmed, nothing saved", file=sys.stderr)
        return EXIT_FAILURE

    if not result.success:
        for error in result.errors:
            print(f"error: {error}", file=sys.stderr)
        return EXIT_USAGE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
