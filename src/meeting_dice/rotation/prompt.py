"""Confirmation prompt — the operator's yes/no veto over a proposed draw.

Input and output are injected so a round can be driven by a scripted
sequence of answers instead of a terminal.
"""

from __future__ import annotations

from typing import Callable, Mapping

from meeting_dice.rotation.roster import Participant, Role

YES_ANSWERS = frozenset({"y", "yes"})
NO_ANSWERS = frozenset({"n", "no"})


class ConsolePrompter:
    """Asks the operator to accept or reject a proposal.

    Usage:
        prompter = ConsolePrompter()
        if prompter.confirm({Role.CHAIR: Participant("Ana")}):
            ...

    An unrecognised answer re-asks the same question; it never triggers a
    new draw. EOFError from the input callable propagates to the caller.
    """

    def __init__(
        self,
        read_line: Callable[[], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self._read_line = read_line
        self._write = write

    def confirm(self, proposal: Mapping[Role, Participant]) -> bool:
        for role, participant in proposal.items():
            self._write(f"The new {role.label} is {participant.name}")
        while True:
            self._write("Continue or choose again? (y/n)")
            answer = self._read_line().strip().lower()
            if answer in YES_ANSWERS:
                return True
            if answer in NO_ANSWERS:
                return False
            self._write("Please answer y or n.")
