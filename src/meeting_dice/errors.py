"""Error taxonomy for meeting-dice.

Soft conditions (unknown names in a batch, duplicates, no eligible
candidate) are logged where they are detected and never raised. Only
usage errors and state-file failures propagate to the command line.
"""


class MeetingDiceError(Exception):
    pass


class UsageError(MeetingDiceError, ValueError):
    """The operator asked for something the roster cannot satisfy."""


class UnknownMemberError(UsageError):
    def __init__(self, name: str) -> None:
        super().__init__(f"{name} doesn't exist in the members list")
        self.name = name


class StateFileError(MeetingDiceError, OSError):
    """The state file could not be read, parsed or written."""
