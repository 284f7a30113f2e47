"""Rotation module — meeting roster and role selection engine."""

from meeting_dice.rotation.prompt import ConsolePrompter
from meeting_dice.rotation.roster import (
    MeetingRoster,
    Participant,
    Role,
    RosterView,
    identity_key,
)
from meeting_dice.rotation.selector import RoleSelector, RoundState, SelectionResult

__all__ = [
    "ConsolePrompter",
    "MeetingRoster",
    "Participant",
    "Role",
    "RosterView",
    "identity_key",
    "RoleSelector",
    "RoundState",
    "SelectionResult",
]
