"""Meeting roster — the members of the team and who last held each role.

The roster is the source of truth for who can be drawn. It tracks:
- Members, in insertion order (display casing preserved)
- The last chair and the last note-taker, by identity

Identity is case-insensitive: "Ana" and "ana" are the same member. The
identity key is the lowercased name; the original casing is kept only for
display.

Invariants enforced:
- Adding a name that already resolves is a no-op.
- A role never points at someone who is no longer a member. Removing a
  member clears every role they hold.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from meeting_dice.errors import UnknownMemberError

logger = logging.getLogger(__name__)


def identity_key(name: str) -> str:
    """Normalise a name into the key used for equality and lookup."""
    return name.strip().lower()


class Role(str, enum.Enum):
    """A rotating meeting responsibility."""
    CHAIR = "chair"
    NOTE_TAKER = "note_taker"

    @property
    def label(self) -> str:
        return "chair" if self is Role.CHAIR else "note-taker"


@dataclass(frozen=True)
class Participant:
    """A single member of the roster."""
    name: str

    @property
    def key(self) -> str:
        return identity_key(self.name)


@dataclass(frozen=True)
class RosterView:
    """Read-only projection of the roster for display."""
    members: tuple[str, ...]
    hidden: tuple[str, ...]
    last_chair: Optional[str]
    last_note_taker: Optional[str]


class MeetingRoster:
    """Ordered registry of meeting members and current role holders.

    Thread-safety: this class is not thread-safe. A single invocation owns
    the roster from load to save.
    """

    def __init__(self) -> None:
        self._members: list[Participant] = []
        self._holders: dict[Role, Optional[str]] = {
            Role.CHAIR: None,
            Role.NOTE_TAKER: None,
        }

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find(self, name: str) -> Optional[Participant]:
        """Return the unique case-insensitive match for name.

        Returns None when nobody matches, and also when more than one
        member matches (the ambiguity is logged, never guessed).
        """
        key = identity_key(name)
        matches = [m for m in self._members if m.key == key]
        if len(matches) > 1:
            logger.warning("More than one member matches %s", name)
            return None
        return matches[0] if matches else None

    def members(self) -> list[Participant]:
        """Return all members in insertion order."""
        return list(self._members)

    @property
    def count(self) -> int:
        return len(self._members)

    @property
    def is_empty(self) -> bool:
        return not self._members

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def holder(self, role: Role) -> Optional[Participant]:
        """Return the current holder of a role, if still a member."""
        key = self._holders[role]
        if key is None:
            return None
        for member in self._members:
            if member.key == key:
                return member
        return None

    def set_role(self, role: Role, name: str) -> Participant:
        """Make name the current holder of role.

        Raises UnknownMemberError if name does not resolve to a member.
        """
        member = self.find(name)
        if member is None:
            raise UnknownMemberError(name)
        self._holders[role] = member.key
        logger.debug("%s is now the last %s", member.name, role.label)
        return member

    def clear_role(self, role: Role) -> None:
        self._holders[role] = None

    def change_last_chair(self, name: str) -> Participant:
        return self.set_role(Role.CHAIR, name)

    def change_last_note_taker(self, name: str) -> Participant:
        return self.set_role(Role.NOTE_TAKER, name)

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def add_members(self, names: Iterable[str]) -> list[str]:
        """Append each new name, in input order.

        A name that already resolves (including one added earlier in the
        same call) is skipped. Returns the names actually added.
        """
        added: list[str] = []
        for name in names:
            display = name.strip()
            if not display:
                logger.warning("Cannot add member with blank name")
                continue
            if self.find(display) is not None:
                logger.warning("%s already exists in the members list", display)
                continue
            self._members.append(Participant(display))
            added.append(display)
        return added

    def remove_members(self, names: Iterable[str]) -> list[str]:
        """Remove each name that resolves, clearing any role it holds.

        Unknown names are logged and skipped. Returns the removed names.
        """
        removed: list[str] = []
        for name in names:
            member = self.find(name)
            if member is None:
                logger.warning("%s doesn't exist in the members list", name)
                continue
            for role, key in self._holders.items():
                if key == member.key:
                    self._holders[role] = None
                    logger.info("%s was the last %s, record cleared", member.name, role.label)
            self._members.remove(member)
            removed.append(member.name)
        return removed

    def resolve_hidden(self, names: Iterable[str]) -> set[str]:
        """Resolve hide input against the current roster into identity keys."""
        hidden: set[str] = set()
        for name in names:
            member = self.find(name)
            if member is None:
                logger.warning("Cannot hide %s: not in the members list", name)
                continue
            hidden.add(member.key)
        return hidden

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def list_view(self, hidden: Iterable[str] = ()) -> RosterView:
        """Snapshot of members, hidden members and role holders."""
        hidden_keys = {identity_key(h) for h in hidden}
        chair = self.holder(Role.CHAIR)
        note_taker = self.holder(Role.NOTE_TAKER)
        return RosterView(
            members=tuple(m.name for m in self._members),
            hidden=tuple(m.name for m in self._members if m.key in hidden_keys),
            last_chair=chair.name if chair else None,
            last_note_taker=note_taker.name if note_taker else None,
        )
