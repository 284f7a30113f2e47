"""Meeting-dice service — unified facade for one invocation.

This is the primary interface for programmatic access to meeting-dice.
It applies an operator's request to the persisted roster, in order:
- Role overrides (last chair, last note-taker)
- Roster edits (add, then remove)
- Hidden members for this round
- Listing
- The draw/confirm round
- Persistence

The roster is loaded when the service is built and written back once,
at the end of a successful invocation. A usage error stops the
invocation before anything is written, so the state file is left exactly
as it was.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from meeting_dice.errors import UsageError
from meeting_dice.persistence.state_store import StateStore
from meeting_dice.rotation.roster import MeetingRoster, Role, RosterView
from meeting_dice.rotation.selector import Confirm, RoleSelector, SelectionResult

logger = logging.getLogger(__name__)

SAVED_MESSAGE = "Saved! Have a great meeting"


@dataclass(frozen=True)
class Invocation:
    """Everything the operator asked for in one run."""
    list_members: bool = False
    last_chair: Optional[str] = None
    last_note_taker: Optional[str] = None
    add: list[str] = field(default_factory=list)
    remove: list[str] = field(default_factory=list)
    hide: list[str] = field(default_factory=list)
    note_taker: bool = False
    run: bool = False
    seed: Optional[str] = None


@dataclass(frozen=True)
class ServiceResult:
    """Result of a service operation."""
    success: bool
    errors: list[str] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)


def format_listing(view: RosterView) -> list[str]:
    """Human-readable lines describing the roster."""
    lines: list[str] = []
    if not view.members:
        lines.append("The members list is empty.")
    else:
        lines.append("Members: [")
        lines.extend(f"  {name}," for name in view.members)
        lines.append("].")

        if len(view.hidden) == 1:
            lines.append(f"Will not participate: {view.hidden[0]}.")
        elif view.hidden:
            lines.append("Will not participate: [")
            lines.extend(f"  {name}," for name in view.hidden)
            lines.append("].")

    if view.last_chair:
        lines.append(f"The last meeting chair was: {view.last_chair}")
    if view.last_note_taker:
        lines.append(f"The last note-taker was: {view.last_note_taker}")
    return lines


class MeetingDiceService:
    """Applies one invocation to the persisted roster.

    Usage:
        store = StateStore.load_or_create(path)
        service = MeetingDiceService(store, confirm=ConsolePrompter().confirm)
        result = service.execute(Invocation(add=["Ana", "Ben"], run=True))
    """

    def __init__(
        self,
        state_store: StateStore,
        confirm: Confirm,
        write: Callable[[str], None] = print,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._store = state_store
        self._roster = state_store.load_roster()
        self._write = write
        self._selector = RoleSelector(self._roster, confirm, rng=rng)

    @property
    def roster(self) -> MeetingRoster:
        return self._roster

    def execute(self, invocation: Invocation) -> ServiceResult:
        """Apply the invocation and persist the resulting roster.

        Usage errors are returned as a failed result and nothing is saved.
        StateFileError propagates to the caller.
        """
        try:
            self._apply_overrides(invocation)
        except UsageError as e:
            logger.debug("Cannot change role record: %s", e)
            return ServiceResult(success=False, errors=[str(e)])

        added = self._roster.add_members(invocation.add) if invocation.add else []
        removed = self._roster.remove_members(invocation.remove) if invocation.remove else []
        hidden = self._roster.resolve_hidden(invocation.hide)

        if invocation.list_members:
            for line in format_listing(self._roster.list_view(hidden)):
                self._write(line)

        selection: Optional[SelectionResult] = None
        if invocation.run:
            selection = self.draw(
                hidden=hidden,
                note_taker=invocation.note_taker,
                seed=invocation.seed,
            )

        self._store.save_roster(self._roster)
        self._write(SAVED_MESSAGE)

        data: dict[str, Any] = {"added": added, "removed": removed}
        if selection is not None:
            data["selection"] = selection
            data["assignments"] = {
                role.value: p.name for role, p in selection.assignments.items()
            }
        return ServiceResult(
            success=True,
            errors=list(selection.errors) if selection else [],
            data=data,
        )

    def draw(
        self,
        hidden: set[str] | None = None,
        note_taker: bool = False,
        seed: str | None = None,
    ) -> SelectionResult:
        """Run a selection round: chair always, note-taker on request."""
        roles = [Role.CHAIR, Role.NOTE_TAKER] if note_taker else [Role.CHAIR]
        result = self._selector.select(roles, hidden=hidden or set(), seed=seed)
        if result.committed:
            for role, participant in result.assignments.items():
                logger.info("%s committed as %s after %d draw(s)",
                            participant.name, role.label, result.draws)
        else:
            for error in result.errors:
                self._write(error)
        return result

    def _apply_overrides(self, invocation: Invocation) -> None:
        if invocation.last_chair is not None:
            self._roster.change_last_chair(invocation.last_chair)
        if invocation.last_note_taker is not None:
            self._roster.change_last_note_taker(invocation.last_note_taker)
