"""Role selector — constrained-random chair and note-taker assignment.

Given the roster, a set of hidden members and the roles to fill, proposes
a holder for each role and asks the operator to confirm:
- Hidden members are never drawn.
- The previous holder of a role is never drawn again for that role.
- The operator may reject a proposal any number of times; each rejection
  triggers a fresh draw and rejected members remain eligible.
- Only an accepted proposal is committed to the roster.

Eligibility is computed before any draw. A role with no eligible member
fails on its own without touching the randomness source, so the draw
loop always terminates on the operator's answer alone.

Draws for different roles are independent: the same member can be
proposed as chair and as note-taker in one round.

The randomness source is pluggable to support both production (system
entropy) and testing (seeded PRNG).
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass, field
from typing import AbstractSet, Callable, Mapping, Optional, Sequence

from meeting_dice.rotation.roster import MeetingRoster, Participant, Role

logger = logging.getLogger(__name__)

EMPTY_ROSTER_MESSAGE = "There is no one to be meeting chair"


class RoundState(str, enum.Enum):
    """Where a selection round currently stands."""
    IDLE = "idle"
    ELIGIBILITY_COMPUTED = "eligibility_computed"
    CANDIDATE_DRAWN = "candidate_drawn"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of one selection round."""
    state: RoundState
    assignments: dict[Role, Participant] = field(default_factory=dict)
    failed_roles: list[Role] = field(default_factory=list)
    draws: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def committed(self) -> bool:
        return self.state == RoundState.COMMITTED

    @property
    def success(self) -> bool:
        return self.committed and len(self.errors) == 0


Confirm = Callable[[Mapping[Role, Participant]], bool]


class RoleSelector:
    """Draws role holders from the roster and commits the accepted draw.

    Usage:
        selector = RoleSelector(roster, confirm=ConsolePrompter().confirm)
        result = selector.select([Role.CHAIR], hidden={"ben"})
        if result.committed:
            ...
    """

    def __init__(
        self,
        roster: MeetingRoster,
        confirm: Confirm,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._roster = roster
        self._confirm = confirm
        self._rng = rng
        self._state = RoundState.IDLE

    @property
    def state(self) -> RoundState:
        return self._state

    def eligible_positions(
        self,
        role: Role,
        hidden: AbstractSet[str] = frozenset(),
    ) -> list[int]:
        """Roster positions that may be drawn for role.

        A position is eligible if its member is not hidden and is not the
        previous holder of the role. A hidden previous holder is already
        excluded by the first rule.
        """
        previous = self._roster.holder(role)
        previous_key = previous.key if previous is not None else None
        return [
            i for i, member in enumerate(self._roster.members())
            if member.key not in hidden and member.key != previous_key
        ]

    def select(
        self,
        roles: Sequence[Role] = (Role.CHAIR,),
        hidden: AbstractSet[str] = frozenset(),
        seed: str | None = None,
    ) -> SelectionResult:
        """Run one draw/confirm round for the requested roles.

        Args:
            roles: Roles to fill. Duplicates are ignored.
            hidden: Identity keys of members sitting this round out.
            seed: Randomness seed for deterministic draws. Ignored when
                  the selector was built with its own rng.

        Returns:
            SelectionResult. The roster is only mutated when the state is
            COMMITTED, and only for roles that were actually drawn.
        """
        self._state = RoundState.IDLE
        requested = list(dict.fromkeys(roles))

        if self._roster.is_empty:
            logger.warning(EMPTY_ROSTER_MESSAGE)
            self._state = RoundState.FAILED
            return SelectionResult(
                state=self._state,
                failed_roles=requested,
                errors=[EMPTY_ROSTER_MESSAGE],
            )

        eligible: dict[Role, list[int]] = {}
        failed: list[Role] = []
        errors: list[str] = []
        for role in requested:
            positions = self.eligible_positions(role, hidden)
            if positions:
                eligible[role] = positions
            else:
                message = f"No eligible candidate for {role.label}"
                logger.warning(message)
                failed.append(role)
                errors.append(message)
        self._state = RoundState.ELIGIBILITY_COMPUTED

        if not eligible:
            self._state = RoundState.FAILED
            return SelectionResult(
                state=self._state,
                failed_roles=failed,
                errors=errors,
            )

        rng = self._rng
        if rng is None:
            rng = random.Random()
            if seed is not None:
                rng.seed(seed)
            else:
                rng.seed()

        members = self._roster.members()
        draws = 0
        while True:
            proposal = {
                role: members[rng.choice(positions)]
                for role, positions in eligible.items()
            }
            draws += 1
            self._state = RoundState.CANDIDATE_DRAWN
            logger.debug(
                "Draw %d: %s", draws,
                ", ".join(f"{r.label}={p.name}" for r, p in proposal.items()),
            )

            self._state = RoundState.AWAITING_CONFIRMATION
            if self._confirm(proposal):
                break
            logger.info("Proposal rejected, rolling again")

        for role, participant in proposal.items():
            self._roster.set_role(role, participant.name)
        self._state = RoundState.COMMITTED
        return SelectionResult(
            state=self._state,
            assignments=proposal,
            failed_roles=failed,
            draws=draws,
            errors=errors,
        )
