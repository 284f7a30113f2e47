"""State store — JSON-based persistence for the meeting roster.

Stores and recovers:
- Members, in roster order
- The last chair
- The last note-taker

The document keeps the layout of the original data file:

    {"last_chair": "Ana", "last_note_taker": null, "members": ["Ana", "Ben"]}

This is a simple file-based store for a single local operator. The file
is read once when an invocation starts and written once when it ends. No
lock is taken, so two invocations racing on the same file can lose one
of the writes.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from meeting_dice.errors import StateFileError, UnknownMemberError
from meeting_dice.rotation.roster import MeetingRoster, Role

logger = logging.getLogger(__name__)

_ROLE_FIELDS = {
    Role.CHAIR: "last_chair",
    Role.NOTE_TAKER: "last_note_taker",
}


def _empty_state() -> dict[str, Any]:
    return {"last_chair": None, "last_note_taker": None, "members": []}


class StateStore:
    """JSON file-based state persistence.

    Usage:
        store = StateStore.load_or_create(Path("~/.local/share/meeting-dice/data.json"))
        roster = store.load_roster()
        # ... mutate the roster ...
        store.save_roster(roster)
    """

    def __init__(self, storage_path: Path) -> None:
        self._path = storage_path
        self._state: dict[str, Any] = _empty_state()
        if storage_path.exists():
            self._load()

    @classmethod
    def load_or_create(cls, storage_path: Path) -> StateStore:
        """Open the store, writing an empty state file if none exists yet."""
        existed = storage_path.exists()
        store = cls(storage_path)
        if not existed:
            logger.info("No state file at %s, creating an empty one", storage_path)
            store._save()
        return store

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise StateFileError(f"Cannot read state file {self._path}: {e}") from e
        except UnicodeDecodeError as e:
            raise StateFileError(f"State file {self._path} is not valid UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise StateFileError(f"State file {self._path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise StateFileError(f"State file {self._path} must hold a JSON object")
        state = {**_empty_state(), **data}
        if state["members"] is None:
            state["members"] = []
        members = state["members"]
        if not isinstance(members, list) or not all(isinstance(m, str) for m in members):
            raise StateFileError(f"State file {self._path}: members must be a list of names")
        for field_name in _ROLE_FIELDS.values():
            if state[field_name] is not None and not isinstance(state[field_name], str):
                raise StateFileError(
                    f"State file {self._path}: {field_name} must be a name or null"
                )
        self._state = state

    def _save(self) -> None:
        """Write the state atomically: temp file in the same directory, then replace."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(self._state, f, indent=2, sort_keys=True, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StateFileError(f"Cannot write state file {self._path}: {e}") from e

    # ------------------------------------------------------------------
    # Roster persistence
    # ------------------------------------------------------------------

    def save_roster(self, roster: MeetingRoster) -> None:
        """Serialize the roster to state and write it out."""
        view = roster.list_view()
        self._state["members"] = list(view.members)
        self._state["last_chair"] = view.last_chair
        self._state["last_note_taker"] = view.last_note_taker
        self._save()

    def load_roster(self) -> MeetingRoster:
        """Deserialize the roster from state.

        A stored role holder who is no longer a member is dropped with a
        warning rather than failing the load.
        """
        roster = MeetingRoster()
        roster.add_members(self._state["members"])
        for role, field_name in _ROLE_FIELDS.items():
            name = self._state.get(field_name)
            if not name:
                continue
            try:
                roster.set_role(role, name)
            except UnknownMemberError:
                logger.warning(
                    "Stored %s %s is not in the members list, clearing it",
                    role.label, name,
                )
        return roster
