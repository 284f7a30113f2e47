"""Persistence layer — roster state storage."""

from meeting_dice.persistence.state_store import StateStore

__all__ = ["StateStore"]
