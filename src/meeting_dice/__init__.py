"""Meeting dice — rotate the meeting chair and note-taker among a team."""

__version__ = "0.1.0"
