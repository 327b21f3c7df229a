from __future__ import annotations


class LeagueError(Exception):
    """Base class for errors raised by the simulation core."""


class ValidationError(LeagueError, ValueError):
    """An entity received a value outside its allowed domain."""


class DuplicateNumberError(ValidationError):
    def __init__(self, team_name: str, number: int) -> None:
        super().__init__(f"Squad number {number} already exists in {team_name}.")
        self.team_name = team_name
        self.number = number


class MatchStateError(LeagueError, RuntimeError):
    """A match was replayed or its score was read before it was played."""
