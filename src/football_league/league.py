from __future__ import annotations

import logging
import random
from typing import Callable

from .engine import Match
from .errors import ValidationError
from .models import StandingsRow, Team
from .schedule import fixture_count, iter_single_round_robin

logger = logging.getLogger(__name__)


class League:
    def __init__(self, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("League name must be a non-empty string.")
        self.name = name
        self._teams: list[Team] = []
        self._matches: list[Match] = []

    @property
    def teams(self) -> tuple[Team, ...]:
        return tuple(self._teams)

    @property
    def matches(self) -> tuple[Match, ...]:
        return tuple(self._matches)

    def get_team(self, team_name: str) -> Team | None:
        key = team_name.casefold()
        for team in self._teams:
            if team.name.casefold() == key:
                return team
        return None

    def register_team(self, team: Team) -> bool:
        if team is None:
            raise ValidationError("Team cannot be None.")
        if any(t is team for t in self._teams) or self.get_team(team.name) is not None:
            return False
        self._teams.append(team)
        return True

    def remove_team(self, team_name: str) -> bool:
        team = self.get_team(team_name)
        if team is None:
            return False
        self._teams.remove(team)
        return True

    def play_season(self, rng: random.Random | None = None) -> bool:
        """Play a single round robin among the registered teams.

        Previous results are discarded first. With fewer than two teams nothing
        is scheduled and False is returned. Each fixture is played as soon as it
        is generated; without ``rng`` every match draws from its own fresh
        generator.
        """
        self._matches.clear()
        if len(self._teams) < 2:
            logger.warning("League %s needs at least 2 teams to play a season (has %d).", self.name, len(self._teams))
            return False

        logger.info(
            "Playing league %s: %d teams, %d fixtures.",
            self.name,
            len(self._teams),
            fixture_count(len(self._teams)),
        )
        for home, away in iter_single_round_robin(self._teams):
            match = Match(home, away)
            match.play(rng)
            logger.debug("Result: %s", match)
            self._matches.append(match)
        return True

    def results_for(self, team: Team) -> list[Match]:
        return [m for m in self._matches if m.involves(team)]

    def _rows(self) -> list[StandingsRow]:
        """One row per team that played, in order of first appearance."""
        rows: dict[int, StandingsRow] = {}
        for match in self._matches:
            for team in (match.home, match.away):
                if id(team) not in rows:
                    rows[id(team)] = StandingsRow(team=team)
                goals_for, goals_against = match.score_for(team)
                rows[id(team)].register_match(goals_for, goals_against)
        return list(rows.values())

    def standings(self) -> list[StandingsRow]:
        # sorted() is stable: rows tied on points and goal difference keep first-appearance order.
        return sorted(self._rows(), key=lambda r: (r.points, r.goal_difference), reverse=True)

    def _leader(self, total: Callable[[StandingsRow], int]) -> Team | None:
        rows = self._rows()
        if not rows:
            return None
        return max(rows, key=total).team

    def top_scorer(self) -> Team | None:
        return self._leader(lambda row: row.goals_for)

    def top_conceder(self) -> Team | None:
        return self._leader(lambda row: row.goals_against)
