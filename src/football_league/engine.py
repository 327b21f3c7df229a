from __future__ import annotations

import math
import random
from dataclasses import dataclass, field

from .config import BASE_GOAL_RATE, FACTOR_DIFF_DIVISOR, MOTIVATION_FACTOR_DIVISOR
from .errors import MatchStateError
from .models import Team


def performance_factor(team: Team) -> float:
    return team.average_quality() * (1 + team.coach_motivation() / MOTIVATION_FACTOR_DIVISOR)


def goal_rate(own_factor: float, opponent_factor: float) -> float:
    return max(0.0, BASE_GOAL_RATE + (own_factor - opponent_factor) / FACTOR_DIFF_DIVISOR)


def sample_goals(lam: float, rng: random.Random) -> int:
    # Knuth's Poisson sampler: multiply uniforms until the product drops to e^-lambda.
    limit = math.exp(-lam)
    k = 0
    p = 1.0
    while True:
        k += 1
        p *= rng.random()
        if p <= limit:
            break
    return k - 1


@dataclass(slots=True, eq=False)
class Match:
    home: Team
    away: Team
    played: bool = field(default=False, init=False)
    _home_goals: int = field(default=0, init=False, repr=False)
    _away_goals: int = field(default=0, init=False, repr=False)

    def play(self, rng: random.Random | None = None) -> tuple[int, int]:
        """Simulate the fixture once; home and away goals are drawn independently."""
        if self.played:
            raise MatchStateError(f"{self.home.name} vs {self.away.name} has already been played.")
        rng = rng or random.Random()
        home_factor = performance_factor(self.home)
        away_factor = performance_factor(self.away)
        home_goals = sample_goals(goal_rate(home_factor, away_factor), rng)
        away_goals = sample_goals(goal_rate(away_factor, home_factor), rng)
        self._home_goals = home_goals
        self._away_goals = away_goals
        self.played = True
        return home_goals, away_goals

    def _require_played(self) -> None:
        if not self.played:
            raise MatchStateError(f"{self.home.name} vs {self.away.name} has not been played yet.")

    @property
    def home_goals(self) -> int:
        self._require_played()
        return self._home_goals

    @property
    def away_goals(self) -> int:
        self._require_played()
        return self._away_goals

    def goals(self) -> tuple[int, int]:
        self._require_played()
        return self._home_goals, self._away_goals

    def involves(self, team: Team) -> bool:
        return team is self.home or team is self.away

    def score_for(self, team: Team) -> tuple[int, int]:
        """Goals for and against from ``team``'s side of the fixture."""
        home_goals, away_goals = self.goals()
        if team is self.home:
            return home_goals, away_goals
        if team is self.away:
            return away_goals, home_goals
        raise ValueError(f"{team.name} did not take part in {self.home.name} vs {self.away.name}.")

    def winner(self) -> Team | None:
        home_goals, away_goals = self.goals()
        if home_goals > away_goals:
            return self.home
        if away_goals > home_goals:
            return self.away
        return None

    def __str__(self) -> str:
        if not self.played:
            return f"{self.home.name} vs {self.away.name} (not played)"
        return f"{self.home.name} {self._home_goals} - {self._away_goals} {self.away.name}"
