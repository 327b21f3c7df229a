from __future__ import annotations

from typing import Callable, Sequence

import pytest

from football_league.models import Coach, Player, Team


class FixedRandom:
    """Stands in for random.Random: random() always returns ``value``; choice() cycles."""

    def __init__(self, value: float) -> None:
        self.value = value
        self._choice_idx = 0

    def random(self) -> float:
        return self.value

    def choice(self, seq: Sequence):
        item = seq[self._choice_idx % len(seq)]
        self._choice_idx += 1
        return item


class ScriptedRandom:
    """random() returns queued values in order."""

    def __init__(self, values: Sequence[float]) -> None:
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


def scripted_scores(scores: Sequence[tuple[int, int]]) -> ScriptedRandom:
    """Draws that make each fixture between equal-strength sides end with the given score.

    Equal sides play with lambda 0.5, so 0.99 keeps the Knuth product above
    e^-0.5 (one more goal) and 0.0 ends the count.
    """
    values: list[float] = []
    for home_goals, away_goals in scores:
        for goals in (home_goals, away_goals):
            values.extend([0.99] * goals + [0.0])
    return ScriptedRandom(values)


@pytest.fixture
def make_player() -> Callable[..., Player]:
    def _make(
        name: str = "Marc",
        surname: str = "Puig",
        number: int = 10,
        position: str = "MF",
        quality: float = 60.0,
        motivation: float = 5.0,
        salary: float = 150_000.0,
    ) -> Player:
        return Player(
            name=name,
            surname=surname,
            birth_date="14/03/1998",
            salary=salary,
            motivation=motivation,
            number=number,
            position=position,
            quality=quality,
        )

    return _make


@pytest.fixture
def make_coach() -> Callable[..., Coach]:
    def _make(
        name: str = "Luis",
        surname: str = "Campos",
        motivation: float = 5.0,
        national_selector: bool = False,
        salary: float = 300_000.0,
    ) -> Coach:
        return Coach(
            name=name,
            surname=surname,
            birth_date="02/11/1970",
            salary=salary,
            motivation=motivation,
            tournaments_won=2,
            national_selector=national_selector,
        )

    return _make


@pytest.fixture
def make_team(make_player) -> Callable[..., Team]:
    def _make(name: str, quality: float = 50.0, size: int = 11, coach: Coach | None = None) -> Team:
        team = Team(name=name, founded=1920, city="Valencia", coach=coach)
        for number in range(1, size + 1):
            team.add_player(make_player(name=f"{name}{number}", number=number, quality=quality))
        return team

    return _make
