from __future__ import annotations

import random

from .config import (
    COACH_SALARY_RANGE,
    NEW_PERSON_MOTIVATION,
    NEW_PLAYER_QUALITY_RANGE,
    PLAYER_SALARY_RANGE,
    POSITIONS,
)
from .models import Coach, Player
from .names import NameGenerator


class PersonFactory:
    """Creates players and coaches with drawn contract and skill values.

    The factory owns the running totals of entities it has created; there is
    no process-wide counter.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)
        self.names = NameGenerator(seed=seed)
        self.players_created = 0
        self.coaches_created = 0

    def new_player(
        self,
        name: str,
        surname: str,
        birth_date: str,
        number: int,
        position: str | None = None,
        quality: float | None = None,
    ) -> Player:
        low, high = PLAYER_SALARY_RANGE
        q_low, q_high = NEW_PLAYER_QUALITY_RANGE
        player = Player(
            name=name,
            surname=surname,
            birth_date=birth_date,
            salary=float(self._rng.randint(low, high)),
            motivation=NEW_PERSON_MOTIVATION,
            number=number,
            position=position if position is not None else self._rng.choice(POSITIONS),
            quality=quality if quality is not None else float(self._rng.randint(q_low, q_high)),
        )
        self.players_created += 1
        return player

    def new_coach(
        self,
        name: str,
        surname: str,
        birth_date: str,
        tournaments_won: int = 0,
        national_selector: bool = False,
    ) -> Coach:
        low, high = COACH_SALARY_RANGE
        coach = Coach(
            name=name,
            surname=surname,
            birth_date=birth_date,
            salary=float(self._rng.randint(low, high)),
            motivation=NEW_PERSON_MOTIVATION,
            tournaments_won=tournaments_won,
            national_selector=national_selector,
        )
        self.coaches_created += 1
        return coach

    def random_player(self, number: int, position: str | None = None) -> Player:
        name, surname = self.names.next_name()
        return self.new_player(name, surname, self.names.next_birth_date(), number, position=position)

    def random_coach(self) -> Coach:
        name, surname = self.names.next_name()
        coach = self.new_coach(name, surname, self.names.next_birth_date(min_year=1955, max_year=1985))
        coach.tournaments_won = self._rng.randint(0, 6)
        coach.national_selector = self._rng.random() < 0.15
        coach.motivation = self._rng.uniform(3.0, 9.0)
        return coach
