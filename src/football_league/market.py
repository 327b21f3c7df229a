from __future__ import annotations

import random
from typing import Iterable, Iterator

from .errors import ValidationError
from .models import Coach, Person, Player


class Market:
    """Pool of players and coaches that are not attached to any team."""

    def __init__(self, persons: Iterable[Person] | None = None) -> None:
        self._persons: list[Person] = []
        for person in persons or ():
            self.add(person)

    def __len__(self) -> int:
        return len(self._persons)

    def __iter__(self) -> Iterator[Person]:
        return iter(tuple(self._persons))

    def __contains__(self, person: object) -> bool:
        return any(p is person for p in self._persons)

    def list_players(self) -> tuple[Player, ...]:
        players = [p for p in self._persons if isinstance(p, Player)]
        return tuple(sorted(players, key=Player.quality_order_key))

    def list_coaches(self) -> tuple[Coach, ...]:
        return tuple(p for p in self._persons if isinstance(p, Coach))

    def find(self, name: str, surname: str) -> Person | None:
        for person in self._persons:
            if person.name == name and person.surname == surname:
                return person
        return None

    def add(self, person: Person) -> None:
        if not isinstance(person, Person):
            raise ValidationError("Only players and coaches can join the market.")
        if person in self:
            raise ValidationError(f"{person.full_name} is already on the market.")
        self._persons.append(person)

    def remove(self, person: Person) -> bool:
        for idx, candidate in enumerate(self._persons):
            if candidate is person:
                del self._persons[idx]
                return True
        return False

    def train_all(self, rng: random.Random | None = None) -> None:
        """Players train and may change position; coaches train and get a raise."""
        rng = rng or random.Random()
        for person in self._persons:
            person.train(rng)
            if isinstance(person, Player):
                person.drift_position(rng)
            elif isinstance(person, Coach):
                person.raise_salary()
