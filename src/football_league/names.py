from __future__ import annotations

import random

FIRST_NAMES = [
    "Adrian", "Alvaro", "Andres", "Arnau", "Bruno", "Carles", "Dani", "David", "Diego", "Enric",
    "Eric", "Ferran", "Gerard", "Gonzalo", "Hugo", "Iker", "Isaac", "Jan", "Javier", "Joan",
    "Jordi", "Jorge", "Jose", "Julen", "Marc", "Mario", "Martin", "Mateo", "Miguel", "Nico",
    "Oriol", "Pablo", "Pau", "Pedro", "Pol", "Raul", "Roger", "Ruben", "Sergio", "Unai",
    "Victor", "Xavi", "Alex", "Lucas", "Leo", "Oscar", "Ivan", "Samuel", "Alberto", "Ismael",
]

LAST_NAMES = [
    "Alonso", "Alvarez", "Blanco", "Bosch", "Cabrera", "Calvo", "Campos", "Castro", "Costa", "Diaz",
    "Dominguez", "Ferrer", "Flores", "Font", "Garcia", "Gil", "Gomez", "Gonzalez", "Guerrero", "Herrera",
    "Iglesias", "Jimenez", "Lopez", "Lozano", "Marin", "Martinez", "Medina", "Molina", "Montero", "Moreno",
    "Navarro", "Ortega", "Ortiz", "Pascual", "Perez", "Pons", "Puig", "Ramos", "Rios", "Romero",
    "Rubio", "Ruiz", "Sanchez", "Santos", "Serra", "Soler", "Torres", "Vidal", "Vila", "Vargas",
]


class NameGenerator:
    """Hands out (name, surname) pairs without repeating a full name."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)
        self._used: set[tuple[str, str]] = set()
        self._pool = [(first, last) for first in FIRST_NAMES for last in LAST_NAMES]
        self._rng.shuffle(self._pool)
        self._idx = 0

    def reserve(self, names: list[tuple[str, str]]) -> None:
        self._used.update(names)

    def next_name(self) -> tuple[str, str]:
        while self._idx < len(self._pool):
            name = self._pool[self._idx]
            self._idx += 1
            if name not in self._used:
                self._used.add(name)
                return name

        suffix = 1
        while True:
            first, last = self._pool[self._rng.randrange(0, len(self._pool))]
            candidate = (first, f"{last} {suffix}")
            if candidate not in self._used:
                self._used.add(candidate)
                return candidate
            suffix += 1

    def next_birth_date(self, min_year: int = 1985, max_year: int = 2006) -> str:
        # Day capped at 28 so every generated date is also a real calendar date.
        day = self._rng.randint(1, 28)
        month = self._rng.randint(1, 12)
        year = self._rng.randint(min_year, max_year)
        return f"{day:02d}/{month:02d}/{year:04d}"
