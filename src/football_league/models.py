from __future__ import annotations

import random
import re
from abc import ABC, abstractmethod
from dataclasses import InitVar, dataclass, field
from datetime import date
from typing import Any, ClassVar, Iterable

from .config import (
    BIRTH_DATE_PATTERN,
    COACH_MOTIVATION_STEP,
    COACH_SALARY_RAISE,
    COACH_SELECTOR_MOTIVATION_STEP,
    DEFAULT_COACH_MOTIVATION,
    MAX_MOTIVATION,
    MAX_QUALITY,
    MAX_SQUAD_NUMBER,
    MIN_FOUNDING_YEAR,
    MIN_MOTIVATION,
    MIN_QUALITY,
    MIN_SQUAD_NUMBER,
    PLAYER_BASE_QUALITY_STEP,
    PLAYER_MOTIVATION_STEP,
    PLAYER_QUALITY_STEPS,
    POINTS_FOR_DRAW,
    POINTS_FOR_WIN,
    POSITION_DRIFT_CHANCE,
    POSITION_DRIFT_QUALITY_BONUS,
    POSITION_NAMES,
    POSITIONS,
)
from .errors import DuplicateNumberError, ValidationError

_BIRTH_DATE_RE = re.compile(BIRTH_DATE_PATTERN)


def training_quality_step(roll: float) -> float:
    for threshold, step in PLAYER_QUALITY_STEPS:
        if roll < threshold:
            return step
    return PLAYER_BASE_QUALITY_STEP


def normalize_position(value: Any) -> str:
    """Map a position code or full name ("fw", "Forward") to its code."""
    if isinstance(value, str):
        token = value.strip()
        if token.upper() in POSITIONS:
            return token.upper()
        for code, full_name in POSITION_NAMES.items():
            if token.lower() == full_name.lower():
                return code
    raise ValidationError(f"Invalid position {value!r}; expected one of {', '.join(POSITIONS)}.")


def _require_text(attr: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{attr} must be a non-empty string.")
    return value


def _require_number(attr: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{attr} must be a number, got {value!r}.")
    return float(value)


# Person classes validate on every attribute write, constructor included.
# They are slotted dataclasses, so overrides call the base explicitly instead of super().
@dataclass(slots=True)
class Person(ABC):
    """Fields shared by players and coaches. Only the subclasses are instantiated."""

    name: str
    surname: str
    birth_date: str
    salary: float
    motivation: float

    kind: ClassVar[str] = "person"

    def __setattr__(self, attr: str, value: Any) -> None:
        object.__setattr__(self, attr, self._validate(attr, value))

    def _validate(self, attr: str, value: Any) -> Any:
        if attr in ("name", "surname"):
            return _require_text(attr, value)
        if attr == "birth_date":
            if not isinstance(value, str) or _BIRTH_DATE_RE.fullmatch(value.strip()) is None:
                raise ValidationError(f"Birth date must use the DD/MM/YYYY pattern, got {value!r}.")
            return value.strip()
        if attr == "salary":
            salary = _require_number(attr, value)
            if salary < 0:
                raise ValidationError("Salary cannot be negative.")
            return salary
        if attr == "motivation":
            motivation = _require_number(attr, value)
            return max(MIN_MOTIVATION, min(MAX_MOTIVATION, motivation))
        return value

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"

    @abstractmethod
    def train(self, rng: random.Random | None = None) -> Any:
        ...


@dataclass(slots=True)
class Player(Person):
    number: int
    position: str
    quality: float

    kind: ClassVar[str] = "player"

    def _validate(self, attr: str, value: Any) -> Any:
        if attr == "number":
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"Squad number must be an integer, got {value!r}.")
            if not MIN_SQUAD_NUMBER <= value <= MAX_SQUAD_NUMBER:
                raise ValidationError(
                    f"Squad number {value} out of range [{MIN_SQUAD_NUMBER}, {MAX_SQUAD_NUMBER}]."
                )
            return value
        if attr == "position":
            return normalize_position(value)
        if attr == "quality":
            quality = _require_number(attr, value)
            if not MIN_QUALITY <= quality <= MAX_QUALITY:
                raise ValidationError(f"Quality {quality} out of range [{MIN_QUALITY:g}, {MAX_QUALITY:g}].")
            return quality
        return Person._validate(self, attr, value)

    def train(self, rng: random.Random | None = None) -> float:
        """Run one training session and return the quality step that was drawn."""
        rng = rng or random.Random()
        self.motivation = min(MAX_MOTIVATION, self.motivation + PLAYER_MOTIVATION_STEP)
        step = training_quality_step(rng.random())
        self.quality = min(MAX_QUALITY, self.quality + step)
        return step

    def drift_position(self, rng: random.Random | None = None) -> bool:
        rng = rng or random.Random()
        if rng.random() >= POSITION_DRIFT_CHANCE:
            return False
        new_position = self.position
        while new_position == self.position:
            new_position = rng.choice(POSITIONS)
        self.position = new_position
        self.quality = min(MAX_QUALITY, self.quality + POSITION_DRIFT_QUALITY_BONUS)
        return True

    @property
    def position_name(self) -> str:
        return POSITION_NAMES[self.position]

    def quality_order_key(self) -> tuple[float, float, str]:
        return (-self.quality, -self.motivation, self.surname)

    def position_order_key(self) -> tuple[int, float]:
        return (POSITIONS.index(self.position), -self.quality)


@dataclass(slots=True)
class Coach(Person):
    tournaments_won: int = 0
    national_selector: bool = False

    kind: ClassVar[str] = "coach"

    def _validate(self, attr: str, value: Any) -> Any:
        if attr == "tournaments_won":
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationError(f"Tournaments won must be a non-negative integer, got {value!r}.")
            return value
        if attr == "national_selector":
            return bool(value)
        return Person._validate(self, attr, value)

    def train(self, rng: random.Random | None = None) -> None:
        step = COACH_SELECTOR_MOTIVATION_STEP if self.national_selector else COACH_MOTIVATION_STEP
        self.motivation = min(MAX_MOTIVATION, self.motivation + step)

    def raise_salary(self) -> None:
        self.salary = self.salary * COACH_SALARY_RAISE


@dataclass(slots=True, eq=False)
class Team:
    name: str
    founded: int
    city: str
    stadium: str | None = None
    president: str | None = None
    coach: Coach | None = None
    players: InitVar[Iterable[Player] | None] = None
    _roster: list[Player] = field(init=False, default_factory=list, repr=False)

    def __setattr__(self, attr: str, value: Any) -> None:
        object.__setattr__(self, attr, self._validate(attr, value))

    def _validate(self, attr: str, value: Any) -> Any:
        if attr == "name":
            return _require_text("Team name", value)
        if attr == "city":
            if value is None:
                raise ValidationError("Team city is required.")
            return value
        if attr == "founded":
            current_year = date.today().year
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"Founding year must be an integer, got {value!r}.")
            if not MIN_FOUNDING_YEAR <= value <= current_year:
                raise ValidationError(f"Invalid founding year {value}; expected {MIN_FOUNDING_YEAR}-{current_year}.")
            return value
        if attr == "coach":
            if value is not None and not isinstance(value, Coach):
                raise ValidationError("Team coach must be a Coach.")
            return value
        return value

    def __post_init__(self, players: Iterable[Player] | None) -> None:
        for player in players or ():
            self.add_player(player)

    @property
    def roster(self) -> tuple[Player, ...]:
        return tuple(self._roster)

    def players_by_position(self) -> tuple[Player, ...]:
        return tuple(sorted(self._roster, key=Player.position_order_key))

    def players_by_quality(self) -> tuple[Player, ...]:
        return tuple(sorted(self._roster, key=Player.quality_order_key))

    def has_number(self, number: int) -> bool:
        return any(p.number == number for p in self._roster)

    def free_number(self, preferred: int | None = None) -> int | None:
        if preferred is not None and not self.has_number(preferred):
            return preferred
        taken = {p.number for p in self._roster}
        for number in range(MIN_SQUAD_NUMBER, MAX_SQUAD_NUMBER + 1):
            if number not in taken:
                return number
        return None

    def add_player(self, player: Player) -> None:
        if not isinstance(player, Player):
            raise ValidationError("Only players can join a roster.")
        if self.has_number(player.number):
            raise DuplicateNumberError(self.name, player.number)
        self._roster.append(player)

    def remove_player(self, name: str, number: int) -> bool:
        player = self.find_player(name, number)
        if player is None:
            return False
        self._roster.remove(player)
        return True

    def find_player(self, name: str, number: int) -> Player | None:
        for player in self._roster:
            if player.name == name and player.number == number:
                return player
        return None

    def average_quality(self) -> float:
        if not self._roster:
            return 0.0
        return sum(p.quality for p in self._roster) / len(self._roster)

    def coach_motivation(self) -> float:
        if self.coach is None:
            return DEFAULT_COACH_MOTIVATION
        return self.coach.motivation

    def run_training_session(self, rng: random.Random | None = None) -> None:
        rng = rng or random.Random()
        if self.coach is not None:
            self.coach.train(rng)
        for player in self._roster:
            player.train(rng)
            player.drift_position(rng)

    def assign_coach(self, coach: Coach) -> Coach | None:
        """Install ``coach`` and hand back whoever held the job before."""
        if not isinstance(coach, Coach):
            raise ValidationError("Team coach must be a Coach.")
        previous = self.coach
        self.coach = coach
        return previous

    def dismiss_coach(self) -> Coach | None:
        previous = self.coach
        self.coach = None
        return previous


@dataclass(slots=True)
class StandingsRow:
    team: Team
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    @property
    def points(self) -> int:
        return self.won * POINTS_FOR_WIN + self.drawn * POINTS_FOR_DRAW

    def register_match(self, goals_for: int, goals_against: int) -> None:
        self.played += 1
        self.goals_for += goals_for
        self.goals_against += goals_against
        if goals_for > goals_against:
            self.won += 1
        elif goals_for == goals_against:
            self.drawn += 1
        else:
            self.lost += 1
