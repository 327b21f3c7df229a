from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from .config import MARKET_FILE, SAVE_VERSION, TEAMS_FILE
from .errors import ValidationError
from .models import Coach, Person, Player, Team

logger = logging.getLogger(__name__)


def serialize_person(person: Person) -> dict[str, Any]:
    data: dict[str, Any] = {
        "kind": person.kind,
        "name": person.name,
        "surname": person.surname,
        "birth_date": person.birth_date,
        "salary": person.salary,
        "motivation": person.motivation,
    }
    if isinstance(person, Player):
        data.update(number=person.number, position=person.position, quality=person.quality)
    elif isinstance(person, Coach):
        data.update(tournaments_won=person.tournaments_won, national_selector=person.national_selector)
    return data


def deserialize_person(raw: dict[str, Any]) -> Person:
    kind = str(raw.get("kind", "")).lower()
    common = {
        "name": raw.get("name"),
        "surname": raw.get("surname"),
        "birth_date": raw.get("birth_date"),
        "salary": raw.get("salary"),
        "motivation": raw.get("motivation"),
    }
    if kind == "player":
        return Player(**common, number=raw.get("number"), position=raw.get("position"), quality=raw.get("quality"))
    if kind == "coach":
        return Coach(
            **common,
            tournaments_won=raw.get("tournaments_won", 0),
            national_selector=bool(raw.get("national_selector", False)),
        )
    raise ValidationError(f"Unknown person kind {raw.get('kind')!r}.")


def serialize_team(team: Team) -> dict[str, Any]:
    return {
        "name": team.name,
        "founded": team.founded,
        "city": team.city,
        "stadium": team.stadium,
        "president": team.president,
        "coach": serialize_person(team.coach) if team.coach is not None else None,
        "roster": [serialize_person(player) for player in team.roster],
    }


def deserialize_team(raw: dict[str, Any]) -> Team:
    raw_coach = raw.get("coach")
    coach = deserialize_person(raw_coach) if isinstance(raw_coach, dict) else None
    if coach is not None and not isinstance(coach, Coach):
        raise ValidationError(f"Team {raw.get('name')!r} has a non-coach in its coach slot.")
    raw_roster = raw.get("roster", [])
    if not isinstance(raw_roster, list):
        raise ValidationError(f"Team {raw.get('name')!r} roster is not a list.")
    players: list[Player] = []
    for raw_player in raw_roster:
        if not isinstance(raw_player, dict):
            raise ValidationError(f"Team {raw.get('name')!r} has a malformed roster entry.")
        player = deserialize_person(raw_player)
        if not isinstance(player, Player):
            raise ValidationError(f"Team {raw.get('name')!r} has a coach in its roster.")
        players.append(player)
    return Team(
        name=raw.get("name"),
        founded=raw.get("founded"),
        city=raw.get("city"),
        stadium=raw.get("stadium"),
        president=raw.get("president"),
        coach=coach,
        players=players,
    )


class JsonStore:
    """File-backed load/save of teams and the market.

    Loading never raises: a missing file yields an empty list, an unreadable or
    newer-version file yields an empty list plus ``last_load_error``, and
    entries that fail validation are skipped with a warning.
    """

    SAVE_VERSION = SAVE_VERSION

    def __init__(self, data_dir: str | Path = ".", teams_path: str | None = None, market_path: str | None = None) -> None:
        root = Path(data_dir)
        self.teams_path = Path(teams_path) if teams_path else root / TEAMS_FILE
        self.market_path = Path(market_path) if market_path else root / MARKET_FILE
        self.last_load_error: str = ""

    def _read_payload(self, path: Path, key: str, label: str) -> list[Any]:
        if not path.exists():
            return []
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            self.last_load_error = f"Failed to load {label} ({exc}); starting empty."
            logger.warning(self.last_load_error)
            return []
        if isinstance(raw, list):
            return raw
        if not isinstance(raw, dict):
            self.last_load_error = f"{label.capitalize()} file has invalid format; starting empty."
            logger.warning(self.last_load_error)
            return []
        try:
            version = int(raw.get("save_version", 1) or 1)
        except (TypeError, ValueError):
            version = self.SAVE_VERSION + 1
        if version > self.SAVE_VERSION:
            self.last_load_error = f"Unsupported {label} version {version}; app supports up to {self.SAVE_VERSION}."
            logger.warning(self.last_load_error)
            return []
        payload = raw.get(key, [])
        if not isinstance(payload, list):
            self.last_load_error = f"{label.capitalize()} payload is invalid; starting empty."
            logger.warning(self.last_load_error)
            return []
        return payload

    def _write_json_with_backup(self, path: Path, payload: Any, *, with_backup: bool = True) -> None:
        if with_backup and path.exists():
            backup = path.with_suffix(path.suffix + ".bak")
            try:
                shutil.copy2(path, backup)
            except OSError as exc:
                logger.warning("Could not back up %s: %s", path, exc)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def load_teams(self) -> list[Team]:
        teams: list[Team] = []
        seen: set[str] = set()
        for raw_team in self._read_payload(self.teams_path, "teams", "teams"):
            if not isinstance(raw_team, dict):
                logger.warning("Skipping malformed team entry: %r", raw_team)
                continue
            try:
                team = deserialize_team(raw_team)
            except (ValidationError, TypeError) as exc:
                logger.warning("Skipping team %r: %s", raw_team.get("name"), exc)
                continue
            if team.name.casefold() in seen:
                logger.warning("Skipping duplicate team name %r.", team.name)
                continue
            seen.add(team.name.casefold())
            teams.append(team)
        return teams

    def save_teams(self, teams: list[Team]) -> None:
        payload = {
            "save_version": self.SAVE_VERSION,
            "teams": [serialize_team(team) for team in teams],
        }
        self._write_json_with_backup(self.teams_path, payload)
        logger.info("Saved %d teams to %s.", len(teams), self.teams_path)

    def load_market(self) -> list[Person]:
        persons: list[Person] = []
        for raw_person in self._read_payload(self.market_path, "market", "market"):
            if not isinstance(raw_person, dict):
                logger.warning("Skipping malformed market entry: %r", raw_person)
                continue
            try:
                persons.append(deserialize_person(raw_person))
            except (ValidationError, TypeError) as exc:
                logger.warning("Skipping market entry %r: %s", raw_person.get("name"), exc)
        return persons

    def save_market(self, persons: list[Person]) -> None:
        payload = {
            "save_version": self.SAVE_VERSION,
            "market": [serialize_person(person) for person in persons],
        }
        self._write_json_with_backup(self.market_path, payload)
        logger.info("Saved %d market entries to %s.", len(persons), self.market_path)
