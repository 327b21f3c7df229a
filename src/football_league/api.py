from __future__ import annotations

import os
import random
from pathlib import Path
from threading import Lock
from typing import Any, Callable

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .app import build_default_market, build_default_teams
from .config import DATA_DIR_ENV
from .engine import Match
from .errors import MatchStateError, ValidationError
from .factory import PersonFactory
from .league import League
from .market import Market
from .models import Coach, Person, Player, StandingsRow, Team
from .persistence import JsonStore
from . import transfers


class LeagueSelection(BaseModel):
    name: str
    team_names: list[str] = []
    seed: int | None = None


class TrainingSelection(BaseModel):
    sessions: int = 1
    seed: int | None = None


class SignPlayerSelection(BaseModel):
    team_name: str
    name: str
    surname: str
    number: int | None = None


class SignCoachSelection(BaseModel):
    team_name: str
    name: str
    surname: str


class TransferSelection(BaseModel):
    source_team: str
    target_team: str
    name: str
    number: int
    new_number: int | None = None


class TeamSelection(BaseModel):
    name: str
    founded: int
    city: str
    stadium: str | None = None
    president: str | None = None


class PresidentSelection(BaseModel):
    president: str | None = None


class NewPlayerSelection(BaseModel):
    name: str
    surname: str
    birth_date: str
    number: int


class NewCoachSelection(BaseModel):
    name: str
    surname: str
    birth_date: str


class ReleaseSelection(BaseModel):
    name: str
    number: int


class LeagueService:
    def __init__(self, data_root: Path | None = None) -> None:
        self.data_root = Path(data_root or os.environ.get(DATA_DIR_ENV) or Path.cwd())
        self.store = JsonStore(self.data_root)
        self._lock = Lock()
        self.factory = PersonFactory(seed=7)
        teams = self.store.load_teams()
        persons = self.store.load_market()
        # Generated persons must not reuse a name that was loaded from disk.
        loaded = [p for team in teams for p in team.roster] + [team.coach for team in teams if team.coach] + persons
        self.factory.names.reserve([(p.name, p.surname) for p in loaded])
        self.teams: list[Team] = teams or build_default_teams(factory=self.factory)
        self.market = Market(persons) if persons or teams else build_default_market(factory=self.factory)
        self.league: League | None = None

    def _team(self, team_name: str) -> Team:
        key = team_name.casefold()
        for team in self.teams:
            if team.name.casefold() == key:
                return team
        raise HTTPException(status_code=404, detail=f"Team {team_name} not found")

    def _market_person(self, name: str, surname: str, kind: type[Person]) -> Person:
        person = self.market.find(name, surname)
        if person is None or not isinstance(person, kind):
            raise HTTPException(status_code=404, detail=f"{name} {surname} is not on the market")
        return person

    def _person_to_dict(self, person: Person) -> dict[str, Any]:
        row: dict[str, Any] = {
            "kind": person.kind,
            "name": person.name,
            "surname": person.surname,
            "birth_date": person.birth_date,
            "salary": round(person.salary, 2),
            "motivation": round(person.motivation, 2),
        }
        if isinstance(person, Player):
            row.update(
                number=person.number,
                position=person.position,
                position_name=person.position_name,
                quality=round(person.quality, 2),
            )
        elif isinstance(person, Coach):
            row.update(tournaments_won=person.tournaments_won, national_selector=person.national_selector)
        return row

    def _team_summary(self, team: Team) -> dict[str, Any]:
        return {
            "name": team.name,
            "founded": team.founded,
            "city": team.city,
            "stadium": team.stadium,
            "president": team.president,
            "coach": team.coach.full_name if team.coach is not None else None,
            "players": len(team.roster),
            "average_quality": round(team.average_quality(), 2),
        }

    def _row_to_dict(self, row: StandingsRow) -> dict[str, Any]:
        return {
            "team": row.team.name,
            "played": row.played,
            "won": row.won,
            "drawn": row.drawn,
            "lost": row.lost,
            "goals_for": row.goals_for,
            "goals_against": row.goals_against,
            "goal_difference": row.goal_difference,
            "points": row.points,
        }

    def _match_to_dict(self, match: Match) -> dict[str, Any]:
        home_goals, away_goals = match.goals()
        return {
            "home": match.home.name,
            "away": match.away.name,
            "home_goals": home_goals,
            "away_goals": away_goals,
        }

    def teams_overview(self) -> list[dict[str, Any]]:
        return [self._team_summary(team) for team in self.teams]

    def team_detail(self, team_name: str) -> dict[str, Any]:
        team = self._team(team_name)
        detail = self._team_summary(team)
        detail["coach"] = self._person_to_dict(team.coach) if team.coach is not None else None
        detail["roster"] = [self._person_to_dict(p) for p in team.players_by_position()]
        return detail

    def create_team(self, payload: TeamSelection) -> dict[str, Any]:
        if any(team.name.casefold() == payload.name.strip().casefold() for team in self.teams):
            raise ValidationError(f"Team {payload.name} already exists.")
        team = Team(
            name=payload.name,
            founded=payload.founded,
            city=payload.city,
            stadium=payload.stadium,
            president=payload.president,
        )
        self.teams.append(team)
        return self.team_detail(team.name)

    def delete_team(self, team_name: str) -> dict[str, Any]:
        team = self._team(team_name)
        self.teams.remove(team)
        return {"deleted": team.name}

    def set_president(self, team_name: str, payload: PresidentSelection) -> dict[str, Any]:
        team = self._team(team_name)
        # A blank name clears the post.
        team.president = (payload.president or "").strip() or None
        return self.team_detail(team.name)

    def player_detail(self, team_name: str, name: str, number: int) -> dict[str, Any]:
        team = self._team(team_name)
        player = team.find_player(name, number)
        if player is None:
            raise HTTPException(status_code=404, detail=f"No player {name} #{number} in {team.name}")
        return self._person_to_dict(player)

    def release_player(self, team_name: str, payload: ReleaseSelection) -> dict[str, Any]:
        team = self._team(team_name)
        player = transfers.release_player(team, self.market, payload.name, payload.number)
        if player is None:
            raise HTTPException(status_code=404, detail=f"No player {payload.name} #{payload.number} in {team.name}")
        return {"team": team.name, "released": self._person_to_dict(player)}

    def register_player(self, payload: NewPlayerSelection) -> dict[str, Any]:
        player = self.factory.new_player(payload.name, payload.surname, payload.birth_date, payload.number)
        self.market.add(player)
        return self._person_to_dict(player)

    def register_coach(self, payload: NewCoachSelection) -> dict[str, Any]:
        coach = self.factory.new_coach(payload.name, payload.surname, payload.birth_date)
        self.market.add(coach)
        return self._person_to_dict(coach)

    def market_overview(self) -> dict[str, Any]:
        return {
            "players": [self._person_to_dict(p) for p in self.market.list_players()],
            "coaches": [self._person_to_dict(c) for c in self.market.list_coaches()],
        }

    def train_team(self, team_name: str, sessions: int, seed: int | None) -> dict[str, Any]:
        team = self._team(team_name)
        rng = random.Random(seed) if seed is not None else None
        for _session in range(max(0, sessions)):
            team.run_training_session(rng)
        return self.team_detail(team.name)

    def train_market(self, sessions: int, seed: int | None) -> dict[str, Any]:
        rng = random.Random(seed) if seed is not None else None
        for _session in range(max(0, sessions)):
            transfers.train_market(self.market, rng)
        return self.market_overview()

    def sign_player(self, payload: SignPlayerSelection) -> dict[str, Any]:
        team = self._team(payload.team_name)
        player = self._market_person(payload.name, payload.surname, Player)
        transfers.sign_player(team, self.market, player, payload.number)
        return self.team_detail(team.name)

    def sign_coach(self, payload: SignCoachSelection) -> dict[str, Any]:
        team = self._team(payload.team_name)
        coach = self._market_person(payload.name, payload.surname, Coach)
        previous = transfers.sign_coach(team, self.market, coach)
        return {
            "team": team.name,
            "coach": self._person_to_dict(coach),
            "previous_coach": self._person_to_dict(previous) if previous is not None else None,
        }

    def dismiss_coach(self, team_name: str) -> dict[str, Any]:
        team = self._team(team_name)
        coach = transfers.dismiss_coach(team, self.market)
        return {"team": team.name, "dismissed": self._person_to_dict(coach) if coach is not None else None}

    def transfer(self, payload: TransferSelection) -> dict[str, Any]:
        source = self._team(payload.source_team)
        target = self._team(payload.target_team)
        player = transfers.transfer_player(source, target, payload.name, payload.number, payload.new_number)
        return {"from": source.name, "to": target.name, "player": self._person_to_dict(player)}

    def play_league(self, payload: LeagueSelection) -> dict[str, Any]:
        league = League(payload.name)
        selected = [self._team(name) for name in payload.team_names] if payload.team_names else self.teams
        for team in selected:
            league.register_team(team)
        rng = random.Random(payload.seed) if payload.seed is not None else None
        if not league.play_season(rng):
            raise HTTPException(status_code=400, detail="At least 2 distinct teams are required")
        self.league = league
        return self.standings()

    def _current_league(self) -> League:
        if self.league is None:
            raise HTTPException(status_code=404, detail="No league has been played yet")
        return self.league

    def standings(self) -> dict[str, Any]:
        league = self._current_league()
        top_scorer = league.top_scorer()
        top_conceder = league.top_conceder()
        return {
            "league": league.name,
            "rows": [self._row_to_dict(row) for row in league.standings()],
            "top_scorer": top_scorer.name if top_scorer is not None else None,
            "top_conceder": top_conceder.name if top_conceder is not None else None,
        }

    def matches(self) -> list[dict[str, Any]]:
        return [self._match_to_dict(match) for match in self._current_league().matches]

    def save(self) -> dict[str, Any]:
        self.store.save_teams(self.teams)
        self.store.save_market(list(self.market))
        return {"saved": True, "teams_path": str(self.store.teams_path), "market_path": str(self.store.market_path)}


def _guarded(fn: Callable[..., Any], *args: Any) -> Any:
    with service._lock:
        try:
            return fn(*args)
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except MatchStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc


service = LeagueService()
app = FastAPI(title="Football League API", version="0.1.0")


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/teams")
def teams() -> list[dict[str, Any]]:
    return _guarded(service.teams_overview)


@app.post("/api/teams")
def create_team(payload: TeamSelection) -> dict[str, Any]:
    return _guarded(service.create_team, payload)


@app.get("/api/teams/{team_name}")
def team_detail(team_name: str) -> dict[str, Any]:
    return _guarded(service.team_detail, team_name)


@app.delete("/api/teams/{team_name}")
def delete_team(team_name: str) -> dict[str, Any]:
    return _guarded(service.delete_team, team_name)


@app.patch("/api/teams/{team_name}/president")
def set_president(team_name: str, payload: PresidentSelection) -> dict[str, Any]:
    return _guarded(service.set_president, team_name, payload)


@app.get("/api/teams/{team_name}/players/{number}")
def player_detail(team_name: str, number: int, name: str) -> dict[str, Any]:
    return _guarded(service.player_detail, team_name, name, number)


@app.post("/api/teams/{team_name}/release")
def release_player(team_name: str, payload: ReleaseSelection) -> dict[str, Any]:
    return _guarded(service.release_player, team_name, payload)


@app.post("/api/teams/{team_name}/training")
def train_team(team_name: str, payload: TrainingSelection) -> dict[str, Any]:
    return _guarded(service.train_team, team_name, payload.sessions, payload.seed)


@app.post("/api/teams/{team_name}/dismiss-coach")
def dismiss_coach(team_name: str) -> dict[str, Any]:
    return _guarded(service.dismiss_coach, team_name)


@app.get("/api/market")
def market() -> dict[str, Any]:
    return _guarded(service.market_overview)


@app.post("/api/market/players")
def register_player(payload: NewPlayerSelection) -> dict[str, Any]:
    return _guarded(service.register_player, payload)


@app.post("/api/market/coaches")
def register_coach(payload: NewCoachSelection) -> dict[str, Any]:
    return _guarded(service.register_coach, payload)


@app.post("/api/market/training")
def train_market(payload: TrainingSelection) -> dict[str, Any]:
    return _guarded(service.train_market, payload.sessions, payload.seed)


@app.post("/api/market/sign-player")
def sign_player(payload: SignPlayerSelection) -> dict[str, Any]:
    return _guarded(service.sign_player, payload)


@app.post("/api/market/sign-coach")
def sign_coach(payload: SignCoachSelection) -> dict[str, Any]:
    return _guarded(service.sign_coach, payload)


@app.post("/api/transfer")
def transfer(payload: TransferSelection) -> dict[str, Any]:
    return _guarded(service.transfer, payload)


@app.post("/api/league")
def play_league(payload: LeagueSelection) -> dict[str, Any]:
    return _guarded(service.play_league, payload)


@app.get("/api/standings")
def standings() -> dict[str, Any]:
    return _guarded(service.standings)


@app.get("/api/matches")
def matches() -> list[dict[str, Any]]:
    return _guarded(service.matches)


@app.post("/api/save")
def save() -> dict[str, Any]:
    return _guarded(service.save)
