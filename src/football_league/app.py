from __future__ import annotations

import argparse
import logging
import random
from typing import Iterable

from .engine import Match
from .factory import PersonFactory
from .league import League
from .market import Market
from .models import StandingsRow, Team
from .persistence import JsonStore

logger = logging.getLogger(__name__)

# Outfield shape of a generated squad: 2 GK, 6 DF, 6 MF, 4 FW.
SQUAD_TEMPLATE: tuple[tuple[str, int], ...] = (("GK", 2), ("DF", 6), ("MF", 6), ("FW", 4))

DEFAULT_CLUBS: tuple[tuple[str, int, str, str | None, str | None], ...] = (
    ("Atletic Riera", 1899, "Barcelona", "Camp de la Riera", "Marta Soler"),
    ("Union Portuaria", 1912, "Valencia", "Estadio del Puerto", None),
    ("Real Meseta", 1903, "Madrid", "Estadio Meseta", "Luis Campos"),
    ("Deportivo Norte", 1921, "A Coruna", None, "Ana Rios"),
    ("Sporting Bahia", 1905, "Cadiz", "Campo de la Bahia", None),
    ("Club Sierra", 1947, "Granada", "Nuevo Sierra", "Jorge Vidal"),
    ("Racing Costa", 1913, "Santander", "Los Acantilados", None),
    ("CD Ribera", 1930, "Zaragoza", None, None),
)


def _make_squad(factory: PersonFactory, team: Team) -> None:
    number = 1
    for position, count in SQUAD_TEMPLATE:
        for _idx in range(count):
            team.add_player(factory.random_player(number, position=position))
            number += 1


def build_default_teams(count: int = 6, seed: int = 7, factory: PersonFactory | None = None) -> list[Team]:
    factory = factory or PersonFactory(seed=seed)
    teams: list[Team] = []
    for name, founded, city, stadium, president in DEFAULT_CLUBS[: max(0, count)]:
        team = Team(name=name, founded=founded, city=city, stadium=stadium, president=president)
        _make_squad(factory, team)
        team.assign_coach(factory.random_coach())
        teams.append(team)
    return teams


def build_default_market(players: int = 10, coaches: int = 3, seed: int = 11, factory: PersonFactory | None = None) -> Market:
    factory = factory or PersonFactory(seed=seed)
    rng = random.Random(seed)
    market = Market()
    for _idx in range(players):
        market.add(factory.random_player(rng.randint(1, 99)))
    for _idx in range(coaches):
        market.add(factory.random_coach())
    return market


def format_standings(rows: Iterable[StandingsRow]) -> str:
    lines = ["Pos Team                  P  W  D  L  GF  GA  GD Pts"]
    for idx, row in enumerate(rows, start=1):
        lines.append(
            f"{idx:>3} {row.team.name:<20} {row.played:>2} {row.won:>2} {row.drawn:>2} {row.lost:>2}"
            f" {row.goals_for:>3} {row.goals_against:>3} {row.goal_difference:>3} {row.points:>3}"
        )
    return "\n".join(lines)


def format_results(matches: Iterable[Match]) -> str:
    return "\n".join(str(match) for match in matches)


def format_team(team: Team) -> str:
    coach = team.coach.full_name if team.coach is not None else "None"
    lines = [
        f"{team.name} (founded {team.founded}, {team.city})",
        f"Stadium: {team.stadium or '-'}  President: {team.president or '-'}  Coach: {coach}",
        f"Average quality: {team.average_quality():.1f}",
        " No Pos Player                     Qual  Mot",
    ]
    for player in team.players_by_position():
        lines.append(
            f"{player.number:>3} {player.position:<3} {player.full_name:<26} {player.quality:>5.1f} {player.motivation:>4.1f}"
        )
    return "\n".join(lines)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="football-league", description="Simulate a single round-robin football league")
    ap.add_argument("--name", default="Liga Demo", help="league name")
    ap.add_argument("--teams", type=int, default=6, help="number of demo teams (2-8)")
    ap.add_argument("--seed", type=int, default=None, help="seed for a reproducible season")
    ap.add_argument("--data-dir", default=None, help="load teams/market from and save them to this directory")
    ap.add_argument("--train", type=int, default=0, help="training sessions per team before the season")
    ap.add_argument("--save", action="store_true", help="save teams and market after the season")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    store = JsonStore(args.data_dir) if args.data_dir else None
    teams = store.load_teams() if store else []
    market = Market(store.load_market()) if store else Market()
    if store and store.last_load_error:
        logger.warning(store.last_load_error)
    if not teams:
        teams = build_default_teams(count=args.teams)
        if not len(market):
            market = build_default_market()

    rng = random.Random(args.seed) if args.seed is not None else None
    for _session in range(max(0, args.train)):
        for team in teams:
            team.run_training_session(rng)

    league = League(args.name)
    for team in teams[: max(0, args.teams)]:
        league.register_team(team)
    if not league.play_season(rng):
        print("Not enough teams to play the league.")
        return 1

    print(format_results(league.matches))
    print()
    print(format_standings(league.standings()))
    top_scorer = league.top_scorer()
    top_conceder = league.top_conceder()
    if top_scorer is not None and top_conceder is not None:
        print()
        print(f"Most goals scored: {top_scorer.name}")
        print(f"Most goals conceded: {top_conceder.name}")

    if store and args.save:
        store.save_teams(teams)
        store.save_market(list(market))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
