"""Moves players and coaches between teams and the market.

Every operation checks all of its preconditions before touching a roster or
the market, so a rejected move leaves both sides as they were.
"""
from __future__ import annotations

import logging
import random

from .config import MAX_SQUAD_NUMBER, MIN_SQUAD_NUMBER
from .errors import DuplicateNumberError, ValidationError
from .market import Market
from .models import Coach, Player, Team

logger = logging.getLogger(__name__)


def _check_number(team: Team, number: int) -> None:
    # Run the Player setter check without mutating anyone.
    if isinstance(number, bool) or not isinstance(number, int):
        raise ValidationError(f"Squad number must be an integer, got {number!r}.")
    if not MIN_SQUAD_NUMBER <= number <= MAX_SQUAD_NUMBER:
        raise ValidationError(f"Squad number {number!r} out of range [{MIN_SQUAD_NUMBER}, {MAX_SQUAD_NUMBER}].")
    if team.has_number(number):
        raise DuplicateNumberError(team.name, number)


def sign_player(team: Team, market: Market, player: Player, number: int | None = None) -> Player:
    if not isinstance(player, Player) or player not in market:
        raise ValidationError("Player is not available on the market.")
    new_number = player.number if number is None else number
    _check_number(team, new_number)

    player.number = new_number
    team.add_player(player)
    market.remove(player)
    logger.info("%s signed for %s wearing %d.", player.full_name, team.name, new_number)
    return player


def sign_coach(team: Team, market: Market, coach: Coach) -> Coach | None:
    """Hire ``coach`` from the market; the outgoing coach goes back to it."""
    if not isinstance(coach, Coach) or coach not in market:
        raise ValidationError("Coach is not available on the market.")
    market.remove(coach)
    previous = team.assign_coach(coach)
    if previous is not None:
        market.add(previous)
        logger.info("%s replaced %s as coach of %s.", coach.full_name, previous.full_name, team.name)
    else:
        logger.info("%s hired as coach of %s.", coach.full_name, team.name)
    return previous


def dismiss_coach(team: Team, market: Market) -> Coach | None:
    coach = team.dismiss_coach()
    if coach is None:
        return None
    market.add(coach)
    logger.info("%s dismissed by %s and returned to the market.", coach.full_name, team.name)
    return coach


def release_player(team: Team, market: Market, name: str, number: int) -> Player | None:
    player = team.find_player(name, number)
    if player is None:
        return None
    team.remove_player(name, number)
    market.add(player)
    logger.info("%s released by %s.", player.full_name, team.name)
    return player


def transfer_player(
    source: Team,
    target: Team,
    name: str,
    number: int,
    new_number: int | None = None,
) -> Player:
    if source is target:
        raise ValidationError("Source and destination teams must differ.")
    player = source.find_player(name, number)
    if player is None:
        raise ValidationError(f"No player {name} #{number} in {source.name}.")
    target_number = player.number if new_number is None else new_number
    _check_number(target, target_number)

    source.remove_player(name, number)
    player.number = target_number
    target.add_player(player)
    logger.info(
        "%s transferred from %s to %s wearing %d.",
        player.full_name,
        source.name,
        target.name,
        target_number,
    )
    return player


def train_market(market: Market, rng: random.Random | None = None) -> None:
    market.train_all(rng)
    logger.info("Market training session completed for %d persons.", len(market))
