from __future__ import annotations

from typing import Iterable, Iterator

from .models import Team


def fixture_count(team_count: int) -> int:
    if team_count < 2:
        return 0
    return team_count * (team_count - 1) // 2


def iter_single_round_robin(teams: Iterable[Team]) -> Iterator[tuple[Team, Team]]:
    """Yield every unordered pair once, earlier-registered team at home.

    Pairs come out in registration order (outer index i, inner index j > i),
    lazily, so a caller can play each fixture as soon as it is produced.
    """
    team_list = list(teams)
    for i, home in enumerate(team_list):
        for away in team_list[i + 1:]:
            yield home, away


def build_single_round_robin(teams: Iterable[Team]) -> list[tuple[Team, Team]]:
    return list(iter_single_round_robin(teams))
