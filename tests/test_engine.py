import math

import pytest

from conftest import FixedRandom, ScriptedRandom
from football_league.engine import Match, goal_rate, performance_factor, sample_goals
from football_league.errors import MatchStateError


def _knuth_reference(lam: float, uniform: float) -> int:
    limit = math.exp(-lam)
    k, p = 0, 1.0
    while True:
        k += 1
        p *= uniform
        if p <= limit:
            return k - 1


def test_strong_motivated_side_against_weak_side(make_team, make_coach) -> None:
    strong = make_team("A", quality=80, coach=make_coach(motivation=8))
    weak = make_team("B", quality=40)

    factor_a = performance_factor(strong)
    factor_b = performance_factor(weak)
    assert factor_a == pytest.approx(112.0)
    assert factor_b == pytest.approx(50.0)

    lam_a = goal_rate(factor_a, factor_b)
    lam_b = goal_rate(factor_b, factor_a)
    assert lam_a == pytest.approx(1.74)
    assert lam_b == 0.0
    assert lam_a > lam_b

    match = Match(strong, weak)
    assert match.play(FixedRandom(0.5)) == (2, 0)
    assert match.goals() == (_knuth_reference(lam_a, 0.5), _knuth_reference(lam_b, 0.5))


def test_zero_rate_always_yields_zero_goals() -> None:
    assert sample_goals(0.0, FixedRandom(0.999)) == 0


def test_sampler_consumes_draws_until_below_limit() -> None:
    # e^-1 ~= 0.368: 0.9 * 0.8 = 0.72, * 0.6 = 0.432, * 0.5 = 0.216 -> four draws, three goals.
    rng = ScriptedRandom([0.9, 0.8, 0.6, 0.5, 0.123])
    assert sample_goals(1.0, rng) == 3
    assert rng.random() == 0.123


def test_goal_rate_never_negative() -> None:
    assert goal_rate(10.0, 500.0) == 0.0
    assert goal_rate(100.0, 100.0) == 0.5


def test_match_cannot_be_replayed(make_team) -> None:
    match = Match(make_team("A"), make_team("B"))
    match.play(FixedRandom(0.5))
    first = match.goals()
    with pytest.raises(MatchStateError):
        match.play(FixedRandom(0.99))
    assert match.goals() == first
    assert match.played is True


def test_goals_unavailable_before_play(make_team) -> None:
    match = Match(make_team("A"), make_team("B"))
    assert match.played is False
    with pytest.raises(MatchStateError):
        match.goals()
    with pytest.raises(MatchStateError):
        _ = match.home_goals
    with pytest.raises(MatchStateError):
        _ = match.away_goals
    assert str(match) == "A vs B (not played)"


def test_score_from_each_side(make_team, make_coach) -> None:
    home = make_team("Home", quality=80, coach=make_coach(motivation=8))
    away = make_team("Away", quality=40)
    other = make_team("Other")
    match = Match(home, away)
    match.play(FixedRandom(0.5))
    assert match.score_for(home) == (2, 0)
    assert match.score_for(away) == (0, 2)
    assert match.winner() is home
    assert match.involves(away)
    assert not match.involves(other)
    assert str(match) == "Home 2 - 0 Away"
    with pytest.raises(ValueError):
        match.score_for(other)


def test_draw_has_no_winner(make_team) -> None:
    match = Match(make_team("A"), make_team("B"))
    match.play(FixedRandom(0.7))
    assert match.goals() == (1, 1)
    assert match.winner() is None


def test_play_without_injected_rng(make_team) -> None:
    match = Match(make_team("A", quality=70), make_team("B", quality=60))
    home_goals, away_goals = match.play()
    assert home_goals >= 0 and away_goals >= 0
    assert match.goals() == (home_goals, away_goals)


def test_dismissed_coach_falls_back_to_default_motivation(make_team, make_coach) -> None:
    coach = make_coach(motivation=10)
    team = make_team("A", quality=60, coach=coach)
    assert performance_factor(team) == pytest.approx(90.0)

    dismissed = team.dismiss_coach()
    assert dismissed is coach
    assert team.coach is None
    assert coach.motivation == 10.0
    assert performance_factor(team) == pytest.approx(60.0 * 1.25)

    # Even sides after the dismissal: both rates are the 0.5 base.
    match = Match(team, make_team("B", quality=60))
    match.play(FixedRandom(0.7))
    assert match.goals() == (1, 1)
