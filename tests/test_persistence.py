import json

import pytest

from football_league.app import build_default_market, build_default_teams
from football_league.errors import ValidationError
from football_league.persistence import (
    JsonStore,
    deserialize_person,
    deserialize_team,
    serialize_person,
    serialize_team,
)


def test_teams_and_market_survive_a_save_load_cycle(tmp_path) -> None:
    teams = build_default_teams(count=3)
    market = build_default_market(players=4, coaches=2)
    store = JsonStore(tmp_path)

    store.save_teams(teams)
    store.save_market(list(market))

    reloaded = JsonStore(tmp_path)
    loaded_teams = reloaded.load_teams()
    loaded_market = reloaded.load_market()
    assert reloaded.last_load_error == ""
    assert [serialize_team(t) for t in loaded_teams] == [serialize_team(t) for t in teams]
    assert [serialize_person(p) for p in loaded_market] == [serialize_person(p) for p in market]


def test_team_without_coach_round_trips(make_team) -> None:
    team = make_team("Riera", size=2)
    restored = deserialize_team(serialize_team(team))
    assert restored.coach is None
    assert [p.number for p in restored.roster] == [1, 2]


def test_unknown_person_kind_is_rejected() -> None:
    with pytest.raises(ValidationError):
        deserialize_person({"kind": "referee", "name": "A", "surname": "B"})


def test_coach_in_roster_is_rejected(make_team, make_coach) -> None:
    raw = serialize_team(make_team("Riera", size=1))
    raw["roster"].append(serialize_person(make_coach()))
    with pytest.raises(ValidationError):
        deserialize_team(raw)


def test_missing_files_load_empty(tmp_path) -> None:
    store = JsonStore(tmp_path / "nowhere")
    assert store.load_teams() == []
    assert store.load_market() == []
    assert store.last_load_error == ""


def test_corrupt_file_loads_empty_with_error(tmp_path) -> None:
    (tmp_path / "teams.json").write_text("{not json", encoding="utf-8")
    store = JsonStore(tmp_path)
    assert store.load_teams() == []
    assert "Failed to load teams" in store.last_load_error


def test_invalid_team_entries_are_skipped(tmp_path, make_team) -> None:
    good = serialize_team(make_team("Riera", size=2))
    bad = serialize_team(make_team("Costa", size=2))
    bad["roster"][0]["quality"] = 120
    duplicate = serialize_team(make_team("riera", size=1))
    (tmp_path / "teams.json").write_text(
        json.dumps({"save_version": 1, "teams": [good, bad, "junk", duplicate]}),
        encoding="utf-8",
    )
    teams = JsonStore(tmp_path).load_teams()
    assert [t.name for t in teams] == ["Riera"]


@pytest.mark.regression
def test_loads_legacy_list_market(tmp_path, make_player) -> None:
    (tmp_path / "market.json").write_text(
        json.dumps([serialize_person(make_player(name="Legacy"))]),
        encoding="utf-8",
    )
    persons = JsonStore(tmp_path).load_market()
    assert len(persons) == 1
    assert persons[0].name == "Legacy"


@pytest.mark.regression
def test_rejects_future_save_version_with_clear_error(tmp_path, make_team) -> None:
    (tmp_path / "teams.json").write_text(
        json.dumps({"save_version": 999, "teams": [serialize_team(make_team("Riera", size=1))]}),
        encoding="utf-8",
    )
    store = JsonStore(tmp_path)
    assert store.load_teams() == []
    assert "Unsupported teams version" in store.last_load_error


@pytest.mark.regression
def test_save_includes_save_version_and_backup(tmp_path, make_team) -> None:
    store = JsonStore(tmp_path / "data")
    teams_path = tmp_path / "data" / "teams.json"
    backup_path = tmp_path / "data" / "teams.json.bak"

    # First write creates the primary file.
    store.save_teams([make_team("Riera", size=1)])
    payload = json.loads(teams_path.read_text(encoding="utf-8"))
    assert payload["save_version"] == JsonStore.SAVE_VERSION
    assert not backup_path.exists()

    # Second write keeps the previous file as a backup.
    store.save_teams([make_team("Costa", size=1)])
    assert backup_path.exists()
    backup = json.loads(backup_path.read_text(encoding="utf-8"))
    assert backup["teams"][0]["name"] == "Riera"
