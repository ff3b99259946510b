from datetime import date, datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlmodel import Session

from leaderboard.models import Event, EventParticipation, Game, GameParticipation, Player
from leaderboard.services.tournament_bracket import build_participants
from leaderboard.services.tournament_list import is_finals_game_name

START = datetime(2024, 4, 1, 10, 0, tzinfo=timezone.utc)


def _players(session: Session, *names):
    players = [Player(username=name) for name in names]
    session.add_all(players)
    session.commit()
    for p in players:
        session.refresh(p)
    return {p.username: p for p in players}


def _game(session: Session, event: Event, name, minute, results=()):
    """results: (player, ranking, score) tuples"""
    game = Game(name=name, event_id=event.id, created_at=START + timedelta(minutes=minute))
    session.add(game)
    session.commit()
    session.refresh(game)
    for player, ranking, score in results:
        session.add(GameParticipation(game_id=game.id, player_id=player.id, ranking=ranking, final_score=score))
    session.commit()
    return game


def _seed_spring_open(session: Session):
    players = _players(session, "alice", "bob", "carol", "dave")
    alice, bob, carol, dave = (players[n] for n in ("alice", "bob", "carol", "dave"))

    event = Event(
        name="2024 Spring Open",
        start_date=date(2024, 4, 1),
        winner=alice.id,
        num_players_per_game=4,
        rating_event=True,
    )
    session.add(event)
    session.commit()
    session.refresh(event)

    for p in players.values():
        session.add(EventParticipation(event_id=event.id, player_id=p.id, games_won=0))
    session.commit()

    _game(session, event, "R1 A1", 0, [(alice, 1, 50), (bob, 2, 40), (carol, 2, 40), (dave, 2, 30)])
    _game(session, event, "R1 A2", 1)
    _game(session, event, "SF 1", 2, [(alice, 1, 60), (bob, 2, 45)])
    _game(session, event, "FF", 3, [(alice, 1, 70), (carol, 2, 55), (dave, 3, 41), (bob, None, None)])
    _game(session, event, "SF 1", 4, [(carol, 1, 10)])
    return event, players


def test_tournament_bracket(client: TestClient, session: Session):
    event, _ = _seed_spring_open(session)

    response = client.get(f"/api/tournaments/{event.id}")
    assert response.status_code == 200
    data = response.json()

    assert data["display_name"] == "Spring Open"
    assert data["winner_name"] == "alice"
    assert data["tournament_format"] == "standard"
    assert [s["section_key"] for s in data["sections"]] == ["round-1", "semifinals", "finals"]
    assert [s["is_elimination"] for s in data["sections"]] == [False, True, True]

    round_one = data["sections"][0]
    assert round_one["section_label"] == "Round 1"
    assert [g["display_name"] for g in round_one["games"]] == ["A1"]
    a1 = round_one["games"][0]["participants"]
    assert [p["username"] for p in a1][0] == "alice"
    assert {p["username"]: p["placement"] for p in a1} == {"alice": 1, "bob": 2, "carol": 2, "dave": 4}

    # the later duplicate "SF 1" is dropped
    semis = data["sections"][1]["games"]
    assert len(semis) == 1
    assert [p["username"] for p in semis[0]["participants"]] == ["alice", "bob"]

    finals = data["sections"][2]["games"][0]["participants"]
    assert [p["username"] for p in finals] == ["alice", "carol", "dave", "bob"]
    assert finals[-1]["ranking"] is None
    assert finals[-1]["placement"] is None


def test_tournament_bracket_league_format(client: TestClient, session: Session):
    players = _players(session, "erin", "frank")
    event = Event(name="Winter League 2023", start_date=date(2023, 12, 1), num_players_per_game=2)
    session.add(event)
    session.commit()
    session.refresh(event)
    _game(session, event, "Tier 2 Game 1", 0, [(players["erin"], 1, 30), (players["frank"], 2, 20)])
    _game(session, event, "Tier 1 Game 1", 1, [(players["frank"], 1, 30), (players["erin"], 2, 20)])

    data = client.get(f"/api/tournaments/{event.id}").json()
    assert data["tournament_format"] == "league"
    assert data["display_name"] == "Winter League"
    assert [s["section_key"] for s in data["sections"]] == ["tier-1", "tier-2"]


def test_tournament_not_found(client: TestClient):
    response = client.get("/api/tournaments/999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Tournament not found"


def test_tournament_id_must_be_integer(client: TestClient):
    assert client.get("/api/tournaments/abc").status_code == 422


def test_tournament_list(client: TestClient, session: Session):
    spring, _ = _seed_spring_open(session)
    winter = Event(name="Winter League 2023", start_date=date(2023, 12, 1), num_players_per_game=4)
    undated = Event(name="Garage Cup")
    session.add_all([winter, undated])
    session.commit()

    response = client.get("/api/tournaments")
    assert response.status_code == 200
    data = response.json()

    assert [t["display_name"] for t in data["tournaments"]] == ["Spring Open", "Winter League", "Garage Cup"]
    assert data["last_updated"].startswith("2024-04-01T10:04")

    first = data["tournaments"][0]
    assert first["id"] == spring.id
    assert first["player_count"] == 4
    assert first["games_count"] == 5
    assert first["winner_name"] == "alice"
    assert [f["username"] for f in first["finalists"]] == ["alice", "carol", "dave", "bob"]

    second = data["tournaments"][1]
    assert second["player_count"] == 0
    assert second["games_count"] == 0
    assert second["finalists"] == []
    assert second["winner_name"] is None


def test_tournament_list_empty(client: TestClient):
    data = client.get("/api/tournaments").json()
    assert data == {"tournaments": [], "last_updated": None}


def test_finalists_skipped_for_two_player_events(client: TestClient, session: Session):
    players = _players(session, "gina", "hal")
    event = Event(name="Spring 1v1", start_date=date(2024, 3, 1), num_players_per_game=2)
    session.add(event)
    session.commit()
    session.refresh(event)
    _game(session, event, "Finals", 0, [(players["gina"], 1, 10), (players["hal"], 2, 5)])

    [summary] = client.get("/api/tournaments").json()["tournaments"]
    assert summary["finalists"] == []


def test_is_finals_game_name():
    assert is_finals_game_name("FF")
    assert is_finals_game_name("Grand Final")
    assert is_finals_game_name("ff2")
    assert not is_finals_game_name("F1")
    assert not is_finals_game_name("SF 1")
    assert not is_finals_game_name(None)


def test_build_participants_prefers_row_with_results():
    player = Player(id=1, username="ivy")
    rows = [
        GameParticipation(game_id=1, player_id=1, ranking=None, final_score=None),
        GameParticipation(game_id=1, player_id=1, ranking=2, final_score=33),
        GameParticipation(game_id=1, player_id=2, ranking=1, final_score=40),
    ]
    participants = build_participants(rows, {1: player})
    assert len(participants) == 1
    assert participants[0].ranking == 2
    assert participants[0].final_score == 33
