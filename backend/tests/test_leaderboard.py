from datetime import date, datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlmodel import Session

from leaderboard.models import Event, EventParticipation, Game, GameParticipation, Player
from leaderboard.services.player_profile import is_rating_event, load_rivalry_inputs, round_rating


def _rating(ordinal):
    return {"mu": 25.0, "sigma": 8.3, "ordinal": ordinal}


def _add(session: Session, *rows):
    session.add_all(rows)
    session.commit()
    for row in rows:
        session.refresh(row)
    return rows


def _seed_players(session: Session):
    return _add(
        session,
        Player(username="alice", current_rating=_rating(30.4)),
        Player(username="bob", current_rating=_rating(30.6)),
        Player(username="carol"),
        Player(username="dave", current_rating=_rating(12.5)),
    )


def test_leaderboard_ranked_by_rating(client: TestClient, session: Session):
    _seed_players(session)

    response = client.get("/api/leaderboard")
    assert response.status_code == 200
    rows = response.json()

    assert [r["username"] for r in rows] == ["bob", "alice", "dave", "carol"]
    assert [r["rank"] for r in rows] == [1, 2, 3, 4]
    assert [r["rating"] for r in rows] == [31, 30, 13, None]


def test_leaderboard_empty(client: TestClient):
    assert client.get("/api/leaderboard").json() == []


def test_player_profile(client: TestClient, session: Session):
    alice, bob, carol, _ = _seed_players(session)
    autumn, spring, duel, garage = _add(
        session,
        Event(name="2023 Autumn Open", start_date=date(2023, 10, 1), rating_event=True, num_players_per_game=4),
        Event(name="Spring Open 2024", start_date=date(2024, 4, 1), rating_event=True, num_players_per_game=4),
        Event(name="Spring 1v1", start_date=date(2024, 5, 1), rating_event=True, num_players_per_game=2),
        Event(name="Garage Cup", rating_event=True, num_players_per_game=4),
    )
    _add(
        session,
        EventParticipation(event_id=spring.id, player_id=alice.id, games_won=None, updated_rating=_rating(28.49)),
        EventParticipation(event_id=garage.id, player_id=alice.id, games_won=1),
        EventParticipation(event_id=autumn.id, player_id=alice.id, games_won=2, updated_rating=_rating(25.5)),
        EventParticipation(event_id=duel.id, player_id=alice.id, games_won=3),
    )

    # five games against bob: 3 wins, 1 loss, 1 draw (carol wins the last)
    start = datetime(2024, 4, 1, 9, 0, tzinfo=timezone.utc)
    results = [
        [(alice, 1), (bob, 2)],
        [(alice, 1), (bob, 2)],
        [(alice, 1), (bob, 3)],
        [(bob, 1), (alice, 2)],
        [(carol, 1), (alice, 2), (bob, 3)],
    ]
    for i, game_results in enumerate(results):
        (game,) = _add(session, Game(name=f"R{i + 1}", event_id=spring.id, created_at=start + timedelta(hours=i)))
        for player, ranking in game_results:
            session.add(GameParticipation(game_id=game.id, player_id=player.id, ranking=ranking))
        session.commit()

    response = client.get("/api/leaderboard/alice")
    assert response.status_code == 200
    data = response.json()

    assert data["username"] == "alice"
    assert data["rating"] == 30
    assert data["wins"] == 6
    assert data["tournaments"] == 4
    assert data["most_recent_event"]["display_name"] == "Spring 1v1"

    events = data["events"]
    assert [e["display_name"] for e in events] == ["Autumn Open", "Spring Open", "Spring 1v1", "Garage Cup"]
    assert [e["rating_event"] for e in events] == [True, True, False, True]
    assert [e["rating"] for e in events] == [26, 28, None, None]

    chart = data["rating_history"]
    assert [p["name"] for p in chart] == ["Autumn Open", "Spring Open", "Garage Cup"]
    assert [p["id"] for p in chart] == [0, 1, 2]
    assert chart[0]["full_name"] == "2023 Autumn Open"
    assert chart[0]["date"] == "10/01/2023"
    assert chart[0]["timestamp"] == 1696118400000
    assert chart[2]["date"] == "unknown"
    assert chart[2]["timestamp"] == 0
    assert [p["rating"] for p in chart] == [26, 28, 1200]

    [nemesis] = data["nemeses"]
    assert nemesis["username"] == "bob"
    assert (nemesis["wins"], nemesis["losses"], nemesis["draws"]) == (3, 1, 1)
    assert nemesis["total_games"] == 5
    assert nemesis["score"] == 4


def test_player_without_history(client: TestClient, session: Session):
    _seed_players(session)
    data = client.get("/api/leaderboard/carol").json()
    assert data["rating"] is None
    assert data["wins"] == 0
    assert data["tournaments"] == 0
    assert data["most_recent_event"] is None
    assert data["events"] == []
    assert data["rating_history"] == []
    assert data["nemeses"] == []


def test_player_not_found(client: TestClient):
    response = client.get("/api/leaderboard/nobody")
    assert response.status_code == 404
    assert response.json()["detail"] == "Player not found"


def test_load_rivalry_inputs_excludes_self(session: Session):
    alice, bob, carol, _ = _seed_players(session)
    (event,) = _add(session, Event(name="Open", start_date=date(2024, 1, 1)))
    (game,) = _add(session, Game(name="R1 A1", event_id=event.id))
    _add(
        session,
        GameParticipation(game_id=game.id, player_id=alice.id, ranking=1),
        GameParticipation(game_id=game.id, player_id=bob.id, ranking=2),
        GameParticipation(game_id=game.id, player_id=carol.id, ranking=3),
    )

    own, opponents = load_rivalry_inputs(session, alice.id)
    assert [(r.game_id, r.ranking) for r in own] == [(game.id, 1)]
    assert sorted(o.player_id for o in opponents) == sorted([bob.id, carol.id])
    assert all(o.played_at is not None for o in opponents)


def test_round_rating_rounds_half_up():
    assert round_rating(12.5) == 13
    assert round_rating(-0.5) == 0
    assert round_rating(28.49) == 28
    assert round_rating(None) is None


def test_is_rating_event():
    assert is_rating_event(Event(rating_event=True, num_players_per_game=3))
    assert not is_rating_event(Event(rating_event=True, num_players_per_game=2))
    assert not is_rating_event(Event(rating_event=None, num_players_per_game=4))
    assert not is_rating_event(None)
