from fastapi.testclient import TestClient
from sqlmodel import Session

from dinger_api import models
from dinger_api.services.refresh import RefreshInProgress, replace_for_date

from payloads import TODAY


def test_update_then_read_every_view(client: TestClient):
    resp = client.post("/update-data")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "All data updated successfully"
    assert body["counts"] == {"homeruns": 3, "leaderboard": 5, "pitchers": 4}
    assert body["timestamp"]

    homers = client.get("/daily_homeruns", params={"date": TODAY}).json()
    assert [h["name"] for h in homers] == ["Shohei Ohtani", "Aaron Judge", "Cal Raleigh"]
    assert [h["totalDistance"] for h in homers] == [455, 430, 401]

    board = client.get("/leaderboard").json()
    assert [(p["name"], p["HR"], p["rank"]) for p in board] == [
        ("Aaron Judge", 40, 1),
        ("Cal Raleigh", 40, "T-1"),
        ("Shohei Ohtani", 38, 3),
        ("Kyle Schwarber", 37, 4),
        ("Eugenio Suarez", 37, "T-4"),
    ]

    pitchers = client.get("/pitchers").json()
    assert [(p["gamePk"], p["teamSide"], p["name"]) for p in pitchers][:2] == [
        (1001, "home", "Gerrit Cole"),
        (1001, "away", "Brayan Bello"),
    ]
    assert pitchers[0]["ERA"] == "3.21"
    assert pitchers[0]["HR9"] == "1.10"


def test_stored_record_reads_back_unchanged(client: TestClient, engine):
    row = models.DailyHomeRun(
        player_id=660271,
        name="Shohei Ohtani",
        description="Shohei Ohtani homers (18) on a fly ball to center field.",
        image_url="https://content.mlb.com/images/mlb/2025/players/headshots/660271.jpg",
        launch_speed=115.2,
        total_distance=455,
        date="2025-05-20",
    )
    with Session(engine) as session:
        replace_for_date(session, models.DailyHomeRun, "2025-05-20", [row])

    resp = client.get("/daily_homeruns", params={"date": "2025-05-20"})
    assert resp.status_code == 200
    assert resp.json() == [
        {
            "playerId": 660271,
            "name": "Shohei Ohtani",
            "description": "Shohei Ohtani homers (18) on a fly ball to center field.",
            "imageUrl": "https://content.mlb.com/images/mlb/2025/players/headshots/660271.jpg",
            "launchSpeed": 115.2,
            "totalDistance": 455,
            "date": "2025-05-20",
        }
    ]


def test_leaderboard_entry_reads_back_unchanged(client: TestClient):
    client.post("/update-data")
    judge = client.get("/leaderboard").json()[0]
    assert judge == {
        "playerId": 1,
        "name": "Aaron Judge",
        "team": "New York Yankees",
        "position": "RF",
        "HR": 40,
        "RBI": 50,
        "AVG": "0.280",
        "OPS": "0.900",
        "SB": 5,
        "abPerHr": "12.34",
        "date": TODAY,
        "rank": 1,
    }


def test_reads_without_data_return_empty_lists(client: TestClient):
    assert client.get("/daily_homeruns", params={"date": "1999-01-01"}).json() == []
    for path in ("/daily_homeruns", "/leaderboard", "/pitchers"):
        resp = client.get(path)
        assert resp.status_code == 200
        assert resp.json() == []


def test_invalid_date_is_rejected(client: TestClient):
    resp = client.get("/daily_homeruns", params={"date": "yesterday"})
    assert resp.status_code == 400


def test_pinned_date_is_used_when_no_date_given(client: TestClient, settings):
    client.post("/update-data")
    settings.pinned_date = "2025-05-01"
    assert client.get("/daily_homeruns").json() == []
    settings.pinned_date = TODAY
    assert len(client.get("/daily_homeruns").json()) == 3


def test_failed_update_reports_error(client: TestClient, service, monkeypatch):
    def explode(category):
        raise RuntimeError("database is locked")

    monkeypatch.setattr(service, "refresh", explode)
    resp = client.post("/update-data")
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "database is locked"


def test_update_while_running_conflicts(client: TestClient, service, monkeypatch):
    def busy(category):
        raise RefreshInProgress("A data refresh is already running")

    monkeypatch.setattr(service, "refresh", busy)
    resp = client.post("/update-data")
    assert resp.status_code == 409
    assert resp.json()["success"] is False


def test_update_requires_key_when_configured(client: TestClient, settings):
    settings.admin_key = "s3cret"
    assert client.post("/update-data").status_code == 403
    assert client.post("/update-data", headers={"X-Admin-Key": "s3cret"}).status_code == 200


def test_admin_updates_are_key_gated(client: TestClient, settings):
    assert client.get("/admin/update-leaderboard", params={"key": "anything"}).status_code == 403

    settings.admin_key = "s3cret"
    assert client.get("/admin/update-leaderboard").status_code == 403
    assert client.get("/admin/update-leaderboard", params={"key": "wrong"}).status_code == 403
    assert client.get("/admin/update-standings", params={"key": "s3cret"}).status_code == 404

    resp = client.get("/admin/update-leaderboard", params={"key": "s3cret"})
    assert resp.status_code == 200
    assert resp.json()["counts"] == {"leaderboard": 5}
    assert resp.json()["message"] == "Leaderboard data updated successfully"
    assert client.get("/pitchers").json() == []


def test_health_and_collection_counts(client: TestClient):
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert health.json()["database"] == "connected"

    client.post("/update-data")
    collections = client.get("/debug/collections").json()["collections"]
    assert collections == {
        "daily_homeruns": {"count": 3},
        "leaderboard": {"count": 5},
        "pitchers": {"count": 4},
    }
