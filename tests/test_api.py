"""
HTTP API tests.

Each test gets a fresh app on its own SQLite database file.  The client
is used as a context manager so the app's startup runs and the event loop
stays alive between requests (the debounced team save runs on it).
"""

import time
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from canasta.api.main import create_app
from canasta.config import Settings
from conftest import RecordingStore


def make_client(tmp_path, quiet_period=0.01):
    settings = Settings(
        database_url=f"sqlite:///{tmp_path / 'api.db'}",
        team_save_quiet_period=quiet_period,
        log_level="WARNING",
    )
    return TestClient(create_app(settings))


@pytest.fixture
def client(tmp_path):
    with make_client(tmp_path) as client:
        yield client


def sign_in(client, email="coach@example.com", next_path="/"):
    response = client.post("/auth/login", json={"email": email, "next": next_path})
    assert response.status_code == 200
    return client.get(response.json()["redirect"], follow_redirects=False)


def wait_for_team(client, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        state = client.get("/state").json()
        if state["team_id"] is not None:
            return state
        time.sleep(0.02)
    raise AssertionError("team was never saved")


def error_message(response):
    location = urlparse(response.headers["location"])
    assert location.path == "/auth/error"
    return parse_qs(location.query)["message"][0]


def test_health_check(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_data_routes_require_sign_in(client):
    response = client.get("/state")
    assert response.status_code == 401
    assert response.json()["detail"]["redirect"] == "/auth/login"
    assert client.get("/stats").status_code == 401


def test_callback_without_code_goes_to_error_page(client):
    response = client.get("/auth/callback", follow_redirects=False)
    assert response.status_code == 303
    assert error_message(response) == "No authorization code received"


def test_callback_with_bad_code_carries_the_failure_message(client):
    response = client.get("/auth/callback?code=bogus", follow_redirects=False)
    assert error_message(response) == "Invalid authorization code"

    page = client.get(response.headers["location"]).json()
    assert page["message"] == "Invalid authorization code"
    assert page["retry"] == "/auth/login"


def test_callback_redirects_to_next_and_signs_in(client):
    response = sign_in(client, next_path="/stats")
    assert response.status_code == 303
    assert response.headers["location"] == "/stats"
    assert client.get("/auth/me").json()["email"] == "coach@example.com"


def test_callback_refuses_offsite_next(client):
    response = sign_in(client, next_path="//evil.example.com")
    assert response.headers["location"] == "/"


def test_logout(client):
    sign_in(client)
    client.get("/state")
    assert len(client.app.state.controllers) == 1

    assert client.post("/auth/logout").json() == {"redirect": "/auth/login"}
    assert client.get("/state").status_code == 401
    assert client.app.state.controllers == {}


def test_logout_saves_pending_team_name(tmp_path):
    with make_client(tmp_path, quiet_period=60) as client:
        sign_in(client)
        client.put("/team", json={"name": "Halcones"})
        client.post("/auth/logout")

        sign_in(client)
        state = client.get("/state").json()
        assert state["team_id"] is not None
        assert state["team_name"] == "Halcones"


def test_failed_load_is_retried_and_never_duplicates_the_team(client):
    sign_in(client)
    client.put("/team", json={"name": "Halcones"})
    team_id = wait_for_team(client)["team_id"]
    client.post("/auth/logout")

    store = RecordingStore(client.app.state.store)
    store.fail_on.add(("select_games_with_shots", "games"))
    client.app.state.store = store
    sign_in(client)

    client.get("/state")
    assert client.app.state.controllers == {}
    client.put("/team", json={"name": "Águilas"})
    time.sleep(0.1)

    store.fail_on.clear()
    state = client.get("/state").json()
    assert state["team_id"] == team_id
    assert state["team_name"] == "Halcones"
    assert len(client.app.state.controllers) == 1

    client.put("/team", json={"name": "Águilas"})
    deadline = time.monotonic() + 2.0
    while not store.calls_to("update", "teams") and time.monotonic() < deadline:
        time.sleep(0.02)
    assert store.calls_to("insert", "teams") == []
    assert [c[2] for c in store.calls_to("update", "teams")] == [team_id]


def test_full_game_flow(client):
    sign_in(client)

    client.put("/team", json={"name": "Halc"})
    client.put("/team", json={"name": "Halcones"})
    state = wait_for_team(client)
    assert state["team_name"] == "Halcones"

    client.post("/players", json={"name": "Ana"})
    state = client.post("/players", json={"name": "Leo"}).json()
    assert [p["name"] for p in state["players"]] == ["Ana", "Leo"]

    state = client.post("/games", json={"name": "vs Rivals"}).json()
    game_id = state["active_game_id"]
    assert state["games"][0]["id"] == game_id

    for shot_type, result, player in [("triple", "convertido", "Ana"), ("libre", "fallado", "Leo")]:
        assert client.post("/wizard/type", json={"type": shot_type}).json()["accepted"]
        assert client.post("/wizard/result", json={"result": result}).json()["accepted"]
        assert client.post("/wizard/player", json={"player_name": player}).json()["accepted"]
        confirmed = client.post("/wizard/confirm").json()
        assert confirmed["accepted"]
        assert confirmed["shot"]["player_name"] == player
        assert confirmed["wizard"]["step"] == "idle"

    team = client.get("/stats/team").json()
    assert (team["total_shots"], team["made_shots"], team["percentage"]) == (2, 1, 50)
    assert [(b["type"], b["made"], b["attempts"], b["percentage"]) for b in team["by_type"]] == [
        ("triple", 1, 1, 100),
        ("doble", 0, 0, 0),
        ("libre", 0, 1, 0),
    ]
    assert client.get(f"/stats/team?scope={game_id}").json() == team

    players = client.get("/stats/players").json()
    assert [(p["name"], p["attempts"], p["made"], p["percentage"]) for p in players] == [
        ("Ana", 1, 1, 100),
        ("Leo", 1, 0, 0),
    ]

    combined = client.get("/stats?scope=all").json()
    assert combined["team"] == team
    assert combined["players"] == players


def test_wizard_ignores_out_of_order_steps(client):
    sign_in(client)
    response = client.post("/wizard/player", json={"player_name": "Ana"}).json()
    assert response["accepted"] is False
    assert response["wizard"]["step"] == "idle"

    confirmed = client.post("/wizard/confirm").json()
    assert confirmed["accepted"] is False
    assert "shot" not in confirmed


def test_wizard_only_accepts_players_on_the_roster(client):
    sign_in(client)
    client.put("/team", json={"name": "Halcones"})
    wait_for_team(client)
    client.post("/players", json={"name": "Ana"})
    client.post("/games", json={"name": "vs Rivals"})
    client.post("/wizard/type", json={"type": "doble"})
    client.post("/wizard/result", json={"result": "convertido"})

    response = client.post("/wizard/player", json={"player_name": "Pepe"}).json()
    assert response["accepted"] is False
    assert response["wizard"]["step"] == "result_chosen"
    assert client.post("/wizard/player", json={"player_name": "Ana"}).json()["accepted"]


def test_renaming_and_removing_players(client):
    sign_in(client)
    client.put("/team", json={"name": "Halcones"})
    wait_for_team(client)
    ana = client.post("/players", json={"name": "Ana"}).json()["players"][0]

    state = client.patch(f"/players/{ana['id']}", json={"name": "Ana María"}).json()
    assert state["players"][0]["name"] == "Ana María"

    state = client.delete(f"/players/{ana['id']}").json()
    assert state["players"] == []


def test_users_do_not_share_state(client):
    sign_in(client, email="one@example.com")
    client.put("/team", json={"name": "Halcones"})
    wait_for_team(client)

    sign_in(client, email="two@example.com")
    state = client.get("/state").json()
    assert state["team_id"] is None
    assert state["team_name"] == ""
