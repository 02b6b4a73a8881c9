import time


def _track(client, player_id="123", name="Alice"):
    return client.post("/api/stats/track", json={"playerId": player_id, "playerName": name})


def test_track_collects_immediately(client):
    response = _track(client)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Alice is now being tracked"
    assert body["stats"]["kdRatio"] == 1.5

    history = client.get("/api/stats/history/123").json()
    assert history["playerId"] == "123"
    assert len(history["history"]) == 1
    assert history["history"][0]["kd_ratio"] == 1.5


def test_track_without_provider_data(client):
    body = _track(client, "404", "Ghost").json()
    assert body["success"] is True
    assert body["stats"] is None


def test_track_requires_id_and_name(client):
    assert client.post("/api/stats/track", json={"playerId": "1"}).status_code == 422


def test_kd_trend_after_tracking(client):
    _track(client)

    trend = client.get("/api/stats/trends/kd/123?days=30").json()["trend"]
    assert len(trend) == 1
    assert trend[0]["avg_kd"] == 1.5


def test_win_rate_trend(client):
    _track(client)

    trend = client.get("/api/stats/trends/winrate/123").json()["trend"]
    assert trend[0]["max_win_rate"] == 60.0


def test_tracked_players(client):
    _track(client)

    players = client.get("/api/stats/tracked").json()["trackedPlayers"]
    assert [p["player_id"] for p in players] == ["123"]


def test_compare_needs_two_players(client):
    response = client.post("/api/stats/compare", json={"playerIds": ["123"]})
    assert response.status_code == 400
    assert response.json()["message"] == "Please provide at least 2 player IDs"


def test_compare(client):
    _track(client)

    response = client.post("/api/stats/compare", json={"playerIds": ["123", "999"]})
    assert response.status_code == 200
    assert [p["player_id"] for p in response.json()["players"]] == ["123"]


def test_search_and_recent_include_tracked_names(client):
    _track(client)

    search = client.get("/api/stats/search", params={"q": "ali"}).json()
    assert [p["name"] for p in search["players"]] == ["Alice"]

    recent = client.get("/api/stats/recent").json()
    assert recent["players"][0]["name"] == "Alice"


def test_manual_collection_runs_in_background(client, fake_extractor):
    _track(client)
    fake_extractor.stats_calls.clear()

    response = client.post("/api/stats/collect")
    assert response.status_code == 200
    job_id = response.json()["jobId"]

    job = None
    for _ in range(100):
        job = client.get(f"/api/stats/collect/{job_id}").json()["job"]
        if job["status"] in ("completed", "failed"):
            break
        time.sleep(0.05)

    assert job["status"] == "completed"
    assert job["playersProcessed"] == 1
    assert fake_extractor.stats_calls == ["123"]


def test_unknown_job_is_404(client):
    assert client.get("/api/stats/collect/nope").status_code == 404


def test_recent_jobs_are_listed(client):
    assert client.get("/api/stats/collect").json()["jobs"] == []

    first = client.post("/api/stats/collect").json()["jobId"]
    second = client.post("/api/stats/collect").json()["jobId"]

    jobs = client.get("/api/stats/collect").json()["jobs"]
    assert {job["jobId"] for job in jobs} == {first, second}
    assert all(job["trigger"] == "manual" for job in jobs)

    assert len(client.get("/api/stats/collect", params={"limit": 1}).json()["jobs"]) == 1
    assert client.get("/api/stats/collect", params={"limit": 0}).status_code == 422


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "connected"}


def test_correlation_id_is_echoed(client):
    response = client.get("/", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"
