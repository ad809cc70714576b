def test_status_endpoint(client, container):
    container.heartbeat_monitor.record(True, response_time_ms=12)

    res = client.get("/api/heartbeat-status/")

    assert res.status_code == 200
    body = res.get_json()
    assert body["instance"]["id"] == "LAB_TEST"
    assert body["instance"]["environment"] == "test"
    assert body["heartbeat"]["statistics"]["totalAttempts"] == 1
    assert len(body["recentHistory"]) == 1


def test_history_endpoint(client, container):
    for _ in range(3):
        container.heartbeat_monitor.record(False, error="timeout")

    body = client.get("/api/heartbeat-status/history?limit=2").get_json()

    assert body["totalEntries"] == 3
    assert body["requestedLimit"] == 2
    assert len(body["history"]) == 2
    assert body["history"][0]["error"] == "timeout"


def test_reset_endpoint(client, container):
    container.heartbeat_monitor.record(True)

    res = client.post("/api/heartbeat-status/reset")

    assert res.status_code == 200
    assert len(container.heartbeat_monitor) == 0


def test_manual_endpoint(client, container, monkeypatch):
    monitor = container.heartbeat_monitor
    monkeypatch.setattr(container.heartbeat_client, "send", lambda: monitor.record(True, response_time_ms=5))

    res = client.post("/api/heartbeat-status/manual")

    assert res.status_code == 200
    assert res.get_json()["attempt"]["success"] is True
    assert res.get_json()["attempt"]["responseTime"] == 5
