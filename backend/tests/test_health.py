def test_health_endpoints(client):
    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/health/ready")
    assert ready.status_code == 200
    payload = ready.json()
    assert payload["status"] == "ok"
    assert payload["database"]["ok"] is True
    assert payload["database"]["missing_tables"] == []


def test_timing_header_is_set(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert "X-Process-Time-Ms" in response.headers
