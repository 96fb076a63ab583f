def test_health_reports_reachable_store(client):
    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["uptime"] >= 0
    assert body["database"] == {"configured": True, "reachable": True}


def test_health_reports_unreachable_store(client, fake_db):
    fake_db.fail = True
    assert client.get("/health").json()["database"] == {"configured": True, "reachable": False}


def test_health_without_supabase(file_client):
    assert file_client.get("/health").json()["database"] == {"configured": False, "reachable": False}


def test_responses_carry_timing_header(client):
    res = client.get("/api/ping")
    assert res.json() == {"message": "ping"}
    assert res.headers["X-Response-Time"].endswith("ms")
