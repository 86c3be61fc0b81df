def test_health(client):
    response = client.get("/api/v1/health/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health_db(client):
    response = client.get("/api/v1/health/db")
    assert response.status_code == 200
    assert response.json()["database"] == "reachable"


def test_unknown_json_body_type_is_400(client):
    response = client.post("/api/v1/auth/login", content="not json", headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
