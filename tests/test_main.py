# -------------------------------------------------------
# General Endpoint Tests
# -------------------------------------------------------

def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Civic Issue Reporting Service is running."}


def test_liveness_check(client):
    response = client.get("/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


def test_readiness_check(client):
    response = client.get("/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready"}


def test_db_check(client):
    response = client.get("/db-check")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "connected"
    for table in ("users", "issues", "comments", "upvotes", "images", "updates"):
        assert table in body["tables"]


def test_unknown_route_uses_error_body(client):
    response = client.get("/no-such-route")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_path_validation_errors_are_bad_requests(client):
    response = client.get("/issues/not-a-number")
    assert response.status_code == 400
    assert "error" in response.json()
