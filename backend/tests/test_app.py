"""App wiring: health check and route registration."""


def test_health_check(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"app_name": "Pitchside Tournament API", "status": "healthy"}


def test_routes_mounted_under_api(client):
    paths = client.app.openapi()["paths"]

    assert "post" in paths["/api/tournaments/{tournament_id}/promote-waitlist"]
    assert "get" in paths["/api/tournaments/{tournament_id}/promote-waitlist"]
    assert "post" in paths["/api/tournaments/{tournament_id}/register"]
    assert "get" in paths["/api/tournaments/{tournament_id}/user-registration"]
    assert "post" in paths["/api/tournaments/{tournament_id}/assign-player"]
    assert "put" in paths["/api/tournaments/{tournament_id}/slots/{slot_id}"]
    assert "post" in paths["/api/notifications/read-all"]
