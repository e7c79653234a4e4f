def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "API" in r.json()["message"]


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "OK"
    assert r.json()["timestamp"]


def test_services_status_without_providers(client):
    r = client.get("/api/services/status")
    assert r.json()["emailServices"] == {"brevo": False, "sendGrid": False, "smtp": False}


def test_unknown_file_is_404(client):
    assert client.get("/api/files/missing.pdf").status_code == 404
    assert client.get("/api/files/..").status_code == 404


def test_unknown_route_uses_message_shape(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert "message" in r.json()


def test_large_responses_are_gzipped(client, admin_headers):
    for i in range(5):
        client.post(
            "/api/notices",
            headers=admin_headers,
            json={"title": f"Notice {i}", "content": "x" * 400},
        )
    r = client.get("/api/notices", headers={"Accept-Encoding": "gzip"})
    assert r.headers["Content-Encoding"] == "gzip"
