NEW_ADMIN = {"name": "Second Admin", "email": "second@example.com", "password": "second-pass"}


def test_list_admins(client, admin_headers, user_headers):
    assert client.get("/api/admin/users", headers=user_headers).status_code == 403
    r = client.get("/api/admin/users", headers=admin_headers)
    assert r.status_code == 200
    assert [u["email"] for u in r.json()] == ["admin@admin.com"]


def test_create_admin(client, admin_headers):
    r = client.post("/api/admin/users", headers=admin_headers, json=NEW_ADMIN)
    assert r.status_code == 201
    assert r.json()["user"]["role"] == "admin"

    r = client.post("/api/admin/users", headers=admin_headers, json=dict(NEW_ADMIN, email="SECOND@example.com"))
    assert r.status_code == 400
    assert r.json() == {"message": "An account with this email already exists"}

    login = client.post("/api/auth/login", json={"email": NEW_ADMIN["email"], "password": NEW_ADMIN["password"]})
    assert login.json()["user"]["role"] == "admin"


def test_create_admin_password_length(client, admin_headers):
    r = client.post("/api/admin/users", headers=admin_headers, json=dict(NEW_ADMIN, password="short"))
    assert r.status_code == 400
    assert r.json() == {"message": "Password must be at least 8 characters long"}


def test_delete_admin(client, admin_headers):
    admin_id = client.post("/api/admin/users", headers=admin_headers, json=NEW_ADMIN).json()["user"]["id"]
    assert client.delete(f"/api/admin/users/{admin_id}", headers=admin_headers).status_code == 200
    r = client.delete(f"/api/admin/users/{admin_id}", headers=admin_headers)
    assert r.status_code == 404
    assert r.json() == {"message": "Admin not found"}


def test_cannot_delete_self(client, admin_headers):
    me = client.get("/api/auth/profile", headers=admin_headers).json()
    r = client.delete(f"/api/admin/users/{me['id']}", headers=admin_headers)
    assert r.status_code == 400
    assert r.json() == {"message": "You cannot delete your own account"}


def test_update_profile(client, admin_headers, user_headers, broadcaster):
    r = client.put("/api/admin/profile", headers=admin_headers, json={"name": "Chair", "email": "member@example.com"})
    assert r.status_code == 400
    assert r.json() == {"message": "This email is already taken by another user"}

    r = client.put("/api/admin/profile", headers=admin_headers, json={"name": "Chair", "email": "Chair@Example.com"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "chair@example.com"

    event, data, rooms = broadcaster.events[-1]
    assert event == "admin-profile-updated"
    assert rooms == ("admin",)
    assert set(data) == {"id", "name", "email", "updatedAt"}
    assert data["name"] == "Chair"
