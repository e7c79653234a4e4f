import pytest

ADMIN_ROUTES = [
    ("GET", "/api/notices/admin"),
    ("POST", "/api/notices"),
    ("PUT", "/api/notices/1"),
    ("DELETE", "/api/notices/1"),
    ("GET", "/api/news/admin"),
    ("POST", "/api/news"),
    ("PUT", "/api/news/1"),
    ("DELETE", "/api/news/1"),
    ("GET", "/api/gallery/admin"),
    ("POST", "/api/gallery/upload"),
    ("PUT", "/api/gallery/1"),
    ("DELETE", "/api/gallery/1"),
    ("GET", "/api/forms/submissions"),
    ("DELETE", "/api/forms/submissions/1"),
    ("GET", "/api/admin/users"),
    ("POST", "/api/admin/users"),
    ("DELETE", "/api/admin/users/1"),
    ("PUT", "/api/admin/profile"),
]


@pytest.mark.parametrize("method,path", ADMIN_ROUTES)
def test_user_token_is_forbidden(client, user_headers, method, path):
    r = client.request(method, path, headers=user_headers, json={})
    assert r.status_code == 403
    assert r.json() == {"message": "Admin access required"}


@pytest.mark.parametrize("method,path", ADMIN_ROUTES)
def test_missing_token_is_unauthorized(client, method, path):
    r = client.request(method, path, json={})
    assert r.status_code == 401
