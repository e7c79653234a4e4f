from PIL import Image

from .conftest import make_image

FIELDS = {"title": "Board meeting", "description": "Quarterly board meeting", "altText": "Members at the table"}


def _upload(client, headers, content, content_type="image/png", name="photo.png", **fields):
    data = dict(FIELDS, **fields)
    return client.post(
        "/api/gallery/upload",
        headers=headers,
        data=data,
        files={"image": (name, content, content_type)},
    )


def test_upload_image(client, admin_headers, app, png_bytes, broadcaster):
    r = _upload(client, admin_headers, png_bytes, category="meeting", order="2")
    assert r.status_code == 201
    image = r.json()["image"]
    assert image["imageUrl"].startswith("/api/files/image-")
    assert image["uploadedBy"] == "Admin"
    assert image["order"] == 2
    assert broadcaster.names() == ["gallery-image-created"]

    filename = image["imageUrl"].rsplit("/", 1)[-1]
    assert app.state.chamber.storage.exists(filename)
    first = client.get(image["imageUrl"])
    assert first.status_code == 200
    assert first.headers["Cache-Control"] == "public, max-age=86400"
    assert client.get(image["imageUrl"]).content == first.content


def test_large_upload_is_downscaled(client, admin_headers, app, settings):
    big = make_image("JPEG", size=(3000, 1500))
    image = _upload(client, admin_headers, big, "image/jpeg", "big.jpg").json()["image"]
    path = app.state.chamber.storage.path_for(image["imageUrl"].rsplit("/", 1)[-1])
    with Image.open(path) as img:
        assert img.width <= settings.IMAGE_MAX_WIDTH
        assert img.height <= settings.IMAGE_MAX_HEIGHT
        assert img.size == (1920, 960)


def test_upload_requires_image(client, admin_headers):
    r = client.post("/api/gallery/upload", headers=admin_headers, data=FIELDS)
    assert r.status_code == 400
    assert r.json() == {"message": "No image file provided"}

    r = _upload(client, admin_headers, b"%PDF-1.4", "application/pdf", "doc.pdf")
    assert r.status_code == 400
    assert r.json() == {"message": "Only image files allowed"}


def test_upload_requires_fields(client, admin_headers, png_bytes, app):
    r = client.post(
        "/api/gallery/upload",
        headers=admin_headers,
        data={"title": "Only title"},
        files={"image": ("p.png", png_bytes, "image/png")},
    )
    assert r.status_code == 400
    assert r.json() == {"message": "Description is required"}
    assert list(app.state.chamber.storage.directory.iterdir()) == []


def test_order_then_newest(client, admin_headers, png_bytes):
    a = _upload(client, admin_headers, png_bytes, order="1").json()["image"]["id"]
    b = _upload(client, admin_headers, png_bytes, order="0").json()["image"]["id"]
    c = _upload(client, admin_headers, png_bytes, order="0").json()["image"]["id"]
    r = client.get("/api/gallery")
    assert r.headers["Cache-Control"] == "public, max-age=600"
    assert [i["id"] for i in r.json()] == [c, b, a]


def test_update_and_delete(client, admin_headers, png_bytes, app, broadcaster):
    image = _upload(client, admin_headers, png_bytes).json()["image"]
    filename = image["imageUrl"].rsplit("/", 1)[-1]

    r = client.put(f"/api/gallery/{image['id']}", headers=admin_headers, json={"isActive": False})
    assert r.status_code == 200
    assert client.get("/api/gallery").json() == []
    assert len(client.get("/api/gallery/admin", headers=admin_headers).json()) == 1

    r = client.delete(f"/api/gallery/{image['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert not app.state.chamber.storage.exists(filename)
    assert client.delete(f"/api/gallery/{image['id']}", headers=admin_headers).status_code == 404
    assert broadcaster.names() == ["gallery-image-created", "gallery-image-updated", "gallery-image-deleted"]
