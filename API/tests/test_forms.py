FORM = {
    "name": "Ravi Kumar",
    "email": "ravi@example.com",
    "phone": "+1 555 0100",
    "message": "Interested in membership",
}


def test_submit_form_is_public(client):
    r = client.post("/api/forms/submit", json=FORM)
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Form submitted successfully"
    assert body["submission"]["category"] == "general"
    assert body["submission"]["address"] == ""
    assert body["submission"]["pdfFile"] is None


def test_submit_form_validation(client):
    r = client.post("/api/forms/submit", json=dict(FORM, phone=""))
    assert r.status_code == 400
    assert r.json() == {"message": "Phone is required"}

    r = client.post("/api/forms/submit", json=dict(FORM, email="nope"))
    assert r.status_code == 400


def test_submit_with_file(client, app):
    r = client.post(
        "/api/forms/submit-with-file",
        data=dict(FORM, category="membership", address="12 Main St"),
        files={"pdfFile": ("application.pdf", b"%PDF-1.4 form", "application/pdf")},
    )
    assert r.status_code == 201
    submission = r.json()["submission"]
    assert submission["category"] == "membership"
    assert submission["pdfFile"]["originalName"] == "application.pdf"
    assert app.state.chamber.storage.exists(submission["pdfFile"]["filename"])


def test_submit_with_file_attachment_optional(client):
    r = client.post("/api/forms/submit-with-file", data=FORM)
    assert r.status_code == 201
    assert r.json()["submission"]["pdfFile"] is None


def test_submissions_admin_only_newest_first(client, admin_headers, user_headers):
    first = client.post("/api/forms/submit", json=FORM).json()["submission"]["id"]
    second = client.post("/api/forms/submit", json=dict(FORM, name="Second")).json()["submission"]["id"]

    assert client.get("/api/forms/submissions").status_code == 401
    assert client.get("/api/forms/submissions", headers=user_headers).status_code == 403

    r = client.get("/api/forms/submissions", headers=admin_headers)
    assert [s["id"] for s in r.json()] == [second, first]


def test_delete_submission_removes_file(client, admin_headers, app):
    submission = client.post(
        "/api/forms/submit-with-file",
        data=FORM,
        files={"pdfFile": ("a.pdf", b"%PDF-1.4", "application/pdf")},
    ).json()["submission"]

    r = client.delete(f"/api/forms/submissions/{submission['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert not app.state.chamber.storage.exists(submission["pdfFile"]["filename"])
    assert client.delete(f"/api/forms/submissions/{submission['id']}", headers=admin_headers).status_code == 404
