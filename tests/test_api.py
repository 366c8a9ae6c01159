"""End-to-end tests of the HTTP surface with SQLite and the local blob store."""

import json

from fastapi.testclient import TestClient

from pixperfect.core.config import get_settings
from pixperfect.interfaces.http.deps import get_blob_store

from .conftest import RED, make_png, open_png, register


def _upload(client, headers, data=b"x" * 500, name="img.png", **form):
    return client.post("/upload", headers=headers, files={"image": (name, data, "image/png")}, data=form)


def _stored_files(upload_dir):
    return sorted(p.name for p in upload_dir.iterdir()) if upload_dir.exists() else []


def test_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "running" in resp.text


class TestAuth:
    def test_signup_and_login(self, client):
        headers = register(client, "alice")
        assert headers["Authorization"].startswith("Bearer ")

    def test_duplicate_username(self, client):
        register(client, "alice")
        resp = client.post("/signup", json={"username": "alice", "password": "another1"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "invalid_parameter", "message": "Username already exists"}

    def test_short_password(self, client):
        resp = client.post("/signup", json={"username": "bob", "password": "123"})
        assert resp.status_code == 400

    def test_wrong_password(self, client):
        register(client, "alice")
        resp = client.post("/login", json={"username": "alice", "password": "wrong-password"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid credentials"

    def test_missing_token_is_401(self, client):
        resp = client.get("/images")
        assert resp.status_code == 401
        assert resp.json()["error"] == "unauthenticated"

    def test_invalid_token_is_403(self, client):
        resp = client.get("/images", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 403
        assert resp.json()["error"] == "forbidden"


class TestLifecycle:
    def test_upload_list_fetch_delete(self, client, upload_dir):
        headers = register(client, "alice")
        overlay = {"x": 10, "y": 20, "scale": 1.2, "opacity": 0.8}
        text = {"content": "hi", "font": "Arial", "color": "#000000"}

        resp = _upload(client, headers, overlay_props=json.dumps(overlay), text_overlay=json.dumps(text))
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["message"] == "Image uploaded successfully"
        image_id = body["id"]

        blob = client.get(body["url"])
        assert blob.status_code == 200
        assert blob.content == b"x" * 500

        listing = client.get("/images", headers=headers).json()
        assert [item["id"] for item in listing] == [image_id]

        item = client.get(f"/image/{image_id}", headers=headers).json()
        assert item["overlay_props"] == overlay
        assert item["text_overlay"] == text
        assert item["storage_key"] == body["storage_key"]

        resp = client.delete(f"/image/{image_id}", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Image deleted successfully"}

        assert client.get(f"/image/{image_id}", headers=headers).status_code == 404
        assert client.delete(f"/image/{image_id}", headers=headers).status_code == 404
        assert _stored_files(upload_dir) == []

    def test_other_owner_cannot_see_or_touch(self, client):
        alice = register(client, "alice")
        bob = register(client, "bob")
        image_id = _upload(client, alice).json()["id"]

        missing = client.get("/image/99999", headers=bob)
        foreign = client.get(f"/image/{image_id}", headers=bob)
        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()

        assert client.get("/images", headers=bob).json() == []
        resp = client.put(
            "/image",
            headers=bob,
            data={"id": str(image_id)},
            files={"image": ("evil.png", b"evil", "image/png")},
        )
        assert resp.status_code == 404
        assert client.delete(f"/image/{image_id}", headers=bob).status_code == 404
        assert client.get(f"/image/{image_id}", headers=alice).status_code == 200

    def test_replace_swaps_blob_and_metadata(self, client, upload_dir):
        headers = register(client, "alice")
        created = _upload(client, headers, data=b"first", overlay_props=json.dumps({"x": 1})).json()

        resp = client.put(
            "/image",
            headers=headers,
            data={"id": str(created["id"]), "overlay_props": json.dumps({"x": 2})},
            files={"image": ("second.png", b"second", "image/png")},
        )
        assert resp.status_code == 200, resp.text
        assert resp.json() == {"message": "Image updated successfully"}

        item = client.get(f"/image/{created['id']}", headers=headers).json()
        assert item["storage_key"] != created["storage_key"]
        assert item["overlay_props"] == {"x": 2}
        assert client.get(item["url"]).content == b"second"
        assert _stored_files(upload_dir) == [item["storage_key"]]

    def test_replace_unknown_id(self, client):
        headers = register(client, "alice")
        resp = client.put(
            "/image", headers=headers, data={"id": "424242"}, files={"image": ("a.png", b"a", "image/png")}
        )
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    def test_upload_without_file(self, client, upload_dir):
        headers = register(client, "alice")
        resp = client.post("/upload", headers=headers, data={"overlay_props": "{}"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_parameter"
        assert _stored_files(upload_dir) == []

    def test_upload_with_malformed_overlay(self, client, upload_dir):
        headers = register(client, "alice")
        resp = _upload(client, headers, overlay_props="{not json")
        assert resp.status_code == 400
        assert _stored_files(upload_dir) == []


class TestTransforms:
    def test_rotate(self, client):
        headers = register(client, "alice")
        resp = client.post(
            "/rotate",
            headers=headers,
            data={"degrees": "90"},
            files={"image": ("img.png", make_png(4, 2), "image/png")},
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["message"] == "Image rotated successfully"

        rotated = open_png(client.get(body["url"]).content)
        assert rotated.size == (2, 4)
        assert rotated.getpixel((1, 0)) == RED

        item = client.get(f"/image/{body['id']}", headers=headers).json()
        assert item["overlay_props"] == {"x": 50, "y": 50, "scale": 1, "opacity": 1.0, "dragging": False}
        assert item["text_overlay"]["content"] == ""
        assert item["text_overlay"]["font"] == "Arial"

    def test_flip(self, client):
        headers = register(client, "alice")
        resp = client.post(
            "/flip",
            headers=headers,
            data={"direction": "horizontal"},
            files={"image": ("img.png", make_png(4, 2), "image/png")},
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["message"] == "Image flipped successfully"
        flipped = open_png(client.get(resp.json()["url"]).content)
        assert flipped.getpixel((0, 1)) == RED

    def test_rotate_with_bad_degrees_writes_nothing(self, client, upload_dir):
        headers = register(client, "alice")
        resp = client.post(
            "/rotate",
            headers=headers,
            data={"degrees": "abc"},
            files={"image": ("img.png", make_png(), "image/png")},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_parameter"
        assert _stored_files(upload_dir) == []
        assert client.get("/images", headers=headers).json() == []

    def test_flip_with_bad_direction_writes_nothing(self, client, upload_dir):
        headers = register(client, "alice")
        resp = client.post(
            "/flip",
            headers=headers,
            data={"direction": "diagonal"},
            files={"image": ("img.png", make_png(), "image/png")},
        )
        assert resp.status_code == 400
        assert _stored_files(upload_dir) == []

    def test_rotate_corrupt_image(self, client, upload_dir):
        headers = register(client, "alice")
        resp = client.post(
            "/rotate",
            headers=headers,
            data={"degrees": "90"},
            files={"image": ("img.png", b"not an image", "image/png")},
        )
        assert resp.status_code == 500
        assert resp.json()["error"] == "unprocessable_asset"
        assert _stored_files(upload_dir) == []


class TestRequestBoundaries:
    OUT_OF_RANGE_ID = "99999999999999999999"

    def test_out_of_range_id_is_not_found(self, client):
        headers = register(client, "alice")
        for resp in (
            client.get(f"/image/{self.OUT_OF_RANGE_ID}", headers=headers),
            client.delete(f"/image/{self.OUT_OF_RANGE_ID}", headers=headers),
            client.put(
                "/image",
                headers=headers,
                data={"id": self.OUT_OF_RANGE_ID, "overlay_props": "{}"},
                files={"image": ("a.png", b"a", "image/png")},
            ),
        ):
            assert resp.status_code == 404
            assert resp.json() == {"error": "not_found", "message": "Image not found"}

    def test_zero_and_negative_ids_are_not_found(self, client):
        headers = register(client, "alice")
        for raw in ("0", "-1"):
            resp = client.get(f"/image/{raw}", headers=headers)
            assert resp.status_code == 404
            assert resp.json()["error"] == "not_found"

    def test_legacy_overlay_field_names(self, client):
        headers = register(client, "alice")
        created = _upload(
            client,
            headers,
            overlayProps=json.dumps({"x": 5}),
            textOverlay=json.dumps({"content": "old client"}),
        ).json()

        item = client.get(f"/image/{created['id']}", headers=headers).json()
        assert item["overlay_props"] == {"x": 5}
        assert item["text_overlay"] == {"content": "old client"}

        resp = client.put(
            "/image", headers=headers, data={"id": str(created["id"]), "overlayProps": json.dumps({"x": 6})}
        )
        assert resp.status_code == 200, resp.text
        item = client.get(f"/image/{created['id']}", headers=headers).json()
        assert item["overlay_props"] == {"x": 6}
        assert item["text_overlay"] == {"content": "old client"}

    def test_oversized_upload_is_rejected(self, app_env, monkeypatch, upload_dir):
        from pixperfect.main import create_app

        monkeypatch.setenv("STORAGE__MAX_UPLOAD_BYTES", "100")
        get_settings.cache_clear()
        with TestClient(create_app()) as small_client:
            headers = register(small_client, "alice")
            resp = _upload(small_client, headers, data=b"x" * 101)
            assert resp.status_code == 400
            assert resp.json() == {"error": "invalid_parameter", "message": "Uploaded file is too large"}
            assert _stored_files(upload_dir) == []

            assert _upload(small_client, headers, data=b"x" * 100).status_code == 200


class _ExplodingBlobStore:
    async def put(self, data, suggested_name):
        raise RuntimeError("driver bug")

    def resolve(self, key):
        return f"/uploads/{key}"

    async def delete(self, key):
        raise RuntimeError("driver bug")


def test_unexpected_error_returns_structured_payload(app_env):
    from pixperfect.main import create_app

    app = create_app()
    app.dependency_overrides[get_blob_store] = _ExplodingBlobStore
    with TestClient(app, raise_server_exceptions=False) as test_client:
        headers = register(test_client, "alice")
        resp = _upload(test_client, headers)
    assert resp.status_code == 500
    assert resp.json() == {"error": "internal_error", "message": "Internal server error"}
