from io import BytesIO

import numpy as np
import pytest
from PIL import Image as PILImage

from glitchify import api_server

from helpers import png_bytes, solid


@pytest.fixture
def client():
    api_server.app.config["TESTING"] = True
    api_server.sessions.clear()
    with api_server.app.test_client() as client:
        yield client
    api_server.sessions.clear()


def upload(client, buffer, session_id=None):
    data = {"image": (BytesIO(png_bytes(buffer)), "picture.png")}
    if session_id:
        data["session_id"] = session_id
    return client.post("/api/load", data=data, content_type="multipart/form-data")


def post(client, route, **body):
    return client.post(route, json=body)


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "healthy"


def test_effect_catalog(client):
    body = client.get("/api/effects").get_json()
    assert [effect["id"] for effect in body["effects"]] == [
        "tonal", "invert", "noise", "pixelate", "glitch", "cartoon",
    ]


def test_load_apply_undo_redo_reset(client):
    loaded = upload(client, solid(4, 3)).get_json()
    assert loaded["success"] and loaded["state"] == "loaded"
    assert (loaded["width"], loaded["height"]) == (4, 3)
    session_id = loaded["session_id"]

    applied = post(client, "/api/apply", session_id=session_id, effect="invert").get_json()
    assert applied["message"] == "Colors inverted!"
    assert applied["can_undo"] and applied["state"] == "edited"

    undone = post(client, "/api/undo", session_id=session_id).get_json()
    assert undone["success"] and undone["can_redo"]

    redone = post(client, "/api/redo", session_id=session_id).get_json()
    assert redone["success"] and not redone["can_redo"]

    nothing = post(client, "/api/redo", session_id=session_id)
    assert nothing.status_code == 200
    assert nothing.get_json()["success"] is False

    reset = post(client, "/api/reset", session_id=session_id).get_json()
    assert reset["state"] == "loaded" and reset["can_undo"]


def test_image_and_export(client):
    session_id = upload(client, solid(2, 2)).get_json()["session_id"]
    post(client, "/api/apply", session_id=session_id, effect="tonal", params={"brightness": 0.5})

    shown = client.get(f"/api/image/{session_id}")
    assert shown.mimetype == "image/png"
    pixels = np.asarray(PILImage.open(BytesIO(shown.data)).convert("RGBA"))
    assert (pixels[..., :3] == 128).all()

    download = client.get(f"/api/export/{session_id}")
    assert "glitchify-edited.png" in download.headers["Content-Disposition"]
    assert download.data == shown.data


def test_bad_requests(client):
    assert post(client, "/api/apply", session_id="nope", effect="invert").status_code == 400
    assert client.get("/api/image/nope").status_code == 400
    assert client.get("/api/export/nope").status_code == 400

    session_id = upload(client, solid(2, 2)).get_json()["session_id"]
    bad = post(client, "/api/apply", session_id=session_id, effect="swirl")
    assert bad.status_code == 400
    assert bad.get_json()["success"] is False

    wrong = post(client, "/api/apply", session_id=session_id, effect="tonal", params={"brightness": "dim"})
    assert wrong.status_code == 400

    garbage = client.post(
        "/api/load",
        data={"image": (BytesIO(b"not an image"), "x.png")},
        content_type="multipart/form-data",
    )
    assert garbage.status_code == 400

    missing = client.post("/api/load", data={}, content_type="multipart/form-data")
    assert missing.status_code == 400


def test_reload_into_existing_session(client):
    session_id = upload(client, solid(2, 2)).get_json()["session_id"]
    post(client, "/api/apply", session_id=session_id, effect="invert")

    reloaded = upload(client, solid(5, 5), session_id=session_id).get_json()
    assert reloaded["session_id"] == session_id
    assert (reloaded["width"], reloaded["height"]) == (5, 5)
    assert not reloaded["can_undo"]


def test_clear_session(client):
    session_id = upload(client, solid(2, 2)).get_json()["session_id"]
    assert post(client, "/api/clear-session", session_id=session_id).get_json()["success"]
    assert session_id not in api_server.sessions
    assert not post(client, "/api/clear-session", session_id=session_id).get_json()["success"]


@pytest.mark.parametrize("params", ["abc", [1], 3, {"1": 0, "x": 0}])
def test_apply_with_malformed_params_is_bad_request(client, params):
    session_id = upload(client, solid(2, 2)).get_json()["session_id"]

    response = post(client, "/api/apply", session_id=session_id, effect="tonal", params=params)
    assert response.status_code == 400
    assert response.get_json()["success"] is False
    assert not api_server.sessions[session_id].can_undo()


@pytest.mark.parametrize("route", ["/api/apply", "/api/undo", "/api/redo", "/api/reset", "/api/clear-session"])
@pytest.mark.parametrize("body", [[1], "text", 7, {"session_id": ["not", "a", "string"]}])
def test_non_object_json_bodies(client, route, body):
    upload(client, solid(2, 2))

    response = client.post(route, json=body)
    if route == "/api/clear-session":
        assert response.status_code == 200
        assert response.get_json()["success"] is False
    else:
        assert response.status_code == 400
