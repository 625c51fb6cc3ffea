"""
Tests for the brief CRUD endpoints.
"""
import time
from datetime import datetime

from briefboarder.models.brief import Brief

MISSING_ID = "00000000-0000-4000-8000-000000000000"


def _create(client, name="Summer Launch", description=None):
    body = {"name": name}
    if description is not None:
        body["description"] = description
    resp = client.post("/api/briefs", json=body)
    assert resp.status_code == 200, resp.text
    return resp.json()


class TestCreateBrief:
    def test_create_returns_camel_case_row(self, client):
        brief = _create(client, name="  Summer Launch  ", description="Sparkling water")

        assert brief["name"] == "Summer Launch"
        assert brief["description"] == "Sparkling water"
        assert brief["canvasState"] == {"images": []}
        assert brief["settings"] is None
        assert "createdAt" in brief and "updatedAt" in brief

    def test_missing_name_is_400(self, client):
        resp = client.post("/api/briefs", json={"description": "no name"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Name is required"

    def test_blank_name_is_400(self, client):
        resp = client.post("/api/briefs", json={"name": "   "})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Name is required"

    def test_blank_description_is_stored_as_null(self, client):
        brief = _create(client, description="   ")
        assert brief["description"] is None

    def test_long_name_is_accepted(self, client):
        brief = _create(client, name="x" * 500)
        assert brief["name"] == "x" * 500


class TestListBriefs:
    def test_newest_first(self, client):
        first = _create(client, name="first")
        time.sleep(0.01)
        second = _create(client, name="second")

        resp = client.get("/api/briefs")
        assert resp.status_code == 200
        ids = [b["id"] for b in resp.json()]
        assert ids == [second["id"], first["id"]]

    def test_empty(self, client):
        assert client.get("/api/briefs").json() == []


class TestGetBrief:
    def test_found(self, client):
        created = _create(client)
        resp = client.get(f"/api/briefs/{created['id']}")
        assert resp.status_code == 200
        assert resp.json()["id"] == created["id"]

    def test_uppercase_uuid_is_accepted(self, client):
        created = _create(client)
        resp = client.get(f"/api/briefs/{created['id'].upper()}")
        assert resp.status_code == 200

    def test_malformed_id_is_404(self, client):
        resp = client.get("/api/briefs/not-a-uuid")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Brief not found"

    def test_unhyphenated_uuid_is_404(self, client):
        resp = client.get("/api/briefs/" + MISSING_ID.replace("-", ""))
        assert resp.status_code == 404

    def test_unknown_id_is_404(self, client):
        resp = client.get(f"/api/briefs/{MISSING_ID}")
        assert resp.status_code == 404


class TestUpdateBrief:
    def test_only_present_keys_are_replaced(self, client):
        created = _create(client, description="keep me")
        canvas = {
            "images": [
                {
                    "id": "img-1",
                    "s3Url": "https://cdn.example.com/a.png",
                    "x": 10,
                    "y": 20,
                    "width": 300,
                    "height": 200,
                    "sourceType": "generated",
                }
            ]
        }

        resp = client.patch(f"/api/briefs/{created['id']}", json={"canvasState": canvas})
        assert resp.status_code == 200
        updated = resp.json()

        assert updated["name"] == created["name"]
        assert updated["description"] == "keep me"
        image = updated["canvasState"]["images"][0]
        assert image["s3Url"] == "https://cdn.example.com/a.png"
        assert image["x"] == 10
        # unknown placement keys survive the round trip
        assert image["sourceType"] == "generated"

    def test_canvas_state_is_stored_as_sent(self, client):
        created = _create(client)
        canvas = {
            "images": [
                {"id": "a", "s3Url": "https://cdn.example.com/a.png", "s3Key": None, "x": 5},
                {"s3Url": "https://cdn.example.com/b.png"},
            ],
            "zoom": 1,
        }

        resp = client.patch(f"/api/briefs/{created['id']}", json={"canvasState": canvas})
        assert resp.status_code == 200
        assert resp.json()["canvasState"] == canvas
        assert client.get(f"/api/briefs/{created['id']}").json()["canvasState"] == canvas

    def test_non_list_images_is_400(self, client):
        created = _create(client)
        resp = client.patch(
            f"/api/briefs/{created['id']}", json={"canvasState": {"images": "nope"}}
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "canvasState.images must be a list of objects"

    def test_explicit_null_clears(self, client):
        created = _create(client, description="going away")
        resp = client.patch(f"/api/briefs/{created['id']}", json={"description": None})
        assert resp.status_code == 200
        assert resp.json()["description"] is None

    def test_settings_replaced_wholesale(self, client):
        created = _create(client)
        client.patch(
            f"/api/briefs/{created['id']}",
            json={"settings": {"imageGenerationModel": "flux-schnell", "imageEditingModel": "nano-banana"}},
        )
        resp = client.patch(
            f"/api/briefs/{created['id']}",
            json={"settings": {"imageEditingModel": "flux-kontext"}},
        )
        assert resp.json()["settings"] == {"imageEditingModel": "flux-kontext"}

    def test_empty_body_still_bumps_updated_at(self, client, db_session):
        created = _create(client)
        time.sleep(0.01)
        resp = client.patch(f"/api/briefs/{created['id']}", json={})
        assert resp.status_code == 200
        assert datetime.fromisoformat(resp.json()["updatedAt"]) > datetime.fromisoformat(
            created["updatedAt"]
        )

    def test_blank_name_is_400(self, client):
        created = _create(client)
        resp = client.patch(f"/api/briefs/{created['id']}", json={"name": " "})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Name cannot be empty"

    def test_unknown_id_is_404(self, client):
        resp = client.patch(f"/api/briefs/{MISSING_ID}", json={"name": "x"})
        assert resp.status_code == 404


class TestDeleteBrief:
    def test_delete(self, client, db_session):
        created = _create(client)
        resp = client.delete(f"/api/briefs/{created['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert db_session.query(Brief).count() == 0

        assert client.get(f"/api/briefs/{created['id']}").status_code == 404

    def test_malformed_id_is_404(self, client):
        assert client.delete("/api/briefs/123").status_code == 404
