"""Integration tests for the Address API."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

URL = "/api/v1/addresses/"
ADDRESS_ID = "e7a02e34-371f-41f7-81f7-ca3f4be9c546"

PAYLOAD = {
    "address": {
        "city": "Las Vegas",
        "state": "NV",
        "apt": "190",
        "street": "Second Street",
        "number": "890",
        "zip_code": "43090",
    }
}


def _create(api_client, **overrides):
    body = {"address": {**PAYLOAD["address"], **overrides}}
    return api_client.post(URL, body, format="json")


class TestCreateAddress:
    def test_create_returns_201_with_generated_id(self, api_client):
        response = _create(api_client)
        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["number"] == "890"
        assert data["city"] == "Las Vegas"

    def test_flat_body_is_accepted(self, api_client):
        response = api_client.post(URL, PAYLOAD["address"], format="json")
        assert response.status_code == 201

    def test_duplicate_id_returns_409(self, api_client):
        assert _create(api_client, id=ADDRESS_ID).status_code == 201
        response = _create(api_client, id=ADDRESS_ID)
        assert response.status_code == 409
        assert response.json() == {"detail": "This id already exists"}

    def test_unspecific_address_returns_400(self, api_client):
        response = _create(api_client, street="")
        assert response.status_code == 400
        assert response.json() == {"detail": "Address is not specific enough"}

    def test_invalid_zip_code_returns_400(self, api_client):
        response = _create(api_client, zip_code="ABCDE")
        assert response.status_code == 400
        assert response.json() == {"detail": "Address provided is Invalid"}


class TestReadAddress:
    def test_retrieve(self, api_client):
        _create(api_client, id=ADDRESS_ID)
        response = api_client.get(f"{URL}{ADDRESS_ID}/")
        assert response.status_code == 200
        assert response.json()["street"] == "Second Street"

    def test_retrieve_missing_returns_404(self, api_client):
        response = api_client.get(f"{URL}missing/")
        assert response.status_code == 404
        assert response.json() == {
            "detail": "Element for the provided id does not exist in the system"
        }

    def test_list_returns_live_addresses(self, api_client):
        _create(api_client, id="a")
        _create(api_client, id="b")
        api_client.delete(f"{URL}b/")

        response = api_client.get(URL)

        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == ["a"]


class TestUpdateAddress:
    def test_patch_updates_building_number(self, api_client):
        _create(api_client, id=ADDRESS_ID)

        response = api_client.patch(
            f"{URL}{ADDRESS_ID}/", {"id": ADDRESS_ID, "address": {"number": "112"}}, format="json"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["number"] == "112"
        assert data["street"] == "Second Street"

    def test_put_is_a_merge_too(self, api_client):
        _create(api_client, id=ADDRESS_ID)
        response = api_client.put(f"{URL}{ADDRESS_ID}/", {"apt": "7"}, format="json")
        assert response.status_code == 200
        assert response.json()["apt"] == "7"
        assert response.json()["zip_code"] == "43090"

    def test_update_missing_returns_404(self, api_client):
        response = api_client.patch(f"{URL}missing/", {"number": "1"}, format="json")
        assert response.status_code == 404


class TestDeleteAddress:
    def test_delete_then_retrieve_returns_404(self, api_client):
        _create(api_client, id=ADDRESS_ID)

        response = api_client.delete(f"{URL}{ADDRESS_ID}/")
        assert response.status_code == 200
        assert response.json()["id"] == ADDRESS_ID

        assert api_client.get(f"{URL}{ADDRESS_ID}/").status_code == 404

    def test_delete_missing_returns_404(self, api_client):
        assert api_client.delete(f"{URL}missing/").status_code == 404
