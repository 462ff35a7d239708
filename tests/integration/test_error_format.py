"""Integration tests for the error responses produced by the classifier."""

import pytest
from botocore.exceptions import ClientError

from modules.core.dao import Dao

pytestmark = pytest.mark.integration

NOT_FOUND = "Element for the provided id does not exist in the system"


class TestErrorResponses:
    def test_malformed_json_is_invalid_input(self, api_client):
        response = api_client.post(
            "/api/v1/customers/", data="{", content_type="application/json"
        )
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid Input"}

    def test_unsupported_media_type_is_invalid_input(self, api_client):
        response = api_client.post(
            "/api/v1/addresses/", data="street=Main", content_type="text/plain"
        )
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid Input"}

    def test_json_array_body_is_invalid_input(self, api_client):
        response = api_client.post("/api/v1/addresses/", [1, 2], format="json")
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid Input"}

    def test_method_not_allowed(self, api_client):
        response = api_client.post("/api/v1/addresses/some-id/", {}, format="json")
        assert response.status_code == 405
        assert response.json() == {"detail": "Method is not allowed"}
        assert "GET" in response["Allow"]

    def test_not_found_message(self, api_client):
        response = api_client.delete("/api/v1/customers/ghost@example.com/")
        assert response.status_code == 404
        assert response.json() == {"detail": NOT_FOUND}

    def test_store_failure_is_generic_500(self, api_client, monkeypatch):
        def unavailable(self):
            raise ClientError(
                {"Error": {"Code": "InternalServerError", "Message": "arn:aws:secret-table"}},
                "Scan",
            )

        monkeypatch.setattr(Dao, "fetch_all", unavailable)

        response = api_client.get("/api/v1/customers/")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal Server Error!"}
        assert "arn:aws" not in response.content.decode()

    def test_unreadable_record_is_internal_system_failure(self, api_client):
        from django.conf import settings

        from modules.core.store.memory import InMemoryStoreClient

        InMemoryStoreClient(settings.ADDRESSES_TABLE).put({"id": "broken", "deleted": False, "apt": ["x"]})

        response = api_client.get("/api/v1/addresses/broken/")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal System Failure"}
