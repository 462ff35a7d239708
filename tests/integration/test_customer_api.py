"""Integration tests for the Customer API."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

URL = "/api/v1/customers/"
EMAIL = "josruice@gmail.com"

PAYLOAD = {
    "last_name": "Ruiz",
    "first_name": "Pedro",
    "email": EMAIL,
    "phone_number": "9291234567",
    "address": {
        "city": "Champaign",
        "state": "IL",
        "apt": "52",
        "street": "Main St",
        "number": "53",
        "zip_code": "68080",
    },
}


@pytest.fixture()
def created(api_client):
    response = api_client.post(URL, PAYLOAD, format="json")
    assert response.status_code == 201
    return response.json()


class TestCreateCustomer:
    def test_create_returns_customer_with_address(self, created):
        assert created["email"] == EMAIL
        assert created["address"]["id"]
        assert created["address"]["number"] == "53"

    def test_existing_customer_returns_409(self, api_client, created):
        response = api_client.post(URL, PAYLOAD, format="json")
        assert response.status_code == 409
        assert response.json() == {"detail": "This id already exists"}

    def test_invalid_email_returns_400(self, api_client):
        response = api_client.post(URL, {**PAYLOAD, "email": "nope"}, format="json")
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid Input"}

    def test_address_is_also_readable_on_its_own(self, api_client, created):
        address_id = created["address"]["id"]
        response = api_client.get(f"/api/v1/addresses/{address_id}/")
        assert response.status_code == 200
        assert response.json()["street"] == "Main St"


class TestReadCustomer:
    def test_lookup_ignores_email_domain_case(self, api_client, created):
        response = api_client.get(f"{URL}josruice@Gmail.COM/")
        assert response.status_code == 200
        assert response.json()["email"] == EMAIL

    def test_retrieve_by_email(self, api_client, created):
        response = api_client.get(f"{URL}{EMAIL}/")
        assert response.status_code == 200
        assert response.json() == created

    def test_retrieve_missing_returns_404(self, api_client):
        response = api_client.get(f"{URL}nobody@example.com/")
        assert response.status_code == 404

    def test_list(self, api_client, created):
        response = api_client.get(URL)
        assert response.status_code == 200
        assert response.json() == [created]


class TestUpdateCustomer:
    def test_only_customer_fields_updated(self, api_client, created):
        body = {
            "last_name": "",
            "first_name": "Jose",
            "email": EMAIL,
            "phone_number": "",
            "address": {
                "city": "",
                "state": "",
                "apt": "",
                "street": "",
                "number": "",
                "zip_code": "",
            },
        }

        response = api_client.put(f"{URL}{EMAIL}/", body, format="json")

        assert response.status_code == 200
        data = response.json()
        assert data["first_name"] == "Jose"
        assert data["last_name"] == "Ruiz"
        assert data["phone_number"] == "9291234567"
        assert data["address"] == created["address"]

    def test_nested_address_update(self, api_client, created):
        response = api_client.patch(
            f"{URL}{EMAIL}/", {"address": {"number": "112"}}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["address"]["number"] == "112"
        assert response.json()["address"]["street"] == "Main St"

    def test_email_with_different_domain_case_is_not_a_change(self, api_client, created):
        response = api_client.patch(
            f"{URL}{EMAIL}/", {"email": "josruice@GMAIL.com", "first_name": "Jose"}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["first_name"] == "Jose"

    def test_changing_email_is_rejected(self, api_client, created):
        response = api_client.patch(
            f"{URL}{EMAIL}/", {"email": "new@example.com"}, format="json"
        )
        assert response.status_code == 400

    def test_update_missing_returns_404(self, api_client):
        response = api_client.patch(
            f"{URL}nobody@example.com/", {"first_name": "X"}, format="json"
        )
        assert response.status_code == 404


class TestDeleteCustomer:
    def test_delete_hides_customer_and_address(self, api_client, created):
        response = api_client.delete(f"{URL}{EMAIL}/")
        assert response.status_code == 200
        assert response.json()["email"] == EMAIL

        assert api_client.get(f"{URL}{EMAIL}/").status_code == 404
        address_id = created["address"]["id"]
        assert api_client.get(f"/api/v1/addresses/{address_id}/").status_code == 404

    def test_deleted_email_cannot_be_registered_again(self, api_client, created):
        api_client.delete(f"{URL}{EMAIL}/")
        response = api_client.post(URL, PAYLOAD, format="json")
        assert response.status_code == 409
