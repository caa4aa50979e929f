"""Payment resource lifecycle."""

import uuid

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from conftest import PAYMENT_ID

LOCATION = f"/v1/payments/{PAYMENT_ID}"


def flush_then_fail(self):
    """Stand-in for ``Session.commit``: the rows reach the database, the commit does not."""
    self.flush()
    raise OperationalError("COMMIT", {}, Exception("database is gone"))


@pytest.fixture
def create(client, auth_headers):
    def _create(payment):
        return client.post("/v1/payments", json=payment, headers=auth_headers)

    return _create


class TestCreate:
    def test_create_returns_location(self, create, sample_payment):
        response = create(sample_payment)

        assert response.status_code == 201
        assert response.headers["Location"] == LOCATION
        assert response.json() == {
            "data": None,
            "errors": [],
            "links": [{"rel": "self", "href": LOCATION}],
        }

    def test_duplicate_id_is_a_conflict(self, create, sample_payment):
        assert create(sample_payment).status_code == 201

        response = create(sample_payment)

        assert response.status_code == 400
        assert response.json()["errors"] == ["Payment already exists with that ID"]

    def test_non_uuid_body_id_is_invalid_input(self, create, sample_payment):
        sample_payment["id"] = "not-a-uuid"

        response = create(sample_payment)

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert errors[0] == "Invalid JSON"
        assert any(error.startswith("id: ") for error in errors[1:])

    def test_value_wider_than_its_column_is_invalid_input(self, client, create, auth_headers, sample_payment):
        sample_payment["attributes"]["currency"] = "GBPX"

        response = create(sample_payment)

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert errors[0] == "Invalid JSON"
        assert any(error.startswith("attributes.currency: ") for error in errors[1:])
        assert client.get(LOCATION, headers=auth_headers).status_code == 404

    def test_minimal_document_is_accepted(self, client, create, auth_headers):
        payment_id = str(uuid.uuid4())

        assert create({"id": payment_id}).status_code == 201

        data = client.get(f"/v1/payments/{payment_id}", headers=auth_headers).json()["data"]
        assert data == {
            "type": "Payment",
            "id": payment_id,
            "version": 0,
            "organisation_id": None,
            "attributes": None,
        }


class TestRead:
    def test_round_trip(self, client, create, auth_headers, sample_payment):
        create(sample_payment)

        response = client.get(LOCATION, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["data"] == sample_payment
        assert body["links"] == [{"rel": "self", "href": LOCATION}]
        assert body["errors"] == []

    def test_sender_charges_keep_their_order(self, client, create, auth_headers, sample_payment):
        charges = sample_payment["attributes"]["charges_information"]["sender_charges"]
        charges.reverse()
        create(sample_payment)

        data = client.get(LOCATION, headers=auth_headers).json()["data"]

        assert data["attributes"]["charges_information"]["sender_charges"] == charges

    def test_list_returns_every_payment(self, client, create, auth_headers, sample_payment):
        create(sample_payment)
        other_id = str(uuid.uuid4())
        create({"id": other_id, "attributes": {"amount": "1.00", "currency": "EUR"}})

        response = client.get("/v1/payments", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["links"] == [{"rel": "self", "href": "/v1/payments"}]
        by_id = {payment["id"]: payment for payment in body["data"]}
        assert by_id[PAYMENT_ID] == sample_payment
        assert by_id[other_id]["attributes"]["amount"] == "1.00"
        assert by_id[other_id]["attributes"]["fx"] is None

    def test_list_is_empty_without_payments(self, client, auth_headers):
        response = client.get("/v1/payments", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_unknown_id_is_not_found(self, client, auth_headers):
        response = client.get(f"/v1/payments/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"data": None, "errors": ["Resource not found"], "links": []}

    def test_invalid_uuid_is_rejected(self, client, auth_headers):
        response = client.get("/v1/payments/not-a-uuid", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["errors"] == ["Requested UUID is Invalid"]


class TestUpdate:
    def test_update_replaces_whole_document(self, client, create, auth_headers, sample_payment):
        create(sample_payment)
        replacement = {
            "id": PAYMENT_ID,
            "version": 1,
            "attributes": {"amount": "55.00", "currency": "EUR"},
        }

        response = client.put(LOCATION, json=replacement, headers=auth_headers)

        assert response.status_code == 204
        assert response.headers["Location"] == LOCATION
        assert response.content == b""
        data = client.get(LOCATION, headers=auth_headers).json()["data"]
        assert data["version"] == 1
        assert data["organisation_id"] is None
        assert data["attributes"]["amount"] == "55.00"
        assert data["attributes"]["beneficiary_party"] is None
        assert data["attributes"]["charges_information"] is None
        assert data["attributes"]["fx"] is None

    def test_update_with_full_document(self, client, create, auth_headers, sample_payment):
        create(sample_payment)
        sample_payment["attributes"]["debtor_party"]["name"] = "Emelia J Brown"
        sample_payment["attributes"]["charges_information"]["sender_charges"].append(
            {"amount": "2.50", "currency": "EUR"}
        )

        assert client.put(LOCATION, json=sample_payment, headers=auth_headers).status_code == 204

        assert client.get(LOCATION, headers=auth_headers).json()["data"] == sample_payment

    @pytest.mark.parametrize("existing", [True, False])
    def test_id_mismatch(self, client, create, auth_headers, sample_payment, existing):
        if existing:
            create(sample_payment)
        sample_payment["id"] = str(uuid.uuid4())

        response = client.put(LOCATION, json=sample_payment, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["errors"] == ["Mismatching IDs"]

    def test_unknown_id_is_not_found(self, client, auth_headers, sample_payment):
        response = client.put(LOCATION, json=sample_payment, headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["errors"] == ["Resource not found"]

    def test_invalid_uuid_is_rejected(self, client, auth_headers, sample_payment):
        response = client.put("/v1/payments/1234", json=sample_payment, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["errors"] == ["Requested UUID is Invalid"]

    def test_malformed_body_is_invalid_input(self, client, create, auth_headers, sample_payment):
        create(sample_payment)

        response = client.put(
            LOCATION,
            content=b"{not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["errors"][0] == "Invalid JSON"


class TestDelete:
    def test_delete_then_get_is_not_found(self, client, create, auth_headers, sample_payment):
        create(sample_payment)

        response = client.delete(LOCATION, headers=auth_headers)

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(LOCATION, headers=auth_headers).status_code == 404

    def test_delete_removes_sub_records(self, app, client, create, auth_headers, sample_payment):
        create(sample_payment)
        client.delete(LOCATION, headers=auth_headers)

        with app.state.database.engine.connect() as connection:
            for table in (
                "payment_attributes",
                "beneficiary_parties",
                "debtor_parties",
                "sponsor_parties",
                "charges_information",
                "sender_charges",
                "foreign_exchanges",
            ):
                count = connection.exec_driver_sql(f"SELECT COUNT(*) FROM {table}").scalar()
                assert count == 0, table

    def test_id_can_be_reused_after_delete(self, client, create, auth_headers, sample_payment):
        create(sample_payment)
        client.delete(LOCATION, headers=auth_headers)

        assert create(sample_payment).status_code == 201

    def test_unknown_id_is_not_found(self, client, auth_headers):
        response = client.delete(f"/v1/payments/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == 404

    def test_invalid_uuid_is_rejected(self, client, auth_headers):
        response = client.delete("/v1/payments/xyz", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["errors"] == ["Requested UUID is Invalid"]


class TestAccess:
    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/v1/payments"),
            ("get", LOCATION),
            ("delete", LOCATION),
        ],
    )
    def test_missing_token_is_unauthorized(self, client, method, path):
        response = getattr(client, method)(path)

        assert response.status_code == 401
        assert response.json()["errors"] == ["Missing auth token"]

    def test_create_without_token_is_unauthorized(self, client, sample_payment):
        response = client.post("/v1/payments", json=sample_payment)

        assert response.status_code == 401

    def test_invalid_token_is_unauthorized(self, client):
        response = client.get("/v1/payments", headers={"Authorization": "Bearer not.a.token"})

        assert response.status_code == 401
        assert response.json()["errors"] == ["Invalid/Malformed auth token"]


class TestFaults:
    def test_database_fault_is_an_internal_error(self, client, auth_headers, monkeypatch):
        def broken(self, *args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is gone"))

        monkeypatch.setattr(Session, "scalars", broken)

        response = client.get("/v1/payments", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"data": None, "errors": ["Internal server error"], "links": []}

    def test_failed_existence_check_is_a_conflict(self, create, sample_payment, monkeypatch):
        def broken(self, *args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is gone"))

        monkeypatch.setattr(Session, "get", broken)

        response = create(sample_payment)

        assert response.status_code == 400
        assert response.json()["errors"] == ["Payment already exists with that ID"]

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_load_fault_is_an_internal_error(self, client, create, auth_headers, sample_payment, monkeypatch, method):
        create(sample_payment)

        def broken(self, *args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is gone"))

        monkeypatch.setattr(Session, "scalars", broken)

        body = sample_payment if method == "PUT" else None
        response = client.request(method, LOCATION, json=body, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"data": None, "errors": ["Internal server error"], "links": []}

    def test_failed_create_leaves_no_rows(self, app, client, create, auth_headers, sample_payment, monkeypatch):
        monkeypatch.setattr(Session, "commit", flush_then_fail)

        response = create(sample_payment)

        assert response.status_code == 500
        assert response.json() == {"data": None, "errors": ["Internal server error"], "links": []}

        monkeypatch.undo()
        assert client.get(LOCATION, headers=auth_headers).status_code == 404
        with app.state.database.engine.connect() as connection:
            for table in ("payments", "payment_attributes", "sender_charges", "foreign_exchanges"):
                count = connection.exec_driver_sql(f"SELECT COUNT(*) FROM {table}").scalar()
                assert count == 0, table

    def test_failed_update_keeps_the_stored_document(self, client, create, auth_headers, sample_payment, monkeypatch):
        create(sample_payment)
        replacement = {"id": PAYMENT_ID, "attributes": {"amount": "1.00"}}
        monkeypatch.setattr(Session, "commit", flush_then_fail)

        response = client.put(LOCATION, json=replacement, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["errors"] == ["Internal server error"]

        monkeypatch.undo()
        stored = client.get(LOCATION, headers=auth_headers).json()["data"]
        assert stored == sample_payment

    def test_failed_delete_keeps_the_payment(self, client, create, auth_headers, sample_payment, monkeypatch):
        create(sample_payment)
        monkeypatch.setattr(Session, "commit", flush_then_fail)

        response = client.delete(LOCATION, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["errors"] == ["Internal server error"]

        monkeypatch.undo()
        response = client.get(LOCATION, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"] == sample_payment
