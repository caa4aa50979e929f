"""
Shared fixtures.

Every test gets its own application backed by a private in-memory
SQLite database, so tests never see each other's rows.
"""

import copy
import os

# The module-level app in payments_api.app.main is built at import
# time; point it at SQLite so importing the package needs no server.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TOKEN_PASSWORD", "test-secret")

import pytest
from fastapi.testclient import TestClient

from payments_api.app.core.config import Settings
from payments_api.app.main import create_app

PAYMENT_ID = "4ee3a8d8-ca7b-11e9-9cb5-2a2ae2dbcce4"

SAMPLE_PAYMENT = {
    "type": "Payment",
    "id": PAYMENT_ID,
    "version": 0,
    "organisation_id": "743d5b63-8e6f-432e-a8fa-c5d8d2ee5fcb",
    "attributes": {
        "amount": "100.21",
        "beneficiary_party": {
            "account_name": "W Owens",
            "account_number": "31926819",
            "account_number_code": "BBAN",
            "account_type": 0,
            "address": "1 The Beneficiary Localtown SE2",
            "bank_id": "403000",
            "bank_id_code": "GBDSC",
            "name": "Wilfred Jeremiah Owens",
        },
        "charges_information": {
            "bearer_code": "SHAR",
            "sender_charges": [
                {"amount": "5.00", "currency": "GBP"},
                {"amount": "10.00", "currency": "USD"},
            ],
            "receiver_charges_amount": "1.00",
            "receiver_charges_currency": "USD",
        },
        "currency": "GBP",
        "debtor_party": {
            "account_name": "EJ Brown Black",
            "account_number": "GB29XABC10161234567801",
            "account_number_code": "IBAN",
            "account_type": None,
            "address": "10 Debtor Crescent Sourcetown NE1",
            "bank_id": "203301",
            "bank_id_code": "GBDSC",
            "name": "Emelia Jane Brown",
        },
        "end_to_end_reference": "Wil piano Jan",
        "fx": {
            "contract_reference": "FX123",
            "exchange_rate": "2.00000",
            "original_amount": "200.42",
            "original_currency": "USD",
        },
        "numeric_reference": "1002001",
        "payment_id": "123456789012345678",
        "payment_purpose": "Paying for goods/services",
        "payment_scheme": "FPS",
        "payment_type": "Credit",
        "processing_date": "2017-01-18",
        "reference": "Payment for Em's piano lessons",
        "scheme_payment_sub_type": "InternetBanking",
        "scheme_payment_type": "ImmediatePayment",
        "sponsor_party": {
            "account_number": "56781234",
            "bank_id": "123123",
            "bank_id_code": "GBDSC",
        },
    },
}


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", token_secret="test-secret", token_ttl_hours=12)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register an account and return the response."""

    def _register(email="user@example.com", password="secret1"):
        return client.post("/v1/accounts", json={"email": email, "password": password})

    return _register


@pytest.fixture
def auth_headers(register):
    token = register().json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_payment():
    return copy.deepcopy(SAMPLE_PAYMENT)
