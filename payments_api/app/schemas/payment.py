"""
Pydantic models for the payment document.

A payment is exchanged as one nested JSON document::

    {
      "type": "Payment",
      "id": "4ee3a8d8-ca7b-11e9-9cb5-2a2ae2dbcce4",
      "version": 0,
      "organisation_id": "743d5b63-8e6f-432e-a8fa-c5d8d2ee5fcb",
      "attributes": {
        "amount": "100.21",
        "beneficiary_party": {...},
        "charges_information": {"sender_charges": [...], ...},
        "debtor_party": {...},
        "fx": {...},
        "sponsor_party": {...},
        ...
      }
    }

Only ``id`` is mandatory and must be a UUID.  Monetary amounts and
exchange rates are strings so they survive a round trip unchanged.
String lengths mirror the column widths in ``models`` so an oversized
value is rejected as a decode error instead of failing in the database.
"""

import uuid
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class SenderCharge(BaseModel):
    amount: Optional[str] = Field(None, max_length=64, examples=["5.00"])
    currency: Optional[str] = Field(None, max_length=3, examples=["GBP"])


class ChargesInformation(BaseModel):
    bearer_code: Optional[str] = Field(None, max_length=16, examples=["SHAR"])
    receiver_charges_amount: Optional[str] = Field(None, max_length=64, examples=["1.00"])
    receiver_charges_currency: Optional[str] = Field(None, max_length=3, examples=["USD"])
    sender_charges: List[SenderCharge] = Field(default_factory=list)


class Party(BaseModel):
    """Beneficiary or debtor of a payment."""

    account_name: Optional[str] = Field(None, max_length=255, examples=["W Owens"])
    account_number: Optional[str] = Field(None, max_length=64, examples=["31926819"])
    account_number_code: Optional[str] = Field(None, max_length=16, examples=["BBAN"])
    account_type: Optional[int] = Field(None, examples=[0])
    address: Optional[str] = Field(None, max_length=512, examples=["1 The Beneficiary Localtown SE2"])
    bank_id: Optional[str] = Field(None, max_length=64, examples=["403000"])
    bank_id_code: Optional[str] = Field(None, max_length=16, examples=["GBDSC"])
    name: Optional[str] = Field(None, max_length=255, examples=["Wilfred Jeremiah Owens"])


class SponsorParty(BaseModel):
    account_number: Optional[str] = Field(None, max_length=64, examples=["56781234"])
    bank_id: Optional[str] = Field(None, max_length=64, examples=["123123"])
    bank_id_code: Optional[str] = Field(None, max_length=16, examples=["GBDSC"])


class ForeignExchange(BaseModel):
    contract_reference: Optional[str] = Field(None, max_length=255, examples=["FX123"])
    exchange_rate: Optional[str] = Field(None, max_length=64, examples=["2.00000"])
    original_amount: Optional[str] = Field(None, max_length=64, examples=["200.42"])
    original_currency: Optional[str] = Field(None, max_length=3, examples=["USD"])


class PaymentAttributes(BaseModel):
    amount: Optional[str] = Field(None, max_length=64, examples=["100.21"])
    currency: Optional[str] = Field(None, max_length=3, examples=["GBP"])
    end_to_end_reference: Optional[str] = Field(None, max_length=255, examples=["Wil piano Jan"])
    numeric_reference: Optional[str] = Field(None, max_length=64, examples=["1002001"])
    payment_id: Optional[str] = Field(None, max_length=64, examples=["123456789012345678"])
    payment_purpose: Optional[str] = Field(None, max_length=255, examples=["Paying for goods/services"])
    payment_scheme: Optional[str] = Field(None, max_length=32, examples=["FPS"])
    payment_type: Optional[str] = Field(None, max_length=32, examples=["Credit"])
    processing_date: Optional[date] = Field(None, examples=["2017-01-18"])
    reference: Optional[str] = Field(None, max_length=255, examples=["Payment for Em's piano lessons"])
    scheme_payment_sub_type: Optional[str] = Field(None, max_length=64, examples=["InternetBanking"])
    scheme_payment_type: Optional[str] = Field(None, max_length=64, examples=["ImmediatePayment"])
    beneficiary_party: Optional[Party] = None
    debtor_party: Optional[Party] = None
    sponsor_party: Optional[SponsorParty] = None
    charges_information: Optional[ChargesInformation] = None
    fx: Optional[ForeignExchange] = None


class PaymentDocument(BaseModel):
    """A payment together with all of its nested sub-records."""

    type: str = Field("Payment", max_length=32, examples=["Payment"])
    id: uuid.UUID = Field(..., examples=["4ee3a8d8-ca7b-11e9-9cb5-2a2ae2dbcce4"])
    version: int = Field(0, examples=[0])
    organisation_id: Optional[uuid.UUID] = Field(None, examples=["743d5b63-8e6f-432e-a8fa-c5d8d2ee5fcb"])
    attributes: Optional[PaymentAttributes] = None
