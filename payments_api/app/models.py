"""
Relational schema for accounts and payments.

A payment is stored as an aggregate: the ``payments`` row plus one row
per nested sub-structure (attributes, the three parties, charges
information with its sender charges, and foreign exchange details).
Every sub-table references the owning payment with ``ON DELETE
CASCADE`` and the ORM relationships use ``delete-orphan`` so removing
or replacing a payment never leaves sub-records behind.

Relationships are ``lazy="raise"``: callers must say which parts of the
aggregate they want (see ``PaymentService.AGGREGATE``) instead of
triggering implicit loads.
"""

import uuid
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    # PBKDF2 salt and digest, see ``core.security.hash_password``.
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


def _owner_fk():
    return mapped_column(Uuid, ForeignKey("payments.id", ondelete="CASCADE"), unique=True, nullable=False)


def _child(target: str):
    return relationship(
        target, uselist=False, cascade="all, delete-orphan", passive_deletes=True, lazy="raise"
    )


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="Payment")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    organisation_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    attributes: Mapped[Optional["PaymentAttributes"]] = _child("PaymentAttributes")
    beneficiary_party: Mapped[Optional["BeneficiaryParty"]] = _child("BeneficiaryParty")
    debtor_party: Mapped[Optional["DebtorParty"]] = _child("DebtorParty")
    sponsor_party: Mapped[Optional["SponsorParty"]] = _child("SponsorParty")
    charges_information: Mapped[Optional["ChargesInformation"]] = _child("ChargesInformation")
    fx: Mapped[Optional["ForeignExchange"]] = _child("ForeignExchange")


class PaymentAttributes(Base):
    __tablename__ = "payment_attributes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[uuid.UUID] = _owner_fk()
    amount: Mapped[Optional[str]] = mapped_column(String(64))
    currency: Mapped[Optional[str]] = mapped_column(String(3))
    end_to_end_reference: Mapped[Optional[str]] = mapped_column(String(255))
    numeric_reference: Mapped[Optional[str]] = mapped_column(String(64))
    payment_id: Mapped[Optional[str]] = mapped_column(String(64))
    payment_purpose: Mapped[Optional[str]] = mapped_column(String(255))
    payment_scheme: Mapped[Optional[str]] = mapped_column(String(32))
    payment_type: Mapped[Optional[str]] = mapped_column(String(32))
    processing_date: Mapped[Optional[date]] = mapped_column(Date)
    reference: Mapped[Optional[str]] = mapped_column(String(255))
    scheme_payment_sub_type: Mapped[Optional[str]] = mapped_column(String(64))
    scheme_payment_type: Mapped[Optional[str]] = mapped_column(String(64))


class _PartyColumns:
    """Columns shared by the beneficiary and debtor party tables."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_name: Mapped[Optional[str]] = mapped_column(String(255))
    account_number: Mapped[Optional[str]] = mapped_column(String(64))
    account_number_code: Mapped[Optional[str]] = mapped_column(String(16))
    account_type: Mapped[Optional[int]] = mapped_column(Integer)
    address: Mapped[Optional[str]] = mapped_column(String(512))
    bank_id: Mapped[Optional[str]] = mapped_column(String(64))
    bank_id_code: Mapped[Optional[str]] = mapped_column(String(16))
    name: Mapped[Optional[str]] = mapped_column(String(255))


class BeneficiaryParty(_PartyColumns, Base):
    __tablename__ = "beneficiary_parties"

    owner_id: Mapped[uuid.UUID] = _owner_fk()


class DebtorParty(_PartyColumns, Base):
    __tablename__ = "debtor_parties"

    owner_id: Mapped[uuid.UUID] = _owner_fk()


class SponsorParty(Base):
    __tablename__ = "sponsor_parties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[uuid.UUID] = _owner_fk()
    account_number: Mapped[Optional[str]] = mapped_column(String(64))
    bank_id: Mapped[Optional[str]] = mapped_column(String(64))
    bank_id_code: Mapped[Optional[str]] = mapped_column(String(16))


class ChargesInformation(Base):
    __tablename__ = "charges_information"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[uuid.UUID] = _owner_fk()
    bearer_code: Mapped[Optional[str]] = mapped_column(String(16))
    receiver_charges_amount: Mapped[Optional[str]] = mapped_column(String(64))
    receiver_charges_currency: Mapped[Optional[str]] = mapped_column(String(3))

    sender_charges: Mapped[List["SenderCharge"]] = relationship(
        "SenderCharge",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
        order_by="SenderCharge.position",
    )


class SenderCharge(Base):
    __tablename__ = "sender_charges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    charges_information_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("charges_information.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Keeps the list order the client sent.
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    amount: Mapped[Optional[str]] = mapped_column(String(64))
    currency: Mapped[Optional[str]] = mapped_column(String(3))


class ForeignExchange(Base):
    __tablename__ = "foreign_exchanges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[uuid.UUID] = _owner_fk()
    contract_reference: Mapped[Optional[str]] = mapped_column(String(255))
    exchange_rate: Mapped[Optional[str]] = mapped_column(String(64))
    original_amount: Mapped[Optional[str]] = mapped_column(String(64))
    original_currency: Mapped[Optional[str]] = mapped_column(String(3))
