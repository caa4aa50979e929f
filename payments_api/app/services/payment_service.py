"""
Business logic for payments.

Payments are stored as aggregates (see ``models``).  This module is the
only place that knows how an aggregate is fetched and how it maps onto
the ``PaymentDocument`` schema:

* ``AGGREGATE`` lists the eager loads that make up a complete payment;
  every read goes through ``PaymentService._load`` with these options.
* ``to_document`` and ``from_document`` convert between ORM rows and
  the API document explicitly, field by field.

Create and update follow a check-then-act pattern: an existence check
followed by the write in the same transaction.  Two requests racing on
the same identifier are only separated by the primary key constraint;
the loser's write fails and is reported as an internal error.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.errors import Conflict, IdMismatch, InternalError, NotFound, ValidationFailed
from ..models import (
    BeneficiaryParty,
    ChargesInformation,
    DebtorParty,
    ForeignExchange,
    Payment,
    PaymentAttributes,
    SenderCharge,
    SponsorParty,
)
from ..schemas import payment as schema

logger = logging.getLogger(__name__)

ERROR_PAYMENT_ALREADY_EXISTS = "Payment already exists with that ID"
ERROR_REQUESTED_UUID_INVALID = "Requested UUID is Invalid"
ERROR_ID_MISMATCH = "Mismatching IDs"

PAYMENTS_PATH = "/v1/payments"

AGGREGATE = (
    selectinload(Payment.attributes),
    selectinload(Payment.beneficiary_party),
    selectinload(Payment.debtor_party),
    selectinload(Payment.sponsor_party),
    selectinload(Payment.charges_information).selectinload(ChargesInformation.sender_charges),
    selectinload(Payment.fx),
)

_ATTRIBUTE_FIELDS = (
    "amount",
    "currency",
    "end_to_end_reference",
    "numeric_reference",
    "payment_id",
    "payment_purpose",
    "payment_scheme",
    "payment_type",
    "processing_date",
    "reference",
    "scheme_payment_sub_type",
    "scheme_payment_type",
)
_PARTY_FIELDS = tuple(schema.Party.model_fields)
_SPONSOR_FIELDS = tuple(schema.SponsorParty.model_fields)
_FX_FIELDS = tuple(schema.ForeignExchange.model_fields)
_CHARGES_FIELDS = ("bearer_code", "receiver_charges_amount", "receiver_charges_currency")


def payment_location(payment_id: uuid.UUID) -> str:
    return f"{PAYMENTS_PATH}/{payment_id}"


def parse_payment_id(raw: str) -> uuid.UUID:
    """Parse a path identifier, raising ``ValidationFailed`` if it is not a UUID."""
    try:
        return uuid.UUID(raw)
    except (ValueError, AttributeError, TypeError):
        raise ValidationFailed(ERROR_REQUESTED_UUID_INVALID)


def _copy(source, target, fields):
    for name in fields:
        setattr(target, name, getattr(source, name))
    return target


def _values(source, fields) -> dict:
    return {name: getattr(source, name) for name in fields}


def to_document(payment: Payment) -> schema.PaymentDocument:
    """Map a fully loaded ``Payment`` row onto the API document."""
    attributes = None
    if payment.attributes is not None:
        charges = None
        if payment.charges_information is not None:
            info = payment.charges_information
            charges = schema.ChargesInformation(
                **_values(info, _CHARGES_FIELDS),
                sender_charges=[
                    schema.SenderCharge(amount=charge.amount, currency=charge.currency)
                    for charge in info.sender_charges
                ],
            )
        attributes = schema.PaymentAttributes(
            **_values(payment.attributes, _ATTRIBUTE_FIELDS),
            beneficiary_party=_optional(schema.Party, payment.beneficiary_party, _PARTY_FIELDS),
            debtor_party=_optional(schema.Party, payment.debtor_party, _PARTY_FIELDS),
            sponsor_party=_optional(schema.SponsorParty, payment.sponsor_party, _SPONSOR_FIELDS),
            charges_information=charges,
            fx=_optional(schema.ForeignExchange, payment.fx, _FX_FIELDS),
        )
    return schema.PaymentDocument(
        type=payment.type,
        id=payment.id,
        version=payment.version,
        organisation_id=payment.organisation_id,
        attributes=attributes,
    )


def _optional(model, row, fields):
    if row is None:
        return None
    return model(**_values(row, fields))


def from_document(document: schema.PaymentDocument) -> Payment:
    """Build a new, unsaved ``Payment`` aggregate from an API document."""
    payment = Payment(
        id=document.id,
        type=document.type,
        version=document.version,
        organisation_id=document.organisation_id,
    )
    attrs = document.attributes
    if attrs is None:
        return payment

    payment.attributes = _copy(attrs, PaymentAttributes(), _ATTRIBUTE_FIELDS)
    if attrs.beneficiary_party is not None:
        payment.beneficiary_party = _copy(attrs.beneficiary_party, BeneficiaryParty(), _PARTY_FIELDS)
    if attrs.debtor_party is not None:
        payment.debtor_party = _copy(attrs.debtor_party, DebtorParty(), _PARTY_FIELDS)
    if attrs.sponsor_party is not None:
        payment.sponsor_party = _copy(attrs.sponsor_party, SponsorParty(), _SPONSOR_FIELDS)
    if attrs.charges_information is not None:
        info = _copy(attrs.charges_information, ChargesInformation(), _CHARGES_FIELDS)
        info.sender_charges = [
            SenderCharge(position=position, amount=charge.amount, currency=charge.currency)
            for position, charge in enumerate(attrs.charges_information.sender_charges)
        ]
        payment.charges_information = info
    if attrs.fx is not None:
        payment.fx = _copy(attrs.fx, ForeignExchange(), _FX_FIELDS)
    return payment


class PaymentService:
    """CRUD operations on payment aggregates."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create_payment(self, document: schema.PaymentDocument) -> str:
        """Insert a new payment and return its location.

        The existence check treats anything other than "no such row" as
        a conflict, including a failing query.
        """
        try:
            existing = self.session.get(Payment, document.id)
        except SQLAlchemyError:
            logger.exception("Existence check for payment %s failed", document.id)
            raise Conflict(ERROR_PAYMENT_ALREADY_EXISTS)
        if existing is not None:
            raise Conflict(ERROR_PAYMENT_ALREADY_EXISTS)

        self._write(lambda: self.session.add(from_document(document)), "create", document.id)
        logger.info("Created payment %s", document.id)
        return payment_location(document.id)

    def list_payments(self) -> List[schema.PaymentDocument]:
        try:
            rows = self.session.scalars(select(Payment).options(*AGGREGATE).order_by(Payment.created_at, Payment.id)).all()
            return [to_document(row) for row in rows]
        except SQLAlchemyError:
            logger.exception("Listing payments failed")
            raise InternalError()

    def get_payment(self, payment_id: uuid.UUID) -> schema.PaymentDocument:
        payment = self._load(payment_id)
        if payment is None:
            raise NotFound()
        return to_document(payment)

    def update_payment(self, payment_id: uuid.UUID, document: schema.PaymentDocument) -> str:
        """Replace the stored aggregate with ``document`` and return its location.

        This is a whole-document overwrite: sub-records absent from
        ``document`` are removed, not kept.
        """
        if document.id != payment_id:
            raise IdMismatch(ERROR_ID_MISMATCH)
        existing = self._load(payment_id)
        if existing is None:
            raise NotFound()

        def replace():
            created_at = existing.created_at
            self.session.delete(existing)
            self.session.flush()
            replacement = from_document(document)
            replacement.created_at = created_at
            self.session.add(replacement)

        self._write(replace, "update", payment_id)
        logger.info("Replaced payment %s", payment_id)
        return payment_location(payment_id)

    def delete_payment(self, payment_id: uuid.UUID) -> None:
        existing = self._load(payment_id)
        if existing is None:
            raise NotFound()
        self._write(lambda: self.session.delete(existing), "delete", payment_id)
        logger.info("Deleted payment %s", payment_id)

    def _load(self, payment_id: uuid.UUID) -> Optional[Payment]:
        """Fetch one complete aggregate, or ``None`` if there is no such payment."""
        try:
            return self.session.scalars(
                select(Payment).options(*AGGREGATE).where(Payment.id == payment_id)
            ).first()
        except SQLAlchemyError:
            logger.exception("Loading payment %s failed", payment_id)
            raise InternalError()

    def _write(self, action, verb: str, payment_id: uuid.UUID) -> None:
        try:
            action()
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Could not %s payment %s", verb, payment_id)
            raise InternalError()
