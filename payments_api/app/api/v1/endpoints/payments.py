"""
Payment endpoints for API v1.

Every route requires a bearer token.  Identifiers in the path must be
UUIDs; an update must carry the same identifier in its body as in its
path.  Create and update answer with a ``Location`` header pointing at
the stored payment.
"""

from fastapi import APIRouter, Depends, Path, Response, status
from fastapi.responses import JSONResponse

from payments_api.app.api.deps import get_payment_service
from payments_api.app.core.security import get_current_account
from payments_api.app.schemas.envelope import Envelope, envelope_response, self_link
from payments_api.app.schemas.payment import PaymentDocument
from payments_api.app.services.payment_service import (
    PAYMENTS_PATH,
    PaymentService,
    parse_payment_id,
    payment_location,
)


router = APIRouter(dependencies=[Depends(get_current_account)])


@router.post("", response_model=Envelope, status_code=status.HTTP_201_CREATED)
def create_payment(
    payment: PaymentDocument,
    service: PaymentService = Depends(get_payment_service),
) -> JSONResponse:
    """Store a new payment under the identifier chosen by the client."""
    location = service.create_payment(payment)
    return envelope_response(
        status.HTTP_201_CREATED,
        links=[self_link(location)],
        headers={"Location": location},
    )


@router.get("", response_model=Envelope)
def list_payments(service: PaymentService = Depends(get_payment_service)) -> JSONResponse:
    """Return every stored payment with all nested sub-records."""
    payments = service.list_payments()
    return envelope_response(status.HTTP_200_OK, data=payments, links=[self_link(PAYMENTS_PATH)])


@router.get("/{payment_id}", response_model=Envelope)
def get_payment(
    payment_id: str = Path(..., description="Payment UUID"),
    service: PaymentService = Depends(get_payment_service),
) -> JSONResponse:
    identifier = parse_payment_id(payment_id)
    payment = service.get_payment(identifier)
    return envelope_response(
        status.HTTP_200_OK, data=payment, links=[self_link(payment_location(payment.id))]
    )


@router.put("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_payment(
    payment: PaymentDocument,
    payment_id: str = Path(..., description="Payment UUID"),
    service: PaymentService = Depends(get_payment_service),
) -> Response:
    """Replace a payment as a whole.

    Sub-records missing from the body are dropped from the stored
    payment; this is not a partial update.
    """
    identifier = parse_payment_id(payment_id)
    location = service.update_payment(identifier, payment)
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers={"Location": location})


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(
    payment_id: str = Path(..., description="Payment UUID"),
    service: PaymentService = Depends(get_payment_service),
) -> Response:
    identifier = parse_payment_id(payment_id)
    service.delete_payment(identifier)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
