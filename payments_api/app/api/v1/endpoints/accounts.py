"""
Account endpoints for API v1.

Registration (``POST /v1/accounts``) and login (``POST /v1/login``).
Both return the account with a bearer token to be sent as
``Authorization: Bearer <token>`` on the payment routes.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from payments_api.app.api.deps import get_account_service
from payments_api.app.schemas.account import AccountCredentials
from payments_api.app.schemas.envelope import Envelope, envelope_response
from payments_api.app.services.account_service import AccountService


router = APIRouter()


@router.post("/accounts", response_model=Envelope, status_code=status.HTTP_201_CREATED)
def register_account(
    credentials: AccountCredentials,
    service: AccountService = Depends(get_account_service),
) -> JSONResponse:
    """Register a new account.

    The email must contain "@" and be unused; the password must be at
    least six characters long.  Responds ``201`` with the account and
    its token.
    """
    account = service.register(credentials)
    return envelope_response(status.HTTP_201_CREATED, data=account)


@router.post("/login", response_model=Envelope)
def login(
    credentials: AccountCredentials,
    service: AccountService = Depends(get_account_service),
) -> JSONResponse:
    """Authenticate with email and password and receive a new token."""
    account = service.authenticate(credentials)
    return envelope_response(status.HTTP_200_OK, data=account)
