"""
Shared FastAPI dependencies.

Services are constructed per request around the request's database
session, so handlers never reach for a global connection.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..core.config import Settings
from ..core.db import get_session
from ..services.account_service import AccountService
from ..services.payment_service import PaymentService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_account_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> AccountService:
    return AccountService(session, settings)


def get_payment_service(session: Session = Depends(get_session)) -> PaymentService:
    return PaymentService(session)
