"""
Business logic for accounts.

Registration validates the credentials, enforces unique emails, stores
a salted password hash and mints a bearer token.  Login looks the
account up by email, verifies the password and mints a fresh token.
Neither operation ever returns the password or its hash.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import Settings
from ..core.errors import Conflict, InternalError, NotFound, Unauthorized, ValidationFailed
from ..core.security import create_access_token, hash_password, verify_password
from ..models import Account
from ..schemas.account import MIN_PASSWORD_LENGTH, AccountCredentials, AccountRead

logger = logging.getLogger(__name__)

ERROR_EMAIL_REQUIRED = "Email address is required"
ERROR_PASSWORD_REQUIRED = "Password is required"
ERROR_EMAIL_EXISTS = "Email address already in use by another user"
ERROR_EMAIL_NON_EXISTS = "Email address not found"
ERROR_INVALID_LOGIN = "Invalid login credentials. Please try again"


class AccountService:
    """Registration and authentication against the ``accounts`` table."""

    def __init__(self, session: Session, settings: Settings) -> None:
        self.session = session
        self.settings = settings

    def register(self, credentials: AccountCredentials) -> AccountRead:
        """Create an account and return it with a freshly minted token.

        Raises ``ValidationFailed`` for an email without "@" or a short
        password, ``Conflict`` when the email is taken and
        ``InternalError`` on any database fault.
        """
        if "@" not in credentials.email:
            raise ValidationFailed(ERROR_EMAIL_REQUIRED)
        if len(credentials.password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed(ERROR_PASSWORD_REQUIRED)

        if self._find_by_email(credentials.email) is not None:
            raise Conflict(ERROR_EMAIL_EXISTS)

        account = Account(email=credentials.email, password=hash_password(credentials.password))
        try:
            self.session.add(account)
            self.session.commit()
        except IntegrityError:
            # Another registration took the email between the lookup
            # and the insert; the unique index decides.
            self.session.rollback()
            logger.warning("Email %s was registered concurrently", credentials.email)
            raise Conflict(ERROR_EMAIL_EXISTS)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Could not store account %s", credentials.email)
            raise InternalError()

        logger.info("Registered account %s (id=%s)", account.email, account.id)
        return self._with_token(account)

    def authenticate(self, credentials: AccountCredentials) -> AccountRead:
        """Verify the credentials and return the account with a new token.

        Raises ``NotFound`` for an unknown email and ``Unauthorized``
        when the password does not match.
        """
        account = self._find_by_email(credentials.email)
        if account is None:
            raise NotFound(ERROR_EMAIL_NON_EXISTS)
        if not verify_password(credentials.password, account.password):
            logger.warning("Failed login for account %s", account.id)
            raise Unauthorized(ERROR_INVALID_LOGIN)

        logger.info("Account %s logged in", account.id)
        return self._with_token(account)

    def _find_by_email(self, email: str):
        try:
            return self.session.scalars(select(Account).where(Account.email == email)).first()
        except SQLAlchemyError:
            logger.exception("Account lookup failed")
            raise InternalError()

    def _with_token(self, account: Account) -> AccountRead:
        token = create_access_token(
            account.id, self.settings.token_secret, self.settings.token_ttl_seconds
        )
        return AccountRead(id=account.id, email=account.email, password="", token=token)
