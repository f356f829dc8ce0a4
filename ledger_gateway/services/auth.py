"""Authentication gateway - signup, login and credential verification"""

from typing import Optional

from sqlalchemy.orm import Session

from ledger_gateway.domain.exceptions import DuplicateEmailError, InvalidCredentialsError, UnauthenticatedError
from ledger_gateway.domain.models import IssuedSession, UserIdentity
from ledger_gateway.infrastructure.database.repositories import UserRepository
from ledger_gateway.infrastructure.security.passwords import dummy_hash, hash_password, verify_password
from ledger_gateway.infrastructure.security.tokens import TokenSigner


class AuthGateway:
    """Registers users and trades credentials for signed session tokens"""

    def __init__(self, db: Session, signer: TokenSigner, bcrypt_rounds: int = 12):
        self.users = UserRepository(db)
        self.signer = signer
        self.bcrypt_rounds = bcrypt_rounds

    def register(self, email: str, password: str) -> UserIdentity:
        """
        Create a user with a bcrypt-hashed password.

        Email format and password length are validated at the API boundary.

        Raises:
            DuplicateEmailError: Email already registered (exact match)
        """
        if self.users.get_by_email(email) is not None:
            raise DuplicateEmailError(email)

        password_hash = hash_password(password, rounds=self.bcrypt_rounds)
        db_user = self.users.create_user(email=email, password_hash=password_hash)
        return UserIdentity(id=db_user.id, email=db_user.email)

    def authenticate(self, email: str, password: str) -> IssuedSession:
        """
        Verify email/password and issue a session token.

        Unknown emails still pay for a bcrypt check so both failure modes
        look the same from outside.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        db_user = self.users.get_by_email(email)
        stored_hash = db_user.password_hash if db_user is not None else dummy_hash(self.bcrypt_rounds)

        if not verify_password(password, stored_hash) or db_user is None:
            raise InvalidCredentialsError("Invalid credentials.")

        token = self.signer.issue(user_id=db_user.id, email=db_user.email)
        return IssuedSession(token=token, user_id=db_user.id)


def authorize(signer: TokenSigner, token: Optional[str]) -> int:
    """
    Resolve the user id carried by a presented credential.

    Raises:
        UnauthenticatedError: No credential, or no userId in a valid one
        TokenInvalidError: Signature or expiry check failed
        TokenVerificationError: Verification could not run
    """
    if not token:
        raise UnauthenticatedError("No credential presented")
    return signer.verify(token).user_id
