"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NotConfiguredError(DomainException):
    """Required configuration is missing; the service must not start"""

    pass


class ValidationError(DomainException):
    """Input is well-formed but violates a domain rule"""

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class DuplicateEmailError(DomainException):
    """An account with this email already exists"""

    pass


class InvalidCredentialsError(DomainException):
    """Unknown email or wrong password (deliberately indistinguishable)"""

    pass


class UnauthenticatedError(DomainException):
    """No usable identity claim was presented"""

    pass


class TokenInvalidError(UnauthenticatedError):
    """Credential failed signature or expiry verification"""

    pass


class TokenVerificationError(DomainException):
    """Verification could not run (unusable key or crypto failure)"""

    pass


class StoreFailure(DomainException):
    """Underlying persistence error"""

    pass


class StoreTimeout(StoreFailure):
    """Store did not answer in time; the call may be retried"""

    pass


class FeedAPIError(DomainException):
    """Feed API returned an error or is unavailable"""

    pass


class SessionExpiredError(FeedAPIError):
    """Feed API rejected the session credential"""

    pass
