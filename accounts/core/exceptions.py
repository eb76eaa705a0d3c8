"""
core/exceptions.py
------------------
Error taxonomy for the account service.

Services raise these; the exception handler registered in main.py maps
error_code to an HTTP status. Storage-driver errors never cross a service
boundary: they are logged and translated into one of the kinds below, or
fall through to the generic 500 handler.
"""

from typing import Any, Dict, Optional


class AccountServiceException(Exception):
    """
    Base exception for all account service errors.

    Attributes:
        message: Human-readable error description (safe to return to clients).
        error_code: Machine-readable error code.
        details: Additional error context (never returned for auth failures).
    """

    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "error": self.error_code}


class ValidationException(AccountServiceException):
    """Missing or malformed input."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class DuplicateUserException(AccountServiceException):
    """A user with the same email or username already exists."""

    def __init__(self) -> None:
        super().__init__("User already exists", "DUPLICATE_USER")


class DuplicateMembershipException(AccountServiceException):
    def __init__(self, user_id: str, company_id: str) -> None:
        super().__init__(
            "User is already a member of this company",
            "DUPLICATE_MEMBERSHIP",
            {"user_id": user_id, "company_id": company_id},
        )


class InvalidCredentialsException(AccountServiceException):
    """
    Login failed. Deliberately identical for an unknown email and a wrong
    password so responses cannot be used to enumerate accounts.
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials", "INVALID_CREDENTIALS")


class UnauthenticatedException(AccountServiceException):
    """
    The request carries no usable identity. The public message is the same
    whatever the cause; `reason` is for server-side logs only.
    """

    status_code = 401

    def __init__(self, reason: str = "unauthenticated") -> None:
        super().__init__("Please authenticate", "UNAUTHENTICATED")
        self.reason = reason


class MissingTokenException(UnauthenticatedException):
    def __init__(self) -> None:
        super().__init__(reason="missing_token")


class NotFoundException(AccountServiceException):
    status_code = 404

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found",
            "NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class TransactionFailureException(AccountServiceException):
    """A multi-record write failed; the transaction was rolled back before raising."""

    status_code = 500

    def __init__(self, message: str = "Server error while creating company") -> None:
        super().__init__(message, "TRANSACTION_FAILURE")
