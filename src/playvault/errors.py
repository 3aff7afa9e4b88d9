"""Domain exceptions.

Services raise these; the API layer maps each one to an HTTP status and a
``{"message", "code"}`` body in ``playvault.middleware.error_handler``.
"""

from __future__ import annotations


class PlayVaultError(Exception):
    """Base class for failures the client is expected to handle."""

    status_code = 500
    code = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PlayVaultError):
    """Bad input. Raised before any mutation."""

    status_code = 400
    code = "validation_error"
    default_message = "Invalid request"


class NotFoundError(PlayVaultError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class BusinessRuleViolation(PlayVaultError):
    """Well-formed request that the current state does not allow."""

    status_code = 400
    code = "business_rule_violation"
    default_message = "Request not allowed"


class InsufficientBalanceError(BusinessRuleViolation):
    """The user's XP balance does not cover the requested spend."""

    code = "insufficient_xp"
    default_message = "Insufficient XP"

    def __init__(self, current_balance: int, required_amount: int) -> None:
        self.current_balance = current_balance
        self.required_amount = required_amount
        super().__init__(f"Insufficient XP: balance {current_balance}, required {required_amount}")


class AuthRequiredError(PlayVaultError):
    status_code = 401
    code = "unauthorized"
    default_message = "Unauthorized"


class AuthExpiredError(AuthRequiredError):
    """The identity token was valid once but has expired; the client should log in again."""

    code = "session_expired"
    default_message = "Session expired"
