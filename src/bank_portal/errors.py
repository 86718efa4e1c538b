"""
Error taxonomy shared by the services and the HTTP layer.

Every error carries the HTTP status it maps to and a client-safe message.
"""


class BankError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BankError):
    status_code = 400
    default_message = "Invalid request"


class InvalidAmount(ValidationError):
    default_message = "Amount must be greater than zero"


class BalanceLimitExceeded(ValidationError):
    default_message = "Balance limit exceeded"


class InsufficientFunds(BankError):
    status_code = 400
    default_message = "Insufficient balance"


class SelfTransfer(BankError):
    status_code = 400
    default_message = "Cannot transfer to your own account"


class Unauthorized(BankError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(BankError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(BankError):
    status_code = 404
    default_message = "Not found"


class RecipientNotFound(NotFound):
    default_message = "Recipient not found"


class DuplicatePhone(BankError):
    status_code = 409
    default_message = "Phone number already registered"
