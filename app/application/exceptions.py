
class CollaboratorUnavailableError(RuntimeError):
    """Raised when a collaborator fails transiently (timeouts, network errors, service unavailable)."""
    pass


class BookingRejectedError(RuntimeError):
    """Raised when the booking endpoint rejects the draft (validation failure, not retried)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PaymentInitiationError(RuntimeError):
    """Raised when the payment collaborator cannot open a payment for an existing booking."""
    pass


class InvalidSelectionError(ValueError):
    """Raised by step panels when user input falls outside what the step offers."""
    pass
