"""Domain-specific exceptions for participants services."""


class ParticipantsServiceError(Exception):
    """Base exception for participants services."""
    pass


class ParticipantNotFoundError(ParticipantsServiceError):
    """Raised when participant does not exist."""
    pass


class DuplicateCiError(ParticipantsServiceError):
    """Raised when another participant already uses the CI."""
    pass


class InvalidAmountError(ParticipantsServiceError):
    """Raised when an amount is outside the accepted range."""
    pass


class PaymentNotFoundError(ParticipantsServiceError):
    """Raised when payment does not exist for the participant."""
    pass


class PaymentExceedsTotalError(ParticipantsServiceError):
    """Raised when a payment would push the paid amount past the total."""

    def __init__(self, max_allowed):
        self.max_allowed = max_allowed
        super().__init__(f"El pago excede el monto total. Máximo permitido: {max_allowed}")
