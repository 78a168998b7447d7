class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class InsufficientInventoryError(ConflictError):
    """Offer has fewer unsold units than requested (contended resource, not a missing one)"""


class SeatUnavailableError(ConflictError):
    """Seat is not in the state the guarded update expected"""


class PaymentGatewayError(CustomBaseError):
    """Gateway unreachable or rejected the request; the caller may retry"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 502)


class WebhookSignatureError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)
