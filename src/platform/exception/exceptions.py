class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class InvalidTransitionError(DomainError):
    """A booking or payment state machine was asked for a move it does not allow"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class EmptySelectionError(DomainError):
    def __init__(self, message: str = 'At least one seat must be selected') -> None:
        super().__init__(message, 400)


class InvalidPromoError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class RefundExceedsPaymentError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class DuplicateThresholdError(ConflictError):
    pass


class DuplicatePolicyError(ConflictError):
    pass


class DuplicatePromoCodeError(ConflictError):
    pass


class LockTimeoutError(ConflictError):
    """Lock for a schedule or booking was not acquired before the caller's deadline"""


class NoPolicyError(NotFoundError):
    pass


class PersistenceFailureError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 503)
