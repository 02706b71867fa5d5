"""Typed failures raised by the booking engine.

Every error carries a machine-readable ``kind`` and the HTTP status the API
layer should answer with. The coordinator raises them from inside the
atomic unit, so raising one always rolls back the whole unit.
"""


class BookingEngineError(Exception):
    """Base error for the booking engine"""
    kind = 'BookingEngineError'
    status_code = 500
    default_message = 'Booking engine error'
    retryable = False

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'kind': self.kind, 'message': self.message, 'retryable': self.retryable}


class BookingValidationError(BookingEngineError):
    """Raised for caller mistakes: bad fields, seat count out of range"""
    kind = 'Validation'
    status_code = 400
    default_message = 'Invalid request'


class ResourceNotFoundError(BookingEngineError):
    """Raised when a schedule, booking, route or company is unknown to the caller"""
    kind = 'NotFound'
    status_code = 404
    default_message = 'Resource not found'


class CompanyNotVerifiedError(BookingEngineError):
    """Raised when an unverified company tries to publish routes"""
    kind = 'Forbidden'
    status_code = 403
    default_message = 'Company must be verified to create routes'


class InsufficientCapacityError(BookingEngineError):
    """Raised when not enough seats are left at commit time"""
    kind = 'InsufficientCapacity'
    status_code = 400
    default_message = 'Not enough seats available'
    retryable = True


class AlreadyCancelledError(BookingEngineError):
    """Raised when trying to cancel an already cancelled booking"""
    kind = 'AlreadyCancelled'
    status_code = 400
    default_message = 'Booking already cancelled'


class NotCancellableError(BookingEngineError):
    """Raised when the booking's status no longer allows cancellation"""
    kind = 'NotCancellable'
    status_code = 400
    default_message = 'Booking cannot be cancelled'


class InvalidTransitionError(BookingEngineError):
    kind = 'InvalidTransition'
    status_code = 400
    default_message = 'Invalid status transition'


class ImmutableAfterDepartureError(BookingEngineError):
    kind = 'ImmutableAfterDeparture'
    status_code = 400
    default_message = 'Cannot update schedule after departure'


class LedgerCorruptionError(BookingEngineError):
    """Raised when a seat mutation would break the ledger invariant. Never auto-corrected."""
    kind = 'LedgerCorruption'
    status_code = 500
    default_message = 'Seat ledger invariant violated'


class ReferenceGenerationExhaustedError(BookingEngineError):
    kind = 'ReferenceGenerationExhausted'
    status_code = 500
    default_message = 'Could not allocate a unique booking reference'


class TransactionTimeoutError(BookingEngineError):
    """Raised when the store cannot complete the atomic unit in time"""
    kind = 'TransactionTimeout'
    status_code = 503
    default_message = 'The booking could not be completed in time, please retry'
    retryable = True
