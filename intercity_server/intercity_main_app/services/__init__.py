"""Services package - business logic layer"""

from .exceptions import (
    BookingEngineError,
    BookingValidationError,
    ResourceNotFoundError,
    CompanyNotVerifiedError,
    InsufficientCapacityError,
    AlreadyCancelledError,
    NotCancellableError,
    InvalidTransitionError,
    ImmutableAfterDepartureError,
    LedgerCorruptionError,
    ReferenceGenerationExhaustedError,
    TransactionTimeoutError,
)
from .seat_ledger import SeatLedger
from .booking_service import BookingService
from .route_service import RouteService
from .schedule_service import ScheduleService, BulkCancellationResult
from .notification_service import NotificationService
from .transactions import atomic_unit

__all__ = [
    'BookingEngineError',
    'BookingValidationError',
    'ResourceNotFoundError',
    'CompanyNotVerifiedError',
    'InsufficientCapacityError',
    'AlreadyCancelledError',
    'NotCancellableError',
    'InvalidTransitionError',
    'ImmutableAfterDepartureError',
    'LedgerCorruptionError',
    'ReferenceGenerationExhaustedError',
    'TransactionTimeoutError',
    'SeatLedger',
    'BookingService',
    'RouteService',
    'ScheduleService',
    'BulkCancellationResult',
    'NotificationService',
    'atomic_unit',
]
