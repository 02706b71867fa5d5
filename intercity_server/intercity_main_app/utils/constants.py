"""Centralized constants and business rules"""

class ScheduleStatus:
    SCHEDULED = 'scheduled'
    BOARDING = 'boarding'
    DEPARTED = 'departed'
    ARRIVED = 'arrived'
    CANCELLED = 'cancelled'
    DELAYED = 'delayed'

    CHOICES = [
        (SCHEDULED, 'Scheduled'),
        (BOARDING, 'Boarding'),
        (DEPARTED, 'Departed'),
        (ARRIVED, 'Arrived'),
        (CANCELLED, 'Cancelled'),
        (DELAYED, 'Delayed'),
    ]

    # Directed edges an operator may take. departed -> arrived is reserved for
    # the system clock (see SeatLedger.transition_status).
    TRANSITIONS = {
        SCHEDULED: {BOARDING, CANCELLED, DELAYED},
        DELAYED: {SCHEDULED, BOARDING, CANCELLED},
        BOARDING: {DEPARTED},
        DEPARTED: {ARRIVED},
        ARRIVED: set(),
        CANCELLED: set(),
    }

    LOCKED = {DEPARTED, ARRIVED}

    # Departures still expected to run; a route carrying one cannot be removed
    UPCOMING = {SCHEDULED, BOARDING, DELAYED}


class BookingStatus:
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CHECKED_IN = 'checked_in'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    NO_SHOW = 'no_show'
    REFUNDED = 'refunded'

    CHOICES = [
        (PENDING, 'Pending'),
        (CONFIRMED, 'Confirmed'),
        (CHECKED_IN, 'Checked In'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
        (NO_SHOW, 'No Show'),
        (REFUNDED, 'Refunded'),
    ]

    # Bookings in these states hold seats on the ledger
    SEAT_HOLDING = (CONFIRMED, CHECKED_IN, COMPLETED)
    NON_CANCELLABLE = (CANCELLED, COMPLETED, NO_SHOW, REFUNDED)
    REFUNDABLE = (CONFIRMED, CHECKED_IN)
    # Swept up when an operator cancels a whole departure
    ACTIVE = (CONFIRMED, CHECKED_IN)


class PaymentStatus:
    PENDING = 'pending'
    PARTIAL = 'partial'
    PAID = 'paid'
    REFUNDED = 'refunded'
    FAILED = 'failed'

    CHOICES = [
        (PENDING, 'Pending'),
        (PARTIAL, 'Partial'),
        (PAID, 'Paid'),
        (REFUNDED, 'Refunded'),
        (FAILED, 'Failed'),
    ]


class PaymentMethod:
    CARD = 'card'
    TRANSFER = 'transfer'
    WALLET = 'wallet'
    CASH = 'cash'

    CHOICES = [
        (CARD, 'Card'),
        (TRANSFER, 'Bank Transfer'),
        (WALLET, 'Wallet'),
        (CASH, 'Cash'),
    ]


class BookingSource:
    WEB = 'web'
    MOBILE = 'mobile'
    AGENT = 'agent'
    ADMIN = 'admin'

    CHOICES = [
        (WEB, 'Web'),
        (MOBILE, 'Mobile App'),
        (AGENT, 'Agent'),
        (ADMIN, 'Admin'),
    ]


class IdType:
    NIN = 'NIN'
    DRIVER_LICENSE = 'Driver License'
    VOTER_CARD = 'Voter Card'
    PASSPORT = 'International Passport'
    OTHER = 'Other'

    CHOICES = [
        (NIN, 'NIN'),
        (DRIVER_LICENSE, 'Driver License'),
        (VOTER_CARD, 'Voter Card'),
        (PASSPORT, 'International Passport'),
        (OTHER, 'Other'),
    ]


class NotificationType:
    BOOKING_CONFIRMED = 'booking_confirmed'
    BOOKING_CANCELLED = 'booking_cancelled'

    CHOICES = [
        (BOOKING_CONFIRMED, 'Booking Confirmed'),
        (BOOKING_CANCELLED, 'Booking Cancelled'),
    ]


class BusinessRules:
    """Business rules and limits"""
    MAX_SEATS_PER_BOOKING = 10
    MIN_TOTAL_SEATS = 1
    MAX_TOTAL_SEATS = 100
    MIN_PRICE_PER_SEAT = 1000          # kobo
    MAX_PRICE_PER_SEAT = 5000000       # kobo
    MIN_ROUTE_DURATION_MINUTES = 30
    MAX_ROUTE_DURATION_MINUTES = 1440
    REFUND_WINDOW_HOURS = 24
    BOOKING_REFERENCE_PREFIX = 'IC'
    BOOKING_REFERENCE_SUFFIX_DIGITS = 6
    BOOKING_REFERENCE_MAX_ATTEMPTS = 3
    DEFAULT_PASSENGER_CANCEL_REASON = 'Cancelled by passenger'
    DEFAULT_SCHEDULE_CANCEL_REASON = 'Schedule cancelled by company'


NIGERIA_STATES = (
    'Abia', 'Adamawa', 'Akwa Ibom', 'Anambra', 'Bauchi', 'Bayelsa',
    'Benue', 'Borno', 'Cross River', 'Delta', 'Ebonyi', 'Edo',
    'Ekiti', 'Enugu', 'FCT', 'Gombe', 'Imo', 'Jigawa',
    'Kaduna', 'Kano', 'Katsina', 'Kebbi', 'Kogi', 'Kwara',
    'Lagos', 'Nasarawa', 'Niger', 'Ogun', 'Ondo', 'Osun',
    'Oyo', 'Plateau', 'Rivers', 'Sokoto', 'Taraba', 'Yobe', 'Zamfara',
)
