"""Human-facing code generators for bookings and schedules"""
import itertools
import random
import threading
import time

from .constants import BusinessRules

_SUFFIX_MODULUS = 10 ** BusinessRules.BOOKING_REFERENCE_SUFFIX_DIGITS

# Random starting point per process, then stepped under a lock so codes minted
# within the same millisecond by concurrent requests never repeat in-process.
# Cross-process collisions are caught by the unique constraint and retried.
_suffix_sequence = itertools.count(random.randrange(_SUFFIX_MODULUS))
_suffix_lock = threading.Lock()


def _next_suffix():
    with _suffix_lock:
        return next(_suffix_sequence) % _SUFFIX_MODULUS


def generate_booking_reference(now_ms=None):
    """
    Build a booking reference: IC + epoch milliseconds + zero-padded suffix.

    Args:
        now_ms: Override for the timestamp part (milliseconds since epoch)

    Returns:
        Upper-case reference string, e.g. IC1767225600000004217
    """
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = str(_next_suffix()).zfill(BusinessRules.BOOKING_REFERENCE_SUFFIX_DIGITS)
    return f"{BusinessRules.BOOKING_REFERENCE_PREFIX}{timestamp}{suffix}".upper()


def is_booking_reference(value):
    prefix = BusinessRules.BOOKING_REFERENCE_PREFIX
    return (
        isinstance(value, str)
        and value.startswith(prefix)
        and value[len(prefix):].isdigit()
    )


def generate_schedule_code(departure_at):
    """SCH-YYYYMMDD-HHMM-NN from the departure time"""
    return f"SCH-{departure_at:%Y%m%d}-{departure_at:%H%M}-{random.randint(0, 99):02d}"
