"""Utils package - helper functions and utilities"""

from .company_utils import get_company_for_user
from .constants import *
from .reference_codes import generate_booking_reference, generate_schedule_code

__all__ = [
    'get_company_for_user',
    'generate_booking_reference',
    'generate_schedule_code',
]
