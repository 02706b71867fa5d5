"""Helpers for amounts held in minor currency units (kobo)"""

MINOR_UNITS_PER_MAJOR = 100


def format_minor_units(amount):
    """Render an integer kobo amount as a major-unit string, e.g. 250050 -> '2500.50'"""
    sign = '-' if amount < 0 else ''
    major, minor = divmod(abs(int(amount)), MINOR_UNITS_PER_MAJOR)
    return f"{sign}{major}.{minor:02d}"


def multiply_price(price_per_seat, number_of_seats):
    """Total for a booking; both operands must be integers"""
    if not isinstance(price_per_seat, int) or not isinstance(number_of_seats, int):
        raise TypeError("Prices and seat counts must be integers (minor units)")
    return price_per_seat * number_of_seats
