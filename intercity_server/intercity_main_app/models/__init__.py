"""Models package - domain-based organization"""

# Company models
from .company import TransportCompany

# Route models
from .route import Route

# Schedule (seat ledger) models
from .schedule import ScheduledDeparture

# Booking models
from .booking import Booking

# Notification models
from .notification import Notification

__all__ = [
    'TransportCompany', 'Route', 'ScheduledDeparture', 'Booking', 'Notification',
]
