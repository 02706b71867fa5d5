"""Route service - business logic for company routes"""
import logging

from ..models import Route
from ..utils.constants import BusinessRules, ScheduleStatus, NIGERIA_STATES
from .exceptions import BookingValidationError, CompanyNotVerifiedError, ResourceNotFoundError
from .transactions import atomic_unit

logger = logging.getLogger(__name__)

ROUTE_FIELDS = (
    'route_name', 'departure_state', 'departure_city', 'departure_terminal', 'arrival_state',
    'arrival_city', 'arrival_terminal', 'estimated_duration_minutes', 'estimated_distance_km',
    'vehicle_type', 'amenities', 'is_active',
)
REQUIRED_ROUTE_FIELDS = (
    'route_name', 'departure_state', 'departure_city', 'arrival_state', 'arrival_city',
    'estimated_duration_minutes',
)


def _validate_route_fields(fields):
    unknown = set(fields) - set(ROUTE_FIELDS)
    if unknown:
        raise BookingValidationError(f"Unknown route fields: {', '.join(sorted(unknown))}")

    for name in ('departure_state', 'arrival_state'):
        if name in fields and fields[name] not in NIGERIA_STATES:
            raise BookingValidationError("Invalid state selected")

    if 'estimated_duration_minutes' in fields:
        duration = fields['estimated_duration_minutes']
        if isinstance(duration, bool) or not isinstance(duration, int) \
                or not BusinessRules.MIN_ROUTE_DURATION_MINUTES <= duration <= BusinessRules.MAX_ROUTE_DURATION_MINUTES:
            raise BookingValidationError(
                f"estimated_duration_minutes must be between {BusinessRules.MIN_ROUTE_DURATION_MINUTES} "
                f"and {BusinessRules.MAX_ROUTE_DURATION_MINUTES}"
            )


class RouteService:
    """Company-owned routes that scheduled departures run on"""

    def create_route(self, company, **fields):
        """
        Create a route for a verified company.

        Raises:
            CompanyNotVerifiedError: company has not been verified yet
            BookingValidationError: missing fields, unknown state or duration out of range
        """
        if not company.is_verified:
            raise CompanyNotVerifiedError()

        missing = [name for name in REQUIRED_ROUTE_FIELDS if fields.get(name) in (None, '')]
        if missing:
            raise BookingValidationError(f"Missing route fields: {', '.join(missing)}")
        _validate_route_fields(fields)

        route = Route.objects.create(company=company, **fields)
        logger.info(f'[ROUTE] Route {route.pk} created by company {company.pk}')
        return route

    def list_company_routes(self, company):
        return Route.objects.filter(company=company).order_by('-created_at', '-pk')

    def get_company_route(self, company, route_id):
        route = Route.objects.filter(pk=route_id, company=company).first()
        if route is None:
            raise ResourceNotFoundError("Route not found")
        return route

    def update_route(self, company, route_id, changes):
        """Edit a route; ownership never changes"""
        _validate_route_fields(changes)

        with atomic_unit('update_route'):
            route = Route.objects.select_for_update().filter(pk=route_id, company=company).first()
            if route is None:
                raise ResourceNotFoundError("Route not found")

            for name, value in changes.items():
                setattr(route, name, value)
            route.save(update_fields=list(changes) or None)

        return route

    def delete_route(self, company, route_id):
        """
        Remove a route with no upcoming departures.

        A route that still has past departures is deactivated rather than
        deleted so their bookings keep their route.

        Returns:
            True if the row was deleted, False if it was deactivated
        """
        with atomic_unit('delete_route'):
            route = Route.objects.select_for_update().filter(pk=route_id, company=company).first()
            if route is None:
                raise ResourceNotFoundError("Route not found")

            if route.schedules.filter(status__in=ScheduleStatus.UPCOMING).exists():
                raise BookingValidationError("Cannot delete route with active schedules")

            if route.schedules.exists():
                route.is_active = False
                route.save(update_fields=['is_active'])
                logger.info(f'[ROUTE] Route {route.pk} deactivated, past schedules kept')
                return False

            route.delete()

        logger.info(f'[ROUTE] Route {route_id} deleted by company {company.pk}')
        return True
