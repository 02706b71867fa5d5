"""Tests for route service"""

from django.test import TestCase

from ..models import Route
from ..services.exceptions import BookingValidationError, CompanyNotVerifiedError, ResourceNotFoundError
from ..services.route_service import RouteService
from ..utils.constants import ScheduleStatus
from .factories import make_company, make_route, make_schedule

ROUTE = {
    'route_name': 'Lagos - Ibadan Express',
    'departure_state': 'Lagos',
    'departure_city': 'Ojota',
    'arrival_state': 'Oyo',
    'arrival_city': 'Ibadan',
    'estimated_duration_minutes': 150,
}


class RouteServiceTest(TestCase):
    def setUp(self):
        self.company = make_company()
        self.service = RouteService()

    def test_create_route(self):
        route = self.service.create_route(self.company, amenities=['ac', 'wifi'], **ROUTE)

        self.assertEqual(route.company, self.company)
        self.assertEqual(route.origin_label, 'Ojota, Lagos')
        self.assertEqual(route.amenities, ['ac', 'wifi'])
        self.assertTrue(route.is_active)

    def test_unverified_company_cannot_create_routes(self):
        pending = make_company(is_verified=False)

        with self.assertRaises(CompanyNotVerifiedError):
            self.service.create_route(pending, **ROUTE)
        self.assertFalse(Route.objects.filter(company=pending).exists())

    def test_create_route_validation(self):
        for overrides in (
            {'departure_state': 'Atlantis'},
            {'estimated_duration_minutes': 10},
            {'route_name': ''},
        ):
            with self.assertRaises(BookingValidationError):
                self.service.create_route(self.company, **{**ROUTE, **overrides})

        with self.assertRaises(BookingValidationError):
            self.service.create_route(self.company, company_id=99, **ROUTE)

    def test_list_company_routes_newest_first(self):
        first = make_route(self.company)
        second = make_route(self.company, route_name='Lagos - Kano')
        make_route(make_company())

        self.assertEqual(list(self.service.list_company_routes(self.company)), [second, first])

    def test_update_route(self):
        route = make_route(self.company)

        updated = self.service.update_route(self.company, route.pk, {'arrival_city': 'Gwagwalada', 'is_active': False})

        route.refresh_from_db()
        self.assertEqual(updated.arrival_city, 'Gwagwalada')
        self.assertFalse(route.is_active)
        self.assertEqual(route.company, self.company)

    def test_update_rejects_foreign_routes_and_unknown_fields(self):
        foreign = make_route(make_company())

        with self.assertRaises(ResourceNotFoundError):
            self.service.update_route(self.company, foreign.pk, {'route_name': 'Mine now'})
        with self.assertRaises(BookingValidationError):
            self.service.update_route(self.company, make_route(self.company).pk, {'company': self.company})

    def test_delete_unused_route(self):
        route = make_route(self.company)

        self.assertTrue(self.service.delete_route(self.company, route.pk))
        self.assertFalse(Route.objects.filter(pk=route.pk).exists())

    def test_route_with_upcoming_departures_cannot_be_deleted(self):
        for status in (ScheduleStatus.SCHEDULED, ScheduleStatus.BOARDING, ScheduleStatus.DELAYED):
            route = make_route(self.company)
            make_schedule(route, status=status)

            with self.assertRaises(BookingValidationError):
                self.service.delete_route(self.company, route.pk)
            self.assertTrue(Route.objects.filter(pk=route.pk, is_active=True).exists())

    def test_route_with_past_departures_is_deactivated(self):
        route = make_route(self.company)
        make_schedule(route, status=ScheduleStatus.CANCELLED)

        self.assertFalse(self.service.delete_route(self.company, route.pk))

        route.refresh_from_db()
        self.assertFalse(route.is_active)

    def test_delete_foreign_route_is_not_found(self):
        foreign = make_route(make_company())

        with self.assertRaises(ResourceNotFoundError):
            self.service.delete_route(self.company, foreign.pk)
        self.assertTrue(Route.objects.filter(pk=foreign.pk).exists())
