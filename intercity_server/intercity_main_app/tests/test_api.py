"""HTTP surface tests"""

from datetime import timedelta
from unittest import mock

from django.db import OperationalError
from django.test import override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from ..models import Booking, Route
from ..services.booking_service import BookingService
from ..services.seat_ledger import SeatLedger
from ..utils.constants import BookingStatus, PaymentStatus, ScheduleStatus
from .factories import PASSENGER, make_company, make_route, make_schedule, make_user


def booking_payload(schedule, seats=2, **extra):
    payload = {
        'schedule_id': schedule.pk,
        'passenger_details': dict(PASSENGER),
        'number_of_seats': seats,
    }
    payload.update(extra)
    return payload


@override_settings(NOTIFICATION_DISPATCH_ASYNC=False, NOTIFICATION_WEBHOOK_URL='')
class BookingApiTest(APITestCase):
    def setUp(self):
        self.user = make_user('passenger')
        self.company = make_company()
        self.route = make_route(self.company)
        self.schedule = make_schedule(self.route, total_seats=3)
        self.login(self.user)

    def login(self, user):
        token = RefreshToken.for_user(user).access_token
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    def test_create_booking(self):
        response = self.client.post('/api/bookings/', booking_payload(self.schedule), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        self.assertTrue(response.data['success'])
        self.assertEqual(data['status'], BookingStatus.CONFIRMED)
        self.assertEqual(data['number_of_seats'], 2)
        self.assertEqual(data['total_amount'], 3000000)
        self.assertEqual(data['passenger_details']['email'], 'ada.okafor@example.com')
        self.assertTrue(data['refundable'])
        self.schedule.refresh_from_db()
        self.assertEqual(self.schedule.available_seats, 1)

    def test_requires_authentication(self):
        self.client.credentials()

        response = self.client.post('/api/bookings/', booking_payload(self.schedule), format='json')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error']['kind'], 'Unauthorized')

    def test_insufficient_capacity_envelope(self):
        response = self.client.post('/api/bookings/', booking_payload(self.schedule, seats=4), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['success'], False)
        self.assertEqual(response.data['error']['kind'], 'InsufficientCapacity')
        self.assertEqual(response.data['error']['message'], 'Only 3 seats available')
        self.assertTrue(response.data['error']['retryable'])

    def test_store_timeout_envelope(self):
        with mock.patch.object(SeatLedger, 'reserve', side_effect=OperationalError('could not obtain lock')):
            response = self.client.post('/api/bookings/', booking_payload(self.schedule), format='json')

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data['error']['kind'], 'TransactionTimeout')
        self.assertTrue(response.data['error']['retryable'])
        self.assertFalse(Booking.objects.exists())
        self.schedule.refresh_from_db()
        self.assertEqual(self.schedule.available_seats, 3)

    def test_validation_errors_share_one_kind(self):
        bad_payloads = [
            booking_payload(self.schedule, seats=0),
            booking_payload(self.schedule, seats=11),
            booking_payload(self.schedule, surprise='field'),
            {'schedule_id': self.schedule.pk, 'number_of_seats': 1},
            booking_payload(self.schedule, passenger_details={'full_name': 'A', 'email': 'nope', 'phone': '1'}),
        ]
        for payload in bad_payloads:
            response = self.client.post('/api/bookings/', payload, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, payload)
            self.assertEqual(response.data['error']['kind'], 'Validation')

        self.assertFalse(Booking.objects.exists())

    def test_unknown_schedule_is_404(self):
        self.schedule.pk = 987654
        response = self.client.post('/api/bookings/', booking_payload(self.schedule), format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error']['kind'], 'NotFound')

    def test_get_booking_is_owner_only(self):
        booking = BookingService().create_booking(self.user, self.schedule.pk, dict(PASSENGER), 1)

        response = self.client.get(f'/api/bookings/{booking.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['booking_reference'], booking.booking_reference)

        self.login(make_user('stranger'))
        response = self.client.get(f'/api/bookings/{booking.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_bookings(self):
        BookingService().create_booking(self.user, self.schedule.pk, dict(PASSENGER), 1)

        response = self.client.get('/api/bookings/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 1)

    def test_cancel_booking(self):
        booking = BookingService().create_booking(self.user, self.schedule.pk, dict(PASSENGER), 2)

        response = self.client.post(f'/api/bookings/{booking.pk}/cancel/', {'reason': 'Sick'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['booking']['status'], BookingStatus.CANCELLED)
        self.assertEqual(response.data['data']['booking']['cancellation_reason'], 'Sick')

        response = self.client.post(f'/api/bookings/{booking.pk}/cancel/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'AlreadyCancelled')

        response = self.client.post('/api/bookings/424242/cancel/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


@override_settings(NOTIFICATION_DISPATCH_ASYNC=False, NOTIFICATION_WEBHOOK_URL='')
class OperatorApiTest(APITestCase):
    def setUp(self):
        self.operator = make_user('operator')
        self.company = make_company(user=self.operator)
        self.route = make_route(self.company)
        self.schedule = make_schedule(self.route, total_seats=20)
        self.client.force_authenticate(user=self.operator)

    def book(self, seats=2):
        return BookingService().create_booking(make_user(), self.schedule.pk, dict(PASSENGER), seats)

    def test_passengers_are_not_operators(self):
        self.client.force_authenticate(user=make_user())

        response = self.client.get('/api/operator/schedules/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error']['kind'], 'Forbidden')

    def test_create_and_list_schedules(self):
        departure = timezone.now() + timedelta(days=5)
        response = self.client.post('/api/operator/schedules/', {
            'route_id': self.route.pk,
            'departure_at': departure.isoformat(),
            'total_seats': 14,
            'price_per_seat': 1800000,
            'vehicle_number': 'abc-987',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['available_seats'], 14)
        self.assertEqual(response.data['data']['vehicle_number'], 'ABC-987')

        response = self.client.get('/api/operator/schedules/')
        self.assertEqual(len(response.data['data']), 2)

    def test_schedule_listing_date_range(self):
        later = make_schedule(self.route, departure_in=timedelta(days=9))
        start = (timezone.now() + timedelta(days=5)).date().isoformat()

        response = self.client.get('/api/operator/schedules/', {'start_date': start})
        self.assertEqual([s['id'] for s in response.data['data']], [later.pk])

        response = self.client.get('/api/operator/schedules/', {'start_date': start, 'end_date': '2020-01-01'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'Validation')

    def test_create_schedule_with_foreign_route_is_404(self):
        foreign = make_route(make_company())
        response = self.client.post('/api/operator/schedules/', {
            'route_id': foreign.pk,
            'departure_at': (timezone.now() + timedelta(days=5)).isoformat(),
            'total_seats': 14,
            'price_per_seat': 1800000,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_schedule(self):
        self.book(5)

        response = self.client.patch(f'/api/operator/schedules/{self.schedule.pk}/', {'total_seats': 10}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['available_seats'], 5)

    def test_update_departed_schedule_is_rejected(self):
        self.schedule.status = ScheduleStatus.DEPARTED
        self.schedule.save()

        response = self.client.put(f'/api/operator/schedules/{self.schedule.pk}/', {'notes': 'x'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'ImmutableAfterDeparture')

    def test_delete_cancels_schedule_and_bookings(self):
        for _ in range(3):
            self.book()

        response = self.client.delete(
            f'/api/operator/schedules/{self.schedule.pk}/', {'reason': 'Strike'}, format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['cancelled_bookings'], 3)
        self.assertEqual(response.data['data']['failures'], [])
        self.schedule.refresh_from_db()
        self.assertEqual(self.schedule.status, ScheduleStatus.CANCELLED)
        self.assertEqual(self.schedule.booked_seats, 0)

    def test_status_endpoint(self):
        response = self.client.post(
            f'/api/operator/schedules/{self.schedule.pk}/status/', {'status': 'boarding'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], 'boarding')

        response = self.client.post(
            f'/api/operator/schedules/{self.schedule.pk}/status/', {'status': 'scheduled'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'InvalidTransition')

    def test_delay_requires_minutes(self):
        response = self.client.post(
            f'/api/operator/schedules/{self.schedule.pk}/status/', {'status': 'delayed'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_booking_handling(self):
        booking = self.book()

        response = self.client.get(f'/api/operator/schedules/{self.schedule.pk}/bookings/')
        self.assertEqual(len(response.data['data']), 1)

        response = self.client.post(f'/api/operator/bookings/{booking.pk}/checkin/')
        self.assertEqual(response.data['data']['status'], BookingStatus.CHECKED_IN)

        response = self.client.post(f'/api/operator/bookings/{booking.pk}/complete/')
        self.assertEqual(response.data['data']['status'], BookingStatus.COMPLETED)

        response = self.client.get('/api/operator/bookings/', {'status': 'completed'})
        self.assertEqual(len(response.data['data']), 1)

    def test_no_show_endpoint(self):
        booking = self.book(3)

        response = self.client.post(f'/api/operator/bookings/{booking.pk}/no-show/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.schedule.refresh_from_db()
        self.assertEqual(self.schedule.booked_seats, 0)


class ScheduleSearchApiTest(APITestCase):
    def setUp(self):
        route = make_route(make_company())
        self.schedule = make_schedule(route)

    def test_search_is_public(self):
        response = self.client.get('/api/schedules/search/', {'departure_state': 'Lagos', 'arrival_state': 'FCT'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['id'] for s in response.data['data']], [self.schedule.pk])
        self.assertNotIn('driver_phone', response.data['data'][0])

    def test_search_requires_states(self):
        response = self.client.get('/api/schedules/search/', {'departure_state': 'Lagos'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'Validation')


@override_settings(PAYMENT_WEBHOOK_SECRET='s3cret', NOTIFICATION_DISPATCH_ASYNC=False, NOTIFICATION_WEBHOOK_URL='')
class PaymentResultApiTest(APITestCase):
    def setUp(self):
        schedule = make_schedule(make_route(make_company()), price_per_seat=1000000)
        self.booking = BookingService().create_booking(make_user(), schedule.pk, dict(PASSENGER), 1)

    def test_requires_shared_secret(self):
        response = self.client.post('/api/payments/result/', {
            'booking_reference': self.booking.booking_reference, 'succeeded': True,
        }, format='json', HTTP_X_PAYMENT_SECRET='wrong')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_records_payment(self):
        response = self.client.post('/api/payments/result/', {
            'booking_reference': self.booking.booking_reference,
            'succeeded': True,
            'payment_reference': 'PSK-001',
            'payment_method': 'transfer',
        }, format='json', HTTP_X_PAYMENT_SECRET='s3cret')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['payment_status'], PaymentStatus.PAID)
        self.assertEqual(response.data['data']['status'], BookingStatus.CONFIRMED)


class OperatorRouteApiTest(APITestCase):
    def setUp(self):
        self.operator = make_user('route_operator')
        self.company = make_company(user=self.operator)
        self.client.force_authenticate(user=self.operator)

    def route_payload(self, **extra):
        payload = {
            'route_name': 'Enugu - Port Harcourt',
            'departure_state': 'Enugu',
            'departure_city': 'Enugu',
            'arrival_state': 'Rivers',
            'arrival_city': 'Port Harcourt',
            'estimated_duration_minutes': 240,
        }
        payload.update(extra)
        return payload

    def test_create_and_list_routes(self):
        response = self.client.post('/api/operator/routes/', self.route_payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['destination'], 'Port Harcourt, Rivers')
        self.assertTrue(response.data['data']['is_active'])

        response = self.client.get('/api/operator/routes/')
        self.assertEqual([r['id'] for r in response.data['data']], [Route.objects.get(company=self.company).pk])

    def test_unverified_company_is_forbidden(self):
        self.company.is_verified = False
        self.company.save()

        response = self.client.post('/api/operator/routes/', self.route_payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error']['kind'], 'Forbidden')
        self.assertFalse(Route.objects.exists())

    def test_invalid_state_is_rejected(self):
        response = self.client.post(
            '/api/operator/routes/', self.route_payload(arrival_state='Atlantis'), format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'Validation')

    def test_update_route(self):
        route = make_route(self.company)

        response = self.client.patch(f'/api/operator/routes/{route.pk}/', {'vehicle_type': 'minibus'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['vehicle_type'], 'minibus')

    def test_delete_route(self):
        busy = make_route(self.company)
        make_schedule(busy)
        idle = make_route(self.company)

        response = self.client.delete(f'/api/operator/routes/{busy.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['message'], 'Cannot delete route with active schedules')

        response = self.client.delete(f'/api/operator/routes/{idle.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['data']['deleted'])
        self.assertFalse(Route.objects.filter(pk=idle.pk).exists())

    def test_other_company_routes_are_hidden(self):
        foreign = make_route(make_company())

        response = self.client.get(f'/api/operator/routes/{foreign.pk}/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
