"""
Tests for the carpool and ride request endpoints.
"""

from unittest.mock import patch

import pytest

from carpool.models import RideRequest
from carpool.routing import RoutingError
from carpool.services import RideRequestService
from utils.distance_calculator import Location

PROVIDERS_URL = '/api/v1/carpool/providers/'
STATUS_URL = '/api/v1/carpool/status/'
ROUTE_URL = '/api/v1/carpool/route/'
PLAN_URL = '/api/v1/carpool/route/plan/'
RIDES_URL = '/api/v1/ride-requests/'

PICKUP = {'lat': 12.9352, 'lng': 77.6245}


@pytest.mark.django_db
class TestProviders:

    def test_requires_authentication(self, api_client):
        response = api_client.get(PROVIDERS_URL)

        assert response.status_code == 401
        assert response.data['code'] == 'not_authenticated'

    def test_sorted_by_distance(self, client_for, make_user, make_provider):
        far = make_provider(start=(13.0827, 80.2707))
        near = make_provider(start=(12.9720, 77.5950))
        unknown = make_provider()
        client = client_for(make_user())

        response = client.get(PROVIDERS_URL, {'lat': 12.9716, 'lng': 77.5946})

        assert response.status_code == 200
        assert [p['id'] for p in response.data] == [near.id, far.id, unknown.id]
        assert response.data[0]['distance_km'] < 1
        assert response.data[2]['distance_km'] is None

    def test_only_available_offers(self, client_for, make_user, make_provider):
        available = make_provider()
        make_provider(seats=0)
        make_provider(carpool_offer=False)
        make_provider(status='rejected')
        client = client_for(make_user())

        response = client.get(PROVIDERS_URL)

        assert [p['id'] for p in response.data] == [available.id]
        assert response.data[0]['distance_km'] is None

    def test_excludes_caller(self, client_for, make_provider):
        mine = make_provider()
        other = make_provider()

        response = client_for(mine.user).get(PROVIDERS_URL)

        assert [p['id'] for p in response.data] == [other.id]

    @pytest.mark.parametrize('params', [
        {'lat': 'abc', 'lng': '77.5'},
        {'lat': '12.9'},
        {'lat': '91', 'lng': '0'},
        {'lat': '0', 'lng': '-181'},
    ])
    def test_invalid_coordinates(self, client_for, make_user, params):
        response = client_for(make_user()).get(PROVIDERS_URL, params)

        assert response.status_code == 400


@pytest.mark.django_db
class TestCarpoolStatus:

    def test_no_parking_request(self, client_for, make_user):
        response = client_for(make_user()).get(STATUS_URL)

        assert response.data == {'status': 'not_found'}

    def test_latest_request(self, client_for, make_provider):
        provider = make_provider()

        response = client_for(provider.user).get(STATUS_URL)

        assert response.data['status'] == 'approved'
        assert response.data['data']['id'] == provider.id


@pytest.mark.django_db
class TestRoute:

    def test_set_route(self, client_for, make_provider):
        provider = make_provider()
        payload = {
            'start_location': {'lat': 12.91, 'lng': 77.60, 'address': 'Home'},
            'end_location': {'lat': 12.97, 'lng': 77.75},
            'route': [{'lat': 12.93, 'lng': 77.65}],
        }

        response = client_for(provider.user).put(ROUTE_URL, payload, format='json')

        provider.refresh_from_db()
        assert response.status_code == 200
        assert provider.start_location == Location(12.91, 77.60, 'Home')
        assert provider.end_location == Location(12.97, 77.75, 'Location at 12.97000, 77.75000')
        assert provider.route == [{'lat': 12.93, 'lng': 77.65, 'address': 'Location at 12.93000, 77.65000'}]

    def test_requires_approved_request(self, client_for, make_user):
        payload = {'start_location': PICKUP, 'end_location': PICKUP}

        response = client_for(make_user()).put(ROUTE_URL, payload, format='json')

        assert response.status_code == 403
        assert response.data['code'] == 'not_carpool_provider'

    def test_invalid_location(self, client_for, make_provider):
        provider = make_provider()
        payload = {'start_location': {'lat': 100, 'lng': 0}, 'end_location': PICKUP}

        response = client_for(provider.user).put(ROUTE_URL, payload, format='json')

        assert response.status_code == 400
        assert 'start_location' in response.data['errors']


@pytest.mark.django_db
class TestRoutePlan:

    def test_route_not_configured(self, client_for, make_provider):
        provider = make_provider()

        response = client_for(provider.user).get(PLAN_URL)

        assert response.status_code == 400
        assert response.data['code'] == 'route_not_configured'

    @patch('carpool.routing.RoutingService.fetch_polyline', side_effect=RoutingError('down'))
    def test_plan_orders_accepted_pickups(self, mock_fetch, client_for, make_user, make_provider):
        provider = make_provider(seats=3, start=(0, 0), end=(0, 4))
        for lng in (3, 1):
            ride = RideRequestService.create_request(make_user(), provider.id, Location(0, lng))
            RideRequestService.accept(provider.user, ride.id)
        RideRequestService.create_request(make_user(), provider.id, Location(0, 2))

        response = client_for(provider.user).get(PLAN_URL)

        assert response.status_code == 200
        assert [stop['lng'] for stop in response.data['stops']] == [0, 1, 3, 4]
        assert response.data['fallback'] is True
        assert response.data['polyline'] == [[0, 0], [0, 1], [0, 3], [0, 4]]
        assert response.data['distance_km'] == pytest.approx(444.78, abs=0.01)
        assert response.data['provider_id'] == provider.id

    @patch('carpool.routing.RoutingService.fetch_polyline')
    def test_plan_uses_road_polyline(self, mock_fetch, client_for, make_provider):
        mock_fetch.return_value = [(0, 0), (0.1, 0.5), (0, 1)]
        provider = make_provider(start=(0, 0), end=(0, 1))

        response = client_for(provider.user).get(PLAN_URL)

        assert response.data['fallback'] is False
        assert response.data['polyline'] == [[0, 0], [0.1, 0.5], [0, 1]]


@pytest.mark.django_db
class TestRideRequestEndpoints:

    def test_create(self, client_for, make_user, make_provider):
        provider = make_provider()
        payload = {'provider_id': provider.id, 'location': PICKUP, 'message': 'Near the metro'}

        response = client_for(make_user()).post(RIDES_URL, payload, format='json')

        assert response.status_code == 201
        assert response.data['request']['status'] == 'pending'
        assert response.data['request']['provider_request'] == {
            'depart_time_from_home': '08:30',
            'departure_time_from_office': '18:00',
        }
        assert RideRequest.objects.filter(pk=response.data['request_id']).exists()

    def test_create_duplicate(self, client_for, make_user, make_provider):
        provider = make_provider()
        client = client_for(make_user())
        payload = {'provider_id': provider.id, 'location': PICKUP}
        client.post(RIDES_URL, payload, format='json')

        response = client.post(RIDES_URL, payload, format='json')

        assert response.status_code == 409
        assert response.data['code'] == 'duplicate_ride_request'

    def test_create_without_seats(self, client_for, make_user, make_provider):
        provider = make_provider(seats=0)

        response = client_for(make_user()).post(
            RIDES_URL, {'provider_id': provider.id, 'location': PICKUP}, format='json'
        )

        assert response.status_code == 409
        assert response.data == {
            'error': 'Ride provider not found or has no available seats.',
            'code': 'provider_unavailable',
        }

    def test_create_invalid_payload(self, client_for, make_user):
        response = client_for(make_user()).post(RIDES_URL, {'location': {'lat': 'x'}}, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'invalid'
        assert 'provider_id' in response.data['errors']

    def test_mine_and_incoming(self, client_for, make_user, make_provider):
        provider = make_provider(start=(12.9, 77.6), end=(12.97, 77.7))
        seeker = make_user()
        ride = RideRequestService.create_request(seeker, provider.id, Location(12.93, 77.62))

        mine = client_for(seeker).get(RIDES_URL + 'mine/')
        incoming = client_for(provider.user).get(RIDES_URL + 'incoming/')

        assert [r['id'] for r in mine.data['requests']] == [ride.id]
        assert [r['id'] for r in incoming.data['requests']] == [ride.id]
        assert incoming.data['provider_data']['seats_available'] == 2
        assert incoming.data['provider_data']['start_location']['lat'] == 12.9

    def test_incoming_for_non_provider(self, client_for, make_user):
        response = client_for(make_user()).get(RIDES_URL + 'incoming/')

        assert response.status_code == 403

    def test_accept_and_reject(self, client_for, make_user, make_provider):
        provider = make_provider()
        ride_a = RideRequestService.create_request(make_user(), provider.id, Location(1, 1))
        ride_b = RideRequestService.create_request(make_user(), provider.id, Location(1, 2))
        client = client_for(provider.user)

        accepted = client.post(f'{RIDES_URL}{ride_a.id}/accept/')
        rejected = client.post(f'{RIDES_URL}{ride_b.id}/reject/')
        again = client.post(f'{RIDES_URL}{ride_a.id}/accept/')

        assert accepted.status_code == 200
        assert accepted.data['request']['status'] == 'accepted'
        assert rejected.data['request']['status'] == 'rejected'
        assert again.status_code == 409
        assert again.data['code'] == 'invalid_ride_transition'

    def test_last_seat_conflict(self, client_for, make_user, make_provider):
        provider = make_provider(seats=1)
        ride_a = RideRequestService.create_request(make_user(), provider.id, Location(1, 1))
        ride_b = RideRequestService.create_request(make_user(), provider.id, Location(1, 2))
        client = client_for(provider.user)

        client.post(f'{RIDES_URL}{ride_a.id}/accept/')
        response = client.post(f'{RIDES_URL}{ride_b.id}/accept/')

        assert response.status_code == 409
        assert response.data == {'error': 'No seats available for this ride.', 'code': 'seats_exhausted'}

    def test_update_status(self, client_for, make_user, make_provider):
        provider = make_provider()
        ride = RideRequestService.create_request(make_user(), provider.id, Location(1, 1))
        client = client_for(provider.user)

        invalid = client.post(f'{RIDES_URL}{ride.id}/update_status/', {'status': 'maybe'}, format='json')
        valid = client.post(f'{RIDES_URL}{ride.id}/update_status/', {'status': 'accepted'}, format='json')

        assert invalid.status_code == 400
        assert valid.status_code == 200
        assert valid.data['message'] == 'Ride request accepted successfully'

    def test_wrong_provider_gets_not_found(self, client_for, make_user, make_provider):
        provider, other = make_provider(), make_provider()
        ride = RideRequestService.create_request(make_user(), provider.id, Location(1, 1))

        response = client_for(other.user).post(f'{RIDES_URL}{ride.id}/accept/')

        assert response.status_code == 404

    def test_retrieve_limited_to_participants(self, client_for, make_user, make_provider):
        provider = make_provider()
        seeker = make_user()
        ride = RideRequestService.create_request(seeker, provider.id, Location(1, 1))

        assert client_for(seeker).get(f'{RIDES_URL}{ride.id}/').status_code == 200
        assert client_for(provider.user).get(f'{RIDES_URL}{ride.id}/').status_code == 200
        assert client_for(make_user()).get(f'{RIDES_URL}{ride.id}/').status_code == 403
