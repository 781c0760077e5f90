"""
Tests for parking requests, admin allocation and the control panel.
"""

from unittest.mock import patch

import pytest

from parking.models import ControlItem, ParkingRequest
from parking.services import AllocationService

REQUESTS_URL = '/api/v1/parking-requests/'
CONTROL_URL = '/api/v1/control-items/'

REQUEST_PAYLOAD = {
    'depart_time_from_home': '08:30',
    'departure_time_from_office': '18:00',
    'carpool_offer': True,
    'seats_available': 3,
}


@pytest.fixture
def pending_request(make_user, make_provider):
    return make_provider(status='pending', slot_number='', user=make_user(name='Ravi Kumar'))


@pytest.mark.django_db
class TestParkingRequest:

    def test_create(self, client_for, make_user):
        user = make_user()

        response = client_for(user).post(REQUESTS_URL, REQUEST_PAYLOAD, format='json')

        assert response.status_code == 201
        assert response.data['message'] == 'Parking slot requested successfully!'
        parking_request = ParkingRequest.objects.get(user=user)
        assert parking_request.status == 'pending'
        assert parking_request.seats_available == 3

    def test_second_request_conflicts(self, client_for, make_user):
        client = client_for(make_user())
        client.post(REQUESTS_URL, REQUEST_PAYLOAD, format='json')

        response = client.post(REQUESTS_URL, REQUEST_PAYLOAD, format='json')

        assert response.status_code == 409
        assert response.data['code'] == 'parking_request_exists'

    def test_concurrent_submit_conflicts(self, client_for, make_user, make_provider):
        user = make_user()
        make_provider(user=user, status='pending', slot_number='')

        with patch.object(AllocationService, '_has_request', return_value=False):
            response = client_for(user).post(REQUESTS_URL, REQUEST_PAYLOAD, format='json')

        assert response.status_code == 409
        assert response.data['code'] == 'parking_request_exists'
        assert ParkingRequest.objects.filter(user=user).count() == 1

    def test_office_departure_must_follow_home(self, client_for, make_user):
        payload = {**REQUEST_PAYLOAD, 'departure_time_from_office': '07:00'}

        response = client_for(make_user()).post(REQUESTS_URL, payload, format='json')

        assert response.status_code == 400
        assert 'departure_time_from_office' in response.data['errors']

    def test_offer_needs_seats(self, client_for, make_user):
        payload = {**REQUEST_PAYLOAD, 'seats_available': 0}

        response = client_for(make_user()).post(REQUESTS_URL, payload, format='json')

        assert response.status_code == 400
        assert 'seats_available' in response.data['errors']

    def test_no_offer_clears_seats(self, client_for, make_user):
        user = make_user()
        payload = {**REQUEST_PAYLOAD, 'carpool_offer': False}

        client_for(user).post(REQUESTS_URL, payload, format='json')

        assert ParkingRequest.objects.get(user=user).seats_available == 0

    def test_my_status(self, client_for, make_user):
        client = client_for(make_user())

        before = client.get(REQUESTS_URL + 'my_status/')
        client.post(REQUESTS_URL, REQUEST_PAYLOAD, format='json')
        after = client.get(REQUESTS_URL + 'my_status/')

        assert before.data == {'status': 'not_found'}
        assert after.data == {'status': 'pending', 'slot_number': None}

    def test_list_requires_admin(self, client_for, make_user):
        response = client_for(make_user()).get(REQUESTS_URL)

        assert response.status_code == 403

    def test_admin_list_filters_by_status(self, client_for, admin_user, make_provider, pending_request):
        approved = make_provider()

        response = client_for(admin_user).get(REQUESTS_URL, {'status': 'approved'})

        assert [r['id'] for r in response.data['results']] == [approved.id]


@pytest.mark.django_db
class TestAllocation:

    def test_approve_with_slot(self, client_for, admin_user, pending_request):
        response = client_for(admin_user).post(
            f'{REQUESTS_URL}{pending_request.id}/decide/', {'status': 'approved', 'slot_number': 'B-7'}
        )

        pending_request.refresh_from_db()
        assert response.status_code == 200
        assert pending_request.status == 'approved'
        assert pending_request.slot_number == 'B-7'

    def test_approve_needs_slot(self, client_for, admin_user, pending_request):
        response = client_for(admin_user).post(
            f'{REQUESTS_URL}{pending_request.id}/decide/', {'status': 'approved'}
        )

        assert response.status_code == 400
        assert 'slot_number' in response.data['errors']

    def test_slot_already_taken(self, client_for, admin_user, make_provider, pending_request):
        make_provider(slot_number='B-7')

        response = client_for(admin_user).post(
            f'{REQUESTS_URL}{pending_request.id}/decide/', {'status': 'approved', 'slot_number': 'B-7'}
        )

        pending_request.refresh_from_db()
        assert response.status_code == 409
        assert response.data['code'] == 'allocation_conflict'
        assert pending_request.status == 'pending'

    def test_unknown_configured_slot(self, client_for, admin_user, pending_request):
        ControlItem.objects.create(key='C-1', value='Basement', type='parking-slot')

        response = client_for(admin_user).post(
            f'{REQUESTS_URL}{pending_request.id}/decide/', {'status': 'approved', 'slot_number': 'Z-9'}
        )

        assert response.status_code == 409

    def test_configured_slot(self, client_for, admin_user, pending_request):
        ControlItem.objects.create(key='C-1', value='Basement', type='parking-slot')

        response = client_for(admin_user).post(
            f'{REQUESTS_URL}{pending_request.id}/decide/', {'status': 'approved', 'slot_number': 'C-1'}
        )

        assert response.status_code == 200

    def test_already_decided(self, client_for, admin_user, pending_request):
        client = client_for(admin_user)
        client.post(f'{REQUESTS_URL}{pending_request.id}/decide/', {'status': 'rejected'})

        response = client.post(
            f'{REQUESTS_URL}{pending_request.id}/decide/', {'status': 'approved', 'slot_number': 'B-7'}
        )

        assert response.status_code == 409

    def test_user_notified(self, client_for, admin_user, pending_request, mailoutbox,
                           django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            client_for(admin_user).post(
                f'{REQUESTS_URL}{pending_request.id}/decide/', {'status': 'approved', 'slot_number': 'B-7'}
            )

        assert len(mailoutbox) == 1
        assert mailoutbox[0].subject == 'Parking Allocated'
        assert 'B-7' in mailoutbox[0].body

    def test_allocations_search(self, client_for, admin_user, make_user, make_provider, pending_request):
        ravi = make_provider(user=make_user(name='Ravi Shankar'), slot_number='D-1')
        make_provider(user=make_user(name='Meera Nair'), slot_number='D-2')

        response = client_for(admin_user).get(REQUESTS_URL + 'allocations/', {'search': 'ravi'})

        assert response.status_code == 200
        assert [r['id'] for r in response.data['results']] == [ravi.id]


@pytest.mark.django_db
class TestControlItems:

    def test_requires_admin(self, client_for, make_user):
        assert client_for(make_user()).get(CONTROL_URL).status_code == 403

    def test_staff_user_is_admin(self, client_for, make_user):
        staff = make_user(is_staff=True)

        assert staff.role != 'admin'
        assert client_for(staff).get(CONTROL_URL).status_code == 200

    def test_list_grouped_by_type(self, client_for, admin_user):
        ControlItem.objects.create(key='office_name', value='HQ', type='general')
        ControlItem.objects.create(key='A-1', value='Level 1', type='parking-slot')

        response = client_for(admin_user).get(CONTROL_URL)

        assert [item['key'] for item in response.data['general_items']] == ['office_name']
        assert [item['key'] for item in response.data['parking_slots']] == ['A-1']

    def test_create(self, client_for, admin_user):
        response = client_for(admin_user).post(
            CONTROL_URL, {'key': 'A-2', 'value': 'Level 1', 'type': 'parking-slot'}
        )

        assert response.status_code == 201
        assert ControlItem.objects.filter(key='A-2', type='parking-slot').exists()

    def test_duplicate_key(self, client_for, admin_user):
        ControlItem.objects.create(key='A-2', value='Level 1', type='parking-slot')

        response = client_for(admin_user).post(
            CONTROL_URL, {'key': 'A-2', 'value': 'Level 2', 'type': 'parking-slot'}
        )

        assert response.status_code == 400
        assert response.data == {'error': 'Key already exists'}

    def test_same_key_in_other_type(self, client_for, admin_user):
        ControlItem.objects.create(key='A-2', value='Level 1', type='parking-slot')

        response = client_for(admin_user).post(CONTROL_URL, {'key': 'A-2', 'value': 'x', 'type': 'general'})

        assert response.status_code == 201

    @pytest.mark.parametrize('method', ['put', 'patch'])
    def test_update_changes_value_only(self, client_for, admin_user, method):
        item = ControlItem.objects.create(key='A-1', value='Level 1', type='parking-slot')
        client = client_for(admin_user)

        response = getattr(client, method)(
            f'{CONTROL_URL}{item.id}/', {'key': 'B-1', 'value': 'Level 3'}, format='json'
        )

        item.refresh_from_db()
        assert response.status_code == 200
        assert item.value == 'Level 3'
        assert item.key == 'A-1'
