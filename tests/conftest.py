import itertools
from datetime import time

import pytest
from rest_framework.test import APIClient

from parking.models import ParkingRequest
from users.models import CustomUser

_sequence = itertools.count(1)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    def factory(**kwargs):
        n = next(_sequence)
        password = kwargs.pop('password', 'secret123')
        fields = {
            'email': f'user{n}@example.com',
            'name': f'User {n}',
            'phone_number': f'98765{n:05d}',
        }
        fields.update(kwargs)
        return CustomUser.objects.create_user(password=password, **fields)
    return factory


@pytest.fixture
def admin_user(make_user):
    return make_user(email='admin@example.com', name='Admin', role='admin')


@pytest.fixture
def make_provider(make_user):
    """Approved parking request offering carpool seats"""
    def factory(user=None, seats=2, start=None, end=None, **kwargs):
        user = user or make_user()
        fields = {
            'depart_time_from_home': time(8, 30),
            'departure_time_from_office': time(18, 0),
            'carpool_offer': True,
            'seats_available': seats,
            'status': 'approved',
            'slot_number': f'A-{user.pk}',
        }
        fields.update(kwargs)
        if start:
            fields['start_latitude'], fields['start_longitude'] = start
        if end:
            fields['end_latitude'], fields['end_longitude'] = end
        return ParkingRequest.objects.create(user=user, **fields)
    return factory


@pytest.fixture
def client_for(api_client):
    def login(user):
        api_client.force_authenticate(user=user)
        return api_client
    return login
