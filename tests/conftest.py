"""
Pytest configuration and fixtures for rental admin tests.
"""
import pytest
from django.contrib.auth.models import User
from rest_framework.test import APIClient


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(username='admin', password='adminpass123', is_staff=True)


@pytest.fixture
def api_client(staff_user):
    """APIClient authenticated as back-office staff."""
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client
