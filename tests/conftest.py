from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from menu.models import MenuCategory, MenuItem


@pytest.fixture
def staff_user(db, django_user_model):
    return django_user_model.objects.create_user(
        username='cashier', password='pos-pass-123', is_staff=True
    )


@pytest.fixture
def staff_client(client, staff_user):
    client.force_login(staff_user)
    return client


@pytest.fixture
def api_client(staff_user):
    api = APIClient()
    api.force_authenticate(user=staff_user)
    return api


@pytest.fixture
def starters(db):
    return MenuCategory.objects.create(name='Starters', description='Small plates', display_order=1)


@pytest.fixture
def beverages(db):
    return MenuCategory.objects.create(name='Beverages', display_order=2)


@pytest.fixture
def paneer_tikka(starters):
    return MenuItem.objects.create(
        category=starters, name='Paneer Tikka', price=Decimal('100.00'), display_order=1
    )


@pytest.fixture
def masala_chai(beverages):
    return MenuItem.objects.create(
        category=beverages, name='Masala Chai', price=Decimal('50.00'), display_order=1
    )
