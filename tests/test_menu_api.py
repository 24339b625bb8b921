from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from menu.models import MenuCategory, MenuItem

pytestmark = pytest.mark.django_db


def test_api_requires_authentication(starters):
    response = APIClient().get(reverse('category-list-create'))
    # Session authentication sends no challenge header, so DRF answers 403
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.data['error'] is True
    assert response.data['message'] == 'Permission denied'


def test_categories_listed_by_display_order(api_client):
    MenuCategory.objects.create(name='Desserts', display_order=3)
    MenuCategory.objects.create(name='Starters', display_order=1)
    MenuCategory.objects.create(name='Mains', display_order=2)

    response = api_client.get(reverse('category-list-create'))

    assert response.status_code == status.HTTP_200_OK
    assert [c['name'] for c in response.data] == ['Starters', 'Mains', 'Desserts']


def test_create_category_records_user(api_client, staff_user):
    response = api_client.post(
        reverse('category-list-create'),
        {'name': '  Soups ', 'description': 'Hot soups', 'display_order': 4},
        format='json',
    )

    assert response.status_code == status.HTTP_201_CREATED
    category = MenuCategory.objects.get(id=response.data['id'])
    assert category.name == 'Soups'
    assert category.is_active is True
    assert category.created_by == staff_user


def test_blank_category_name_is_rejected(api_client):
    response = api_client.post(reverse('category-list-create'), {'name': '   '}, format='json')
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data['message'] == 'Validation error'
    assert 'name' in response.data['details']


def test_update_category(api_client, starters):
    response = api_client.patch(
        reverse('category-detail', args=[starters.id]), {'is_active': False}, format='json'
    )
    assert response.status_code == status.HTTP_200_OK
    starters.refresh_from_db()
    assert starters.is_active is False


def test_delete_category_keeps_its_items(api_client, starters, paneer_tikka):
    response = api_client.delete(reverse('category-detail', args=[starters.id]))

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert not MenuCategory.objects.filter(id=starters.id).exists()
    paneer_tikka.refresh_from_db()
    assert paneer_tikka.category is None

    item = api_client.get(reverse('menu-item-detail', args=[paneer_tikka.id])).data
    assert item['category'] is None
    assert item['category_name'] is None


def test_create_menu_item(api_client, starters, staff_user):
    payload = {
        'category': starters.id,
        'name': 'Hara Bhara Kabab',
        'price': '180.00',
        'cost_price': '60.00',
        'hsn_code': '996331',
        'gst_rate': '5.00',
        'preparation_time': 20,
        'is_vegetarian': True,
    }
    response = api_client.post(reverse('menu-item-list-create'), payload, format='json')

    assert response.status_code == status.HTTP_201_CREATED
    assert response.data['category_name'] == 'Starters'
    item = MenuItem.objects.get(id=response.data['id'])
    assert item.price == Decimal('180.00')
    assert item.is_available is True
    assert item.created_by == staff_user


def test_menu_item_requires_category(api_client):
    response = api_client.post(
        reverse('menu-item-list-create'), {'name': 'Orphan', 'price': '10.00'}, format='json'
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert 'category' in response.data['details']


@pytest.mark.parametrize('field, value', [
    ('price', '-1.00'),
    ('cost_price', '-5.00'),
    ('gst_rate', '101.00'),
])
def test_menu_item_rejects_bad_numbers(api_client, starters, field, value):
    payload = {'category': starters.id, 'name': 'Soup', 'price': '90.00', field: value}
    response = api_client.post(reverse('menu-item-list-create'), payload, format='json')
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert field in response.data['details']


def test_filter_items_by_availability(api_client, paneer_tikka, masala_chai):
    MenuItem.objects.filter(id=masala_chai.id).update(is_available=False)

    response = api_client.get(reverse('menu-item-list-create'), {'is_available': 'true'})

    assert [i['name'] for i in response.data] == ['Paneer Tikka']


def test_delete_menu_item(api_client, paneer_tikka):
    response = api_client.delete(reverse('menu-item-detail', args=[paneer_tikka.id]))
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert not MenuItem.objects.filter(id=paneer_tikka.id).exists()


def test_missing_item_returns_wrapped_404(api_client):
    response = api_client.get(reverse('menu-item-detail', args=[999]))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data['message'] == 'Resource not found'


def test_overview_returns_both_collections(api_client, starters, beverages, paneer_tikka, masala_chai):
    response = api_client.get(reverse('menu-overview'))

    assert response.status_code == status.HTTP_200_OK
    assert [c['name'] for c in response.data['categories']] == ['Starters', 'Beverages']
    assert {i['name'] for i in response.data['items']} == {'Paneer Tikka', 'Masala Chai'}
    assert response.data['categories'][0]['items_count'] == 1


def test_items_by_category(api_client, starters, paneer_tikka, masala_chai):
    response = api_client.get(reverse('menu-by-category', args=[starters.id]))

    assert response.status_code == status.HTTP_200_OK
    assert response.data['category']['name'] == 'Starters'
    assert [i['name'] for i in response.data['menu_items']] == ['Paneer Tikka']
