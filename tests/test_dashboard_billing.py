from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone

from billing.models import Bill
from billing.services import BillLine, create_bill
from menu.models import MenuItem

pytestmark = pytest.mark.django_db


def bill_post(rows=(), action='save', **extra):
    """Form data as the bill form posts it back; every row is rendered as an initial form"""
    data = {
        'customer_name': '',
        'customer_phone': '',
        'payment_method': 'cash',
        'payment_status': 'paid',
        'notes': '',
        'form-TOTAL_FORMS': str(len(rows)),
        'form-INITIAL_FORMS': str(len(rows)),
        'form-MIN_NUM_FORMS': '0',
        'form-MAX_NUM_FORMS': '1000',
    }
    if action:
        data['action'] = action
    for index, row in enumerate(rows):
        for key, value in row.items():
            data[f'form-{index}-{key}'] = value
    data.update(extra)
    return data


def row(menu_item, quantity=1, unit_price=None, previous=None):
    return {
        'menu_item': menu_item.id,
        'quantity': quantity,
        'unit_price': str(menu_item.price if unit_price is None else unit_price),
        'previous_menu_item': menu_item.id if previous is None else previous.id,
    }


def test_bill_form_starts_empty(staff_client, paneer_tikka):
    response = staff_client.get(reverse('bill_create'))
    assert response.status_code == 200
    assert response.context['lines'] == []
    assert 'No items added' in response.content.decode()


def test_add_item_uses_first_menu_item_by_name(staff_client, paneer_tikka, masala_chai):
    response = staff_client.post(reverse('bill_create'), bill_post(action='add'))

    assert response.status_code == 200
    lines = response.context['lines']
    assert len(lines) == 1
    assert lines[0].menu_item_id == masala_chai.id
    assert lines[0].quantity == 1
    assert lines[0].unit_price == Decimal('50.00')
    assert response.context['formset'].total_form_count() == 1
    assert Bill.objects.count() == 0


def test_add_item_without_menu(staff_client):
    response = staff_client.post(reverse('bill_create'), bill_post(action='add'))
    assert response.context['lines'] == []
    assert 'Please add menu items first' in response.content.decode()


def test_remove_row(staff_client, paneer_tikka, masala_chai):
    response = staff_client.post(
        reverse('bill_create'),
        bill_post([row(paneer_tikka), row(masala_chai)], action=None, remove='0'),
    )

    assert [line.menu_item_id for line in response.context['lines']] == [masala_chai.id]
    assert Bill.objects.count() == 0


def test_remove_row_whose_item_became_unavailable(staff_client, paneer_tikka, masala_chai):
    data = bill_post([row(paneer_tikka), row(masala_chai)], action=None, remove='1')
    MenuItem.objects.filter(id=masala_chai.id).update(is_available=False)

    response = staff_client.post(reverse('bill_create'), data)

    assert [line.menu_item_id for line in response.context['lines']] == [paneer_tikka.id]
    assert response.context['formset'].total_form_count() == 1
    assert 'Please correct the errors below' not in response.content.decode()


def test_remove_invalid_row_keeps_the_rest(staff_client, paneer_tikka, masala_chai):
    data = bill_post(
        [row(paneer_tikka), row(masala_chai, quantity=0), row(masala_chai, quantity=3)],
        action=None,
        remove='1',
    )

    response = staff_client.post(reverse('bill_create'), data)

    lines = response.context['lines']
    assert [(line.menu_item_id, line.quantity) for line in lines] == [
        (paneer_tikka.id, 1), (masala_chai.id, 3)
    ]
    assert response.context['totals'].subtotal == Decimal('250.00')


@pytest.mark.parametrize('index', ['-1', '2', 'last'])
def test_remove_ignores_unknown_index(staff_client, paneer_tikka, masala_chai, index):
    data = bill_post([row(paneer_tikka), row(masala_chai)], action=None, remove=index)

    response = staff_client.post(reverse('bill_create'), data)

    assert [line.menu_item_id for line in response.context['lines']] == [paneer_tikka.id, masala_chai.id]


def test_invalid_rows_still_show_totals(staff_client, paneer_tikka, masala_chai):
    data = bill_post([row(paneer_tikka), row(masala_chai, quantity=0)], action='recalculate')

    response = staff_client.post(reverse('bill_create'), data)

    content = response.content.decode()
    assert 'Please correct the errors below' in content
    assert [line.menu_item_id for line in response.context['lines']] == [paneer_tikka.id]
    assert response.context['totals'].total_amount == Decimal('105.00')
    assert '₹105.00' in content
    assert response.context['formset'].total_form_count() == 2


def test_enter_in_header_saves(staff_client, paneer_tikka):
    content = staff_client.get(reverse('bill_create')).content.decode()
    first_button = content.index('<button type="submit"')
    assert content.startswith('<button type="submit" name="action" value="save">', first_button)


def test_changing_item_reprices_row(staff_client, paneer_tikka, masala_chai):
    response = staff_client.post(
        reverse('bill_create'),
        bill_post([row(masala_chai, unit_price='100.00', previous=paneer_tikka)], action='recalculate'),
    )

    line = response.context['lines'][0]
    assert line.menu_item_id == masala_chai.id
    assert line.unit_price == Decimal('50.00')
    assert response.context['formset'].forms[0].initial['previous_menu_item'] == masala_chai.id


def test_edited_price_is_kept(staff_client, paneer_tikka):
    response = staff_client.post(
        reverse('bill_create'),
        bill_post([row(paneer_tikka, quantity=2, unit_price='80.00')], action='recalculate'),
    )

    totals = response.context['totals']
    assert response.context['lines'][0].unit_price == Decimal('80.00')
    assert totals.subtotal == Decimal('160.00')
    assert totals.tax_amount == Decimal('8.00')
    assert totals.total_amount == Decimal('168.00')
    assert 'Tax (5%)' in response.content.decode()


def test_save_without_rows(staff_client, paneer_tikka):
    response = staff_client.post(reverse('bill_create'), bill_post())

    assert response.status_code == 200
    assert 'Please add at least one item' in response.content.decode()
    assert Bill.objects.count() == 0


def test_save_creates_bill(staff_client, staff_user, paneer_tikka, masala_chai):
    data = bill_post(
        [row(paneer_tikka, quantity=2), row(masala_chai)],
        customer_name='Asha',
        customer_phone='+911234567890',
        payment_method='upi',
    )

    response = staff_client.post(reverse('bill_create'), data, follow=True)

    assert response.redirect_chain[-1][0] == reverse('billing_screen')
    assert 'Bill created successfully!' in response.content.decode()
    bill = Bill.objects.get()
    assert bill.user == staff_user
    assert bill.customer_name == 'Asha'
    assert bill.payment_method == 'upi'
    assert bill.total_amount == Decimal('262.50')
    assert bill.items.count() == 2
    assert bill.bill_number in response.content.decode()
    assert '₹262.50' in response.content.decode()


def test_invalid_row_is_not_saved(staff_client, paneer_tikka):
    response = staff_client.post(reverse('bill_create'), bill_post([row(paneer_tikka, quantity=0)]))

    assert response.status_code == 200
    assert 'Please correct the errors below' in response.content.decode()
    assert Bill.objects.count() == 0


def test_database_error_keeps_form(staff_client, paneer_tikka, monkeypatch):
    def fail(*args, **kwargs):
        raise DatabaseError('database is locked')

    monkeypatch.setattr('dashboard.views.create_bill', fail)

    response = staff_client.post(reverse('bill_create'), bill_post([row(paneer_tikka)]))

    assert response.status_code == 200
    assert 'Error creating bill' in response.content.decode()
    assert len(response.context['lines']) == 1


def test_cancel_discards_form(staff_client, paneer_tikka):
    response = staff_client.post(reverse('bill_create'), {'action': 'cancel'})
    assert response.status_code == 302
    assert response.url == reverse('billing_screen')
    assert Bill.objects.count() == 0


def test_billing_screen_lists_newest_first(staff_client, staff_user, paneer_tikka):
    line = BillLine(menu_item_id=paneer_tikka.id, unit_price=paneer_tikka.price)
    older = create_bill(staff_user, [line], now=timezone.now() - timedelta(hours=2))
    newer = create_bill(staff_user, [line])
    Bill.objects.filter(id=older.id).update(created_at=timezone.now() - timedelta(hours=2))

    response = staff_client.get(reverse('billing_screen'))

    assert response.status_code == 200
    assert response.context['bills'] == [newer, older]
    assert response.context['menu_items_count'] == 1


def test_bill_detail(staff_client, staff_user, paneer_tikka):
    bill = create_bill(
        staff_user, [BillLine(menu_item_id=paneer_tikka.id, quantity=2, unit_price=paneer_tikka.price)]
    )

    response = staff_client.get(reverse('bill_detail', args=[bill.id]))

    content = response.content.decode()
    assert response.status_code == 200
    assert bill.bill_number in content
    assert 'Paneer Tikka' in content
    assert '₹210.00' in content
