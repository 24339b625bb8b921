"""
Bill arithmetic and bill creation.

Totals are computed with ``Decimal`` throughout: the subtotal is the sum of
``quantity * unit_price`` over the lines, the tax is a flat percentage of the
subtotal (``POS_BILL_TAX_PERCENT``, 5 by default) rounded half-up to two
places, and the total is their sum.
"""
import logging
from collections import namedtuple
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from menu.models import MenuItem
from .models import Bill, BillItem

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')
DEFAULT_TAX_PERCENT = Decimal('5')


class BillingError(Exception):
    """Base class for bills that cannot be created"""


class EmptyBillError(BillingError):
    def __init__(self, message="Please add at least one item"):
        super().__init__(message)


class NoMenuItemsError(BillingError):
    def __init__(self, message="Please add menu items first"):
        super().__init__(message)


BillTotals = namedtuple('BillTotals', ['subtotal', 'tax_amount', 'total_amount'])


@dataclass
class BillLine:
    menu_item_id: int
    quantity: int = 1
    unit_price: Decimal = Decimal('0.00')
    menu_item_name: str = ''

    @property
    def line_total(self):
        return Decimal(self.quantity) * Decimal(self.unit_price)

    def as_initial(self):
        return {
            'menu_item': self.menu_item_id,
            'quantity': self.quantity,
            'unit_price': self.unit_price,
            'previous_menu_item': self.menu_item_id,
        }


def round2(value):
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def bill_tax_rate():
    percent = getattr(settings, 'POS_BILL_TAX_PERCENT', DEFAULT_TAX_PERCENT)
    return Decimal(percent) / Decimal('100')


def calculate_totals(lines, rate=None):
    """Return BillTotals for the given lines"""
    if rate is None:
        rate = bill_tax_rate()
    subtotal = round2(sum((line.line_total for line in lines), Decimal('0')))
    tax_amount = round2(subtotal * rate)
    return BillTotals(subtotal, tax_amount, subtotal + tax_amount)


def generate_bill_number(now=None):
    """BILL-YYYYMM-<last six digits of the epoch-millisecond timestamp>"""
    now = now or timezone.now()
    local = timezone.localtime(now) if timezone.is_aware(now) else now
    millis = int(now.timestamp()) * 1000 + now.microsecond // 1000
    suffix = str(millis)[-6:].zfill(6)
    return f"BILL-{local.year:04d}{local.month:02d}-{suffix}"


def line_for_item(menu_item, quantity=1):
    """A fresh line priced at the menu item's current price"""
    return BillLine(
        menu_item_id=menu_item.id,
        quantity=quantity,
        unit_price=menu_item.price,
        menu_item_name=menu_item.name,
    )


def default_line(menu_items):
    first = next(iter(menu_items), None)
    if first is None:
        raise NoMenuItemsError()
    return line_for_item(first)


def billable_menu_items():
    """Menu items that can be put on a bill, by name"""
    return MenuItem.objects.filter(is_active=True, is_available=True).order_by('name', 'id')


def create_bill(user, lines, customer_name='', customer_phone='', payment_method='cash',
                payment_status='paid', notes='', now=None):
    """
    Insert a bill and one bill item per line in a single transaction.

    Item names and line totals are copied onto the bill items so later menu
    edits do not change the bill. Raises EmptyBillError before any query when
    there are no lines.
    """
    lines = list(lines)
    if not lines:
        raise EmptyBillError()

    menu_items = MenuItem.objects.in_bulk({line.menu_item_id for line in lines})
    missing = [line.menu_item_id for line in lines if line.menu_item_id not in menu_items]
    if missing:
        raise BillingError(f"Menu items no longer exist: {', '.join(str(m) for m in missing)}")

    totals = calculate_totals(lines)
    bill_number = generate_bill_number(now)

    with transaction.atomic():
        bill = Bill.objects.create(
            bill_number=bill_number,
            bill_date=now or timezone.now(),
            user=user,
            customer_name=customer_name or '',
            customer_phone=customer_phone or '',
            subtotal=totals.subtotal,
            tax_amount=totals.tax_amount,
            total_amount=totals.total_amount,
            payment_status=payment_status,
            payment_method=payment_method,
            notes=notes or '',
        )
        BillItem.objects.bulk_create([
            BillItem(
                bill=bill,
                menu_item_id=line.menu_item_id,
                menu_item_name=menu_items[line.menu_item_id].name,
                quantity=line.quantity,
                unit_price=round2(line.unit_price),
                total=round2(line.line_total),
            )
            for line in lines
        ])

    logger.info(f"Created bill {bill.bill_number}: {len(lines)} items, total {bill.total_amount}")
    return bill
