from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from menu.models import MenuItem


class Bill(models.Model):
    PAYMENT_STATUS_CHOICES = (
        ("paid", "Paid"),
        ("pending", "Pending"),
    )
    PAYMENT_METHOD_CHOICES = (
        ("cash", "Cash"),
        ("card", "Card"),
        ("upi", "UPI"),
        ("other", "Other"),
    )

    bill_number = models.CharField(max_length=32, unique=True)
    bill_date = models.DateTimeField(default=timezone.now)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='bills'
    )

    # Customer details
    customer_name = models.CharField(max_length=100, blank=True, default='')
    customer_phone = models.CharField(max_length=20, blank=True, default='')

    # Pricing fields
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default="paid")
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default="cash")
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.bill_number} - {self.total_amount}"

    class Meta:
        db_table = 'bills'
        ordering = ['-created_at', '-id']


class BillItem(models.Model):
    """Line of a bill, a snapshot of the menu item at the time of sale"""
    bill = models.ForeignKey(Bill, related_name='items', on_delete=models.CASCADE)
    menu_item = models.ForeignKey(
        MenuItem, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='bill_items'
    )
    menu_item_name = models.CharField(max_length=255, blank=True, default='')
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    total = models.DecimalField(max_digits=12, decimal_places=2)

    def __str__(self):
        return f"{self.quantity} x {self.menu_item_name}"

    class Meta:
        db_table = 'bill_items'
        ordering = ['id']
