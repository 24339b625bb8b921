from django.contrib import admin
from .models import Bill, BillItem


class BillItemInline(admin.TabularInline):
    model = BillItem
    fields = ("menu_item_name", "quantity", "unit_price", "total")
    readonly_fields = fields
    extra = 0
    can_delete = False


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ("bill_number", "bill_date", "customer_name", "total_amount", "payment_method", "payment_status")
    list_filter = ("payment_status", "payment_method")
    search_fields = ("bill_number", "customer_name", "customer_phone")
    readonly_fields = ("bill_number", "subtotal", "tax_amount", "total_amount")
    inlines = [BillItemInline]
