from decimal import Decimal

from rest_framework import serializers

from menu.models import MenuItem
from .models import Bill, BillItem
from .services import BillLine, BillingError, billable_menu_items, calculate_totals, create_bill


class BillItemReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = BillItem
        fields = ['id', 'menu_item', 'menu_item_name', 'quantity', 'unit_price', 'total']


class BillLineSerializer(serializers.Serializer):
    """One row of a bill being written"""
    menu_item_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    # Omitted -> the menu item's current price. Given -> kept as an override
    unit_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False
    )

    def validate_menu_item_id(self, value):
        if not billable_menu_items().filter(id=value).exists():
            raise serializers.ValidationError("Menu item not found or not available")
        return value

    def to_line(self, data):
        menu_item = MenuItem.objects.get(id=data['menu_item_id'])
        unit_price = data.get('unit_price')
        return BillLine(
            menu_item_id=menu_item.id,
            quantity=data['quantity'],
            unit_price=menu_item.price if unit_price is None else unit_price,
            menu_item_name=menu_item.name,
        )


class BillCreateSerializer(serializers.ModelSerializer):
    items = BillLineSerializer(many=True, write_only=True)

    class Meta:
        model = Bill
        fields = [
            'id', 'bill_number', 'bill_date', 'customer_name', 'customer_phone',
            'payment_method', 'payment_status', 'notes', 'items',
            'subtotal', 'tax_amount', 'total_amount'
        ]
        read_only_fields = ['id', 'bill_number', 'bill_date', 'subtotal', 'tax_amount', 'total_amount']

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("Please add at least one item")
        return value

    def create(self, validated_data):
        items_data = validated_data.pop('items')
        request = self.context.get('request')

        line_serializer = BillLineSerializer()
        lines = [line_serializer.to_line(item) for item in items_data]

        try:
            return create_bill(request.user, lines, **validated_data)
        except BillingError as exc:
            raise serializers.ValidationError({'items': [str(exc)]})


class BillReadSerializer(serializers.ModelSerializer):
    items = BillItemReadSerializer(many=True, read_only=True)
    user_name = serializers.CharField(source='user.get_username', read_only=True, default='')
    payment_method_display = serializers.CharField(source='get_payment_method_display', read_only=True)
    payment_status_display = serializers.CharField(source='get_payment_status_display', read_only=True)

    class Meta:
        model = Bill
        fields = [
            'id', 'bill_number', 'bill_date', 'user_name', 'customer_name',
            'customer_phone', 'subtotal', 'tax_amount', 'total_amount',
            'payment_status', 'payment_status_display', 'payment_method',
            'payment_method_display', 'notes', 'created_at', 'items'
        ]


class BillQuoteSerializer(serializers.Serializer):
    """Totals for a set of rows, nothing is saved"""
    items = BillLineSerializer(many=True, allow_empty=True)

    def get_totals(self):
        line_serializer = BillLineSerializer()
        lines = [line_serializer.to_line(item) for item in self.validated_data['items']]
        totals = calculate_totals(lines)
        return {
            'items': [
                {
                    'menu_item_id': line.menu_item_id,
                    'menu_item_name': line.menu_item_name,
                    'quantity': line.quantity,
                    'unit_price': str(line.unit_price),
                    'total': str(line.line_total.quantize(Decimal('0.01'))),
                }
                for line in lines
            ],
            'subtotal': str(totals.subtotal),
            'tax_amount': str(totals.tax_amount),
            'total_amount': str(totals.total_amount),
        }
