from rest_framework import serializers
from .models import MenuCategory, MenuItem


class MenuCategorySerializer(serializers.ModelSerializer):
    items_count = serializers.SerializerMethodField()

    class Meta:
        model = MenuCategory
        fields = ['id', 'name', 'description', 'display_order', 'is_active', 'items_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at', 'items_count']

    def get_items_count(self, obj):
        return obj.items.count()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Category name cannot be blank.")
        return value


class MenuItemSerializer(serializers.ModelSerializer):
    # Nullable in the table so deleted categories leave items behind, but a saved item needs one
    category = serializers.PrimaryKeyRelatedField(queryset=MenuCategory.objects.all())
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)

    class Meta:
        model = MenuItem
        fields = [
            'id', 'category', 'category_name', 'name', 'description', 'price',
            'cost_price', 'image_url', 'hsn_code', 'gst_rate', 'preparation_time',
            'is_vegetarian', 'is_available', 'is_active', 'display_order',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Item name cannot be blank.")
        return value

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price cannot be negative.")
        return value

    def validate_cost_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Cost price cannot be negative.")
        return value

    def validate_gst_rate(self, value):
        if value < 0 or value > 100:
            raise serializers.ValidationError("GST rate must be between 0 and 100.")
        return value


class MenuOverviewSerializer(serializers.Serializer):
    """Both menu collections, as loaded by the menu screen"""
    categories = MenuCategorySerializer(many=True, read_only=True)
    items = MenuItemSerializer(many=True, read_only=True)
