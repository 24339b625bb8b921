from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Base model with created_at and updated_at fields"""
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class MenuCategory(TimeStampedModel):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    display_order = models.IntegerField(default=0)  # For ordering
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='menu_categories'
    )

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'menu_categories'
        ordering = ['display_order', 'id']
        verbose_name_plural = "Menu Categories"


class MenuItem(TimeStampedModel):
    # Items outlive their category: deleting a category leaves them uncategorized
    category = models.ForeignKey(
        MenuCategory, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='items'
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    cost_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    image_url = models.URLField(blank=True, default='')

    # Tax classification
    hsn_code = models.CharField(max_length=20, blank=True, default='')
    gst_rate = models.DecimalField(max_digits=5, decimal_places=2, default=5)

    # Kitchen settings
    preparation_time = models.PositiveIntegerField(default=15)  # in minutes

    is_vegetarian = models.BooleanField(default=True)
    is_available = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)
    display_order = models.IntegerField(default=0)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='menu_items'
    )

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'menu_items'
        ordering = ['display_order', 'id']
