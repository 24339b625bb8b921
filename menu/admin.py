from django.contrib import admin
from .models import MenuCategory, MenuItem


class MenuItemInline(admin.TabularInline):
    model = MenuItem
    fields = ("name", "price", "is_available", "is_active", "display_order")
    extra = 0


@admin.register(MenuCategory)
class MenuCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "display_order", "is_active")
    list_editable = ("display_order", "is_active")
    inlines = [MenuItemInline]


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "price", "gst_rate", "is_vegetarian", "is_available", "is_active")
    list_filter = ("category", "is_vegetarian", "is_available", "is_active")
    search_fields = ("name", "hsn_code")
