from django.urls import path
from . import views

urlpatterns = [
    # Menu screen
    path('menu/', views.menu_screen, name='menu_screen'),
    path('menu/categories/add/', views.category_form, name='add_category'),
    path('menu/categories/<int:pk>/edit/', views.category_form, name='edit_category'),
    path('menu/categories/<int:pk>/delete/', views.delete_category, name='delete_category'),
    path('menu/categories/<int:pk>/toggle/', views.toggle_category, name='toggle_category'),
    path('menu/items/add/', views.item_form, name='add_item'),
    path('menu/items/<int:pk>/edit/', views.item_form, name='edit_item'),
    path('menu/items/<int:pk>/delete/', views.delete_item, name='delete_item'),

    # Billing screen
    path('billing/', views.billing_screen, name='billing_screen'),
    path('billing/new/', views.bill_create, name='bill_create'),
    path('billing/<int:pk>/', views.bill_detail, name='bill_detail'),
]
