from django.urls import path
from . import views

urlpatterns = [
    # Bills
    path('bills/', views.BillListCreateView.as_view(), name='bill-list-create'),
    path('bills/<int:pk>/', views.BillDetailView.as_view(), name='bill-detail'),

    # Receipt
    path('bills/<int:pk>/receipt/', views.bill_receipt, name='bill-receipt'),
    path('bills/<int:pk>/receipt.pdf', views.bill_receipt_pdf, name='bill-receipt-pdf'),

    # Bill form helpers
    path('menu-items/', views.billable_items, name='billable-items'),
    path('quote/', views.bill_quote, name='bill-quote'),
]
