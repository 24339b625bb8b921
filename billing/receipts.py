# receipts.py
import io

from django.utils import timezone
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from .templatetags.currency import format_inr

RESTAURANT_NAME = "Restaurant POS"


def receipt_data(bill):
    """Receipt payload for a bill, built from its stored item snapshots"""
    items = [
        {
            'name': item.menu_item_name,
            'quantity': item.quantity,
            'unit_price': float(item.unit_price),
            'item_total': float(item.total),
        }
        for item in bill.items.all()
    ]
    return {
        'bill_id': bill.id,
        'bill_number': bill.bill_number,
        'bill_date': bill.bill_date,
        'customer_name': bill.customer_name,
        'customer_phone': bill.customer_phone,
        'user_name': bill.user.get_username() if bill.user else '',
        'items': items,
        'items_count': len(items),
        'subtotal': float(bill.subtotal),
        'tax_amount': float(bill.tax_amount),
        'total_amount': float(bill.total_amount),
        'payment_method': bill.payment_method,
        'payment_status': bill.payment_status,
        'notes': bill.notes,
    }


def render_receipt_pdf(bill):
    """Draw the bill on an A4 page and return the PDF bytes"""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    c.setFont("Helvetica-Bold", 16)
    c.drawString(40, height-50, RESTAURANT_NAME)
    c.setFont("Helvetica", 10)
    c.drawString(40, height-70, f"Bill No: {bill.bill_number}")
    c.drawString(40, height-90, f"Date: {timezone.localtime(bill.bill_date).strftime('%Y-%m-%d %H:%M:%S')}")
    c.drawString(40, height-110, f"Customer: {bill.customer_name or '-'}  {bill.customer_phone or ''}")

    c.setFont("Helvetica-Bold", 11)
    c.drawString(40, height-140, "Items")
    c.drawString(330, height-140, "Qty")
    c.drawString(380, height-140, "Price")
    c.drawString(470, height-140, "Total")

    c.setFont("Helvetica", 10)
    y = height - 160
    for item in bill.items.all():
        c.drawString(40, y, item.menu_item_name)
        c.drawString(330, y, str(item.quantity))
        c.drawString(380, y, f"{item.unit_price:.2f}")
        c.drawString(470, y, f"{item.total:.2f}")
        y -= 18
        if y < 120:
            c.showPage()
            c.setFont("Helvetica", 10)
            y = height - 50

    # Built-in fonts have no rupee glyph
    y -= 10
    c.setFont("Helvetica-Bold", 11)
    c.drawString(40, y, f"Subtotal: {format_inr(bill.subtotal).replace('₹', 'Rs. ')}")
    y -= 18
    c.drawString(40, y, f"Tax: {format_inr(bill.tax_amount).replace('₹', 'Rs. ')}")
    y -= 18
    c.drawString(40, y, f"Total Payable: {format_inr(bill.total_amount).replace('₹', 'Rs. ')}")
    y -= 18
    c.setFont("Helvetica", 10)
    c.drawString(40, y, f"Payment: {bill.get_payment_method_display()} ({bill.get_payment_status_display()})")

    c.setFont("Helvetica", 9)
    c.drawString(40, 40, "Thank you for dining with us!")
    c.save()
    return buffer.getvalue()
