import logging

from django.contrib import messages
from django.db import DatabaseError
from django.shortcuts import render, redirect, get_object_or_404
from django.views.decorators.http import require_POST

from menu.models import MenuCategory, MenuItem
from billing.models import Bill
from billing.services import (
    BillingError, NoMenuItemsError, bill_tax_rate, billable_menu_items, calculate_totals,
    create_bill, default_line,
)
from .decorators import staff_access
from .forms import MenuCategoryForm, MenuItemForm, BillForm, BillLineForm, BillLineFormSet

logger = logging.getLogger(__name__)

EXPANDED_SESSION_KEY = 'menu_expanded_categories'


# =============== MENU SCREEN ===============

def load_menu():
    """Categories and items, each by display order. Empty lists if the database fails."""
    try:
        categories = list(MenuCategory.objects.order_by('display_order', 'id'))
        items = list(MenuItem.objects.select_related('category').order_by('display_order', 'id'))
    except DatabaseError:
        logger.exception("Error loading menu data")
        return [], []
    return categories, items


def group_items_by_category(categories, items, expanded=()):
    """
    Pair each category with its items, keeping display order.

    Items whose category no longer exists are returned separately.
    """
    known = {category.id for category in categories}
    groups = [
        {
            'category': category,
            'items': [item for item in items if item.category_id == category.id],
            'expanded': category.id in expanded,
        }
        for category in categories
    ]
    uncategorized = [item for item in items if item.category_id not in known]
    return groups, uncategorized


def get_expanded_categories(session):
    return set(session.get(EXPANDED_SESSION_KEY, []))


def toggle_expanded_category(session, category_id):
    expanded = get_expanded_categories(session)
    if category_id in expanded:
        expanded.discard(category_id)
    else:
        expanded.add(category_id)
    session[EXPANDED_SESSION_KEY] = sorted(expanded)
    return expanded


@staff_access
def menu_screen(request):
    categories, items = load_menu()
    groups, uncategorized = group_items_by_category(
        categories, items, get_expanded_categories(request.session)
    )
    context = {
        'groups': groups,
        'uncategorized': uncategorized,
        'categories_count': len(categories),
        'items_count': len(items),
    }
    return render(request, 'dashboard/menu.html', context)


@staff_access
@require_POST
def toggle_category(request, pk):
    toggle_expanded_category(request.session, pk)
    return redirect('menu_screen')


@staff_access
def category_form(request, pk=None):
    category = get_object_or_404(MenuCategory, id=pk) if pk else None

    if request.method == 'POST':
        form = MenuCategoryForm(request.POST, instance=category)
        if form.is_valid():
            try:
                saved = form.save(commit=False)
                if category is None:
                    saved.created_by = request.user
                saved.save()
            except DatabaseError:
                logger.exception("Error saving category")
                messages.error(request, 'Failed to save category')
            else:
                messages.success(request, 'Category saved')
                return redirect('menu_screen')
    else:
        form = MenuCategoryForm(instance=category)

    context = {
        'form': form,
        'category': category,
    }
    return render(request, 'dashboard/category_form.html', context)


@staff_access
def item_form(request, pk=None):
    menu_item = get_object_or_404(MenuItem, id=pk) if pk else None

    if request.method == 'POST':
        form = MenuItemForm(request.POST, instance=menu_item)
        if form.is_valid():
            try:
                saved = form.save(commit=False)
                if menu_item is None:
                    saved.created_by = request.user
                saved.save()
            except DatabaseError:
                logger.exception("Error saving item")
                messages.error(request, 'Failed to save menu item')
            else:
                messages.success(request, 'Menu item saved')
                return redirect('menu_screen')
    else:
        initial = {}
        # Adding from a category row preselects that category
        if menu_item is None and request.GET.get('category'):
            initial['category'] = request.GET.get('category')
        form = MenuItemForm(instance=menu_item, initial=initial)

    context = {
        'form': form,
        'menu_item': menu_item,
    }
    return render(request, 'dashboard/item_form.html', context)


@staff_access
def delete_category(request, pk):
    if request.method == 'POST':
        try:
            MenuCategory.objects.filter(id=pk).delete()
        except DatabaseError:
            logger.exception("Error deleting category")
            messages.error(request, 'Failed to delete category')
        else:
            messages.success(request, 'Category deleted')
        return redirect('menu_screen')

    category = get_object_or_404(MenuCategory, id=pk)
    context = {
        'object': category,
        'question': 'Are you sure you want to delete this category?',
        'note': f'{category.items.count()} item(s) will be kept without a category.',
    }
    return render(request, 'dashboard/confirm_delete.html', context)


@staff_access
def delete_item(request, pk):
    if request.method == 'POST':
        try:
            MenuItem.objects.filter(id=pk).delete()
        except DatabaseError:
            logger.exception("Error deleting item")
            messages.error(request, 'Failed to delete item')
        else:
            messages.success(request, 'Menu item deleted')
        return redirect('menu_screen')

    menu_item = get_object_or_404(MenuItem, id=pk)
    context = {
        'object': menu_item,
        'question': 'Are you sure you want to delete this item?',
        'note': 'Bills that already contain this item are not changed.',
    }
    return render(request, 'dashboard/confirm_delete.html', context)


# =============== BILLING SCREEN ===============

def load_billing():
    """Bills newest first and billable menu items by name"""
    try:
        bills = list(Bill.objects.select_related('user').order_by('-created_at', '-id'))
        menu_items = list(billable_menu_items())
    except DatabaseError:
        logger.exception("Error loading billing data")
        return [], []
    return bills, menu_items


@staff_access
def billing_screen(request):
    bills, menu_items = load_billing()
    context = {
        'bills': bills,
        'menu_items_count': len(menu_items),
    }
    return render(request, 'dashboard/billing.html', context)


def line_formset(lines):
    return BillLineFormSet(initial=[line.as_initial() for line in lines])


def without_line(data, index):
    """
    Copy of the posted bill form with row ``index`` taken out.

    Later rows move up one position and the management counts shrink by one.
    An index outside the posted rows leaves the data unchanged.
    """
    prefix = BillLineFormSet.get_default_prefix()
    try:
        index = int(index)
        total = int(data.get(f'{prefix}-TOTAL_FORMS', ''))
        initial = int(data.get(f'{prefix}-INITIAL_FORMS', ''))
    except ValueError:
        return data
    if not 0 <= index < total:
        return data

    data = data.copy()
    for position in range(index, total):
        for field in BillLineForm.base_fields:
            key = f'{prefix}-{position}-{field}'
            following = f'{prefix}-{position + 1}-{field}'
            if position + 1 < total and following in data:
                data.setlist(key, data.getlist(following))
            else:
                data.pop(key, None)
    data[f'{prefix}-TOTAL_FORMS'] = str(total - 1)
    data[f'{prefix}-INITIAL_FORMS'] = str(min(initial, total - 1))
    return data


def render_bill_form(request, form, formset, lines):
    context = {
        'form': form,
        'formset': formset,
        'lines': lines,
        'totals': calculate_totals(lines),
        'tax_percent': bill_tax_rate() * 100,
    }
    return render(request, 'dashboard/bill_form.html', context)


@staff_access
def bill_create(request):
    """
    Bill form. Every button posts the whole form back here:
    add / remove=<index> / recalculate edit the rows, cancel closes the form,
    save creates the bill.
    """
    if request.method != 'POST':
        return render_bill_form(request, BillForm(), BillLineFormSet(), [])

    action = request.POST.get('action', 'save')
    if action == 'cancel':
        return redirect('billing_screen')

    data = request.POST
    removing = 'remove' in data
    if removing:
        # The row goes before validation, even when it does not validate
        data = without_line(data, data['remove'])

    form = BillForm(data)
    formset = BillLineFormSet(data)
    form_valid = form.is_valid()
    rows_valid = formset.is_valid()
    lines = [line_form.to_line() for line_form in formset if line_form.is_valid()]

    if not (form_valid and rows_valid):
        messages.error(request, 'Please correct the errors below')
        return render_bill_form(request, form, formset, lines)

    if removing:
        return render_bill_form(request, form, line_formset(lines), lines)

    if action == 'add':
        try:
            lines.append(default_line(billable_menu_items()))
        except NoMenuItemsError as exc:
            messages.error(request, str(exc))
        return render_bill_form(request, form, line_formset(lines), lines)

    if action != 'save':
        return render_bill_form(request, form, line_formset(lines), lines)

    if not lines:
        messages.error(request, 'Please add at least one item')
        return render_bill_form(request, form, line_formset(lines), lines)

    try:
        create_bill(request.user, lines, **form.cleaned_data)
    except BillingError as exc:
        messages.error(request, str(exc))
        return render_bill_form(request, form, line_formset(lines), lines)
    except DatabaseError:
        logger.exception("Error creating bill")
        messages.error(request, 'Error creating bill')
        return render_bill_form(request, form, line_formset(lines), lines)

    messages.success(request, 'Bill created successfully!')
    return redirect('billing_screen')


@staff_access
def bill_detail(request, pk):
    bill = get_object_or_404(Bill.objects.select_related('user').prefetch_related('items'), id=pk)
    return render(request, 'dashboard/bill_detail.html', {'bill': bill})
