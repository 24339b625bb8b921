from django import forms
from django.forms import formset_factory

from menu.models import MenuCategory, MenuItem
from billing.models import Bill
from billing.services import BillLine, billable_menu_items


class MenuCategoryForm(forms.ModelForm):
    class Meta:
        model = MenuCategory
        fields = ["name", "description", "display_order", "is_active"]
        widgets = {
            "name": forms.TextInput(attrs={"class": "form-control"}),
            "description": forms.Textarea(attrs={"class": "form-control", "rows": 3}),
            "display_order": forms.NumberInput(attrs={"class": "form-control"}),
            "is_active": forms.CheckboxInput(attrs={"class": "form-check-input"}),
        }


class MenuItemForm(forms.ModelForm):
    class Meta:
        model = MenuItem
        fields = [
            "category", "name", "description", "price", "cost_price", "image_url",
            "hsn_code", "gst_rate", "preparation_time", "is_vegetarian",
            "is_available", "is_active", "display_order"
        ]
        widgets = {
            "category": forms.Select(attrs={"class": "form-control"}),
            "name": forms.TextInput(attrs={"class": "form-control"}),
            "description": forms.Textarea(attrs={"class": "form-control", "rows": 3}),
            "price": forms.NumberInput(attrs={"class": "form-control", "step": "0.01", "min": "0"}),
            "cost_price": forms.NumberInput(attrs={"class": "form-control", "step": "0.01", "min": "0"}),
            "image_url": forms.URLInput(attrs={"class": "form-control"}),
            "hsn_code": forms.TextInput(attrs={"class": "form-control"}),
            "gst_rate": forms.NumberInput(attrs={"class": "form-control", "step": "0.01"}),
            "preparation_time": forms.NumberInput(attrs={"class": "form-control"}),
            "is_vegetarian": forms.CheckboxInput(attrs={"class": "form-check-input"}),
            "is_available": forms.CheckboxInput(attrs={"class": "form-check-input"}),
            "is_active": forms.CheckboxInput(attrs={"class": "form-check-input"}),
            "display_order": forms.NumberInput(attrs={"class": "form-control"}),
        }

    def __init__(self, *args, **kwargs):
        super(MenuItemForm, self).__init__(*args, **kwargs)
        # A saved item belongs to a category even though the column allows null
        self.fields["category"].required = True
        self.fields["category"].queryset = MenuCategory.objects.order_by("display_order", "id")

    def clean(self):
        cleaned_data = super().clean()
        for field in ("price", "cost_price"):
            value = cleaned_data.get(field)
            if value is not None and value < 0:
                self.add_error(field, "Must not be negative")
        gst_rate = cleaned_data.get("gst_rate")
        if gst_rate is not None and not 0 <= gst_rate <= 100:
            self.add_error("gst_rate", "GST rate must be between 0 and 100")
        return cleaned_data


class BillForm(forms.ModelForm):
    class Meta:
        model = Bill
        fields = ["customer_name", "customer_phone", "payment_method", "payment_status", "notes"]
        widgets = {
            "customer_name": forms.TextInput(attrs={"class": "form-control"}),
            "customer_phone": forms.TextInput(attrs={"class": "form-control", "placeholder": "+911234567890"}),
            "payment_method": forms.Select(attrs={"class": "form-control"}),
            "payment_status": forms.Select(attrs={"class": "form-control"}),
            "notes": forms.Textarea(attrs={"class": "form-control", "rows": 2}),
        }


class BillLineForm(forms.Form):
    menu_item = forms.ModelChoiceField(
        queryset=MenuItem.objects.none(),
        widget=forms.Select(attrs={"class": "form-control"})
    )
    quantity = forms.IntegerField(
        min_value=1, initial=1,
        widget=forms.NumberInput(attrs={"class": "form-control", "min": "1"})
    )
    unit_price = forms.DecimalField(
        max_digits=10, decimal_places=2, min_value=0,
        widget=forms.NumberInput(attrs={"class": "form-control", "step": "0.01", "min": "0"})
    )
    # Item the row held when it was last rendered; a change re-prices the row
    previous_menu_item = forms.IntegerField(required=False, widget=forms.HiddenInput)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["menu_item"].queryset = billable_menu_items()

    def to_line(self):
        menu_item = self.cleaned_data["menu_item"]
        unit_price = self.cleaned_data["unit_price"]
        if self.cleaned_data.get("previous_menu_item") != menu_item.id:
            unit_price = menu_item.price
        return BillLine(
            menu_item_id=menu_item.id,
            quantity=self.cleaned_data["quantity"],
            unit_price=unit_price,
            menu_item_name=menu_item.name,
        )


BillLineFormSet = formset_factory(BillLineForm, extra=0)
