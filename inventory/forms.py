# inventory/forms.py
from datetime import date

from django import forms

from donors.models import DonorProfile
from .models import BloodUnit


class BloodUnitForm(forms.ModelForm):
    """
    Staff record a collected blood unit; expiry is derived from the collection date
    """
    donor = forms.ModelChoiceField(
        queryset=DonorProfile.objects.select_related('user'),
        required=False,
        widget=forms.Select(attrs={'class': 'form-select'})
    )

    class Meta:
        model = BloodUnit
        fields = ['blood_type', 'quantity_units', 'collection_date', 'donor', 'storage_location', 'notes']
        widgets = {
            'blood_type': forms.Select(attrs={'class': 'form-select'}),
            'quantity_units': forms.NumberInput(attrs={'class': 'form-control', 'min': 1}),
            'collection_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'storage_location': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Refrigerator A'}),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
        }

    def clean_collection_date(self):
        collection_date = self.cleaned_data['collection_date']
        if collection_date > date.today():
            raise forms.ValidationError("Collection date cannot be in the future.")
        return collection_date
