# recipients/forms.py
from datetime import date

from django import forms

from algorithms.choices import HospitalStatus
from hospitals.models import BloodRequest, Hospital


class BloodRequestForm(forms.ModelForm):
    """
    Recipient submits a blood request
    """
    hospital = forms.ModelChoiceField(
        queryset=Hospital.objects.filter(status=HospitalStatus.VERIFIED),
        required=False,
        empty_label='Any hospital',
        widget=forms.Select(attrs={'class': 'form-select'})
    )

    class Meta:
        model = BloodRequest
        fields = [
            'blood_type', 'units_needed', 'urgency', 'needed_by', 'hospital',
            'medical_reason', 'doctor_name', 'doctor_contact', 'notes',
        ]
        widgets = {
            'blood_type': forms.Select(attrs={'class': 'form-select'}),
            'units_needed': forms.NumberInput(attrs={'class': 'form-control', 'min': 1}),
            'urgency': forms.Select(attrs={'class': 'form-select'}),
            'needed_by': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'medical_reason': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
            'doctor_name': forms.TextInput(attrs={'class': 'form-control'}),
            'doctor_contact': forms.TextInput(attrs={'class': 'form-control'}),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
        }

    def clean_needed_by(self):
        needed_by = self.cleaned_data['needed_by']
        if needed_by < date.today():
            raise forms.ValidationError("Needed-by date cannot be in the past.")
        return needed_by
