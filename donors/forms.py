# donors/forms.py
from django import forms

from algorithms.choices import HospitalStatus
from hospitals.models import Hospital
from .models import DonorProfile


class AppointmentBookingForm(forms.Form):
    """
    Donor books a donation slot at a verified hospital
    """
    hospital = forms.ModelChoiceField(
        queryset=Hospital.objects.filter(status=HospitalStatus.VERIFIED),
        empty_label='Select Hospital',
        widget=forms.Select(attrs={'class': 'form-select'})
    )
    appointment_date = forms.DateTimeField(
        widget=forms.DateTimeInput(attrs={'class': 'form-control', 'type': 'datetime-local'}),
        input_formats=['%Y-%m-%dT%H:%M', '%Y-%m-%d %H:%M'],
    )
    notes = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 2, 'placeholder': 'Anything the hospital should know'})
    )


class DonorProfileUpdateForm(forms.ModelForm):
    """
    Form for donors to update their profile information
    """
    class Meta:
        model = DonorProfile
        fields = [
            'weight_kg', 'emergency_contact_name', 'emergency_contact_phone',
        ]
        widgets = {
            'weight_kg': forms.NumberInput(attrs={'class': 'form-control', 'step': '0.1'}),
            'emergency_contact_name': forms.TextInput(attrs={'class': 'form-control'}),
            'emergency_contact_phone': forms.TextInput(attrs={'class': 'form-control'}),
        }
        labels = {
            'weight_kg': 'Weight (kg)',
        }
