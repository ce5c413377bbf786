# hospitals/forms.py
from django import forms
from django.contrib.auth import get_user_model

from .models import Hospital

User = get_user_model()


class HospitalSettingsForm(forms.ModelForm):
    """Hospital admins edit their hospital's public details"""
    services = forms.CharField(
        required=False,
        help_text='Comma-separated, e.g. Blood Transfusion, Platelet Donation',
        widget=forms.TextInput(attrs={'class': 'form-control'})
    )

    class Meta:
        model = Hospital
        fields = ['name', 'address', 'city', 'state', 'postal_code', 'phone', 'email', 'website']
        widgets = {
            'address': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance and self.instance.pk and not self.is_bound:
            self.initial['services'] = ', '.join(self.instance.services or [])

    def clean_services(self):
        raw = self.cleaned_data.get('services', '')
        return [s.strip() for s in raw.split(',') if s.strip()]

    def save(self, commit=True):
        hospital = super().save(commit=False)
        hospital.services = self.cleaned_data['services']
        if commit:
            hospital.save()
        return hospital


class StaffCreateForm(forms.Form):
    """Hospital admins add staff accounts to their hospital"""
    username = forms.CharField(max_length=150, widget=forms.TextInput(attrs={'class': 'form-control'}))
    email = forms.EmailField(widget=forms.EmailInput(attrs={'class': 'form-control'}))
    full_name = forms.CharField(max_length=200, widget=forms.TextInput(attrs={'class': 'form-control'}))
    position = forms.CharField(max_length=100, required=False, widget=forms.TextInput(attrs={'class': 'form-control'}))
    password = forms.CharField(min_length=8, widget=forms.PasswordInput(attrs={'class': 'form-control'}))

    def clean_username(self):
        username = self.cleaned_data['username']
        if User.objects.filter(username=username).exists():
            raise forms.ValidationError("Username already exists.")
        return username

    def clean_email(self):
        email = self.cleaned_data['email']
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError("Email already registered.")
        return email
