# hospitals/models.py
from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator

from algorithms.choices import BloodType, HospitalStatus, RequestStatus, Urgency


class Hospital(models.Model):
    admin_user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='administered_hospital'
    )
    name = models.CharField(max_length=200)
    address = models.TextField()
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    postal_code = models.CharField(max_length=20)
    phone = models.CharField(max_length=20)
    email = models.EmailField()
    website = models.URLField(blank=True)

    license_number = models.CharField(max_length=100, unique=True)
    services = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=10, choices=HospitalStatus.choices, default=HospitalStatus.PENDING)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.city})"

    @property
    def is_verified(self):
        return self.status == HospitalStatus.VERIFIED

    class Meta:
        ordering = ['name']
        verbose_name = 'Hospital'
        verbose_name_plural = 'Hospitals'


class HospitalStaff(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='staff_profile'
    )
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='staff')
    position = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user.username} @ {self.hospital.name}"

    class Meta:
        verbose_name = 'Hospital Staff'
        verbose_name_plural = 'Hospital Staff'


class BloodRequest(models.Model):
    recipient = models.ForeignKey(
        'recipients.RecipientProfile',
        on_delete=models.CASCADE,
        related_name='blood_requests'
    )
    hospital = models.ForeignKey(
        Hospital,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='blood_requests'
    )
    assigned_staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_requests'
    )

    blood_type = models.CharField(max_length=3, choices=BloodType.choices)
    units_needed = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    urgency = models.CharField(max_length=10, choices=Urgency.choices, default=Urgency.MEDIUM)
    needed_by = models.DateField()

    medical_reason = models.TextField(blank=True)
    doctor_name = models.CharField(max_length=200)
    doctor_contact = models.CharField(max_length=50, blank=True)
    notes = models.TextField(blank=True)

    status = models.CharField(max_length=20, choices=RequestStatus.choices, default=RequestStatus.PENDING)
    matched_units = models.ManyToManyField(
        'inventory.BloodUnit',
        blank=True,
        related_name='matched_requests'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.recipient} - {self.blood_type} x{self.units_needed} ({self.urgency})"

    @property
    def matched_unit_ids(self):
        return list(self.matched_units.values_list('id', flat=True))

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Blood Request'
        verbose_name_plural = 'Blood Requests'
