from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator

from algorithms.choices import AppointmentStatus, BloodType
from algorithms import eligibility


# ---------------------------
# Donor Profile
# ---------------------------
class DonorProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='donor_profile'
    )

    blood_type = models.CharField(max_length=3, choices=BloodType.choices)
    date_of_birth = models.DateField()

    # Health info (optional)
    weight_kg = models.FloatField(null=True, blank=True, validators=[MinValueValidator(45)])
    medical_conditions = models.JSONField(default=list, blank=True)

    emergency_contact_name = models.CharField(max_length=200, blank=True)
    emergency_contact_phone = models.CharField(max_length=20, blank=True)

    # Donation tracking
    is_eligible = models.BooleanField(default=True)
    last_donation_date = models.DateField(null=True, blank=True)
    total_donations = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def can_donate(self) -> bool:
        """Donors can donate every 90 days"""
        return eligibility.can_donate(self)

    @property
    def next_eligible_date(self):
        return eligibility.next_eligible_date(self.last_donation_date)

    def __str__(self):
        return f"{self.user.full_name or self.user.username} ({self.blood_type})"

    class Meta:
        verbose_name = "Donor Profile"
        verbose_name_plural = "Donor Profiles"
        ordering = ['-created_at']


# ---------------------------
# Donation Appointment
# ---------------------------
class DonationAppointment(models.Model):
    donor = models.ForeignKey(
        DonorProfile,
        on_delete=models.CASCADE,
        related_name='appointments'
    )
    hospital = models.ForeignKey(
        'hospitals.Hospital',
        on_delete=models.CASCADE,
        related_name='appointments'
    )

    appointment_date = models.DateTimeField()
    status = models.CharField(
        max_length=15,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.SCHEDULED
    )
    notes = models.TextField(blank=True)

    confirmed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='confirmed_appointments'
    )
    confirmed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_open(self):
        return self.status in (
            AppointmentStatus.SCHEDULED,
            AppointmentStatus.CONFIRMED,
            AppointmentStatus.RESCHEDULED,
        )

    def __str__(self):
        return f"{self.donor} @ {self.hospital.name} on {self.appointment_date:%Y-%m-%d %H:%M}"

    class Meta:
        ordering = ['appointment_date']
        indexes = [
            models.Index(fields=['hospital', 'status']),
            models.Index(fields=['donor', 'appointment_date']),
        ]
