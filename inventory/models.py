# inventory/models.py
import uuid
from datetime import timedelta

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from algorithms.choices import BloodType, UnitStatus

BLOOD_UNIT_SHELF_LIFE_DAYS = 42


def generate_batch_number():
    return f"BU-{uuid.uuid4().hex[:10].upper()}"


class BloodUnit(models.Model):
    hospital = models.ForeignKey(
        'hospitals.Hospital',
        on_delete=models.CASCADE,
        related_name='blood_units'
    )
    donor = models.ForeignKey(
        'donors.DonorProfile',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='blood_units'
    )

    blood_type = models.CharField(max_length=3, choices=BloodType.choices)
    quantity_units = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    collection_date = models.DateField()
    expiry_date = models.DateField(blank=True)
    storage_location = models.CharField(max_length=100, blank=True)
    batch_number = models.CharField(max_length=20, unique=True, blank=True)
    notes = models.TextField(blank=True)

    status = models.CharField(max_length=10, choices=UnitStatus.choices, default=UnitStatus.AVAILABLE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def clean(self):
        if self.expiry_date and self.collection_date and self.expiry_date < self.collection_date:
            raise ValidationError("Expiry date cannot be before the collection date.")

    def save(self, *args, **kwargs):
        if not self.expiry_date and self.collection_date:
            self.expiry_date = self.collection_date + timedelta(days=BLOOD_UNIT_SHELF_LIFE_DAYS)
        if not self.batch_number:
            self.batch_number = generate_batch_number()
        super().save(*args, **kwargs)

    def days_until_expiry(self, today):
        return (self.expiry_date - today).days

    def __str__(self):
        return f"{self.blood_type} x{self.quantity_units} [{self.batch_number}] ({self.status})"

    class Meta:
        ordering = ['expiry_date', 'id']
        verbose_name = 'Blood Unit'
        verbose_name_plural = 'Blood Units'
