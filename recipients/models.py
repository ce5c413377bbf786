from django.db import models
from django.conf import settings

from algorithms.choices import BloodType


class RecipientProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='recipient_profile'
    )
    blood_type = models.CharField(max_length=3, choices=BloodType.choices)
    date_of_birth = models.DateField()
    medical_conditions = models.JSONField(default=list, blank=True)

    emergency_contact_name = models.CharField(max_length=200, blank=True)
    emergency_contact_phone = models.CharField(max_length=20, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user.full_name or self.user.username} ({self.blood_type})"

    class Meta:
        verbose_name = "Recipient Profile"
        verbose_name_plural = "Recipient Profiles"
        ordering = ['-created_at']
