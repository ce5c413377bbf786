from django.contrib.auth.models import AbstractUser
from django.db import models

MAX_FAILED_LOGIN_ATTEMPTS = 5


class CustomUser(AbstractUser):
    SUPER_ADMIN = 'super_admin'
    HOSPITAL_ADMIN = 'hospital_admin'
    HOSPITAL_STAFF = 'hospital_staff'
    DONOR = 'donor'
    RECIPIENT = 'recipient'

    USER_TYPE_CHOICES = (
        (SUPER_ADMIN, 'Super Admin'),
        (HOSPITAL_ADMIN, 'Hospital Admin'),
        (HOSPITAL_STAFF, 'Hospital Staff'),
        (DONOR, 'Donor'),
        (RECIPIENT, 'Recipient'),
    )

    user_type = models.CharField(
        max_length=20,
        choices=USER_TYPE_CHOICES,
        default=DONOR
    )
    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    is_verified = models.BooleanField(default=False)

    failed_attempts = models.PositiveIntegerField(default=0)
    is_locked = models.BooleanField(default=False)

    def __str__(self):
        return f"{self.username} ({self.user_type})"

    def register_failed_login(self):
        """Count a failed login and lock the account after too many"""
        self.failed_attempts += 1
        if self.failed_attempts >= MAX_FAILED_LOGIN_ATTEMPTS:
            self.is_locked = True
        self.save(update_fields=['failed_attempts', 'is_locked'])

    def reset_failed_logins(self):
        if self.failed_attempts:
            self.failed_attempts = 0
            self.save(update_fields=['failed_attempts'])

    @property
    def hospital(self):
        """Hospital the user administers or works at, if any"""
        if self.user_type == self.HOSPITAL_ADMIN:
            return getattr(self, 'administered_hospital', None)
        if self.user_type == self.HOSPITAL_STAFF:
            staff = getattr(self, 'staff_profile', None)
            return staff.hospital if staff else None
        return None
