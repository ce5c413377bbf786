# algorithms/choices.py
"""
Closed value sets shared by the models, forms and the matching algorithms
"""
from django.db import models


class BloodType(models.TextChoices):
    O_NEG = 'O-', 'O-'
    O_POS = 'O+', 'O+'
    A_NEG = 'A-', 'A-'
    A_POS = 'A+', 'A+'
    B_NEG = 'B-', 'B-'
    B_POS = 'B+', 'B+'
    AB_NEG = 'AB-', 'AB-'
    AB_POS = 'AB+', 'AB+'


class UnitStatus(models.TextChoices):
    AVAILABLE = 'available', 'Available'
    RESERVED = 'reserved', 'Reserved'
    USED = 'used', 'Used'
    EXPIRED = 'expired', 'Expired'
    DISCARDED = 'discarded', 'Discarded'


class RequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ASSIGNED = 'assigned', 'Assigned'
    FULFILLED = 'fulfilled', 'Fulfilled'
    PARTIALLY_FULFILLED = 'partially_fulfilled', 'Partially Fulfilled'
    UNAVAILABLE = 'unavailable', 'Unavailable'
    CANCELLED = 'cancelled', 'Cancelled'


class Urgency(models.TextChoices):
    CRITICAL = 'critical', 'Critical'
    HIGH = 'high', 'High'
    MEDIUM = 'medium', 'Medium'
    LOW = 'low', 'Low'


class AppointmentStatus(models.TextChoices):
    SCHEDULED = 'scheduled', 'Scheduled'
    CONFIRMED = 'confirmed', 'Confirmed'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'
    RESCHEDULED = 'rescheduled', 'Rescheduled'


class HospitalStatus(models.TextChoices):
    PENDING = 'pending', 'Pending Verification'
    VERIFIED = 'verified', 'Verified'
    SUSPENDED = 'suspended', 'Suspended'
