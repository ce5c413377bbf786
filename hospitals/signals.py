# hospitals/signals.py
"""
Signals to notify hospital staff when a blood request is submitted
"""
from django.db.models.signals import post_save
from django.dispatch import receiver

from algorithms.choices import RequestStatus
from hospitals.models import BloodRequest
from hospitals.tasks import notify_staff_of_request


@receiver(post_save, sender=BloodRequest)
def auto_notify_staff(sender, instance, created, **kwargs):
    if created and instance.status == RequestStatus.PENDING:
        notify_staff_of_request.delay(instance.id)
