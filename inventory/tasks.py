# inventory/tasks.py
from celery import shared_task

from inventory.utils import mark_expired_units


@shared_task
def expire_blood_units():
    """Daily sweep: available units past their expiry date become expired"""
    updated = mark_expired_units()
    return f"Marked {updated} unit(s) as expired"
