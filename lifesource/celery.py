# lifesource/celery.py
"""
Celery configuration for background notifications and the inventory expiry sweep
"""
import os
from celery import Celery
from celery.schedules import crontab

# Set default Django settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'lifesource.settings')

app = Celery('lifesource')

# Load config from Django settings (prefix: CELERY_)
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks in all installed apps
app.autodiscover_tasks()

app.conf.beat_schedule = {
    'expire-blood-units-daily': {
        'task': 'inventory.tasks.expire_blood_units',
        'schedule': crontab(hour=0, minute=15),
    },
}
