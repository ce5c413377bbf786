# donors/tasks.py
"""
Celery tasks for donor notifications
"""
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from donors.models import DonationAppointment

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    'confirmed': "Your donation appointment has been confirmed.",
    'rescheduled': "Your donation appointment has been moved to a new date.",
    'cancelled': "Your donation appointment has been cancelled by the hospital.",
    'completed': "Thank you for donating! Your donation has been recorded.",
}


@shared_task
def send_appointment_update(appointment_id):
    """
    Email the donor after the hospital changes an appointment
    """
    try:
        appointment = DonationAppointment.objects.select_related(
            'donor__user', 'hospital'
        ).get(id=appointment_id)
    except DonationAppointment.DoesNotExist:
        logger.warning(f"Appointment {appointment_id} not found")
        return f"Appointment {appointment_id} not found"

    donor = appointment.donor
    headline = STATUS_MESSAGES.get(appointment.status)
    if headline is None or not donor.user.email:
        return f"Nothing to send for appointment {appointment_id}"

    message = f"""
Dear {donor.user.full_name or donor.user.username},

{headline}

Hospital: {appointment.hospital.name}
Address: {appointment.hospital.address}, {appointment.hospital.city}
Date: {appointment.appointment_date:%Y-%m-%d %H:%M}
Status: {appointment.get_status_display()}

Manage your appointments: {settings.SITE_URL}/donors/dashboard/

LifeSource Blood Bank
    """.strip()

    send_mail(
        subject=f"Donation appointment {appointment.get_status_display().lower()} - {appointment.hospital.name}",
        message=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[donor.user.email],
        fail_silently=True,
    )
    logger.info(f"Appointment update ({appointment.status}) emailed to {donor.user.username}")
    return f"Emailed {donor.user.email}"
