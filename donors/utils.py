import logging

from django.db import transaction
from django.utils import timezone

from algorithms.choices import AppointmentStatus
from algorithms.eligibility import can_donate, next_eligible_date
from donors.models import DonationAppointment
from donors.tasks import send_appointment_update

# Logger setup
logger = logging.getLogger(__name__)

HOSPITAL_SETTABLE_STATUSES = (
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.COMPLETED,
    AppointmentStatus.CANCELLED,
    AppointmentStatus.RESCHEDULED,
)


class AppointmentError(Exception):
    """Raised when an appointment cannot be booked or changed"""


def book_appointment(donor, hospital, appointment_date, notes=''):
    """
    Book a donation appointment.

    Criteria:
    - Hospital is verified
    - Appointment is in the future
    - Donor is out of the 90-day cooldown on the appointment date
    """
    if not hospital.is_verified:
        raise AppointmentError("Appointments can only be booked at verified hospitals.")

    if appointment_date <= timezone.now():
        raise AppointmentError("Appointment date must be in the future.")

    if not can_donate(donor, today=appointment_date.date()):
        eligible_from = next_eligible_date(donor.last_donation_date)
        if eligible_from:
            raise AppointmentError(f"You are eligible to donate again from {eligible_from:%Y-%m-%d}.")
        raise AppointmentError("Your donor profile is currently marked as not eligible.")

    appointment = DonationAppointment.objects.create(
        donor=donor,
        hospital=hospital,
        appointment_date=appointment_date,
        notes=notes,
    )
    logger.info(f"Donor {donor.user.username} booked appointment {appointment.id} at {hospital.name}")
    return appointment


def cancel_appointment(appointment):
    """Donor-side cancellation of an open appointment"""
    if not appointment.is_open:
        raise AppointmentError(f"A {appointment.status} appointment cannot be cancelled.")
    appointment.status = AppointmentStatus.CANCELLED
    appointment.save(update_fields=['status', 'updated_at'])
    logger.info(f"Appointment {appointment.id} cancelled by donor")
    return appointment


def set_appointment_status(appointment, status, user, new_date=None):
    """
    Hospital-side status change.

    Records who changed it and when. Rescheduling needs a new date.
    Completing an appointment counts the donation on the donor profile.
    """
    if status not in HOSPITAL_SETTABLE_STATUSES:
        raise AppointmentError(f"Invalid appointment status: {status!r}")

    if appointment.status == AppointmentStatus.COMPLETED:
        raise AppointmentError("Completed appointments cannot be changed.")

    if status == AppointmentStatus.RESCHEDULED:
        if new_date is None:
            raise AppointmentError("A new date is required to reschedule.")
        appointment.appointment_date = new_date

    with transaction.atomic():
        appointment.status = status
        appointment.confirmed_by = user
        appointment.confirmed_at = timezone.now()
        appointment.save()

        if status == AppointmentStatus.COMPLETED:
            record_donation(appointment)

    send_appointment_update.delay(appointment.id)
    logger.info(f"Appointment {appointment.id} set to {status} by {user.username}")
    return appointment


def record_donation(appointment):
    donor = appointment.donor
    donor.last_donation_date = timezone.localdate(appointment.appointment_date)
    donor.total_donations += 1
    donor.save(update_fields=['last_donation_date', 'total_donations', 'updated_at'])
