# hospitals/tasks.py
"""
Celery tasks for hospital-side notifications
"""
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from algorithms.choices import HospitalStatus
from hospitals.models import BloodRequest, HospitalStaff

logger = logging.getLogger(__name__)


@shared_task
def notify_staff_of_request(blood_request_id):
    """
    Email hospital staff about a newly submitted blood request.
    Requests without a hospital go to staff of every verified hospital.
    """
    try:
        blood_request = BloodRequest.objects.select_related('recipient__user').get(id=blood_request_id)
    except BloodRequest.DoesNotExist:
        logger.warning(f"Blood request {blood_request_id} not found")
        return f"Blood request {blood_request_id} not found"

    staff = HospitalStaff.objects.select_related('user')
    if blood_request.hospital_id:
        staff = staff.filter(hospital_id=blood_request.hospital_id)
    else:
        staff = staff.filter(hospital__status=HospitalStatus.VERIFIED)

    recipient_list = [s.user.email for s in staff if s.user.email and s.user.is_active]
    if not recipient_list:
        logger.info(f"No staff to notify for request {blood_request.id}")
        return f"No staff to notify for request {blood_request.id}"

    message = f"""
NEW BLOOD REQUEST

Request ID: #{blood_request.id}
Blood Type: {blood_request.blood_type}
Units Needed: {blood_request.units_needed}
Urgency: {blood_request.urgency.upper()}
Needed By: {blood_request.needed_by}
Doctor: {blood_request.doctor_name} {blood_request.doctor_contact}

Review and match: {settings.SITE_URL}/hospitals/request/{blood_request.id}/
    """.strip()

    send_mail(
        subject=f"[{blood_request.urgency.upper()}] Blood Request #{blood_request.id} - {blood_request.blood_type}",
        message=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=recipient_list,
        fail_silently=True,
    )
    logger.info(f"Notified {len(recipient_list)} staff member(s) about request {blood_request.id}")
    return f"Notified {len(recipient_list)} staff member(s)"
