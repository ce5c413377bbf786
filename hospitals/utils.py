import logging

from django.db import transaction
from django.db.models import Count, Q

from algorithms.allocation import AllocationError, allocate_request
from algorithms.choices import AppointmentStatus, HospitalStatus, RequestStatus, UnitStatus
from algorithms.priority import count_by_urgency, sort_by_urgency
from donors.models import DonationAppointment
from hospitals.models import BloodRequest
from inventory.models import BloodUnit
from inventory.utils import stock_by_blood_type, total_quantity

# Logger setup
logger = logging.getLogger(__name__)

ISSUABLE_STATUSES = (RequestStatus.FULFILLED, RequestStatus.PARTIALLY_FULFILLED)
MATCHABLE_STATUSES = (RequestStatus.PENDING, RequestStatus.UNAVAILABLE) + ISSUABLE_STATUSES
CANCELLABLE_STATUSES = (RequestStatus.PENDING, RequestStatus.UNAVAILABLE)


def inventory_snapshot(blood_request):
    """
    Units the allocator gets to see for a request: the request's hospital
    inventory when it has one, otherwise every hospital's. Oldest expiry
    first so short-dated stock is matched before fresh stock.
    """
    units = BloodUnit.objects.all()
    if blood_request.hospital_id:
        units = units.filter(hospital_id=blood_request.hospital_id)
    return list(units.order_by('expiry_date', 'id'))


def apply_allocation(blood_request, staff_user=None, hospital=None):
    """
    Run the allocator for one request and store the decision.

    Writes status and matched units; unit statuses are left alone, issuing
    them is a separate step (issue_matched_units). A request with no
    hospital is claimed for ``hospital`` before its inventory is read.

    Raises:
        AllocationError: the request is cancelled or assigned
    """
    if blood_request.status not in MATCHABLE_STATUSES:
        raise AllocationError(
            f"Request {blood_request.id} is {blood_request.status} and cannot be matched."
        )

    if hospital is not None and blood_request.hospital_id is None:
        blood_request.hospital = hospital
        blood_request.save(update_fields=['hospital', 'updated_at'])

    result = allocate_request(blood_request, inventory_snapshot(blood_request))

    with transaction.atomic():
        blood_request.status = result.status
        update_fields = ['status', 'updated_at']
        if staff_user is not None:
            blood_request.assigned_staff = staff_user
            update_fields.append('assigned_staff')
        blood_request.save(update_fields=update_fields)
        blood_request.matched_units.set(result.matched_unit_ids)

    logger.info(
        f"Request {blood_request.id} ({blood_request.blood_type} x{blood_request.units_needed}): "
        f"{result.status}, {result.available_quantity} compatible unit(s) available, "
        f"matched {len(result.matched_unit_ids)}"
    )
    return result


def issue_matched_units(blood_request):
    """
    Mark a matched request's units as used. Units that are no longer
    available (used by another request meanwhile) are skipped.

    Returns the number of units issued.
    """
    if blood_request.status not in ISSUABLE_STATUSES:
        raise AllocationError(
            f"Request {blood_request.id} is {blood_request.status}; only matched requests can be issued."
        )

    with transaction.atomic():
        issued = blood_request.matched_units.filter(
            status=UnitStatus.AVAILABLE
        ).update(status=UnitStatus.USED)

    logger.info(f"Issued {issued} unit(s) for request {blood_request.id}")
    return issued


def cancel_request(blood_request):
    """Recipient withdraws a request that has nothing issuable attached"""
    if blood_request.status not in CANCELLABLE_STATUSES:
        raise AllocationError(
            f"A {blood_request.get_status_display().lower()} request cannot be cancelled."
        )

    with transaction.atomic():
        blood_request.status = RequestStatus.CANCELLED
        blood_request.save(update_fields=['status', 'updated_at'])
        blood_request.matched_units.clear()

    logger.info(f"Request {blood_request.id} cancelled by recipient")
    return blood_request


def update_request_status(blood_request, status):
    """Manual status override by hospital staff"""
    if status not in RequestStatus.values:
        raise AllocationError(f"Invalid request status: {status!r}")

    blood_request.status = status
    blood_request.save(update_fields=['status', 'updated_at'])
    logger.info(f"Request {blood_request.id} manually marked as {status}")
    return blood_request


def requests_for_hospital(hospital):
    """Requests a hospital's staff handle: their own plus unassigned ones"""
    return BloodRequest.objects.filter(
        Q(hospital=hospital) | Q(hospital__isnull=True)
    ).select_related('recipient', 'recipient__user', 'hospital')


def filter_requests(queryset, search=None, blood_type=None, urgency=None, status=None):
    """
    Apply the request page filters and return a list sorted by urgency
    """
    if search:
        queryset = queryset.filter(
            Q(recipient__user__full_name__icontains=search) |
            Q(recipient__user__email__icontains=search)
        )
    if blood_type and blood_type != 'all':
        queryset = queryset.filter(blood_type=blood_type)
    if urgency and urgency != 'all':
        queryset = queryset.filter(urgency=urgency)
    if status and status != 'all':
        queryset = queryset.filter(status=status)
    return sort_by_urgency(queryset)


def filter_people(queryset, search=None, blood_type=None):
    """Donor/recipient directory filter: name, email or blood type"""
    if search:
        queryset = queryset.filter(
            Q(user__full_name__icontains=search) |
            Q(user__email__icontains=search) |
            Q(blood_type__iexact=search)
        )
    if blood_type and blood_type != 'all':
        queryset = queryset.filter(blood_type=blood_type)
    return queryset.select_related('user')


def donor_status(donor):
    if not donor.is_eligible:
        return 'inactive'
    if not donor.can_donate:
        return 'deferred'
    return 'active'


def recipient_status(recipient):
    """Active while the recipient has a request still being worked on"""
    open_requests = recipient.blood_requests.exclude(
        status__in=[RequestStatus.FULFILLED, RequestStatus.CANCELLED]
    )
    return 'active' if open_requests.exists() else 'inactive'


def request_stats(queryset):
    return {
        'pending': queryset.filter(status=RequestStatus.PENDING).count(),
        'critical': queryset.filter(status=RequestStatus.PENDING, urgency='critical').count(),
        'fulfilled': queryset.filter(status=RequestStatus.FULFILLED).count(),
    }


def build_report(hospital=None):
    """
    Reports & analytics figures for one hospital, or system-wide when
    hospital is None
    """
    units = BloodUnit.objects.all()
    appointments = DonationAppointment.objects.all()
    requests = BloodRequest.objects.all()
    if hospital is not None:
        units = units.filter(hospital=hospital)
        appointments = appointments.filter(hospital=hospital)
        requests = requests.filter(hospital=hospital)

    appointments_by_status = {s: 0 for s in AppointmentStatus.values}
    for row in appointments.order_by().values('status').annotate(count=Count('id')):
        appointments_by_status[row['status']] = row['count']

    return {
        'total_units_available': total_quantity(units, UnitStatus.AVAILABLE),
        'total_units_used': total_quantity(units, UnitStatus.USED),
        'stock_by_blood_type': stock_by_blood_type(units),
        'appointments_by_status': appointments_by_status,
        'requests_by_urgency': count_by_urgency(requests),
        'completed_donations': appointments_by_status[AppointmentStatus.COMPLETED.value],
        'fulfilled_requests': requests.filter(status=RequestStatus.FULFILLED).count(),
    }


def set_hospital_status(hospital, status):
    """Super admin verifies or suspends a hospital"""
    if status not in HospitalStatus.values:
        raise ValueError(f"Invalid hospital status: {status!r}")
    hospital.status = status
    hospital.save(update_fields=['status', 'updated_at'])
    logger.info(f"Hospital {hospital.name} marked as {status}")
    return hospital
