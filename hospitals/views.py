# hospitals/views.py
from datetime import datetime

from django.contrib import messages
from django.contrib.auth import get_user_model
from django.db import transaction
from django.shortcuts import render, redirect, get_object_or_404
from django.utils import timezone
from django.views.decorators.http import require_POST

from accounts.decorators import hospital_required, role_required
from algorithms.allocation import AllocationError, get_available_matching_units
from algorithms.blood_compatibility import get_compatible_donors
from algorithms.choices import AppointmentStatus, BloodType, RequestStatus, Urgency
from algorithms.priority import sort_by_urgency
from donors.models import DonationAppointment, DonorProfile
from donors.utils import AppointmentError, set_appointment_status
from inventory.utils import expiring_soon, stock_by_blood_type, total_quantity
from recipients.models import RecipientProfile
from .forms import HospitalSettingsForm, StaffCreateForm
from .models import HospitalStaff
from .utils import (
    apply_allocation,
    build_report,
    donor_status,
    filter_people,
    filter_requests,
    issue_matched_units,
    recipient_status,
    request_stats,
    requests_for_hospital,
    update_request_status,
)

User = get_user_model()

OUTCOME_MESSAGES = {
    'fulfilled': (messages.SUCCESS, "Request fulfilled with available inventory"),
    'partially_fulfilled': (messages.WARNING, "Request partially fulfilled - some units still needed"),
    'unavailable': (messages.ERROR, "No matching blood units available"),
}


# ============================================
# DASHBOARDS
# ============================================
@hospital_required
def staff_dashboard(request):
    """Pending requests by urgency, available stock and short-dated units"""
    hospital = request.hospital
    blood_requests = requests_for_hospital(hospital)
    units = hospital.blood_units.all()

    context = {
        'hospital': hospital,
        'pending_requests': sort_by_urgency(blood_requests.filter(status=RequestStatus.PENDING))[:10],
        'stats': request_stats(blood_requests),
        'stock': stock_by_blood_type(units),
        'available_units': total_quantity(units),
        'expiring_units': expiring_soon(units),
    }
    return render(request, 'hospitals/staff_dashboard.html', context)


@role_required('hospital_admin')
def admin_dashboard(request):
    hospital = request.user.hospital
    if hospital is None:
        messages.error(request, "No hospital found for this admin.")
        return redirect('home')

    appointments = DonationAppointment.objects.filter(
        hospital=hospital
    ).select_related('donor', 'donor__user').order_by('appointment_date')

    context = {
        'hospital': hospital,
        'appointments': appointments,
        'staff_members': hospital.staff.select_related('user'),
        'report': build_report(hospital),
        'pending_appointments': appointments.filter(status=AppointmentStatus.SCHEDULED).count(),
        'appointment_statuses': AppointmentStatus.choices,
    }
    return render(request, 'hospitals/admin_dashboard.html', context)


# ============================================
# BLOOD REQUESTS
# ============================================
@hospital_required
def all_blood_requests(request):
    queryset = requests_for_hospital(request.hospital)
    filters = {
        'search': request.GET.get('q', '').strip(),
        'blood_type': request.GET.get('blood_type', 'all'),
        'urgency': request.GET.get('urgency', 'all'),
        'status': request.GET.get('status', 'all'),
    }
    context = {
        'hospital': request.hospital,
        'blood_requests': filter_requests(queryset, **filters),
        'stats': request_stats(queryset),
        'filters': filters,
        'blood_types': BloodType.values,
        'urgencies': Urgency.choices,
        'statuses': RequestStatus.choices,
    }
    return render(request, 'hospitals/all_blood_requests.html', context)


def _get_request_for_hospital(request, request_id):
    return get_object_or_404(
        requests_for_hospital(request.hospital),
        id=request_id,
    )


@hospital_required
def view_blood_request(request, request_id):
    """
    Request details plus a preview of compatible available units
    """
    blood_request = _get_request_for_hospital(request, request_id)
    units = request.hospital.blood_units.order_by('expiry_date', 'id')

    context = {
        'blood_request': blood_request,
        'compatible_types': sorted(get_compatible_donors(blood_request.blood_type)),
        'matching_units': get_available_matching_units(blood_request.blood_type, units),
        'matched_units': blood_request.matched_units.all(),
        'statuses': RequestStatus.choices,
    }
    return render(request, 'hospitals/blood_request.html', context)


@require_POST
@hospital_required
def match_request(request, request_id):
    blood_request = _get_request_for_hospital(request, request_id)

    # Staff matching an open request take it over for their hospital
    try:
        result = apply_allocation(blood_request, staff_user=request.user, hospital=request.hospital)
    except AllocationError as e:
        messages.error(request, str(e))
    else:
        level, text = OUTCOME_MESSAGES[result.status]
        messages.add_message(request, level, text)
    return redirect('view_blood_request', request_id=blood_request.id)


@require_POST
@hospital_required
def issue_units(request, request_id):
    blood_request = _get_request_for_hospital(request, request_id)
    try:
        issued = issue_matched_units(blood_request)
    except AllocationError as e:
        messages.error(request, str(e))
    else:
        messages.success(request, f"{issued} unit(s) issued for this request.")
    return redirect('view_blood_request', request_id=blood_request.id)


@require_POST
@hospital_required
def set_request_status(request, request_id):
    blood_request = _get_request_for_hospital(request, request_id)
    try:
        update_request_status(blood_request, request.POST.get('status'))
    except AllocationError as e:
        messages.error(request, str(e))
    else:
        messages.success(request, f"Request marked as {blood_request.get_status_display()}")
    return redirect('view_blood_request', request_id=blood_request.id)


# ============================================
# DONORS & RECIPIENTS
# ============================================
@hospital_required
def donors_and_recipients(request):
    filters = {
        'search': request.GET.get('q', '').strip(),
        'blood_type': request.GET.get('blood_type', 'all'),
    }
    donors = filter_people(DonorProfile.objects.all(), **filters)
    recipients = filter_people(RecipientProfile.objects.all(), **filters)

    context = {
        'hospital': request.hospital,
        'donors': [(donor, donor_status(donor)) for donor in donors],
        'recipients': [(recipient, recipient_status(recipient)) for recipient in recipients],
        'filters': filters,
        'blood_types': BloodType.values,
    }
    return render(request, 'hospitals/donors_recipients.html', context)


# ============================================
# APPOINTMENTS
# ============================================
@require_POST
@hospital_required
def update_appointment(request, appointment_id):
    appointment = get_object_or_404(DonationAppointment, id=appointment_id, hospital=request.hospital)

    new_date = None
    raw_date = request.POST.get('appointment_date')
    if raw_date:
        try:
            new_date = timezone.make_aware(datetime.strptime(raw_date, '%Y-%m-%dT%H:%M'))
        except ValueError:
            messages.error(request, "Invalid date.")
            return redirect('hospital_admin_dashboard')

    try:
        set_appointment_status(appointment, request.POST.get('status'), request.user, new_date=new_date)
    except AppointmentError as e:
        messages.error(request, str(e))
    else:
        messages.success(request, f"Appointment {appointment.get_status_display().lower()} successfully")

    if request.user.user_type == User.HOSPITAL_ADMIN:
        return redirect('hospital_admin_dashboard')
    return redirect('hospital_staff_dashboard')


# ============================================
# HOSPITAL SETTINGS / STAFF
# ============================================
@role_required('hospital_admin')
def hospital_settings(request):
    hospital = request.user.hospital
    if hospital is None:
        messages.error(request, "No hospital found for this admin.")
        return redirect('home')

    if request.method == 'POST':
        form = HospitalSettingsForm(request.POST, instance=hospital)
        if form.is_valid():
            form.save()
            messages.success(request, "Hospital information updated successfully")
            return redirect('hospital_settings')
    else:
        form = HospitalSettingsForm(instance=hospital)

    return render(request, 'hospitals/hospital_settings.html', {'hospital': hospital, 'form': form})


@role_required('hospital_admin')
def add_staff(request):
    hospital = request.user.hospital
    if hospital is None:
        messages.error(request, "No hospital found for this admin.")
        return redirect('home')

    if request.method == 'POST':
        form = StaffCreateForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            with transaction.atomic():
                user = User.objects.create_user(
                    username=data['username'],
                    email=data['email'],
                    password=data['password'],
                    full_name=data['full_name'],
                    user_type=User.HOSPITAL_STAFF,
                )
                HospitalStaff.objects.create(user=user, hospital=hospital, position=data['position'])
            messages.success(request, f"Staff member {user.username} added.")
            return redirect('hospital_admin_dashboard')
    else:
        form = StaffCreateForm()

    return render(request, 'hospitals/add_staff.html', {'hospital': hospital, 'form': form})
