# lifesource/views.py - project level pages and dashboard routing

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib import messages
from django.contrib.auth import get_user_model
from django.contrib.auth.decorators import login_required
from django.views.decorators.http import require_POST

from accounts.decorators import role_required
from algorithms.blood_compatibility import COMPATIBILITY
from algorithms.choices import BloodType, HospitalStatus
from hospitals.models import BloodRequest, Hospital
from hospitals.utils import build_report, set_hospital_status

User = get_user_model()

DASHBOARDS = {
    User.SUPER_ADMIN: 'super_admin_dashboard',
    User.HOSPITAL_ADMIN: 'hospital_admin_dashboard',
    User.HOSPITAL_STAFF: 'hospital_staff_dashboard',
    User.DONOR: 'donor_dashboard',
    User.RECIPIENT: 'recipient_dashboard',
}


# ========================================
# PUBLIC PAGES
# ========================================

def home(request):
    """Home page with the blood compatibility chart"""
    chart = [
        {'blood_type': bt, 'can_give_to': sorted(COMPATIBILITY[bt])}
        for bt in BloodType.values
    ]
    return render(request, 'home.html', {'chart': chart})


# ========================================
# DASHBOARD ROUTING
# ========================================

@login_required
def dashboard_router(request):
    """
    Redirects users to the dashboard for their user_type
    """
    user = request.user
    if user.is_superuser:
        return redirect('super_admin_dashboard')

    target = DASHBOARDS.get(user.user_type)
    if target is None:
        messages.error(request, "Unable to determine user type. Please contact support.")
        return redirect('home')
    return redirect(target)


# ========================================
# SUPER ADMIN
# ========================================

@role_required(User.SUPER_ADMIN)
def super_admin_dashboard(request):
    """
    All hospitals with their verification status, plus system-wide reports
    """
    hospitals = Hospital.objects.select_related('admin_user')
    status_filter = request.GET.get('status', 'all')
    if status_filter != 'all':
        hospitals = hospitals.filter(status=status_filter)

    context = {
        'hospitals': hospitals,
        'status_filter': status_filter,
        'statuses': HospitalStatus.choices,
        'report': build_report(),
        'total_users': User.objects.count(),
        'total_requests': BloodRequest.objects.count(),
    }
    return render(request, 'super_admin_dashboard.html', context)


@require_POST
@role_required(User.SUPER_ADMIN)
def update_hospital_status(request, hospital_id):
    hospital = get_object_or_404(Hospital, id=hospital_id)
    try:
        set_hospital_status(hospital, request.POST.get('status'))
    except ValueError as e:
        messages.error(request, str(e))
    else:
        messages.success(request, f"{hospital.name} is now {hospital.get_status_display().lower()}.")
    return redirect('super_admin_dashboard')
