from django.shortcuts import render, redirect, get_object_or_404
from django.contrib import messages
from django.views.decorators.http import require_POST

from accounts.decorators import role_required
from algorithms.blood_compatibility import get_compatible_recipients
from algorithms.eligibility import days_until_eligible
from donors.forms import AppointmentBookingForm, DonorProfileUpdateForm
from donors.models import DonationAppointment
from donors.utils import AppointmentError, book_appointment, cancel_appointment


# ============================================
# DONOR DASHBOARD
# ============================================
@role_required('donor')
def donor_dashboard(request):
    donor = request.user.donor_profile
    appointments = donor.appointments.select_related('hospital')

    context = {
        'donor': donor,
        'upcoming_appointments': [a for a in appointments if a.is_open],
        'past_appointments': [a for a in appointments if not a.is_open],
        'can_donate': donor.can_donate,
        'next_eligible_date': donor.next_eligible_date,
        'days_until_eligible': days_until_eligible(donor),
        'can_give_to': sorted(get_compatible_recipients(donor.blood_type)),
        # each donation can help up to three patients
        'lives_saved': donor.total_donations * 3,
    }
    return render(request, 'donors/donor_dashboard.html', context)


# ============================================
# APPOINTMENTS
# ============================================
@role_required('donor')
def book_donation(request):
    donor = request.user.donor_profile

    if request.method == 'POST':
        form = AppointmentBookingForm(request.POST)
        if form.is_valid():
            try:
                book_appointment(
                    donor,
                    form.cleaned_data['hospital'],
                    form.cleaned_data['appointment_date'],
                    notes=form.cleaned_data.get('notes', ''),
                )
            except AppointmentError as e:
                form.add_error(None, str(e))
            else:
                messages.success(request, "Appointment booked successfully!")
                return redirect('donor_dashboard')
    else:
        form = AppointmentBookingForm()

    return render(request, 'donors/book_appointment.html', {'form': form, 'donor': donor})


@require_POST
@role_required('donor')
def cancel_donation(request, appointment_id):
    appointment = get_object_or_404(
        DonationAppointment,
        id=appointment_id,
        donor=request.user.donor_profile,
    )
    try:
        cancel_appointment(appointment)
    except AppointmentError as e:
        messages.error(request, str(e))
    else:
        messages.success(request, "Appointment cancelled.")
    return redirect('donor_dashboard')


# ============================================
# PROFILE
# ============================================
@role_required('donor')
def edit_profile(request):
    donor = request.user.donor_profile

    if request.method == 'POST':
        form = DonorProfileUpdateForm(request.POST, instance=donor)
        if form.is_valid():
            form.save()
            messages.success(request, "Profile updated successfully!")
            return redirect('donor_dashboard')
        messages.error(request, "Please correct the errors below.")
    else:
        form = DonorProfileUpdateForm(instance=donor)

    return render(request, 'donors/edit_profile.html', {'form': form, 'donor': donor})
