import logging

from django.contrib import messages
from django.shortcuts import render, redirect, get_object_or_404
from django.views.decorators.http import require_POST

from accounts.decorators import role_required
from algorithms.allocation import AllocationError
from algorithms.blood_compatibility import get_compatible_donors
from hospitals.models import BloodRequest
from hospitals.utils import cancel_request, request_stats
from .forms import BloodRequestForm

logger = logging.getLogger(__name__)


# ============================================
# RECIPIENT DASHBOARD
# ============================================
@role_required('recipient')
def recipient_dashboard(request):
    recipient = request.user.recipient_profile
    blood_requests = recipient.blood_requests.select_related('hospital')

    context = {
        'recipient': recipient,
        'blood_requests': blood_requests,
        'stats': request_stats(blood_requests),
        'compatible_donors': sorted(get_compatible_donors(recipient.blood_type)),
    }
    return render(request, 'recipients/recipient_dashboard.html', context)


# ============================================
# BLOOD REQUESTS
# ============================================
@role_required('recipient')
def create_blood_request(request):
    recipient = request.user.recipient_profile

    if request.method == 'POST':
        form = BloodRequestForm(request.POST)
        if form.is_valid():
            blood_request = form.save(commit=False)
            blood_request.recipient = recipient
            blood_request.save()
            logger.info(
                f"Recipient {request.user.username} created request {blood_request.id} "
                f"({blood_request.blood_type} x{blood_request.units_needed}, {blood_request.urgency})"
            )
            messages.success(request, "Blood request submitted. Hospital staff have been notified.")
            return redirect('recipient_dashboard')
    else:
        form = BloodRequestForm(initial={'blood_type': recipient.blood_type})

    return render(request, 'recipients/create_request.html', {'form': form})


@require_POST
@role_required('recipient')
def cancel_blood_request(request, request_id):
    blood_request = get_object_or_404(
        BloodRequest,
        id=request_id,
        recipient=request.user.recipient_profile,
    )
    try:
        cancel_request(blood_request)
    except AllocationError as e:
        messages.error(request, str(e))
    else:
        messages.success(request, "Blood request cancelled.")
    return redirect('recipient_dashboard')
