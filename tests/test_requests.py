from datetime import date, timedelta

import pytest
from django.core import mail

from algorithms.allocation import AllocationError
from donors.models import DonorProfile
from hospitals.models import BloodRequest
from hospitals.utils import (
    apply_allocation,
    build_report,
    cancel_request,
    donor_status,
    filter_people,
    filter_requests,
    inventory_snapshot,
    issue_matched_units,
    recipient_status,
    request_stats,
    requests_for_hospital,
    update_request_status,
)
from recipients.models import RecipientProfile

pytestmark = pytest.mark.django_db


@pytest.fixture
def make_request(recipient, hospital):
    def _make_request(blood_type='A+', units_needed=1, urgency='medium', request_hospital=hospital, **extra):
        return BloodRequest.objects.create(
            recipient=recipient,
            hospital=request_hospital,
            blood_type=blood_type,
            units_needed=units_needed,
            urgency=urgency,
            needed_by=date.today() + timedelta(days=3),
            doctor_name='Dr. Grey',
            **extra,
        )
    return _make_request


def test_snapshot_is_hospital_scoped_and_oldest_first(make_request, make_unit, other_hospital):
    older = make_unit('A+', collected_days_ago=20)
    newer = make_unit('A+', collected_days_ago=2)
    make_unit('A+', unit_hospital=other_hospital)

    assert inventory_snapshot(make_request()) == [older, newer]
    assert len(inventory_snapshot(make_request(request_hospital=None))) == 3


def test_apply_allocation_fulfilled(make_request, make_unit, staff_user):
    older = make_unit('O-', collected_days_ago=10)
    make_unit('A+', collected_days_ago=1)
    blood_request = make_request(units_needed=1)

    result = apply_allocation(blood_request, staff_user=staff_user)
    blood_request.refresh_from_db()

    assert result.status == 'fulfilled'
    assert blood_request.status == 'fulfilled'
    assert blood_request.matched_unit_ids == [older.id]
    assert blood_request.assigned_staff == staff_user
    older.refresh_from_db()
    assert older.status == 'available'


def test_apply_allocation_partial_and_unavailable(make_request, make_unit):
    make_unit('A-')
    partial = make_request(units_needed=4)
    apply_allocation(partial)
    partial.refresh_from_db()
    assert partial.status == 'partially_fulfilled'
    assert len(partial.matched_unit_ids) == 1

    none_left = make_request(blood_type='O-', units_needed=1)
    apply_allocation(none_left)
    none_left.refresh_from_db()
    assert none_left.status == 'unavailable'
    assert none_left.matched_unit_ids == []


def test_issue_matched_units(make_request, make_unit):
    unit = make_unit('A+')
    blood_request = make_request()
    apply_allocation(blood_request)

    assert issue_matched_units(blood_request) == 1
    unit.refresh_from_db()
    assert unit.status == 'used'

    # already used units are not issued twice
    assert issue_matched_units(blood_request) == 0


def test_issue_requires_matched_request(make_request):
    with pytest.raises(AllocationError):
        issue_matched_units(make_request())


@pytest.mark.parametrize('status', ['cancelled', 'assigned'])
def test_apply_allocation_refuses_closed_requests(make_request, make_unit, status):
    make_unit('A+')
    blood_request = make_request(status=status)

    with pytest.raises(AllocationError):
        apply_allocation(blood_request)

    blood_request.refresh_from_db()
    assert blood_request.status == status
    assert blood_request.matched_unit_ids == []


def test_apply_allocation_rematches_outcome_states(make_request, make_unit):
    blood_request = make_request(units_needed=1)
    apply_allocation(blood_request)
    assert blood_request.status == 'unavailable'

    unit = make_unit('A-')
    apply_allocation(blood_request)
    blood_request.refresh_from_db()
    assert blood_request.status == 'fulfilled'
    assert blood_request.matched_unit_ids == [unit.id]


def test_apply_allocation_claims_unscoped_request(make_request, make_unit, hospital, other_hospital):
    make_unit('A+', unit_hospital=other_hospital)
    own = make_unit('A+')
    blood_request = make_request(request_hospital=None)

    apply_allocation(blood_request, hospital=hospital)
    blood_request.refresh_from_db()

    assert blood_request.hospital == hospital
    assert blood_request.matched_unit_ids == [own.id]


def test_cancel_request_only_before_units_are_issuable(make_request, make_unit):
    make_unit('A+')
    partial = make_request(units_needed=2)
    apply_allocation(partial)
    assert partial.status == 'partially_fulfilled'

    with pytest.raises(AllocationError):
        cancel_request(partial)

    none_left = make_request(blood_type='O-')
    apply_allocation(none_left)
    cancel_request(none_left)
    none_left.refresh_from_db()
    assert none_left.status == 'cancelled'
    assert none_left.matched_unit_ids == []


def test_update_request_status(make_request):
    blood_request = make_request()
    update_request_status(blood_request, 'assigned')
    blood_request.refresh_from_db()
    assert blood_request.status == 'assigned'

    with pytest.raises(AllocationError):
        update_request_status(blood_request, 'done')


def test_requests_for_hospital_includes_unassigned(make_request, other_hospital, hospital):
    own = make_request()
    unassigned = make_request(request_hospital=None)
    make_request(request_hospital=other_hospital)

    assert set(requests_for_hospital(hospital)) == {own, unassigned}


def test_filter_and_stats(make_request, hospital):
    low = make_request(urgency='low')
    critical = make_request(urgency='critical', blood_type='B+')
    make_request(urgency='high', status='fulfilled')

    queryset = requests_for_hospital(hospital)
    assert filter_requests(queryset, status='pending') == [critical, low]
    assert filter_requests(queryset, blood_type='B+') == [critical]
    assert filter_requests(queryset, search='nobody') == []
    assert len(filter_requests(queryset, search='recipient1@example')) == 3
    assert request_stats(queryset) == {'pending': 2, 'critical': 1, 'fulfilled': 1}


def test_new_request_emails_hospital_staff(make_request, staff_user):
    make_request(urgency='critical')
    assert len(mail.outbox) == 1
    assert mail.outbox[0].to == [staff_user.email]
    assert '[CRITICAL]' in mail.outbox[0].subject


def test_build_report(make_request, make_unit, hospital):
    make_unit('O+', quantity_units=3)
    make_unit('O+', quantity_units=2, status='used')
    make_request(urgency='high', status='fulfilled')

    report = build_report(hospital)

    assert report['total_units_available'] == 3
    assert report['total_units_used'] == 2
    assert report['stock_by_blood_type']['O+'] == 3
    assert report['requests_by_urgency']['high'] == 1
    assert report['fulfilled_requests'] == 1
    assert report['appointments_by_status']['completed'] == 0
    assert report['completed_donations'] == 0


def test_filter_people_by_name_email_and_blood_type(donor, recipient):
    donors = DonorProfile.objects.all()
    recipients = RecipientProfile.objects.all()

    assert list(filter_people(donors, search='donor1')) == [donor]
    assert list(filter_people(recipients, search='recipient1@example')) == [recipient]
    assert list(filter_people(donors, search='o-')) == [donor]
    assert list(filter_people(recipients, search='O-')) == []
    assert list(filter_people(recipients, blood_type='A+')) == [recipient]
    assert list(filter_people(donors, blood_type='all')) == [donor]


def test_donor_status(donor):
    assert donor_status(donor) == 'active'

    donor.last_donation_date = date.today() - timedelta(days=10)
    assert donor_status(donor) == 'deferred'

    donor.is_eligible = False
    assert donor_status(donor) == 'inactive'


def test_recipient_status(make_request, recipient):
    assert recipient_status(recipient) == 'inactive'

    blood_request = make_request()
    assert recipient_status(recipient) == 'active'

    cancel_request(blood_request)
    assert recipient_status(recipient) == 'inactive'
