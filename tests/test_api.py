from datetime import date, timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from algorithms.choices import HospitalStatus
from hospitals.models import BloodRequest, Hospital

pytestmark = pytest.mark.django_db


@pytest.fixture
def blood_request(recipient, hospital):
    return BloodRequest.objects.create(
        recipient=recipient,
        hospital=hospital,
        blood_type='AB+',
        units_needed=3,
        urgency='critical',
        needed_by=date.today() + timedelta(days=1),
        doctor_name='Dr. Strange',
    )


def as_user(api_client, user):
    api_client.force_authenticate(user=user)
    return api_client


# ============================================
# COMPATIBILITY / STATS
# ============================================
def test_compatibility_lookup(api_client, donor):
    response = as_user(api_client, donor.user).get(reverse('api:compatibility', args=['A+']))

    assert response.status_code == 200
    assert response.data['can_receive_from'] == ['A+', 'A-', 'O+', 'O-']
    assert response.data['can_donate_to'] == ['A+', 'AB+']


def test_compatibility_invalid_type(api_client, donor):
    response = as_user(api_client, donor.user).get(reverse('api:compatibility', args=['C+']))
    assert response.status_code == 400
    assert 'Invalid blood type' in response.data['error']


def test_compatibility_requires_login(api_client):
    response = api_client.get(reverse('api:compatibility', args=['A+']))
    assert response.status_code in (401, 403)


def test_stats_for_hospital_and_super_admin(api_client, staff_user, super_admin, make_unit):
    make_unit('O-', quantity_units=2)

    response = as_user(api_client, staff_user).get(reverse('api:dashboard-stats'))
    assert response.status_code == 200
    assert response.data['total_units_available'] == 2

    response = as_user(api_client, super_admin).get(reverse('api:dashboard-stats'))
    assert response.data['verified_hospitals'] == 1


def test_stats_forbidden_for_donor(api_client, donor):
    response = as_user(api_client, donor.user).get(reverse('api:dashboard-stats'))
    assert response.status_code == 403


# ============================================
# BLOOD REQUESTS
# ============================================
def test_match_endpoint(api_client, staff_user, blood_request, make_unit):
    o_neg = [make_unit('O-', collected_days_ago=10) for _ in range(2)]
    ab_pos = [make_unit('AB+', collected_days_ago=1) for _ in range(5)]

    response = as_user(api_client, staff_user).post(reverse('api:blood-request-match', args=[blood_request.id]))

    assert response.status_code == 200
    assert response.data['status'] == 'fulfilled'
    assert response.data['available_quantity'] == 7
    assert response.data['matched_units'] == [o_neg[0].id, o_neg[1].id, ab_pos[0].id]
    assert len(response.data['compatible_types']) == 8


def test_match_forbidden_for_recipient(api_client, recipient, blood_request):
    response = as_user(api_client, recipient.user).post(reverse('api:blood-request-match', args=[blood_request.id]))
    assert response.status_code == 403


def test_issue_unmatched_request_is_400(api_client, staff_user, blood_request):
    response = as_user(api_client, staff_user).post(reverse('api:blood-request-issue', args=[blood_request.id]))
    assert response.status_code == 400


def test_set_status_endpoint(api_client, staff_user, blood_request):
    client = as_user(api_client, staff_user)
    url = reverse('api:blood-request-set-status', args=[blood_request.id])

    assert client.post(url, {'status': 'assigned'}, format='json').data['status'] == 'assigned'
    assert client.post(url, {'status': 'bogus'}, format='json').status_code == 400


def test_matched_request_cannot_be_edited_or_deleted(api_client, recipient, staff_user, blood_request, make_unit):
    units = [make_unit('AB+') for _ in range(3)]
    as_user(api_client, staff_user).post(reverse('api:blood-request-match', args=[blood_request.id]))

    client = as_user(api_client, recipient.user)
    url = reverse('api:blood-request-detail', args=[blood_request.id])
    assert client.patch(url, {'blood_type': 'O-'}, format='json').status_code == 405
    assert client.put(url, {'blood_type': 'O-'}, format='json').status_code == 405
    assert client.delete(url).status_code == 405

    blood_request.refresh_from_db()
    assert blood_request.blood_type == 'AB+'
    assert blood_request.status == 'fulfilled'
    assert sorted(blood_request.matched_unit_ids) == [u.id for u in units]


def test_recipient_cancels_through_api(api_client, recipient, staff_user, blood_request):
    client = as_user(api_client, recipient.user)
    response = client.post(reverse('api:blood-request-cancel', args=[blood_request.id]))
    assert response.status_code == 200
    assert response.data['status'] == 'cancelled'

    response = as_user(api_client, staff_user).post(reverse('api:blood-request-cancel', args=[blood_request.id]))
    assert response.status_code == 403


def test_fulfilled_request_cannot_be_cancelled(api_client, recipient, staff_user, blood_request, make_unit):
    for _ in range(3):
        make_unit('AB+')
    as_user(api_client, staff_user).post(reverse('api:blood-request-match', args=[blood_request.id]))

    response = as_user(api_client, recipient.user).post(reverse('api:blood-request-cancel', args=[blood_request.id]))
    assert response.status_code == 400
    blood_request.refresh_from_db()
    assert blood_request.status == 'fulfilled'


def test_match_cancelled_request_is_400(api_client, staff_user, blood_request, make_unit):
    make_unit('AB+')
    blood_request.status = 'cancelled'
    blood_request.save()

    response = as_user(api_client, staff_user).post(reverse('api:blood-request-match', args=[blood_request.id]))

    assert response.status_code == 400
    blood_request.refresh_from_db()
    assert blood_request.status == 'cancelled'
    assert blood_request.matched_unit_ids == []


def test_match_claims_unassigned_request(api_client, staff_user, recipient, hospital, make_unit):
    unit = make_unit('A+')
    open_request = BloodRequest.objects.create(
        recipient=recipient,
        blood_type='A+',
        needed_by=date.today() + timedelta(days=1),
        doctor_name='Dr. Who',
    )

    response = as_user(api_client, staff_user).post(reverse('api:blood-request-match', args=[open_request.id]))

    assert response.status_code == 200
    assert response.data['matched_units'] == [unit.id]
    open_request.refresh_from_db()
    assert open_request.hospital == hospital


def test_recipient_creates_and_lists_own_requests(api_client, recipient, blood_request):
    client = as_user(api_client, recipient.user)
    response = client.post(reverse('api:blood-request-list'), {
        'blood_type': 'A+',
        'units_needed': 1,
        'urgency': 'low',
        'needed_by': (date.today() + timedelta(days=7)).isoformat(),
        'doctor_name': 'Dr. Who',
    }, format='json')

    assert response.status_code == 201
    assert response.data['status'] == 'pending'
    assert response.data['recipient'] == recipient.id

    response = client.get(reverse('api:blood-request-list'))
    assert len(response.data) == 2


def test_staff_cannot_create_requests(api_client, staff_user):
    response = as_user(api_client, staff_user).post(reverse('api:blood-request-list'), {
        'blood_type': 'A+',
        'units_needed': 1,
        'needed_by': (date.today() + timedelta(days=7)).isoformat(),
        'doctor_name': 'Dr. Who',
    }, format='json')
    assert response.status_code == 403


# ============================================
# INVENTORY
# ============================================
def test_inventory_create_and_scope(api_client, staff_user, hospital, other_hospital, make_unit):
    make_unit('B-', unit_hospital=other_hospital)
    client = as_user(api_client, staff_user)

    response = client.post(reverse('api:inventory-list'), {
        'blood_type': 'A-',
        'quantity_units': 3,
        'collection_date': date.today().isoformat(),
    }, format='json')
    assert response.status_code == 201
    assert response.data['hospital'] == hospital.id
    assert response.data['batch_number'].startswith('BU-')
    assert response.data['expiry_date'] == (date.today() + timedelta(days=42)).isoformat()

    response = client.get(reverse('api:inventory-list'))
    assert [u['blood_type'] for u in response.data] == ['A-']


def test_inventory_rejects_zero_quantity(api_client, staff_user):
    response = as_user(api_client, staff_user).post(reverse('api:inventory-list'), {
        'blood_type': 'A-',
        'quantity_units': 0,
        'collection_date': date.today().isoformat(),
    }, format='json')
    assert response.status_code == 400


def test_inventory_expiring_action(api_client, staff_user, make_unit):
    soon = make_unit('O+', collected_days_ago=40)
    make_unit('O+', collected_days_ago=1)

    response = as_user(api_client, staff_user).get(reverse('api:inventory-expiring'))
    assert [u['id'] for u in response.data] == [soon.id]


def test_inventory_delete_and_edit_of_matched_unit(api_client, staff_user, blood_request, make_unit):
    loose = make_unit('O+')
    matched = make_unit('AB+')
    blood_request.matched_units.add(matched)
    client = as_user(api_client, staff_user)

    assert client.delete(reverse('api:inventory-detail', args=[loose.id])).status_code == 204

    response = client.delete(reverse('api:inventory-detail', args=[matched.id]))
    assert response.status_code == 400

    url = reverse('api:inventory-detail', args=[matched.id])
    assert client.patch(url, {'blood_type': 'O-'}, format='json').status_code == 400
    response = client.patch(url, {'storage_location': 'Fridge B'}, format='json')
    assert response.status_code == 200
    assert response.data['blood_type'] == 'AB+'


def test_inventory_forbidden_for_donor(api_client, donor):
    response = as_user(api_client, donor.user).get(reverse('api:inventory-list'))
    assert response.status_code == 403


# ============================================
# APPOINTMENTS / HOSPITALS
# ============================================
def test_appointment_booking_and_confirmation(api_client, donor, hospital, hospital_admin):
    when = timezone.now() + timedelta(days=4)
    response = as_user(api_client, donor.user).post(reverse('api:appointment-list'), {
        'hospital': hospital.id,
        'appointment_date': when.isoformat(),
    }, format='json')
    assert response.status_code == 201
    appointment_id = response.data['id']

    response = as_user(api_client, hospital_admin).post(
        reverse('api:appointment-set-status', args=[appointment_id]),
        {'status': 'confirmed'},
        format='json',
    )
    assert response.status_code == 200
    assert response.data['status'] == 'confirmed'
    assert response.data['confirmed_by'] == hospital_admin.id


def test_booking_unverified_hospital_is_400(api_client, donor, hospital):
    hospital.status = HospitalStatus.SUSPENDED
    hospital.save()
    response = as_user(api_client, donor.user).post(reverse('api:appointment-list'), {
        'hospital': hospital.id,
        'appointment_date': (timezone.now() + timedelta(days=4)).isoformat(),
    }, format='json')
    assert response.status_code == 400


def test_hospital_listing_and_verification(api_client, donor, super_admin, staff_user, hospital):
    pending = Hospital.objects.create(
        name='New Clinic', address='2 Side St', city='Town', state='State',
        postal_code='11111', phone='555-0400', email='new@example.com', license_number='LIC-003',
    )

    response = as_user(api_client, donor.user).get(reverse('api:hospital-list'))
    assert [h['id'] for h in response.data] == [hospital.id]

    response = as_user(api_client, staff_user).post(reverse('api:hospital-verify', args=[hospital.id]))
    assert response.status_code == 403

    response = as_user(api_client, super_admin).post(reverse('api:hospital-verify', args=[pending.id]))
    assert response.status_code == 200
    pending.refresh_from_db()
    assert pending.status == 'verified'
