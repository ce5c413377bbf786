import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse

from accounts.backends import EmailOrUsernameBackend
from donors.models import DonorProfile
from hospitals.models import Hospital

from .conftest import PASSWORD

User = get_user_model()

pytestmark = pytest.mark.django_db


def test_register_donor(api_client):
    response = api_client.post(reverse('accounts:register'), {
        'user_type': 'donor',
        'username': 'newdonor',
        'email': 'newdonor@example.com',
        'password': PASSWORD,
        'full_name': 'New Donor',
        'blood_type': 'B-',
        'date_of_birth': '1992-04-20',
    }, format='json')

    assert response.status_code == 201
    assert set(response.data['tokens']) == {'access', 'refresh'}
    profile = DonorProfile.objects.get(user__username='newdonor')
    assert profile.blood_type == 'B-'


def test_register_hospital_admin_creates_pending_hospital(api_client):
    response = api_client.post(reverse('accounts:register'), {
        'user_type': 'hospital_admin',
        'username': 'hadmin',
        'email': 'hadmin@example.com',
        'password': PASSWORD,
        'full_name': 'Hospital Admin',
        'hospital_name': 'Hilltop Hospital',
        'address': '5 Hill Road',
        'city': 'Hilltop',
        'state': 'State',
        'postal_code': '99999',
        'phone': '555-0300',
        'license_number': 'LIC-900',
    }, format='json')

    assert response.status_code == 201
    hospital = Hospital.objects.get(license_number='LIC-900')
    assert hospital.status == 'pending'
    assert hospital.admin_user.username == 'hadmin'


@pytest.mark.parametrize('payload,error', [
    ({'user_type': 'super_admin'}, 'Invalid user type'),
    ({'user_type': 'donor', 'blood_type': 'C+'}, 'Invalid blood type'),
    ({'user_type': 'recipient', 'full_name': ''}, 'full_name is required'),
])
def test_register_validation(api_client, payload, error):
    data = {
        'username': 'someone',
        'email': 'someone@example.com',
        'password': PASSWORD,
        'full_name': 'Some One',
        'blood_type': 'A+',
        'date_of_birth': '1990-01-01',
    }
    data.update(payload)
    response = api_client.post(reverse('accounts:register'), data, format='json')

    assert response.status_code == 400
    assert error in response.data['error']
    assert not User.objects.filter(username='someone').exists()


def test_login_by_email_returns_tokens(api_client, donor):
    response = api_client.post(reverse('accounts:login'), {
        'username': 'DONOR1@example.com',
        'password': PASSWORD,
    }, format='json')

    assert response.status_code == 200
    assert response.data['user_type'] == 'donor'
    assert 'access' in response.data['tokens']


def test_account_locks_after_five_failures(api_client, donor):
    url = reverse('accounts:login')
    for _ in range(5):
        response = api_client.post(url, {'username': 'donor1', 'password': 'wrong'}, format='json')
        assert response.status_code in (401, 403)

    user = User.objects.get(username='donor1')
    assert user.is_locked

    response = api_client.post(url, {'username': 'donor1', 'password': PASSWORD}, format='json')
    assert response.status_code in (401, 403)
    assert 'locked' in str(response.data['detail'])


def test_successful_login_resets_failures(api_client, donor):
    url = reverse('accounts:login')
    api_client.post(url, {'username': 'donor1', 'password': 'wrong'}, format='json')
    api_client.post(url, {'username': 'donor1', 'password': PASSWORD}, format='json')
    assert User.objects.get(username='donor1').failed_attempts == 0


def test_backend_rejects_locked_user(donor):
    user = donor.user
    user.is_locked = True
    user.save()
    assert EmailOrUsernameBackend().authenticate(None, username='donor1', password=PASSWORD) is None


def test_token_carries_user_type(api_client, staff_user):
    response = api_client.post(reverse('accounts:token_obtain_pair'), {
        'username': 'staff1',
        'password': PASSWORD,
    }, format='json')
    assert response.status_code == 200
    assert 'refresh' in response.data


def test_login_page_redirects_to_dashboard(client, recipient):
    response = client.post(reverse('accounts:login_page'), {'username': 'recipient1', 'password': PASSWORD})
    assert response.status_code == 302
    assert response.url == reverse('dashboard_router')

    response = client.get(reverse('dashboard_router'))
    assert response.url == reverse('recipient_dashboard')


def test_login_page_bad_password(client, recipient):
    response = client.post(reverse('accounts:login_page'), {'username': 'recipient1', 'password': 'nope'})
    assert response.status_code == 401


def test_user_hospital_property(hospital, hospital_admin, staff_user, donor):
    assert hospital_admin.hospital == hospital
    assert staff_user.hospital == hospital
    assert donor.user.hospital is None
