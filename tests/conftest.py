from datetime import date, timedelta

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from algorithms.choices import HospitalStatus
from donors.models import DonorProfile
from hospitals.models import Hospital, HospitalStaff
from inventory.models import BloodUnit
from recipients.models import RecipientProfile

User = get_user_model()

PASSWORD = 'S3cure-pass!'


@pytest.fixture
def make_user(db):
    def _make_user(username, user_type, **extra):
        return User.objects.create_user(
            username=username,
            email=extra.pop('email', f'{username}@example.com'),
            password=PASSWORD,
            user_type=user_type,
            full_name=extra.pop('full_name', username.title()),
            **extra,
        )
    return _make_user


@pytest.fixture
def hospital_admin(make_user):
    return make_user('admin1', User.HOSPITAL_ADMIN)


@pytest.fixture
def hospital(hospital_admin):
    return Hospital.objects.create(
        admin_user=hospital_admin,
        name='City General',
        address='1 Main Street',
        city='Springfield',
        state='State',
        postal_code='12345',
        phone='555-0100',
        email='info@citygeneral.example.com',
        license_number='LIC-001',
        status=HospitalStatus.VERIFIED,
    )


@pytest.fixture
def other_hospital(make_user):
    return Hospital.objects.create(
        admin_user=make_user('admin2', User.HOSPITAL_ADMIN),
        name='Lakeside Clinic',
        address='9 Shore Road',
        city='Lakeside',
        state='State',
        postal_code='54321',
        phone='555-0200',
        email='info@lakeside.example.com',
        license_number='LIC-002',
        status=HospitalStatus.VERIFIED,
    )


@pytest.fixture
def staff_user(make_user, hospital):
    user = make_user('staff1', User.HOSPITAL_STAFF)
    HospitalStaff.objects.create(user=user, hospital=hospital, position='Nurse')
    return user


@pytest.fixture
def super_admin(make_user):
    return make_user('root', User.SUPER_ADMIN)


@pytest.fixture
def donor(make_user):
    user = make_user('donor1', User.DONOR)
    return DonorProfile.objects.create(user=user, blood_type='O-', date_of_birth=date(1990, 5, 1))


@pytest.fixture
def recipient(make_user):
    user = make_user('recipient1', User.RECIPIENT)
    return RecipientProfile.objects.create(user=user, blood_type='A+', date_of_birth=date(1985, 3, 12))


@pytest.fixture
def make_unit(hospital):
    def _make_unit(blood_type, quantity_units=1, status='available', collected_days_ago=1, unit_hospital=None):
        return BloodUnit.objects.create(
            hospital=unit_hospital or hospital,
            blood_type=blood_type,
            quantity_units=quantity_units,
            collection_date=date.today() - timedelta(days=collected_days_ago),
            status=status,
        )
    return _make_unit


@pytest.fixture
def api_client():
    return APIClient()
