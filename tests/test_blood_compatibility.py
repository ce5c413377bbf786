import pytest

from algorithms.blood_compatibility import (
    COMPATIBILITY,
    InvalidBloodType,
    get_compatible_donors,
    get_compatible_recipients,
    is_compatible,
    validate_blood_type,
)
from algorithms.choices import BloodType

EXPECTED_DONORS = {
    'O-': {'O-'},
    'O+': {'O-', 'O+'},
    'A-': {'O-', 'A-'},
    'A+': {'O-', 'O+', 'A-', 'A+'},
    'B-': {'O-', 'B-'},
    'B+': {'O-', 'O+', 'B-', 'B+'},
    'AB-': {'O-', 'A-', 'B-', 'AB-'},
    'AB+': set(BloodType.values),
}


@pytest.mark.parametrize('recipient,donors', EXPECTED_DONORS.items())
def test_compatible_donors_table(recipient, donors):
    assert get_compatible_donors(recipient) == donors


def test_donors_is_inverse_of_donation_table():
    for donor, recipients in COMPATIBILITY.items():
        for recipient in BloodType.values:
            assert (donor in get_compatible_donors(recipient)) == (recipient in recipients)


def test_universal_donor_and_recipient():
    assert get_compatible_recipients('O-') == set(BloodType.values)
    assert get_compatible_recipients('AB+') == {'AB+'}


def test_relation_is_not_symmetric():
    assert is_compatible('O-', 'O+')
    assert not is_compatible('O+', 'O-')


def test_accepts_choice_members():
    assert get_compatible_donors(BloodType.O_NEG) == {'O-'}


@pytest.mark.parametrize('value', ['C+', '', 'o-', None, 'A'])
def test_invalid_blood_type(value):
    with pytest.raises(InvalidBloodType) as exc:
        get_compatible_donors(value)
    assert exc.value.value == value


def test_invalid_blood_type_is_value_error():
    with pytest.raises(ValueError):
        validate_blood_type('Z')
