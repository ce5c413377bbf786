"""
Blood Type Compatibility Helper
Determines which donor blood types can donate to which recipient blood types
"""
from algorithms.choices import BloodType


class InvalidBloodType(ValueError):
    """Raised when a value is not one of the eight recognised blood types"""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid blood type: {value!r}")


# Blood type compatibility matrix (donor -> recipients it can serve)
COMPATIBILITY = {
    'O-': ['O-', 'O+', 'A-', 'A+', 'B-', 'B+', 'AB-', 'AB+'],  # Universal donor
    'O+': ['O+', 'A+', 'B+', 'AB+'],
    'A-': ['A-', 'A+', 'AB-', 'AB+'],
    'A+': ['A+', 'AB+'],
    'B-': ['B-', 'B+', 'AB-', 'AB+'],
    'B+': ['B+', 'AB+'],
    'AB-': ['AB-', 'AB+'],
    'AB+': ['AB+'],  # Universal recipient
}


def validate_blood_type(blood_type):
    """
    Return the blood type as a plain string, or raise InvalidBloodType
    """
    if blood_type not in BloodType.values:
        raise InvalidBloodType(blood_type)
    return str(blood_type)


def is_compatible(donor_blood_type, recipient_blood_type):
    """
    Check if donor blood type is compatible with recipient

    Args:
        donor_blood_type: Donor's blood type (e.g., 'O+')
        recipient_blood_type: Recipient's blood type (e.g., 'A+')

    Returns:
        Boolean: True if compatible, False otherwise
    """
    donor = validate_blood_type(donor_blood_type)
    recipient = validate_blood_type(recipient_blood_type)
    return recipient in COMPATIBILITY[donor]


def get_compatible_donors(recipient_blood_type):
    """
    Get the set of blood types that can donate to recipient

    Args:
        recipient_blood_type: Recipient's blood type

    Returns:
        frozenset of compatible donor blood types
    """
    recipient = validate_blood_type(recipient_blood_type)
    return frozenset(
        donor_type
        for donor_type, recipients in COMPATIBILITY.items()
        if recipient in recipients
    )


def get_compatible_recipients(donor_blood_type):
    """
    Get the set of blood types that can receive from donor
    """
    return frozenset(COMPATIBILITY[validate_blood_type(donor_blood_type)])
