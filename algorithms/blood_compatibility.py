"""
Blood Type Compatibility Model
Determines which recipient blood types each donor blood type can safely supply
"""

# Canonical order, also used when sorting by blood type
BLOOD_TYPES = ['O-', 'O+', 'A-', 'A+', 'B-', 'B+', 'AB-', 'AB+']

BLOOD_TYPE_CHOICES = [(blood_type, blood_type) for blood_type in BLOOD_TYPES]

# Donor type -> recipient types. Static transfusion knowledge, do not derive.
COMPATIBILITY = {
    'O-': frozenset(['O-', 'O+', 'A-', 'A+', 'B-', 'B+', 'AB-', 'AB+']),  # Universal donor
    'O+': frozenset(['O+', 'A+', 'B+', 'AB+']),
    'A-': frozenset(['A-', 'A+', 'AB-', 'AB+']),
    'A+': frozenset(['A+', 'AB+']),
    'B-': frozenset(['B-', 'B+', 'AB-', 'AB+']),
    'B+': frozenset(['B+', 'AB+']),
    'AB-': frozenset(['AB-', 'AB+']),
    'AB+': frozenset(['AB+']),
}


def get_compatible_recipients(donor_blood_type):
    """
    Get the set of blood types that can receive from donor

    Args:
        donor_blood_type: Donor's blood type (e.g., 'O+')

    Returns:
        frozenset of recipient blood types (empty for an unknown type)
    """
    return COMPATIBILITY.get(donor_blood_type, frozenset())


def is_compatible(donor_blood_type, recipient_blood_type):
    """
    Check if donor blood type is compatible with recipient

    Args:
        donor_blood_type: Donor's blood type (e.g., 'O+')
        recipient_blood_type: Recipient's blood type (e.g., 'A+')

    Returns:
        Boolean: True if compatible, False otherwise
    """
    return recipient_blood_type in get_compatible_recipients(donor_blood_type)


def get_compatible_donors(recipient_blood_type):
    """
    Get list of blood types that can donate to recipient, in canonical order
    """
    return [
        donor_type for donor_type in BLOOD_TYPES
        if recipient_blood_type in COMPATIBILITY[donor_type]
    ]


def get_blood_compatibility_score(donor_blood_type, recipient_blood_type):
    """
    Score blood compatibility (0-10)
    10 = exact match, 8 = compatible, 0 = incompatible
    """
    if not is_compatible(donor_blood_type, recipient_blood_type):
        return 0
    return 10 if donor_blood_type == recipient_blood_type else 8
