# algorithms/allocation.py
"""
Allocation Algorithm: matches a blood request against an inventory snapshot

Works on any objects exposing ``id``, ``blood_type``, ``quantity_units`` and
``status`` (BloodUnit instances or plain stand-ins). Nothing is saved here;
see hospitals.utils.apply_allocation for the persistence side.
"""
from dataclasses import dataclass, field

from algorithms.blood_compatibility import get_compatible_donors
from algorithms.choices import RequestStatus, UnitStatus


@dataclass(frozen=True)
class AllocationResult:
    status: str
    matched_unit_ids: list = field(default_factory=list)
    available_quantity: int = 0
    compatible_types: frozenset = frozenset()

    @property
    def is_fulfilled(self):
        return self.status == RequestStatus.FULFILLED


def get_available_matching_units(blood_type, units):
    """
    Filter the snapshot down to available units of a compatible donor type.
    Snapshot order is preserved.
    """
    compatible_types = get_compatible_donors(blood_type)
    return [
        unit for unit in units
        if unit.status == UnitStatus.AVAILABLE and str(unit.blood_type) in compatible_types
    ]


def allocate(blood_type, units_needed, units):
    """
    Decide how far the inventory snapshot can satisfy a request.

    Args:
        blood_type: Recipient blood type of the request
        units_needed: Units requested (positive integer)
        units: Iterable of inventory units, in allocation order

    Returns:
        AllocationResult with one of fulfilled / partially_fulfilled / unavailable.
        A fulfilled request is matched with the first ``units_needed`` unit
        records; a partial one with every matching record.
    """
    compatible_types = get_compatible_donors(blood_type)
    matching = get_available_matching_units(blood_type, units)
    available_quantity = sum(unit.quantity_units for unit in matching)

    if available_quantity == 0:
        status = RequestStatus.UNAVAILABLE
        matched = []
    elif available_quantity >= units_needed:
        status = RequestStatus.FULFILLED
        matched = matching[:units_needed]
    else:
        status = RequestStatus.PARTIALLY_FULFILLED
        matched = matching

    return AllocationResult(
        status=status.value,
        matched_unit_ids=[unit.id for unit in matched],
        available_quantity=available_quantity,
        compatible_types=compatible_types,
    )


def allocate_request(blood_request, units):
    """Convenience wrapper taking a BloodRequest-like object"""
    return allocate(blood_request.blood_type, blood_request.units_needed, units)


class AllocationError(Exception):
    """Raised for follow-up operations that make no sense for a request's state"""
