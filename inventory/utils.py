import logging
from datetime import date, timedelta

from django.db import transaction
from django.db.models import Q, Sum

from algorithms.blood_compatibility import validate_blood_type
from algorithms.choices import BloodType, UnitStatus
from inventory.models import BLOOD_UNIT_SHELF_LIFE_DAYS, BloodUnit

EXPIRY_WARNING_DAYS = 7

logger = logging.getLogger(__name__)


def add_unit(hospital, blood_type, quantity_units, collection_date, donor=None,
             storage_location='', notes='', batch_number=None):
    """
    Add a blood unit batch to a hospital's inventory.

    Expiry is fixed at collection date + 42 days and a unique batch number
    is generated when none is given.

    Raises:
        InvalidBloodType: unknown blood type
        ValueError: quantity_units <= 0
    """
    blood_type = validate_blood_type(blood_type)
    if quantity_units <= 0:
        raise ValueError("Units to add must be positive.")

    unit = BloodUnit.objects.create(
        hospital=hospital,
        donor=donor,
        blood_type=blood_type,
        quantity_units=quantity_units,
        collection_date=collection_date,
        expiry_date=collection_date + timedelta(days=BLOOD_UNIT_SHELF_LIFE_DAYS),
        storage_location=storage_location,
        notes=notes,
        batch_number=batch_number or '',
        status=UnitStatus.AVAILABLE,
    )
    logger.info(f"Added {unit.quantity_units} x {unit.blood_type} ({unit.batch_number}) to {hospital.name}")
    return unit


def update_unit_status(unit, status):
    if status not in UnitStatus.values:
        raise ValueError(f"Invalid unit status: {status!r}")
    unit.status = status
    unit.save(update_fields=['status', 'updated_at'])
    logger.info(f"Blood unit {unit.batch_number} marked as {status}")
    return unit


def remove_unit(unit):
    """
    Delete a unit from inventory. Units matched to a blood request stay on
    record; they can be marked discarded instead.
    """
    if unit.matched_requests.exists():
        raise ValueError(
            f"Unit {unit.batch_number} is matched to a blood request; mark it discarded instead."
        )
    batch_number = unit.batch_number
    unit.delete()
    logger.info(f"Blood unit {batch_number} removed from inventory")
    return batch_number


def filter_inventory(queryset, blood_type=None, status=None, search=None):
    """Apply the inventory page filters; 'all' or empty means no filter"""
    if blood_type and blood_type != 'all':
        queryset = queryset.filter(blood_type=blood_type)
    if status and status != 'all':
        queryset = queryset.filter(status=status)
    if search:
        queryset = queryset.filter(
            Q(batch_number__icontains=search) |
            Q(storage_location__icontains=search)
        )
    return queryset


def expiring_soon(queryset, days=EXPIRY_WARNING_DAYS, today=None):
    """
    Available units expiring within the next ``days`` days.
    Units expiring today or earlier are not included.
    """
    today = today or date.today()
    return queryset.filter(
        status=UnitStatus.AVAILABLE,
        expiry_date__gt=today,
        expiry_date__lte=today + timedelta(days=days),
    ).order_by('expiry_date', 'id')


def stock_by_blood_type(queryset):
    """
    Available quantity per blood type, every blood type present
    """
    stock = {bt: 0 for bt in BloodType.values}
    rows = (
        queryset.filter(status=UnitStatus.AVAILABLE)
        .order_by()
        .values('blood_type')
        .annotate(total=Sum('quantity_units'))
    )
    for row in rows:
        stock[row['blood_type']] = row['total'] or 0
    return stock


def total_quantity(queryset, status=UnitStatus.AVAILABLE):
    return queryset.filter(status=status).aggregate(total=Sum('quantity_units'))['total'] or 0


def mark_expired_units(today=None):
    """
    Flag available units whose expiry date has passed. Returns the count.
    """
    today = today or date.today()
    with transaction.atomic():
        updated = BloodUnit.objects.filter(
            status=UnitStatus.AVAILABLE,
            expiry_date__lt=today,
        ).update(status=UnitStatus.EXPIRED)
    if updated:
        logger.info(f"Marked {updated} blood unit(s) as expired")
    return updated
