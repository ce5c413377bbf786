# inventory/views.py
from django.contrib import messages
from django.shortcuts import render, redirect, get_object_or_404
from django.views.decorators.http import require_POST

from accounts.decorators import hospital_required
from algorithms.choices import BloodType, UnitStatus
from .forms import BloodUnitForm
from .models import BloodUnit
from .utils import (
    add_unit,
    expiring_soon,
    filter_inventory,
    remove_unit,
    stock_by_blood_type,
    total_quantity,
    update_unit_status,
)


# ============================================
# INVENTORY LIST
# ============================================
@hospital_required
def inventory_list(request):
    units = request.hospital.blood_units.select_related('donor', 'donor__user')
    filters = {
        'blood_type': request.GET.get('blood_type', 'all'),
        'status': request.GET.get('status', 'all'),
        'search': request.GET.get('q', '').strip(),
    }

    context = {
        'hospital': request.hospital,
        'units': filter_inventory(units, **filters),
        'filters': filters,
        'stock': stock_by_blood_type(units),
        'available_units': total_quantity(units),
        'expiring_units': expiring_soon(units),
        'blood_types': BloodType.values,
        'statuses': UnitStatus.choices,
    }
    return render(request, 'inventory/inventory_list.html', context)


# ============================================
# ADD / UPDATE / REMOVE
# ============================================
@hospital_required
def add_blood_unit(request):
    if request.method == 'POST':
        form = BloodUnitForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            unit = add_unit(
                request.hospital,
                data['blood_type'],
                data['quantity_units'],
                data['collection_date'],
                donor=data.get('donor'),
                storage_location=data.get('storage_location', ''),
                notes=data.get('notes', ''),
            )
            messages.success(request, f"Blood unit {unit.batch_number} added to inventory.")
            return redirect('inventory_list')
    else:
        form = BloodUnitForm()

    return render(request, 'inventory/add_unit.html', {'form': form, 'hospital': request.hospital})


@require_POST
@hospital_required
def change_unit_status(request, unit_id):
    unit = get_object_or_404(BloodUnit, id=unit_id, hospital=request.hospital)
    try:
        update_unit_status(unit, request.POST.get('status'))
    except ValueError as e:
        messages.error(request, str(e))
    else:
        messages.success(request, f"Unit {unit.batch_number} is now {unit.get_status_display().lower()}.")
    return redirect('inventory_list')


@require_POST
@hospital_required
def remove_blood_unit(request, unit_id):
    unit = get_object_or_404(BloodUnit, id=unit_id, hospital=request.hospital)
    try:
        batch_number = remove_unit(unit)
    except ValueError as e:
        messages.error(request, str(e))
    else:
        messages.success(request, f"Unit {batch_number} removed from inventory.")
    return redirect('inventory_list')
