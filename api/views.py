# api/views.py
from django.contrib.auth import get_user_model
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response

from accounts.decorators import HOSPITAL_ROLES, HasRole
from algorithms.allocation import AllocationError
from algorithms.blood_compatibility import (
    InvalidBloodType,
    get_compatible_donors,
    get_compatible_recipients,
    validate_blood_type,
)
from algorithms.choices import HospitalStatus
from donors.models import DonationAppointment
from donors.utils import AppointmentError, book_appointment, cancel_appointment, set_appointment_status
from hospitals.models import BloodRequest, Hospital
from hospitals.utils import (
    apply_allocation,
    build_report,
    cancel_request,
    issue_matched_units,
    requests_for_hospital,
    set_hospital_status,
    update_request_status,
)
from inventory.utils import (
    EXPIRY_WARNING_DAYS,
    add_unit,
    expiring_soon,
    filter_inventory,
    remove_unit,
)
from .serializers import (
    AppointmentBookingSerializer,
    AppointmentSerializer,
    BloodRequestSerializer,
    BloodUnitSerializer,
    HospitalSerializer,
    StatusSerializer,
)

User = get_user_model()


def _user_hospital(user):
    hospital = user.hospital
    if hospital is None:
        raise PermissionDenied("No hospital is linked to this account")
    return hospital


def _require_roles(request, *roles):
    if request.user.user_type not in roles:
        raise PermissionDenied("Access denied")


def _bad_request(error):
    return Response({'error': str(error)}, status=status.HTTP_400_BAD_REQUEST)


# ============================================
# INVENTORY
# ============================================
class InventoryViewSet(viewsets.ModelViewSet):
    """Blood units of the caller's hospital"""
    serializer_class = BloodUnitSerializer
    permission_classes = [HasRole]
    allowed_roles = HOSPITAL_ROLES

    def get_queryset(self):
        queryset = _user_hospital(self.request.user).blood_units.select_related('hospital')
        params = self.request.query_params
        return filter_inventory(
            queryset,
            blood_type=params.get('blood_type'),
            status=params.get('status'),
            search=params.get('search'),
        )

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.instance = add_unit(
            _user_hospital(self.request.user),
            data['blood_type'],
            data['quantity_units'],
            data['collection_date'],
            donor=data.get('donor'),
            storage_location=data.get('storage_location', ''),
            notes=data.get('notes', ''),
        )

    def perform_update(self, serializer):
        unit = serializer.instance
        new_type = serializer.validated_data.get('blood_type', unit.blood_type)
        if new_type != unit.blood_type and unit.matched_requests.exists():
            raise ValidationError({'error': "Blood type of a matched unit cannot be changed."})
        serializer.save()

    def perform_destroy(self, instance):
        try:
            remove_unit(instance)
        except ValueError as e:
            raise ValidationError({'error': str(e)})

    @action(detail=False, methods=['get'])
    def expiring(self, request):
        """Available units expiring within ?days= (default 7)"""
        try:
            days = int(request.query_params.get('days', EXPIRY_WARNING_DAYS))
        except (TypeError, ValueError):
            return _bad_request("days must be an integer")

        units = expiring_soon(_user_hospital(request.user).blood_units.all(), days=days)
        return Response(self.get_serializer(units, many=True).data)


# ============================================
# BLOOD REQUESTS
# ============================================
class BloodRequestViewSet(mixins.CreateModelMixin,
                          mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          viewsets.GenericViewSet):
    """
    Recipients create and see their own requests; hospital staff see their
    hospital's (plus unassigned) requests and run matching on them.
    Requests are never edited or deleted here, only moved through the
    match/issue/cancel actions.
    """
    serializer_class = BloodRequestSerializer
    permission_classes = [HasRole]
    allowed_roles = (User.RECIPIENT, User.SUPER_ADMIN) + HOSPITAL_ROLES

    def get_queryset(self):
        user = self.request.user
        if user.user_type == User.RECIPIENT:
            queryset = BloodRequest.objects.filter(recipient__user=user)
        elif user.user_type == User.SUPER_ADMIN:
            queryset = BloodRequest.objects.all()
        else:
            queryset = requests_for_hospital(_user_hospital(user))

        status_filter = self.request.query_params.get('status')
        if status_filter and status_filter != 'all':
            queryset = queryset.filter(status=status_filter)
        return queryset.prefetch_related('matched_units')

    def perform_create(self, serializer):
        _require_roles(self.request, User.RECIPIENT)
        serializer.save(recipient=self.request.user.recipient_profile)

    @action(detail=True, methods=['post'])
    def match(self, request, pk=None):
        """Run the allocator against the hospital's current inventory"""
        _require_roles(request, *HOSPITAL_ROLES)
        blood_request = self.get_object()
        try:
            result = apply_allocation(
                blood_request,
                staff_user=request.user,
                hospital=_user_hospital(request.user),
            )
        except (AllocationError, InvalidBloodType) as e:
            return _bad_request(e)

        return Response({
            'status': result.status,
            'matched_units': result.matched_unit_ids,
            'available_quantity': result.available_quantity,
            'compatible_types': sorted(result.compatible_types),
        })

    @action(detail=True, methods=['post'])
    def issue(self, request, pk=None):
        _require_roles(request, *HOSPITAL_ROLES)
        blood_request = self.get_object()
        try:
            issued = issue_matched_units(blood_request)
        except AllocationError as e:
            return _bad_request(e)
        return Response({'issued': issued})

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        _require_roles(request, User.RECIPIENT)
        blood_request = self.get_object()
        try:
            cancel_request(blood_request)
        except AllocationError as e:
            return _bad_request(e)
        return Response(self.get_serializer(blood_request).data)

    @action(detail=True, methods=['post'])
    def set_status(self, request, pk=None):
        _require_roles(request, *HOSPITAL_ROLES)
        blood_request = self.get_object()
        serializer = StatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            update_request_status(blood_request, serializer.validated_data['status'])
        except AllocationError as e:
            return _bad_request(e)
        return Response(self.get_serializer(blood_request).data)


# ============================================
# APPOINTMENTS
# ============================================
class AppointmentViewSet(mixins.CreateModelMixin,
                         mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         viewsets.GenericViewSet):
    serializer_class = AppointmentSerializer
    permission_classes = [HasRole]
    allowed_roles = (User.DONOR,) + HOSPITAL_ROLES

    def get_queryset(self):
        user = self.request.user
        queryset = DonationAppointment.objects.select_related('donor', 'donor__user', 'hospital')
        if user.user_type == User.DONOR:
            return queryset.filter(donor__user=user)
        return queryset.filter(hospital=_user_hospital(user))

    def create(self, request, *args, **kwargs):
        _require_roles(request, User.DONOR)
        booking = AppointmentBookingSerializer(data=request.data)
        booking.is_valid(raise_exception=True)
        data = booking.validated_data
        try:
            appointment = book_appointment(
                request.user.donor_profile,
                data['hospital'],
                data['appointment_date'],
                notes=data['notes'],
            )
        except AppointmentError as e:
            return _bad_request(e)
        return Response(self.get_serializer(appointment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        _require_roles(request, User.DONOR)
        appointment = self.get_object()
        try:
            cancel_appointment(appointment)
        except AppointmentError as e:
            return _bad_request(e)
        return Response(self.get_serializer(appointment).data)

    @action(detail=True, methods=['post'])
    def set_status(self, request, pk=None):
        _require_roles(request, *HOSPITAL_ROLES)
        appointment = self.get_object()
        serializer = StatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            set_appointment_status(
                appointment,
                serializer.validated_data['status'],
                request.user,
                new_date=serializer.validated_data.get('appointment_date'),
            )
        except AppointmentError as e:
            return _bad_request(e)
        return Response(self.get_serializer(appointment).data)


# ============================================
# HOSPITALS
# ============================================
class HospitalViewSet(viewsets.ReadOnlyModelViewSet):
    """Verified hospitals; super admins see all and verify/suspend them"""
    serializer_class = HospitalSerializer

    def get_queryset(self):
        queryset = Hospital.objects.select_related('admin_user')
        if self.request.user.user_type != User.SUPER_ADMIN:
            queryset = queryset.filter(status=HospitalStatus.VERIFIED)
        return queryset

    def _change_status(self, request, new_status):
        _require_roles(request, User.SUPER_ADMIN)
        hospital = set_hospital_status(self.get_object(), new_status)
        return Response(self.get_serializer(hospital).data)

    @action(detail=True, methods=['post'])
    def verify(self, request, pk=None):
        return self._change_status(request, HospitalStatus.VERIFIED)

    @action(detail=True, methods=['post'])
    def suspend(self, request, pk=None):
        return self._change_status(request, HospitalStatus.SUSPENDED)


# ============================================
# COMPATIBILITY / STATS
# ============================================
@api_view(['GET'])
def compatibility(request, blood_type):
    """Who can donate to, and receive from, a blood type"""
    try:
        blood_type = validate_blood_type(blood_type)
    except InvalidBloodType as e:
        return _bad_request(e)

    return Response({
        'blood_type': blood_type,
        'can_receive_from': sorted(get_compatible_donors(blood_type)),
        'can_donate_to': sorted(get_compatible_recipients(blood_type)),
    })


@api_view(['GET'])
def dashboard_stats(request):
    """Report for the caller's hospital, or system-wide for super admins"""
    user = request.user
    if user.user_type == User.SUPER_ADMIN:
        report = build_report()
        report['total_hospitals'] = Hospital.objects.count()
        report['verified_hospitals'] = Hospital.objects.filter(status=HospitalStatus.VERIFIED).count()
        report['total_users'] = User.objects.count()
        return Response(report)

    _require_roles(request, *HOSPITAL_ROLES)
    return Response(build_report(_user_hospital(user)))
