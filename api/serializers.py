# api/serializers.py

from rest_framework import serializers

from donors.models import DonationAppointment
from hospitals.models import BloodRequest, Hospital
from inventory.models import BloodUnit


class HospitalSerializer(serializers.ModelSerializer):
    """
    Hospital details; status only changes through the verify/suspend actions
    """
    admin_email = serializers.EmailField(source='admin_user.email', read_only=True, default=None)

    class Meta:
        model = Hospital
        fields = [
            'id', 'name', 'address', 'city', 'state', 'postal_code',
            'phone', 'email', 'website', 'license_number', 'services',
            'status', 'admin_email', 'created_at', 'updated_at',
        ]
        read_only_fields = ['status', 'created_at', 'updated_at']


class BloodUnitSerializer(serializers.ModelSerializer):
    hospital_name = serializers.CharField(source='hospital.name', read_only=True)

    class Meta:
        model = BloodUnit
        fields = [
            'id', 'hospital', 'hospital_name', 'donor', 'blood_type',
            'quantity_units', 'collection_date', 'expiry_date',
            'storage_location', 'batch_number', 'notes', 'status',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['hospital', 'expiry_date', 'batch_number', 'created_at', 'updated_at']

    def validate_quantity_units(self, value):
        if value <= 0:
            raise serializers.ValidationError("Units to add must be positive.")
        return value


class BloodRequestSerializer(serializers.ModelSerializer):
    """
    Blood request with recipient/hospital names and matched unit ids
    """
    recipient_name = serializers.CharField(source='recipient.user.full_name', read_only=True)
    hospital_name = serializers.CharField(source='hospital.name', read_only=True, default=None)
    matched_units = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = BloodRequest
        fields = [
            'id', 'recipient', 'recipient_name', 'hospital', 'hospital_name',
            'assigned_staff', 'blood_type', 'units_needed', 'urgency', 'needed_by',
            'medical_reason', 'doctor_name', 'doctor_contact', 'notes',
            'status', 'matched_units', 'created_at', 'updated_at',
        ]
        read_only_fields = ['recipient', 'assigned_staff', 'status', 'created_at', 'updated_at']


class AppointmentSerializer(serializers.ModelSerializer):
    donor_name = serializers.CharField(source='donor.user.full_name', read_only=True)
    donor_blood_type = serializers.CharField(source='donor.blood_type', read_only=True)
    hospital_name = serializers.CharField(source='hospital.name', read_only=True)

    class Meta:
        model = DonationAppointment
        fields = [
            'id', 'donor', 'donor_name', 'donor_blood_type', 'hospital', 'hospital_name',
            'appointment_date', 'status', 'notes', 'confirmed_by', 'confirmed_at',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class StatusSerializer(serializers.Serializer):
    status = serializers.CharField()
    appointment_date = serializers.DateTimeField(required=False)


class AppointmentBookingSerializer(serializers.Serializer):
    hospital = serializers.PrimaryKeyRelatedField(queryset=Hospital.objects.all())
    appointment_date = serializers.DateTimeField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')
