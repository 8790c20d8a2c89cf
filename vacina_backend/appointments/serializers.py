from rest_framework import serializers

from vacina_backend.core.serializers import HealthUnitSerializer
from vacina_backend.patients.serializers import PatientSummarySerializer
from vacina_backend.vaccines.serializers import VaccineSummarySerializer

from .models import Appointment, Dose


class AppointmentSerializer(serializers.ModelSerializer):
    patient = PatientSummarySerializer(read_only=True)
    state = serializers.SerializerMethodField()
    check_in_opens_at = serializers.SerializerMethodField()
    check_in_closes_at = serializers.SerializerMethodField()

    class Meta:
        model = Appointment
        fields = [
            'id',
            'unit_id',
            'patient',
            'start',
            'end',
            'state',
            'active',
            'suspend_reason',
            'checked_in_at',
            'checked_out_at',
            'check_in_opens_at',
            'check_in_closes_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_state(self, obj):
        return obj.state.value

    def get_check_in_opens_at(self, obj):
        return serializers.DateTimeField().to_representation(obj.check_in_window.opens_at)

    def get_check_in_closes_at(self, obj):
        return serializers.DateTimeField().to_representation(obj.check_in_window.closes_at)


class AppointmentNestedSerializer(serializers.ModelSerializer):
    state = serializers.SerializerMethodField()
    unit = serializers.SerializerMethodField()

    class Meta:
        model = Appointment
        fields = ['id', 'unit', 'start', 'end', 'state']
        read_only_fields = fields

    def get_state(self, obj):
        return obj.state.value

    def get_unit(self, obj):
        return {'id': obj.unit_id, 'name': obj.unit.name}


class DoseSerializer(serializers.ModelSerializer):
    vaccine = VaccineSummarySerializer(read_only=True)
    appointment = AppointmentNestedSerializer(read_only=True)
    follow_up_appointment = AppointmentNestedSerializer(read_only=True)

    class Meta:
        model = Dose
        fields = [
            'id',
            'patient_id',
            'vaccine',
            'sequence_number',
            'appointment',
            'follow_up_appointment',
            'created_at',
        ]
        read_only_fields = fields


class CheckOutSerializer(serializers.Serializer):
    # Resolution (and the refusal for unknown ids) belongs to the reception service.
    vaccine_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class SuspendSerializer(serializers.Serializer):
    suspend_reason = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=255)


class CheckOutResultSerializer(serializers.Serializer):
    appointment = AppointmentSerializer()
    dose = DoseSerializer()
    follow_up_appointment = AppointmentSerializer(allow_null=True)
    message = serializers.CharField()


class AppointmentDetailSerializer(serializers.Serializer):
    appointment = AppointmentSerializer()
    unit = HealthUnitSerializer(source='appointment.unit')
    other_appointments = AppointmentNestedSerializer(many=True)
    doses = DoseSerializer(many=True)
