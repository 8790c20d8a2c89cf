from rest_framework import serializers

from vacina_backend.patients.models import Patient


class PatientSummarySerializer(serializers.ModelSerializer):
    """Read-only patient fields shown next to an appointment."""

    class Meta:
        model = Patient
        fields = [
            'id',
            'name',
            'cpf',
            'phone',
            'birth_date',
        ]
        read_only_fields = fields
