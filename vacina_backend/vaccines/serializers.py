from rest_framework import serializers

from vacina_backend.vaccines.models import Vaccine


class VaccineSerializer(serializers.ModelSerializer):
    """Read-only serializer for the vaccine catalog."""

    class Meta:
        model = Vaccine
        fields = [
            'id',
            'name',
            'regimen_family',
            'doses_required',
            'dose_intervals_days',
        ]
        read_only_fields = fields


class VaccineSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Vaccine
        fields = ['id', 'name']
        read_only_fields = fields
