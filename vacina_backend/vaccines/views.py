from rest_framework import generics

from vacina_backend.vaccines.models import Vaccine
from vacina_backend.vaccines.permissions import VaccinePermission
from vacina_backend.vaccines.serializers import VaccineSerializer


class VaccineListView(generics.ListAPIView):
    """Vaccine catalog ordered by name (check-out vaccine picker)."""

    permission_classes = [VaccinePermission]
    serializer_class = VaccineSerializer

    def get_queryset(self):
        return Vaccine.objects.using('default').order_by('name', 'id')
