from django.shortcuts import get_object_or_404

from rest_framework import generics, status
from rest_framework.response import Response

from vacina_backend.core.models import HealthUnit
from vacina_backend.core.utils import log_patient_action

from .exceptions import (
	AppointmentNotApplicable,
	AppointmentNotFound,
	MissingVaccineSelection,
	OutsideCheckInWindow,
)
from .pagination import ReceptionPagination
from .permissions import ReceptionPermission
from .serializers import (
	AppointmentDetailSerializer,
	AppointmentSerializer,
	CheckOutResultSerializer,
	CheckOutSerializer,
	SuspendSerializer,
)
from .services import listing, reception


class _UnitScopedMixin:
	"""Resolves ``unit_id`` from the URL through the operator's unit assignments."""

	def get_unit(self) -> HealthUnit:
		if not hasattr(self, '_unit'):
			units = HealthUnit.objects.using('default').for_user(self.request.user)
			self._unit = get_object_or_404(units, pk=self.kwargs['unit_id'])
		return self._unit


class AppointmentListView(_UnitScopedMixin, generics.ListAPIView):
	"""
	Today's roster of a unit.

	Query params:
	- filter: search | all | waiting | checked_in | checked_out (default waiting)
	- search: free text; three or more characters force the search filter
	- page, per_page: pagination (per_page clamped to 10..10000)
	- export=1: the whole roster in one page
	"""
	permission_classes = [ReceptionPermission]
	serializer_class = AppointmentSerializer
	pagination_class = ReceptionPagination

	def get_listing(self):
		if not hasattr(self, '_listing'):
			self._listing = listing.list_appointments(
				self.get_unit(),
				filter=self.request.query_params.get('filter'),
				query=self.request.query_params.get('search'),
			)
		return self._listing

	def get_queryset(self):
		return self.get_listing().queryset

	def list(self, request, *args, **kwargs):
		unit = self.get_unit()
		result = self.get_listing()
		response = super().list(request, *args, **kwargs)
		response.data['filter'] = result.filter
		if result.search is not None:
			response.data['search'] = result.search
		log_patient_action(
			request.user,
			'appointment_list',
			meta={'unit_id': unit.pk, 'filter': result.filter, 'export': request.query_params.get('export') in ('1', 'true')},
		)
		return response


class AppointmentDetailView(_UnitScopedMixin, generics.GenericAPIView):
	"""Appointment with the patient's other appointments and dose history."""
	permission_classes = [ReceptionPermission]
	serializer_class = AppointmentDetailSerializer

	def get(self, request, *args, **kwargs):
		unit = self.get_unit()
		try:
			detail = listing.appointment_detail(unit, kwargs['pk'])
		except AppointmentNotFound as e:
			return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)

		log_patient_action(
			request.user,
			'appointment_view',
			detail.appointment.patient_id,
			meta={'appointment_id': detail.appointment.pk, 'unit_id': unit.pk},
		)
		return Response(self.get_serializer(detail).data, status=status.HTTP_200_OK)


class AppointmentCheckInView(_UnitScopedMixin, generics.GenericAPIView):
	"""POST: check a waiting appointment in."""
	permission_classes = [ReceptionPermission]
	serializer_class = AppointmentSerializer

	def post(self, request, *args, **kwargs):
		try:
			appointment = reception.check_in(
				unit=self.get_unit(),
				appointment_id=kwargs['pk'],
				user=request.user,
			)
		except OutsideCheckInWindow as e:
			return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)
		except AppointmentNotFound as e:
			return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)

		return Response(self.get_serializer(appointment).data, status=status.HTTP_200_OK)


class AppointmentCheckOutView(_UnitScopedMixin, generics.GenericAPIView):
	"""POST {vaccine_id}: check out and register the administered dose."""
	permission_classes = [ReceptionPermission]
	serializer_class = CheckOutSerializer

	def post(self, request, *args, **kwargs):
		ser = self.get_serializer(data=request.data)
		ser.is_valid(raise_exception=True)

		try:
			dose = reception.check_out(
				unit=self.get_unit(),
				appointment_id=kwargs['pk'],
				vaccine_id=ser.validated_data.get('vaccine_id'),
				user=request.user,
			)
		except MissingVaccineSelection as e:
			return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)
		except AppointmentNotApplicable as e:
			return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)
		except AppointmentNotFound as e:
			return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)

		out = CheckOutResultSerializer(
			{
				'appointment': dose.appointment,
				'dose': dose,
				'follow_up_appointment': dose.follow_up_appointment,
				'message': reception.check_out_notice(dose),
			},
			context={'request': request},
		).data
		return Response(out, status=status.HTTP_200_OK)


class AppointmentSuspendView(_UnitScopedMixin, generics.GenericAPIView):
	"""POST {suspend_reason}: suspend a waiting appointment."""
	permission_classes = [ReceptionPermission]
	serializer_class = SuspendSerializer

	def post(self, request, *args, **kwargs):
		ser = self.get_serializer(data=request.data)
		ser.is_valid(raise_exception=True)

		try:
			appointment = reception.suspend(
				unit=self.get_unit(),
				appointment_id=kwargs['pk'],
				reason=ser.validated_data.get('suspend_reason'),
				user=request.user,
			)
		except AppointmentNotApplicable as e:
			return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)
		except AppointmentNotFound as e:
			return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)

		return Response(AppointmentSerializer(appointment, context={'request': request}).data, status=status.HTTP_200_OK)


class AppointmentActivateView(_UnitScopedMixin, generics.GenericAPIView):
	"""POST: re-activate a suspended appointment."""
	permission_classes = [ReceptionPermission]
	serializer_class = AppointmentSerializer

	def post(self, request, *args, **kwargs):
		try:
			appointment = reception.activate(
				unit=self.get_unit(),
				appointment_id=kwargs['pk'],
				user=request.user,
			)
		except AppointmentNotFound as e:
			return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)

		return Response(self.get_serializer(appointment).data, status=status.HTTP_200_OK)
