"""Appointments App URLs - reception roster.

Prefix: /api/
Routes:
    GET  /api/units/<unit_id>/appointments/                 - Today's roster (filter, search, pagination, export)
    GET  /api/units/<unit_id>/appointments/<id>/            - Detail with other appointments and doses
    POST /api/units/<unit_id>/appointments/<id>/check-in/   - Check in
    POST /api/units/<unit_id>/appointments/<id>/check-out/  - Check out {vaccine_id}
    POST /api/units/<unit_id>/appointments/<id>/suspend/    - Suspend {suspend_reason}
    POST /api/units/<unit_id>/appointments/<id>/activate/   - Re-activate
"""

from django.urls import path

from .views import (
	AppointmentActivateView,
	AppointmentCheckInView,
	AppointmentCheckOutView,
	AppointmentDetailView,
	AppointmentListView,
	AppointmentSuspendView,
)

app_name = 'appointments'

urlpatterns = [
	path('units/<int:unit_id>/appointments/', AppointmentListView.as_view(), name='list'),
	path('units/<int:unit_id>/appointments/<int:pk>/', AppointmentDetailView.as_view(), name='detail'),
	path('units/<int:unit_id>/appointments/<int:pk>/check-in/', AppointmentCheckInView.as_view(), name='check_in'),
	path('units/<int:unit_id>/appointments/<int:pk>/check-out/', AppointmentCheckOutView.as_view(), name='check_out'),
	path('units/<int:unit_id>/appointments/<int:pk>/suspend/', AppointmentSuspendView.as_view(), name='suspend'),
	path('units/<int:unit_id>/appointments/<int:pk>/activate/', AppointmentActivateView.as_view(), name='activate'),
]
