"""
Appointments App - admin for appointments and doses

Reception state columns are read-only here; they only change through the
reception service.
"""

from django.contrib import admin
from django.utils.html import format_html
from django.utils.safestring import mark_safe

from vacina_backend.core.admin import vacina_admin_site

from .models import Appointment, Dose
from .states import STATE_LOOKUPS, ReceptionState


# ============================================================================
# Filters & Inlines
# ============================================================================
class ReceptionStateFilter(admin.SimpleListFilter):
    """Filter appointments by derived reception state"""
    title = "reception state"
    parameter_name = "state"

    def lookups(self, request, model_admin):
        return [(state.value, state.value.replace("_", " ")) for state in ReceptionState]

    def queryset(self, request, queryset):
        if self.value() in {state.value for state in ReceptionState}:
            return queryset.filter(STATE_LOOKUPS[ReceptionState(self.value())])
        return queryset


class DoseInline(admin.StackedInline):
    """Dose produced by the appointment (read-only)"""
    model = Dose
    fk_name = "appointment"
    extra = 0
    can_delete = False
    fields = ("vaccine", "sequence_number", "follow_up_appointment", "created_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


# ============================================================================
# Appointment Admin
# ============================================================================
@admin.register(Appointment, site=vacina_admin_site)
class AppointmentAdmin(admin.ModelAdmin):
    """Admin for appointments with reception state badge"""

    list_display = ("id", "unit", "patient", "time_display", "state_badge")
    list_filter = (ReceptionStateFilter, "unit", "start")
    search_fields = ("patient__name", "patient__cpf")
    ordering = ("-start",)
    date_hierarchy = "start"
    list_per_page = 50
    list_select_related = ("unit", "patient")
    autocomplete_fields = ("patient",)

    inlines = [DoseInline]

    readonly_fields = (
        "id",
        "active",
        "suspend_reason",
        "checked_in_at",
        "checked_out_at",
        "created_at",
        "updated_at",
    )

    fieldsets = (
        ("Appointment", {
            "fields": ("unit", "patient", "start", "end")
        }),
        ("Reception", {
            "fields": ("active", "suspend_reason", "checked_in_at", "checked_out_at")
        }),
        ("System", {
            "fields": ("id", "created_at", "updated_at"),
            "classes": ("collapse",)
        }),
    )

    def time_display(self, obj):
        if not obj.start:
            return mark_safe('<span style="color: #9AA0A6;">-</span>')
        return format_html(
            '<span style="color: #1A73E8; font-weight: 600;">{}</span> '
            '<span style="color: #5F6368; font-size: 11px;">until {}</span>',
            obj.start.strftime("%d/%m/%Y %H:%M"), obj.end.strftime("%H:%M")
        )
    time_display.short_description = "Time"

    def state_badge(self, obj):
        """Reception state as badge"""
        colors = {
            ReceptionState.WAITING: "#1A73E8",
            ReceptionState.CHECKED_IN: "#FBBC05",
            ReceptionState.CHECKED_OUT: "#34A853",
            ReceptionState.SUSPENDED: "#EA4335",
        }
        state = obj.state
        return format_html(
            '<span class="status-badge" style="background-color: {}; color: white;">{}</span>',
            colors[state], state.value.replace("_", " ")
        )
    state_badge.short_description = "State"


# ============================================================================
# Dose Admin
# ============================================================================
@admin.register(Dose, site=vacina_admin_site)
class DoseAdmin(admin.ModelAdmin):
    """Admin for administered doses (read-only)"""

    list_display = ("id", "patient", "vaccine", "sequence_number", "follow_up_display", "created_at")
    list_filter = ("vaccine", "created_at")
    search_fields = ("patient__name", "patient__cpf", "vaccine__name")
    ordering = ("-created_at", "-id")
    list_select_related = ("patient", "vaccine", "follow_up_appointment")
    list_per_page = 100
    date_hierarchy = "created_at"

    readonly_fields = (
        "id",
        "vaccine",
        "patient",
        "appointment",
        "sequence_number",
        "follow_up_appointment",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def follow_up_display(self, obj):
        if obj.follow_up_appointment is None:
            return mark_safe('<span class="status-badge status-info">regimen complete</span>')
        return obj.follow_up_appointment.start.strftime("%d/%m/%Y")
    follow_up_display.short_description = "Next dose"
