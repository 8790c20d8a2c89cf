"""
Vaccines App - admin for the vaccine catalog
"""

from django.contrib import admin
from django.utils.html import format_html

from vacina_backend.vaccines.models import Vaccine
from vacina_backend.core.admin import vacina_admin_site


@admin.register(Vaccine, site=vacina_admin_site)
class VaccineAdmin(admin.ModelAdmin):
    """Admin for vaccines and their regimen"""

    list_display = ("name", "regimen_family", "regimen_badge", "created_at")
    search_fields = ("name", "regimen_family")
    ordering = ("name",)
    readonly_fields = ("id", "created_at", "updated_at")

    fieldsets = (
        ("Vaccine", {
            "fields": ("name", "regimen_family")
        }),
        ("Regimen", {
            "fields": ("doses_required", "dose_intervals_days")
        }),
        ("System", {
            "fields": ("id", "created_at", "updated_at"),
            "classes": ("collapse",)
        }),
    )

    def regimen_badge(self, obj):
        if obj.doses_required == 1:
            return format_html('<span class="status-badge status-neutral">{}</span>', "single dose")
        intervals = ", ".join(str(days) for days in obj.dose_intervals_days or [])
        return format_html(
            '<span class="status-badge status-info">{} doses ({} days)</span>',
            obj.doses_required, intervals
        )
    regimen_badge.short_description = "Regimen"
