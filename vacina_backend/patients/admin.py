"""
Patients App - admin for the patient registry
"""

from django.contrib import admin

from vacina_backend.patients.models import Patient
from vacina_backend.core.admin import vacina_admin_site


@admin.register(Patient, site=vacina_admin_site)
class PatientAdmin(admin.ModelAdmin):
    """Admin for registry patients"""

    list_display = (
        "id",
        "name",
        "cpf",
        "birth_date",
        "age_display",
        "created_at",
    )
    list_filter = ("created_at",)
    search_fields = ("name", "cpf", "phone")
    ordering = ("name",)
    list_per_page = 50

    readonly_fields = ("id", "created_at", "updated_at")

    fieldsets = (
        ("Patient", {
            "fields": ("name", "cpf", "phone", "birth_date")
        }),
        ("System", {
            "fields": ("id", "created_at", "updated_at"),
            "classes": ("collapse",)
        }),
    )

    def age_display(self, obj):
        """Age in full years"""
        if obj.birth_date is None:
            return "-"
        from datetime import date
        today = date.today()
        return today.year - obj.birth_date.year - (
            (today.month, today.day) < (obj.birth_date.month, obj.birth_date.day)
        )
    age_display.short_description = "Age"
