"""
Vaccination reception - custom admin site & core admin classes
"""

from django.contrib import admin
from django.contrib.admin import AdminSite
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.utils.html import format_html
from django.utils.safestring import mark_safe
from .models import AuditLog, HealthUnit, Role, User


# ============================================================================
# Custom AdminSite
# ============================================================================
class VacinaAdminSite(AdminSite):
    """Admin site for the vaccination reception"""
    site_header = "Vaccination reception"
    site_title = "Vaccination admin"
    index_title = "System overview"
    site_url = None


vacina_admin_site = VacinaAdminSite(name='vacinaadmin')


# ============================================================================
# Role Admin
# ============================================================================
@admin.register(Role, site=vacina_admin_site)
class RoleAdmin(admin.ModelAdmin):
    """Admin for roles"""

    list_display = ("name", "label", "user_count_badge")
    search_fields = ("name", "label")
    ordering = ("name",)
    list_per_page = 50

    def user_count_badge(self, obj):
        """Number of users holding this role"""
        count = obj.users.count()

        if count == 0:
            return mark_safe('<span style="color: #9AA0A6; font-style: italic;">0 users</span>')

        color = "#34A853" if count < 5 else "#1A73E8"
        return format_html(
            '<span class="status-badge" style="background-color: {}; color: white;">{} users</span>',
            color, count
        )
    user_count_badge.short_description = "Assigned"


# ============================================================================
# HealthUnit Admin
# ============================================================================
@admin.register(HealthUnit, site=vacina_admin_site)
class HealthUnitAdmin(admin.ModelAdmin):
    """Admin for health units and their check-in window"""

    list_display = ("name", "check_in_window_display", "operator_count", "active")
    list_filter = ("active",)
    search_fields = ("name",)
    ordering = ("name",)
    readonly_fields = ("id", "created_at", "updated_at")

    fieldsets = (
        ("Unit", {
            "fields": ("name", "active")
        }),
        ("Check-in window (minutes, empty = project default)", {
            "fields": ("check_in_opens_minutes_before", "check_in_closes_minutes_after")
        }),
        ("System", {
            "fields": ("id", "created_at", "updated_at"),
            "classes": ("collapse",)
        }),
    )

    def check_in_window_display(self, obj):
        before = int(obj.check_in_opens_before.total_seconds() // 60)
        after = int(obj.check_in_closes_after.total_seconds() // 60)
        return format_html(
            '<span style="font-family: monospace;">-{} min / +{} min</span>',
            before, after
        )
    check_in_window_display.short_description = "Check-in window"

    def operator_count(self, obj):
        return obj.operators.count()
    operator_count.short_description = "Operators"


# ============================================================================
# User Admin
# ============================================================================
@admin.register(User, site=vacina_admin_site)
class UserAdmin(DjangoUserAdmin):
    """Admin for operators with role badge and unit assignment"""

    list_display = (
        "username",
        "email",
        "role_badge",
        "status_badge",
        "last_login",
    )
    list_filter = ("role", "units", "is_staff", "is_active", "is_superuser")
    search_fields = ("username", "email", "first_name", "last_name")
    ordering = ("username",)
    filter_horizontal = ("units", "groups", "user_permissions")
    list_per_page = 50

    fieldsets = (
        ("Authentication", {
            "fields": ("username", "password")
        }),
        ("Personal data", {
            "fields": ("first_name", "last_name", "email", "role")
        }),
        ("Health units", {
            "fields": ("units",)
        }),
        ("Permissions", {
            "fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions"),
            "classes": ("collapse",)
        }),
        ("Timestamps", {
            "fields": ("last_login", "date_joined"),
            "classes": ("collapse",)
        }),
    )

    add_fieldsets = (
        ("New operator", {
            "classes": ("wide",),
            "fields": ("username", "password1", "password2", "email", "role", "units"),
        }),
    )

    readonly_fields = ("last_login", "date_joined")

    def role_badge(self, obj):
        """Role as colored badge"""
        if not obj.role:
            return mark_safe('<span class="status-badge status-neutral">no role</span>')

        role_colors = {
            "admin": "#EA4335",
            "operator": "#1A73E8",
            "nurse": "#34A853",
            "auditor": "#FBBC05",
        }
        color = role_colors.get(obj.role.name, "#5F6368")
        return format_html(
            '<span class="status-badge" style="background-color: {}; color: white;">{}</span>',
            color, obj.role.name
        )
    role_badge.short_description = "Role"

    def status_badge(self, obj):
        if obj.is_superuser:
            return mark_safe('<span class="status-badge" style="background-color: #9334E6; color: white;">superuser</span>')
        elif not obj.is_active:
            return mark_safe('<span class="status-badge status-critical">inactive</span>')
        return mark_safe('<span class="status-badge status-info">active</span>')
    status_badge.short_description = "Status"


# ============================================================================
# AuditLog Admin
# ============================================================================
@admin.register(AuditLog, site=vacina_admin_site)
class AuditLogAdmin(admin.ModelAdmin):
    """Admin for audit logs (read-only)"""

    list_display = (
        "id",
        "timestamp",
        "user",
        "role_name",
        "action_badge",
        "patient_id",
    )
    list_filter = ("action", "role_name", "timestamp")
    search_fields = ("user__username", "action", "patient_id")
    ordering = ("-timestamp", "-id")
    list_per_page = 100
    date_hierarchy = "timestamp"

    readonly_fields = (
        "id",
        "user",
        "role_name",
        "action",
        "patient_id",
        "timestamp",
        "meta",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return request.user.is_superuser

    def action_badge(self, obj):
        """Reception action as badge"""
        action_colors = {
            "appointment_check_in": "#1A73E8",
            "appointment_check_out": "#34A853",
            "appointment_suspend": "#EA4335",
            "appointment_activate": "#FBBC05",
            "appointment_list": "#5F6368",
            "appointment_view": "#5F6368",
        }
        color = action_colors.get(obj.action, "#5F6368")
        return format_html(
            '<span class="status-badge" style="background-color: {}; color: white;">{}</span>',
            color, obj.action
        )
    action_badge.short_description = "Action"
