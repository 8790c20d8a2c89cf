"""Serializers for the core app.

Contains serializers for User, Role and HealthUnit models.
"""

from django.contrib.auth import authenticate

from rest_framework import serializers
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import RefreshToken

from vacina_backend.core.models import HealthUnit, Role, User


# -----------------------------------------------------------------------------
# Role Serializers
# -----------------------------------------------------------------------------


class RoleSerializer(serializers.ModelSerializer):
    """Read-only serializer for Role model."""

    class Meta:
        model = Role
        fields = ['id', 'name', 'label']
        read_only_fields = fields


# -----------------------------------------------------------------------------
# HealthUnit Serializers
# -----------------------------------------------------------------------------


class HealthUnitSerializer(serializers.ModelSerializer):
    """Read-only serializer for health units with the effective check-in window."""

    check_in_opens_minutes_before = serializers.SerializerMethodField()
    check_in_closes_minutes_after = serializers.SerializerMethodField()

    class Meta:
        model = HealthUnit
        fields = [
            'id',
            'name',
            'active',
            'check_in_opens_minutes_before',
            'check_in_closes_minutes_after',
        ]
        read_only_fields = fields

    def get_check_in_opens_minutes_before(self, obj):
        return int(obj.check_in_opens_before.total_seconds() // 60)

    def get_check_in_closes_minutes_after(self, obj):
        return int(obj.check_in_closes_after.total_seconds() // 60)


# -----------------------------------------------------------------------------
# Authentication Serializers
# -----------------------------------------------------------------------------


class LoginSerializer(serializers.Serializer):
    """Serializer for user login.

    Validates credentials and returns user with role info.
    """

    username = serializers.CharField(required=True)
    password = serializers.CharField(required=True, write_only=True)

    def validate(self, attrs):
        username = attrs.get('username')
        password = attrs.get('password')

        if not username or not password:
            raise serializers.ValidationError('Username and password are required.')

        user = authenticate(username=username, password=password)

        if user is None:
            raise serializers.ValidationError('Invalid credentials.')

        if not user.is_active:
            raise serializers.ValidationError('User account is disabled.')

        attrs['user'] = user
        return attrs


class RefreshSerializer(serializers.Serializer):
    """Serializer for token refresh.

    Validates refresh token and returns new access token.
    """

    refresh = serializers.CharField(required=True)

    def validate_refresh(self, value):
        try:
            RefreshToken(value)
        except TokenError as e:
            raise serializers.ValidationError(f'Invalid or expired refresh token: {str(e)}')
        return value

    def validate(self, attrs):
        token = RefreshToken(attrs['refresh'])
        user = (
            User.objects.using('default')
            .filter(**{api_settings.USER_ID_FIELD: token[api_settings.USER_ID_CLAIM]})
            .select_related('role')
            .first()
        )
        if user is None or not user.is_active:
            raise serializers.ValidationError('User account is disabled.')

        attrs['token'] = token
        attrs['user'] = user
        return attrs


# -----------------------------------------------------------------------------
# Token claims
# -----------------------------------------------------------------------------


def reception_claims(user) -> dict:
    """Role name and ids of the units the user may act on."""
    role = getattr(user, 'role', None)
    units = HealthUnit.objects.using('default').for_user(user).values_list('id', flat=True)
    return {
        'role': role.name if role else None,
        'units': list(units),
    }


def issue_tokens(user) -> RefreshToken:
    """Refresh token for ``user`` carrying the reception claims.

    The access token derived from it inherits the same claims.
    """
    refresh = RefreshToken.for_user(user)
    for claim, value in reception_claims(user).items():
        refresh[claim] = value
    return refresh


class UserMeSerializer(serializers.ModelSerializer):
    """Serializer for the /auth/me/ endpoint.

    Returns current user info with role details and assigned units.
    """

    role = RoleSerializer(read_only=True)
    units = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'is_active',
            'role',
            'units',
        ]
        read_only_fields = fields

    def get_units(self, obj):
        units = HealthUnit.objects.using('default').for_user(obj)
        return HealthUnitSerializer(units, many=True).data
