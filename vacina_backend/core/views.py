"""Core app views.

Contains:
- health: Health check endpoint
- LoginView: JWT token obtain with user, role and unit info
- RefreshView: JWT token refresh
- MeView: Current authenticated user info
- HealthUnitListView: Units the current operator works at
"""

import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse

from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from vacina_backend.core.models import HealthUnit
from vacina_backend.core.permissions import HealthUnitPermission
from vacina_backend.core.serializers import (
    HealthUnitSerializer,
    LoginSerializer,
    RefreshSerializer,
    UserMeSerializer,
    issue_tokens,
    reception_claims,
)

logger = logging.getLogger(__name__)


def health(request):
    """Health check endpoint - no authentication required."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1;')
    except DatabaseError as exc:
        logger.error('Health check failed: %s', exc)
        return JsonResponse({'status': 'error', 'detail': str(exc)}, status=503)

    return JsonResponse({'status': 'ok'})


class LoginView(APIView):
    """Obtain JWT access and refresh tokens.

    POST /api/auth/login/
    Body: {"username": "...", "password": "..."}
    Returns: {"user": {..., "units": [...]}, "access": "...", "refresh": "..."}

    Both tokens carry ``role`` and ``units`` (ids) claims.
    """

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = serializer.validated_data['user']
        refresh = issue_tokens(user)
        logger.info('login user=%s role=%s units=%s', user.pk, refresh['role'], refresh['units'])

        return Response(
            {
                'user': UserMeSerializer(user).data,
                'access': str(refresh.access_token),
                'refresh': str(refresh),
            },
            status=status.HTTP_200_OK,
        )


class RefreshView(APIView):
    """Refresh JWT access token.

    POST /api/auth/refresh/
    Body: {"refresh": "..."}
    Returns: {"access": "..."}
    """

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = RefreshSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        access = serializer.validated_data['token'].access_token
        # Role and unit assignments may have changed since login.
        for claim, value in reception_claims(serializer.validated_data['user']).items():
            access[claim] = value

        return Response(
            {
                'access': str(access),
            },
            status=status.HTTP_200_OK,
        )


class MeView(APIView):
    """Get current authenticated user info.

    GET /api/auth/me/
    Returns: {"id": ..., "username": "...", "role": {...}, "units": [...]}
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        serializer = UserMeSerializer(request.user)
        return Response(serializer.data, status=status.HTTP_200_OK)


class HealthUnitListView(generics.ListAPIView):
    """GET /api/units/ - health units assigned to the current operator."""

    permission_classes = [HealthUnitPermission]
    serializer_class = HealthUnitSerializer

    def get_queryset(self):
        return HealthUnit.objects.using('default').for_user(self.request.user)
