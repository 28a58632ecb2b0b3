"""
Core views: health check and store settings.
"""

import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from .permissions import HasStoreAccess, get_user_store
from .serializers import StoreSerializer, StoreSettingsSerializer

logger = logging.getLogger(__name__)


@require_http_methods(["GET"])
def health_check(request):
    """
    Health check endpoint for container orchestration.
    Returns 200 OK if the application and its database are reachable.
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError:
        logger.exception("Health check failed: database unreachable")
        return JsonResponse({"status": "unhealthy", "service": "pos-keren"}, status=503)
    return JsonResponse({"status": "healthy", "service": "pos-keren"})


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def store_detail(request):
    """Return the store owned by the requesting user."""
    return Response(StoreSerializer(get_user_store(request.user)).data)


@api_view(["GET", "PATCH"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def store_settings(request):
    """
    Read or update the store settings.

    GET returns the current settings (created with defaults on first access).
    PATCH accepts any subset of the settings fields.
    """
    settings_obj = get_user_store(request.user).get_settings()

    if request.method == "GET":
        return Response(StoreSettingsSerializer(settings_obj).data)

    serializer = StoreSettingsSerializer(settings_obj, data=request.data, partial=True)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    serializer.save()
    logger.info(
        "Store settings updated for store %s: %s",
        settings_obj.store_id,
        sorted(serializer.validated_data),
    )
    return Response(serializer.data)
