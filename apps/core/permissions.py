"""
Permission classes and helpers for store-scoped access control.
"""

from django.core.exceptions import ObjectDoesNotExist

from rest_framework import permissions


def get_user_store(user):
    """Return the store owned by ``user``, or None."""
    if not user or not user.is_authenticated:
        return None
    try:
        return user.store
    except ObjectDoesNotExist:
        return None


class HasStoreAccess(permissions.BasePermission):
    """
    Permission class to ensure users can only access resources from their own store.
    """

    message = "Access denied. User must own a store."

    def has_permission(self, request, view):
        return get_user_store(request.user) is not None

    def has_object_permission(self, request, view, obj):
        # Check if the object belongs to the user's store
        if hasattr(obj, "store_id"):
            return obj.store_id == get_user_store(request.user).id
        return True


class StoreScopedMixin:
    """
    Mixin for generic API views that filters querysets to the user's store
    and stamps new objects with it.
    """

    def get_store(self):
        return get_user_store(self.request.user)

    def get_queryset(self):
        queryset = super().get_queryset()
        return queryset.filter(store=self.get_store())

    def perform_create(self, serializer):
        serializer.save(store=self.get_store())
