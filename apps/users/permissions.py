"""Permission classes based on the campus role."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsAdminRole(permissions.BasePermission):
    """Only administrators (role ``admin`` or Django superusers)."""

    message = "Administrator role required."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_admin()


class IsAdminRoleOrReadOnly(permissions.BasePermission):
    """Anyone may read, administrators may write."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return IsAdminRole().has_permission(request, view)
